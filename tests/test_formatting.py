import xml.etree.ElementTree as ET
from datetime import datetime, timedelta, timezone

import pytest

from qcopy.application.formatting import (
    SEPARATOR,
    ContentFormatter,
    escape_xml_attribute,
    format_records,
    iso_timestamp,
)
from qcopy.domain.entities import OutputFormat

from conftest import record


@pytest.mark.parametrize("output_format", list(OutputFormat))
@pytest.mark.parametrize("include_headers", [True, False])
def test_no_records_formats_to_empty_string(output_format, include_headers):
    assert format_records([], output_format, include_headers) == ""


def test_plain_without_headers_is_joined_content():
    records = [record("/a.txt", "first"), record("/b.txt", "second\n")]

    assert format_records(records, OutputFormat.PLAIN, include_headers=False) == "first\n\nsecond\n"


def test_plain_with_headers():
    output = format_records([record("/a.txt", "X")], OutputFormat.PLAIN)

    assert output == (
        f"{SEPARATOR}\n"
        "File: /a.txt\n"
        "Size: 1 bytes\n"
        "Last Modified: 2024-01-02T03:04:05.000Z\n"
        f"{SEPARATOR}\n\n"
        "X"
    )
    assert len(SEPARATOR) == 80


def test_markdown_with_headers():
    output = format_records(
        [record("/src/app.py", "print(1)"), record("/Makefile", "all:")], OutputFormat.MARKDOWN
    )

    sections = output.split("\n\n## ")
    assert sections[0] == (
        "## app.py\n\n"
        "**Path:** `/src/app.py`  \n"
        "**Size:** 8 bytes  \n"
        "**Last Modified:** 2024-01-02T03:04:05.000Z\n\n"
        "```py\nprint(1)\n```"
    )
    assert sections[1].startswith("Makefile\n")
    assert sections[1].endswith("```\nall:\n```")


def test_markdown_does_not_escape_fences():
    output = format_records([record("/n.md", "```js\ncode\n```")], OutputFormat.MARKDOWN)
    assert "```md\n```js\ncode\n```\n```" in output


def test_xml_with_headers_is_well_formed():
    records = [record("/a.txt", "X", size=1), record("/b.md", "Y", size=1)]

    output = format_records(records, OutputFormat.XML)

    assert output.startswith('<?xml version="1.0" encoding="UTF-8"?>\n<files>\n')
    root = ET.fromstring(output.encode("utf-8"))
    files = root.findall("file")
    assert root.tag == "files"
    assert len(files) == 2
    assert [f.get("path") for f in files] == ["/a.txt", "/b.md"]
    assert [f.get("size") for f in files] == ["1", "1"]
    assert files[0].get("lastModified") == "2024-01-02T03:04:05.000Z"
    assert [f.find("content").text for f in files] == ["X", "Y"]
    assert output.count("<![CDATA[") == 2


def test_xml_without_headers_has_bare_file_elements():
    output = format_records([record("/a.txt", "<b>&</b>")], OutputFormat.XML, include_headers=False)

    assert "  <file>\n    <content><![CDATA[<b>&</b>]]></content>\n  </file>" in output
    root = ET.fromstring(output.encode("utf-8"))
    assert root.find("file").attrib == {}
    assert root.find("file/content").text == "<b>&</b>"


def test_xml_path_attribute_is_escaped():
    output = format_records([record("/we & \"they\" <'x'>.txt", "")], OutputFormat.XML)

    assert 'path="/we &amp; &quot;they&quot; &lt;&apos;x&apos;&gt;.txt"' in output
    root = ET.fromstring(output.encode("utf-8"))
    assert root.find("file").get("path") == "/we & \"they\" <'x'>.txt"


def test_cdata_terminator_in_content_is_not_defended():
    # Known boundary: "]]>" inside a file closes the CDATA section early
    output = format_records([record("/a.txt", "a]]>b")], OutputFormat.XML)

    assert "<![CDATA[a]]>b]]></content>" in output
    assert output.count("]]>") == 2


def test_escape_xml_attribute():
    assert escape_xml_attribute("&<>\"'") == "&amp;&lt;&gt;&quot;&apos;"


def test_iso_timestamp_normalizes_to_utc():
    moment = datetime(2024, 6, 1, 12, 0, 0, 123456, tzinfo=timezone(timedelta(hours=2)))
    assert iso_timestamp(moment) == "2024-06-01T10:00:00.123Z"
    assert iso_timestamp(datetime(2024, 6, 1)) == "2024-06-01T00:00:00.000Z"


def test_formatter_accepts_format_values():
    formatter = ContentFormatter(include_headers=False)
    assert formatter.format([record("/a", "A")], "plain") == "A"
    with pytest.raises(ValueError):
        formatter.format([record("/a", "A")], "pdf")
