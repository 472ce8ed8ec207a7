"""
Output formatting for aggregated file contents.
Renders content records as plain text, Markdown or XML.
"""

from datetime import datetime, timezone
from typing import Callable, Dict, Sequence

from ..domain.entities import ContentRecord, OutputFormat

SEPARATOR = "=" * 80
RECORD_JOINER = "\n\n"

_XML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
)


def iso_timestamp(moment: datetime) -> str:
    """UTC ISO-8601 timestamp with millisecond precision, e.g. ``2024-01-02T03:04:05.000Z``."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def escape_xml_attribute(text: str) -> str:
    """Escape the five XML special characters."""
    for char, entity in _XML_ESCAPES:
        text = text.replace(char, entity)
    return text


class ContentFormatter:
    """Renders an ordered list of content records as a single string."""

    def __init__(self, include_headers: bool = True):
        """Initialize with the per-file metadata header switch."""
        self.include_headers = include_headers
        self._renderers: Dict[OutputFormat, Callable[[Sequence[ContentRecord]], str]] = {
            OutputFormat.PLAIN: self.format_plain,
            OutputFormat.MARKDOWN: self.format_markdown,
            OutputFormat.XML: self.format_xml,
        }

    def format(self, records: Sequence[ContentRecord], output_format: OutputFormat) -> str:
        """Render records in the requested format; no records renders as ``""``."""
        if not records:
            return ""
        return self._renderers[OutputFormat(output_format)](records)

    def format_plain(self, records: Sequence[ContentRecord]) -> str:
        return RECORD_JOINER.join(self._plain_section(record) for record in records)

    def format_markdown(self, records: Sequence[ContentRecord]) -> str:
        # Content is not escaped; a ``` inside a file closes the fence early
        return RECORD_JOINER.join(self._markdown_section(record) for record in records)

    def format_xml(self, records: Sequence[ContentRecord]) -> str:
        # CDATA is verbatim; a "]]>" inside a file ends the section early
        files = "\n".join(self._xml_element(record) for record in records)
        return f'<?xml version="1.0" encoding="UTF-8"?>\n<files>\n{files}\n</files>'

    def _plain_section(self, record: ContentRecord) -> str:
        if not self.include_headers:
            return record.content
        return (
            f"{SEPARATOR}\n"
            f"File: {record.path}\n"
            f"Size: {record.size} bytes\n"
            f"Last Modified: {iso_timestamp(record.last_modified)}\n"
            f"{SEPARATOR}\n\n"
            f"{record.content}"
        )

    def _markdown_section(self, record: ContentRecord) -> str:
        if not self.include_headers:
            return record.content
        return (
            f"## {record.name}\n\n"
            f"**Path:** `{record.path}`  \n"
            f"**Size:** {record.size} bytes  \n"
            f"**Last Modified:** {iso_timestamp(record.last_modified)}\n\n"
            f"```{record.extension}\n{record.content}\n```"
        )

    def _xml_element(self, record: ContentRecord) -> str:
        body = f"    <content><![CDATA[{record.content}]]></content>"
        if not self.include_headers:
            return f"  <file>\n{body}\n  </file>"
        attributes = (
            f'path="{escape_xml_attribute(record.path)}" '
            f'size="{record.size}" '
            f'lastModified="{iso_timestamp(record.last_modified)}"'
        )
        return f"  <file {attributes}>\n{body}\n  </file>"


def format_records(
    records: Sequence[ContentRecord],
    output_format: OutputFormat = OutputFormat.PLAIN,
    include_headers: bool = True,
) -> str:
    """Render records as one string in the given format."""
    return ContentFormatter(include_headers=include_headers).format(records, output_format)
