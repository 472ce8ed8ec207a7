import logging

import pytest

from qcopy.application.operations import aggregate
from qcopy.domain.errors import (
    DecodeError,
    ErrorCode,
    NotAFileError,
    NotFoundError,
    ReadPermissionError,
    SizeExceededError,
)
from qcopy.infrastructure import file_reader
from qcopy.infrastructure.file_reader import FileAggregator

from conftest import running_as_root, write


def test_read_one_returns_content_and_metadata(tmp_path):
    path = write(tmp_path / "hello.txt", "héllo\n")

    record = FileAggregator().read_one(str(path))

    assert record.path == str(path)
    assert record.content == "héllo\n"
    assert record.size == len("héllo\n".encode("utf-8"))
    assert record.last_modified.tzinfo is not None
    assert record.name == "hello.txt"
    assert record.extension == "txt"


def test_read_one_errors(tmp_path):
    aggregator = FileAggregator(max_file_size=10)
    binary = tmp_path / "blob.bin"
    binary.write_bytes(b"\xff\xfe\x00\x81")
    large = write(tmp_path / "large.txt", "x" * 11)

    with pytest.raises(NotFoundError):
        aggregator.read_one(str(tmp_path / "missing.txt"))
    with pytest.raises(NotAFileError):
        aggregator.read_one(str(tmp_path))
    with pytest.raises(DecodeError):
        aggregator.read_one(str(binary))
    with pytest.raises(SizeExceededError):
        aggregator.read_one(str(large))


@pytest.mark.skipif(running_as_root, reason="root can read any file")
def test_read_one_permission_denied(tmp_path):
    path = write(tmp_path / "locked.txt", "secret")
    path.chmod(0)
    try:
        with pytest.raises(ReadPermissionError):
            FileAggregator().read_one(str(path))
    finally:
        path.chmod(0o644)


def test_other_encodings(tmp_path):
    path = tmp_path / "latin.txt"
    path.write_bytes("café".encode("latin-1"))

    with pytest.raises(DecodeError):
        FileAggregator().read_one(str(path))
    assert FileAggregator(encoding="latin-1").read_one(str(path)).content == "café"


def test_unknown_encoding_is_rejected():
    with pytest.raises(LookupError):
        FileAggregator(encoding="no-such-codec")


def test_partial_failures_are_collected(tmp_path):
    good_a = write(tmp_path / "a.txt", "A")
    good_b = write(tmp_path / "b.txt", "BB")
    binary = tmp_path / "c.bin"
    binary.write_bytes(b"\x80\x81")
    paths = [str(good_a), str(tmp_path / "gone.txt"), str(binary), str(good_b), str(tmp_path)]

    records, result = aggregate(paths)

    assert [record.path for record in records] == [str(good_a), str(good_b)]
    assert result.records_processed == 2
    assert result.total_size == 3
    assert result.success is False
    assert [(error.path, error.code) for error in result.errors] == [
        (str(tmp_path / "gone.txt"), ErrorCode.NOT_FOUND),
        (str(binary), ErrorCode.DECODE_ERROR),
        (str(tmp_path), ErrorCode.NOT_A_FILE),
    ]


def test_all_readable_is_success(tmp_path):
    paths = [str(write(tmp_path / f"{i}.txt", str(i))) for i in range(3)]

    records, result = aggregate(paths)

    assert len(records) == 3
    assert result.success is True
    assert result.errors == []


@pytest.mark.parametrize("workers", [1, 2, 8])
def test_parallel_reads_keep_input_order(tmp_path, workers):
    # Reverse-sorted names so completion order and input order are unlikely to agree
    paths = [str(write(tmp_path / f"{i:03d}.txt", "x" * (i * 50))) for i in range(40, 0, -1)]

    records, result = FileAggregator(max_workers=workers).read_many(paths)

    assert [record.path for record in records] == paths
    assert result.records_processed == 40


def test_empty_batch():
    records, result = aggregate([])
    assert records == []
    assert result.success is True
    assert result.records_processed == 0


def test_file_removed_between_stat_and_read(tmp_path, monkeypatch):
    path = write(tmp_path / "a.txt", "A")

    def vanish(*args, **kwargs):
        raise FileNotFoundError(2, "No such file or directory")

    monkeypatch.setattr(file_reader, "open", vanish, raising=False)

    with pytest.raises(NotFoundError) as excinfo:
        FileAggregator().read_one(str(path))
    assert "disappeared" in excinfo.value.message


def test_summary_and_quiet_failure_logging(tmp_path, caplog):
    good = write(tmp_path / "a.txt", "AB")

    with caplog.at_level(logging.DEBUG, logger="qcopy"):
        records, result = aggregate([str(good), str(tmp_path / "gone.txt")])

    assert result.get_summary() == "Read 1 files (2 bytes), 1 failed"
    failures = [r for r in caplog.records if "Failed to read" in r.getMessage()]
    assert [r.levelno for r in failures] == [logging.DEBUG]
    assert not any(r.levelno >= logging.ERROR for r in caplog.records)


def test_unexpected_failure_in_worker_is_isolated(tmp_path, monkeypatch):
    paths = [str(write(tmp_path / f"{i}.txt", str(i))) for i in range(3)]
    aggregator = FileAggregator(max_workers=3)
    original = aggregator.read_one

    def flaky(path):
        if path == paths[1]:
            raise RuntimeError("boom")
        return original(path)

    monkeypatch.setattr(aggregator, "read_one", flaky)

    records, result = aggregator.read_many(paths)

    assert [record.path for record in records] == [paths[0], paths[2]]
    assert [(error.path, error.code) for error in result.errors] == [(paths[1], ErrorCode.UNKNOWN_ERROR)]
    assert result.errors[0].message == "boom"
