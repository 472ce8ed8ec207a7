import logging
import os
from datetime import datetime, timezone
from pathlib import Path

import pytest
from rich.console import Console

from qcopy.cli import main as cli_main
from qcopy.domain.entities import ContentRecord
from qcopy.infrastructure.logging_setup import LOGGER_NAME

FIXED_TIME = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

running_as_root = hasattr(os, "geteuid") and os.geteuid() == 0


def write(path: Path, text: str = "") -> Path:
    """Create a file and any missing parents."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def record(path: str, content: str, size: int = None) -> ContentRecord:
    return ContentRecord(
        path=path,
        content=content,
        size=len(content.encode("utf-8")) if size is None else size,
        last_modified=FIXED_TIME,
    )


@pytest.fixture
def tree(tmp_path):
    """A small project tree with a hidden file and a hidden directory."""
    root = tmp_path / "project"
    write(root / "README.md", "# readme\n")
    write(root / "src" / "app.py", "print('app')\n")
    write(root / "src" / "util.py", "def util():\n    pass\n")
    write(root / "src" / "nested" / "deep.py", "DEEP = True\n")
    write(root / "src" / ".secret.py", "TOKEN = 1\n")
    write(root / ".git" / "config", "[core]\n")
    return root


@pytest.fixture(autouse=True)
def no_legacy_env(monkeypatch):
    monkeypatch.delenv("FILE_PATHS", raising=False)
    monkeypatch.delenv("QCOPY_CONFIG", raising=False)


@pytest.fixture
def wide_console(monkeypatch):
    """Give the CLI consoles enough width that paths are never wrapped."""
    monkeypatch.setattr(cli_main, "console", Console(width=400, soft_wrap=True))
    monkeypatch.setattr(cli_main, "err_console", Console(width=400, soft_wrap=True, stderr=True))


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo CLI logging setup so caplog sees package records."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
