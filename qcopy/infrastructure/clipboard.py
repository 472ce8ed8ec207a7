"""
Clipboard delivery.
Thin wrapper over pyperclip so callers only deal with ClipboardError.
"""

import logging
from typing import Optional

import pyperclip

from ..domain.errors import ClipboardError


def write_clipboard(text: str, logger: Optional[logging.Logger] = None) -> None:
    """Place text on the system clipboard."""
    logger = logger or logging.getLogger(__name__)
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        # Raised when no clipboard mechanism (xclip, xsel, wl-copy, pbcopy) is available
        raise ClipboardError(f"Failed to copy to clipboard: {e}") from e
    logger.debug("Copied %d characters to clipboard", len(text))
