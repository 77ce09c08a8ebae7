"""OS clipboard access through pyperclip.

pyperclip picks the platform mechanism (pbcopy/pbpaste, xclip, xsel,
wl-clipboard, the Win32 API, ...) and exposes the clipboard as text, so the
payload is carried as UTF-8.
"""

from __future__ import annotations

import logging

import pyperclip

from limeade.clipboard.base import ClipboardBackend
from limeade.core.errors import ResourceAccessError, ResourceBusyError

logger = logging.getLogger(__name__)

ENCODING = "utf-8"


def _translate(operation: str, error: Exception) -> Exception:
    """Map a pyperclip failure onto the clipboard error taxonomy."""
    # Raised when OpenClipboard fails: another process owns the clipboard
    if isinstance(error, pyperclip.PyperclipWindowsException):
        return ResourceBusyError(f"clipboard occupied during {operation}: {error}")
    return ResourceAccessError(f"failed to {operation} clipboard: {error}")


class SystemClipboard(ClipboardBackend):
    """The host's system clipboard.

    Raises:
        ResourceAccessError: At construction if no clipboard mechanism is
            available (e.g. no display or session).
    """

    name = "system"

    def __init__(self) -> None:
        copy_fn, paste_fn = pyperclip.determine_clipboard()
        # pyperclip's "no mechanism" placeholders are falsy
        if not copy_fn or not paste_fn:
            raise ResourceAccessError(
                "failed to create clipboard instance: no copy/paste mechanism "
                "found (install xclip, xsel or wl-clipboard, or run in a desktop session)"
            )
        logger.debug("Using system clipboard via %s", getattr(copy_fn, "__name__", copy_fn))

    def read(self) -> bytes:
        try:
            text = pyperclip.paste()
        except (pyperclip.PyperclipException, OSError) as e:
            raise _translate("read", e) from e
        return (text or "").encode(ENCODING, errors="replace")

    def write(self, data: bytes) -> None:
        try:
            text = data.decode(ENCODING)
        except UnicodeDecodeError as e:
            raise ResourceAccessError(
                f"system clipboard only holds UTF-8 text: {e}"
            ) from e

        try:
            pyperclip.copy(text)
        except (pyperclip.PyperclipException, OSError) as e:
            raise _translate("write", e) from e
