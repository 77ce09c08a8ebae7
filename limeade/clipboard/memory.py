"""In-process clipboard for headless servers."""

from __future__ import annotations

from limeade.clipboard.base import ClipboardBackend


class MemoryClipboard(ClipboardBackend):
    """Clipboard kept in server memory; contents vanish with the process."""

    name = "memory"

    def __init__(self, initial: bytes = b"") -> None:
        self._data = bytes(initial)

    def read(self) -> bytes:
        return self._data

    def write(self, data: bytes) -> None:
        self._data = bytes(data)
