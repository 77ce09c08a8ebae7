"""Clipboard resource interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class ClipboardBackend(ABC):
    """One logical clipboard holding an opaque byte payload.

    Implementations are not expected to be reentrant; callers serialize
    access. Both operations may raise ResourceBusyError when another local
    actor holds the clipboard, or ResourceAccessError for any other failure.
    """

    name: str = "clipboard"

    @abstractmethod
    def read(self) -> bytes:
        """Return the full clipboard contents."""

    @abstractmethod
    def write(self, data: bytes) -> None:
        """Replace the full clipboard contents with data."""
