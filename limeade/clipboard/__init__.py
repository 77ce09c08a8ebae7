"""Clipboard resource adapters."""

from __future__ import annotations

from limeade.clipboard.base import ClipboardBackend
from limeade.clipboard.memory import MemoryClipboard
from limeade.core.errors import ConfigError

BACKENDS = ("system", "memory")


def open_clipboard(backend: str = "system") -> ClipboardBackend:
    """Create the clipboard adapter named by backend.

    Raises:
        ConfigError: If the backend name is unknown.
        ResourceAccessError: If the system clipboard is unavailable.
    """
    if backend == "memory":
        return MemoryClipboard()
    if backend == "system":
        # Imported lazily so headless servers never touch pyperclip
        from limeade.clipboard.system import SystemClipboard

        return SystemClipboard()
    raise ConfigError(f"unknown clipboard backend {backend!r} (choose from {', '.join(BACKENDS)})")


__all__ = ["BACKENDS", "ClipboardBackend", "MemoryClipboard", "open_clipboard"]
