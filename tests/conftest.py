"""Shared pytest fixtures and configuration for pytest."""

from __future__ import annotations

import logging
import sys
import threading
import time
from collections.abc import AsyncIterator, Iterator

import pytest

from limeade.clipboard.base import ClipboardBackend
from limeade.core.logging_setup import LOGGER_NAME
from limeade.server.app import ClipboardServer


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for platform-specific tests."""
    config.addinivalue_line("markers", "windows: mark test to run only on Windows")
    config.addinivalue_line("markers", "unix_only: mark test to run only on Unix")


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Auto-skip tests based on platform markers."""
    skip_windows = pytest.mark.skip(reason="Windows-only test")
    skip_unix = pytest.mark.skip(reason="Unix-only test")

    for item in items:
        if "windows" in item.keywords and sys.platform != "win32":
            item.add_marker(skip_windows)
        if "unix_only" in item.keywords and sys.platform == "win32":
            item.add_marker(skip_unix)


class FakeClipboard(ClipboardBackend):
    """Clipboard double that records calls and can be told to fail.

    Attributes:
        data: Current contents.
        read_error / write_error: Exception raised by the next reads/writes.
        delay: Seconds each call sleeps while "holding" the clipboard.
        max_concurrent: Highest number of calls observed in flight at once.
    """

    name = "fake"

    def __init__(self, data: bytes = b"") -> None:
        self.data = data
        self.read_error: Exception | None = None
        self.write_error: Exception | None = None
        self.delay = 0.0
        self.writes: list[bytes] = []
        self.reads = 0
        self.max_concurrent = 0
        self._in_flight = 0
        self._lock = threading.Lock()

    def _enter(self) -> None:
        with self._lock:
            self._in_flight += 1
            self.max_concurrent = max(self.max_concurrent, self._in_flight)

    def _leave(self) -> None:
        with self._lock:
            self._in_flight -= 1

    def read(self) -> bytes:
        self._enter()
        try:
            if self.delay:
                time.sleep(self.delay)
            self.reads += 1
            if self.read_error is not None:
                raise self.read_error
            return self.data
        finally:
            self._leave()

    def write(self, data: bytes) -> None:
        self._enter()
        try:
            if self.delay:
                time.sleep(self.delay)
            if self.write_error is not None:
                raise self.write_error
            self.writes.append(data)
            self.data = data
        finally:
            self._leave()


@pytest.fixture(autouse=True)
def restore_limeade_logger() -> Iterator[None]:
    """Undo configure_logging so later tests still see records via caplog."""
    limeade_logger = logging.getLogger(LOGGER_NAME)
    saved = (list(limeade_logger.handlers), limeade_logger.level, limeade_logger.propagate)
    yield
    for handler in list(limeade_logger.handlers):
        if handler not in saved[0]:
            handler.close()
    limeade_logger.handlers[:] = saved[0]
    limeade_logger.setLevel(saved[1])
    limeade_logger.propagate = saved[2]


@pytest.fixture
def fake_clipboard() -> FakeClipboard:
    return FakeClipboard()


@pytest.fixture
async def server_url(fake_clipboard: FakeClipboard) -> AsyncIterator[str]:
    """Run a clipboard server on an ephemeral loopback port."""
    server = await ClipboardServer(fake_clipboard).start("127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    try:
        yield f"127.0.0.1:{port}"
    finally:
        server.close()
        await server.wait_closed()
