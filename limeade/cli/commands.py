"""The copy, paste and server commands.

Each command returns a process exit code. Failures are reported once on
stderr with the failing step attached; nothing is retried.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import AsyncIterator
from contextlib import aclosing
from pathlib import Path
from typing import BinaryIO

from limeade.client import LimeadeClient
from limeade.cli.output import print_error, print_info
from limeade.clipboard import open_clipboard
from limeade.core.address import parse_bind_address
from limeade.core.errors import LimeadeError
from limeade.server.app import run_server
from limeade.server.http import CHUNK_SIZE

logger = logging.getLogger(__name__)


def _create_client(server_url: str, timeout: float) -> LimeadeClient | None:
    try:
        return LimeadeClient(server_url, timeout=timeout)
    except LimeadeError as e:
        print_error(f"Failed to create client: {e.message}")
        return None


async def iter_stream_chunks(stream: BinaryIO, chunk_size: int = CHUNK_SIZE) -> AsyncIterator[bytes]:
    """Read a blocking binary stream chunk by chunk without stalling the loop."""
    read = getattr(stream, "read1", stream.read)
    while True:
        chunk = await asyncio.to_thread(read, chunk_size)
        if not chunk:
            return
        yield chunk


async def cmd_copy(
    server_url: str,
    text: str | None,
    timeout: float,
    stdin: BinaryIO | None = None,
) -> int:
    """Copy literal text, or stream stdin when text is None."""
    client = _create_client(server_url, timeout)
    if client is None:
        return 1

    async with client:
        if text is not None:
            try:
                await client.copy(text)
            except LimeadeError as e:
                print_error(f"Failed to copy text to clipboard: {e.message}")
                return 1
        else:
            source = stdin if stdin is not None else sys.stdin.buffer
            try:
                await client.copy_stream(iter_stream_chunks(source))
            except LimeadeError as e:
                print_error(f"Failed to copy from stdin to clipboard: {e.message}")
                return 1
    return 0


async def cmd_paste(
    server_url: str,
    timeout: float,
    stdout: BinaryIO | None = None,
) -> int:
    """Stream the server clipboard to stdout, flushing after every chunk."""
    client = _create_client(server_url, timeout)
    if client is None:
        return 1

    out = stdout if stdout is not None else sys.stdout.buffer
    async with client:
        try:
            async with aclosing(client.paste_stream()) as chunks:
                async for chunk in chunks:
                    try:
                        out.write(chunk)
                        out.flush()
                    except OSError as e:
                        print_error(f"Failed to write to stdout: {e}")
                        return 1
        except LimeadeError as e:
            print_error(f"Failed to get clipboard content: {e.message}")
            return 1
    return 0


async def cmd_server(addr: str, backend: str, log_file: Path | None = None) -> int:
    """Run the clipboard server until interrupted."""
    try:
        host, port = parse_bind_address(addr)
        clipboard = open_clipboard(backend)
    except LimeadeError as e:
        print_error(f"Server failed: {e.message}")
        return 1

    logger.info("starting server on %s", addr)
    if log_file is not None:
        print_info(f"Server log: {log_file}")

    try:
        await run_server(clipboard, host, port)
    except LimeadeError as e:
        print_error(f"Server failed: {e.message}")
        return 1
    return 0
