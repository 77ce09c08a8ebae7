"""Pure asyncio HTTP/1.1 plumbing for the clipboard server.

Requests are parsed in two stages: the request line and headers first, then
the body as an async iterator of bounded chunks. Bodies may be framed by
Content-Length or by chunked transfer encoding, so a client can stream a
payload of unknown length without declaring its size up front.

Every connection is answered with "Connection: close".
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass

from limeade.core.errors import HttpParseError, TransportError

logger = logging.getLogger(__name__)

# Constants
READ_TIMEOUT = 30.0
CHUNK_SIZE = 64 * 1024

# HTTP header limits (DoS protection)
MAX_HEADERS_COUNT = 128  # Max number of headers
MAX_HEADER_NAME_LEN = 1024  # Max header name length (bytes)
MAX_HEADER_VALUE_LEN = 8192  # Max header value length (bytes)
MAX_TOTAL_HEADERS_SIZE = 32 * 1024  # 32KB total header size limit
MAX_REQUEST_LINE_LEN = 8192  # Max request line length
MAX_CHUNK_LINE_LEN = 1024  # Max chunk-size line length

STATUS_MESSAGES = {
    100: "Continue",
    200: "OK",
    400: "Bad Request",
    404: "Not Found",
    405: "Method Not Allowed",
    500: "Internal Server Error",
    503: "Service Unavailable",
}


@dataclass
class HttpRequest:
    """Parsed HTTP request head.

    Attributes:
        method: HTTP method (GET, POST, etc.)
        path: Request path without query string (e.g., "/clipboard")
        headers: Dict of lowercase header names to values
    """

    method: str
    path: str
    headers: dict[str, str]

    @property
    def is_chunked(self) -> bool:
        encoding = self.headers.get("transfer-encoding", "")
        return "chunked" in encoding.lower()

    @property
    def expects_continue(self) -> bool:
        return self.headers.get("expect", "").lower() == "100-continue"


async def _readline(reader: asyncio.StreamReader, what: str) -> bytes:
    try:
        return await asyncio.wait_for(reader.readline(), timeout=READ_TIMEOUT)
    except TimeoutError:
        raise TransportError(f"{what} read timeout") from None
    except (asyncio.LimitOverrunError, ValueError) as e:
        # StreamReader.readline reports overlong lines as ValueError
        raise HttpParseError(f"{what} line too long") from e
    except ConnectionError as e:
        raise TransportError(f"{what} read failed: {e}") from e


async def _readexactly(reader: asyncio.StreamReader, n: int) -> bytes:
    try:
        return await asyncio.wait_for(reader.readexactly(n), timeout=READ_TIMEOUT)
    except TimeoutError:
        raise TransportError("Body read timeout") from None
    except asyncio.IncompleteReadError as e:
        raise TransportError(
            f"Connection closed during body: expected {n} more bytes, got {len(e.partial)}"
        ) from e
    except ConnectionError as e:
        raise TransportError(f"Body read failed: {e}") from e


async def read_http_request_headers(reader: asyncio.StreamReader) -> HttpRequest:
    """Read only the request line and headers (not the body).

    Args:
        reader: The asyncio StreamReader to read from.

    Returns:
        Parsed HttpRequest head.

    Raises:
        HttpParseError: If the request line or headers are malformed.
        TransportError: If the connection stalls or drops.
    """
    request_line = await _readline(reader, "Request")
    if not request_line:
        raise HttpParseError("Empty request")

    # Check request line length (DoS protection)
    if len(request_line) > MAX_REQUEST_LINE_LEN:
        raise HttpParseError(f"Request line too long: {len(request_line)} > {MAX_REQUEST_LINE_LEN}")

    # Parse request line: "POST /clipboard HTTP/1.1\r\n"
    try:
        request_line_str = request_line.decode("ascii").strip()
    except UnicodeDecodeError as e:
        raise HttpParseError(f"Invalid request encoding: {e}") from e
    parts = request_line_str.split(" ")
    if len(parts) != 3:
        raise HttpParseError(f"Invalid request line: {request_line_str}")
    method, target, version = parts
    if not version.startswith("HTTP/1."):
        raise HttpParseError(f"Unsupported HTTP version: {version}")

    headers: dict[str, str] = {}
    total_headers_size = 0

    while True:
        header_line = await _readline(reader, "Header")
        if not header_line or header_line in (b"\r\n", b"\n"):
            break  # End of headers

        # Track total headers size
        total_headers_size += len(header_line)
        if total_headers_size > MAX_TOTAL_HEADERS_SIZE:
            raise HttpParseError(
                f"Total headers size exceeds limit: {total_headers_size} > {MAX_TOTAL_HEADERS_SIZE}"
            )

        try:
            header_str = header_line.decode("latin-1").strip()
        except UnicodeDecodeError as e:
            raise HttpParseError(f"Invalid header encoding: {e}") from e

        if ":" not in header_str:
            continue  # Skip malformed headers

        name, value = header_str.split(":", 1)
        name = name.strip()
        value = value.strip()

        if len(name) > MAX_HEADER_NAME_LEN:
            raise HttpParseError(f"Header name too long: {len(name)} > {MAX_HEADER_NAME_LEN}")
        if len(value) > MAX_HEADER_VALUE_LEN:
            raise HttpParseError(f"Header value too long: {len(value)} > {MAX_HEADER_VALUE_LEN}")
        if len(headers) >= MAX_HEADERS_COUNT:
            raise HttpParseError(f"Too many headers: exceeds limit of {MAX_HEADERS_COUNT}")

        headers[name.lower()] = value

    path = target.split("?", 1)[0]
    return HttpRequest(method=method.upper(), path=path, headers=headers)


def _content_length(request: HttpRequest) -> int:
    content_length_str = request.headers.get("content-length", "0")
    try:
        content_length = int(content_length_str)
    except ValueError as e:
        raise HttpParseError(f"Invalid Content-Length: {content_length_str}") from e
    if content_length < 0:
        raise HttpParseError(f"Invalid Content-Length: {content_length_str}")
    return content_length


async def _iter_sized_body(
    reader: asyncio.StreamReader, length: int
) -> AsyncIterator[bytes]:
    remaining = length
    while remaining > 0:
        chunk = await _readexactly(reader, min(remaining, CHUNK_SIZE))
        remaining -= len(chunk)
        yield chunk


async def _iter_chunked_body(reader: asyncio.StreamReader) -> AsyncIterator[bytes]:
    while True:
        size_line = await _readline(reader, "Chunk size")
        if not size_line:
            raise TransportError("Connection closed during chunked body")
        if len(size_line) > MAX_CHUNK_LINE_LEN:
            raise HttpParseError("Chunk size line too long")

        size_str = size_line.split(b";", 1)[0].strip()
        try:
            size = int(size_str, 16)
        except ValueError:
            raise HttpParseError(f"Invalid chunk size: {size_str!r}") from None
        if size < 0:
            raise HttpParseError(f"Invalid chunk size: {size_str!r}")

        if size == 0:
            # Skip trailers up to the terminating blank line
            total = 0
            while True:
                trailer = await _readline(reader, "Trailer")
                if not trailer:
                    raise TransportError("Connection closed during chunked trailer")
                if trailer in (b"\r\n", b"\n"):
                    return
                total += len(trailer)
                if total > MAX_TOTAL_HEADERS_SIZE:
                    raise HttpParseError("Chunked trailer too large")

        remaining = size
        while remaining > 0:
            piece = await _readexactly(reader, min(remaining, CHUNK_SIZE))
            remaining -= len(piece)
            yield piece

        terminator = await _readline(reader, "Chunk terminator")
        if terminator not in (b"\r\n", b"\n"):
            if not terminator:
                raise TransportError("Connection closed during chunked body")
            raise HttpParseError("Missing CRLF after chunk data")


def iter_http_body(
    reader: asyncio.StreamReader, request: HttpRequest
) -> AsyncIterator[bytes]:
    """Iterate the request body in chunks of at most CHUNK_SIZE bytes.

    Raises:
        HttpParseError: Immediately for an invalid Content-Length; from the
            iterator for malformed chunk framing.
        TransportError: From the iterator if the peer disconnects or stalls
            before the body ends.
    """
    if request.is_chunked:
        return _iter_chunked_body(reader)
    return _iter_sized_body(reader, _content_length(request))


async def send_continue(writer: asyncio.StreamWriter) -> None:
    """Send an interim 100 Continue for clients that wait for one."""
    writer.write(b"HTTP/1.1 100 Continue\r\n\r\n")
    await writer.drain()


async def send_http_response(
    writer: asyncio.StreamWriter,
    status: int,
    body: bytes = b"",
    content_type: str = "text/plain; charset=utf-8",
    extra_headers: dict[str, str] | None = None,
) -> None:
    """Send an HTTP response, writing the body in bounded chunks.

    Args:
        writer: The asyncio StreamWriter to write to.
        status: HTTP status code (e.g., 200, 500, 503).
        body: Response body bytes.
        content_type: Content-Type header value.
        extra_headers: Additional headers to include.
    """
    status_message = STATUS_MESSAGES.get(status, "Unknown")

    headers = [
        f"HTTP/1.1 {status} {status_message}",
        f"Content-Type: {content_type}",
        f"Content-Length: {len(body)}",
        "Connection: close",
    ]
    for name, value in (extra_headers or {}).items():
        headers.append(f"{name}: {value}")
    headers.extend(["", ""])

    writer.write("\r\n".join(headers).encode("latin-1"))
    view = memoryview(body)
    for offset in range(0, len(body), CHUNK_SIZE):
        writer.write(view[offset : offset + CHUNK_SIZE])
        await writer.drain()
    await writer.drain()


async def close_writer(writer: asyncio.StreamWriter) -> None:
    """Close a connection, tolerating peers that already went away."""
    try:
        if not writer.is_closing():
            writer.close()
        await writer.wait_closed()
    except Exception as close_err:
        logger.debug("Connection close failed (already closed?): %s", close_err)
