"""Clipboard server: one shared clipboard exposed over HTTP.

Routing:
    - POST /clipboard → replace the clipboard with the request body (copy)
    - GET /clipboard → return the clipboard contents (paste)

Concurrency:
    Connections are handled concurrently, one task each. Every access to the
    clipboard goes through a single asyncio.Lock held only around one adapter
    read or write, never across network I/O. The request body is fully
    received before the lock is taken, so a client that disconnects mid-body
    never causes a partial write.

Status codes:
    200 on success, 503 when the clipboard is busy or the transport failed,
    500 when the clipboard cannot be accessed, 400/404/405 for bad requests.
"""

from __future__ import annotations

import asyncio
import logging

from limeade.clipboard.base import ClipboardBackend
from limeade.core.address import CLIPBOARD_PATH, DEFAULT_PORT
from limeade.core.errors import (
    HttpParseError,
    LimeadeError,
    ResourceAccessError,
    ResourceBusyError,
    TransportError,
)
from limeade.server.http import (
    HttpRequest,
    close_writer,
    iter_http_body,
    read_http_request_headers,
    send_continue,
    send_http_response,
)

logger = logging.getLogger(__name__)

ALLOWED_METHODS = "GET, POST"
PAYLOAD_CONTENT_TYPE = "application/octet-stream"


def status_for_error(error: LimeadeError) -> int:
    """Map an error from the taxonomy onto an HTTP status code.

    Order matters: HttpParseError is a TransportError.
    """
    if isinstance(error, ResourceBusyError):
        return 503
    if isinstance(error, ResourceAccessError):
        return 500
    if isinstance(error, HttpParseError):
        return 400
    if isinstance(error, TransportError):
        return 503
    return 500


class ClipboardServer:
    """Serializes access to one clipboard and serves it over HTTP.

    The clipboard adapter is owned by the server for its whole lifetime.
    Adapter calls run in a worker thread so a slow platform clipboard never
    stalls other connections.
    """

    def __init__(self, clipboard: ClipboardBackend) -> None:
        self._clipboard = clipboard
        self._gate = asyncio.Lock()

    @property
    def clipboard(self) -> ClipboardBackend:
        return self._clipboard

    async def copy(self, payload: bytes) -> None:
        """Replace the clipboard contents with payload."""
        async with self._gate:
            await asyncio.to_thread(self._clipboard.write, payload)
        logger.debug("Clipboard written: %d bytes", len(payload))

    async def paste(self) -> bytes:
        """Return the current clipboard contents."""
        async with self._gate:
            data = await asyncio.to_thread(self._clipboard.read)
        logger.debug("Clipboard read: %d bytes", len(data))
        return data

    async def _receive_body(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter, request: HttpRequest
    ) -> bytes:
        if request.expects_continue:
            await send_continue(writer)
        chunks: list[bytes] = []
        async for chunk in iter_http_body(reader, request):
            chunks.append(chunk)
        return b"".join(chunks)

    async def _handle_copy(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter, request: HttpRequest
    ) -> None:
        # The adapter only takes a complete buffer, so assemble it first
        payload = await self._receive_body(reader, writer, request)
        await self.copy(payload)
        await send_http_response(writer, 200)

    async def _handle_paste(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter, request: HttpRequest
    ) -> None:
        async for _ in iter_http_body(reader, request):
            pass  # GET bodies are ignored
        data = await self.paste()
        await send_http_response(writer, 200, data, content_type=PAYLOAD_CONTENT_TYPE)

    async def _send_error(
        self,
        writer: asyncio.StreamWriter,
        status: int,
        message: str,
        extra_headers: dict[str, str] | None = None,
    ) -> None:
        try:
            await send_http_response(
                writer, status, message.encode("utf-8"), extra_headers=extra_headers
            )
        except Exception as send_err:
            logger.debug("Failed to send error response (client disconnected?): %s", send_err)

    async def handle_connection(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> None:
        """Handle a single HTTP connection.

        Layers:
            1. Parse request line and headers
            2. Route by path and method
            3. Run copy or paste, mapping failures to a status code
            4. Send response and close
        """
        request: HttpRequest | None = None
        try:
            # Layer 1: Parse request head
            request = await read_http_request_headers(reader)

            # Layer 2: Route
            if request.path != CLIPBOARD_PATH:
                await self._send_error(writer, 404, f"Not found. Use {CLIPBOARD_PATH}.")
                return
            if request.method not in ("GET", "POST"):
                await self._send_error(
                    writer,
                    405,
                    "Method not allowed. Use GET or POST.",
                    extra_headers={"Allow": ALLOWED_METHODS},
                )
                return

            # Layer 3: Execute
            if request.method == "POST":
                await self._handle_copy(reader, writer, request)
            else:
                await self._handle_paste(reader, writer, request)
            logger.debug("%s %s -> 200", request.method, request.path)

        except LimeadeError as e:
            status = status_for_error(e)
            label = f"{request.method} {request.path}" if request else "request"
            if isinstance(e, ResourceBusyError):
                logger.warning("%s failed, clipboard busy: %s", label, e.message)
            elif status == 500:
                logger.error("%s failed: %s", label, e.message)
            else:
                logger.info("%s failed (%d): %s", label, status, e.message)
            await self._send_error(writer, status, e.message)

        except Exception as e:
            # Catch-all for any unexpected errors
            logger.error("Unexpected error handling connection: %s", e, exc_info=True)
            await self._send_error(writer, 500, f"Server error: {type(e).__name__}")

        finally:
            await close_writer(writer)

    async def start(self, host: str | None = None, port: int = DEFAULT_PORT) -> asyncio.Server:
        """Bind the listening socket. host=None listens on all interfaces."""
        return await asyncio.start_server(self.handle_connection, host=host, port=port)


async def run_server(
    clipboard: ClipboardBackend,
    host: str | None = None,
    port: int = DEFAULT_PORT,
    started_event: asyncio.Event | None = None,
) -> None:
    """Run the clipboard server until cancelled.

    Args:
        clipboard: The clipboard adapter to serve.
        host: Host to bind to. None binds all interfaces.
        port: Port to listen on. Defaults to 2490.
        started_event: Optional event set once the socket is bound.

    Raises:
        TransportError: If the address cannot be bound.
    """
    clipboard_server = ClipboardServer(clipboard)
    try:
        server = await clipboard_server.start(host, port)
    except OSError as e:
        raise TransportError(f"Network error: {e}") from e

    if started_event:
        started_event.set()

    for sock in server.sockets:
        addr = sock.getsockname()
        logger.info(
            "Clipboard server listening on %s:%s (%s backend)",
            addr[0],
            addr[1],
            clipboard_server.clipboard.name,
        )

    async with server:
        try:
            await server.serve_forever()
        finally:
            logger.info("Clipboard server stopped")
