"""Async HTTP client for limeade clipboard servers."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterable, AsyncIterator, Iterable
from contextlib import asynccontextmanager
from typing import Any

import httpx

from limeade import __version__
from limeade.core.address import DEFAULT_SERVER, Endpoint
from limeade.core.errors import AddressError, ServerStatusError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
USER_AGENT = f"limeade/{__version__}"
PAYLOAD_CONTENT_TYPE = "application/octet-stream"

ChunkSource = AsyncIterable[bytes | str] | Iterable[bytes | str]


class _SourceFailure(Exception):
    """Wraps an exception raised by a copy_stream source."""

    def __init__(self, error: BaseException) -> None:
        self.error = error
        super().__init__(str(error))


def _to_bytes(chunk: object) -> bytes:
    if isinstance(chunk, str):
        return chunk.encode("utf-8")
    if isinstance(chunk, (bytes, bytearray, memoryview)):
        return bytes(chunk)
    # bytes(int) would silently produce a zero-filled buffer
    raise TypeError(f"copy_stream chunks must be bytes or str, got {type(chunk).__name__}")


async def _iter_source(source: ChunkSource) -> AsyncIterator[bytes]:
    """Adapt a sync or async chunk source into an async byte iterator."""
    try:
        if isinstance(source, (bytes, bytearray, memoryview, str)):
            raise TypeError(
                f"copy_stream takes an iterable of chunks, not {type(source).__name__}; "
                "use copy() for a single value"
            )
        if isinstance(source, AsyncIterable):
            async for chunk in source:
                yield _to_bytes(chunk)
        else:
            for chunk in source:
                yield _to_bytes(chunk)
    except Exception as e:
        raise _SourceFailure(e) from e


class LimeadeClient:
    """Async HTTP client for a limeade clipboard server.

    Usage:
        async with LimeadeClient("myhost:2490") as client:
            await client.copy("hello")
            data = await client.paste()

        # Streaming in both directions:
        async with LimeadeClient() as client:
            await client.copy_stream(chunks)
            async for chunk in client.paste_stream():
                sys.stdout.buffer.write(chunk)

    Outside ``async with`` each call opens and closes its own connection pool.
    """

    def __init__(
        self,
        address: str = DEFAULT_SERVER,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            address: Server address; "host:port" is treated as http://host:port.
            timeout: Overall time limit in seconds for each operation.
            transport: Optional httpx transport (used for testing).

        Raises:
            AddressError: If the address is malformed. No connection is made.
        """
        self._endpoint = Endpoint.parse(address)
        try:
            self._url = httpx.URL(self._endpoint.clipboard_url)
        except httpx.InvalidURL as e:
            raise AddressError(address, str(e)) from e

        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        logger.debug("LimeadeClient initialized: url=%s, timeout=%s", self._url, timeout)

    @property
    def endpoint(self) -> Endpoint:
        return self._endpoint

    @property
    def url(self) -> str:
        return str(self._url)

    def _new_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout),
            headers={"User-Agent": USER_AGENT},
            transport=self._transport,
        )

    async def __aenter__(self) -> LimeadeClient:
        """Enter async context, create httpx client."""
        self._client = self._new_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context, close httpx client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with self._new_client() as client:
            yield client

    async def _check(self, response: httpx.Response) -> None:
        """Raise ServerStatusError for any non-200 response."""
        if response.status_code == 200:
            return
        body = await response.aread()
        detail = body.decode("utf-8", errors="replace")[:500]
        logger.warning("Server returned %d for %s: %s", response.status_code, self._url, detail)
        raise ServerStatusError(response.status_code, detail)

    def _transport_error(self, operation: str, error: Exception) -> TransportError:
        if isinstance(error, (httpx.TimeoutException, TimeoutError)):
            logger.warning("%s timed out after %ss: %s", operation, self._timeout, self._url)
            return TransportError(f"{operation} timed out after {self._timeout:g}s")
        if isinstance(error, httpx.ConnectError):
            logger.warning("Connection failed to %s: %s", self._url, error)
            return TransportError(f"Connection failed: {error}")
        logger.warning("%s failed: %s", operation, error)
        return TransportError(f"{operation} failed: {error}")

    async def _post(self, content: bytes | AsyncIterator[bytes], operation: str) -> None:
        try:
            async with asyncio.timeout(self._timeout):
                async with self._session() as client:
                    response = await client.post(
                        self._url,
                        content=content,
                        headers={"Content-Type": PAYLOAD_CONTENT_TYPE},
                    )
                    await self._check(response)
        except _SourceFailure as e:
            logger.warning("%s source failed: %s", operation, e.error)
            raise TransportError(f"{operation} source failed: {e.error}") from e.error
        except (httpx.HTTPError, TimeoutError) as e:
            raise self._transport_error(operation, e) from e

    async def copy(self, text: str | bytes) -> None:
        """Replace the server clipboard with text, sent as one request body.

        Raises:
            TransportError: On connection failure, timeout or non-200 reply.
        """
        payload = text.encode("utf-8") if isinstance(text, str) else bytes(text)
        logger.debug("copy: %d bytes", len(payload))
        await self._post(payload, "copy")

    async def copy_stream(self, source: ChunkSource) -> None:
        """Replace the server clipboard with chunks drawn from source.

        The body is sent with chunked transfer encoding as chunks are
        produced, so the payload is never held in memory as a whole. An
        exception raised by source aborts the request. Cancelling the calling
        task aborts the in-flight request.

        Raises:
            TransportError: On source failure, connection failure, timeout or
                non-200 reply.
        """
        logger.debug("copy_stream: starting")
        await self._post(_iter_source(source), "copy")

    async def paste(self) -> bytes:
        """Return the full server clipboard contents.

        Raises:
            TransportError: On connection failure, timeout or non-200 reply.
        """
        try:
            async with asyncio.timeout(self._timeout):
                async with self._session() as client:
                    response = await client.get(self._url)
                    await self._check(response)
                    data = response.content
        except (httpx.HTTPError, TimeoutError) as e:
            raise self._transport_error("paste", e) from e
        logger.debug("paste: %d bytes", len(data))
        return data

    async def paste_stream(self) -> AsyncIterator[bytes]:
        """Iterate the server clipboard contents chunk by chunk.

        The request is sent when iteration starts. Exhausting the iterator
        yields the whole payload; a failure along the way raises
        TransportError from the iterator. Stopping early is allowed: closing
        the iterator (e.g. with contextlib.aclosing) releases the connection.

        Yields:
            Non-empty byte chunks in order.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._timeout

        try:
            async with self._session() as client:
                async with asyncio.timeout_at(deadline):
                    request = client.build_request("GET", self._url)
                    response = await client.send(request, stream=True)
                try:
                    async with asyncio.timeout_at(deadline):
                        await self._check(response)
                    chunks = response.aiter_bytes()
                    while True:
                        # Bound each read, not the caller's processing time
                        async with asyncio.timeout_at(deadline):
                            try:
                                chunk = await anext(chunks)
                            except StopAsyncIteration:
                                break
                        if chunk:
                            yield chunk
                finally:
                    await response.aclose()
        except (httpx.HTTPError, TimeoutError) as e:
            raise self._transport_error("paste", e) from e
