"""HTTP server exposing the local clipboard.

Example usage:
    limeade server --addr 0.0.0.0:2490
    curl -X POST --data-binary @file.txt http://localhost:2490/clipboard
    curl http://localhost:2490/clipboard
"""

from limeade.server.app import ClipboardServer, run_server, status_for_error
from limeade.server.http import (
    CHUNK_SIZE,
    HttpRequest,
    iter_http_body,
    read_http_request_headers,
    send_http_response,
)

__all__ = [
    "CHUNK_SIZE",
    "ClipboardServer",
    "HttpRequest",
    "iter_http_body",
    "read_http_request_headers",
    "run_server",
    "send_http_response",
    "status_for_error",
]
