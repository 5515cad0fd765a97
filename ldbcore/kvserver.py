"""A key/value HTTP service exposing a database as a WSGI application.

Routes: GET /kvs/get/<key> returns the value, PUT or POST /kvs/put/<key>
stores the request body under the key.
"""

from __future__ import annotations

import re
import threading
from collections.abc import Callable, Iterable
from http import HTTPStatus
from typing import Any

_ROUTE = re.compile(r"^/kvs/(get|put)/([^/]+)$")


class KVService:
    """Serves get and put requests against a database, one at a time."""

    def __init__(self, db: Any) -> None:
        self.db = db
        self._lock = threading.Lock()

    def handle_get(self, key: str) -> tuple[int, bytes]:
        """Return (status, body) for a lookup of key."""
        with self._lock:
            value = self.db.get(key.encode())
        if value is None:
            return HTTPStatus.NOT_FOUND, b""
        return HTTPStatus.OK, bytes(value)

    def handle_put(self, key: str, payload: bytes) -> tuple[int, bytes]:
        """Store payload under key and return (status, body)."""
        with self._lock:
            self.db.put(key.encode(), bytes(payload))
        return HTTPStatus.OK, b""

    def __call__(
        self, environ: dict[str, Any], start_response: Callable[..., Any]
    ) -> Iterable[bytes]:
        method = environ.get("REQUEST_METHOD", "GET").upper()
        match = _ROUTE.match(environ.get("PATH_INFO", ""))
        if match is None:
            status, body = HTTPStatus.NOT_FOUND, b""
        elif match[1] == "get":
            if method == "GET":
                status, body = self.handle_get(match[2])
            else:
                status, body = HTTPStatus.METHOD_NOT_ALLOWED, b""
        elif method in ("PUT", "POST"):
            length = int(environ.get("CONTENT_LENGTH") or 0)
            payload = environ["wsgi.input"].read(length) if length > 0 else b""
            status, body = self.handle_put(match[2], payload)
        else:
            status, body = HTTPStatus.METHOD_NOT_ALLOWED, b""

        status = HTTPStatus(status)
        start_response(
            f"{status.value} {status.phrase}",
            [("Content-Type", "text/plain"), ("Content-Length", str(len(body)))],
        )
        return [body]