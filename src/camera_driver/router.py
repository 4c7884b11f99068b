from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .encoder import encode_fields
from .state import StateStore


HTTP_OK = "200 OK"
HTTP_NOT_FOUND = "404 Not Found"

ROUTE_CAMERA_START = ("POST", "/camera/start")
ROUTE_CAMERA_STATUS = ("GET", "/camera/status")

MESSAGE_STARTED = "Camera started"
MESSAGE_START_FAILED = "Failed to start camera"

NOT_FOUND_BODY = encode_fields({"error": "Not Found"})


@dataclass(frozen=True)
class RouteResult:
    status_line: str
    body: str

    @property
    def status_code(self) -> int:
        return int(self.status_line.split(" ", 1)[0])


class Router:
    """Maps an exact (method, path) pair to a camera operation."""

    def __init__(self, store: StateStore):
        self._store: StateStore = store
        self._routes: dict[tuple[str, str], Callable[[], RouteResult]] = {
            ROUTE_CAMERA_START: self._handle_start,
            ROUTE_CAMERA_STATUS: self._handle_status,
        }

    @property
    def routes(self) -> list[tuple[str, str]]:
        return sorted(self._routes)

    def dispatch(self, method: str, path: str) -> RouteResult:
        handler = self._routes.get((method, path))
        if handler is None:
            return RouteResult(HTTP_NOT_FOUND, NOT_FOUND_BODY)
        return handler()

    def _handle_start(self) -> RouteResult:
        ok = self._store.start()
        body = encode_fields(
            {
                "success": "true" if ok else "false",
                "message": MESSAGE_STARTED if ok else MESSAGE_START_FAILED,
            }
        )
        return RouteResult(HTTP_OK, body)

    def _handle_status(self) -> RouteResult:
        snapshot = self._store.status()
        return RouteResult(HTTP_OK, encode_fields(snapshot.to_fields()))
