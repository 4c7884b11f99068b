from __future__ import annotations

import socket
import sys
import threading

from .config import ConfigError, DriverConfig, load_config
from .router import RouteResult, Router
from .state import StateStore


SERVER_BANNER = "UGREEN Camera HTTP Driver"
CONTENT_TYPE_JSON = "application/json"


class ServerBindError(RuntimeError):
    pass


def parse_request_line(data: bytes) -> tuple[str, str]:
    """Return (method, path) from the first line of a raw request.

    Headers and body are ignored. Tokens are separated by ASCII whitespace
    only. Missing tokens come back as empty strings, which no route matches.
    """
    first_line = data.split(b"\n", 1)[0].rstrip(b"\r")
    parts = first_line.split()
    method = parts[0].decode("latin-1") if len(parts) > 0 else ""
    path = parts[1].decode("latin-1") if len(parts) > 1 else ""
    return method, path


def build_http_response(result: RouteResult, content_type: str = CONTENT_TYPE_JSON) -> bytes:
    body = result.body.encode("utf-8")
    head = (
        f"HTTP/1.1 {result.status_line}\r\n"
        f"Content-Type: {content_type}\r\n"
        f"Content-Length: {len(body)}\r\n"
        "Connection: close\r\n"
        "\r\n"
    )
    return head.encode("latin-1") + body


class DriverServer:
    def __init__(self, config: DriverConfig, store: StateStore | None = None):
        self._config: DriverConfig = config
        self._store: StateStore = store if store is not None else StateStore()
        self._router: Router = Router(self._store)
        self._lock: threading.Lock = threading.Lock()
        self._server_socket: socket.socket | None = None
        self._running: bool = False
        self._stopped: bool = False

    @property
    def store(self) -> StateStore:
        return self._store

    @property
    def server_address(self) -> tuple[str, int]:
        if self._server_socket is None:
            raise RuntimeError("server socket not bound")
        host, port = self._server_socket.getsockname()[:2]
        return str(host), int(port)

    def bind(self) -> None:
        with self._lock:
            if self._stopped:
                raise ServerBindError("server already shut down")
            self._bind_locked()

    def _bind_locked(self) -> None:
        if self._server_socket is not None:
            return

        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self._config.http_host, self._config.http_port))
            sock.listen(self._config.backlog)
        except OSError as exc:
            sock.close()
            raise ServerBindError(
                f"bind_failed: {self._config.http_host}:{self._config.http_port}: {exc}"
            ) from exc

        self._server_socket = sock

    def serve_forever(self) -> None:
        # A shutdown() that lands before the loop starts wins; it never rebinds.
        with self._lock:
            if self._stopped:
                return
            self._bind_locked()
            server_socket = self._server_socket
            if server_socket is None:
                raise ServerBindError("server socket not bound")
            self._running = True

        try:
            while self._running:
                try:
                    conn, _addr = server_socket.accept()
                except OSError:
                    if not self._running:
                        break
                    continue

                thread = threading.Thread(
                    target=self._handle_connection,
                    args=(conn,),
                    daemon=True,
                )
                thread.start()
        finally:
            self.shutdown()

    def shutdown(self) -> None:
        with self._lock:
            self._stopped = True
            self._running = False
            sock = self._server_socket
            self._server_socket = None
        if sock is None:
            return

        # close() alone does not wake a thread blocked in accept() on Linux.
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        try:
            sock.close()
        except OSError:
            pass

    def _handle_connection(self, conn: socket.socket) -> None:
        try:
            try:
                data = conn.recv(self._config.recv_buffer_size)
            except OSError:
                return

            if not data:
                return

            method, path = parse_request_line(data)
            result = self._router.dispatch(method, path)

            try:
                conn.sendall(build_http_response(result))
            except OSError:
                return
        finally:
            try:
                conn.close()
            except OSError:
                pass


def main() -> int:
    try:
        config = load_config()
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(f"{SERVER_BANNER} starting on {config.http_host}:{config.http_port}")
    server = DriverServer(config)

    try:
        server.bind()
    except ServerBindError as exc:
        print(
            f"Failed to bind HTTP server on {config.http_host}:{config.http_port} ({exc.__cause__})",
            file=sys.stderr,
        )
        return 1

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.shutdown()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
