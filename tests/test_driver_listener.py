from __future__ import annotations

import socket
import sys
import threading
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from camera_driver.config import DriverConfig
from camera_driver.server import DriverServer, ServerBindError
from host import control


def _local_config() -> DriverConfig:
    return DriverConfig(http_host="127.0.0.1", http_port=0)


def test_bind_enables_reuseaddr_and_listens_with_backlog_8(monkeypatch: pytest.MonkeyPatch) -> None:
    listen_calls: list[tuple[socket.socket, tuple[object, ...]]] = []
    original_listen = socket.socket.listen

    def recording_listen(self: socket.socket, *args: int) -> None:
        listen_calls.append((self, args))
        original_listen(self, *args)

    monkeypatch.setattr(socket.socket, "listen", recording_listen)

    server = DriverServer(_local_config())
    server.bind()
    try:
        assert len(listen_calls) == 1
        listening_sock, args = listen_calls[0]
        assert args == (8,)
        assert listening_sock.getsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR) != 0
        assert listening_sock.getsockname()[:2] == server.server_address
    finally:
        server.shutdown()


def test_accept_error_is_skipped_and_next_connection_served(monkeypatch: pytest.MonkeyPatch) -> None:
    accept_calls = [0]
    original_accept = socket.socket.accept

    def failing_once_accept(self: socket.socket) -> tuple[socket.socket, object]:
        accept_calls[0] += 1
        if accept_calls[0] == 1:
            raise OSError("accept failed")
        return original_accept(self)

    monkeypatch.setattr(socket.socket, "accept", failing_once_accept)

    server = DriverServer(_local_config())
    server.bind()
    ip, port = server.server_address
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        status_code, resp = control.camera_status(ip, port, timeout=2.0)
        assert status_code == 200
        assert resp == {"status": "stopped", "error": ""}
        assert accept_calls[0] >= 2
        assert thread.is_alive()
    finally:
        server.shutdown()
        thread.join(timeout=2.0)

    assert not thread.is_alive()


def test_serve_forever_after_shutdown_returns_without_rebinding() -> None:
    server = DriverServer(_local_config())
    server.bind()
    server.shutdown()

    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    thread.join(timeout=1.0)
    assert not thread.is_alive()

    with pytest.raises(RuntimeError):
        _ = server.server_address


def test_bind_after_shutdown_is_refused() -> None:
    server = DriverServer(_local_config())
    server.shutdown()

    with pytest.raises(ServerBindError):
        server.bind()


def test_shutdown_stops_running_loop() -> None:
    server = DriverServer(_local_config())
    server.bind()
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()

    server.shutdown()
    thread.join(timeout=2.0)
    assert not thread.is_alive()
