import json
import socket
import argparse
import sys
from typing import Dict, Any, Tuple


def _recv_all(sock: socket.socket) -> bytes:
    """Read bytes from socket until the peer closes the connection."""
    buf = b""
    while True:
        chunk = sock.recv(4096)
        if not chunk:
            return buf
        buf += chunk


def parse_http_response(raw: bytes) -> Tuple[int, Dict[str, str], bytes]:
    """Split a raw HTTP response into (status_code, headers, body).

    Header names are lower-cased. The body is cut to Content-Length when the
    header is present.
    """
    if not raw:
        raise ConnectionError("Socket closed by peer before response")

    head, sep, body = raw.partition(b"\r\n\r\n")
    if not sep:
        raise ValueError(f"Incomplete HTTP response: {raw!r}")

    lines = head.decode("latin-1").split("\r\n")
    status_parts = lines[0].split(" ", 2)
    if len(status_parts) < 2 or not status_parts[0].startswith("HTTP/"):
        raise ValueError(f"Invalid status line: {lines[0]!r}")
    try:
        status_code = int(status_parts[1])
    except ValueError as e:
        raise ValueError(f"Invalid status code: {lines[0]!r}") from e

    headers: Dict[str, str] = {}
    for line in lines[1:]:
        name, _, value = line.partition(":")
        headers[name.strip().lower()] = value.strip()

    if "content-length" in headers:
        length = int(headers["content-length"])
        if len(body) < length:
            raise ValueError(f"Truncated body: expected {length} bytes, got {len(body)}")
        body = body[:length]

    return status_code, headers, body


def send_request(ip: str, port: int, method: str, path: str, timeout: float = 5.0) -> Tuple[int, Dict[str, Any]]:
    """Send a single HTTP request and read the JSON response until the server closes.
    Returns (status_code, parsed JSON body).
    """
    if not method or not path:
        raise ValueError("method and path are required")

    request = (
        f"{method} {path} HTTP/1.1\r\n"
        f"Host: {ip}:{port}\r\n"
        "Content-Length: 0\r\n"
        "Connection: close\r\n"
        "\r\n"
    )

    with socket.create_connection((ip, port), timeout=timeout) as sock:
        sock.settimeout(timeout)
        sock.sendall(request.encode("latin-1"))
        raw = _recv_all(sock)

    status_code, _headers, body = parse_http_response(raw)
    try:
        return status_code, json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValueError(f"Invalid JSON from server: {body!r}") from e


def start_camera(ip: str, port: int, timeout: float = 5.0) -> Tuple[int, Dict[str, Any]]:
    return send_request(ip, port, "POST", "/camera/start", timeout=timeout)


def camera_status(ip: str, port: int, timeout: float = 5.0) -> Tuple[int, Dict[str, Any]]:
    return send_request(ip, port, "GET", "/camera/status", timeout=timeout)


def _print_json_and_exit(status_code: int, resp: Dict[str, Any]) -> None:
    print(json.dumps(resp))
    if status_code == 200:
        sys.exit(0)
    else:
        sys.exit(1)


def _build_cli_and_run() -> None:
    parser = argparse.ArgumentParser(prog="host.control", description="Camera driver control client (HTTP)")
    parser.add_argument("--ip", required=True, help="IP address of the camera driver")
    parser.add_argument("--port", type=int, default=8080, help="HTTP port of the camera driver (default 8080)")
    parser.add_argument("--timeout", type=float, default=5.0, help="Socket timeout in seconds (default 5.0)")

    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("start", help="Start the camera")
    sub.add_parser("status", help="Show camera status and last error")

    args = parser.parse_args()

    ip = args.ip
    port = args.port

    try:
        if args.cmd == "start":
            status_code, resp = start_camera(ip, port, timeout=args.timeout)
        elif args.cmd == "status":
            status_code, resp = camera_status(ip, port, timeout=args.timeout)
        else:
            raise SystemExit("Unknown command")
    except (OSError, ValueError) as e:
        error_resp = {"error": str(e)}
        print(json.dumps(error_resp))
        sys.exit(2)

    _print_json_and_exit(status_code, resp)


if __name__ == "__main__":
    _build_cli_and_run()
