"""
Environment configuration for the camera driver.

Variables (read once at startup):
- DEVICE_IP: address of the camera on the local network (default 127.0.0.1)
- HTTP_HOST: IPv4 address to bind, 0.0.0.0 for all interfaces (default 0.0.0.0)
- HTTP_PORT: TCP port to bind (default 8080)
"""

from __future__ import annotations

import ipaddress
import os
from collections.abc import Mapping
from dataclasses import dataclass


DEFAULT_DEVICE_IP = "127.0.0.1"
DEFAULT_HTTP_HOST = "0.0.0.0"
DEFAULT_HTTP_PORT = 8080

LISTEN_BACKLOG = 8
RECV_BUFFER_SIZE = 4096


class ConfigError(ValueError):
    pass


@dataclass
class DriverConfig:
    device_ip: str = DEFAULT_DEVICE_IP
    http_host: str = DEFAULT_HTTP_HOST
    http_port: int = DEFAULT_HTTP_PORT
    backlog: int = LISTEN_BACKLOG
    recv_buffer_size: int = RECV_BUFFER_SIZE


def parse_http_port(value: str) -> int:
    raw = value.strip()
    if not raw:
        raise ConfigError("HTTP_PORT is empty")

    try:
        port = int(raw)
    except ValueError as exc:
        raise ConfigError(f"HTTP_PORT must be integer, got {value!r}") from exc
    if port < 0 or port > 65535:
        raise ConfigError(f"HTTP_PORT out of range: {port}")

    return port


def parse_http_host(value: str) -> str:
    raw = value.strip()
    if not raw:
        raise ConfigError("HTTP_HOST is empty")

    try:
        ipaddress.IPv4Address(raw)
    except ValueError as exc:
        raise ConfigError(f"HTTP_HOST must be an IPv4 address, got {value!r}") from exc

    return raw


def load_config(environ: Mapping[str, str] | None = None) -> DriverConfig:
    env = os.environ if environ is None else environ

    return DriverConfig(
        device_ip=env.get("DEVICE_IP", DEFAULT_DEVICE_IP),
        http_host=parse_http_host(env.get("HTTP_HOST", DEFAULT_HTTP_HOST)),
        http_port=parse_http_port(env.get("HTTP_PORT", str(DEFAULT_HTTP_PORT))),
    )
