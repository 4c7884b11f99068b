"""
Camera driver: HTTP control surface for a network camera.

Modules:
- state: Lock-guarded camera status store
- encoder: Flat JSON object encoding for responses
- router: (method, path) dispatch to camera operations
- config: Environment configuration
- server: TCP listener and per-connection HTTP handling
"""

from .state import (
    CameraState, StateStore,
    STATUS_STOPPED, STATUS_RUNNING, STATUS_ERROR
)
from .encoder import encode_fields
from .router import Router, RouteResult
from .config import DriverConfig, ConfigError, load_config
from .server import (
    DriverServer, ServerBindError,
    parse_request_line, build_http_response, main
)

__all__ = [
    # State
    "CameraState",
    "StateStore",
    "STATUS_STOPPED",
    "STATUS_RUNNING",
    "STATUS_ERROR",
    # Encoder
    "encode_fields",
    # Router
    "Router",
    "RouteResult",
    # Config
    "DriverConfig",
    "ConfigError",
    "load_config",
    # Server
    "DriverServer",
    "ServerBindError",
    "parse_request_line",
    "build_http_response",
    "main",
]
