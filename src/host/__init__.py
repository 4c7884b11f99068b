"""
Host-side modules for the camera driver.

Modules:
- control: HTTP control client and CLI (start, status)
"""

from .control import (
    send_request, start_camera, camera_status, parse_http_response
)

__all__ = [
    # Control
    "send_request",
    "start_camera",
    "camera_status",
    "parse_http_response",
]
