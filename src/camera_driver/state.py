from __future__ import annotations

import threading
from dataclasses import dataclass


STATUS_STOPPED = "stopped"
STATUS_RUNNING = "running"
STATUS_ERROR = "error"

CAMERA_STATUSES = {
    STATUS_STOPPED,
    STATUS_RUNNING,
    STATUS_ERROR,
}


@dataclass(frozen=True)
class CameraState:
    """Snapshot of the camera status taken under the store lock."""

    status: str = STATUS_STOPPED
    last_error: str = ""

    def to_fields(self) -> dict[str, str]:
        return {"status": self.status, "error": self.last_error}


class StateStore:
    """
    Process-wide camera state shared by every connection handler.

    Status and last error always change together under one lock, so a reader
    never sees a mix of an old status and a new error message.
    """

    def __init__(self) -> None:
        self._lock: threading.Lock = threading.Lock()
        self._status: str = STATUS_STOPPED
        # Reserved for a device link; nothing writes it yet.
        self._last_error: str = ""

    def start(self) -> bool:
        with self._lock:
            self._status = STATUS_RUNNING
            self._last_error = ""
        return True

    def status(self) -> CameraState:
        with self._lock:
            return CameraState(status=self._status, last_error=self._last_error)
