from __future__ import annotations

from typing import Any, Dict, Optional
import time

from telemetry.logger import TelemetryLogger


class CommunicationModule:
    """Link to mission control.

    Payloads sent while connected are appended to the telemetry log as
    ``downlink`` records; nothing is transmitted while disconnected.
    """

    def __init__(self, telemetry: Optional[TelemetryLogger] = None) -> None:
        self.telemetry = telemetry
        self.is_connected = False

    def connect(self) -> None:
        self.is_connected = True

    def disconnect(self) -> None:
        self.is_connected = False

    def send_data(self, payload: Any) -> bool:
        """Transmit ``payload``; returns False when the link is down."""
        if not self.is_connected:
            return False
        if self.telemetry is not None:
            record: Dict[str, Any] = {
                "kind": "downlink",
                "time": time.time(),
                "payload": payload,
            }
            self.telemetry.log_step(record)
        return True
