from __future__ import annotations

import json
import os
import threading
import time
from typing import Any, Dict, List, Optional, TextIO


class TelemetryLogger:
    """Structured JSONL logger for rover telemetry.

    Thread-safe, append-only logging of dict records, one JSON object per line.
    Usable as a context manager; the file is closed on exit.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        self._lock = threading.Lock()
        self._fp: Optional[TextIO] = open(self.path, "a", encoding="utf-8")

    def __enter__(self) -> "TelemetryLogger":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def log_step(self, record: Dict[str, Any]) -> None:
        """Append a single telemetry record to the JSONL file."""
        if self._fp is None:
            return
        line = json.dumps(record, separators=(",", ":"))
        with self._lock:
            self._fp.write(line + "\n")
            self._fp.flush()

    def log_event(self, kind: str, **fields: Any) -> None:
        """Append a record tagged with ``kind`` and a wall-clock timestamp."""
        record: Dict[str, Any] = {"kind": kind, "time": time.time()}
        record.update(fields)
        self.log_step(record)

    def close(self) -> None:
        if self._fp is not None:
            self._fp.close()
            self._fp = None


def read_records(path: str) -> List[Dict[str, Any]]:
    """Load all records from a JSONL telemetry file, skipping corrupt lines."""
    if not os.path.exists(path):
        return []
    records: List[Dict[str, Any]] = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError:
                continue
    return records
