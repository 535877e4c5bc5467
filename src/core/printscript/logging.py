from __future__ import annotations

import json
import threading
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any


@dataclass(slots=True)
class StageTimings:
    sanitize_ms: float = 0.0
    transform_ms: float = 0.0
    compose_ms: float = 0.0
    render_ms: float = 0.0


@dataclass(slots=True)
class RequestLogEntry:
    request_id: str
    strategy: str
    status: str
    stage: str
    error_code: str | None
    size_bytes: int
    output_bytes: int
    timings: StageTimings = field(default_factory=StageTimings)

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["timings"] = asdict(self.timings)
        return payload


class RequestLogger:
    """Append-only JSONL audit trail, one line per conversion request."""

    def __init__(self, log_file: Path | None) -> None:
        self._log_file = log_file
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self._log_file is not None

    def append(self, entry: RequestLogEntry) -> None:
        if self._log_file is None:
            return
        line = json.dumps(entry.to_dict(), ensure_ascii=False)
        with self._lock:
            self._log_file.parent.mkdir(parents=True, exist_ok=True)
            with self._log_file.open("a", encoding="utf-8") as handle:
                handle.write(line + "\n")


__all__ = ["RequestLogEntry", "RequestLogger", "StageTimings"]
