"""Structured audit logger for JSONL event logging.

Provides append-only structured event logging to JSONL files with
a persistent file handle. Engine functions accept an optional logger;
without one they perform no I/O at all.
"""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from pimdedupe.audit.models import LogEvent
from pimdedupe.utils import get_iso_timestamp

__all__ = ["AuditLogger"]


class AuditLogger:
    """JSONL audit logger with persistent file handle.

    Writes structured log events to a JSONL file (one JSON object per line).
    Events are append-only and flushed after each write.

    Attributes
    ----------
    run_id : str
        Unique run identifier.
    log_path : Path
        Path to JSONL log file.
    current_stage : str | None
        Detector stage in progress, copied onto every event.
    """

    def __init__(self, run_id: str, log_path: Path) -> None:
        """Initialize audit logger and open file handle.

        Parameters
        ----------
        run_id : str
            Unique run identifier.
        log_path : Path
            Path to JSONL log file.
        """
        self.run_id = run_id
        self.log_path = Path(log_path)
        self.current_stage: str | None = None

        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self.log_path.open("a", encoding="utf-8")

    def __enter__(self) -> "AuditLogger":
        """Enter context manager."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit context manager and close file."""
        self.close()

    def close(self) -> None:
        """Flush and close the log file handle."""
        if not self._file.closed:
            self._file.flush()
            self._file.close()

    def event(
        self,
        event_type: str,
        data: dict[str, Any] | None = None,
        level: str = "INFO",
        rid: str | None = None,
    ) -> None:
        """Append one event, tagged with the current stage.

        Parameters
        ----------
        event_type : str
            Event type identifier (e.g., "duplicate_detected").
        data : dict[str, Any] | None, optional
            Event-specific data payload.
        level : str, optional
            Log level ("DEBUG", "INFO", "WARN", "ERROR").
        rid : str | None, optional
            Record id if the event concerns one record.
        """
        log_event = LogEvent(
            ts=get_iso_timestamp(),
            run_id=self.run_id,
            level=level,
            event=event_type,
            data=data or {},
            stage=self.current_stage,
            rid=rid,
        )
        json.dump(asdict(log_event), self._file, ensure_ascii=False, separators=(",", ":"))
        self._file.write("\n")
        self._file.flush()

    def run_started(self, command: list[str], parameters: dict[str, Any]) -> None:
        """Log the command line and the effective duplicate config."""
        self.event("run_started", data={"command": command, "parameters": parameters})

    def run_finished(self, status: str, duration_seconds: float) -> None:
        """Log run_finished with ``status`` "success" or "failed"."""
        self.event("run_finished", data={"status": status, "duration_seconds": duration_seconds})

    def stage_started(self, stage: str, expected_records: int) -> None:
        """Enter *stage*: later events are tagged with it until it finishes."""
        self.current_stage = stage
        self.event("stage_started", data={"expected_records": expected_records})

    def stage_finished(self, stage: str, duration_seconds: float, counters: dict[str, int]) -> None:
        """Log detector counters for *stage* and leave it.

        Parameters
        ----------
        stage : str
            Stage being closed ("deduplicate" or "match_existing").
        duration_seconds : float
            Stage execution time in seconds.
        counters : dict[str, int]
            Detector counters (records in, unique, duplicates, ...).
        """
        self.current_stage = stage
        self.event(
            "stage_finished",
            data={"duration_seconds": duration_seconds, "counters": counters},
        )
        self.current_stage = None

    def duplicate_detected(self, rid: str, matched_rid: str, key: str, reason: str) -> None:
        """Log that *rid* duplicates *matched_rid* under *reason*."""
        self.event(
            "duplicate_detected",
            data={"matched_rid": matched_rid, "key": key, "reason": reason},
            rid=rid,
        )

    def key_collision(self, rid: str, previous_rid: str, key: str, reason: str) -> None:
        """Log a shared key whose pairwise rule said "different" (DEBUG)."""
        self.event(
            "key_collision",
            data={"previous_rid": previous_rid, "key": key, "reason": reason},
            level="DEBUG",
            rid=rid,
        )

    def error(self, exception_class: str, message: str) -> None:
        """Log the exception that aborted a run."""
        self.event(
            "error",
            data={"exception_class": exception_class, "message": message},
            level="ERROR",
        )
