"""Public API for pimdedupe.

This module provides the main public API, enabling:
- Deduplicating contacts, tasks and calendar events with per-call configs
- Matching an incoming batch against an existing collection
- Loading record files (JSON array or JSONL) and exporting JSONL
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from functools import cache
from importlib import resources
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import best_match

from pimdedupe.audit.logger import AuditLogger
from pimdedupe.engine.config import (
    DuplicateDetectionConfig,
    EventDuplicateConfig,
    TaskDuplicateConfig,
)
from pimdedupe.engine.detector import (
    DedupResult,
    deduplicate,
    find_duplicates_against_existing,
    get_duplicate_ids,
)
from pimdedupe.engine.policies import RECORD_TYPES, ContactPolicy, EventPolicy, TaskPolicy
from pimdedupe.models import ContactRecord, EventRecord, Record, TaskRecord

__all__ = [
    "deduplicate_contacts",
    "find_contact_duplicates",
    "get_duplicate_contact_ids",
    "deduplicate_tasks",
    "find_task_duplicates",
    "get_duplicate_task_ids",
    "deduplicate_events",
    "find_event_duplicates",
    "get_duplicate_event_ids",
    "load_records",
    "load_contacts",
    "load_tasks",
    "load_events",
    "write_jsonl",
    "RecordLoadError",
]

ContactConfigLike = DuplicateDetectionConfig | Mapping[str, Any] | None
TaskConfigLike = TaskDuplicateConfig | Mapping[str, Any] | None
EventConfigLike = EventDuplicateConfig | Mapping[str, Any] | None

_SCHEMA_FILES = {
    "contact": "contact_record.schema.json",
    "task": "task_record.schema.json",
    "event": "event_record.schema.json",
}


class RecordLoadError(Exception):
    """Raised when a record file cannot be loaded."""

    def __init__(
        self,
        message: str,
        file: str | None = None,
        line: int | None = None,
    ) -> None:
        """Initialize load error.

        Parameters
        ----------
        message : str
            Error message.
        file : str | None, optional
            File where error occurred.
        line : int | None, optional
            1-based line (JSONL) or item (JSON array) number.
        """
        super().__init__(message)
        self.file = file
        self.line = line


# ---------------------------------------------------------------------------
# Contacts
# ---------------------------------------------------------------------------


def deduplicate_contacts(
    contacts: Sequence[ContactRecord],
    config: ContactConfigLike = None,
    *,
    logger: AuditLogger | None = None,
) -> DedupResult[ContactRecord]:
    """Split contacts into unique and duplicate, keeping first occurrences.

    Parameters
    ----------
    contacts : Sequence[ContactRecord]
        Contacts in collection order.
    config : DuplicateDetectionConfig | Mapping[str, Any] | None, optional
        Config or overrides merged onto the defaults
        (uid, name and email on; phone off).
    logger : AuditLogger | None, optional
        Audit logger for observability events.

    Returns
    -------
    DedupResult[ContactRecord]
        Partition of *contacts*.

    Examples
    --------
        >>> from pimdedupe import ContactRecord, EmailEntry, deduplicate_contacts
        >>> a = ContactRecord("1", "Jane Doe", emails=(EmailEntry("jane@x.com"),))
        >>> b = ContactRecord("2", "jane doe", emails=(EmailEntry("JANE@X.COM"),))
        >>> deduplicate_contacts([a, b]).duplicate_ids
        ['2']
    """
    return deduplicate(contacts, ContactPolicy(config), logger=logger)


def find_contact_duplicates(
    new_contacts: Sequence[ContactRecord],
    existing_contacts: Sequence[ContactRecord],
    config: ContactConfigLike = None,
    *,
    logger: AuditLogger | None = None,
) -> DedupResult[ContactRecord]:
    """Classify new contacts against an existing address book."""
    return find_duplicates_against_existing(
        new_contacts, existing_contacts, ContactPolicy(config), logger=logger
    )


def get_duplicate_contact_ids(
    contacts: Sequence[ContactRecord],
    config: ContactConfigLike = None,
) -> list[str]:
    """Ids of duplicate contacts (first occurrences kept), in order."""
    return get_duplicate_ids(contacts, ContactPolicy(config))


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


def deduplicate_tasks(
    tasks: Sequence[TaskRecord],
    config: TaskConfigLike = None,
    *,
    logger: AuditLogger | None = None,
) -> DedupResult[TaskRecord]:
    """Split tasks into unique and duplicate, keeping first occurrences.

    Parameters
    ----------
    tasks : Sequence[TaskRecord]
        Tasks in list order.
    config : TaskDuplicateConfig | Mapping[str, Any] | None, optional
        Config or overrides (uid and title on, 1 minute tolerance).
    logger : AuditLogger | None, optional
        Audit logger for observability events.

    Returns
    -------
    DedupResult[TaskRecord]
        Partition of *tasks*.
    """
    return deduplicate(tasks, TaskPolicy(config), logger=logger)


def find_task_duplicates(
    new_tasks: Sequence[TaskRecord],
    existing_tasks: Sequence[TaskRecord],
    config: TaskConfigLike = None,
    *,
    logger: AuditLogger | None = None,
) -> DedupResult[TaskRecord]:
    """Classify new tasks against an existing task list."""
    return find_duplicates_against_existing(
        new_tasks, existing_tasks, TaskPolicy(config), logger=logger
    )


def get_duplicate_task_ids(
    tasks: Sequence[TaskRecord],
    config: TaskConfigLike = None,
) -> list[str]:
    """Ids of duplicate tasks (first occurrences kept), in order."""
    return get_duplicate_ids(tasks, TaskPolicy(config))


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


def deduplicate_events(
    events: Sequence[EventRecord],
    config: EventConfigLike = None,
    *,
    logger: AuditLogger | None = None,
) -> DedupResult[EventRecord]:
    """Split calendar events into unique and duplicate, keeping first occurrences.

    Parameters
    ----------
    events : Sequence[EventRecord]
        Events in calendar order.
    config : EventDuplicateConfig | Mapping[str, Any] | None, optional
        Config or overrides (uid and title on, location off,
        1 minute tolerance on both start and end).
    logger : AuditLogger | None, optional
        Audit logger for observability events.

    Returns
    -------
    DedupResult[EventRecord]
        Partition of *events*.
    """
    return deduplicate(events, EventPolicy(config), logger=logger)


def find_event_duplicates(
    new_events: Sequence[EventRecord],
    existing_events: Sequence[EventRecord],
    config: EventConfigLike = None,
    *,
    logger: AuditLogger | None = None,
) -> DedupResult[EventRecord]:
    """Classify new events (e.g. an ICS import) against an existing calendar."""
    return find_duplicates_against_existing(
        new_events, existing_events, EventPolicy(config), logger=logger
    )


def get_duplicate_event_ids(
    events: Sequence[EventRecord],
    config: EventConfigLike = None,
) -> list[str]:
    """Ids of duplicate events (first occurrences kept), in order."""
    return get_duplicate_ids(events, EventPolicy(config))


# ---------------------------------------------------------------------------
# Record files
# ---------------------------------------------------------------------------


@cache
def _validator(kind: str) -> Draft202012Validator:
    schema_text = resources.files("pimdedupe.schemas").joinpath(_SCHEMA_FILES[kind]).read_text()
    return Draft202012Validator(json.loads(schema_text))


def load_records(path: str | Path, kind: str) -> list[Any]:
    """Load records of *kind* from a JSON array or JSONL file.

    Every object is validated against the bundled JSON Schema for
    *kind* before being converted.

    Parameters
    ----------
    path : str | Path
        File to read. A file whose first non-blank character is ``[``
        is read as a JSON array, anything else as JSONL.
    kind : str
        ``"contact"``, ``"task"`` or ``"event"``.

    Returns
    -------
    list[ContactRecord] | list[TaskRecord] | list[EventRecord]
        Records in file order.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If *kind* is unknown.
    RecordLoadError
        If the file is not valid JSON or an object fails validation.
    """
    if kind not in RECORD_TYPES:
        valid = ", ".join(sorted(RECORD_TYPES))
        raise ValueError(f"Unknown record kind: {kind!r}. Valid kinds: {valid}")

    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    text = file_path.read_text(encoding="utf-8")
    record_cls = RECORD_TYPES[kind]
    validator = _validator(kind)

    records = []
    for line_no, data in _iter_objects(text, file_path):
        error = best_match(validator.iter_errors(data))
        if error is not None:
            location = "/".join(str(p) for p in error.absolute_path) or "<root>"
            raise RecordLoadError(
                f"{file_path.name}:{line_no}: invalid {kind} record at {location}: {error.message}",
                file=str(file_path),
                line=line_no,
            )
        try:
            records.append(record_cls.from_dict(data))
        except ValueError as e:
            raise RecordLoadError(
                f"{file_path.name}:{line_no}: {e}",
                file=str(file_path),
                line=line_no,
            ) from e

    return records


def load_contacts(path: str | Path) -> list[ContactRecord]:
    """Load contacts from a JSON array or JSONL file."""
    return load_records(path, "contact")


def load_tasks(path: str | Path) -> list[TaskRecord]:
    """Load tasks from a JSON array or JSONL file."""
    return load_records(path, "task")


def load_events(path: str | Path) -> list[EventRecord]:
    """Load calendar events from a JSON array or JSONL file."""
    return load_records(path, "event")


def _iter_objects(text: str, file_path: Path) -> list[tuple[int, Any]]:
    stripped = text.lstrip()
    if stripped.startswith("["):
        try:
            items = json.loads(stripped)
        except json.JSONDecodeError as e:
            raise RecordLoadError(
                f"{file_path.name}: invalid JSON: {e}", file=str(file_path), line=e.lineno
            ) from e
        return list(enumerate(items, start=1))

    objects = []
    for line_no, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            objects.append((line_no, json.loads(line)))
        except json.JSONDecodeError as e:
            raise RecordLoadError(
                f"{file_path.name}:{line_no}: invalid JSON: {e.msg}",
                file=str(file_path),
                line=line_no,
            ) from e
    return objects


def write_jsonl(
    records: Sequence[Record],
    path: str | Path,
    *,
    sort_keys: bool = True,
) -> None:
    """Write records to JSONL file (one JSON object per line).

    Output is deterministic with consistent field ordering and UTF-8 encoding.

    Parameters
    ----------
    records : Sequence[Record]
        Records to write.
    path : str | Path
        Output file path.
    sort_keys : bool, optional
        Whether to sort dictionary keys for deterministic output,
        by default True.
    """
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    with file_path.open("w", encoding="utf-8", newline="\n") as f:
        for record in records:
            json_str = json.dumps(
                record.to_dict(),
                ensure_ascii=False,
                sort_keys=sort_keys,
            )
            f.write(json_str + "\n")
