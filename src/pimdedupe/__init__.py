"""Deterministic merge and deduplication for contacts, tasks and calendar events.

This package provides:
- Data models (pimdedupe.models): contact, task and event records
- Normalization (pimdedupe.normalize): text/phone normalization and comparison keys
- Decision (pimdedupe.decision): pairwise duplicate rules
- Engine (pimdedupe.engine): configs, policies, detector and cross-collection matcher
- Merge (pimdedupe.merge): merge, clean, detect and import planning
- Audit (pimdedupe.audit): JSONL event logging
- CLI (pimdedupe.cli): command-line interface
- Public API (pimdedupe.api): high-level convenience functions
"""

__version__ = "0.1.0"
__license__ = "MIT"

from pimdedupe.api import (
    RecordLoadError,
    deduplicate_contacts,
    deduplicate_events,
    deduplicate_tasks,
    find_contact_duplicates,
    find_event_duplicates,
    find_task_duplicates,
    get_duplicate_contact_ids,
    get_duplicate_event_ids,
    get_duplicate_task_ids,
    load_contacts,
    load_events,
    load_records,
    load_tasks,
    write_jsonl,
)
from pimdedupe.engine import (
    ContactPolicy,
    DedupResult,
    DuplicateDetectionConfig,
    EventDuplicateConfig,
    EventPolicy,
    TaskDuplicateConfig,
    TaskPolicy,
    create_policy,
)
from pimdedupe.models import ContactRecord, EmailEntry, EventRecord, PhoneEntry, TaskRecord

__all__ = [
    "__version__",
    "__license__",
    # Models
    "ContactRecord",
    "EmailEntry",
    "PhoneEntry",
    "TaskRecord",
    "EventRecord",
    # Config and policies
    "DuplicateDetectionConfig",
    "TaskDuplicateConfig",
    "EventDuplicateConfig",
    "ContactPolicy",
    "TaskPolicy",
    "EventPolicy",
    "create_policy",
    "DedupResult",
    # API
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
