"""Shared data types for pimdedupe.

This package contains the record dataclasses consumed across the engine.

Domain-specific types live closer to their consumers:
- Config types → pimdedupe.engine.config
- Outcome types → pimdedupe.merge.models
- Audit types → pimdedupe.audit.models
"""

from pimdedupe.models.records import (
    ContactRecord,
    EmailEntry,
    EventRecord,
    PhoneEntry,
    Record,
    TaskRecord,
    to_utc,
)

__all__ = [
    # Record models
    "Record",
    "ContactRecord",
    "EmailEntry",
    "PhoneEntry",
    "TaskRecord",
    "EventRecord",
    # Helpers
    "to_utc",
]
