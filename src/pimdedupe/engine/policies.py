"""Duplicate policies: one record kind's key function and pairwise rule.

Each policy bundles an immutable config with the two operations the
detector needs. New record kinds are added by extending
``POLICY_REGISTRY``.

Architecture
------------
* ``DuplicatePolicy``: structural protocol (one attribute + two methods).
* ``ContactPolicy`` / ``TaskPolicy`` / ``EventPolicy``: thin adapters over the pure
  functions in ``pimdedupe.normalize.keys`` and ``pimdedupe.decision.rules``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from pimdedupe.decision.models import PairVerdict
from pimdedupe.decision.rules import compare_contacts, compare_events, compare_tasks
from pimdedupe.engine.config import (
    DuplicateDetectionConfig,
    EventDuplicateConfig,
    TaskDuplicateConfig,
    resolve_config,
    resolve_event_config,
    resolve_task_config,
)
from pimdedupe.models.records import ContactRecord, EventRecord, TaskRecord
from pimdedupe.normalize.keys import contact_key, event_key, task_key

R = TypeVar("R")
R_contra = TypeVar("R_contra", contravariant=True)


@runtime_checkable
class DuplicatePolicy(Protocol[R_contra]):
    """Structural protocol every duplicate policy must satisfy.

    Attributes
    ----------
    name : str
        Stable identifier used in audit logs.
    """

    name: str

    def comparison_key(self, record: R_contra) -> str:
        """Return the bucket key for *record*."""
        ...

    def compare(self, a: R_contra, b: R_contra) -> PairVerdict:
        """Apply the pairwise rule to *a* and *b*."""
        ...


class ContactPolicy:
    """Contacts: uid, then normalized name + primary email."""

    name: str = "contact"

    def __init__(
        self,
        config: DuplicateDetectionConfig | Mapping[str, Any] | None = None,
    ) -> None:
        self.config = resolve_config(config)

    def comparison_key(self, record: ContactRecord) -> str:
        """Return the contact comparison key."""
        return contact_key(record, self.config)

    def compare(self, a: ContactRecord, b: ContactRecord) -> PairVerdict:
        """Apply the contact decision table."""
        return compare_contacts(a, b, self.config)

    def __repr__(self) -> str:
        return f"ContactPolicy({self.config!r})"


class TaskPolicy:
    """Tasks: uid, then normalized title + date bucket."""

    name: str = "task"

    def __init__(
        self,
        config: TaskDuplicateConfig | Mapping[str, Any] | None = None,
    ) -> None:
        self.config = resolve_task_config(config)

    def comparison_key(self, record: TaskRecord) -> str:
        """Return the task comparison key."""
        return task_key(record, self.config)

    def compare(self, a: TaskRecord, b: TaskRecord) -> PairVerdict:
        """Apply the task title/date rule."""
        return compare_tasks(a, b, self.config)

    def __repr__(self) -> str:
        return f"TaskPolicy({self.config!r})"


class EventPolicy:
    """Events: uid, then normalized title + start-date bucket."""

    name: str = "event"

    def __init__(
        self,
        config: EventDuplicateConfig | Mapping[str, Any] | None = None,
    ) -> None:
        self.config = resolve_event_config(config)

    def comparison_key(self, record: EventRecord) -> str:
        """Return the event comparison key."""
        return event_key(record, self.config)

    def compare(self, a: EventRecord, b: EventRecord) -> PairVerdict:
        """Apply the event title/span/location rule."""
        return compare_events(a, b, self.config)

    def __repr__(self) -> str:
        return f"EventPolicy({self.config!r})"


# kind → policy class
POLICY_REGISTRY: dict[str, type] = {
    "contact": ContactPolicy,
    "task": TaskPolicy,
    "event": EventPolicy,
}

# kind → record class
RECORD_TYPES: dict[str, type] = {
    "contact": ContactRecord,
    "task": TaskRecord,
    "event": EventRecord,
}


def create_policy(kind: str, overrides: Mapping[str, Any] | None = None) -> Any:
    """Instantiate the policy registered for *kind*.

    Parameters
    ----------
    kind : str
        Key in ``POLICY_REGISTRY`` (``"contact"``, ``"task"`` or ``"event"``).
    overrides : Mapping[str, Any] | None, optional
        Config overrides merged onto the kind's defaults.

    Returns
    -------
    ContactPolicy | TaskPolicy | EventPolicy
        Ready-to-use policy.

    Raises
    ------
    ValueError
        If *kind* is not registered or *overrides* are invalid.
    """
    cls = POLICY_REGISTRY.get(kind)
    if cls is None:
        valid = ", ".join(sorted(POLICY_REGISTRY))
        raise ValueError(f"Unknown record kind: {kind!r}. Valid kinds: {valid}")
    return cls(overrides)


class KeyIndex(Generic[R]):
    """Lookup from comparison key to every record sharing it.

    Used by cross-collection matching: unlike single-collection
    deduplication, all records of a bucket are kept.
    """

    def __init__(self, policy: DuplicatePolicy[R], records: list[R]) -> None:
        self._buckets: dict[str, list[R]] = {}
        for record in records:
            self._buckets.setdefault(policy.comparison_key(record), []).append(record)

    def candidates(self, key: str) -> list[R]:
        """Records sharing *key* (empty list if none)."""
        return self._buckets.get(key, [])

    def __len__(self) -> int:
        return len(self._buckets)
