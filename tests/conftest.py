"""Pytest configuration and fixtures for test suite."""

import sys
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

import pytest

# Add src directory to path for imports
SRC_PATH = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_PATH))

from pimdedupe.models import (  # noqa: E402
    ContactRecord,
    EmailEntry,
    EventRecord,
    PhoneEntry,
    TaskRecord,
)


@pytest.fixture
def make_contact() -> Callable[..., ContactRecord]:
    """Factory for contacts with plain-string emails and phones."""

    def _factory(
        id: str = "c1",
        display_name: str = "",
        *,
        uid: str | None = None,
        emails: list[str] | None = None,
        phones: list[str] | None = None,
    ) -> ContactRecord:
        return ContactRecord(
            id=id,
            display_name=display_name,
            uid=uid,
            emails=tuple(EmailEntry(e) for e in emails or []),
            phones=tuple(PhoneEntry(p) for p in phones or []),
        )

    return _factory


@pytest.fixture
def make_task() -> Callable[..., TaskRecord]:
    """Factory for tasks; dates may be given as ISO8601 strings."""

    def _factory(
        id: str = "t1",
        title: str = "",
        *,
        uid: str | None = None,
        due: str | datetime | None = None,
        start: str | datetime | None = None,
    ) -> TaskRecord:
        return TaskRecord(
            id=id,
            title=title,
            uid=uid,
            due_date=datetime.fromisoformat(due) if isinstance(due, str) else due,
            start_date=datetime.fromisoformat(start) if isinstance(start, str) else start,
        )

    return _factory


@pytest.fixture
def make_event() -> Callable[..., EventRecord]:
    """Factory for a one-hour event starting 2024-01-15T10:00Z by default."""

    def _factory(
        id: str = "event-1",
        title: str = "Test Event",
        *,
        uid: str | None = None,
        start: str = "2024-01-15T10:00:00Z",
        end: str = "2024-01-15T11:00:00Z",
        location: str | None = None,
    ) -> EventRecord:
        return EventRecord(
            id=id,
            title=title,
            start_date=datetime.fromisoformat(start),
            end_date=datetime.fromisoformat(end),
            uid=uid,
            location=location,
        )

    return _factory
