"""Tests for calendar event duplicate detection."""

from collections.abc import Callable
from datetime import timedelta

import pytest

from pimdedupe.decision import MatchReason, are_events_duplicates, compare_events
from pimdedupe.engine import (
    EventDuplicateConfig,
    EventPolicy,
    deduplicate,
    find_duplicates_against_existing,
    get_duplicate_ids,
)
from pimdedupe.models import EventRecord

EVENTS = EventDuplicateConfig()

MakeEvent = Callable[..., EventRecord]

# ---------------------------------------------------------------------------
# uid
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_uid_equal_ignores_title(make_event: MakeEvent) -> None:
    """Test equal uids are duplicates even with different titles."""
    a = make_event("1", "Meeting A", uid="abc-123")
    b = make_event("2", "Meeting B", uid="abc-123")

    verdict = compare_events(a, b, EVENTS)

    assert verdict.is_duplicate
    assert verdict.reason == MatchReason.UID_EQUAL


@pytest.mark.unit
def test_uid_different(make_event: MakeEvent) -> None:
    """Test different uids are never duplicates."""
    a = make_event("1", uid="abc-123")
    b = make_event("2", uid="xyz-789")

    assert compare_events(a, b, EVENTS).reason == MatchReason.UID_DIFFERENT


@pytest.mark.unit
def test_uid_disabled_falls_back_to_title(make_event: MakeEvent) -> None:
    """Test use_uid=False compares titles even when uids are equal."""
    a = make_event("1", uid="abc-123")
    b = make_event("2", "Different Title", uid="abc-123")

    assert not are_events_duplicates(a, b, EventDuplicateConfig(use_uid=False))


# ---------------------------------------------------------------------------
# Titles
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.parametrize(
    ("title_a", "title_b", "expected"),
    [
        ("Test Event", "Test Event", True),
        ("Team   Meeting", "Team Meeting", True),
        ("Team Meeting", "TEAM MEETING", True),
        ("  Meeting  ", "Meeting", True),
        ("Meeting A", "Meeting B", False),
        ("A" * 1000, "A" * 1000, True),
        ("Meeting @#$%^&*()", "Meeting @#$%^&*()", True),
        ("Reunión de equipo", "Reunión de equipo", True),
    ],
)
def test_title_normalization(
    make_event: MakeEvent, title_a: str, title_b: str, expected: bool
) -> None:
    """Test titles compare after case folding and whitespace collapsing."""
    a = make_event("1", title_a)
    b = make_event("2", title_b)

    assert are_events_duplicates(a, b, EVENTS) is expected


@pytest.mark.unit
def test_title_disabled(make_event: MakeEvent) -> None:
    """Test use_title=False matches on the time span alone."""
    a = make_event("1", "Meeting A")
    b = make_event("2", "Meeting B")

    assert compare_events(a, b, EVENTS).reason == MatchReason.TITLE_MISMATCH
    assert are_events_duplicates(a, b, EventDuplicateConfig(use_title=False))


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.parametrize(
    ("start_b", "expected"),
    [
        ("2024-01-15T10:00:30Z", True),
        ("2024-01-15T10:01:00Z", True),
        ("2024-01-15T10:02:00Z", False),
    ],
)
def test_start_within_default_tolerance(
    make_event: MakeEvent, start_b: str, expected: bool
) -> None:
    """Test start dates must be within one minute by default."""
    a = make_event("1")
    b = make_event("2", start=start_b)

    assert are_events_duplicates(a, b, EVENTS) is expected


@pytest.mark.unit
def test_custom_tolerance(make_event: MakeEvent) -> None:
    """Test a ten minute tolerance accepts starts five minutes apart."""
    a = make_event("1")
    b = make_event("2", start="2024-01-15T10:05:00Z")

    assert not are_events_duplicates(a, b, EVENTS)
    assert are_events_duplicates(a, b, EventDuplicateConfig(date_tolerance=timedelta(minutes=10)))


@pytest.mark.unit
def test_end_date_also_checked(make_event: MakeEvent) -> None:
    """Test equal starts with ends an hour apart are not duplicates."""
    a = make_event("1")
    b = make_event("2", end="2024-01-15T12:00:00Z")

    verdict = compare_events(a, b, EVENTS)

    assert not verdict.is_duplicate
    assert verdict.reason == MatchReason.DATES_OUTSIDE_TOLERANCE


@pytest.mark.unit
def test_midnight_boundary_pair(make_event: MakeEvent) -> None:
    """Test a 1ms difference across midnight is within tolerance."""
    a = make_event("1", start="2024-01-15T23:59:59.999Z", end="2024-01-16T00:59:59.999Z")
    b = make_event("2", start="2024-01-16T00:00:00.000Z", end="2024-01-16T01:00:00.000Z")

    assert are_events_duplicates(a, b, EVENTS)


@pytest.mark.unit
def test_zero_duration_events(make_event: MakeEvent) -> None:
    """Test events whose start equals their end compare normally."""
    a = make_event("1", end="2024-01-15T10:00:00Z")
    b = make_event("2", end="2024-01-15T10:00:00Z")

    assert are_events_duplicates(a, b, EVENTS)


@pytest.mark.unit
def test_naive_and_aware_dates(make_event: MakeEvent) -> None:
    """Test naive event dates compare as UTC against aware ones."""
    a = make_event("1")
    b = make_event("2", start="2024-01-15T10:00:00", end="2024-01-15T11:00:00")

    assert are_events_duplicates(a, b, EVENTS)


# ---------------------------------------------------------------------------
# Locations
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.parametrize(
    ("loc_a", "loc_b", "expected"),
    [
        ("Room A", "Room B", False),
        ("Room A", "Room A", True),
        ("Conference Room", "CONFERENCE ROOM", True),
        (None, "", True),
        (None, None, True),
    ],
)
def test_location_when_enabled(
    make_event: MakeEvent, loc_a: str | None, loc_b: str | None, expected: bool
) -> None:
    """Test locations compare normalized, missing equal to empty."""
    a = make_event("1", location=loc_a)
    b = make_event("2", location=loc_b)

    verdict = compare_events(a, b, EventDuplicateConfig(use_location=True))

    assert verdict.is_duplicate is expected
    if not expected:
        assert verdict.reason == MatchReason.LOCATION_MISMATCH


@pytest.mark.unit
def test_location_ignored_by_default(make_event: MakeEvent) -> None:
    """Test locations are not compared unless enabled."""
    a = make_event("1", location="Room A")
    b = make_event("2", location="Room B")

    assert are_events_duplicates(a, b, EVENTS)


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_deduplicate_groups_by_uid(make_event: MakeEvent) -> None:
    """Test uid groups keep their first member."""
    events = [
        make_event("1", uid="group-a"),
        make_event("2", uid="group-b"),
        make_event("3", uid="group-a"),
        make_event("4", uid="group-b"),
    ]

    result = deduplicate(events, EventPolicy())

    assert [e.id for e in result.unique] == ["1", "2"]
    assert result.duplicate_ids == ["3", "4"]


@pytest.mark.unit
def test_deduplicate_keeps_first_occurrence(make_event: MakeEvent) -> None:
    """Test identical events collapse onto the first one."""
    events = [make_event(name, "Meeting") for name in ("first", "second", "third")]

    result = deduplicate(events, EventPolicy())

    assert [e.id for e in result.unique] == ["first"]
    assert result.duplicate_ids == ["second", "third"]


@pytest.mark.unit
def test_deduplicate_title_disabled(make_event: MakeEvent) -> None:
    """Test use_title=False merges differently titled events."""
    events = [make_event("1", "Meeting A"), make_event("2", "Meeting B")]

    assert deduplicate(events, EventPolicy()).duplicate_ids == []
    assert get_duplicate_ids(events, EventPolicy({"use_title": False})) == ["2"]


@pytest.mark.unit
def test_match_against_existing_calendar(make_event: MakeEvent) -> None:
    """Test imported events match existing ones by uid or title."""
    existing = [
        make_event("existing-1", uid="abc-123"),
        make_event("existing-2", "Weekly Standup"),
    ]
    new = [
        make_event("new-1", uid="abc-123"),
        make_event("new-2", uid="xyz-789"),
        make_event("new-3", "Weekly Standup"),
        make_event("new-4", "Monthly Review"),
    ]

    result = find_duplicates_against_existing(new, existing, EventPolicy())

    assert [e.id for e in result.unique] == ["new-2", "new-4"]
    assert result.duplicate_ids == ["new-1", "new-3"]


@pytest.mark.unit
def test_many_new_events_match_one_existing(make_event: MakeEvent) -> None:
    """Test every new copy of an existing event is a duplicate."""
    existing = [make_event("existing-1", uid="abc-123")]
    new = [make_event(f"new-{i}", uid="abc-123") for i in range(1, 4)]

    result = find_duplicates_against_existing(new, existing, EventPolicy())

    assert result.unique == []
    assert result.duplicate_ids == ["new-1", "new-2", "new-3"]


@pytest.mark.unit
def test_empty_collections() -> None:
    """Test empty inputs give empty partitions."""
    policy = EventPolicy()

    assert deduplicate([], policy).unique == []
    assert find_duplicates_against_existing([], [], policy).duplicates == []
    assert get_duplicate_ids([], policy) == []
