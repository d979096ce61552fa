"""Pairwise duplicate rules for contacts, tasks and events.

The contact decision table is evaluated in a fixed order, first
applicable rule wins. A co-signal (name + email, name + phone) beats a
single signal; email alone only counts when name matching is disabled.
Phone numbers never decide a verdict without a name match.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from pimdedupe.decision.models import MatchReason, MatchSignals, PairVerdict
from pimdedupe.models.records import (
    ContactRecord,
    EmailEntry,
    EventRecord,
    PhoneEntry,
    TaskRecord,
)
from pimdedupe.normalize.text import normalize_phone, normalize_string

if TYPE_CHECKING:
    from pimdedupe.engine.config import (
        DuplicateDetectionConfig,
        EventDuplicateConfig,
        TaskDuplicateConfig,
    )


# ---------------------------------------------------------------------------
# Signals
# ---------------------------------------------------------------------------


def names_match(a: ContactRecord, b: ContactRecord) -> bool:
    """Normalized display name equality."""
    return normalize_string(a.display_name) == normalize_string(b.display_name)


def emails_intersect(a: Iterable[EmailEntry], b: Iterable[EmailEntry]) -> bool:
    """True if the two email lists share at least one normalized address."""
    emails_a = {normalize_string(e.email) for e in a}
    if not emails_a:
        return False
    return any(normalize_string(e.email) in emails_a for e in b)


def phones_intersect(a: Iterable[PhoneEntry], b: Iterable[PhoneEntry]) -> bool:
    """True if the two phone lists share at least one digit-identical number.

    Numbers compare after stripping formatting only; no country code or
    area code is inferred, so ``"+1 555 123 4567"`` and ``"5551234567"``
    differ.
    """
    digits_a = {normalize_phone(p.number) for p in a} - {""}
    if not digits_a:
        return False
    return any(normalize_phone(p.number) in digits_a for p in b)


def contact_signals(
    a: ContactRecord,
    b: ContactRecord,
    config: DuplicateDetectionConfig,
) -> MatchSignals:
    """Compute the enabled contact signals for a pair."""
    return MatchSignals(
        name_match=config.use_name and names_match(a, b),
        email_match=config.use_email and emails_intersect(a.emails, b.emails),
        phone_match=config.use_phone and phones_intersect(a.phones, b.phones),
    )


# ---------------------------------------------------------------------------
# Contacts
# ---------------------------------------------------------------------------


def compare_contacts(
    a: ContactRecord,
    b: ContactRecord,
    config: DuplicateDetectionConfig,
) -> PairVerdict:
    """Apply the contact decision table to a pair.

    Parameters
    ----------
    a : ContactRecord
        First contact.
    b : ContactRecord
        Second contact.
    config : DuplicateDetectionConfig
        Active signals.

    Returns
    -------
    PairVerdict
        Verdict and the rule that produced it.
    """
    # uid short-circuit: nothing else is consulted
    if config.use_uid and a.uid and b.uid:
        if a.uid == b.uid:
            return PairVerdict(True, MatchReason.UID_EQUAL)
        return PairVerdict(False, MatchReason.UID_DIFFERENT)

    signals = contact_signals(a, b, config)

    if config.use_name and config.use_email and signals.name_match and signals.email_match:
        return PairVerdict(True, MatchReason.NAME_AND_EMAIL, signals)

    if config.use_name and config.use_phone and signals.name_match and signals.phone_match:
        return PairVerdict(True, MatchReason.NAME_AND_PHONE, signals)

    if config.use_name and not config.use_email and not config.use_phone:
        return PairVerdict(signals.name_match, MatchReason.NAME_ONLY, signals)

    if config.use_email and not config.use_name:
        return PairVerdict(signals.email_match, MatchReason.EMAIL_ONLY, signals)

    return PairVerdict(False, MatchReason.NO_RULE_MATCHED, signals)


def are_contacts_duplicates(
    a: ContactRecord,
    b: ContactRecord,
    config: DuplicateDetectionConfig,
) -> bool:
    """Return True if two contacts are duplicates under *config*."""
    return compare_contacts(a, b, config).is_duplicate


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


def compare_tasks(
    a: TaskRecord,
    b: TaskRecord,
    config: TaskDuplicateConfig,
) -> PairVerdict:
    """Apply the task rule to a pair.

    Titles must match (when enabled); then two undated tasks match, a
    dated and an undated task never do, and two dated tasks match when
    their effective dates are within ``config.date_tolerance``.
    """
    if config.use_uid and a.uid and b.uid:
        if a.uid == b.uid:
            return PairVerdict(True, MatchReason.UID_EQUAL)
        return PairVerdict(False, MatchReason.UID_DIFFERENT)

    if config.use_title and normalize_string(a.title) != normalize_string(b.title):
        return PairVerdict(False, MatchReason.TITLE_MISMATCH)

    date_a = a.effective_date
    date_b = b.effective_date

    if date_a is None and date_b is None:
        return PairVerdict(True, MatchReason.BOTH_UNDATED)

    if date_a is None or date_b is None:
        return PairVerdict(False, MatchReason.ONE_UNDATED)

    if abs(date_a - date_b) > config.date_tolerance:
        return PairVerdict(False, MatchReason.DATES_OUTSIDE_TOLERANCE)

    return PairVerdict(True, MatchReason.DATES_WITHIN_TOLERANCE)


def are_tasks_duplicates(
    a: TaskRecord,
    b: TaskRecord,
    config: TaskDuplicateConfig,
) -> bool:
    """Return True if two tasks are duplicates under *config*."""
    return compare_tasks(a, b, config).is_duplicate


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


def locations_match(a: EventRecord, b: EventRecord) -> bool:
    """Normalized location equality; a missing location equals an empty one."""
    return normalize_string(a.location or "") == normalize_string(b.location or "")


def compare_events(
    a: EventRecord,
    b: EventRecord,
    config: EventDuplicateConfig,
) -> PairVerdict:
    """Apply the event rule to a pair.

    Titles must match (when enabled), then both start and end must lie
    within ``config.date_tolerance`` of each other, then locations must
    match (when enabled).
    """
    if config.use_uid and a.uid and b.uid:
        if a.uid == b.uid:
            return PairVerdict(True, MatchReason.UID_EQUAL)
        return PairVerdict(False, MatchReason.UID_DIFFERENT)

    if config.use_title and normalize_string(a.title) != normalize_string(b.title):
        return PairVerdict(False, MatchReason.TITLE_MISMATCH)

    tolerance = config.date_tolerance
    if abs(a.start_date - b.start_date) > tolerance or abs(a.end_date - b.end_date) > tolerance:
        return PairVerdict(False, MatchReason.DATES_OUTSIDE_TOLERANCE)

    if config.use_location and not locations_match(a, b):
        return PairVerdict(False, MatchReason.LOCATION_MISMATCH)

    return PairVerdict(True, MatchReason.DATES_WITHIN_TOLERANCE)


def are_events_duplicates(
    a: EventRecord,
    b: EventRecord,
    config: EventDuplicateConfig,
) -> bool:
    """Return True if two events are duplicates under *config*."""
    return compare_events(a, b, config).is_duplicate
