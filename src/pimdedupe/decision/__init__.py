"""Pairwise duplicate decision rules."""

from pimdedupe.decision.models import MatchReason, MatchSignals, PairVerdict
from pimdedupe.decision.rules import (
    are_contacts_duplicates,
    are_events_duplicates,
    are_tasks_duplicates,
    compare_contacts,
    compare_events,
    compare_tasks,
    contact_signals,
    emails_intersect,
    locations_match,
    names_match,
    phones_intersect,
)

__all__ = [
    # Models
    "MatchReason",
    "MatchSignals",
    "PairVerdict",
    # Signals
    "names_match",
    "emails_intersect",
    "phones_intersect",
    "contact_signals",
    "locations_match",
    # Rules
    "compare_contacts",
    "are_contacts_duplicates",
    "compare_tasks",
    "are_tasks_duplicates",
    "compare_events",
    "are_events_duplicates",
]
