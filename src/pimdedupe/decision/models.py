"""Data models for pairwise duplicate decisions.

This module defines the verdict returned by the pairwise rules and the
reason codes naming which rule fired.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class MatchReason(StrEnum):
    """Reason codes for pairwise verdicts.

    Attributes
    ----------
    UID_EQUAL : str
        Both records carry the same uid.
    UID_DIFFERENT : str
        Both records carry uids and they differ.
    NAME_AND_EMAIL : str
        Names match and at least one email is shared.
    NAME_AND_PHONE : str
        Names match and at least one phone number is shared.
    NAME_ONLY : str
        Name is the only active signal and names match.
    EMAIL_ONLY : str
        Name matching is disabled and at least one email is shared.
    TITLE_MISMATCH : str
        Task or event titles differ.
    BOTH_UNDATED : str
        Neither task has a date.
    ONE_UNDATED : str
        Exactly one task has a date.
    DATES_WITHIN_TOLERANCE : str
        Task or event dates are within the configured tolerance.
    DATES_OUTSIDE_TOLERANCE : str
        Task or event dates are further apart than the tolerance.
    LOCATION_MISMATCH : str
        Event locations differ.
    NO_RULE_MATCHED : str
        No rule of the decision table applied.
    """

    UID_EQUAL = "uid_equal"
    UID_DIFFERENT = "uid_different"
    NAME_AND_EMAIL = "name_and_email"
    NAME_AND_PHONE = "name_and_phone"
    NAME_ONLY = "name_only"
    EMAIL_ONLY = "email_only"
    TITLE_MISMATCH = "title_mismatch"
    BOTH_UNDATED = "both_undated"
    ONE_UNDATED = "one_undated"
    DATES_WITHIN_TOLERANCE = "dates_within_tolerance"
    DATES_OUTSIDE_TOLERANCE = "dates_outside_tolerance"
    LOCATION_MISMATCH = "location_mismatch"
    NO_RULE_MATCHED = "no_rule_matched"


@dataclass(frozen=True)
class MatchSignals:
    """Independent contact signals computed for one pair.

    Signals for disabled channels are always False.
    """

    name_match: bool = False
    email_match: bool = False
    phone_match: bool = False


@dataclass(frozen=True)
class PairVerdict:
    """Outcome of a pairwise rule.

    Attributes
    ----------
    is_duplicate : bool
        Whether the two records are duplicates.
    reason : MatchReason
        Rule that decided the verdict.
    signals : MatchSignals | None
        Contact signals, None for uid short-circuits, tasks and events.
    """

    is_duplicate: bool
    reason: MatchReason
    signals: MatchSignals | None = None

    def __bool__(self) -> bool:
        return self.is_duplicate

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data: dict[str, Any] = {
            "is_duplicate": self.is_duplicate,
            "reason": self.reason.value,
        }
        if self.signals is not None:
            data["signals"] = {
                "name_match": self.signals.name_match,
                "email_match": self.signals.email_match,
                "phone_match": self.signals.phone_match,
            }
        return data
