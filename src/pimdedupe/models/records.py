"""Comparable record data models for pimdedupe.

This module defines the plain-data shapes the duplicate detector consumes.
Records are built by the caller (usually from storage rows) and are never
mutated by any pimdedupe operation.

All record datetimes are timezone-aware UTC: naive values are read as UTC
and aware values are converted, so date keys and date differences agree.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Protocol


class Record(Protocol):
    """Structural type shared by every record kind."""

    @property
    def id(self) -> str:
        """Store-assigned identifier."""
        ...

    def to_dict(self) -> dict[str, Any]:
        """Convert record to dictionary for JSON serialization."""
        ...


@dataclass(frozen=True)
class EmailEntry:
    """Single email address attached to a contact.

    Attributes
    ----------
    email : str
        Address as stored (not normalized).
    """

    email: str


@dataclass(frozen=True)
class PhoneEntry:
    """Single phone number attached to a contact.

    Attributes
    ----------
    number : str
        Number as stored (free-form: spaces, dashes, parentheses, '+').
    """

    number: str


@dataclass(frozen=True)
class ContactRecord:
    """Contact-like record with an identity, a display name and channels.

    Attributes
    ----------
    id : str
        Opaque identifier assigned by the owning store. Never used as a
        matching signal; it only maps results back to storage rows.
    display_name : str
        Human-readable name (may be empty).
    uid : str | None
        External identifier from a synchronized source (e.g. vCard UID).
    emails : tuple[EmailEntry, ...]
        Email entries in stored order. Empty when absent.
    phones : tuple[PhoneEntry, ...]
        Phone entries in stored order. Empty when absent.
    """

    id: str
    display_name: str
    uid: str | None = None
    emails: tuple[EmailEntry, ...] = ()
    phones: tuple[PhoneEntry, ...] = ()

    @property
    def primary_email(self) -> str | None:
        """First email address, or None if the contact has none."""
        if not self.emails:
            return None
        return self.emails[0].email

    def to_dict(self) -> dict[str, Any]:
        """Convert record to dictionary for JSON serialization.

        Returns
        -------
        dict[str, Any]
            Dictionary representation compatible with the contact schema.
        """
        return {
            "id": self.id,
            "uid": self.uid,
            "display_name": self.display_name,
            "emails": [{"email": e.email} for e in self.emails],
            "phones": [{"number": p.number} for p in self.phones],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ContactRecord":
        """Reconstruct a ContactRecord from a dictionary.

        Accepts both ``display_name`` and the vCard-flavoured
        ``formattedName`` key. Email and phone entries may be objects
        (``{"email": ...}`` / ``{"number": ...}``) or plain strings.

        Parameters
        ----------
        data : dict[str, Any]
            Dictionary (e.g. from JSON) with record fields.

        Returns
        -------
        ContactRecord
            Reconstructed record.

        Raises
        ------
        KeyError
            If ``id`` is missing.
        """
        display_name = data.get("display_name")
        if display_name is None:
            display_name = data.get("formattedName", "")

        emails = tuple(
            EmailEntry(email=e if isinstance(e, str) else e.get("email", ""))
            for e in data.get("emails") or []
        )
        phones = tuple(
            PhoneEntry(number=p if isinstance(p, str) else p.get("number", ""))
            for p in data.get("phones") or []
        )

        return cls(
            id=str(data["id"]),
            display_name=display_name,
            uid=data.get("uid") or None,
            emails=emails,
            phones=phones,
        )


@dataclass(frozen=True)
class TaskRecord:
    """Task-like record with an identity, a title and optional dates.

    Attributes
    ----------
    id : str
        Opaque identifier assigned by the owning store.
    title : str
        Task title (may be empty).
    uid : str | None
        External identifier from a synchronized source (e.g. VTODO UID).
    due_date : datetime | None
        Due date, preferred over start_date for matching.
    start_date : datetime | None
        Start date, used when no due date is set.
    """

    id: str
    title: str
    uid: str | None = None
    due_date: datetime | None = None
    start_date: datetime | None = None

    def __post_init__(self) -> None:
        """Normalize dates to aware UTC."""
        object.__setattr__(self, "due_date", to_utc(self.due_date))
        object.__setattr__(self, "start_date", to_utc(self.start_date))

    @property
    def effective_date(self) -> datetime | None:
        """Date used for matching: due date, falling back to start date."""
        return self.due_date or self.start_date

    def to_dict(self) -> dict[str, Any]:
        """Convert record to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "uid": self.uid,
            "title": self.title,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "start_date": self.start_date.isoformat() if self.start_date else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TaskRecord":
        """Reconstruct a TaskRecord from a dictionary.

        Dates may be ISO8601 strings (``Z`` suffix accepted) or datetime
        objects; both snake_case and camelCase date keys are read.

        Parameters
        ----------
        data : dict[str, Any]
            Dictionary (e.g. from JSON) with record fields.

        Returns
        -------
        TaskRecord
            Reconstructed record.
        """
        due = data.get("due_date", data.get("dueDate"))
        start = data.get("start_date", data.get("startDate"))
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            uid=data.get("uid") or None,
            due_date=_parse_datetime(due),
            start_date=_parse_datetime(start),
        )


@dataclass(frozen=True)
class EventRecord:
    """Calendar event with an identity, a title and a time span.

    Attributes
    ----------
    id : str
        Opaque identifier assigned by the owning store.
    title : str
        Event summary (may be empty).
    start_date : datetime
        Start of the event.
    end_date : datetime
        End of the event (equal to start for zero-duration events).
    uid : str | None
        External identifier from a synchronized source (e.g. VEVENT UID).
    location : str | None
        Free-form location.
    """

    id: str
    title: str
    start_date: datetime
    end_date: datetime
    uid: str | None = None
    location: str | None = None

    def __post_init__(self) -> None:
        """Normalize dates to aware UTC."""
        object.__setattr__(self, "start_date", to_utc(self.start_date))
        object.__setattr__(self, "end_date", to_utc(self.end_date))

    def to_dict(self) -> dict[str, Any]:
        """Convert record to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "uid": self.uid,
            "title": self.title,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "location": self.location,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EventRecord":
        """Reconstruct an EventRecord from a dictionary.

        Reads snake_case or camelCase date keys; a missing end date
        means a zero-duration event.

        Raises
        ------
        ValueError
            If the start date is missing or a date is malformed.
        """
        start = _parse_datetime(data.get("start_date", data.get("startDate")))
        if start is None:
            raise ValueError("event has no start date")
        end = _parse_datetime(data.get("end_date", data.get("endDate")))

        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            start_date=start,
            end_date=end or start,
            uid=data.get("uid") or None,
            location=data.get("location"),
        )


def to_utc(value: datetime | None) -> datetime | None:
    """Return *value* as an aware UTC datetime (naive values are UTC)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _parse_datetime(value: str | datetime | None) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return to_utc(value)
    return to_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
