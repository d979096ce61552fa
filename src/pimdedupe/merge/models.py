"""Outcome models for collection-level merge, clean and import operations.

Every outcome is plain data: callers translate it into storage writes
(creates, bulk deletes) inside their own transaction.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from pimdedupe.models.records import Record

T = TypeVar("T", bound=Record)


def _records_to_dicts(records: Sequence[Record]) -> list[dict[str, Any]]:
    return [record.to_dict() for record in records]


@dataclass
class MergeOutcome(Generic[T]):
    """Result of merging several collections into one.

    Attributes
    ----------
    records : list[T]
        Records to create in the merged collection, in source order.
    merged_count : int
        ``len(records)``.
    removed_duplicates : int
        Input records dropped as duplicates (0 unless requested).
    """

    records: list[T] = field(default_factory=list)
    merged_count: int = 0
    removed_duplicates: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "records": _records_to_dicts(self.records),
            "merged_count": self.merged_count,
            "removed_duplicates": self.removed_duplicates,
        }


@dataclass
class CleanOutcome:
    """Result of cleaning duplicates from a single collection.

    Attributes
    ----------
    duplicate_ids : list[str]
        Ids to delete, in collection order.
    removed_count : int
        ``len(duplicate_ids)``.
    remaining_count : int
        Records left after the delete.
    """

    duplicate_ids: list[str] = field(default_factory=list)
    removed_count: int = 0
    remaining_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "duplicate_ids": list(self.duplicate_ids),
            "removed_count": self.removed_count,
            "remaining_count": self.remaining_count,
        }


@dataclass
class DetectionReport(Generic[T]):
    """Read-only duplicate report for a collection.

    Attributes
    ----------
    total_records : int
        Records inspected.
    duplicate_count : int
        Records that a clean would remove.
    duplicates : list[T]
        The duplicate records themselves, in collection order.
    """

    total_records: int = 0
    duplicate_count: int = 0
    duplicates: list[T] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "total_records": self.total_records,
            "duplicate_count": self.duplicate_count,
            "duplicates": _records_to_dicts(self.duplicates),
        }


@dataclass
class ImportPlan(Generic[T]):
    """What to write when importing a batch into an existing collection.

    Attributes
    ----------
    to_import : list[T]
        Incoming records to create, in batch order.
    skipped_duplicates : int
        Incoming records not imported because they already exist (or
        duplicate an earlier record of the batch).
    delete_existing_ids : list[str]
        Existing ids to delete first (non-empty only for replace-all).
    """

    to_import: list[T] = field(default_factory=list)
    skipped_duplicates: int = 0
    delete_existing_ids: list[str] = field(default_factory=list)

    @property
    def imported_count(self) -> int:
        """Number of records that will be created."""
        return len(self.to_import)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "to_import": _records_to_dicts(self.to_import),
            "imported_count": self.imported_count,
            "skipped_duplicates": self.skipped_duplicates,
            "delete_existing_ids": list(self.delete_existing_ids),
        }
