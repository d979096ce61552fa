"""Collection-level operations built on the duplicate detector.

These are the pure halves of the merge, clean, detect and import
handlers: the caller fetches a consistent snapshot, calls one of these,
then applies the returned outcome atomically.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from itertools import chain
from typing import TypeVar

from pimdedupe.audit.logger import AuditLogger
from pimdedupe.engine.detector import deduplicate, find_duplicates_against_existing
from pimdedupe.engine.policies import DuplicatePolicy
from pimdedupe.merge.models import CleanOutcome, DetectionReport, ImportPlan, MergeOutcome
from pimdedupe.models.records import Record

T = TypeVar("T", bound=Record)


def merge_collections(
    collections: Iterable[Sequence[T]],
    policy: DuplicatePolicy[T],
    *,
    remove_duplicates: bool = False,
    logger: AuditLogger | None = None,
) -> MergeOutcome[T]:
    """Merge several collections into the record list of a new one.

    Records are concatenated collection by collection, preserving order
    within each, so with ``remove_duplicates`` the copy from the
    earliest collection wins.

    Parameters
    ----------
    collections : Iterable[Sequence[T]]
        Source collections, in priority order.
    policy : DuplicatePolicy[T]
        Key function and pairwise rule.
    remove_duplicates : bool, optional
        Drop records that duplicate an earlier one, by default False.
    logger : AuditLogger | None, optional
        Audit logger for observability events.

    Returns
    -------
    MergeOutcome[T]
        Records to create plus merged/removed counts.
    """
    all_records = list(chain.from_iterable(collections))

    records = all_records
    if remove_duplicates:
        records = deduplicate(all_records, policy, logger=logger).unique

    return MergeOutcome(
        records=records,
        merged_count=len(records),
        removed_duplicates=len(all_records) - len(records),
    )


def clean_duplicates(
    records: Sequence[T],
    policy: DuplicatePolicy[T],
    *,
    logger: AuditLogger | None = None,
) -> CleanOutcome:
    """Compute the ids to delete so *records* holds no duplicates.

    Parameters
    ----------
    records : Sequence[T]
        Current collection contents.
    policy : DuplicatePolicy[T]
        Key function and pairwise rule.
    logger : AuditLogger | None, optional
        Audit logger for observability events.

    Returns
    -------
    CleanOutcome
        Duplicate ids plus removed/remaining counts.
    """
    duplicate_ids = deduplicate(records, policy, logger=logger).duplicate_ids
    return CleanOutcome(
        duplicate_ids=duplicate_ids,
        removed_count=len(duplicate_ids),
        remaining_count=len(records) - len(duplicate_ids),
    )


def detect_duplicates(
    records: Sequence[T],
    policy: DuplicatePolicy[T],
    *,
    logger: AuditLogger | None = None,
) -> DetectionReport[T]:
    """Report duplicates in *records* without removing anything."""
    duplicates = deduplicate(records, policy, logger=logger).duplicates
    return DetectionReport(
        total_records=len(records),
        duplicate_count=len(duplicates),
        duplicates=duplicates,
    )


def plan_import(
    incoming: Sequence[T],
    existing: Sequence[T],
    policy: DuplicatePolicy[T],
    *,
    skip_duplicates: bool = True,
    replace_all: bool = False,
    dedupe_incoming: bool = False,
    logger: AuditLogger | None = None,
) -> ImportPlan[T]:
    """Decide which incoming records to create in an existing collection.

    Parameters
    ----------
    incoming : Sequence[T]
        Parsed batch (file upload or URL refresh).
    existing : Sequence[T]
        Current collection contents.
    policy : DuplicatePolicy[T]
        Key function and pairwise rule.
    skip_duplicates : bool, optional
        Skip incoming records already present, by default True.
        Ignored when *replace_all* is set.
    replace_all : bool, optional
        Delete every existing record and import the whole batch,
        by default False.
    dedupe_incoming : bool, optional
        Also drop records duplicating an earlier record of the batch,
        by default False.
    logger : AuditLogger | None, optional
        Audit logger for observability events.

    Returns
    -------
    ImportPlan[T]
        Records to create, skip count and ids to delete first.
    """
    batch = list(incoming)
    skipped = 0

    if dedupe_incoming:
        batch_result = deduplicate(batch, policy, logger=logger)
        batch = batch_result.unique
        skipped += len(batch_result.duplicates)

    if replace_all:
        return ImportPlan(
            to_import=batch,
            skipped_duplicates=skipped,
            delete_existing_ids=[record.id for record in existing],
        )

    if skip_duplicates and existing:
        match_result = find_duplicates_against_existing(batch, existing, policy, logger=logger)
        batch = match_result.unique
        skipped += len(match_result.duplicates)

    return ImportPlan(to_import=batch, skipped_duplicates=skipped)
