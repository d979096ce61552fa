"""Key/rule-based duplicate detection and cross-collection matching.

Both entry points are pure: records in, partition out. They never
mutate or reorder their inputs and keep no state between calls. An
optional ``AuditLogger`` receives observability events.
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from pimdedupe.audit.logger import AuditLogger
from pimdedupe.engine.policies import DuplicatePolicy, KeyIndex
from pimdedupe.models.records import Record

T = TypeVar("T", bound=Record)

DEDUPE_STAGE = "deduplicate"
MATCH_STAGE = "match_existing"


@dataclass
class DedupResult(Generic[T]):
    """Partition of an input collection.

    Attributes
    ----------
    unique : list[T]
        Records kept, in input order.
    duplicates : list[T]
        Records classified as duplicates, in input order.
    """

    unique: list[T] = field(default_factory=list)
    duplicates: list[T] = field(default_factory=list)

    @property
    def duplicate_ids(self) -> list[str]:
        """Ids of the duplicate records, in input order."""
        return [record.id for record in self.duplicates]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "unique": [record.to_dict() for record in self.unique],
            "duplicates": [record.to_dict() for record in self.duplicates],
        }


def deduplicate(
    records: Sequence[T],
    policy: DuplicatePolicy[T],
    *,
    logger: AuditLogger | None = None,
) -> DedupResult[T]:
    """Partition *records* into unique and duplicate, first seen wins.

    Each key maps to a representative record. A record whose key is
    already mapped is compared against that representative only:

    * duplicate → goes to ``duplicates``; the representative is kept, so
      later records are still compared with the first-seen one;
    * not a duplicate → unique, and it replaces the representative.

    Parameters
    ----------
    records : Sequence[T]
        Input records, in priority order.
    policy : DuplicatePolicy[T]
        Key function and pairwise rule.
    logger : AuditLogger | None, optional
        Audit logger for observability events.

    Returns
    -------
    DedupResult[T]
        ``unique`` and ``duplicates`` partition *records* by position.
    """
    start = time.perf_counter()

    if logger:
        logger.stage_started(DEDUPE_STAGE, expected_records=len(records))

    seen: dict[str, T] = {}
    result: DedupResult[T] = DedupResult()
    collisions = 0

    for record in records:
        key = policy.comparison_key(record)
        representative = seen.get(key)

        if representative is not None:
            verdict = policy.compare(record, representative)
            if verdict.is_duplicate:
                result.duplicates.append(record)
                if logger:
                    logger.duplicate_detected(
                        rid=record.id,
                        matched_rid=representative.id,
                        key=key,
                        reason=verdict.reason.value,
                    )
                continue

            collisions += 1
            if logger:
                logger.key_collision(
                    rid=record.id,
                    previous_rid=representative.id,
                    key=key,
                    reason=verdict.reason.value,
                )

        seen[key] = record
        result.unique.append(record)

    if logger:
        logger.stage_finished(
            stage=DEDUPE_STAGE,
            duration_seconds=time.perf_counter() - start,
            counters={
                "records_in": len(records),
                "unique": len(result.unique),
                "duplicates": len(result.duplicates),
                "key_collisions": collisions,
            },
        )

    return result


def find_duplicates_against_existing(
    new_records: Sequence[T],
    existing_records: Sequence[T],
    policy: DuplicatePolicy[T],
    *,
    logger: AuditLogger | None = None,
) -> DedupResult[T]:
    """Classify *new_records* against an index of *existing_records*.

    A new record is a duplicate if any existing record sharing its key
    satisfies the pairwise rule. New records are not deduplicated among
    themselves; run ``deduplicate`` on them first if that is needed.

    Parameters
    ----------
    new_records : Sequence[T]
        Candidate records (e.g. an import batch).
    existing_records : Sequence[T]
        Records already in the collection.
    policy : DuplicatePolicy[T]
        Key function and pairwise rule.
    logger : AuditLogger | None, optional
        Audit logger for observability events.

    Returns
    -------
    DedupResult[T]
        Partition of *new_records*, input order preserved.
    """
    start = time.perf_counter()

    if logger:
        logger.stage_started(MATCH_STAGE, expected_records=len(new_records))

    index = KeyIndex(policy, list(existing_records))
    result: DedupResult[T] = DedupResult()

    for record in new_records:
        key = policy.comparison_key(record)
        match = None
        reason = None
        for candidate in index.candidates(key):
            verdict = policy.compare(record, candidate)
            if verdict.is_duplicate:
                match = candidate
                reason = verdict.reason
                break

        if match is None:
            result.unique.append(record)
            continue

        result.duplicates.append(record)
        if logger and reason is not None:
            logger.duplicate_detected(
                rid=record.id,
                matched_rid=match.id,
                key=key,
                reason=reason.value,
            )

    if logger:
        logger.stage_finished(
            stage=MATCH_STAGE,
            duration_seconds=time.perf_counter() - start,
            counters={
                "records_in": len(new_records),
                "existing_records": len(existing_records),
                "existing_keys": len(index),
                "unique": len(result.unique),
                "duplicates": len(result.duplicates),
            },
        )

    return result


def get_duplicate_ids(
    records: Sequence[T],
    policy: DuplicatePolicy[T],
    *,
    logger: AuditLogger | None = None,
) -> list[str]:
    """Ids of the records ``deduplicate`` would classify as duplicates.

    Suited to a single bulk delete against storage.
    """
    return deduplicate(records, policy, logger=logger).duplicate_ids
