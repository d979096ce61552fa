"""Comparison key generation for duplicate bucketing.

Keys bucket records so grouping is a map lookup instead of an O(n²)
pairwise scan. Equal keys only make two records *candidates*; the
pairwise rule still has to confirm them. Records with different keys are
never compared.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from pimdedupe.models.records import ContactRecord, EventRecord, TaskRecord
from pimdedupe.normalize.text import normalize_string

if TYPE_CHECKING:
    from pimdedupe.engine.config import (
        DuplicateDetectionConfig,
        EventDuplicateConfig,
        TaskDuplicateConfig,
    )

KEY_SEPARATOR = "|"
UID_PREFIX = "uid:"
ID_PREFIX = "id:"
NO_DATE_PART = "no-date"


def contact_key(record: ContactRecord, config: DuplicateDetectionConfig) -> str:
    """Generate the comparison key for a contact.

    Parameters
    ----------
    record : ContactRecord
        Contact to key.
    config : DuplicateDetectionConfig
        Active signals.

    Returns
    -------
    str
        ``uid:<uid>`` when the uid is usable, otherwise the normalized
        name and primary email joined by ``|``, falling back to
        ``id:<id>`` when neither contributes.
    """
    # uid is canonical in its source system: kept raw
    if config.use_uid and record.uid:
        return f"{UID_PREFIX}{record.uid}"

    parts: list[str] = []

    if config.use_name:
        parts.append(normalize_string(record.display_name))

    if config.use_email:
        primary = record.primary_email
        if primary:
            parts.append(normalize_string(primary))

    return KEY_SEPARATOR.join(parts) or f"{ID_PREFIX}{record.id}"


def task_key(record: TaskRecord, config: TaskDuplicateConfig) -> str:
    """Generate the comparison key for a task.

    Parameters
    ----------
    record : TaskRecord
        Task to key.
    config : TaskDuplicateConfig
        Active signals and date tolerance.

    Returns
    -------
    str
        ``uid:<uid>`` when the uid is usable, otherwise the normalized
        title (if enabled) and the date bucket (or ``no-date``).
    """
    if config.use_uid and record.uid:
        return f"{UID_PREFIX}{record.uid}"

    parts: list[str] = []

    if config.use_title:
        parts.append(normalize_string(record.title))

    date = record.effective_date
    if date is not None:
        parts.append(str(date_bucket(date.timestamp(), config.tolerance_ms)))
    else:
        parts.append(NO_DATE_PART)

    return KEY_SEPARATOR.join(parts)


def event_key(record: EventRecord, config: EventDuplicateConfig) -> str:
    """Generate the comparison key for a calendar event.

    ``uid:<uid>`` when the uid is usable, otherwise the normalized title
    (if enabled) and the start-date bucket. End date and location are
    left to the pairwise rule.
    """
    if config.use_uid and record.uid:
        return f"{UID_PREFIX}{record.uid}"

    parts: list[str] = []

    if config.use_title:
        parts.append(normalize_string(record.title))

    parts.append(str(date_bucket(record.start_date.timestamp(), config.tolerance_ms)))

    return KEY_SEPARATOR.join(parts)


def date_bucket(epoch_seconds: float, tolerance_ms: int) -> int:
    """Map a timestamp onto a tolerance-wide bucket index.

    Parameters
    ----------
    epoch_seconds : float
        POSIX timestamp.
    tolerance_ms : int
        Bucket width in milliseconds (> 0).

    Returns
    -------
    int
        ``floor(epoch_ms / tolerance_ms)``.
    """
    epoch_ms = round(epoch_seconds * 1000)
    return math.floor(epoch_ms / tolerance_ms)
