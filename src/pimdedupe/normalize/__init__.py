"""Normalization and comparison key generation."""

from pimdedupe.normalize.keys import (
    ID_PREFIX,
    KEY_SEPARATOR,
    NO_DATE_PART,
    UID_PREFIX,
    contact_key,
    date_bucket,
    event_key,
    task_key,
)
from pimdedupe.normalize.text import normalize_phone, normalize_string

__all__ = [
    # Text
    "normalize_string",
    "normalize_phone",
    # Keys
    "contact_key",
    "task_key",
    "event_key",
    "date_bucket",
    "KEY_SEPARATOR",
    "UID_PREFIX",
    "ID_PREFIX",
    "NO_DATE_PART",
]
