"""Duplicate detection engine.

This package provides configuration types, the per-kind duplicate
policies and the generic detector/matcher that runs them.
"""

from pimdedupe.engine.config import (
    DEFAULT_DATE_TOLERANCE,
    DuplicateDetectionConfig,
    EventDuplicateConfig,
    TaskDuplicateConfig,
    resolve_config,
    resolve_event_config,
    resolve_task_config,
)
from pimdedupe.engine.detector import (
    DedupResult,
    deduplicate,
    find_duplicates_against_existing,
    get_duplicate_ids,
)
from pimdedupe.engine.policies import (
    POLICY_REGISTRY,
    RECORD_TYPES,
    ContactPolicy,
    DuplicatePolicy,
    EventPolicy,
    KeyIndex,
    TaskPolicy,
    create_policy,
)

__all__ = [
    # Config
    "DEFAULT_DATE_TOLERANCE",
    "DuplicateDetectionConfig",
    "TaskDuplicateConfig",
    "EventDuplicateConfig",
    "resolve_config",
    "resolve_task_config",
    "resolve_event_config",
    # Policies
    "DuplicatePolicy",
    "ContactPolicy",
    "TaskPolicy",
    "EventPolicy",
    "KeyIndex",
    "POLICY_REGISTRY",
    "RECORD_TYPES",
    "create_policy",
    # Detector
    "DedupResult",
    "deduplicate",
    "find_duplicates_against_existing",
    "get_duplicate_ids",
]
