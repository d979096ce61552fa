"""Collection-level merge, clean, detect and import planning."""

from pimdedupe.merge.models import CleanOutcome, DetectionReport, ImportPlan, MergeOutcome
from pimdedupe.merge.processor import (
    clean_duplicates,
    detect_duplicates,
    merge_collections,
    plan_import,
)

__all__ = [
    # Models
    "MergeOutcome",
    "CleanOutcome",
    "DetectionReport",
    "ImportPlan",
    # Operations
    "merge_collections",
    "clean_duplicates",
    "detect_duplicates",
    "plan_import",
]
