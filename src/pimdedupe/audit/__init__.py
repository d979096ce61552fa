"""Audit logging subsystem for pimdedupe.

Main Components
---------------
- AuditLogger: JSONL event logger
- generate_run_id: run identifier for a logger session
"""

from pimdedupe.audit.helpers import generate_run_id, get_package_version, parse_iso_timestamp
from pimdedupe.audit.logger import AuditLogger
from pimdedupe.audit.models import LogEvent
from pimdedupe.utils import get_iso_timestamp

__all__ = [
    "AuditLogger",
    "LogEvent",
    "generate_run_id",
    "get_package_version",
    "get_iso_timestamp",
    "parse_iso_timestamp",
]
