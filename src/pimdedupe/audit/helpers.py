"""Helper utilities for audit logging.

Audit-specific utility functions: run ID generation and package version.

For timestamp utilities, see pimdedupe.utils.
"""

import importlib.metadata
import secrets
from datetime import UTC, datetime

__all__ = [
    "generate_run_id",
    "get_package_version",
    "parse_iso_timestamp",
]


def generate_run_id() -> str:
    """Generate unique run identifier.

    Returns
    -------
    str
        Run ID in format: ISO8601_timestamp__random_suffix.
    """
    timestamp = datetime.now(UTC).isoformat().replace("+00:00", "Z")
    suffix = secrets.token_hex(4)
    return f"{timestamp}__{suffix}"


def parse_iso_timestamp(iso_str: str) -> datetime:
    """Parse ISO8601 timestamp string to timezone-aware datetime.

    Handles both 'Z' and '+00:00' UTC suffixes.
    """
    return datetime.fromisoformat(iso_str.replace("Z", "+00:00"))


def get_package_version() -> str:
    """Get pimdedupe package version, or "unknown" when not installed."""
    try:
        return importlib.metadata.version("pimdedupe")
    except importlib.metadata.PackageNotFoundError:
        return "unknown"
