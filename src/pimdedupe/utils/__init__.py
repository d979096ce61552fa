"""Common utility functions for pimdedupe."""

from pimdedupe.utils.timestamps import get_iso_timestamp

__all__ = ["get_iso_timestamp"]
