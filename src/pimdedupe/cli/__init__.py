"""Command-line interface for pimdedupe."""
