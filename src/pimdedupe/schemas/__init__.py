"""JSON Schemas bundled with pimdedupe (record payloads and audit events)."""
