"""Persistent state for discovery runs."""

from docscout.storage.store import JsonStateStore, read_json_array, write_json_atomic

__all__ = ["JsonStateStore", "read_json_array", "write_json_atomic"]
