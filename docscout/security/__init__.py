"""Security helpers."""

from docscout.security.redaction import REDACTION_MARKER, RedactionConfig, redact

__all__ = ["REDACTION_MARKER", "RedactionConfig", "redact"]
