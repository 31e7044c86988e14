"""Outcome recording for downstream attempts."""

from docscout.reporting.failures import FailureLogger, record_outcome

__all__ = ["FailureLogger", "record_outcome"]
