"""Record downstream outcomes: history entries and the daily failure log."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from loguru import logger

from docscout.discovery.models import HistoryRecord, HistoryStatus
from docscout.security.redaction import RedactionConfig, redact
from docscout.storage.store import JsonStateStore


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class FailureLogger:
    """Append Markdown entries to ``{logs_dir}/{YYYY-MM-DD}.md``."""

    def __init__(
        self,
        logs_dir: Path,
        *,
        redaction: RedactionConfig | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.logs_dir = Path(logs_dir)
        self.redaction = redaction
        self._clock = clock

    def log_path(self) -> Path:
        return self.logs_dir / f"{self._clock().date().isoformat()}.md"

    def write(self, repo: str, phase: int, error: str, duration_seconds: float) -> Path | None:
        """Append one failure entry; returns the log path, or ``None`` if writing failed."""
        now = self._clock()
        day = now.date().isoformat()
        path = self.log_path()
        entry = (
            "\n---\n\n"
            f"### {repo} - Phase {phase}\n\n"
            f"- **Timestamp:** {now.isoformat()}\n"
            f"- **Phase:** {phase}\n"
            f"- **Duration:** {duration_seconds}s\n"
            "- **Error:**\n\n"
            "```\n"
            f"{redact(error, self.redaction)}\n"
            "```\n\n"
        )
        try:
            self.logs_dir.mkdir(parents=True, exist_ok=True)
            if path.exists():
                with path.open("a", encoding="utf-8") as handle:
                    handle.write(entry)
            else:
                header = f"# Failure Log: {day}\n\nDaily documentation generation failures.\n"
                path.write_text(header + entry, encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not write failure log {}: {}", path, exc)
            return None
        return path


def record_outcome(
    store: JsonStateStore,
    repo: str,
    status: HistoryStatus,
    *,
    url: str | None = None,
    phase: int | None = None,
    error: str | None = None,
    duration: float | None = None,
    redaction: RedactionConfig | None = None,
    clock: Callable[[], datetime] = _utc_now,
) -> HistoryRecord:
    """Append an outcome to the history; error text is redacted first."""
    record = HistoryRecord(
        repo=repo,
        status=status,
        timestamp=clock().isoformat(),
        url=url,
        phase=phase,
        error=redact(error, redaction) if error else error,
        duration=duration,
    )
    store.append_history(record)
    logger.info("Recorded {} for {}", status, repo)
    return record


__all__ = ["FailureLogger", "record_outcome"]
