"""JSON-backed persistence for attempt history and the candidate shortlist."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Callable, Iterable, TypeVar

from loguru import logger

from docscout.discovery.models import CandidateSummary, HistoryRecord

HISTORY_FILENAME = "history.json"
CANDIDATES_FILENAME = "candidates.json"
_TMP_SUFFIX = ".tmp"

T = TypeVar("T")


def read_json_array(path: Path) -> list[dict[str, Any]]:
    """Return the JSON objects stored in ``path``.

    Missing, unreadable or malformed files yield an empty list so that a
    damaged state file never blocks a run. Array items that are not objects
    are dropped.
    """

    if not path.exists():
        return []
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable state file {}: {}", path, exc)
        return []
    if not isinstance(payload, list):
        logger.warning("Ignoring state file {}: expected a JSON array, got {}", path, type(payload).__name__)
        return []
    return [item for item in payload if isinstance(item, dict)]


def write_json_atomic(path: Path, payload: Any) -> None:
    """Write ``payload`` as JSON, replacing ``path`` in a single rename.

    Readers observe either the previous complete file or the new one, never a
    partially written target.
    """

    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(path.name + _TMP_SUFFIX)
    try:
        with tmp_path.open("w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2, ensure_ascii=False)
            handle.write("\n")
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def _parse_rows(path: Path, parse: Callable[[dict[str, Any]], T]) -> list[T]:
    """Parse each object in ``path``, skipping entries with unusable field values."""
    parsed: list[T] = []
    for index, item in enumerate(read_json_array(path)):
        try:
            parsed.append(parse(item))
        except (TypeError, ValueError) as exc:
            logger.warning("Skipping malformed entry {} in {}: {}", index, path, exc)
    return parsed


class JsonStateStore:
    """Durable home of ``history.json`` and ``candidates.json``."""

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)
        self.history_path = self.data_dir / HISTORY_FILENAME
        self.candidates_path = self.data_dir / CANDIDATES_FILENAME

    # ------------------------------------------------------------------
    def read_history(self) -> list[HistoryRecord]:
        return _parse_rows(self.history_path, HistoryRecord.from_dict)

    def write_history(self, records: Iterable[HistoryRecord]) -> None:
        rows = [record.to_dict() for record in records]
        write_json_atomic(self.history_path, rows)
        logger.debug("Wrote {} history records to {}", len(rows), self.history_path)

    def append_history(self, record: HistoryRecord) -> list[HistoryRecord]:
        """Append ``record`` and return the resulting history.

        Existing entries are never rewritten; a corrupt history file restarts
        as an empty array.
        """
        history = self.read_history()
        history.append(record)
        self.write_history(history)
        return history

    # ------------------------------------------------------------------
    def read_candidates(self) -> list[CandidateSummary]:
        return _parse_rows(self.candidates_path, CandidateSummary.from_dict)

    def write_candidates(self, summaries: Iterable[CandidateSummary]) -> None:
        rows = [summary.to_dict() for summary in summaries]
        write_json_atomic(self.candidates_path, rows)
        logger.debug("Wrote {} candidates to {}", len(rows), self.candidates_path)


__all__ = [
    "CANDIDATES_FILENAME",
    "HISTORY_FILENAME",
    "JsonStateStore",
    "read_json_array",
    "write_json_atomic",
]
