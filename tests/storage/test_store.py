from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from docscout.discovery.models import CandidateSummary, HistoryRecord
from docscout.storage import JsonStateStore, read_json_array, write_json_atomic


def _record(repo: str, status: str = "pending", **extra: object) -> HistoryRecord:
    return HistoryRecord(repo=repo, status=status, timestamp="2025-03-14T09:30:00+00:00", **extra)  # type: ignore[arg-type]


def test_missing_files_read_as_empty(tmp_path: Path) -> None:
    store = JsonStateStore(tmp_path / "data")

    assert store.read_history() == []
    assert store.read_candidates() == []


@pytest.mark.parametrize("content", ["{broken", '{"repo": "acme/a"}', "", "\u0000\u0001"])
def test_unparsable_or_non_array_history_reads_as_empty(tmp_path: Path, content: str) -> None:
    store = JsonStateStore(tmp_path)
    store.history_path.write_text(content, encoding="utf-8")

    assert store.read_history() == []


def test_non_object_items_are_skipped(tmp_path: Path) -> None:
    path = tmp_path / "history.json"
    path.write_text(json.dumps([1, "x", {"repo": "acme/a", "status": "success", "timestamp": "t"}]), encoding="utf-8")

    assert read_json_array(path) == [{"repo": "acme/a", "status": "success", "timestamp": "t"}]


def test_write_candidates_replaces_wholesale(tmp_path: Path) -> None:
    store = JsonStateStore(tmp_path)
    store.write_candidates([CandidateSummary(name="a", full_name="acme/a", stars=10)])
    store.write_candidates(
        [CandidateSummary(name="b", full_name="acme/b", stars=20, language="Go", readme_length=5, file_count=2)]
    )

    payload = json.loads(store.candidates_path.read_text(encoding="utf-8"))

    assert payload == [
        {"name": "b", "full_name": "acme/b", "stars": 20, "language": "Go", "readme_length": 5, "file_count": 2}
    ]


def test_append_history_keeps_existing_entries(tmp_path: Path) -> None:
    store = JsonStateStore(tmp_path)
    store.history_path.write_text(
        json.dumps([{"repo": "acme/a", "status": "failed", "timestamp": "t0", "error": "boom", "attempt_id": 7}]),
        encoding="utf-8",
    )

    history = store.append_history(_record("acme/a", "success", url="https://docs.example.com/a"))

    payload = json.loads(store.history_path.read_text(encoding="utf-8"))
    assert len(history) == 2
    assert payload[0] == {"repo": "acme/a", "status": "failed", "timestamp": "t0", "error": "boom", "attempt_id": 7}
    assert payload[1] == {
        "repo": "acme/a",
        "status": "success",
        "timestamp": "2025-03-14T09:30:00+00:00",
        "url": "https://docs.example.com/a",
    }


def test_append_to_corrupt_history_starts_fresh(tmp_path: Path) -> None:
    store = JsonStateStore(tmp_path)
    store.history_path.write_text("{{{ definitely not json", encoding="utf-8")

    store.append_history(_record("acme/new"))

    payload = json.loads(store.history_path.read_text(encoding="utf-8"))
    assert payload == [{"repo": "acme/new", "status": "pending", "timestamp": "2025-03-14T09:30:00+00:00"}]


def test_atomic_write_goes_through_temp_file_and_rename(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    target = tmp_path / "candidates.json"
    target.write_text("[]", encoding="utf-8")
    observed: list[tuple[str, str, str]] = []
    real_replace = os.replace

    def _spy_replace(src: str | os.PathLike[str], dst: str | os.PathLike[str]) -> None:
        # At rename time the target still holds the previous complete version.
        observed.append((Path(src).name, Path(dst).name, Path(dst).read_text(encoding="utf-8")))
        json.loads(Path(src).read_text(encoding="utf-8"))
        real_replace(src, dst)

    monkeypatch.setattr("docscout.storage.store.os.replace", _spy_replace)

    write_json_atomic(target, [{"full_name": "acme/a"}])

    assert observed == [("candidates.json.tmp", "candidates.json", "[]")]
    assert json.loads(target.read_text(encoding="utf-8")) == [{"full_name": "acme/a"}]
    assert not (tmp_path / "candidates.json.tmp").exists()


def test_interrupted_write_leaves_previous_version(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    store = JsonStateStore(tmp_path)
    store.write_history([_record("acme/a")])
    before = store.history_path.read_text(encoding="utf-8")

    def _crash(src: object, dst: object) -> None:
        raise OSError("simulated crash before rename")

    monkeypatch.setattr("docscout.storage.store.os.replace", _crash)

    with pytest.raises(OSError):
        store.append_history(_record("acme/b"))

    assert store.history_path.read_text(encoding="utf-8") == before
    assert not store.history_path.with_name("history.json.tmp").exists()


def test_write_creates_data_directory(tmp_path: Path) -> None:
    store = JsonStateStore(tmp_path / "nested" / "data")

    store.write_history([])

    assert json.loads(store.history_path.read_text(encoding="utf-8")) == []


def test_wrongly_typed_candidate_entries_are_skipped(tmp_path: Path) -> None:
    store = JsonStateStore(tmp_path)
    store.candidates_path.write_text(
        json.dumps(
            [
                {"name": "a", "full_name": "o/a", "stars": "1.2k"},
                {"name": "b", "full_name": "o/b", "stars": ["many"]},
                {"name": "c", "full_name": "o/c", "stars": 900, "language": 3},
            ]
        ),
        encoding="utf-8",
    )

    summaries = store.read_candidates()

    assert [summary.full_name for summary in summaries] == ["o/c"]
    assert summaries[0].language == "3"


def test_non_string_history_status_does_not_break_reads(tmp_path: Path) -> None:
    store = JsonStateStore(tmp_path)
    store.history_path.write_text(
        json.dumps([{"repo": "o/a", "status": ["failed"]}, {"repo": "o/b", "status": "success"}]),
        encoding="utf-8",
    )

    history = store.read_history()

    assert [record.repo for record in history] == ["o/a", "o/b"]
    assert all(isinstance(record.status, str) for record in history)
