import json
from datetime import date
from pathlib import Path

from docscout.cli import build_shortlist_frame, main
from docscout.config import GitHubSourceConfig
from docscout.discovery.models import CandidateSummary, DiscoveryResult, HistoryRecord
from docscout.storage import JsonStateStore

from .utils import logger_to_stderr, make_app_config, patch_load_config


def _summary(name: str, stars: int) -> CandidateSummary:
    return CandidateSummary(name=name, full_name=f"acme/{name}", stars=stars, language="Python")


def _seed_store(base_dir: Path) -> JsonStateStore:
    store = JsonStateStore(base_dir / "data")
    store.write_candidates([_summary("alpha", 5000), _summary("beta", 2000), _summary("gamma", 600)])
    return store


def test_discover_prints_result(monkeypatch, capsys, tmp_path):
    config = make_app_config(tmp_path)
    patch_load_config(monkeypatch, config)
    seen: dict[str, object] = {}

    class _FakePipeline:
        def __init__(self, cfg, *, base_path):
            seen["config"] = cfg
            seen["base_path"] = base_path

        def run(self):
            return DiscoveryResult(created=True, task_dir=base_path_dir, candidate_count=4)

    base_path_dir = tmp_path / "intent" / "2025-03-14-alpha"
    monkeypatch.setattr("docscout.cli.DiscoveryPipeline", _FakePipeline)

    with logger_to_stderr():
        exit_code = main(["--config", str(tmp_path / "config.toml"), "discover"])

    assert exit_code == 0
    captured = capsys.readouterr()
    payload = json.loads(captured.out)
    assert payload == {"created": True, "task_dir": str(base_path_dir), "candidate_count": 4}
    assert seen["config"] is config
    assert seen["base_path"] == tmp_path
    assert "Total candidates: 4" in captured.err


def test_retry_prints_next_untried(monkeypatch, capsys, tmp_path):
    patch_load_config(monkeypatch, make_app_config(tmp_path))
    store = _seed_store(tmp_path)
    store.append_history(HistoryRecord(repo="acme/alpha", status="failed", timestamp="2025-03-13T00:00:00+00:00"))
    store.append_history(HistoryRecord(repo="acme/beta", status="pending", timestamp="2025-03-14T00:00:00+00:00"))

    exit_code = main(["--config", str(tmp_path / "config.toml"), "retry"])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["full_name"] == "acme/beta"
    assert payload["stars"] == 2000


def test_retry_exhausted_exits_one(monkeypatch, capsys, tmp_path):
    patch_load_config(monkeypatch, make_app_config(tmp_path))
    store = JsonStateStore(tmp_path / "data")
    store.write_candidates([_summary("alpha", 5000)])
    store.append_history(HistoryRecord(repo="acme/alpha", status="success", timestamp="2025-03-13T00:00:00+00:00"))

    with logger_to_stderr():
        exit_code = main(["--config", str(tmp_path / "config.toml"), "retry"])

    assert exit_code == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "No untried candidates" in captured.err


def test_retry_is_read_only(monkeypatch, tmp_path):
    patch_load_config(monkeypatch, make_app_config(tmp_path))
    store = _seed_store(tmp_path)
    before = store.candidates_path.read_bytes()

    main(["--config", str(tmp_path / "config.toml"), "retry"])

    assert store.candidates_path.read_bytes() == before
    assert not store.history_path.exists()


def test_record_success_appends_history(monkeypatch, tmp_path):
    patch_load_config(monkeypatch, make_app_config(tmp_path))

    exit_code = main(
        [
            "--config",
            str(tmp_path / "config.toml"),
            "record",
            "acme/alpha",
            "--status",
            "SUCCESS",
            "--url",
            "https://docsmith.aigne.io/discuss/docs/alpha",
        ]
    )

    assert exit_code == 0
    history = JsonStateStore(tmp_path / "data").read_history()
    assert len(history) == 1
    assert history[0].repo == "acme/alpha"
    assert history[0].status == "success"
    assert history[0].url == "https://docsmith.aigne.io/discuss/docs/alpha"
    assert not (tmp_path / "logs").exists()


def test_record_failure_writes_failure_log(monkeypatch, tmp_path):
    patch_load_config(monkeypatch, make_app_config(tmp_path))

    exit_code = main(
        [
            "--config",
            str(tmp_path / "config.toml"),
            "record",
            "acme/beta",
            "--status",
            "failed",
            "--phase",
            "3",
            "--error",
            "validation failed",
            "--duration",
            "95.5",
        ]
    )

    assert exit_code == 0
    history = JsonStateStore(tmp_path / "data").read_history()
    assert [(entry.status, entry.phase, entry.error) for entry in history] == [("failed", 3, "validation failed")]
    log_files = list((tmp_path / "logs" / "failures").glob("*.md"))
    assert len(log_files) == 1
    content = log_files[0].read_text(encoding="utf-8")
    assert "### acme/beta - Phase 3" in content
    assert "validation failed" in content


def test_record_rejects_unknown_status(monkeypatch, capsys, tmp_path):
    patch_load_config(monkeypatch, make_app_config(tmp_path))

    with logger_to_stderr():
        exit_code = main(["--config", str(tmp_path / "config.toml"), "record", "acme/alpha", "--status", "done"])

    assert exit_code == 2
    assert "Invalid status 'done'" in capsys.readouterr().err
    assert not (tmp_path / "data" / "history.json").exists()


def test_shortlist_json_includes_attempt_status(monkeypatch, capsys, tmp_path):
    patch_load_config(monkeypatch, make_app_config(tmp_path))
    store = _seed_store(tmp_path)
    store.append_history(HistoryRecord(repo="acme/beta", status="pending", timestamp="2025-03-13T00:00:00+00:00"))
    store.append_history(HistoryRecord(repo="acme/beta", status="failed", timestamp="2025-03-14T00:00:00+00:00"))

    exit_code = main(["--config", str(tmp_path / "config.toml"), "shortlist", "--format", "json"])

    assert exit_code == 0
    rows = json.loads(capsys.readouterr().out)
    assert [(row["rank"], row["full_name"], row["last_status"]) for row in rows] == [
        (1, "acme/alpha", "untried"),
        (2, "acme/beta", "failed"),
        (3, "acme/gamma", "untried"),
    ]


def test_shortlist_frame_empty_inputs():
    frame = build_shortlist_frame([], [])

    assert frame.is_empty()
    assert "last_status" in frame.columns


def test_status_reports_sections(monkeypatch, capsys, tmp_path):
    patch_load_config(monkeypatch, make_app_config(tmp_path))
    store = _seed_store(tmp_path)
    store.append_history(HistoryRecord(repo="acme/alpha", status="success", timestamp=date(2025, 3, 1).isoformat()))

    with logger_to_stderr():
        exit_code = main(["--config", str(tmp_path / "config.toml"), "status"])

    assert exit_code == 0
    captured = capsys.readouterr()
    assert "=== Policy ===" in captured.err
    assert "=== Repository Source ===" in captured.err
    assert "Token configured: False" in captured.err
    assert "History: 1 records (pending=0, success=1, failed=0)" in captured.err
    assert "Shortlist: 3 candidates" in captured.err


def test_no_command_logs_hint(monkeypatch, capsys, tmp_path):
    patch_load_config(monkeypatch, make_app_config(tmp_path))

    with logger_to_stderr():
        exit_code = main(["--config", str(tmp_path / "config.toml")])

    assert exit_code == 0
    assert "No command provided" in capsys.readouterr().err


def test_record_redacts_token_from_configured_env_variable(monkeypatch, tmp_path):
    monkeypatch.setenv("GH_PAT", "pat-live-value-42")
    config = make_app_config(tmp_path).model_copy(
        update={"source": GitHubSourceConfig(token="env:GH_PAT")}
    )
    patch_load_config(monkeypatch, config)

    exit_code = main(
        [
            "--config",
            str(tmp_path / "config.toml"),
            "record",
            "acme/beta",
            "--status",
            "failed",
            "--error",
            "push rejected for pat-live-value-42",
        ]
    )

    assert exit_code == 0
    history_text = (tmp_path / "data" / "history.json").read_text(encoding="utf-8")
    assert "pat-live-value-42" not in history_text
    assert "[REDACTED]" in history_text
    log_text = next((tmp_path / "logs" / "failures").glob("*.md")).read_text(encoding="utf-8")
    assert "pat-live-value-42" not in log_text
