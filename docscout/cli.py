"""Command line interface for docscout."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, NoReturn

import polars as pl
import typer
from loguru import logger

from .config import AppConfig, load_config
from .config.inspector import check_config, explain_config
from .config.utils import resolve_env_reference
from .discovery.models import HISTORY_STATUSES, CandidateSummary, HistoryRecord
from .discovery.pipeline import DiscoveryPaths, DiscoveryPipeline, resolve_paths
from .discovery.retry import next_unattempted_from_store
from .reporting import FailureLogger, record_outcome
from .security.redaction import RedactionConfig
from .storage import JsonStateStore

_log_handler_id: int | None = None


@dataclass(slots=True)
class CLIState:
    """Holds shared state between Typer commands."""

    config_path: Path
    _config: AppConfig | None = None

    def ensure_config(self) -> AppConfig:
        if self._config is None:
            logger.info("Loading configuration from {}", self.config_path)
            self._config = load_config(AppConfig, self.config_path)
            _configure_logging(self._config.logging_level)
        return self._config

    def base_path(self) -> Path:
        config = self.ensure_config()
        base_path = config.data_root
        if base_path is None:
            return self.config_path.parent
        if not base_path.is_absolute():
            return (self.config_path.parent / base_path).resolve()
        return base_path

    def paths(self) -> DiscoveryPaths:
        return resolve_paths(self.ensure_config(), self.base_path())

    def store(self) -> JsonStateStore:
        return JsonStateStore(self.paths().data_dir)


app = typer.Typer(help="Discover repositories with weak documentation and queue work orders")
config_app = typer.Typer(help="Validate and document configuration files")
app.add_typer(config_app, name="config")


def _configure_logging(level: str) -> None:
    global _log_handler_id
    if _log_handler_id is None:
        try:
            logger.remove(0)
        except ValueError:
            pass
    else:
        logger.remove(_log_handler_id)
    _log_handler_id = logger.add(lambda message: sys.stderr.write(message), level=level.upper())


def _default_config_path() -> Path:
    repo_root = Path(__file__).resolve().parents[1]
    return repo_root / "config" / "example.toml"


def _normalize_format(value: str) -> str:
    return value.lower()


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):  # pragma: no cover - defensive guard
        raise RuntimeError("CLI context is not initialised")
    return state


def _exit(code: int) -> NoReturn:
    raise typer.Exit(code)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    config: Path = typer.Option(
        _default_config_path(),
        help="Path to the TOML configuration file",
    ),
) -> None:
    """Initialise CLI state."""

    state = CLIState(config_path=config.resolve())
    ctx.obj = state

    if ctx.invoked_subcommand is None:
        state.ensure_config()
        logger.warning("No command provided. Try 'discover' or 'status'.")
        _exit(0)


@app.command(help="Run discovery and create a task bundle for the top candidate")
def discover(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    config = state.ensure_config()

    pipeline = DiscoveryPipeline(config, base_path=state.base_path())
    result = pipeline.run()

    if result.created:
        logger.info("Discovery complete; task created at {}", result.task_dir)
        logger.info("Total candidates: {}", result.candidate_count)
    else:
        logger.info("Discovery complete; no task created")
    print(json.dumps(result.to_dict(), ensure_ascii=False))


@app.command(help="Print the next shortlisted candidate without a finished attempt")
def retry(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    summary = next_unattempted_from_store(state.store())

    if summary is None:
        logger.info("No untried candidates left in the shortlist")
        _exit(1)

    logger.info("Next candidate: {} ({} stars)", summary.full_name, summary.stars)
    print(json.dumps(summary.to_dict(), ensure_ascii=False))


@app.command(help="Record the outcome of a downstream attempt")
def record(
    ctx: typer.Context,
    repo: str = typer.Argument(..., help="Repository full name (owner/name)"),
    status: str = typer.Option(
        ...,
        "--status",
        case_sensitive=False,
        help="Attempt status: pending, success or failed",
        callback=_normalize_format,
    ),
    url: str | None = typer.Option(None, help="Published documentation URL"),
    phase: int | None = typer.Option(None, help="Phase number the attempt reached"),
    error: str | None = typer.Option(None, help="Error message for failed attempts"),
    duration: float | None = typer.Option(None, help="Attempt duration in seconds"),
) -> None:
    if status not in HISTORY_STATUSES:
        logger.error("Invalid status '{}'; expected one of {}", status, ", ".join(HISTORY_STATUSES))
        _exit(2)

    state = _get_state(ctx)
    redaction = RedactionConfig.for_token(resolve_env_reference(state.ensure_config().source.token))
    record_outcome(
        state.store(),
        repo,
        status,  # type: ignore[arg-type]
        url=url,
        phase=phase,
        error=error,
        duration=duration,
        redaction=redaction,
    )

    if status == "failed":
        failure_logger = FailureLogger(state.paths().failure_log_dir, redaction=redaction)
        log_path = failure_logger.write(repo, phase or 0, error or "", duration or 0)
        if log_path is not None:
            logger.info("Failure logged to {}", log_path)


@app.command(help="Show the persisted shortlist with attempt status")
def shortlist(
    ctx: typer.Context,
    format: str = typer.Option(  # noqa: A002 - match CLI option name
        "text",
        "--format",
        case_sensitive=False,
        help="Output format: text or json",
        callback=_normalize_format,
    ),
) -> None:
    state = _get_state(ctx)
    store = state.store()
    frame = build_shortlist_frame(store.read_candidates(), store.read_history())

    if format == "json":
        print(json.dumps(frame.to_dicts(), indent=2, ensure_ascii=False))
        return

    if frame.is_empty():
        logger.info("Shortlist is empty")
        return
    with pl.Config(tbl_rows=-1, tbl_cols=-1):
        print(frame)


def build_shortlist_frame(summaries: list[CandidateSummary], history: list[HistoryRecord]) -> pl.DataFrame:
    """Join the shortlist with the latest recorded status of each repository."""

    candidate_schema = {
        "name": pl.String,
        "full_name": pl.String,
        "stars": pl.Int64,
        "language": pl.String,
        "readme_length": pl.Int64,
        "file_count": pl.Int64,
    }
    candidates = pl.DataFrame(
        [summary.to_dict() for summary in summaries],
        schema=candidate_schema,
    ).with_row_index("rank", offset=1)

    attempts = pl.DataFrame(
        [{"full_name": entry.repo, "last_status": entry.status} for entry in history],
        schema={"full_name": pl.String, "last_status": pl.String},
    ).unique(subset=["full_name"], keep="last", maintain_order=True)

    return (
        candidates.join(attempts, on="full_name", how="left")
        .with_columns(pl.col("last_status").fill_null("untried"))
        .sort("rank")
    )


@app.command(help="Show configuration and state summary")
def status(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    config = state.ensure_config()
    _report_system_status(config, state.paths(), state.store())


@config_app.command(help="Validate the configuration file")
def check(
    ctx: typer.Context,
    format: str = typer.Option(  # noqa: A002 - match CLI option name
        "text",
        "--format",
        case_sensitive=False,
        help="Output format for validation results",
        callback=_normalize_format,
    ),
) -> None:
    state = _get_state(ctx)
    result, exit_code, _ = check_config(state.config_path)

    if format == "json":
        print(json.dumps(result, indent=2, ensure_ascii=False, default=str))
        _exit(exit_code)

    if result["status"] == "ok":
        logger.info("Configuration OK: {}", result["config_path"])
        for warning in result["warnings"]:
            logger.warning(warning)
    else:
        error: dict[str, Any] = result["error"]
        logger.error(
            "Configuration error ({}) for {}: {}",
            error["type"],
            result["config_path"],
            error["message"],
        )
        for detail in error.get("details", []):
            location = detail["loc"] or "<root>"
            logger.error("  - {}: {} ({})", location, detail["message"], detail["type"])

    _exit(exit_code)


@config_app.command(help="Describe available configuration fields")
def explain(
    format: str = typer.Option(  # noqa: A002 - match CLI option name
        "text",
        "--format",
        case_sensitive=False,
        help="Output format for configuration schema",
        callback=_normalize_format,
    ),
) -> None:
    fields = explain_config()

    if format == "json":
        print(json.dumps({"fields": fields}, indent=2, ensure_ascii=False, default=str))
        return

    logger.info("Configuration schema ({} fields):", len(fields))
    for field in fields:
        default_value = field["default"]
        if isinstance(default_value, (dict, list)):
            default_repr = json.dumps(default_value, ensure_ascii=False, default=str)
        elif default_value is None:
            default_repr = "None"
        else:
            default_repr = str(default_value)
        logger.info(
            "  - {name}: type={type}, required={required}, default={default}, description={description}",
            name=field["name"],
            type=field["type"],
            required="yes" if field["required"] else "no",
            default=default_repr,
            description=field["description"] or "(no description)",
        )


def _report_system_status(config: AppConfig, paths: DiscoveryPaths, store: JsonStateStore) -> None:
    """Log configuration and persisted state."""
    logger.info("=== Policy ===")
    policy = config.policy
    logger.info("Min stars: {}, max files: {}", policy.min_stars, policy.max_files)
    logger.info("Languages: {}", ", ".join(policy.languages) or "none")
    logger.info("Publish target: {}", policy.publish_target_url)
    logger.info("Exclusions: {}", len(policy.exclusions))

    logger.info("\n=== Repository Source ===")
    logger.info("API: {}", config.source.api_base_url)
    logger.info("Token configured: {}", resolve_env_reference(config.source.token) is not None)
    logger.info("Recency window: {} days, page size: {}", config.source.recency_days, config.source.per_page)

    logger.info("\n=== Storage ===")
    missing = set(paths.missing())
    logger.info("Data dir: {} (exists={})", paths.data_dir, "data_dir" not in missing)
    logger.info("Tasks dir: {} (exists={})", paths.tasks_dir, "tasks_dir" not in missing)
    logger.info("Failure logs: {}", paths.failure_log_dir)

    history = store.read_history()
    counts = {status: 0 for status in HISTORY_STATUSES}
    for entry in history:
        counts[entry.status] = counts.get(entry.status, 0) + 1
    logger.info(
        "History: {} records (pending={}, success={}, failed={})",
        len(history),
        counts["pending"],
        counts["success"],
        counts["failed"],
    )
    logger.info("Shortlist: {} candidates", len(store.read_candidates()))


def main(argv: list[str] | None = None) -> int:
    """Entry point compatible with setuptools console scripts."""

    try:
        result = app(args=argv, standalone_mode=False)
    except typer.Exit as exc:  # pragma: no cover - Typer translates exit codes
        return exc.exit_code
    if isinstance(result, int):
        return result
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
