"""High-level orchestration for a discovery run."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from loguru import logger

from docscout.config import AppConfig
from docscout.config.utils import resolve_env_reference
from docscout.security.redaction import RedactionConfig, redact
from docscout.storage.store import JsonStateStore
from docscout.tasks.materializer import TaskMaterializer

from .client import GitHubRepositoryClient, RepositorySource
from .enrichment import enrich
from .filters import select_candidates
from .models import Candidate, DiscoveryResult, HistoryRecord, RawRepo
from .prober import PublicationCache, PublicationChecker, PublicationProber


@dataclass(slots=True)
class DiscoveryPaths:
    """Resolved filesystem locations used by the discovery pipeline."""

    data_dir: Path
    tasks_dir: Path
    failure_log_dir: Path

    def missing(self) -> tuple[str, ...]:
        missing: list[str] = []
        if not self.data_dir.exists():
            missing.append("data_dir")
        if not self.tasks_dir.exists():
            missing.append("tasks_dir")
        return tuple(missing)


def resolve_paths(config: AppConfig, base_path: Path | None = None) -> DiscoveryPaths:
    storage = config.storage
    return DiscoveryPaths(
        data_dir=config.resolve_path(storage.data_dir, base_path),
        tasks_dir=config.resolve_path(storage.tasks_dir, base_path),
        failure_log_dir=config.resolve_path(storage.failure_log_dir, base_path),
    )


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DiscoveryPipeline:
    """Fetch, enrich, probe, filter, persist and materialize the top candidate.

    Candidates are processed strictly one after another; the shortlist and
    history are written only after the full filter pass.
    """

    def __init__(
        self,
        config: AppConfig,
        *,
        base_path: Path | None = None,
        source: RepositorySource | None = None,
        prober: PublicationChecker | None = None,
        store: JsonStateStore | None = None,
        materializer: TaskMaterializer | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._config = config
        self._policy = config.policy
        self._clock = clock
        self.paths = resolve_paths(config, base_path)

        token = resolve_env_reference(config.source.token)
        self._redaction = RedactionConfig.for_token(token)

        self._source = source or GitHubRepositoryClient(
            config.source, token=token or "", redaction=self._redaction
        )
        self._prober = prober or PublicationProber(
            config.publication, cache=PublicationCache(), redaction=self._redaction
        )
        self._store = store or JsonStateStore(self.paths.data_dir)
        self._materializer = materializer or TaskMaterializer(
            self.paths.tasks_dir,
            policy=self._policy,
            redaction=self._redaction,
            clock=clock,
        )

    # ------------------------------------------------------------------
    def run(self) -> DiscoveryResult:
        """Execute one discovery run. Never raises."""
        try:
            return self._run()
        except Exception as exc:
            logger.error("Discovery run aborted: {}", redact(str(exc), self._redaction))
            return DiscoveryResult(created=False, task_dir=None, candidate_count=0)

    def _run(self) -> DiscoveryResult:
        history = self._store.read_history()

        logger.info("Fetching recently pushed repositories with >= {} stars", self._policy.min_stars)
        repos = self._source.list_recent_popular(self._policy.min_stars)
        logger.info("Found {} repositories", len(repos))
        if not repos:
            logger.info("No repositories found; nothing to do")
            return DiscoveryResult(created=False, task_dir=None, candidate_count=0)

        logger.info("Enriching repository data")
        candidates = [self._enrich(repo) for repo in repos]

        logger.info("Checking publication status")
        publication_flags: dict[str, bool] = {}
        for candidate in candidates:
            publication_flags[candidate.name] = self._prober.is_published(candidate.name)

        shortlist = select_candidates(candidates, self._policy, history, publication_flags)
        logger.info("{} repositories pass all filters", len(shortlist))
        self._store.write_candidates(candidate.summary() for candidate in shortlist)

        if not shortlist:
            logger.info("No candidates passed all filters; no task created")
            return DiscoveryResult(created=False, task_dir=None, candidate_count=0)

        top = shortlist[0]
        logger.info("Top candidate: {} ({} stars)", top.full_name, top.stars)
        return self._materialize(top, len(shortlist))

    def _enrich(self, repo: RawRepo) -> Candidate:
        readme = self._source.fetch_readme_text(repo.owner, repo.name)
        paths = self._source.fetch_file_tree(repo.owner, repo.name, repo.default_branch)
        return enrich(repo, readme, paths)

    def _materialize(self, top: Candidate, candidate_count: int) -> DiscoveryResult:
        readme = self._source.fetch_readme_text(top.owner, top.name)
        task_dir = self._materializer.task_dir_for(top)
        if not self._materializer.create_task(top, readme):
            logger.info("No task created for {}", top.name)
            return DiscoveryResult(created=False, task_dir=None, candidate_count=candidate_count)

        self._store.append_history(
            HistoryRecord(repo=top.full_name, status="pending", timestamp=self._clock().isoformat())
        )
        logger.info("Task created at {}", task_dir)
        return DiscoveryResult(created=True, task_dir=task_dir, candidate_count=candidate_count)


__all__ = ["DiscoveryPaths", "DiscoveryPipeline", "resolve_paths"]
