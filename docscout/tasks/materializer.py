"""Create on-disk task bundles for the downstream documentation pipeline."""

from __future__ import annotations

import re
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from jinja2 import TemplateError
from loguru import logger

from docscout.config.policy import PolicyConfig
from docscout.discovery.models import Candidate
from docscout.security.redaction import RedactionConfig, redact

from .templates import (
    INTENT_FILENAME,
    PLAN_FILENAME,
    PLAN_PHASES,
    STATUS_FILENAME,
    BundleTemplates,
    locale_label,
)

README_EXCERPT_LIMIT = 2000
_UNSAFE_CHARS = re.compile(r'[/\\:*?"<>|]')


def sanitize_dir_name(name: str) -> str:
    """Reduce a repository name to a single, traversal-free path segment."""
    cleaned = name.replace("..", "")
    cleaned = _UNSAFE_CHARS.sub("-", cleaned)
    return cleaned.strip("-").lower()


def readme_excerpt(readme: str, limit: int = README_EXCERPT_LIMIT) -> str:
    if len(readme) > limit:
        return readme[:limit] + "\n\n..."
    return readme


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TaskMaterializer:
    """Write INTENT.md, plan.md and TASK.yaml into ``{date}-{name}`` under ``tasks_root``.

    A bundle is created at most once per repository per day: when the
    directory already exists it is left untouched.
    """

    def __init__(
        self,
        tasks_root: Path,
        *,
        policy: PolicyConfig | None = None,
        templates: BundleTemplates | None = None,
        redaction: RedactionConfig | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.tasks_root = Path(tasks_root)
        self.policy = policy or PolicyConfig()
        self.templates = templates or BundleTemplates()
        self.redaction = redaction
        self._clock = clock

    def task_dir_for(self, candidate: Candidate) -> Path:
        day = self._clock().date().isoformat()
        return self.tasks_root / f"{day}-{sanitize_dir_name(candidate.name)}"

    def create_task(self, candidate: Candidate, readme_text: str) -> bool:
        """Create the bundle for ``candidate``; ``False`` when it exists or writing fails."""
        task_dir = self.task_dir_for(candidate)
        if task_dir.exists():
            logger.info("Task directory {} already exists; leaving it untouched", task_dir)
            return False

        # Without an explicit config, read the live token at call time.
        redaction = self.redaction or RedactionConfig.default()
        documents = self._render(candidate, readme_text, redaction)

        try:
            task_dir.mkdir(parents=True, exist_ok=False)
        except FileExistsError:
            # Another writer created it after the check above; the bundle is theirs.
            logger.info("Task directory {} appeared concurrently; leaving it untouched", task_dir)
            return False
        except OSError as exc:
            logger.error("Failed to create task directory {}: {}", task_dir, redact(str(exc), redaction))
            return False

        try:
            for filename, content in documents.items():
                (task_dir / filename).write_text(content, encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to create task bundle {}: {}", task_dir, redact(str(exc), redaction))
            shutil.rmtree(task_dir, ignore_errors=True)
            return False

        logger.info("Created task bundle {}", task_dir)
        return True

    def _render(self, candidate: Candidate, readme_text: str, redaction: RedactionConfig) -> dict[str, str]:
        locales = [locale_label(code) for code in self.policy.languages]
        context = {
            "candidate": candidate,
            "stars": f"{candidate.stars:,}",
            "description": redact(candidate.description, redaction),
            "readme_excerpt": readme_excerpt(redact(readme_text, redaction)),
            "locales": locales,
            "secondary_locales": locales[1:],
            "publish_target_url": self.policy.publish_target_url,
            "phase_count": len(PLAN_PHASES),
            "updated": self._clock().isoformat(),
        }
        try:
            return {
                INTENT_FILENAME: self.templates.intent.render(**context),
                PLAN_FILENAME: self.templates.plan.render(**context),
                STATUS_FILENAME: self.templates.status.render(**context),
            }
        except TemplateError as exc:
            raise RuntimeError(f"Task bundle templates failed to render: {exc}") from exc


def create_task(
    candidate: Candidate,
    tasks_root: Path,
    readme_text: str,
    *,
    policy: PolicyConfig | None = None,
) -> bool:
    """Convenience wrapper around :class:`TaskMaterializer`."""
    return TaskMaterializer(tasks_root, policy=policy).create_task(candidate, readme_text)


__all__ = [
    "README_EXCERPT_LIMIT",
    "TaskMaterializer",
    "create_task",
    "readme_excerpt",
    "sanitize_dir_name",
]
