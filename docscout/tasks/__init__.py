"""Task bundle generation."""

from __future__ import annotations

from .materializer import TaskMaterializer, create_task, sanitize_dir_name
from .templates import BundleTemplates, PLAN_PHASES

__all__ = ["BundleTemplates", "PLAN_PHASES", "TaskMaterializer", "create_task", "sanitize_dir_name"]
