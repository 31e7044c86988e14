"""Eligibility policy applied to discovered repositories."""

from __future__ import annotations

from pydantic import Field

from .base import BaseConfig


class PolicyConfig(BaseConfig):
    """Thresholds and lists that decide which repositories are eligible."""

    min_stars: int = Field(500, ge=0, description="Minimum stargazer count (inclusive)")
    max_files: int = Field(750, ge=0, description="Maximum number of files in the repository (inclusive)")
    languages: list[str] = Field(
        default_factory=lambda: ["en"],
        description="Target documentation locales, in priority order",
    )
    publish_target_url: str = Field(
        "https://docsmith.aigne.io",
        description="Site the generated documentation is published to",
    )
    exclusions: list[str] = Field(
        default_factory=list,
        description="Repository full names (owner/name) that are never selected",
    )

    def excluded_names(self) -> frozenset[str]:
        """Exclusions case-folded for comparison against ``full_name``."""
        return frozenset(name.lower() for name in self.exclusions)


__all__ = ["PolicyConfig"]
