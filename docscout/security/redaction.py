"""Credential redaction for externally sourced text."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field

REDACTION_MARKER = "[REDACTED]"
TOKEN_ENV_VAR = "GITHUB_TOKEN"


@dataclass
class RedactionConfig:
    """Literal secrets and credential patterns to scrub from text."""

    secrets: list[str] = field(default_factory=list)
    patterns: list[re.Pattern[str]] = field(default_factory=list)
    placeholder: str = REDACTION_MARKER

    @classmethod
    def default(cls) -> "RedactionConfig":
        """The live GitHub token (if any) plus GitHub token prefixes."""
        token = os.environ.get(TOKEN_ENV_VAR, "")
        return cls(
            secrets=[token] if token else [],
            patterns=[
                # Personal access tokens
                re.compile(r"ghp_[A-Za-z0-9_]{36,}"),
                # OAuth access tokens
                re.compile(r"gho_[A-Za-z0-9_]{36,}"),
            ],
        )

    @classmethod
    def for_token(cls, token: str | None) -> "RedactionConfig":
        """Defaults plus ``token``, for credentials read from another variable or a literal."""
        config = cls.default()
        if token and token not in config.secrets:
            config.secrets.append(token)
        return config


def redact(text: str, config: RedactionConfig | None = None) -> str:
    """
    Replace live secrets and credential-shaped substrings with a marker.

    Args:
        text: Input text potentially containing secrets
        config: Redaction configuration (reads the environment if None)

    Returns:
        Text with secrets replaced by placeholder
    """
    if not text:
        return text
    if config is None:
        config = RedactionConfig.default()

    for secret in config.secrets:
        if secret:
            text = text.replace(secret, config.placeholder)
    for pattern in config.patterns:
        text = pattern.sub(config.placeholder, text)
    return text


__all__ = ["REDACTION_MARKER", "RedactionConfig", "redact"]
