from __future__ import annotations

from typing import TYPE_CHECKING

from .constants import ExitCode

if TYPE_CHECKING:
    from .models import FailureKind


class DecoratorError(Exception):
    """Base exception for all decorator errors."""

    exit_code: ExitCode = ExitCode.ERROR


class ConfigError(DecoratorError):
    """Configuration or environment validation failed."""


class ReportError(DecoratorError):
    """Scan report could not be read or has an unexpected shape."""


class ArtifactError(DecoratorError):
    """Artifact listing, download or extraction failed."""


class GitHubAPIError(DecoratorError):
    """A GitHub call failed in a phase the run cannot recover from."""

    def __init__(self, kind: "FailureKind", reason: str):
        self.kind = kind
        self.reason = reason
        super().__init__(f"{kind.prefix}: {reason}")
