from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, List, Optional, TypeVar

from .errors import GitHubAPIError

T = TypeVar("T")


@dataclass(frozen=True)
class Vulnerability:
    target: str
    type: str
    id: str
    package: str
    installed_version: str
    fixed_version: str
    severity: str
    title: str


@dataclass
class Counts:
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0

    @property
    def total(self) -> int:
        return self.critical + self.high + self.medium + self.low


@dataclass
class ScanResults:
    vulnerabilities: List[Vulnerability] = field(default_factory=list)
    counts: Counts = field(default_factory=Counts)


@dataclass(frozen=True)
class ResolvedPRContext:
    """Outcome of PR-context resolution; pr_number None means skip."""

    pr_number: Optional[int]
    is_workflow_run: bool
    event_name: str


class CommentAction(str, Enum):
    SKIPPED = "skipped"
    CREATED = "created"
    UPDATED = "updated"


class FailureKind(str, Enum):
    EVENT_FILE = "event_file"
    COMMIT_LOOKUP = "commit_lookup"
    LIST_COMMENTS = "list_comments"
    CREATE_COMMENT = "create_comment"
    UPDATE_COMMENT = "update_comment"

    @property
    def prefix(self) -> str:
        return _FAILURE_PREFIXES[self]

    @property
    def fatal(self) -> bool:
        """Fatal failures abort the run; the rest degrade to an absent value."""
        return self in (
            FailureKind.LIST_COMMENTS,
            FailureKind.CREATE_COMMENT,
            FailureKind.UPDATE_COMMENT,
        )


_FAILURE_PREFIXES = {
    FailureKind.EVENT_FILE: "Failed to read event file",
    FailureKind.COMMIT_LOOKUP: "Failed to lookup PR by commit",
    FailureKind.LIST_COMMENTS: "Failed to list PR comments",
    FailureKind.CREATE_COMMENT: "Failed to create comment",
    FailureKind.UPDATE_COMMENT: "Failed to update comment",
}


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a value or a classified failure."""

    value: Optional[T] = None
    failure: Optional[FailureKind] = None
    error: str = ""

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failed(cls, kind: FailureKind, error: str) -> "Outcome[T]":
        return cls(failure=kind, error=error)

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def message(self) -> str:
        if self.failure is None:
            return ""
        return f"{self.failure.prefix}: {self.error}"

    def unwrap(self) -> Optional[T]:
        if self.failure is not None:
            raise GitHubAPIError(self.failure, self.error)
        return self.value
