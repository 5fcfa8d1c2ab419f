from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .errors import ConfigError


def _load_event(event_path: Optional[str]) -> Dict[str, Any]:
    if not event_path:
        return {}
    try:
        data = json.loads(Path(event_path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def coerce_positive_int(value: Any) -> Optional[int]:
    """Return value as a positive int (PR numbers, run ids), or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return number if number > 0 else None


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _pull_request_number(payload: Mapping[str, Any]) -> Optional[int]:
    return coerce_positive_int(_mapping(payload.get("pull_request")).get("number"))


def _workflow_run_pr_numbers(payload: Mapping[str, Any]) -> Tuple[Optional[int], ...]:
    pull_requests = _mapping(payload.get("workflow_run")).get("pull_requests")
    if not isinstance(pull_requests, list):
        return ()
    return tuple(coerce_positive_int(_mapping(pr).get("number")) for pr in pull_requests)


# Trigger events. Each variant only carries what its event type can hold.


@dataclass(frozen=True)
class PullRequestEvent:
    """pull_request / pull_request_target."""

    number: Optional[int]


@dataclass(frozen=True)
class WorkflowRunEvent:
    # Order as delivered by GitHub; entries may be None when malformed.
    pull_request_numbers: Tuple[Optional[int], ...] = ()


@dataclass(frozen=True)
class WorkflowCallEvent:
    """Reusable workflow; inherits the caller's payload."""

    pr_number: Optional[int]


@dataclass(frozen=True)
class PushEvent:
    # Only present when a relay step injected pull_request into the payload.
    pr_number: Optional[int]


@dataclass(frozen=True)
class UnknownEvent:
    pr_number: Optional[int]
    workflow_run_pr_numbers: Tuple[Optional[int], ...] = ()


TriggerEvent = Union[PullRequestEvent, WorkflowRunEvent, WorkflowCallEvent, PushEvent, UnknownEvent]


def parse_event(payload: Any, event_name: str) -> Optional[TriggerEvent]:
    """Classify a raw event payload by event name."""
    if not isinstance(payload, Mapping):
        return None
    if event_name in ("pull_request", "pull_request_target"):
        return PullRequestEvent(number=_pull_request_number(payload))
    if event_name == "workflow_run":
        return WorkflowRunEvent(pull_request_numbers=_workflow_run_pr_numbers(payload))
    if event_name == "workflow_call":
        return WorkflowCallEvent(pr_number=_pull_request_number(payload))
    if event_name == "push":
        return PushEvent(pr_number=_pull_request_number(payload))
    return UnknownEvent(
        pr_number=_pull_request_number(payload),
        workflow_run_pr_numbers=_workflow_run_pr_numbers(payload),
    )


@dataclass(frozen=True)
class ActionContext:
    """Immutable view of the GitHub Actions run that triggered us."""

    payload: Dict[str, Any] = field(default_factory=dict)
    event_name: str = ""
    sha: str = ""
    repo_owner: str = ""
    repo_name: str = ""

    @classmethod
    def from_environment(cls) -> "ActionContext":
        """Load context from GitHub Actions environment."""
        payload = _load_event(os.environ.get("GITHUB_EVENT_PATH"))

        repo_full_name = (
            os.environ.get("GITHUB_REPOSITORY")
            or _mapping(payload.get("repository")).get("full_name")
            or ""
        )
        if "/" not in repo_full_name:
            raise ConfigError("Missing or invalid GITHUB_REPOSITORY")
        repo_owner, repo_name = repo_full_name.split("/", 1)

        return cls(
            payload=payload,
            event_name=os.environ.get("GITHUB_EVENT_NAME", ""),
            sha=os.environ.get("GITHUB_SHA", ""),
            repo_owner=repo_owner,
            repo_name=repo_name,
        )

    @property
    def repo_full_name(self) -> str:
        return f"{self.repo_owner}/{self.repo_name}"

    @property
    def pr_number(self) -> Optional[int]:
        """PR number carried directly by the live payload."""
        return _pull_request_number(self.payload)

    @property
    def is_workflow_run(self) -> bool:
        return self.payload.get("workflow_run") is not None

    @property
    def workflow_run_id(self) -> Optional[int]:
        run_id = _mapping(self.payload.get("workflow_run")).get("id")
        return coerce_positive_int(run_id)
