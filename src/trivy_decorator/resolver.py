from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from .context import (
    ActionContext,
    PullRequestEvent,
    PushEvent,
    UnknownEvent,
    WorkflowCallEvent,
    WorkflowRunEvent,
    coerce_positive_int,
    parse_event,
)
from .github import GitHubClient
from .logging import DecoratorLogger
from .models import FailureKind, Outcome, ResolvedPRContext

# Event types for which a missing PR number triggers the commit lookup.
_COMMIT_FALLBACK_EVENTS = ("push", "workflow_call")


def _non_empty(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _first(numbers) -> Optional[int]:
    return numbers[0] if numbers else None


def extract_pr_number(event: Any, event_name: str) -> Optional[int]:
    """
    Extract a PR number from a raw event payload.

    Never raises. Only the first PR associated with a workflow run is used.
    """
    parsed = parse_event(event, event_name)
    if parsed is None:
        return None
    if isinstance(parsed, PullRequestEvent):
        return parsed.number
    if isinstance(parsed, WorkflowRunEvent):
        return _first(parsed.pull_request_numbers)
    if isinstance(parsed, (WorkflowCallEvent, PushEvent)):
        return parsed.pr_number
    if isinstance(parsed, UnknownEvent):
        return parsed.pr_number or _first(parsed.workflow_run_pr_numbers)
    return None


def select_pull_request(pull_requests: list) -> Optional[dict]:
    """First open PR, else the first one returned."""
    candidates = [pr for pr in pull_requests or [] if isinstance(pr, dict)]
    for pr in candidates:
        if pr.get("state") == "open":
            return pr
    return candidates[0] if candidates else None


class ContextResolver:
    """Resolves the pull request a run should comment on."""

    def __init__(
        self,
        context: ActionContext,
        gh: Optional[GitHubClient] = None,
        logger: Optional[DecoratorLogger] = None,
    ):
        self.context = context
        self.gh = gh
        self.logger = logger or DecoratorLogger("resolver")

    async def resolve_pr_context(
        self,
        event_file_path: Optional[str] = None,
        event_name: Optional[str] = None,
        sha_input: Optional[str] = None,
    ) -> ResolvedPRContext:
        # Reflects the live trigger even when an event file is supplied.
        is_workflow_run = self.context.is_workflow_run
        resolved_event_name = event_name or self.context.event_name or ""
        self.logger.info("Resolving PR context", event_name=resolved_event_name)

        pr_number: Optional[int] = None

        if event_file_path:
            outcome = self.read_event_file(event_file_path)
            if outcome.ok:
                pr_number = extract_pr_number(outcome.value, resolved_event_name)
            else:
                self.logger.warning(outcome.message, path=event_file_path)
        else:
            pr_number = extract_pr_number(self.context.payload, resolved_event_name)

            if pr_number is None and resolved_event_name == "workflow_call":
                pr_number = self._inherited_pr_number()

            if pr_number is None and resolved_event_name in _COMMIT_FALLBACK_EVENTS:
                sha = self.extract_commit_sha(sha_input)
                if sha:
                    self.logger.info("Attempting to find PR associated with commit", sha=sha)
                    pr_number = await self.find_pr_by_commit(sha)

        if pr_number is not None:
            self.logger.info("Resolved PR number", pr_number=pr_number)
        else:
            self.logger.info("No PR number could be resolved from context")

        return ResolvedPRContext(
            pr_number=pr_number,
            is_workflow_run=is_workflow_run,
            event_name=resolved_event_name,
        )

    def _inherited_pr_number(self) -> Optional[int]:
        """Probe the live payload directly for a PR inherited from the calling workflow."""
        self.logger.info("workflow_call detected, checking for inherited PR context")
        pull_request = self.context.payload.get("pull_request")
        number = coerce_positive_int(pull_request.get("number")) if isinstance(pull_request, dict) else None
        if number is None:
            self.logger.info("No pull_request found in payload")
            self.logger.debug("Payload keys", keys=sorted(self.context.payload))
        else:
            self.logger.info("Found PR context from workflow_call parent", pr_number=number)
        return number

    def extract_commit_sha(self, sha_input: Optional[str] = None) -> Optional[str]:
        """
        Find the commit SHA for this run.

        Priority: explicit input > payload.head_commit.id > payload.after > context sha.
        Empty strings are skipped like missing values.
        """
        payload = self.context.payload
        head_commit = payload.get("head_commit")
        candidates = (
            ("input", sha_input),
            ("payload.head_commit.id", head_commit.get("id") if isinstance(head_commit, dict) else None),
            ("payload.after", payload.get("after")),
            ("context.sha", self.context.sha),
        )
        for source, value in candidates:
            sha = _non_empty(value)
            if sha:
                self.logger.info("Found commit SHA", source=source, sha=sha)
                return sha

        self.logger.info("No commit SHA found in any checked location")
        self.logger.debug("Checked locations", locations=[source for source, _ in candidates])
        return None

    async def find_pr_by_commit(self, sha: str) -> Optional[int]:
        """Best-effort lookup of the PR associated with sha; failures map to None."""
        outcome = await self._lookup_pr_by_commit(sha)
        if not outcome.ok:
            self.logger.warning(outcome.message, sha=sha)
            return None
        return outcome.value

    async def _lookup_pr_by_commit(self, sha: str) -> Outcome[int]:
        if self.gh is None:
            self.logger.debug("No GitHub client available for PR lookup")
            return Outcome.success(None)

        try:
            pull_requests = await self.gh.list_pull_requests_for_commit(sha)
        except Exception as exc:
            return Outcome.failed(FailureKind.COMMIT_LOOKUP, str(exc))

        pr = select_pull_request(pull_requests)
        if pr is None:
            self.logger.info("No PRs found associated with this commit", sha=sha)
            return Outcome.success(None)

        self.logger.info(
            "Selected PR for commit",
            candidates=len(pull_requests),
            pr_number=pr.get("number"),
            state=pr.get("state"),
            title=pr.get("title"),
        )
        return Outcome.success(coerce_positive_int(pr.get("number")))

    def read_event_file(self, path: str) -> Outcome[Any]:
        try:
            return Outcome.success(json.loads(Path(path).read_text(encoding="utf-8")))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            return Outcome.failed(FailureKind.EVENT_FILE, str(exc))
