from __future__ import annotations

from pathlib import Path

import pytest

from trivy_decorator.context import (
    ActionContext,
    PullRequestEvent,
    PushEvent,
    UnknownEvent,
    WorkflowCallEvent,
    WorkflowRunEvent,
    parse_event,
)
from trivy_decorator.errors import ConfigError


def test_context_parses_pr_event(monkeypatch: pytest.MonkeyPatch, event_pr_path: Path) -> None:
    monkeypatch.setenv("GITHUB_REPOSITORY", "octo/repo")
    monkeypatch.setenv("GITHUB_EVENT_NAME", "pull_request")
    monkeypatch.setenv("GITHUB_EVENT_PATH", str(event_pr_path))
    monkeypatch.setenv("GITHUB_SHA", "mergesha")

    ctx = ActionContext.from_environment()

    assert ctx.repo_owner == "octo"
    assert ctx.repo_name == "repo"
    assert ctx.repo_full_name == "octo/repo"
    assert ctx.event_name == "pull_request"
    assert ctx.sha == "mergesha"
    assert ctx.pr_number == 42
    assert ctx.is_workflow_run is False


def test_context_handles_push_event(monkeypatch: pytest.MonkeyPatch, event_push_path: Path) -> None:
    monkeypatch.setenv("GITHUB_REPOSITORY", "octo/repo")
    monkeypatch.setenv("GITHUB_EVENT_NAME", "push")
    monkeypatch.setenv("GITHUB_EVENT_PATH", str(event_push_path))

    ctx = ActionContext.from_environment()

    assert ctx.pr_number is None
    assert ctx.payload["after"] == "pushsha789"


def test_context_detects_workflow_run(monkeypatch: pytest.MonkeyPatch, event_workflow_run_path: Path) -> None:
    monkeypatch.setenv("GITHUB_REPOSITORY", "octo/repo")
    monkeypatch.setenv("GITHUB_EVENT_NAME", "workflow_run")
    monkeypatch.setenv("GITHUB_EVENT_PATH", str(event_workflow_run_path))

    ctx = ActionContext.from_environment()

    assert ctx.is_workflow_run is True
    assert ctx.workflow_run_id == 987654


def test_context_tolerates_missing_event_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("GITHUB_REPOSITORY", "octo/repo")
    monkeypatch.setenv("GITHUB_EVENT_PATH", str(tmp_path / "missing.json"))
    monkeypatch.delenv("GITHUB_EVENT_NAME", raising=False)

    ctx = ActionContext.from_environment()

    assert ctx.payload == {}
    assert ctx.event_name == ""


def test_context_requires_repository(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GITHUB_REPOSITORY", raising=False)
    monkeypatch.delenv("GITHUB_EVENT_PATH", raising=False)

    with pytest.raises(ConfigError):
        ActionContext.from_environment()


def test_parse_event_dispatches_by_name() -> None:
    pr = {"pull_request": {"number": 1}}
    assert parse_event(pr, "pull_request") == PullRequestEvent(number=1)
    assert parse_event(pr, "workflow_call") == WorkflowCallEvent(pr_number=1)
    assert parse_event(pr, "push") == PushEvent(pr_number=1)
    assert parse_event(
        {"workflow_run": {"pull_requests": [{"number": 7}, {"number": 9}]}}, "workflow_run"
    ) == WorkflowRunEvent(pull_request_numbers=(7, 9))
    assert parse_event(pr, "release") == UnknownEvent(pr_number=1, workflow_run_pr_numbers=())


def test_parse_event_rejects_non_mapping() -> None:
    assert parse_event(None, "pull_request") is None
    assert parse_event(["not", "a", "dict"], "push") is None


def test_parse_event_tolerates_malformed_shapes() -> None:
    assert parse_event({"pull_request": "oops"}, "pull_request") == PullRequestEvent(number=None)
    assert parse_event({"workflow_run": {"pull_requests": "x"}}, "workflow_run") == WorkflowRunEvent()
    assert parse_event({"workflow_run": {"pull_requests": [{}]}}, "workflow_run") == WorkflowRunEvent(
        pull_request_numbers=(None,)
    )


def test_empty_workflow_run_still_counts_as_workflow_run() -> None:
    assert ActionContext(payload={"workflow_run": {}}).is_workflow_run is True
    assert ActionContext(payload={"workflow_run": None}).is_workflow_run is False
    assert ActionContext(payload={}).is_workflow_run is False
