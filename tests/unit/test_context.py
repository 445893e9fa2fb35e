from __future__ import annotations

from pathlib import Path

import pytest

from lighthouse_impact.context import GitHubContext


def test_context_parses_pr_event(
    monkeypatch: pytest.MonkeyPatch,
    event_pr_path: Path,
) -> None:
    monkeypatch.setenv("GITHUB_REPOSITORY", "octo/site")
    monkeypatch.setenv("GITHUB_EVENT_NAME", "pull_request")
    monkeypatch.setenv("GITHUB_EVENT_PATH", str(event_pr_path))

    ctx = GitHubContext.from_environment()

    assert (ctx.repo_owner, ctx.repo_name) == ("octo", "site")
    assert ctx.pr_number == 42
    assert ctx.base_ref == "main"
    assert ctx.head_ref == "feature/lazy-images"


def test_context_handles_push_event(
    monkeypatch: pytest.MonkeyPatch,
    event_push_path: Path,
) -> None:
    monkeypatch.setenv("GITHUB_REPOSITORY", "octo/site")
    monkeypatch.setenv("GITHUB_EVENT_NAME", "push")
    monkeypatch.setenv("GITHUB_EVENT_PATH", str(event_push_path))

    ctx = GitHubContext.from_environment()

    assert ctx.pr_number is None
    assert ctx.base_ref is None


def test_context_requires_repository(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GITHUB_REPOSITORY", raising=False)
    monkeypatch.delenv("GITHUB_EVENT_PATH", raising=False)

    with pytest.raises(RuntimeError, match="GITHUB_REPOSITORY"):
        GitHubContext.from_environment()
