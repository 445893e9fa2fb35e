from __future__ import annotations

from pathlib import Path

import pytest

from lighthouse_impact.models import Comment, Gist, ImpactOutcome, OutcomeStatus
from lighthouse_impact.publish import write_github_outputs, write_step_summary


def test_outputs_written(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    output = tmp_path / "output.txt"
    monkeypatch.setenv("GITHUB_OUTPUT", str(output))

    write_github_outputs(
        ImpactOutcome(
            status=OutcomeStatus.CREATED,
            base_gist=Gist(id="b", html_url="https://gist.github.com/b"),
            head_gist=Gist(id="h", html_url="https://gist.github.com/h"),
            comment=Comment(id=1, html_url="https://github.com/octo/site/pull/42#issuecomment-1"),
        )
    )

    lines = output.read_text(encoding="utf-8").splitlines()
    assert lines == [
        "status=created",
        "comment_url=https://github.com/octo/site/pull/42#issuecomment-1",
        "base_gist_url=https://gist.github.com/b",
        "head_gist_url=https://gist.github.com/h",
    ]


def test_outputs_for_aborted_run(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    output = tmp_path / "output.txt"
    monkeypatch.setenv("GITHUB_OUTPUT", str(output))

    write_github_outputs(ImpactOutcome(status=OutcomeStatus.ABORTED))

    assert output.read_text(encoding="utf-8") == "status=aborted\n"


def test_step_summary_appends(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    summary = tmp_path / "summary.md"
    summary.write_text("previous\n", encoding="utf-8")
    monkeypatch.setenv("GITHUB_STEP_SUMMARY", str(summary))

    write_step_summary("<h3>Lighthouse merge impact</h3>")

    assert summary.read_text(encoding="utf-8") == "previous\n<h3>Lighthouse merge impact</h3>\n"


def test_no_env_is_noop(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GITHUB_OUTPUT", raising=False)
    monkeypatch.delenv("GITHUB_STEP_SUMMARY", raising=False)

    write_github_outputs(ImpactOutcome(status=OutcomeStatus.SKIPPED))
    write_step_summary("body")
