from __future__ import annotations

import os

from .models import ImpactOutcome


def write_step_summary(body: str) -> None:
    """
    Write the rendered comment to the GitHub Actions Step Summary.

    This appears in the job summary, providing quick visibility
    without opening the pull request.
    """
    summary_path = os.environ.get("GITHUB_STEP_SUMMARY")
    if not summary_path or not body:
        return
    with open(summary_path, "a", encoding="utf-8") as f:
        f.write(body)
        f.write("\n")


def write_github_outputs(outcome: ImpactOutcome) -> None:
    """Write GitHub Actions outputs."""
    output_path = os.environ.get("GITHUB_OUTPUT")
    if not output_path:
        return

    with open(output_path, "a", encoding="utf-8") as f:
        f.write(f"status={outcome.status.value}\n")
        if outcome.comment is not None:
            f.write(f"comment_url={outcome.comment.html_url}\n")
        if outcome.base_gist is not None:
            f.write(f"base_gist_url={outcome.base_gist.html_url}\n")
        if outcome.head_gist is not None:
            f.write(f"head_gist_url={outcome.head_gist.html_url}\n")
