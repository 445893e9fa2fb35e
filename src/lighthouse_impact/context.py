from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional


def _load_event() -> Dict[str, Any]:
    event_path = os.environ.get("GITHUB_EVENT_PATH")
    if not event_path:
        return {}
    try:
        return json.loads(Path(event_path).read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def _coerce_int(value: Any) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class GitHubContext:
    """Immutable GitHub Actions context."""

    # Repository
    repo_owner: str
    repo_name: str
    repo_full_name: str  # "owner/name"

    event_name: str

    # PR-specific (None if not a PR)
    pr_number: Optional[int]
    head_ref: Optional[str]
    base_ref: Optional[str]

    server_url: str = "https://github.com"

    @classmethod
    def from_environment(cls) -> "GitHubContext":
        """Load context from GitHub Actions environment."""
        event = _load_event()

        repo_full_name = (
            os.environ.get("GITHUB_REPOSITORY")
            or event.get("repository", {}).get("full_name")
            or ""
        )
        if not repo_full_name or "/" not in repo_full_name:
            raise RuntimeError("Missing or invalid GITHUB_REPOSITORY")

        repo_owner, repo_name = repo_full_name.split("/", 1)

        pr = event.get("pull_request") or {}
        pr_number = _coerce_int(event.get("number") or pr.get("number"))

        return cls(
            repo_owner=repo_owner,
            repo_name=repo_name,
            repo_full_name=repo_full_name,
            event_name=os.environ.get("GITHUB_EVENT_NAME", ""),
            pr_number=pr_number,
            head_ref=(pr.get("head") or {}).get("ref"),
            base_ref=(pr.get("base") or {}).get("ref"),
            server_url=os.environ.get("GITHUB_SERVER_URL", "https://github.com"),
        )
