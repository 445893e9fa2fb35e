from __future__ import annotations

import os
from typing import Any, Callable, Dict, Mapping, Optional

import httpx

from .cancellation import CancellationContext
from .errors import GitHubError
from .models import Comment, Gist, PullRequest

GITHUB_API = os.environ.get("GITHUB_API_URL", "https://api.github.com")
DEFAULT_HTTP_TIMEOUT_SECONDS = float(os.environ.get("LIGHTHOUSE_IMPACT_HTTP_TIMEOUT_SECONDS", "30"))
COMMENTS_PER_PAGE = 100


class GitHubClient:
    """Minimal async GitHub REST client for pull requests, issue comments and gists."""

    def __init__(
        self,
        token: str,
        repo: str = "",
        *,
        cancellation: Optional[CancellationContext] = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
    ):
        self.token = token
        self.repo = repo
        self.cancellation = cancellation
        self.timeout = timeout
        self.headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "lighthouse-merge-impact",
        }

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        allow_not_found: bool = False,
    ) -> Any:
        if self.cancellation is not None:
            self.cancellation.raise_if_cancelled()

        async def _send() -> httpx.Response:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                return await client.request(
                    method, url, params=params, json=json, headers=self.headers
                )

        try:
            if self.cancellation is not None:
                response = await self.cancellation.guard(_send())
            else:
                response = await _send()
        except httpx.HTTPError as exc:
            raise GitHubError(f"{method} {url} failed: {exc}") from exc

        if allow_not_found and response.status_code == 404:
            return None
        if response.status_code >= 400:
            raise GitHubError(
                f"{method} {url} returned {response.status_code}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise GitHubError(f"{method} {url} returned invalid JSON") from exc

    # Pull requests / issue comments

    async def get_pull_request(self, pr_number: int) -> PullRequest:
        data = await self._request("GET", f"{GITHUB_API}/repos/{self.repo}/pulls/{pr_number}")
        return PullRequest.from_api(data or {})

    async def find_issue_comment(
        self, pr_number: int, predicate: Callable[[str], bool]
    ) -> Optional[Comment]:
        """Return the first comment on the pull request whose body satisfies ``predicate``."""
        url = f"{GITHUB_API}/repos/{self.repo}/issues/{pr_number}/comments"
        page = 1
        while True:
            comments = await self._request(
                "GET", url, params={"per_page": COMMENTS_PER_PAGE, "page": page}
            )
            for c in comments or []:
                if predicate(c.get("body") or ""):
                    return Comment.from_api(c)
            if not comments or len(comments) < COMMENTS_PER_PAGE:
                return None
            page += 1

    async def create_issue_comment(self, pr_number: int, body: str) -> Comment:
        url = f"{GITHUB_API}/repos/{self.repo}/issues/{pr_number}/comments"
        data = await self._request("POST", url, json={"body": body})
        return Comment.from_api(data or {})

    async def update_issue_comment(self, comment_id: int, body: str) -> Comment:
        url = f"{GITHUB_API}/repos/{self.repo}/issues/comments/{comment_id}"
        data = await self._request("PATCH", url, json={"body": body})
        return Comment.from_api(data or {})

    # Gists

    async def get_gist(self, gist_id: str) -> Optional[Gist]:
        data = await self._request("GET", f"{GITHUB_API}/gists/{gist_id}", allow_not_found=True)
        if data is None:
            return None
        return Gist.from_api(data)

    async def create_gist(
        self,
        files: Mapping[str, Mapping[str, str]],
        description: Optional[str] = None,
        secret: bool = False,
    ) -> Gist:
        # https://docs.github.com/rest/gists/gists#create-a-gist
        payload: Dict[str, Any] = {"files": dict(files), "public": not secret}
        if description:
            payload["description"] = description
        data = await self._request("POST", f"{GITHUB_API}/gists", json=payload)
        return Gist.from_api(data or {})

    async def update_gist(self, gist_id: str, files: Mapping[str, Mapping[str, str]]) -> Gist:
        data = await self._request(
            "PATCH", f"{GITHUB_API}/gists/{gist_id}", json={"files": dict(files)}
        )
        return Gist.from_api(data or {})
