from __future__ import annotations

from typing import Any, Dict, List

import httpx

from .constants import DEFAULT_GITHUB_API_URL

DEFAULT_HTTP_TIMEOUT_SECONDS = 15.0
DOWNLOAD_TIMEOUT_SECONDS = 60.0


class GitHubClient:
    """Minimal async GitHub REST client bound to a single repository."""

    def __init__(
        self,
        token: str,
        repo: str,
        api_url: str = DEFAULT_GITHUB_API_URL,
        timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
    ):
        self.token = token
        self.repo = repo
        self.api_url = (api_url or DEFAULT_GITHUB_API_URL).rstrip("/")
        self.timeout = timeout
        self.headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "trivy-pr-decorator",
        }

    def _url(self, path: str) -> str:
        return f"{self.api_url}/repos/{self.repo}/{path}"

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.request(method, self._url(path), headers=self.headers, **kwargs)
        resp.raise_for_status()
        return resp

    async def list_issue_comments(self, pr_number: int) -> List[Dict[str, Any]]:
        resp = await self._request("GET", f"issues/{pr_number}/comments", params={"per_page": 100})
        return resp.json()

    async def create_issue_comment(self, pr_number: int, body: str) -> Dict[str, Any]:
        resp = await self._request("POST", f"issues/{pr_number}/comments", json={"body": body})
        return resp.json()

    async def update_issue_comment(self, comment_id: int, body: str) -> Dict[str, Any]:
        resp = await self._request("PATCH", f"issues/comments/{comment_id}", json={"body": body})
        return resp.json()

    async def list_pull_requests_for_commit(self, sha: str) -> List[Dict[str, Any]]:
        """Pull requests associated with a commit, in the order GitHub returns them."""
        resp = await self._request("GET", f"commits/{sha}/pulls")
        return resp.json()

    async def list_workflow_run_artifacts(self, run_id: int) -> List[Dict[str, Any]]:
        resp = await self._request("GET", f"actions/runs/{run_id}/artifacts", params={"per_page": 100})
        return resp.json().get("artifacts", [])

    async def download_artifact(self, artifact_id: int) -> bytes:
        """Download an artifact archive. GitHub answers with a redirect to blob storage."""
        async with httpx.AsyncClient(timeout=DOWNLOAD_TIMEOUT_SECONDS, follow_redirects=True) as client:
            resp = await client.get(self._url(f"actions/artifacts/{artifact_id}/zip"), headers=self.headers)
        resp.raise_for_status()
        return resp.content
