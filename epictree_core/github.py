"""GitHub client for Epictree - fetch issues, edit bodies, post comments."""

import logging
from typing import Any, Dict, List, Optional

import requests

from epictree_core.constants import GITHUB_API_URL, ISSUES_PER_PAGE, REQUEST_TIMEOUT
from epictree_core.exceptions import GitHubError
from epictree_core.issues import Issue

__all__ = [
    "GitHubClient",
]

logger = logging.getLogger(__name__)


class GitHubClient:
    """Thin wrapper over the GitHub issues REST API for one repository."""

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str = "",
        session: Optional[requests.Session] = None,
        base_url: str = GITHUB_API_URL,
        timeout: float = REQUEST_TIMEOUT,
    ):
        self.owner = owner
        self.repo = repo
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/vnd.github+json"})
        if token:
            self.session.headers.update({"Authorization": f"Bearer {token}"})

    def _url(self, path: str) -> str:
        return f"{self.base_url}/repos/{self.owner}/{self.repo}/{path}"

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise GitHubError(f"{method} {url} failed: {e}") from e

        if not response.ok:
            raise GitHubError(
                f"{method} {url} returned {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )
        return response

    def list_issues(self, since: Optional[str] = None) -> List[Issue]:
        """Fetch all issues (open and closed) of the repository.

        Args:
            since: Only issues updated at or after this ISO timestamp

        Returns:
            Issues in API order; pull requests are skipped
        """
        params: Dict[str, Any] = {"state": "all", "per_page": ISSUES_PER_PAGE}
        if since:
            params["since"] = since

        issues: List[Issue] = []
        url: Optional[str] = self._url("issues")

        while url:
            response = self._request("GET", url, params=params)
            for payload in response.json():
                if "pull_request" in payload:
                    continue
                issues.append(Issue.from_github(payload))

            # The next link already carries the query string
            url = response.links.get("next", {}).get("url")
            params = {}

        logger.info("Fetched github issues. count=%s", len(issues))
        return issues

    def get_issue(self, number: int) -> Issue:
        response = self._request("GET", self._url(f"issues/{number}"))
        return Issue.from_github(response.json())

    def edit_issue(self, number: int, body: str) -> None:
        self._request("PATCH", self._url(f"issues/{number}"), json={"body": body})
        logger.info("Updated an issue. issue=%s", number)

    def create_comment(self, number: int, body: str) -> None:
        self._request("POST", self._url(f"issues/{number}/comments"), json={"body": body})
        logger.info("Added a comment to the issue. issue=%s", number)
