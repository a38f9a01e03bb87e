"""GitHub Data Service.

Thin client over the GitHub REST API (v3) for the data the skill
profiler needs: the user record, every repository of the user, and per
repository its language byte counts, topics and contributor statistics.

Requests are not retried. Rate-limit pacing is the sync job's concern.
"""

from __future__ import annotations

from typing import Any

import httpx

from app.config import Settings, get_settings
from app.exceptions import (
    GitHubAPIError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubUserNotFoundError,
)
from app.logging_config import get_logger
from app.metrics import GITHUB_API_CALLS, GITHUB_API_DURATION

logger = get_logger(__name__)

REPOS_PER_PAGE = 100


class GitHubService:
    """Service for fetching GitHub user and repository data."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self._headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.settings.github_token:
            self._headers["Authorization"] = (
                f"Bearer {self.settings.github_token.get_secret_value()}"
            )

    async def fetch_user(self, username: str) -> dict[str, Any]:
        """Fetch a user profile. Raises GitHubUserNotFoundError on 404."""
        url = f"{self.settings.github_api_base}/users/{username}"
        try:
            return await self._api_request(url, endpoint="user")
        except GitHubNotFoundError as exc:
            raise GitHubUserNotFoundError() from exc

    async def fetch_repositories(self, username: str) -> list[dict[str, Any]]:
        """Fetch every repository of a user, following ``Link`` pagination.

        Stops after ``github_max_pages`` pages.
        """
        url: str | None = f"{self.settings.github_api_base}/users/{username}/repos"
        params: dict[str, Any] | None = {
            "per_page": REPOS_PER_PAGE,
            "type": "all",
            "sort": "updated",
        }
        repos: list[dict[str, Any]] = []

        for _ in range(self.settings.github_max_pages):
            if url is None:
                break
            response = await self._request(url, endpoint="repos", params=params)
            page = response.json()
            if not isinstance(page, list):
                break
            repos.extend(page)
            url = response.links.get("next", {}).get("url")
            params = None

        return repos

    async def fetch_languages(self, full_name: str) -> dict[str, int]:
        """Language name to byte count for a repository."""
        url = f"{self.settings.github_api_base}/repos/{full_name}/languages"
        data = await self._api_request(url, endpoint="languages")
        if not isinstance(data, dict):
            return {}
        return {name: int(size) for name, size in data.items()}

    async def fetch_topics(self, full_name: str) -> list[str]:
        url = f"{self.settings.github_api_base}/repos/{full_name}/topics"
        data = await self._api_request(url, endpoint="topics")
        if not isinstance(data, dict):
            return []
        return list(data.get("names") or [])

    async def fetch_contributor_stats(self, full_name: str) -> list[dict[str, Any]]:
        """Weekly contributor statistics for a repository.

        GitHub answers 202 while it computes the statistics and 204 for
        empty repositories; both yield an empty list.
        """
        url = f"{self.settings.github_api_base}/repos/{full_name}/stats/contributors"
        response = await self._request(url, endpoint="contributor_stats")
        if response.status_code in (202, 204):
            logger.debug("contributor_stats_not_ready", repo=full_name)
            return []
        data = response.json()
        return data if isinstance(data, list) else []

    async def _api_request(
        self,
        url: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        response = await self._request(url, endpoint=endpoint, params=params)
        return response.json()

    async def _request(
        self,
        url: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Make a request to the GitHub API and map error statuses.

        - 404 raises GitHubNotFoundError
        - 401 raises GitHubAPIError
        - 429, or 403 with rate-limit headers, raises GitHubRateLimitError
        - any other status >= 400 raises GitHubAPIError
        """
        async with httpx.AsyncClient(timeout=self.settings.github_timeout_seconds) as client:
            with GITHUB_API_DURATION.labels(endpoint=endpoint).time():
                try:
                    response = await client.get(url, headers=self._headers, params=params)
                except httpx.RequestError as exc:
                    GITHUB_API_CALLS.labels(endpoint=endpoint, status="error").inc()
                    raise GitHubAPIError("GitHub API connection failed") from exc

        status = response.status_code
        GITHUB_API_CALLS.labels(endpoint=endpoint, status=str(status)).inc()

        if status == 404:
            raise GitHubNotFoundError()
        if status == 401:
            raise GitHubAPIError("GitHub token invalid or expired", status_code=401)

        if status in (403, 429):
            retry_after = response.headers.get("Retry-After")
            rate_remaining = response.headers.get("X-RateLimit-Remaining")
            if status == 429 or retry_after or rate_remaining == "0":
                logger.warning("github_rate_limited", endpoint=endpoint, status=status)
                raise GitHubRateLimitError(
                    retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None
                )
            raise GitHubAPIError("GitHub API access forbidden", status_code=403)

        if status >= 400:
            raise GitHubAPIError(
                f"GitHub API returned status {status}",
                status_code=502 if status >= 500 else status,
            )

        return response
