"""Tests for the GitHub service."""

import httpx
import pytest
import respx
from httpx import Response

from app.exceptions import (
    GitHubAPIError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubUserNotFoundError,
)
from services.github_service import GitHubService

API = "https://api.github.com"


@pytest.fixture
def github_service(test_settings):
    return GitHubService(test_settings)


class TestGitHubService:
    """Test suite for GitHubService."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_fetch_user(self, github_service):
        route = respx.get(f"{API}/users/octocat").mock(
            return_value=Response(200, json={"id": 583231, "login": "octocat"})
        )
        user = await github_service.fetch_user("octocat")
        assert user["id"] == 583231
        request = route.calls.last.request
        assert request.headers["Authorization"] == "Bearer ghp_test_token_fake_value"
        assert request.headers["Accept"] == "application/vnd.github+json"

    @respx.mock
    @pytest.mark.asyncio
    async def test_user_not_found(self, github_service):
        respx.get(f"{API}/users/nonexistent").mock(
            return_value=Response(404, json={"message": "Not Found"})
        )
        with pytest.raises(GitHubUserNotFoundError) as exc_info:
            await github_service.fetch_user("nonexistent")
        assert exc_info.value.status_code == 404
        assert exc_info.value.code == "GITHUB_USER_NOT_FOUND"

    @respx.mock
    @pytest.mark.asyncio
    async def test_rate_limit_429(self, github_service):
        respx.get(f"{API}/users/limited").mock(
            return_value=Response(
                429,
                json={"message": "API rate limit exceeded"},
                headers={"Retry-After": "60"},
            )
        )
        with pytest.raises(GitHubRateLimitError) as exc_info:
            await github_service.fetch_user("limited")
        assert exc_info.value.details == {"retry_after_seconds": 60}

    @respx.mock
    @pytest.mark.asyncio
    async def test_rate_limit_403_exhausted(self, github_service):
        respx.get(f"{API}/repos/octocat/hello/languages").mock(
            return_value=Response(403, headers={"X-RateLimit-Remaining": "0"})
        )
        with pytest.raises(GitHubRateLimitError):
            await github_service.fetch_languages("octocat/hello")

    @respx.mock
    @pytest.mark.asyncio
    async def test_forbidden_without_rate_limit(self, github_service):
        respx.get(f"{API}/repos/octocat/private/languages").mock(
            return_value=Response(403, headers={"X-RateLimit-Remaining": "4000"})
        )
        with pytest.raises(GitHubAPIError) as exc_info:
            await github_service.fetch_languages("octocat/private")
        assert exc_info.value.status_code == 403

    @respx.mock
    @pytest.mark.asyncio
    async def test_unauthorized(self, github_service):
        respx.get(f"{API}/users/octocat").mock(return_value=Response(401))
        with pytest.raises(GitHubAPIError) as exc_info:
            await github_service.fetch_user("octocat")
        assert exc_info.value.status_code == 401

    @respx.mock
    @pytest.mark.asyncio
    async def test_server_error_maps_to_bad_gateway(self, github_service):
        respx.get(f"{API}/repos/octocat/hello/topics").mock(return_value=Response(503))
        with pytest.raises(GitHubAPIError) as exc_info:
            await github_service.fetch_topics("octocat/hello")
        assert exc_info.value.status_code == 502

    @respx.mock
    @pytest.mark.asyncio
    async def test_connection_error(self, github_service):
        respx.get(f"{API}/users/octocat").mock(side_effect=httpx.ConnectError("refused"))
        with pytest.raises(GitHubAPIError):
            await github_service.fetch_user("octocat")

    @respx.mock
    @pytest.mark.asyncio
    async def test_missing_repository_is_not_user_error(self, github_service):
        respx.get(f"{API}/repos/octocat/gone/languages").mock(return_value=Response(404))
        with pytest.raises(GitHubNotFoundError) as exc_info:
            await github_service.fetch_languages("octocat/gone")
        assert not isinstance(exc_info.value, GitHubUserNotFoundError)

    @respx.mock
    @pytest.mark.asyncio
    async def test_fetch_repositories_follows_pagination(self, github_service):
        next_url = f"{API}/user/583231/repos?page=2&per_page=100"
        first = respx.get(f"{API}/users/octocat/repos").mock(
            return_value=Response(
                200,
                json=[{"id": 1, "name": "one"}],
                headers={"Link": f'<{next_url}>; rel="next", <{next_url}>; rel="last"'},
            )
        )
        respx.get(f"{API}/user/583231/repos").mock(
            return_value=Response(200, json=[{"id": 2, "name": "two"}])
        )

        repos = await github_service.fetch_repositories("octocat")

        assert [r["id"] for r in repos] == [1, 2]
        params = first.calls.last.request.url.params
        assert params["per_page"] == "100"
        assert params["type"] == "all"

    @respx.mock
    @pytest.mark.asyncio
    async def test_fetch_repositories_stops_at_page_cap(self, github_service):
        next_url = f"{API}/user/583231/repos?page=2"
        respx.get(f"{API}/users/octocat/repos").mock(
            return_value=Response(
                200, json=[{"id": 1}], headers={"Link": f'<{next_url}>; rel="next"'}
            )
        )
        looping = respx.get(f"{API}/user/583231/repos").mock(
            return_value=Response(
                200, json=[{"id": 2}], headers={"Link": f'<{next_url}>; rel="next"'}
            )
        )

        repos = await github_service.fetch_repositories("octocat")

        # github_max_pages is 3 in the test settings
        assert len(repos) == 3
        assert looping.call_count == 2

    @respx.mock
    @pytest.mark.asyncio
    async def test_fetch_languages(self, github_service):
        respx.get(f"{API}/repos/octocat/hello/languages").mock(
            return_value=Response(200, json={"Python": 12000, "Shell": 300})
        )
        assert await github_service.fetch_languages("octocat/hello") == {
            "Python": 12000,
            "Shell": 300,
        }

    @respx.mock
    @pytest.mark.asyncio
    async def test_fetch_topics(self, github_service):
        respx.get(f"{API}/repos/octocat/hello/topics").mock(
            return_value=Response(200, json={"names": ["cli", "python"]})
        )
        assert await github_service.fetch_topics("octocat/hello") == ["cli", "python"]

    @respx.mock
    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [202, 204])
    async def test_contributor_stats_not_ready(self, github_service, status):
        respx.get(f"{API}/repos/octocat/hello/stats/contributors").mock(
            return_value=Response(status)
        )
        assert await github_service.fetch_contributor_stats("octocat/hello") == []

    @respx.mock
    @pytest.mark.asyncio
    async def test_contributor_stats(self, github_service):
        stats = [{"author": {"login": "octocat"}, "weeks": [{"w": 1, "a": 2, "d": 3, "c": 4}]}]
        respx.get(f"{API}/repos/octocat/hello/stats/contributors").mock(
            return_value=Response(200, json=stats)
        )
        assert await github_service.fetch_contributor_stats("octocat/hello") == stats

    @respx.mock
    @pytest.mark.asyncio
    async def test_no_token_no_authorization_header(self, test_settings):
        settings = test_settings.model_copy(update={"github_token": None})
        route = respx.get(f"{API}/users/octocat").mock(
            return_value=Response(200, json={"id": 1})
        )
        await GitHubService(settings).fetch_user("octocat")
        assert "Authorization" not in route.calls.last.request.headers
