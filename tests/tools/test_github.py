"""Tests for the GitHub profile tool."""

import json

import httpx
import pytest

from sumit.tools.github import PROFILE_FIELDS, GitHubProfileTool

OCTOCAT = {
    "login": "octocat",
    "id": 583231,
    "name": "The Octocat",
    "company": "@github",
    "bio": None,
    "public_repos": 8,
    "followers": 9000,
    "following": 9,
    "avatar_url": "https://avatars.githubusercontent.com/u/583231?v=4",
}


def make_transport(responses: dict[str, tuple[int, object]]) -> httpx.MockTransport:
    """Map request paths to (status_code, json body)."""

    def handler(request: httpx.Request) -> httpx.Response:
        status_code, body = responses.get(request.url.path, (404, {"message": "Not Found"}))
        return httpx.Response(status_code, json=body)

    return httpx.MockTransport(handler)


@pytest.fixture
def tool() -> GitHubProfileTool:
    return GitHubProfileTool(transport=make_transport({"/users/octocat": (200, OCTOCAT)}))


class TestGitHubProfileTool:
    def test_name(self, tool: GitHubProfileTool):
        assert tool.name == "profile-by-username"

    @pytest.mark.asyncio
    async def test_profile_fields(self, tool: GitHubProfileTool):
        result = await tool.invoke("octocat")

        assert result.success is True
        profile = json.loads(result.text)
        assert list(profile) == list(PROFILE_FIELDS)
        assert profile["login"] == "octocat"
        assert profile["name"] == "The Octocat"
        assert profile["bio"] is None
        assert profile["followers"] == 9000
        assert "company" not in profile

    @pytest.mark.asyncio
    async def test_at_prefix_stripped(self, tool: GitHubProfileTool):
        result = await tool.invoke("@octocat")
        assert result.success is True

    @pytest.mark.asyncio
    async def test_unknown_user(self, tool: GitHubProfileTool):
        result = await tool.invoke("ghost-user-404")

        assert result.success is False
        assert result.text == "No GitHub user named 'ghost-user-404'"

    @pytest.mark.asyncio
    async def test_rate_limited(self):
        tool = GitHubProfileTool(
            transport=make_transport({"/users/octocat": (403, {"message": "rate limit"})})
        )
        result = await tool.invoke("octocat")

        assert result.success is False
        assert "HTTP 403" in result.text

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        tool = GitHubProfileTool(transport=httpx.MockTransport(handler))
        result = await tool.invoke("octocat")

        assert result.success is False
        assert "GitHub lookup for octocat failed" in result.text

    @pytest.mark.asyncio
    async def test_empty_username(self, tool: GitHubProfileTool):
        result = await tool.invoke("")

        assert result.success is False
        assert "username is required" in result.text
