"""GitHub public profile lookup tool."""

import json
from urllib.parse import quote

import httpx

from ..errors import ToolExecutionError
from .base import Tool, ToolResult

GITHUB_API_URL = "https://api.github.com"

PROFILE_FIELDS = (
    "login",
    "name",
    "bio",
    "public_repos",
    "followers",
    "following",
    "avatar_url",
)


class GitHubProfileTool(Tool):
    """Tool returning the public profile fields of a GitHub account."""

    def __init__(
        self,
        base_url: str = GITHUB_API_URL,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @property
    def name(self) -> str:
        return "profile-by-username"

    @property
    def input_name(self) -> str:
        return "username"

    @property
    def description(self) -> str:
        return "Returns the public information about a GitHub user by their username."

    async def execute(self, value: str) -> ToolResult:
        username = value.strip().lstrip("@")
        if not username:
            raise ToolExecutionError("A GitHub username is required")

        url = f"{self._base_url}/users/{quote(username)}"
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
                headers={"Accept": "application/vnd.github+json"},
            ) as client:
                response = await client.get(url)
        except httpx.TimeoutException as e:
            raise ToolExecutionError(
                f"GitHub lookup for {username} timed out after {self._timeout}s"
            ) from e
        except httpx.RequestError as e:
            raise ToolExecutionError(f"GitHub lookup for {username} failed: {e}") from e

        if response.status_code == 404:
            raise ToolExecutionError(f"No GitHub user named '{username}'")
        if not response.is_success:
            raise ToolExecutionError(
                f"GitHub lookup for {username} failed: HTTP {response.status_code}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ToolExecutionError(f"GitHub returned an unreadable profile for {username}") from e

        profile = {key: data.get(key) for key in PROFILE_FIELDS}
        return ToolResult(
            success=True,
            output=json.dumps(profile, ensure_ascii=False),
            metadata={"status_code": response.status_code},
        )
