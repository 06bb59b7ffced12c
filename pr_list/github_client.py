"""Async GitHub REST client used by pr-list.

Wraps the three REST calls the tool needs (authenticated user, list pulls,
get pull) on top of an aiohttp session. HTTP errors surface as
GitHubAPIError; callers decide whether they are fatal.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import aiohttp

from pr_list.config import DEFAULT_API_URL, DEFAULT_USER_AGENT

logger = logging.getLogger("pr_list.github_client")

API_VERSION = "2022-11-28"

# GitHub caps per_page at 100; pr-list only ever reads the first page
MAX_PER_PAGE = 100


class GitHubAPIError(RuntimeError):
    """A GitHub REST call returned an error status."""

    def __init__(self, status: int, message: str, url: str = "", rate_limited: bool = False):
        self.status = status
        self.url = url
        self.rate_limited = rate_limited
        super().__init__(f"GitHub API returned HTTP {status}: {message}")


class GitHubClient:
    """Minimal authenticated GitHub REST client.

    Use as an async context manager. When ``session`` is given, the caller
    owns it and it is not closed on exit.
    """

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.api_url = api_url.rstrip("/")
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": user_agent,
        }
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "GitHubClient":
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def _get(self, path: str, params: Optional[dict] = None) -> Any:
        """GET ``path`` and return the decoded JSON body.

        Raises:
            GitHubAPIError: On any status >= 400.
            aiohttp.ClientError: On connection-level failures.
        """
        if self._session is None:
            raise RuntimeError("GitHubClient used outside of 'async with'")

        url = f"{self.api_url}{path}"
        logger.debug("GET %s params=%s", url, params)
        async with self._session.get(url, params=params, headers=self._headers) as resp:
            if resp.status >= 400:
                raise await _api_error(resp, url)
            return await resp.json()

    async def get_authenticated_user(self) -> dict:
        """Return the user the token belongs to (``GET /user``)."""
        return await self._get("/user")

    async def list_pull_requests(
        self,
        owner: str,
        repo: str,
        state: str = "open",
        per_page: int = MAX_PER_PAGE,
    ) -> list[dict]:
        """List pull requests for a repository. First page only."""
        params = {"state": state, "per_page": str(min(per_page, MAX_PER_PAGE))}
        data = await self._get(f"/repos/{owner}/{repo}/pulls", params=params)
        if not isinstance(data, list):
            raise GitHubAPIError(200, "unexpected response shape for pull list")
        return data

    async def get_pull_request(self, owner: str, repo: str, number: int) -> dict:
        """Fetch a single pull request, including additions/deletions."""
        return await self._get(f"/repos/{owner}/{repo}/pulls/{int(number)}")


async def _api_error(resp: aiohttp.ClientResponse, url: str) -> GitHubAPIError:
    """Build a GitHubAPIError from an error response."""
    message = ""
    try:
        body = await resp.json(content_type=None)
        if isinstance(body, dict):
            message = str(body.get("message", ""))
    except (ValueError, aiohttp.ContentTypeError):
        pass
    if not message:
        message = (await resp.text())[:500]

    rate_limited = (
        resp.status in (403, 429)
        and resp.headers.get("x-ratelimit-remaining") == "0"
    )
    return GitHubAPIError(resp.status, message, url=url, rate_limited=rate_limited)
