"""GitHub token resolution and client construction.

Resolution order (first non-empty token wins):
1. GITHUB_TOKEN env var
2. GH_TOKEN env var
3. ``gh auth token`` from an authenticated GitHub CLI

Providers are plain objects with an async ``get_token()`` so tests can
substitute fakes for the subprocess call.
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from typing import Optional, Protocol, Sequence

import aiohttp

from pr_list.config import Config
from pr_list.errors import AuthenticationError, MissingTokenError
from pr_list.github_client import GitHubAPIError, GitHubClient

logger = logging.getLogger("pr_list.auth")

TOKEN_ENV_VARS = ("GITHUB_TOKEN", "GH_TOKEN")

MISSING_TOKEN_MESSAGE = (
    "GitHub token not found. Please either:\n"
    "   1. Set GITHUB_TOKEN environment variable, or\n"
    "   2. Authenticate with gh CLI: gh auth login\n"
    "   3. Create a token at: https://github.com/settings/tokens"
)


class TokenProvider(Protocol):
    name: str

    async def get_token(self) -> Optional[str]:
        ...


class EnvTokenProvider:
    """Reads a token from an environment variable."""

    def __init__(self, var: str):
        self.var = var
        self.name = f"{var} environment variable"

    async def get_token(self) -> Optional[str]:
        return os.environ.get(self.var, "").strip() or None


class GhCliTokenProvider:
    """Asks the GitHub CLI for its stored token."""

    name = "gh CLI"

    def __init__(self, command: Sequence[str] = ("gh", "auth", "token")):
        self.command = tuple(command)

    async def get_token(self) -> Optional[str]:
        print("Fetching token from gh CLI...", file=sys.stderr)
        try:
            proc = await asyncio.create_subprocess_exec(
                *self.command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            stdout, stderr = await proc.communicate()
        except FileNotFoundError:
            logger.warning("gh CLI is not installed")
            return None
        except OSError as e:
            logger.warning("gh CLI could not be run: %s", e)
            return None

        if proc.returncode != 0:
            logger.warning(
                "gh auth token failed (exit %s): %s",
                proc.returncode, stderr.decode(errors="replace").strip()[:500],
            )
            return None

        token = stdout.decode(errors="replace").strip()
        if not token:
            logger.warning("gh CLI token command returned empty")
            return None
        return token


def default_token_providers() -> list[TokenProvider]:
    return [*(EnvTokenProvider(var) for var in TOKEN_ENV_VARS), GhCliTokenProvider()]


async def resolve_token(providers: Optional[Sequence[TokenProvider]] = None) -> str:
    """Return the first non-empty token from ``providers``.

    Later providers are not consulted once a token is found.

    Raises:
        MissingTokenError: If no provider yields a token.
    """
    if providers is None:
        providers = default_token_providers()

    for provider in providers:
        token = await provider.get_token()
        if token:
            print(f"Using token from {provider.name}", file=sys.stderr)
            return token
        logger.debug("No token from %s", provider.name)

    raise MissingTokenError(MISSING_TOKEN_MESSAGE)


async def create_client(
    config: Config,
    providers: Optional[Sequence[TokenProvider]] = None,
) -> GitHubClient:
    """Resolve a token and build an (unopened) GitHubClient for it."""
    token = await resolve_token(providers)
    return GitHubClient(token, api_url=config.api_url, user_agent=config.user_agent)


async def verify_authentication(client: GitHubClient) -> str:
    """Return the authenticated user's login.

    Raises:
        AuthenticationError: If GitHub rejects the token or the call fails.
    """
    try:
        user = await client.get_authenticated_user()
        login = user["login"]
    except (GitHubAPIError, aiohttp.ClientError, asyncio.TimeoutError, KeyError, TypeError) as e:
        logger.debug("Authentication check failed: %s", e)
        raise AuthenticationError(
            "Authentication failed. Please check your GitHub token."
        ) from e
    print(f"Authenticated as: {login}", file=sys.stderr)
    return login
