"""Fetch the authenticated user's open PRs for a set of repositories.

Failures never escape: a repository whose listing fails yields no PRs, and a
PR whose detail fetch fails keeps zero change stats. Sibling repositories and
sibling PRs are unaffected.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import List, Optional, Sequence

import aiohttp

from pr_list.github_client import GitHubAPIError, GitHubClient
from pr_list.repo_store import split_repo
from pr_list.report_data import PullRequest, RepoResult

logger = logging.getLogger("pr_list.fetcher")

# Errors that degrade a single fetch instead of aborting the run
FETCH_ERRORS = (
    GitHubAPIError,
    aiohttp.ClientError,
    asyncio.TimeoutError,
    KeyError,
    TypeError,
    ValueError,
)


def _author_login(pr: object) -> str:
    """Login of a listed PR's author, or "" when the entry is malformed."""
    if not isinstance(pr, dict):
        return ""
    user = pr.get("user")
    if not isinstance(user, dict):
        return ""
    return user.get("login", "")


async def _fetch_detail(client: GitHubClient, owner: str, name: str, pr: dict) -> PullRequest:
    """Build a PullRequest for a listed PR, adding its +/- stats."""
    number = pr["number"]
    additions, deletions = 0, 0
    try:
        detail = await client.get_pull_request(owner, name, number)
        if not isinstance(detail, dict):
            raise TypeError(f"expected a JSON object, got {type(detail).__name__}")
        additions = detail.get("additions") or 0
        deletions = detail.get("deletions") or 0
    except FETCH_ERRORS as e:
        logger.warning("Could not fetch details for PR #%s", number)
        logger.debug("Detail fetch for %s/%s#%s failed: %s", owner, name, number, e)

    return PullRequest(
        number=number,
        title=pr.get("title", ""),
        url=pr.get("html_url", ""),
        additions=additions,
        deletions=deletions,
    )


async def fetch_prs_for_repo(
    client: GitHubClient,
    repo: str,
    login: Optional[str] = None,
) -> List[PullRequest]:
    """Return open PRs in ``repo`` authored by ``login``.

    Args:
        client: An opened GitHubClient.
        repo: Repository identifier, "owner/name".
        login: Authenticated user's login. When None it is looked up here,
            once per call.

    Returns:
        PRs in API listing order; an empty list on any repository-level failure.
    """
    print(f"Fetching PRs for {repo}...", file=sys.stderr)

    parts = split_repo(repo)
    if parts is None:
        logger.error("Invalid repository format: %s. Expected format: owner/repo", repo)
        return []
    owner, name = parts

    try:
        if login is None:
            user = await client.get_authenticated_user()
            login = user["login"]
        listed = await client.list_pull_requests(owner, name, state="open")
        user_prs = [pr for pr in listed if _author_login(pr) == login]
        prs = await asyncio.gather(
            *(_fetch_detail(client, owner, name, pr) for pr in user_prs)
        )
    except FETCH_ERRORS as e:
        if isinstance(e, GitHubAPIError) and e.rate_limited:
            logger.warning("Error fetching PRs for %s: %s (rate limited)", repo, e)
        else:
            logger.warning("Error fetching PRs for %s: %s", repo, e)
        return []

    print(f"Found {len(prs)} open PRs for {repo}", file=sys.stderr)
    return list(prs)


async def fetch_all(
    client: GitHubClient,
    repos: Sequence[str],
    login: Optional[str] = None,
) -> List[RepoResult]:
    """Fetch every repository concurrently. Results follow ``repos`` order."""
    pr_lists = await asyncio.gather(
        *(fetch_prs_for_repo(client, repo, login) for repo in repos)
    )
    return [RepoResult(repo=repo, prs=tuple(prs)) for repo, prs in zip(repos, pr_lists)]
