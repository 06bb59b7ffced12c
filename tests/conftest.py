"""Shared pytest configuration and fixtures."""

from __future__ import annotations

import pytest

from pr_list.github_client import GitHubAPIError
from pr_list.repo_store import RepoStore


def pr_payload(number, title="Some change", login="octocat", repo="facebook/react"):
    """A pull-list entry shaped like GitHub's REST response."""
    return {
        "number": number,
        "title": title,
        "html_url": f"https://github.com/{repo}/pull/{number}",
        "user": {"login": login},
        "state": "open",
    }


class FakeGitHubClient:
    """In-memory stand-in for GitHubClient.

    Args:
        login: Login returned by get_authenticated_user.
        pulls: {"owner/name": [pull-list entries]}.
        details: {("owner/name", number): {"additions": .., "deletions": ..}}.
            Non-dict values are returned as-is.
        failing_lists: Repositories whose listing raises GitHubAPIError.
        failing_details: (repo, number) pairs whose detail fetch raises.
        user_error: Exception raised by get_authenticated_user, if any.
    """

    def __init__(
        self,
        login="octocat",
        pulls=None,
        details=None,
        failing_lists=(),
        failing_details=(),
        user_error=None,
    ):
        self.login = login
        self.pulls = pulls or {}
        self.details = details or {}
        self.failing_lists = set(failing_lists)
        self.failing_details = set(failing_details)
        self.user_error = user_error
        self.calls = []
        self.closed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.closed = True

    async def get_authenticated_user(self):
        self.calls.append(("user",))
        if self.user_error is not None:
            raise self.user_error
        return {"login": self.login}

    async def list_pull_requests(self, owner, repo, state="open", per_page=100):
        full = f"{owner}/{repo}"
        self.calls.append(("list", full, state, per_page))
        if full in self.failing_lists:
            raise GitHubAPIError(404, "Not Found")
        return list(self.pulls.get(full, []))

    async def get_pull_request(self, owner, repo, number):
        full = f"{owner}/{repo}"
        self.calls.append(("detail", full, number))
        if (full, number) in self.failing_details:
            raise GitHubAPIError(502, "Bad Gateway")
        detail = self.details.get((full, number), {})
        return dict(detail) if isinstance(detail, dict) else detail


@pytest.fixture
def make_client():
    """Factory fixture returning FakeGitHubClient instances."""
    return FakeGitHubClient


@pytest.fixture
def store(tmp_path):
    """A RepoStore backed by a file in a temporary directory."""
    return RepoStore(str(tmp_path / "pr-list-generator" / "repos.json"))


@pytest.fixture
def xdg_home(tmp_path, monkeypatch):
    """Point XDG_CONFIG_HOME at a temporary directory."""
    home = tmp_path / "xdg"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home))
    return home


@pytest.fixture
def no_token_env(monkeypatch):
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("GH_TOKEN", raising=False)
