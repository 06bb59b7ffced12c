"""Structured PR data model, consumed by all formatters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from pr_list.repo_store import repo_display_name


@dataclass(frozen=True)
class PullRequest:
    """An open PR authored by the authenticated user."""
    number: int
    title: str
    url: str                 # html_url of the PR
    additions: int = 0       # 0 when the detail fetch failed
    deletions: int = 0


@dataclass(frozen=True)
class RepoResult:
    """All open PRs found for one repository, in API listing order."""
    repo: str                # "owner/name"
    prs: Tuple[PullRequest, ...] = ()

    @property
    def display_name(self) -> str:
        return repo_display_name(self.repo)


@dataclass
class SummaryStats:
    """Aggregate counts printed after a run."""
    total_prs: int
    total_repos: int
    per_repo: List[Tuple[str, int]] = field(default_factory=list)


def summarize(results: Sequence[RepoResult]) -> SummaryStats:
    """Count PRs across all repositories, including repositories with none."""
    return SummaryStats(
        total_prs=sum(len(r.prs) for r in results),
        total_repos=len(results),
        per_repo=[(r.display_name, len(r.prs)) for r in results],
    )
