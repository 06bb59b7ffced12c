"""Slack mrkdwn text formatter and run summary for pr-list."""

from __future__ import annotations

from typing import Sequence

from pr_list.report_data import PullRequest, RepoResult, summarize


def generate_slack_text(results: Sequence[RepoResult]) -> str:
    """Render the results as Slack mrkdwn text.

    Args:
        results: Per-repository PR lists, rendered in the given order.

    Returns:
        One ``*repo*`` header per repository followed by its PR lines,
        repositories separated by a blank line.
    """
    blocks = []
    for result in results:
        header = f"*{result.display_name}*"
        if not result.prs:
            blocks.append(f"{header}\n_No open PRs_")
            continue
        items = "\n".join(_render_pr(pr) for pr in result.prs)
        blocks.append(f"{header}\n{items}")
    return "\n\n".join(blocks)


def format_summary(results: Sequence[RepoResult]) -> str:
    """Render the end-of-run summary printed to the terminal."""
    s = summarize(results)
    lines = [f"Summary: {s.total_prs} open PRs across {s.total_repos} repositories"]
    for name, count in s.per_repo:
        lines.append(f"   {name}: {count} PRs")
    return "\n".join(lines)


def _render_pr(pr: PullRequest) -> str:
    """Render a PR as a Slack link with a +/- stat token."""
    return f"<{pr.url}|#{pr.number} {pr.title}> `+{pr.additions}/-{pr.deletions}`"
