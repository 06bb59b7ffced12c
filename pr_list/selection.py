"""Resolve which repositories to fetch: from CLI arguments or interactively.

Every path through here ends in a non-empty list of valid ``owner/repo``
identifiers, an InvalidRepoError, or a SelectionCancelled. Newly seen
repositories are merged into the RepoStore.
"""

from __future__ import annotations

import sys
from typing import List, Optional, Sequence

import click

from pr_list.errors import InvalidRepoError, SelectionCancelled
from pr_list.repo_store import RepoStore, dedupe_repos, is_valid_repo

FORMAT_HINT = 'Repository must be in format "owner/repo"'

ACTION_SELECT = "select"
ACTION_ADD = "add"
ACTION_ALL = "all"

_ACTIONS = [
    (ACTION_SELECT, "Select from saved repositories"),
    (ACTION_ADD, "Add new repositories"),
    (ACTION_ALL, "Use all saved repositories"),
]


def resolve_repositories(
    repo_args: Sequence[str],
    store: RepoStore,
    interactive: bool = True,
) -> List[str]:
    """Turn parsed CLI arguments (or prompts) into the repositories to fetch.

    Args:
        repo_args: Positional repository arguments, already parsed.
        store: Persisted repository list to read from and merge into.
        interactive: Whether prompting the user is allowed.

    Returns:
        A non-empty, deduplicated list of "owner/repo" identifiers.

    Raises:
        InvalidRepoError: If any argument is not "owner/repo".
        SelectionCancelled: If the user cancels or selects nothing.
    """
    if repo_args:
        return _repos_from_args(repo_args, store)

    if not interactive:
        saved = store.load()
        if not saved:
            raise SelectionCancelled(
                "No repositories given and none saved. "
                "Pass owner/repo arguments or run interactively."
            )
        return saved

    try:
        return select_repositories(store)
    except click.Abort:
        raise SelectionCancelled("Operation cancelled.") from None


def _repos_from_args(repo_args: Sequence[str], store: RepoStore) -> List[str]:
    for repo in repo_args:
        if not is_valid_repo(repo):
            raise InvalidRepoError(repo)

    repos = dedupe_repos(repo_args)
    store.merge(repos)
    print(f"Saved {len(repos)} repositories for future use", file=sys.stderr)
    return repos


def select_repositories(store: RepoStore) -> List[str]:
    """Interactive flow: choose among saved repositories or add new ones."""
    saved = store.load()

    if not saved:
        click.echo("No previously saved repositories found.")
        new_repos = prompt_for_new_repos()
        store.merge(new_repos)
        return new_repos

    click.echo(f"Found {len(saved)} previously used repositories:")
    for index, repo in enumerate(saved, start=1):
        click.echo(f"  {index}. {repo}")
    click.echo("")

    action = _prompt_action()

    if action == ACTION_ALL:
        return saved

    if action == ACTION_ADD:
        new_repos = prompt_for_new_repos()
        store.merge(new_repos)
        return new_repos

    return select_from_saved(saved, store)


def select_from_saved(saved: Sequence[str], store: RepoStore) -> List[str]:
    """Pick a subset of ``saved`` (all pre-selected), optionally adding more."""
    selected = _prompt_subset(saved)
    if not selected:
        raise SelectionCancelled("No repositories selected.")

    if click.confirm("Would you like to add more repositories?", default=False):
        new_repos = prompt_for_new_repos()
        store.merge(new_repos)
        return dedupe_repos([*selected, *new_repos])

    return selected


def prompt_for_new_repos() -> List[str]:
    """Prompt for repositories until an empty answer.

    An empty first answer cancels. Invalid entries are rejected and asked
    again.

    Raises:
        SelectionCancelled: If no repository was entered.
    """
    repos: List[str] = []

    while True:
        if not repos:
            message = "Enter repository (owner/repo format)"
        else:
            message = "Enter another repository (or press Enter to finish)"
        value = click.prompt(message, default="", show_default=False).strip()

        if not value:
            break

        if not is_valid_repo(value):
            click.echo(FORMAT_HINT)
            continue

        repos.append(value)
        click.echo(f"Added: {value}")

    if not repos:
        raise SelectionCancelled("No repositories entered.")

    return dedupe_repos(repos)


# --- internal helpers (private) ---


def _prompt_action() -> str:
    click.echo("What would you like to do?")
    for index, (_, label) in enumerate(_ACTIONS, start=1):
        click.echo(f"  {index}. {label}")
    choice = click.prompt(
        "Choice",
        type=click.IntRange(1, len(_ACTIONS)),
        default=1,
    )
    return _ACTIONS[choice - 1][0]


def _prompt_subset(saved: Sequence[str]) -> List[str]:
    """Ask for a comma-separated list of indices; blank keeps everything."""
    while True:
        answer = click.prompt(
            "Select repositories to fetch PRs from (comma-separated numbers, Enter for all, 'none' for none)",
            default="",
            show_default=False,
        )
        if answer.strip().lower() == "none":
            return []
        indices = _parse_indices(answer, len(saved))
        if indices is None:
            click.echo(f"Please enter numbers between 1 and {len(saved)}, separated by commas.")
            continue
        if not indices:
            return list(saved)
        return dedupe_repos(saved[i - 1] for i in indices)


def _parse_indices(answer: str, count: int) -> Optional[List[int]]:
    """Parse "1, 3,4" into [1, 3, 4]. Returns None on bad input, [] for blank."""
    answer = answer.strip()
    if not answer:
        return []
    indices = []
    for part in answer.split(","):
        part = part.strip()
        if not part:
            continue
        if not part.isdigit():
            return None
        index = int(part)
        if not 1 <= index <= count:
            return None
        indices.append(index)
    return indices if indices else None
