"""Exception hierarchy for pr-list.

Helpers raise these; only ``pr_list.__main__.main`` turns them into an exit
code and a message.
"""

from __future__ import annotations


class PrListError(RuntimeError):
    """Base error carrying the process exit code it maps to."""

    exit_code = 1
    fatal = True


class InvalidRepoError(PrListError):
    """A repository identifier is not in ``owner/repo`` form."""

    def __init__(self, repo: str):
        self.repo = repo
        super().__init__(
            f'Invalid repository format: "{repo}"\n'
            '   Repository must be in format "owner/repo"'
        )


class MissingTokenError(PrListError):
    """No GitHub token could be found through any provider."""


class AuthenticationError(PrListError):
    """The GitHub API rejected the resolved token."""


class SelectionCancelled(PrListError):
    """The user cancelled or supplied no repositories. Not an error."""

    exit_code = 0
    fatal = False
