"""Repository identifiers and the persisted list of previously used repos.

The list lives in a single JSON file shaped
``{"repos": ["owner/repo", ...], "lastUpdated": "<ISO-8601>"}``.
Reads never fail the run: a missing, unreadable or corrupt file is an
empty list.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from typing import Iterable, List, Optional

logger = logging.getLogger("pr_list.repo_store")


def is_valid_repo(repo: str) -> bool:
    """Return True if ``repo`` is ``owner/name`` with exactly one slash."""
    if not isinstance(repo, str) or repo.count("/") != 1:
        return False
    owner, name = repo.split("/")
    return bool(owner) and bool(name)


def split_repo(repo: str) -> Optional[tuple[str, str]]:
    """Split an identifier into (owner, name), or None if malformed."""
    if not is_valid_repo(repo):
        return None
    owner, name = repo.split("/")
    return owner, name


def repo_display_name(repo: str) -> str:
    """Return the part after the last '/' ("facebook/react" -> "react")."""
    return repo.split("/")[-1] or repo


def dedupe_repos(repos: Iterable[str]) -> List[str]:
    """Deduplicate identifiers by exact equality, keeping first-seen order."""
    seen = set()
    result = []
    for repo in repos:
        if repo not in seen:
            seen.add(repo)
            result.append(repo)
    return result


class RepoStore:
    """Read-modify-write access to the saved repository list."""

    def __init__(self, path: str):
        self.path = path

    def load(self) -> List[str]:
        """Return saved repositories, or [] when there are none or the file is bad."""
        if not os.path.isfile(self.path):
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not read saved repositories file %s: %s", self.path, e)
            return []

        repos = data.get("repos") if isinstance(data, dict) else None
        if not isinstance(repos, list):
            logger.warning("Saved repositories file %s has no repos list", self.path)
            return []

        return dedupe_repos(r for r in repos if isinstance(r, str))

    def save(self, repos: Iterable[str]) -> bool:
        """Write ``repos`` (deduplicated) to disk.

        Returns:
            True on success. Write failures are logged, not raised.
        """
        data = {
            "repos": dedupe_repos(repos),
            "lastUpdated": datetime.now(timezone.utc).isoformat(),
        }
        try:
            os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
                f.write("\n")
        except OSError as e:
            logger.warning("Could not save repositories to %s: %s", self.path, e)
            return False
        return True

    def merge(self, new_repos: Iterable[str]) -> List[str]:
        """Union the saved list with ``new_repos``, save it and return it."""
        merged = dedupe_repos([*self.load(), *new_repos])
        self.save(merged)
        return merged
