#!/usr/bin/env python3
"""Fetch your open GitHub pull requests and copy them as Slack-ready HTML.

Pipeline:
  1. Resolve repositories (arguments, or interactive selection from saved ones)
  2. Resolve a GitHub token while the browser launches in parallel
  3. Fetch open PRs per repository, concurrently
  4. Render HTML and copy it to the clipboard through the browser
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional, Sequence

from pr_list.auth import TokenProvider, create_client, verify_authentication
from pr_list.clipboard import ClipboardPublisher
from pr_list.config import Config, load_config
from pr_list.errors import PrListError
from pr_list.fetcher import fetch_all
from pr_list.format_html import generate_html, generate_slack_html
from pr_list.format_slack import format_summary, generate_slack_text
from pr_list.repo_store import RepoStore
from pr_list.report_data import RepoResult
from pr_list.selection import resolve_repositories

logger = logging.getLogger("pr_list")

OUTPUT_CLIPBOARD = "clipboard"
OUTPUT_HTML = "html"
OUTPUT_SLACK = "slack"
OUTPUT_SLACK_HTML = "slack-html"

_EPILOG = """\
examples:
  pr-list facebook/react
  pr-list microsoft/vscode vercel/next.js
  pr-list your-org/repo1 your-org/repo2
  pr-list  # interactive mode with saved repositories

authentication:
  Set GITHUB_TOKEN (or GH_TOKEN) or use gh CLI (gh auth login)

exit status:
  0 on success or cancellation, 1 on an invalid repository or a missing or
  rejected token (unknown arguments count as invalid repositories), 2 on a
  malformed option value such as an unknown --output mode.

repository storage:
  Repositories are saved to $XDG_CONFIG_HOME/pr-list-generator/repos.json
  (default ~/.config/pr-list-generator/repos.json). When no repositories are
  given, you can select from previously used ones.
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pr-list",
        description="PR List Generator - fetch your open pull requests from GitHub",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=_EPILOG,
    )
    parser.add_argument("repos", nargs="*", metavar="owner/repo", help="repositories to fetch PRs from (default: interactive selection)")
    parser.add_argument("--config", dest="config_path", default=None, help="path to YAML config file (default: ~/.config/pr-list-generator/config.yaml)")
    parser.add_argument(
        "--output", default=OUTPUT_CLIPBOARD,
        choices=[OUTPUT_CLIPBOARD, OUTPUT_HTML, OUTPUT_SLACK, OUTPUT_SLACK_HTML],
        help="clipboard: copy rich HTML via the browser; html/slack/slack-html: print to stdout (default: %(default)s)",
    )
    parser.add_argument("--headless", action="store_true", default=None, help="run the browser headless (default: config value, else visible)")
    parser.add_argument("--no-input", dest="no_input", action="store_true", default=False, help="never prompt; use all saved repositories when none are given")
    parser.add_argument("-v", "--verbose", action="store_true", default=False, help="enable debug logging")
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


async def _fetch_results(
    cfg: Config,
    repos: List[str],
    publisher: Optional[ClipboardPublisher],
    providers: Optional[Sequence[TokenProvider]] = None,
) -> List[RepoResult]:
    """Resolve a token (while the browser launches) and fetch every repository."""
    if publisher is not None:
        outcomes = await asyncio.gather(
            create_client(cfg, providers), publisher.start(), return_exceptions=True,
        )
        # both must settle before a token error propagates
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome
        client = outcomes[0]
    else:
        client = await create_client(cfg, providers)

    async with client:
        login = await verify_authentication(client)
        return await fetch_all(client, repos, login)


async def run(
    args: argparse.Namespace,
    providers: Optional[Sequence[TokenProvider]] = None,
) -> int:
    """Execute one pr-list run. Raises PrListError on fatal conditions."""
    cfg = load_config(args.config_path)
    if args.headless is not None:
        cfg.headless = args.headless

    store = RepoStore(cfg.repos_file)
    interactive = not args.no_input and sys.stdin.isatty()
    repos = resolve_repositories(args.repos, store, interactive=interactive)
    logger.debug("Resolved %d repositories: %s", len(repos), ", ".join(repos))

    print("Fetching your open pull requests...", file=sys.stderr)

    publisher = None
    if args.output == OUTPUT_CLIPBOARD:
        publisher = ClipboardPublisher(headless=cfg.headless, launch_args=cfg.browser_args)

    try:
        results = await _fetch_results(cfg, repos, publisher, providers)

        if args.output == OUTPUT_SLACK:
            print(generate_slack_text(results))
        elif args.output == OUTPUT_HTML:
            print(generate_html(results))
        elif args.output == OUTPUT_SLACK_HTML:
            print(generate_slack_html(results))
        else:
            print("Generated PR list", file=sys.stderr)
            await publisher.publish(generate_html(results), cfg.output_path)
    finally:
        if publisher is not None:
            await publisher.close()

    print("", file=sys.stderr)
    print(format_summary(results), file=sys.stderr)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point. The only place errors become exit codes."""
    args, extra = build_parser().parse_known_args(argv)
    configure_logging(args.verbose)
    # unrecognised arguments are validated as repositories
    args.repos = list(args.repos) + extra

    try:
        return asyncio.run(run(args))
    except PrListError as e:
        if e.fatal:
            print(f"Error: {e}", file=sys.stderr)
        else:
            print(str(e), file=sys.stderr)
        return e.exit_code
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
