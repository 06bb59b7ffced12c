"""HTML formatter for pr-list.

The full document is what gets opened in the browser and copied; Slack keeps
links, bold and inline code when the rendered page is pasted.

PR titles are interpolated as-is, without HTML escaping.
"""

from __future__ import annotations

from typing import Sequence

from pr_list.report_data import PullRequest, RepoResult

_STYLE = """\
    body {
      font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif;
    }

    blockquote {
      margin: 5px 0;
      padding: 8px 12px;
      border-left: 4px solid #ccc;
      background: #f9f9f9;
    }

    a {
      color: #1264a3;
      text-decoration: none;
    }

    a:hover {
      text-decoration: underline;
    }

    strong {
      font-weight: 600;
    }

    code {
      background: #f1f1f1;
      padding: 2px 4px;
      border-radius: 3px;
      font-family: 'SF Mono', Monaco, 'Cascadia Code', 'Roboto Mono', Consolas, 'Courier New', monospace;
      font-size: 0.9em;
    }

    em {
      color: #666;
    }"""


def generate_html(results: Sequence[RepoResult]) -> str:
    """Render the results as a complete, self-contained HTML document.

    Args:
        results: Per-repository PR lists, rendered in the given order.

    Returns:
        The HTML document as a single string. Identical input always yields
        identical output.
    """
    body = "\n\n".join(_repo_block(result) for result in results)
    lines = [
        "<!DOCTYPE html>",
        "<html>",
        "",
        "<head>",
        "  <title>PR List</title>",
        '  <meta charset="utf-8">',
        "  <style>",
        _STYLE,
        "  </style>",
        "</head>",
        "",
        "<body>",
        body,
        "</body>",
        "",
        "</html>",
        "",
    ]
    return "\n".join(lines)


def generate_slack_html(results: Sequence[RepoResult]) -> str:
    """Render a compact paragraph-based HTML fragment (no document wrapper)."""
    blocks = []
    for result in results:
        header = f"<p><strong>{result.display_name}</strong></p>"
        if not result.prs:
            blocks.append(f"{header}<p><em>No open PRs</em></p>")
            continue
        items = "".join(f"<p>{_pr_link(pr)}</p>" for pr in result.prs)
        blocks.append(f"{header}{items}")
    return "<br>".join(blocks)


# --- internal helpers (private) ---


def _repo_block(result: RepoResult) -> str:
    """Header plus one line per PR, or a placeholder when there are none."""
    lines = [f"<blockquote><strong><code>{result.display_name}</code></strong></blockquote>"]
    if not result.prs:
        lines.append("<blockquote><em>No open PRs</em></blockquote>")
    for pr in result.prs:
        lines.append(f"<blockquote>{_pr_link(pr)}</blockquote>")
    return "\n".join(lines)


def _pr_link(pr: PullRequest) -> str:
    return (
        f'<a href="{pr.url}">#{pr.number} {pr.title}</a> '
        f"<code>+{pr.additions}/-{pr.deletions}</code>"
    )
