"""Copy rendered HTML to the system clipboard through a Chromium page.

Opening the generated file in a real browser and issuing select-all + copy
puts rich text (links, bold, code) on the clipboard, which Slack keeps on
paste. Everything here is best effort: failures are logged and the user is
pointed at the HTML file instead.

Requires Playwright with Chromium installed:
pip install playwright && playwright install chromium
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from playwright.async_api import Browser, Error as PlaywrightError, Playwright, async_playwright

from pr_list.config import DEFAULT_BROWSER_ARGS

logger = logging.getLogger("pr_list.clipboard")

# Milliseconds to let the page render and the clipboard update
_SETTLE_MS = 50


def write_html(html: str, path: str) -> Path:
    """Write the HTML document to ``path`` and return its absolute path."""
    out = Path(path).expanduser().resolve()
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(html, encoding="utf-8")
    return out


class ClipboardPublisher:
    """Owns a Playwright Chromium instance used for copy-to-clipboard."""

    def __init__(self, headless: bool = False, launch_args: Sequence[str] = DEFAULT_BROWSER_ARGS):
        self.headless = headless
        self.launch_args = list(launch_args)
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    @property
    def available(self) -> bool:
        return self._browser is not None

    async def start(self) -> bool:
        """Launch Chromium. Returns False (and logs) when it cannot start."""
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless,
                args=self.launch_args,
            )
        except (PlaywrightError, OSError) as e:
            logger.warning("Could not launch browser for clipboard copy: %s", e)
            await self.close()
            return False
        logger.debug("Browser launched (headless=%s)", self.headless)
        return True

    async def copy_file(self, path: Path) -> None:
        """Open ``path`` in a fresh context, select everything and copy it.

        Raises:
            RuntimeError: If the browser was never started.
            playwright.async_api.Error: On any browser-side failure.
        """
        if self._browser is None:
            raise RuntimeError("browser is not running")

        context = await self._browser.new_context()
        try:
            await context.grant_permissions(["clipboard-read", "clipboard-write"])
            page = await context.new_page()
            await page.goto(Path(path).as_uri())
            await page.wait_for_load_state("networkidle")
            await page.wait_for_timeout(_SETTLE_MS)
            await page.keyboard.press("ControlOrMeta+A")
            await page.keyboard.press("ControlOrMeta+C")
            await page.wait_for_timeout(_SETTLE_MS)
        finally:
            await context.close()

    async def publish(self, html: str, path: str) -> bool:
        """Write ``html`` to ``path`` and copy its rendered content.

        Returns:
            True if the content was copied. On failure a warning is logged,
            the file path is printed as a manual fallback, and False is
            returned.
        """
        try:
            out = write_html(html, path)
        except OSError as e:
            logger.warning("Could not write HTML file %s: %s", path, e)
            return False

        try:
            await self.copy_file(out)
        except (PlaywrightError, RuntimeError, OSError) as e:
            logger.warning("Failed to copy using browser automation: %s", e)
            print(f"Fallback: open this file manually: {out.as_uri()}", file=sys.stderr)
            return False

        print("Copied rich content to clipboard using browser automation!", file=sys.stderr)
        print("You can now paste it directly into Slack with full formatting", file=sys.stderr)
        return True

    async def close(self) -> None:
        """Shut down the browser and Playwright. Never raises."""
        if self._browser is not None:
            try:
                await self._browser.close()
            except PlaywrightError as e:
                logger.debug("Error closing browser: %s", e)
            self._browser = None
        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except PlaywrightError as e:
                logger.debug("Error stopping Playwright: %s", e)
            self._playwright = None
