"""Unit tests for clipboard.py with Playwright replaced by mocks.

Run with: python3 -m pytest tests/test_clipboard.py -v
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

from playwright.async_api import Error as PlaywrightError

from pr_list.clipboard import ClipboardPublisher, write_html


def _fake_playwright():
    """Build (async_playwright mock, playwright, browser, context, page)."""
    page = MagicMock()
    page.goto = AsyncMock()
    page.wait_for_load_state = AsyncMock()
    page.wait_for_timeout = AsyncMock()
    page.keyboard.press = AsyncMock()

    context = MagicMock()
    context.new_page = AsyncMock(return_value=page)
    context.grant_permissions = AsyncMock()
    context.close = AsyncMock()

    browser = MagicMock()
    browser.new_context = AsyncMock(return_value=context)
    browser.close = AsyncMock()

    pw = MagicMock()
    pw.chromium.launch = AsyncMock(return_value=browser)
    pw.stop = AsyncMock()

    async_pw = MagicMock()
    async_pw.return_value.start = AsyncMock(return_value=pw)
    return async_pw, pw, browser, context, page


def _publish(publisher, html, path):
    async def go():
        started = await publisher.start()
        try:
            copied = await publisher.publish(html, path)
        finally:
            await publisher.close()
        return started, copied
    return asyncio.run(go())


# ---------------------------------------------------------------------------
# write_html
# ---------------------------------------------------------------------------

class TestWriteHtml:

    def test_writes_file(self, tmp_path):
        out = write_html("<p>hi</p>", str(tmp_path / "sub" / "pr_list.html"))
        assert out.read_text(encoding="utf-8") == "<p>hi</p>"
        assert out.is_absolute()


# ---------------------------------------------------------------------------
# ClipboardPublisher
# ---------------------------------------------------------------------------

class TestClipboardPublisher:

    def test_launch_options(self):
        async_pw, pw, browser, context, page = _fake_playwright()
        with patch("pr_list.clipboard.async_playwright", async_pw):
            publisher = ClipboardPublisher(headless=True, launch_args=["--no-first-run"])
            assert asyncio.run(publisher.start()) is True
        pw.chromium.launch.assert_awaited_once_with(headless=True, args=["--no-first-run"])

    def test_copy_sequence(self, tmp_path, capsys):
        async_pw, pw, browser, context, page = _fake_playwright()
        path = tmp_path / "pr_list.html"
        with patch("pr_list.clipboard.async_playwright", async_pw):
            started, copied = _publish(ClipboardPublisher(), "<p>x</p>", str(path))

        assert started and copied
        assert path.read_text() == "<p>x</p>"
        page.goto.assert_awaited_once_with(path.resolve().as_uri())
        page.wait_for_load_state.assert_awaited_once_with("networkidle")
        keys = [c.args[0] for c in page.keyboard.press.await_args_list]
        assert keys == ["ControlOrMeta+A", "ControlOrMeta+C"]
        context.close.assert_awaited_once()
        browser.close.assert_awaited_once()
        pw.stop.assert_awaited_once()
        assert "Copied rich content to clipboard" in capsys.readouterr().err

    def test_copy_failure_falls_back_to_path(self, tmp_path, capsys):
        async_pw, pw, browser, context, page = _fake_playwright()
        page.goto.side_effect = PlaywrightError("net::ERR_FILE_NOT_FOUND")
        path = tmp_path / "pr_list.html"
        with patch("pr_list.clipboard.async_playwright", async_pw):
            started, copied = _publish(ClipboardPublisher(), "<p>x</p>", str(path))

        assert started is True
        assert copied is False
        assert path.exists()
        err = capsys.readouterr().err
        assert f"Fallback: open this file manually: {path.resolve().as_uri()}" in err
        context.close.assert_awaited_once()

    def test_launch_failure_is_not_fatal(self, tmp_path, capsys):
        async_pw, pw, browser, context, page = _fake_playwright()
        pw.chromium.launch.side_effect = PlaywrightError("Executable doesn't exist")
        path = tmp_path / "pr_list.html"
        with patch("pr_list.clipboard.async_playwright", async_pw):
            publisher = ClipboardPublisher()
            started, copied = _publish(publisher, "<p>x</p>", str(path))

        assert started is False
        assert copied is False
        assert publisher.available is False
        pw.stop.assert_awaited()
        assert "Fallback: open this file manually" in capsys.readouterr().err

    def test_never_started(self, tmp_path, capsys):
        publisher = ClipboardPublisher()
        copied = asyncio.run(publisher.publish("<p>x</p>", str(tmp_path / "out.html")))
        assert copied is False
        assert "Fallback" in capsys.readouterr().err

    def test_close_without_start(self):
        asyncio.run(ClipboardPublisher().close())
