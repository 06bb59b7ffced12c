"""Configuration loader for pr-list.

Reads optional YAML configuration from
$XDG_CONFIG_HOME/pr-list-generator/config.yaml (or a custom path) and
provides the dataclass the CLI is driven by.

Requires PyYAML (pip install pyyaml).
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass, field
from typing import List, Optional

import yaml

logger = logging.getLogger("pr_list.config")

APP_DIR_NAME = "pr-list-generator"

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_USER_AGENT = "pr-list-generator/1.0.0"

# Chromium flags used when launching the copy-to-clipboard browser
DEFAULT_BROWSER_ARGS: list[str] = [
    "--no-first-run",
    "--disable-background-timer-throttling",
    "--disable-backgrounding-occluded-windows",
    "--disable-renderer-backgrounding",
    "--disable-extensions",
    "--disable-plugins",
    "--disable-web-security",
    "--disable-features=TranslateUI",
    "--no-default-browser-check",
    "--disable-default-apps",
]


def get_config_home() -> str:
    """Return $XDG_CONFIG_HOME, falling back to ~/.config."""
    return os.environ.get("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")


def get_config_dir() -> str:
    """Return the pr-list config directory. Not created here."""
    return os.path.join(get_config_home(), APP_DIR_NAME)


def default_config_path() -> str:
    return os.path.join(get_config_dir(), "config.yaml")


def default_repos_file() -> str:
    return os.path.join(get_config_dir(), "repos.json")


def default_output_path() -> str:
    return os.path.join(tempfile.gettempdir(), "pr_list.html")


@dataclass
class Config:
    """Top-level application configuration."""

    api_url: str = DEFAULT_API_URL
    user_agent: str = DEFAULT_USER_AGENT
    headless: bool = False
    output_path: str = field(default_factory=default_output_path)
    repos_file: str = field(default_factory=default_repos_file)
    browser_args: List[str] = field(default_factory=lambda: list(DEFAULT_BROWSER_ARGS))


def _expand_path(path: str) -> str:
    """Expand ~ and environment variables in a path."""
    return os.path.expanduser(os.path.expandvars(path))


def _str_option(data: dict, key: str, default: str) -> str:
    value = data.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def load_config(config_path: Optional[str] = None) -> Config:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML config file. Defaults to
            $XDG_CONFIG_HOME/pr-list-generator/config.yaml.

    Returns:
        A Config instance. If the config file does not exist or cannot be
        parsed, returns a default Config (graceful degradation).
    """
    path = _expand_path(config_path) if config_path else default_config_path()

    if not os.path.isfile(path):
        return Config()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Could not read config file %s: %s", path, e)
        return Config()

    if not isinstance(data, dict):
        return Config()

    defaults = Config()

    headless = data.get("headless", defaults.headless)
    if not isinstance(headless, bool):
        headless = defaults.headless

    browser_args = data.get("browser_args")
    if not isinstance(browser_args, list):
        browser_args = list(DEFAULT_BROWSER_ARGS)
    else:
        browser_args = [str(a) for a in browser_args]

    output_path = _str_option(data, "output_path", "")
    repos_file = _str_option(data, "repos_file", "")

    return Config(
        api_url=_str_option(data, "api_url", defaults.api_url).rstrip("/"),
        user_agent=_str_option(data, "user_agent", defaults.user_agent),
        headless=headless,
        output_path=_expand_path(output_path) if output_path else defaults.output_path,
        repos_file=_expand_path(repos_file) if repos_file else defaults.repos_file,
        browser_args=browser_args,
    )
