"""
Configuration management for git-heatmap.

Loads settings from environment variables and parses the per-block
configuration text.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from git_heatmap.errors import InvalidVaultLocation, MalformedConfigValue

# Load .env file from project root
load_dotenv()

DEFAULT_DAYS = 365
DAYS_SETTING_KEY = "default_days"
DAYS_KEYS = ("days", "day")
THEMES = ("light", "dark")

GIT_HEATMAP_REPO_PATH = os.getenv("GIT_HEATMAP_REPO_PATH")
GIT_HEATMAP_THEME = os.getenv("GIT_HEATMAP_THEME", "light")


def get_repo_path() -> Path:
    """
    Resolve the working directory handed to git.

    Returns:
        The configured repository path, or the current directory

    Raises:
        InvalidVaultLocation: If the path does not exist or is not a directory
    """
    raw = os.getenv("GIT_HEATMAP_REPO_PATH", GIT_HEATMAP_REPO_PATH)
    path = Path(raw).expanduser() if raw else Path.cwd()

    if not path.is_dir():
        raise InvalidVaultLocation(f"Cannot access repository path: {path}")
    return path


def get_default_theme() -> str:
    """Return the configured theme, falling back to light."""
    theme = os.getenv("GIT_HEATMAP_THEME", GIT_HEATMAP_THEME).strip().lower()
    return theme if theme in THEMES else "light"


def _parse_days_line(line: str) -> int | None:
    """
    Parse a single ``days: N`` line.

    Returns:
        None if the line is not a days entry at all

    Raises:
        MalformedConfigValue: If the line is a days entry with a bad value
    """
    parts = line.split(":")
    if len(parts) != 2 or parts[0].strip().lower() not in DAYS_KEYS:
        return None

    value = parts[1].strip()
    try:
        days = int(value)
    except ValueError:
        raise MalformedConfigValue(f"Invalid days value: {value!r}")

    if days <= 0:
        raise MalformedConfigValue(f"Days must be positive, got {days}")
    return days


def parse_block_config(source: str, default_days: int = DEFAULT_DAYS) -> int:
    """
    Read the display window from a heatmap block's configuration text.

    Recognizes ``days: N`` (or ``day: N``), case-insensitive. Unrecognized
    lines and invalid values are ignored.

    Args:
        source: Raw block text
        default_days: Value used when the block does not override it

    Returns:
        Number of days to display
    """
    display_days = default_days
    for line in (source or "").splitlines():
        try:
            parsed = _parse_days_line(line)
        except MalformedConfigValue:
            continue
        if parsed is not None:
            display_days = parsed
    return display_days
