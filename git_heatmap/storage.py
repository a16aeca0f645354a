"""
SQLite-based storage for persisted settings.
"""

import os
import sqlite3
from pathlib import Path

from git_heatmap.config import DAYS_SETTING_KEY, DEFAULT_DAYS


def _get_default_db_path() -> Path:
    """Get the default database path."""
    env_path = os.environ.get("GIT_HEATMAP_DB_PATH")
    if env_path:
        return Path(env_path)
    return Path.home() / ".git-heatmap" / "settings.db"


class SettingsStorage:
    """SQLite-based key/value settings."""

    def __init__(self, db_path: str | Path | None = None):
        """
        Initialize the settings storage.

        Args:
            db_path: Path to the SQLite database file.
                     Defaults to ~/.git-heatmap/settings.db
        """
        if db_path is None:
            db_path = _get_default_db_path()
        self.db_path = Path(db_path)
        self._init_db()

    def _init_db(self) -> None:
        """Create the settings table if it doesn't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS settings (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
                )
            """)
            conn.commit()

    def get_setting(self, key: str, default: str | None = None) -> str | None:
        """
        Get a setting value by key.

        Args:
            key: The setting key
            default: Default value if key doesn't exist

        Returns:
            The setting value or default
        """
        with sqlite3.connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT value FROM settings WHERE key = ?",
                (key,),
            ).fetchone()
        return row[0] if row else default

    def set_setting(self, key: str, value: str) -> None:
        """
        Set a setting value (upserts).

        Args:
            key: The setting key
            value: The value to store
        """
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO settings (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, value),
            )
            conn.commit()

    def get_default_days(self) -> int:
        """Stored display window, or 365 if unset or invalid."""
        value = self.get_setting(DAYS_SETTING_KEY)
        try:
            days = int(value) if value is not None else DEFAULT_DAYS
        except ValueError:
            return DEFAULT_DAYS
        return days if days > 0 else DEFAULT_DAYS

    def set_default_days(self, days: int) -> int:
        """
        Persist the default display window.

        Non-positive values reset to 365.

        Returns:
            The value actually stored
        """
        if days <= 0:
            days = DEFAULT_DAYS
        self.set_setting(DAYS_SETTING_KEY, str(days))
        return days
