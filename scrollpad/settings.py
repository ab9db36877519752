"""User settings for the editor.

Settings are stored as JSON in an OS-appropriate config directory and are
read once per process. Bad files and bad values are logged and replaced by
defaults; the editor never refuses to start over its configuration.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .constants import EditorConstants
from .document import OverwritePolicy

logger = logging.getLogger(__name__)

_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


@dataclass
class Settings:
    overwrite_policy: OverwritePolicy = OverwritePolicy.CONFIRM
    cursor_shape: str = EditorConstants.DEFAULT_CURSOR_SHAPE
    log_level: str = 'WARNING'
    page_scroll_divisor: int = EditorConstants.DEFAULT_PAGE_SCROLL_DIVISOR

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        """Build settings from a parsed config file, skipping invalid values."""
        settings = cls()

        policy = data.get('overwrite_policy')
        if policy is not None:
            try:
                settings.overwrite_policy = OverwritePolicy(policy)
            except ValueError:
                logger.warning(f"Invalid overwrite_policy {policy!r}, using {settings.overwrite_policy.value}")

        shape = data.get('cursor_shape')
        if shape is not None:
            if shape in EditorConstants.CURSOR_SHAPES:
                settings.cursor_shape = shape
            else:
                logger.warning(f"Invalid cursor_shape {shape!r}, using {settings.cursor_shape}")

        level = data.get('log_level')
        if level is not None:
            if isinstance(level, str) and level.upper() in _LOG_LEVELS:
                settings.log_level = level.upper()
            else:
                logger.warning(f"Invalid log_level {level!r}, using {settings.log_level}")

        divisor = data.get('page_scroll_divisor')
        if divisor is not None:
            # bool is an int subclass; reject it explicitly
            if isinstance(divisor, int) and not isinstance(divisor, bool) and 1 <= divisor <= 10:
                settings.page_scroll_divisor = divisor
            else:
                logger.warning(f"Invalid page_scroll_divisor {divisor!r}, using {settings.page_scroll_divisor}")

        return settings

    def to_dict(self) -> Dict[str, Any]:
        return {
            'overwrite_policy': self.overwrite_policy.value,
            'cursor_shape': self.cursor_shape,
            'log_level': self.log_level,
            'page_scroll_divisor': self.page_scroll_divisor,
        }


class SettingsStore:
    """Reads and writes ``settings.json`` in the user config directory."""

    def __init__(self, config_dir: Optional[Path] = None):
        self._config_dir = config_dir or Path(platformdirs.user_config_dir("scrollpad"))
        self._settings_file = self._config_dir / "settings.json"

    @property
    def path(self) -> Path:
        return self._settings_file

    def load(self) -> Settings:
        """Load settings, falling back to defaults on any problem."""
        if not self._settings_file.exists():
            return Settings()
        try:
            with open(self._settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not load settings from {self._settings_file}: {e}")
            return Settings()
        if not isinstance(data, dict):
            logger.warning("Settings file has invalid format (not a dict), ignoring")
            return Settings()
        return Settings.from_dict(data)

    def save(self, settings: Settings) -> bool:
        """Write settings atomically.

        Returns:
            True if the file was written
        """
        temp_file = self._settings_file.with_suffix('.tmp')
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(settings.to_dict(), f, indent=2)
            temp_file.replace(self._settings_file)
            return True
        except OSError as e:
            logger.warning(f"Could not save settings to {self._settings_file}: {e}")
            try:
                if temp_file.exists():
                    temp_file.unlink()
            except OSError:
                pass
            return False


# Global instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the settings for this process, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = SettingsStore().load()
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the next ``get_settings()`` reloads."""
    global _settings
    _settings = None
