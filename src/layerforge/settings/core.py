"""
Core settings management for layerforge.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from PySide6.QtCore import QSettings

from ..content.models import CORE_MOD
from .context import ContextSettings
from .logging import LoggingSettings
from .paths import PathSettings
from .types import ValidationResult
from .validation import SettingsValidator

logger = logging.getLogger(__name__)

ORGANIZATION = "layerforge"
APPLICATION = "layerforge"


class AppSettings:
    """
    Configuration management using QSettings.

    Provides type-safe access to application settings with automatic
    cross-platform storage and validation.
    """

    def __init__(
        self,
        profile: str = "default",
        settings_file: Optional[Union[str, Path]] = None,
    ):
        """Initialize settings for a profile.

        Args:
            profile: Settings profile name (default: "default")
            settings_file: INI file to use instead of the native store
        """
        if settings_file is not None:
            self.settings = QSettings(str(settings_file), QSettings.Format.IniFormat)
        else:
            self.settings = QSettings(ORGANIZATION, APPLICATION)
        self.profile = profile

        # Use profile as a group to create hierarchy: layerforge/layerforge/default/...
        self.settings.beginGroup(profile)

        # Initialize subsystems
        self._validator = SettingsValidator(self)
        self._paths = PathSettings(self.settings)
        self._context = ContextSettings(self.settings)
        self._logging = LoggingSettings(self.settings)

        logger.debug(
            f"Settings initialized for profile '{profile}', stored at: {self.settings.fileName()}"
        )

    # === SUBSYSTEM ACCESS ===

    @property
    def paths(self) -> PathSettings:
        """Access path settings subsystem."""
        return self._paths

    @property
    def context(self) -> ContextSettings:
        """Access editing context subsystem."""
        return self._context

    @property
    def logging(self) -> LoggingSettings:
        """Access logging settings subsystem."""
        return self._logging

    # === PATH SETTINGS (DELEGATED) ===

    @property
    def storage_dir(self) -> Path:
        """Get the base storage directory."""
        return self._paths.storage_dir

    @storage_dir.setter
    def storage_dir(self, value: Path) -> None:
        self._paths.storage_dir = value

    @property
    def games_root(self) -> str:
        """Get the games folder relative to the storage directory."""
        return self._paths.games_root

    @games_root.setter
    def games_root(self, value: str) -> None:
        self._paths.games_root = value

    @property
    def plugins_root(self) -> str:
        """Get the global plugins folder relative to the storage directory."""
        return self._paths.plugins_root

    @plugins_root.setter
    def plugins_root(self, value: str) -> None:
        self._paths.plugins_root = value

    # === CONTEXT SETTINGS (DELEGATED) ===

    @property
    def selected_game(self) -> str:
        """Get the selected game folder."""
        return self._context.selected_game

    @property
    def selected_mod(self) -> str:
        """Get the selected mod folder."""
        return self._context.selected_mod

    @property
    def recent_mods(self) -> List[str]:
        """Get recently edited mods as ``game/mod`` strings."""
        return self._context.recent_mods

    def select(self, game: str, mod: str = CORE_MOD) -> None:
        """Select a game+mod and remember it."""
        self._context.select(game, mod)

    # === LOGGING SETTINGS (DELEGATED) ===

    @property
    def console_logging(self) -> bool:
        """Check if console logging is enabled."""
        return self._logging.console_logging

    @console_logging.setter
    def console_logging(self, value: bool) -> None:
        self._logging.console_logging = value

    @property
    def console_log_level(self) -> str:
        """Get console logging level."""
        return self._logging.console_log_level

    @console_log_level.setter
    def console_log_level(self, value: str) -> None:
        self._logging.console_log_level = value

    @property
    def console_use_colors(self) -> bool:
        """Check if console should use colors."""
        return self._logging.console_use_colors

    @console_use_colors.setter
    def console_use_colors(self, value: bool) -> None:
        self._logging.console_use_colors = value

    @property
    def file_logging(self) -> bool:
        """Check if file logging is enabled."""
        return self._logging.file_logging

    @file_logging.setter
    def file_logging(self, value: bool) -> None:
        self._logging.file_logging = value

    @property
    def log_file_path(self) -> str:
        """Get log file path (read-only)."""
        return self._logging.log_file_path

    @property
    def log_file_absolute_path(self) -> Path:
        """Get absolute path to log file."""
        return self._logging.log_file_absolute_path

    @property
    def diagnostics_level(self) -> str:
        """Get the diagnostics forwarding level."""
        return self._logging.diagnostics_level

    @diagnostics_level.setter
    def diagnostics_level(self, value: str) -> None:
        self._logging.diagnostics_level = value

    @property
    def diagnostics_max_lines(self) -> int:
        """Get maximum number of buffered diagnostics."""
        return self._logging.diagnostics_max_lines

    @diagnostics_max_lines.setter
    def diagnostics_max_lines(self, value: int) -> None:
        self._logging.diagnostics_max_lines = value

    # === VALIDATION ===

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        return self._validator.validate()

    # === UTILITY METHODS ===

    def get_settings_file_path(self) -> str:
        """Get the file path where settings are stored."""
        return self.settings.fileName()

    def sync(self) -> None:
        """Force synchronization of settings to storage."""
        self.settings.sync()
