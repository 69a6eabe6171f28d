"""
Logging-related settings for layerforge.
"""

import logging
from pathlib import Path

from ._access import SettingsAccess

logger = logging.getLogger(__name__)

# Log file location, relative to the working directory
LOG_FILE_PATH = "logs/layerforge.csv"

VALID_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingSettings(SettingsAccess):
    """Manages logging-related settings."""

    # === CONSOLE LOGGING SETTINGS ===

    @property
    def console_logging(self) -> bool:
        """Check if console logging is enabled."""
        return self._get_bool("logging/console_enabled", False)

    @console_logging.setter
    def console_logging(self, value: bool) -> None:
        """Set console logging enabled state."""
        self.settings.setValue("logging/console_enabled", value)
        self.settings.sync()

    @property
    def console_log_level(self) -> str:
        """Get console logging level."""
        return self._get_str("logging/console_level", "INFO")

    @console_log_level.setter
    def console_log_level(self, value: str) -> None:
        """Set console logging level."""
        if value.upper() in VALID_LEVELS:
            self.settings.setValue("logging/console_level", value.upper())
            self.settings.sync()
        else:
            logger.warning(
                f"Invalid console log level: {value}, keeping current: {self.console_log_level}"
            )

    @property
    def console_use_colors(self) -> bool:
        """Check if console should use colors."""
        return self._get_bool("logging/console_use_colors", True)

    @console_use_colors.setter
    def console_use_colors(self, value: bool) -> None:
        """Set console color usage."""
        self.settings.setValue("logging/console_use_colors", value)
        self.settings.sync()

    # === FILE LOGGING SETTINGS ===

    @property
    def file_logging(self) -> bool:
        """Check if file logging is enabled."""
        return self._get_bool("logging/file_enabled", False)

    @file_logging.setter
    def file_logging(self, value: bool) -> None:
        """Set file logging enabled state."""
        self.settings.setValue("logging/file_enabled", value)
        self.settings.sync()

    @property
    def log_file_path(self) -> str:
        """Get log file path (read-only, always returns constant)."""
        return LOG_FILE_PATH

    @property
    def log_file_absolute_path(self) -> Path:
        """Get absolute path to log file."""
        return Path(LOG_FILE_PATH).resolve()

    # === DIAGNOSTICS SETTINGS ===

    @property
    def diagnostics_level(self) -> str:
        """Get the level of records forwarded to the host application."""
        return self._get_str("logging/diagnostics_level", "WARNING")

    @diagnostics_level.setter
    def diagnostics_level(self, value: str) -> None:
        """Set the diagnostics level."""
        if value.upper() in VALID_LEVELS:
            self.settings.setValue("logging/diagnostics_level", value.upper())
            self.settings.sync()
        else:
            logger.warning(
                f"Invalid diagnostics level: {value}, keeping current: {self.diagnostics_level}"
            )

    @property
    def diagnostics_max_lines(self) -> int:
        """Get maximum number of records kept in the diagnostics buffer."""
        return self._get_int("logging/diagnostics_max_lines", 1000)

    @diagnostics_max_lines.setter
    def diagnostics_max_lines(self, value: int) -> None:
        """Set maximum number of records in the diagnostics buffer."""
        if value > 0:
            self.settings.setValue("logging/diagnostics_max_lines", value)
            self.settings.sync()
        else:
            logger.warning(
                f"Invalid diagnostics max lines: {value}, keeping current: {self.diagnostics_max_lines}"
            )
