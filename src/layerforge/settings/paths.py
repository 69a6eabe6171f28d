"""
Path-related settings for layerforge.
"""

from pathlib import Path

from ..content.models import DEFAULT_GAMES_ROOT, DEFAULT_PLUGINS_ROOT
from ._access import SettingsAccess


class PathSettings(SettingsAccess):
    """Manages where content is stored."""

    @property
    def storage_dir(self) -> Path:
        """Get the base directory all storage paths are relative to."""
        return Path(self._get_str("paths/storage", "."))

    @storage_dir.setter
    def storage_dir(self, value: Path) -> None:
        """Set the base storage directory."""
        self.settings.setValue("paths/storage", str(value))
        self.settings.sync()

    @property
    def games_root(self) -> str:
        """Get the folder holding all games, relative to the storage dir."""
        return self._get_str("paths/games_root", DEFAULT_GAMES_ROOT) or DEFAULT_GAMES_ROOT

    @games_root.setter
    def games_root(self, value: str) -> None:
        """Set the games folder."""
        self.settings.setValue("paths/games_root", value)
        self.settings.sync()

    @property
    def plugins_root(self) -> str:
        """Get the folder holding global plugins, relative to the storage dir."""
        return self._get_str("paths/plugins_root", DEFAULT_PLUGINS_ROOT) or DEFAULT_PLUGINS_ROOT

    @plugins_root.setter
    def plugins_root(self, value: str) -> None:
        """Set the global plugins folder."""
        self.settings.setValue("paths/plugins_root", value)
        self.settings.sync()

    @property
    def games_dir(self) -> Path:
        """Get the absolute games folder (derived from storage_dir)."""
        return (self.storage_dir / self.games_root).resolve()
