"""
Editing context settings: the selected game and mod.
"""

import logging
from typing import List

from ..content.models import CORE_MOD
from ._access import SettingsAccess

logger = logging.getLogger(__name__)

MAX_RECENT_MODS = 10


class ContextSettings(SettingsAccess):
    """Manages the last selected game+mod and the recently edited mods."""

    @property
    def selected_game(self) -> str:
        """Get the selected game folder ("" if none)."""
        return self._get_str("context/game", "")

    @selected_game.setter
    def selected_game(self, value: str) -> None:
        self.settings.setValue("context/game", value)
        self.settings.sync()

    @property
    def selected_mod(self) -> str:
        """Get the selected mod folder (``_core`` by default)."""
        return self._get_str("context/mod", CORE_MOD) or CORE_MOD

    @selected_mod.setter
    def selected_mod(self, value: str) -> None:
        self.settings.setValue("context/mod", value or CORE_MOD)
        self.settings.sync()

    @property
    def recent_mods(self) -> List[str]:
        """Get recently edited mods as ``game/mod`` strings, newest first."""
        return self._get_list("context/recent_mods", [])

    def select(self, game: str, mod: str = CORE_MOD) -> None:
        """Select a game+mod and record it as recently edited."""
        self.selected_game = game
        self.selected_mod = mod
        self.add_recent_mod(game, mod)

    def add_recent_mod(self, game: str, mod: str) -> None:
        """Add a game+mod to the recent list (max 10 items)."""
        entry = f"{game}/{mod}"
        recent = [r for r in self.recent_mods if r != entry]
        recent.insert(0, entry)
        self.settings.setValue("context/recent_mods", recent[:MAX_RECENT_MODS])
        self.settings.sync()
        logger.debug(f"Recent mods: {recent[:MAX_RECENT_MODS]}")

    def clear_recent_mods(self) -> None:
        """Clear the recent mods list."""
        self.settings.setValue("context/recent_mods", [])
        self.settings.sync()
