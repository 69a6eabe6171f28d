"""
Settings validation system for layerforge.
"""

import logging
from typing import List, TYPE_CHECKING

from .types import ValidationResult

if TYPE_CHECKING:
    from .core import AppSettings

logger = logging.getLogger(__name__)


class SettingsValidator:
    """Validates configuration settings."""

    def __init__(self, settings: "AppSettings"):
        self.settings = settings

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        errors: List[str] = []
        warnings: List[str] = []

        # Validate storage layout
        storage_dir = self.settings.paths.storage_dir
        games_dir = self.settings.paths.games_dir
        if not storage_dir.exists():
            errors.append(f"Storage directory does not exist: {storage_dir}")
        elif not games_dir.is_dir():
            warnings.append(f"Games folder not found: {games_dir}")

        # Validate selected context
        game = self.settings.selected_game
        if not game:
            warnings.append("No game selected")
        elif games_dir.is_dir():
            if not (games_dir / game).is_dir():
                errors.append(f"Selected game does not exist: {game}")
            elif not (games_dir / game / self.settings.selected_mod).is_dir():
                warnings.append(
                    f"Selected mod does not exist: {game}/{self.settings.selected_mod}"
                )

        # Clean up recent mods that no longer exist
        if games_dir.is_dir():
            recent = self.settings.recent_mods
            valid_recent = [r for r in recent if (games_dir / r).is_dir()]
            for entry in recent:
                if entry not in valid_recent:
                    warnings.append(f"Recent mod no longer exists: {entry}")
            if len(valid_recent) != len(recent):
                self.settings.settings.setValue("context/recent_mods", valid_recent)
                self.settings.settings.sync()

        if errors:
            logger.warning(f"Configuration has {len(errors)} errors")
        return ValidationResult(
            is_valid=len(errors) == 0, errors=errors, warnings=warnings
        )
