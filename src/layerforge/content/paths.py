"""
Storage path convention for game content.

Every collection lives at ``<root>/<game>/<mod>/<collection>``. Build paths
through these helpers only.
"""

from typing import List

from .models import CORE_MOD, DEFAULT_GAMES_ROOT


def mod_path(game: str, mod: str, root: str = DEFAULT_GAMES_ROOT) -> str:
    """Return the folder of one mod (or ``_core``) of a game."""
    return f"{root}/{game}/{mod}"


def collection_path(
    game: str, mod: str, collection: str, root: str = DEFAULT_GAMES_ROOT
) -> str:
    """Return the storage path of a collection in a game+mod context."""
    return f"{mod_path(game, mod, root)}/{collection}"


def mod_chain(mod: str) -> List[str]:
    """Return the mod folders contributing data, lowest precedence first.

    Editing core reads only ``_core``; editing a mod reads ``_core`` and then
    the mod itself.
    """
    if mod == CORE_MOD:
        return [CORE_MOD]
    return [CORE_MOD, mod]
