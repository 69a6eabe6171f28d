"""
Data models for layered game content.

Contains type definitions and constants used throughout the content
package. Keeps the dict-based approach for records while providing
clear type hints.
"""

from typing import Any, Dict, List, TypeAlias

# Type aliases for clarity
Entity: TypeAlias = Dict[str, Any]
"""A single content record (item, trait, pool entry, ...) as a dict."""

Collection: TypeAlias = List[Entity]
"""A list of records sharing one schema and one logical file name."""

Layer: TypeAlias = List[Entity]
"""Records contributed to a collection by one source (plugin, core or mod)."""


# Reserved mod folder holding the base game data
CORE_MOD = "_core"

# Default folder names used by the storage path convention
DEFAULT_GAMES_ROOT = "games_files"
DEFAULT_PLUGINS_ROOT = "engine_files/plugins"

# Record keys with special meaning
ID_KEY = "id"
UID_KEY = "uid"
ORDER_KEY = "order"

# Layer names in precedence order (lowest first)
LAYER_PLUGIN = "plugin"
LAYER_CORE = "core"
LAYER_MOD = "mod"
