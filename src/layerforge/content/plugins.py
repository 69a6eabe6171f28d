"""
Plugin discovery for game content.

Plugins bundle extra records for any collection. The core and mod manifests
list which plugins are enabled; global plugins live under the engine plugin
folder and a mod may ship its own copy of a plugin, which replaces the
global one. The bundled records form the lowest precedence layer.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, cast

from .models import (
    CORE_MOD,
    DEFAULT_GAMES_ROOT,
    DEFAULT_PLUGINS_ROOT,
    Entity,
    Layer,
)
from .paths import mod_chain, mod_path
from .storage import Storage

MANIFEST_NAME = "manifest"
PLUGIN_FILE_NAME = "plugin"


@dataclass
class Plugin:
    """One enabled plugin and the records it bundles.

    Attributes:
        id: Plugin folder name
        name: Display name from plugin.json (may be empty)
        description: Short description from plugin.json
        version: Version string from plugin.json
        data: Mapping of collection name -> bundled records
        source: Storage folder the plugin was loaded from
    """

    id: str
    name: str = ""
    description: str = ""
    version: str = ""
    data: Dict[str, Layer] = field(default_factory=lambda: {})
    source: str = ""

    @classmethod
    def from_dict(cls, plugin_id: str, raw: Dict[str, Any], source: str = "") -> "Plugin":
        """Create a Plugin from a parsed plugin.json.

        Collections whose data is not a list are ignored.
        """
        data: Dict[str, Layer] = {}
        raw_data = raw.get("data")
        if isinstance(raw_data, dict):
            for collection, records in cast(Dict[str, Any], raw_data).items():
                if isinstance(records, list):
                    data[collection] = [
                        cast(Entity, r) for r in cast(List[Any], records) if isinstance(r, dict)
                    ]
        return cls(
            id=plugin_id,
            name=str(raw.get("name") or ""),
            description=str(raw.get("description") or ""),
            version=str(raw.get("version") or ""),
            data=data,
            source=source,
        )

    @property
    def label(self) -> str:
        """Human readable label used in plugin choice fields."""
        if not self.name:
            return self.id
        if self.description:
            return f"{self.name} [{self.description}]"
        return self.name


class PluginRegistry:
    """Holds the plugins enabled for one game+mod context."""

    def __init__(self, plugins: Optional[List[Plugin]] = None):
        self.plugins: List[Plugin] = list(plugins or [])
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @classmethod
    async def load(
        cls,
        storage: Storage,
        game: str,
        mod: str = CORE_MOD,
        root: str = DEFAULT_GAMES_ROOT,
        plugins_root: str = DEFAULT_PLUGINS_ROOT,
    ) -> "PluginRegistry":
        """Discover and load the plugins enabled for a game+mod context.

        Args:
            storage: Storage collaborator
            game: Game folder name
            mod: Active mod folder name (``_core`` when editing the base game)
            root: Root folder of all games
            plugins_root: Folder holding global plugins

        Returns:
            Registry with global plugins first, mod plugins replacing them
        """
        registry = cls()
        logger = registry.logger
        chain = mod_chain(mod)

        enabled: List[str] = []
        for mod_id in chain:
            manifest = await _read_dict(storage, f"{mod_path(game, mod_id, root)}/{MANIFEST_NAME}", logger)
            for plugin_id in cast(List[Any], (manifest or {}).get("plugins") or []):
                if isinstance(plugin_id, str) and plugin_id not in enabled:
                    enabled.append(plugin_id)

        if not enabled:
            logger.debug(f"No plugins enabled for {game}/{mod}")
            return registry

        # 1. Global plugins
        for plugin_id in await storage.list_subfolders(plugins_root):
            if plugin_id not in enabled:
                continue
            source = f"{plugins_root}/{plugin_id}"
            raw = await _read_dict(storage, f"{source}/{PLUGIN_FILE_NAME}", logger)
            if raw is None:
                logger.error(f"Plugin manifest not found for global plugin '{plugin_id}': {source}")
                continue
            registry.add(Plugin.from_dict(plugin_id, raw, source))

        # 2. Mod plugins replace global plugins (and core plugins) of the same id
        for mod_id in chain:
            base = f"{mod_path(game, mod_id, root)}/plugins"
            for plugin_id in await storage.list_subfolders(base):
                if plugin_id not in enabled:
                    continue
                source = f"{base}/{plugin_id}"
                raw = await _read_dict(storage, f"{source}/{PLUGIN_FILE_NAME}", logger)
                if raw is None:
                    logger.error(f"Plugin manifest not found for mod plugin '{plugin_id}': {source}")
                    continue
                registry.add(Plugin.from_dict(plugin_id, raw, source))

        missing = [p for p in enabled if registry.get(p) is None]
        if missing:
            logger.warning(f"Enabled plugins not found: {missing}")
        logger.info(f"Loaded {len(registry.plugins)} plugins for {game}/{mod}")
        return registry

    def add(self, plugin: Plugin) -> None:
        """Add a plugin, replacing an already loaded plugin with the same id."""
        self.plugins = [p for p in self.plugins if p.id != plugin.id]
        self.plugins.append(plugin)

    def get(self, plugin_id: str) -> Optional[Plugin]:
        """Return a loaded plugin by id."""
        for plugin in self.plugins:
            if plugin.id == plugin_id:
                return plugin
        return None

    def layer(self, collection: str) -> Layer:
        """Return the records every plugin bundles for a collection."""
        result: Layer = []
        for plugin in self.plugins:
            result.extend(plugin.data.get(collection, []))
        return result

    def options(self) -> List[Dict[str, str]]:
        """Return ``{value, label}`` options describing the loaded plugins."""
        return [{"value": p.id, "label": p.label} for p in self.plugins]


async def _read_dict(
    storage: Storage, path: str, logger: logging.Logger
) -> Optional[Dict[str, Any]]:
    """Read a single JSON object, returning None on any failure."""
    try:
        data = await storage.read_collection(path)
    except Exception as e:
        logger.warning(f"Could not read {path}: {e}")
        return None
    if data is None:
        return None
    if not isinstance(data, dict):
        logger.error(f"Expected an object in {path}, got {type(data).__name__}")
        return None
    return cast(Dict[str, Any], data)
