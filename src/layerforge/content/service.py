"""
Main service for working with layered game content.

Provides the high-level API for loading the plugin, core and mod layers of a
collection, merging them, caching the result for the current game+mod
context and resolving schemas against that context.
"""

import asyncio
import copy
import logging
from typing import Dict, List, Optional, TYPE_CHECKING

from .cache import CollectionCache
from .gate import ResultGate
from .loaders import CollectionFileLoader
from .merge import LayerMerger
from .models import (
    CORE_MOD,
    DEFAULT_GAMES_ROOT,
    DEFAULT_PLUGINS_ROOT,
    Collection,
    Layer,
)
from .paths import collection_path, mod_path
from .plugins import PluginRegistry
from .storage import Storage

if TYPE_CHECKING:
    from ..schema.models import Schema
    from ..schema.registry import SchemaRegistry
    from ..settings import AppSettings


class CollectionService:
    """Service for working with layered game content.

    Responsible for reading collection layers through the storage
    collaborator, merging them in plugin < core < mod order, caching merged
    collections per context and adopting only the newest schema resolution
    when the context changes while a resolution is in flight.
    """

    def __init__(
        self,
        storage: Storage,
        game: Optional[str] = None,
        mod: str = CORE_MOD,
        root: str = DEFAULT_GAMES_ROOT,
        plugins: Optional[PluginRegistry] = None,
        schemas: Optional["SchemaRegistry"] = None,
        merge_arrays_by_id: bool = False,
    ):
        """Initialize the service.

        Args:
            storage: Storage collaborator
            game: Game folder name (None until a game is selected)
            mod: Active mod folder name, ``_core`` for the base game
            root: Root folder of all games
            plugins: Plugins enabled for the context (synthetic lowest layer)
            schemas: Registry of static schemas, used by source generators
            merge_arrays_by_id: Merge id-carrying list items instead of
                concatenating them
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.storage = storage
        self.root = root
        self.schemas = schemas
        self.plugins = plugins or PluginRegistry()

        # Initialize components
        self.loader = CollectionFileLoader(storage)
        self.merger = LayerMerger(merge_arrays_by_id=merge_arrays_by_id)
        self.cache = CollectionCache()

        self._game = game
        self._mod = mod or CORE_MOD
        self._context_version = 0
        self._resolutions: Dict[str, ResultGate["Schema"]] = {}

        self.logger.info(f"Initializing CollectionService for {game}/{self._mod}")

    @classmethod
    def from_settings(
        cls,
        storage: Storage,
        settings: "AppSettings",
        schemas: Optional["SchemaRegistry"] = None,
    ) -> "CollectionService":
        """Create a service for the game+mod context stored in settings."""
        return cls(
            storage,
            game=settings.selected_game or None,
            mod=settings.selected_mod,
            root=settings.games_root,
            schemas=schemas,
        )

    # === CONTEXT ===

    @property
    def game(self) -> Optional[str]:
        return self._game

    @property
    def mod(self) -> str:
        return self._mod

    @property
    def is_core(self) -> bool:
        """True when editing the base game rather than a mod override."""
        return self._mod == CORE_MOD

    async def switch_context(
        self,
        game: str,
        mod: str = CORE_MOD,
        load_plugins: bool = True,
        plugins_root: str = DEFAULT_PLUGINS_ROOT,
    ) -> None:
        """Switch to another game+mod context.

        Drops every cached collection and supersedes every pending schema
        resolution, then reloads the enabled plugins. If another switch
        happens while plugins load, the older plugin set is discarded.
        """
        self._game = game
        self._mod = mod or CORE_MOD
        self._context_version += 1
        version = self._context_version
        self.cache.clear()
        for gate in self._resolutions.values():
            gate.invalidate()
        self.plugins = PluginRegistry()
        self.logger.info(f"Switched context to {game}/{self._mod}")

        if not load_plugins:
            return
        plugins = await PluginRegistry.load(
            self.storage, game, self._mod, self.root, plugins_root
        )
        if version == self._context_version:
            self.plugins = plugins
        else:
            self.logger.debug(f"Discarding plugins loaded for superseded context {game}/{mod}")

    def _require_game(self) -> str:
        if not self._game:
            raise RuntimeError("No game selected")
        return self._game

    def _selected_game(self, name: str) -> Optional[str]:
        # Reads without a selected game degrade to empty results
        if not self._game:
            self.logger.warning(f"No game selected, '{name}' reads as empty")
        return self._game or None

    # === LAYERS ===

    async def layers(self, name: str) -> List[Layer]:
        """Return the layers of a collection, lowest precedence first.

        The core layer is only read when a mod is active; when editing core
        the active mod layer already is the core file.
        """
        game = self._selected_game(name)
        if game is None:
            return []
        plugin_layer = copy.deepcopy(self.plugins.layer(name))

        if self.is_core:
            own = await self.loader.read_layer(
                collection_path(game, CORE_MOD, name, self.root)
            )
            return [plugin_layer, own]

        core, own = await asyncio.gather(
            self.loader.read_layer(collection_path(game, CORE_MOD, name, self.root)),
            self.loader.read_layer(collection_path(game, self._mod, name, self.root)),
        )
        return [plugin_layer, core, own]

    async def load_merged(self, name: str) -> Collection:
        """Return the merged, visible records of a collection.

        Results are cached per collection name until the context changes.
        """
        cached = self.cache.get(name)
        if cached is not None:
            return cached

        version = self._context_version
        layers = await self.layers(name)
        merged = self.merger.merge(*layers)

        if version == self._context_version:
            self.cache.put(name, merged)
        self.logger.debug(
            f"Merged '{name}': {len(merged)} records from {len(layers)} layers"
        )
        return merged

    async def load_own(self, name: str) -> Collection:
        """Return only the active mod's own records of a collection."""
        game = self._selected_game(name)
        if game is None:
            return []
        return await self.loader.read_layer(
            collection_path(game, self._mod, name, self.root)
        )

    async def save_collection(self, name: str, records: Collection) -> None:
        """Write the active mod's records of a collection.

        Empty values are stripped from a copy before writing; the cached
        merged collection is dropped.
        """
        from ..schema.sanitize import clear_empty_values

        game = self._require_game()
        cleaned = copy.deepcopy(records)
        clear_empty_values(cleaned)
        await self.storage.write_collection(
            collection_path(game, self._mod, name, self.root), cleaned
        )
        self.cache.invalidate(name)
        self.logger.info(f"Saved {len(cleaned)} records to '{name}' in {game}/{self._mod}")

    # === DISCOVERY ===

    async def list_games(self) -> List[str]:
        """Return the game folders under the root."""
        return await self.storage.list_subfolders(self.root)

    async def list_mods(self, game: Optional[str] = None) -> List[str]:
        """Return the mod folders of a game, ``_core`` included."""
        game = game or self._selected_game("mods")
        if game is None:
            return []
        return await self.storage.list_subfolders(f"{self.root}/{game}")

    def mod_folder(self) -> str:
        """Return the storage folder of the active mod."""
        return mod_path(self._require_game(), self._mod, self.root)

    def plugin_options(self) -> List[Dict[str, str]]:
        """Return ``{value, label}`` options for the enabled plugins."""
        return self.plugins.options()

    def source_names(self) -> List[str]:
        """Return the collection names that have a registered schema."""
        return self.schemas.names() if self.schemas else []

    # === SCHEMAS ===

    async def resolve_schema(
        self, schema: "Schema", view: str = "default"
    ) -> Optional["Schema"]:
        """Resolve a schema against the current context.

        Each ``view`` keeps its own result. If a newer resolution for the same
        view (or a context switch) happened while this one was in flight, the
        result is discarded and None is returned.
        """
        from ..schema.resolver import SchemaResolver

        gate = self._resolutions.setdefault(view, ResultGate())
        token = gate.issue()
        resolved = await SchemaResolver(self).resolve(schema)
        if gate.offer(token, resolved):
            return resolved
        self.logger.debug(f"Discarding superseded schema resolution for view '{view}'")
        return None

    def current_schema(self, view: str = "default") -> Optional["Schema"]:
        """Return the last adopted resolution of a view."""
        gate = self._resolutions.get(view)
        return gate.adopted if gate else None
