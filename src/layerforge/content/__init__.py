"""
Module for working with layered game content.

Provides services for reading collection layers from storage, merging the
plugin, core and mod layers of a collection and caching the merged result
for the current game+mod context.
"""

from .service import CollectionService
from .models import (
    Entity,
    Collection,
    Layer,
    CORE_MOD,
    DEFAULT_GAMES_ROOT,
    DEFAULT_PLUGINS_ROOT,
    ID_KEY,
    UID_KEY,
    ORDER_KEY,
)
from .errors import ContentError, SourceUnavailable, MalformedSource
from .storage import Storage, FileSystemStorage
from .loaders import CollectionFileLoader
from .merge import LayerMerger, merge_layers, deep_merge
from .cache import CollectionCache
from .gate import ResultGate
from .plugins import Plugin, PluginRegistry

# Public exports
__all__ = [
    # Main service
    "CollectionService",
    # Type aliases
    "Entity",
    "Collection",
    "Layer",
    # Constants
    "CORE_MOD",
    "DEFAULT_GAMES_ROOT",
    "DEFAULT_PLUGINS_ROOT",
    "ID_KEY",
    "UID_KEY",
    "ORDER_KEY",
    # Errors
    "ContentError",
    "SourceUnavailable",
    "MalformedSource",
    # Component classes (for advanced usage)
    "Storage",
    "FileSystemStorage",
    "CollectionFileLoader",
    "LayerMerger",
    "merge_layers",
    "deep_merge",
    "CollectionCache",
    "ResultGate",
    "Plugin",
    "PluginRegistry",
]
