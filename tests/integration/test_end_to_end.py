"""End-to-end tests on a game folder tree: load, resolve, edit and save."""

import asyncio
from pathlib import Path
from typing import Any, Callable

import pytest

from layerforge.content import CollectionService, FileSystemStorage
from layerforge.schema import (
    DefaultValueInjector,
    FieldKind,
    FilterConfig,
    FilterSchemaGenerator,
    builtin_registry,
    is_base_authoring,
)

pytestmark = pytest.mark.integration


def test_items_merge_across_plugin_core_and_mod(
    tmp_path: Path, write_json: Callable[[str, Any], Path]
) -> None:
    """Test the documented items example: plugin [], core sword, mod rename."""
    write_json("games_files/demo/_core/items", [{"id": "sword", "dmg": 5}])
    write_json("games_files/demo/mod/items", [{"id": "sword", "name": "Iron Sword"}])
    service = CollectionService(FileSystemStorage(tmp_path), game="demo", mod="mod")

    items = asyncio.run(service.load_merged("items"))

    assert items == [{"id": "sword", "dmg": 5, "name": "Iron Sword"}]


def test_resolve_item_template_schema(demo_game: Path) -> None:
    """Test the item template schema resolves against the demo game."""
    registry = builtin_registry()
    service = CollectionService(FileSystemStorage(demo_game), schemas=registry)

    async def run() -> Any:
        await service.switch_context("demo", "hardcore")
        schema = registry.get("item_templates")
        assert schema is not None
        return await service.resolve_schema(schema)

    resolved = asyncio.run(run())

    assert resolved is not None
    traits = resolved["traits"].objects
    assert traits is not None
    assert list(traits) == ["tags", "level", "rarity"]
    assert traits["level"].kind is FieldKind.NUMBER
    price = resolved["price"].objects
    assert price is not None and list(price) == ["gold", "gem"]


def test_pool_entry_editing_flow(demo_game: Path) -> None:
    """Test filter generation and saving of a pool entry in core."""
    registry = builtin_registry()
    storage = FileSystemStorage(demo_game)
    service = CollectionService(storage, schemas=registry)
    entry_schema = registry.get("pool_entries")
    config = FilterConfig.from_schema(entry_schema)
    assert entry_schema is not None and config is not None

    entry: dict[str, Any] = {
        "id": "boss_drop",
        "pool": "weapons",
        "entities": [{"id": "e1", "filters_include": {"traits.level": [1, 5], "slots": ["hand"]}}],
    }

    async def run() -> Any:
        await service.switch_context("demo")
        generator = FilterSchemaGenerator(service, registry, config)
        DefaultValueInjector(is_base_authoring(service.mod)).apply(entry, entry_schema)

        first = await generator.update(entry)
        entry["pool"] = "loot"
        second = await generator.update(entry)

        await service.save_collection("pool_entries", [entry])
        return first, second, await storage.read_collection("games_files/demo/_core/pool_entries")

    first, second, saved = asyncio.run(run())

    assert first.schema is not None
    assert first.schema["traits.rarity"].options == ["common", "rare"]
    assert first.removed == 1
    assert second.removed == 0
    assert entry["entities"][0]["filters_include"] == {"traits.level": [1, 5]}
    assert entry["entities"][0]["chance"] == 50
    assert saved[0]["entities"][0]["weight"] == 1
    assert "filters_exclude" not in saved[0]["entities"][0]
