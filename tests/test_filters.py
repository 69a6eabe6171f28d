"""Tests for filter schema generation of pool entries."""

import asyncio
from typing import Any, Dict, List, Optional

from layerforge.content.models import Collection
from layerforge.schema import (
    FieldKind,
    FilterConfig,
    FilterSchemaGenerator,
    MatchMode,
    SchemaRegistry,
    builtin_registry,
)

TRAITS = [
    {"id": "rarity", "type": "chooseOne", "values": ["common", "rare"]},
    {"id": "level", "type": "number"},
    {"id": "biomes", "values": ["forest", "desert"]},
]

POOLS = [
    {"id": "weapons", "source": "item_templates", "filter_fields": ["traits.level", "tags"]},
    {"id": "rich", "source": "item_templates", "filter_fields": ["traits.rarity", "slots", "price.gold"]},
    {"id": "custom", "source": "item_templates", "filter_fields": ["traits.biomes"]},
    {"id": "broken", "source": "item_templates", "filter_fields": ["nonexistent.path", "traits.missing"]},
    {"id": "ghost", "source": "unregistered", "filter_fields": ["a"]},
    {"id": "ab", "source": "things", "filter_fields": ["a", "b"]},
    {"id": "ac", "source": "things", "filter_fields": ["a", "c"]},
    {"id": "bounded", "source": "things", "filter_fields": ["d", "stats.hp", "stats.charm"]},
]


class FakeSource:
    """Collection source serving fixed collections, optionally delayed."""

    def __init__(self, delays: Optional[Dict[str, float]] = None):
        self.collections: Dict[str, Collection] = {
            "pool_definitions": POOLS,
            "item_traits": TRAITS,
            "item_slots": [{"id": "hand"}, {"id": "head"}],
            "item_templates": [{"id": "gold", "is_currency": True}, {"id": "axe"}],
            "stats": [
                {"id": "hp", "type": "number"},
                {"id": "charm", "type": "hologram", "values": ["low", "high"]},
            ],
        }
        self.delays = delays or {}
        self.loads: List[str] = []

    async def load_merged(self, name: str) -> Collection:
        self.loads.append(name)
        delay = self.delays.get(name)
        if delay:
            await asyncio.sleep(delay)
        return [dict(r) for r in self.collections.get(name, [])]

    def plugin_options(self) -> List[Dict[str, str]]:
        return []

    def source_names(self) -> List[str]:
        return []


def make_registry() -> SchemaRegistry:
    registry = builtin_registry()
    registry.register(
        "things",
        {
            "a": {"type": "string"},
            "b": {"type": "number"},
            "c": {"type": "boolean"},
            "d": {"type": "number", "min": 1, "max": 100, "step": 5},
            "stats": {"type": "object", "sourceCollection": "stats"},
        },
    )
    return registry


def make_generator(source: Optional[FakeSource] = None) -> FilterSchemaGenerator:
    registry = make_registry()
    config = FilterConfig.from_schema(registry.get("pool_entries"))
    assert config is not None
    return FilterSchemaGenerator(source or FakeSource(), registry, config)


def entry(pool: Optional[str], include: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {
        "id": "entry",
        "pool": pool,
        "entities": [{"id": "e1", "filters_include": dict(include or {}), "filters_exclude": {}}],
    }


class TestFilterConfig:
    """Test reading the generator config from a schema."""

    def test_config_from_pool_entry_schema(self) -> None:
        """Test the build_filters field describes the config."""
        config = FilterConfig.from_schema(builtin_registry().get("pool_entries"))
        assert config == FilterConfig(
            reference_field="pool",
            pool_collection="pool_definitions",
            source_schema_field="source",
            field_list_field="filter_fields",
        )

    def test_no_config_without_generator(self) -> None:
        """Test schemas without build_filters yield no config."""
        assert FilterConfig.from_schema(builtin_registry().get("item_slots")) is None


class TestFilterSchemaGeneration:
    """Test conversion of field paths to filter fields."""

    def test_number_becomes_range_and_list_gets_and_or(self) -> None:
        """Test number trait and string list conversions."""
        update = asyncio.run(make_generator().update(entry("weapons")))

        assert update.schema is not None
        level = update.schema["traits.level"]
        tags = update.schema["tags"]
        assert level.kind is FieldKind.RANGE
        assert level.label == "traits.level"
        assert tags.kind is FieldKind.STRING_LIST
        assert tags.allow_and_mode is True
        assert tags.match_mode is MatchMode.OR

    def test_choices_become_choose_many(self) -> None:
        """Test choice fields become multi choice with loaded options."""
        update = asyncio.run(make_generator().update(entry("rich")))

        assert update.schema is not None
        rarity = update.schema["traits.rarity"]
        slots = update.schema["slots"]
        price = update.schema["price.gold"]
        assert rarity.kind is FieldKind.CHOOSE_MANY
        assert rarity.options == ["common", "rare"]
        assert slots.kind is FieldKind.CHOOSE_MANY
        assert slots.options == ["hand", "head"]
        assert price.kind is FieldKind.RANGE

    def test_custom_record_with_values_is_choice(self) -> None:
        """Test a custom record without type but with values is a choice."""
        update = asyncio.run(make_generator().update(entry("custom")))
        assert update.schema is not None
        biomes = update.schema["traits.biomes"]
        assert biomes.kind is FieldKind.CHOOSE_MANY
        assert biomes.options == ["forest", "desert"]

    def test_unresolvable_paths_are_invalid_fields(self) -> None:
        """Test broken paths become invalid fields with a reason."""
        update = asyncio.run(make_generator().update(entry("broken")))

        assert update.schema is not None
        missing = update.schema["nonexistent.path"]
        assert missing.kind is FieldKind.INVALID
        assert missing.label == "nonexistent.path"
        assert missing.tooltip and "nonexistent" in missing.tooltip
        assert update.schema["traits.missing"].kind is FieldKind.INVALID

    def test_unregistered_source_schema(self) -> None:
        """Test a pool naming an unknown schema yields invalid fields."""
        update = asyncio.run(make_generator().update(entry("ghost")))
        assert update.schema is not None
        assert update.schema["a"].kind is FieldKind.INVALID

    def test_no_reference_or_unknown_pool(self) -> None:
        """Test a missing or unknown pool yields no schema."""
        generator = make_generator()
        assert asyncio.run(generator.update(entry(None))).schema is None
        assert asyncio.run(generator.update(entry("nope"))).schema is None

    def test_collections_are_cached(self) -> None:
        """Test repeated updates load each collection once."""
        source = FakeSource()
        generator = make_generator(source)

        asyncio.run(generator.update(entry("weapons")))
        asyncio.run(generator.update(entry("weapons")))

        assert source.loads.count("pool_definitions") == 1
        assert source.loads.count("item_traits") == 1

    def test_number_bounds_survive_as_range(self) -> None:
        """Test min, max and step of a number field carry over to its range."""
        update = asyncio.run(make_generator().update(entry("bounded")))

        assert update.schema is not None
        bounded = update.schema["d"]
        assert bounded.kind is FieldKind.RANGE
        assert bounded.extra == {"min": 1, "max": 100, "step": 5}

    def test_reference_without_source_kind_uses_record_type(self) -> None:
        """Test records of a reference without sourceKind describe themselves."""
        update = asyncio.run(make_generator().update(entry("bounded")))

        assert update.schema is not None
        assert update.schema["stats.hp"].kind is FieldKind.RANGE

    def test_unknown_record_type_with_values_is_choice(self) -> None:
        """Test a values list wins over an unknown declared type."""
        update = asyncio.run(make_generator().update(entry("bounded")))

        assert update.schema is not None
        charm = update.schema["stats.charm"]
        assert charm.kind is FieldKind.CHOOSE_MANY
        assert charm.options == ["low", "high"]

    def test_load_finishing_after_invalidate_is_not_cached(self) -> None:
        """Test a collection read before a context switch does not repopulate the cache."""
        source = FakeSource(delays={"pool_definitions": 0.05})
        generator = make_generator(source)

        async def run() -> Any:
            pending = asyncio.create_task(generator.load("pool_definitions"))
            await asyncio.sleep(0.01)
            generator.invalidate()
            source.collections["pool_definitions"] = []
            source.delays.clear()
            old = await pending
            return old, await generator.update(entry("weapons"))

        old, update = asyncio.run(run())

        assert old[0]["id"] == "weapons"
        assert update.schema is None
        assert source.loads.count("pool_definitions") == 2


class TestStaleFilterCleanup:
    """Test removal of filter values the pool no longer offers."""

    def test_switching_pool_removes_stale_values(self) -> None:
        """Test switching from [a,b] to [a,c] removes b."""
        generator = make_generator()
        record = entry("ab", {"a": 1, "b": 2})

        first = asyncio.run(generator.update(record))
        assert first.removed == 0
        assert record["entities"][0]["filters_include"] == {"a": 1, "b": 2}

        record["pool"] = "ac"
        second = asyncio.run(generator.update(record))

        assert second.removed == 1
        assert second.reference_changed is True
        assert record["entities"][0]["filters_include"] == {"a": 1}

    def test_same_pool_does_not_sweep(self) -> None:
        """Test values are kept while the pool stays the same."""
        generator = make_generator()
        record = entry("ab", {"a": 1})
        asyncio.run(generator.update(record))

        record["entities"][0]["filters_include"]["zzz"] = 1
        update = asyncio.run(generator.update(record))

        assert update.removed == 0
        assert "zzz" in record["entities"][0]["filters_include"]

    def test_superseded_update_is_discarded(self) -> None:
        """Test a slower, older update neither wins nor sweeps."""
        source = FakeSource(delays={"item_traits": 0.05})
        generator = make_generator(source)
        slow_record = entry("weapons", {"keep_me": 1})
        fast_record = entry("ab")

        async def run() -> Any:
            slow = asyncio.create_task(generator.update(slow_record))
            await asyncio.sleep(0.01)
            fast = await generator.update(fast_record)
            return await slow, fast

        slow_update, fast_update = asyncio.run(run())

        assert slow_update.stale is True
        assert slow_update.removed == 0
        assert slow_record["entities"][0]["filters_include"] == {"keep_me": 1}
        assert fast_update.schema is not None
        assert slow_update.schema is fast_update.schema
