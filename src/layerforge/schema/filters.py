"""
Generation of filter schemas for pool entries.

A pool entry references a pool definition. The pool names the collection it
draws from (whose schema is registered) and a list of dotted field paths of
that schema. From these the generator builds a transient schema of filter
fields that the entry's include/exclude filters are edited with.

Example:
    config = FilterConfig.from_schema(registry.get("pool_entries"))
    generator = FilterSchemaGenerator(service, registry, config)
    update = await generator.update(entry)
"""

import asyncio
import copy
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set, Tuple, Union, cast

from ..content.cache import CollectionCache
from ..content.models import ID_KEY, Collection, Entity
from ..content.gate import ResultGate
from .kinds import TYPE_KEY, VALUES_KEY, field_for_record
from .models import FieldDefinition, FieldKind, MatchMode, Schema, SourceKind
from .predicates import filter_records
from .registry import SchemaRegistry
from .resolver import CollectionSource, record_ids

logger = logging.getLogger(__name__)

FILTER_GENERATOR = "build_filters"


@dataclass(frozen=True)
class FilterConfig:
    """Where the generator finds its inputs in records.

    Attributes:
        reference_field: Field of the edited record holding the pool id
        pool_collection: Collection of pool definitions
        source_schema_field: Pool field naming the filtered collection
        field_list_field: Pool field listing the filterable paths
        entries_field: Field of the edited record holding filter entries
        value_fields: Fields of each entry holding filter values
    """

    reference_field: str
    pool_collection: str
    source_schema_field: str
    field_list_field: str
    entries_field: str = "entities"
    value_fields: Tuple[str, ...] = ("filters_include", "filters_exclude")

    @classmethod
    def from_field(cls, name: str, definition: FieldDefinition) -> "FilterConfig":
        """Build the config described by a ``build_filters`` reference field.

        ``sourceField`` and ``fieldsPath`` in the field's extra keys override
        the pool field names.
        """
        return cls(
            reference_field=name,
            pool_collection=definition.source_collection or "",
            source_schema_field=str(definition.extra.get("sourceField", "source")),
            field_list_field=str(definition.extra.get("fieldsPath", "filter_fields")),
        )

    @classmethod
    def from_schema(cls, schema: Optional[Schema]) -> Optional["FilterConfig"]:
        """Return the config of the first ``build_filters`` field, or None."""
        for name, definition in (schema or {}).items():
            if definition.generator == FILTER_GENERATOR and definition.is_reference:
                return cls.from_field(name, definition)
        return None


@dataclass
class FilterUpdate:
    """Outcome of one FilterSchemaGenerator.update call."""

    schema: Optional[Schema]
    removed: int = 0
    reference_changed: bool = False
    stale: bool = False


def invalid_field(path: str, reason: str) -> FieldDefinition:
    """Placeholder for a filter path that could not be resolved."""
    return FieldDefinition(kind=FieldKind.INVALID, label=path, tooltip=reason)


def to_filter_field(definition: FieldDefinition, path: str) -> FieldDefinition:
    """Convert a resolved field to the shape used for filtering it."""
    kind = definition.kind
    allow_and_mode = False
    match_mode = None
    if kind is FieldKind.NUMBER:
        kind = FieldKind.RANGE
    elif kind.is_choice:
        kind = FieldKind.CHOOSE_MANY
    elif kind is FieldKind.STRING_LIST:
        allow_and_mode = True
        match_mode = MatchMode.OR

    return FieldDefinition(
        kind=kind,
        label=definition.label or path,
        tooltip=definition.tooltip,
        options=list(definition.options) if definition.options is not None else None,
        objects=definition.objects,
        file_type=definition.file_type,
        allow_and_mode=allow_and_mode,
        match_mode=match_mode,
        extra=copy.deepcopy(definition.extra),
    )


def _record_kind(record: Entity) -> SourceKind:
    """Return the kind a source record declares for filtering.

    A record without a usable ``type`` but with a ``values`` list reads as a
    multi choice. Anything else unusable stays CUSTOM and ends up as string.
    """
    try:
        kind = SourceKind(record.get(TYPE_KEY))
    except (ValueError, TypeError):
        kind = SourceKind.CUSTOM
    if kind is SourceKind.CUSTOM and isinstance(record.get(VALUES_KEY), list):
        return SourceKind.CHOOSE_MANY
    return kind


def _filter_field_for_record(source_kind: Optional[SourceKind], record: Entity) -> FieldDefinition:
    # Without an explicit kind the record describes itself
    if source_kind is None or source_kind is SourceKind.CUSTOM:
        source_kind = _record_kind(record)
    return field_for_record(source_kind, record)


class FilterSchemaGenerator:
    """Builds filter schemas and keeps entry filter values consistent.

    Holds its own cache of merged collections and remembers the last pool id
    so that filter values are only swept when the pool really changed.
    """

    def __init__(
        self,
        source: CollectionSource,
        registry: SchemaRegistry,
        config: FilterConfig,
        cache: Optional[CollectionCache] = None,
    ):
        self.source = source
        self.registry = registry
        self.config = config
        self.cache = cache or CollectionCache()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        self._gate: ResultGate[Optional[Schema]] = ResultGate()
        self._previous_ref: Optional[Any] = None
        self._generation = 0

    def invalidate(self) -> None:
        """Forget cached collections and the remembered pool (context switch)."""
        self._generation += 1
        self.cache.clear()
        self._gate.invalidate()
        self._previous_ref = None

    async def load(self, name: str) -> Collection:
        """Return a merged collection, through the generator's cache.

        A load that finishes after ``invalidate`` is returned to its caller
        but not cached.
        """
        cached = self.cache.get(name)
        if cached is not None:
            return cached
        generation = self._generation
        records = await self.source.load_merged(name)
        if generation == self._generation:
            self.cache.put(name, records)
        else:
            self.logger.debug(f"Not caching '{name}' loaded before invalidation")
        return records

    async def update(self, record: Optional[Entity]) -> FilterUpdate:
        """Rebuild the filter schema for ``record`` and sweep stale filter values.

        Args:
            record: The edited pool entry, modified in place by the sweep

        Returns:
            FilterUpdate with the schema (None if no pool applies) and the
            number of removed filter values
        """
        token = self._gate.issue()
        ref_id = record.get(self.config.reference_field) if record else None
        if not ref_id:
            return self._finish(token, None)

        pool = await self._find_pool(ref_id)
        if pool is None:
            self.logger.warning(
                f"Pool '{ref_id}' not found in '{self.config.pool_collection}'"
            )
            return self._finish(token, None)

        schema_name = pool.get(self.config.source_schema_field)
        paths = self._field_paths(pool)
        schema = await self.build_schema(str(schema_name or ""), paths)

        if not self._gate.offer(token, schema):
            return self._stale(ref_id)

        changed = ref_id != self._previous_ref
        self._previous_ref = ref_id
        removed = self.sweep(cast(Entity, record), set(paths)) if changed else 0
        return FilterUpdate(schema, removed, reference_changed=changed)

    def _finish(self, token: int, schema: Optional[Schema]) -> FilterUpdate:
        if not self._gate.offer(token, schema):
            return self._stale(None)
        return FilterUpdate(schema)

    def _stale(self, ref_id: Any) -> FilterUpdate:
        self.logger.debug(f"Discarding superseded filter schema for '{ref_id}'")
        return FilterUpdate(self._gate.adopted, stale=True)

    async def _find_pool(self, ref_id: Any) -> Optional[Entity]:
        pools = await self.load(self.config.pool_collection)
        return next((p for p in pools if p.get(ID_KEY) == ref_id), None)

    def _field_paths(self, pool: Entity) -> List[str]:
        raw = pool.get(self.config.field_list_field)
        if not isinstance(raw, list):
            return []
        return [p for p in cast(List[Any], raw) if isinstance(p, str) and p]

    async def build_schema(self, schema_name: str, paths: List[str]) -> Optional[Schema]:
        """Build the filter schema for field paths of a registered schema.

        Returns:
            Schema keyed by path, or None if there are no paths
        """
        if not paths:
            return None
        target = self.registry.get(schema_name)
        if target is None:
            self.logger.warning(f"Schema '{schema_name}' is not registered")
            return {
                path: invalid_field(path, f'Schema "{schema_name}" is not registered')
                for path in paths
            }

        fields = await asyncio.gather(
            *(self.resolve_path(target, schema_name, path) for path in paths)
        )
        return dict(zip(paths, fields))

    async def resolve_path(self, schema: Schema, schema_name: str, path: str) -> FieldDefinition:
        """Resolve one dotted path to its filter field."""
        found = await self._walk(schema, schema_name, path)
        if isinstance(found, str):
            self.logger.debug(f"Filter path '{path}' unresolved: {found}")
            return invalid_field(path, found)

        if found.kind.is_choice and found.is_reference and found.options is None:
            records = await self.load(found.source_collection or "")
            records = filter_records(records, found.match_all, found.match_any)
            found = found.copy(options=record_ids(records))
        return to_filter_field(found, path)

    async def _walk(
        self, schema: Schema, schema_name: str, path: str
    ) -> Union[FieldDefinition, str]:
        # Returns the field at ``path`` or a reason why there is none
        parts = path.split(".")
        current: Optional[Schema] = schema
        definition: Optional[FieldDefinition] = None
        i = 0
        while i < len(parts):
            key = parts[i]
            if current is None or key not in current:
                return f'Field "{key}" not found in {schema_name} schema'
            definition = current[key]

            if definition.is_reference and definition.kind.is_nested and i + 1 < len(parts):
                collection = definition.source_collection or ""
                records = await self.load(collection)
                records = filter_records(records, definition.match_all, definition.match_any)
                record_id = parts[i + 1]
                match = next((r for r in records if str(r.get(ID_KEY)) == record_id), None)
                if match is None:
                    return f'Record "{record_id}" not found in {collection}'
                definition = _filter_field_for_record(definition.source_kind, match)
                current = definition.objects
                i += 2
                continue

            current = definition.objects
            i += 1

        if definition is None:
            return f'Empty field path in {schema_name} schema'
        return definition

    def sweep(self, record: Entity, keep: Set[str]) -> int:
        """Delete filter values whose path is no longer offered.

        Returns:
            Number of removed values
        """
        entries = record.get(self.config.entries_field)
        if not isinstance(entries, list):
            return 0
        removed = 0
        for entry in cast(List[Any], entries):
            if not isinstance(entry, dict):
                continue
            for value_field in self.config.value_fields:
                values = cast(Dict[str, Any], entry).get(value_field)
                if not isinstance(values, dict):
                    continue
                for key in [k for k in cast(Dict[str, Any], values) if k not in keep]:
                    del values[key]
                    removed += 1
        if removed:
            self.logger.info(f"Removed {removed} filter values no longer offered by the pool")
        return removed
