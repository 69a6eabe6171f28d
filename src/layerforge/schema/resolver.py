"""
Resolution of schema directives against the current game+mod context.

Reference fields (``sourceCollection``) are turned into concrete fields:
choice fields receive the ids of the matching records as options, object
fields receive one generated sub-field per matching record. Fields naming a
``generator`` are handed to the generator registered under that name.
"""

import asyncio
import logging
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Mapping,
    Optional,
    Protocol,
    Tuple,
)

from ..content.models import ID_KEY, Collection
from .kinds import field_for_record
from .models import FieldDefinition, Schema
from .predicates import filter_records

logger = logging.getLogger(__name__)

# Nested schemas deeper than this are left unresolved
MAX_DEPTH = 32


class CollectionSource(Protocol):
    """What the resolver needs from the service owning the context."""

    async def load_merged(self, name: str) -> Collection: ...

    def plugin_options(self) -> List[Dict[str, str]]: ...

    def source_names(self) -> List[str]: ...


Generator = Callable[[FieldDefinition, CollectionSource], Awaitable[FieldDefinition]]
"""Coroutine turning a field into its generated form."""


async def available_plugins(field: FieldDefinition, source: CollectionSource) -> FieldDefinition:
    """Offer the enabled plugins as ``{value, label}`` options."""
    field.options = source.plugin_options()
    field.extra.setdefault("optionLabel", "label")
    field.extra.setdefault("optionValue", "value")
    return field


async def available_sources(field: FieldDefinition, source: CollectionSource) -> FieldDefinition:
    """Offer the names of the collections that have a schema."""
    field.options = source.source_names()
    return field


async def build_filters(field: FieldDefinition, source: CollectionSource) -> FieldDefinition:
    # Marks the reference field of a filter generator; nothing to resolve here
    return field


GENERATORS: Dict[str, Generator] = {
    "available_plugins": available_plugins,
    "available_sources": available_sources,
    "build_filters": build_filters,
}


def record_ids(records: Collection) -> List[Any]:
    """Return the ids of records, in collection order."""
    return [r[ID_KEY] for r in records if r.get(ID_KEY) is not None]


class SchemaResolver:
    """Resolves reference and generator directives of a Schema.

    The input schema is never modified; ``resolve`` returns a new one.
    Sibling fields are resolved concurrently. A failure while resolving
    one field leaves that field with empty options/objects and does not
    affect the rest of the schema.
    """

    def __init__(
        self,
        source: CollectionSource,
        generators: Optional[Mapping[str, Generator]] = None,
    ):
        """Initialize the resolver.

        Args:
            source: Provider of merged collections and generator data
            generators: Generator registry, defaults to GENERATORS
        """
        self.source = source
        self.generators: Mapping[str, Generator] = (
            GENERATORS if generators is None else generators
        )
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    async def resolve(self, schema: Schema, depth: int = 0) -> Schema:
        """Return a resolved copy of ``schema``."""
        names = list(schema.keys())
        resolved = await asyncio.gather(
            *(self.resolve_field(name, schema[name], depth) for name in names)
        )
        return dict(zip(names, resolved))

    async def resolve_field(
        self, name: str, field: FieldDefinition, depth: int = 0
    ) -> FieldDefinition:
        """Return a resolved copy of one field."""
        result = field.copy()

        if result.generator:
            result = await self._run_generator(name, result)

        if result.is_reference:
            await self._resolve_reference(name, result)

        if result.kind.is_nested and result.objects:
            if depth >= MAX_DEPTH:
                self.logger.warning(f"Schema nested deeper than {MAX_DEPTH} at '{name}', not resolved")
            else:
                result.objects = await self.resolve(result.objects, depth + 1)

        return result

    async def _run_generator(self, name: str, field: FieldDefinition) -> FieldDefinition:
        generator = self.generators.get(field.generator or "")
        if generator is None:
            self.logger.warning(f"Unknown generator '{field.generator}' on field '{name}'")
            return field
        try:
            return await generator(field, self.source)
        except Exception as e:
            self.logger.error(f"Generator '{field.generator}' failed on field '{name}': {e}")
            return field

    async def _resolve_reference(self, name: str, field: FieldDefinition) -> None:
        collection = field.source_collection or ""
        try:
            records = await self.source.load_merged(collection)
        except Exception as e:
            self.logger.error(f"Could not load '{collection}' for field '{name}': {e}")
            records = []
        records = filter_records(records, field.match_all, field.match_any)

        if field.kind.is_choice:
            field.options = record_ids(records)
        elif field.kind.is_nested:
            field.objects = dict(self._generated_fields(field, records))
        else:
            self.logger.warning(
                f"Field '{name}' of type '{field.kind.value}' cannot reference '{collection}'"
            )
            return
        self.logger.debug(f"Resolved '{name}' from '{collection}' ({len(records)} records)")

    @staticmethod
    def _generated_fields(
        field: FieldDefinition, records: Collection
    ) -> List[Tuple[str, FieldDefinition]]:
        return [
            (str(record[ID_KEY]), field_for_record(field.source_kind, record))
            for record in records
            if record.get(ID_KEY) is not None
        ]


async def resolve_schema(source: CollectionSource, schema: Schema) -> Schema:
    """Resolve ``schema`` with the default generators."""
    return await SchemaResolver(source).resolve(schema)
