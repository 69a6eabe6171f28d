"""
Schemas of content collections.

Schemas describe the fields of the records of a collection. Reference and
generator directives are resolved against the current game+mod context by
SchemaResolver; FilterSchemaGenerator builds the transient filter schemas of
pool entries.
"""

from .models import (
    FieldDefinition,
    FieldKind,
    SourceKind,
    MatchMode,
    Schema,
    NO_DEFAULT,
    schema_from_dict,
    schema_to_dict,
    copy_schema,
)
from .registry import SchemaRegistry
from .builtin import BUILTIN_SCHEMAS, builtin_registry
from .resolver import GENERATORS, SchemaResolver, resolve_schema
from .defaults import DefaultValueInjector, is_base_authoring, new_record
from .filters import FilterConfig, FilterUpdate, FilterSchemaGenerator
from .sanitize import clear_empty_values

__all__ = [
    # Models
    "FieldDefinition",
    "FieldKind",
    "SourceKind",
    "MatchMode",
    "Schema",
    "NO_DEFAULT",
    "schema_from_dict",
    "schema_to_dict",
    "copy_schema",
    # Registry
    "SchemaRegistry",
    "BUILTIN_SCHEMAS",
    "builtin_registry",
    # Resolution
    "GENERATORS",
    "SchemaResolver",
    "resolve_schema",
    "DefaultValueInjector",
    "is_base_authoring",
    "new_record",
    "FilterConfig",
    "FilterUpdate",
    "FilterSchemaGenerator",
    "clear_empty_values",
]
