"""
Registry of static schemas keyed by collection name.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from .models import Schema, copy_schema, schema_from_dict


class SchemaRegistry:
    """Maps collection names (e.g. ``item_templates``) to their Schema."""

    def __init__(self, schemas: Optional[Mapping[str, Schema]] = None):
        self._schemas: Dict[str, Schema] = {}
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        for name, schema in (schemas or {}).items():
            self.register(name, schema)

    def register(self, name: str, schema: Schema | Dict[str, Any]) -> None:
        """Register (or replace) the schema of a collection.

        Args:
            name: Collection name
            schema: Schema, or its wire form
        """
        if name in self._schemas:
            self.logger.debug(f"Replacing schema for '{name}'")
        self._schemas[name] = copy_schema(schema_from_dict(dict(schema)))

    def get(self, name: str) -> Optional[Schema]:
        """Return a copy of a registered schema, or None."""
        schema = self._schemas.get(name)
        return copy_schema(schema) if schema is not None else None

    def names(self) -> List[str]:
        """Return registered collection names in registration order."""
        return list(self._schemas.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._schemas
