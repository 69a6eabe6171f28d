"""
Injection of schema default values into records.

Defaults are only written while authoring base content. In a mod they would
be copied into the mod layer and shadow later changes of the core record, so
mods only ever store the values the user actually set.
"""

import copy
import logging
import secrets
from typing import Any, Dict, List, Optional, cast

from ..content.models import CORE_MOD, ID_KEY, UID_KEY, Entity
from .models import FieldKind, Schema

logger = logging.getLogger(__name__)

UID_LENGTH = 12


def create_uid() -> str:
    """Return a new random record uid."""
    return secrets.token_hex(UID_LENGTH // 2)


def is_base_authoring(mod: str, creating_new: bool = False) -> bool:
    """Return True if defaults may be written in this editing context.

    Args:
        mod: Active mod folder name
        creating_new: True when creating a brand-new top-level entity
    """
    return mod == CORE_MOD or creating_new


class DefaultValueInjector:
    """Fills absent fields of records with their schema defaults."""

    def __init__(self, base_authoring: bool, skip: bool = False):
        """Initialize the injector.

        Args:
            base_authoring: True when editing core content or a new entity
            skip: Disable injection regardless of the context
        """
        self.base_authoring = base_authoring
        self.skip = skip

    @property
    def active(self) -> bool:
        return self.base_authoring and not self.skip

    def apply(self, data: Any, schema: Schema) -> None:
        """Inject defaults into a record, or into each record of a list, in place."""
        if not self.active:
            logger.debug("Default injection disabled for this context")
            return
        if isinstance(data, list):
            for item in cast(List[Any], data):
                if isinstance(item, dict):
                    self._apply_record(cast(Entity, item), schema)
        elif isinstance(data, dict):
            self._apply_record(cast(Entity, data), schema)

    def _apply_record(self, record: Entity, schema: Schema) -> None:
        for key, definition in schema.items():
            if key not in record:
                if definition.has_default:
                    record[key] = copy.deepcopy(definition.default)
                elif definition.kind is FieldKind.OBJECT:
                    nested: Dict[str, Any] = {}
                    self._apply_record(nested, definition.objects or {})
                    if nested:
                        record[key] = nested
                    continue
                elif definition.kind is FieldKind.OBJECT_LIST:
                    record[key] = []
                    continue

            value = record.get(key)
            if not definition.objects:
                continue
            if definition.kind is FieldKind.OBJECT and isinstance(value, dict):
                self._apply_record(cast(Entity, value), definition.objects)
            elif definition.kind is FieldKind.OBJECT_LIST and isinstance(value, list):
                for item in cast(List[Any], value):
                    if isinstance(item, dict):
                        self._apply_record(cast(Entity, item), definition.objects)


def new_record(
    schema: Schema,
    record_id: Optional[str] = None,
    base_authoring: bool = True,
    skip_defaults: bool = False,
) -> Entity:
    """Create a new record with a fresh uid and injected defaults.

    Args:
        schema: Schema of the target collection
        record_id: Id of the record, if already known
        base_authoring: Whether the editing context allows defaults
        skip_defaults: Disable default injection

    Returns:
        New record dict
    """
    record: Entity = {UID_KEY: create_uid()}
    if record_id is not None:
        record[ID_KEY] = record_id
    DefaultValueInjector(base_authoring, skip=skip_defaults).apply(record, schema)
    return record
