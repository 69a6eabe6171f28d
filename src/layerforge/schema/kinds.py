"""
Conversion of source records into field definitions.

A reference field such as ``traits`` generates one nested field per record of
its source collection. The shape of each generated field comes from the
reference's ``sourceKind``, or, for ``custom``, from the ``type`` the source
record declares itself.
"""

import logging
from typing import Any, List, Optional, assert_never, cast

from ..content.models import Entity
from .models import FieldDefinition, FieldKind, SourceKind

logger = logging.getLogger(__name__)

VALUES_KEY = "values"
DESCRIPTION_KEY = "description"
TYPE_KEY = "type"


def record_values(record: Optional[Entity]) -> List[Any]:
    """Return the value list a source record offers for choice fields."""
    if not record:
        return []
    values = record.get(VALUES_KEY)
    return list(cast(List[Any], values)) if isinstance(values, list) else []


def declared_kind(record: Entity) -> SourceKind:
    """Return the value kind a source record declares in its ``type``.

    Unknown or missing types fall back to STRING with a warning.
    """
    raw = record.get(TYPE_KEY)
    try:
        kind = SourceKind(raw)
    except ValueError:
        logger.warning(
            f"Unknown type '{raw}' on record '{record.get('id')}', defaulting to 'string'"
        )
        return SourceKind.STRING
    if kind is SourceKind.CUSTOM:
        logger.warning(
            f"Record '{record.get('id')}' declares type 'custom', defaulting to 'string'"
        )
        return SourceKind.STRING
    return kind


def field_for_kind(kind: SourceKind, record: Optional[Entity] = None) -> FieldDefinition:
    """Map a value kind to a field definition.

    Args:
        kind: Value kind; CUSTOM reads the kind declared by ``record``
        record: Source record supplying choice values and the custom type

    Returns:
        New FieldDefinition (without tooltip)
    """
    if kind is SourceKind.CUSTOM:
        if record is None:
            return FieldDefinition(kind=FieldKind.STRING)
        kind = declared_kind(record)

    if kind is SourceKind.NUMBER:
        return FieldDefinition(kind=FieldKind.NUMBER)
    elif kind is SourceKind.STRING:
        return FieldDefinition(kind=FieldKind.STRING)
    elif kind is SourceKind.BOOLEAN:
        return FieldDefinition(kind=FieldKind.BOOLEAN)
    elif kind is SourceKind.TEXTAREA:
        return FieldDefinition(kind=FieldKind.TEXTAREA)
    elif kind is SourceKind.HTMLAREA:
        return FieldDefinition(kind=FieldKind.HTMLAREA)
    elif kind is SourceKind.COLOR:
        return FieldDefinition(kind=FieldKind.COLOR)
    elif kind is SourceKind.IMAGE:
        return FieldDefinition(kind=FieldKind.FILE, file_type="image")
    elif kind is SourceKind.VIDEO:
        return FieldDefinition(kind=FieldKind.FILE, file_type="video")
    elif kind is SourceKind.CHOOSE_ONE:
        return FieldDefinition(kind=FieldKind.CHOOSE_ONE, options=record_values(record))
    elif kind is SourceKind.CHOOSE_MANY:
        return FieldDefinition(kind=FieldKind.CHOOSE_MANY, options=record_values(record))
    elif kind is SourceKind.ARRAY:
        return FieldDefinition(kind=FieldKind.STRING_LIST)
    elif kind is SourceKind.CUSTOM:
        # declared_kind() never returns CUSTOM
        return FieldDefinition(kind=FieldKind.STRING)
    else:
        assert_never(kind)


def field_for_record(source_kind: Optional[SourceKind], record: Entity) -> FieldDefinition:
    """Build the generated field for one source record.

    A missing ``source_kind`` behaves like STRING. The record's description
    becomes the tooltip.
    """
    definition = field_for_kind(source_kind or SourceKind.STRING, record)
    description = record.get(DESCRIPTION_KEY)
    if description:
        definition.tooltip = str(description)
    return definition
