"""
Schema models for layered content.

A Schema is an ordered mapping of field name -> FieldDefinition. Field kinds
and source kinds are closed enums; the wire form is a plain JSON-style dict
so schemas can be declared as literals or bundled with plugins.
"""

import copy
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Dict, List, Optional, TypeAlias, cast


class FieldKind(Enum):
    """Kinds of schema fields."""

    UID = "uid"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    TEXTAREA = "textarea"
    HTMLAREA = "htmlarea"
    COLOR = "color"
    CHOOSE_ONE = "chooseOne"
    CHOOSE_MANY = "chooseMany"
    STRING_LIST = "string[]"
    NUMBER_LIST = "number[]"
    FILE = "file"
    FILE_LIST = "file[]"
    OBJECT = "object"
    OBJECT_LIST = "object[]"
    RANGE = "range"
    INVALID = "invalid"

    @classmethod
    def _missing_(cls, value: object) -> Optional["FieldKind"]:
        # Older schema files call nested objects "schema"
        aliases = {"schema": cls.OBJECT, "schema[]": cls.OBJECT_LIST}
        return aliases.get(value) if isinstance(value, str) else None

    @property
    def is_choice(self) -> bool:
        return self in (FieldKind.CHOOSE_ONE, FieldKind.CHOOSE_MANY)

    @property
    def is_nested(self) -> bool:
        return self in (FieldKind.OBJECT, FieldKind.OBJECT_LIST)


class SourceKind(Enum):
    """How each record of a source collection becomes a field.

    Every member except CUSTOM is also a value type a record may declare in
    its own ``type`` attribute.
    """

    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    TEXTAREA = "textarea"
    HTMLAREA = "htmlarea"
    COLOR = "color"
    IMAGE = "image"
    VIDEO = "video"
    CHOOSE_ONE = "chooseOne"
    CHOOSE_MANY = "chooseMany"
    ARRAY = "array"
    CUSTOM = "custom"


class MatchMode(Enum):
    """How a string-list filter combines its selected values."""

    OR = "or"
    AND = "and"


class _NoDefault:
    """Marker for fields without an explicit default."""

    _instance: Optional["_NoDefault"] = None

    def __new__(cls) -> "_NoDefault":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_DEFAULT"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> "_NoDefault":
        return self

    def __deepcopy__(self, memo: Dict[int, Any]) -> "_NoDefault":
        return self


NO_DEFAULT: Any = _NoDefault()

# Legacy wire keys -> current wire keys
_KEY_ALIASES = {
    "fromFile": "sourceCollection",
    "fromFileType": "sourceKind",
    "fromFileTypeAnd": "matchAll",
    "fromFileTypeOr": "matchAny",
    "defaultValue": "default",
    "logic": "generator",
    "fromLogic": "generator",
}

# Known wire keys -> dataclass attribute names
_WIRE_TO_ATTR = {
    "type": "kind",
    "label": "label",
    "tooltip": "tooltip",
    "options": "options",
    "objects": "objects",
    "sourceCollection": "source_collection",
    "sourceKind": "source_kind",
    "matchAll": "match_all",
    "matchAny": "match_any",
    "generator": "generator",
    "default": "default",
    "required": "required",
    "fileType": "file_type",
    "allowAndMode": "allow_and_mode",
    "matchMode": "match_mode",
    "show": "show",
}


@dataclass
class FieldDefinition:
    """Definition of one schema field.

    Directive attributes (``source_collection``, ``source_kind``,
    ``match_all``, ``match_any``, ``generator``) only matter before
    resolution. After resolution reference fields carry ``options`` or
    ``objects``.
    """

    kind: FieldKind
    label: Optional[str] = None
    tooltip: Optional[str] = None
    options: Optional[List[Any]] = None
    objects: Optional["Schema"] = None
    source_collection: Optional[str] = None
    source_kind: Optional[SourceKind] = None
    match_all: Optional[Dict[str, Any]] = None
    match_any: Optional[Dict[str, Any]] = None
    generator: Optional[str] = None
    default: Any = NO_DEFAULT
    required: bool = False
    file_type: Optional[str] = None
    allow_and_mode: bool = False
    match_mode: Optional[MatchMode] = None
    show: Optional[Dict[str, List[Any]]] = None
    extra: Dict[str, Any] = field(default_factory=lambda: {})

    @property
    def has_default(self) -> bool:
        return self.default is not NO_DEFAULT

    @property
    def is_reference(self) -> bool:
        """True if the field must be resolved against another collection."""
        return bool(self.source_collection)

    def copy(self, **changes: Any) -> "FieldDefinition":
        """Return a structural clone, optionally with some attributes changed."""
        return replace(copy.deepcopy(self), **changes)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldDefinition":
        """Create a FieldDefinition from its wire form.

        Unknown keys are kept in ``extra`` (min, max, step, optionLabel, ...).

        Raises:
            ValueError: If ``type`` or ``sourceKind`` is not a known kind
        """
        kwargs: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}
        for raw_key, value in data.items():
            key = _KEY_ALIASES.get(raw_key, raw_key)
            attr = _WIRE_TO_ATTR.get(key)
            if attr is None:
                extra[raw_key] = value
            else:
                kwargs[attr] = value

        if "kind" not in kwargs:
            raise ValueError(f"Field definition without 'type': {data}")
        kwargs["kind"] = FieldKind(kwargs["kind"])
        if kwargs.get("source_kind") is not None:
            kwargs["source_kind"] = SourceKind(kwargs["source_kind"])
        if kwargs.get("match_mode") is not None:
            kwargs["match_mode"] = MatchMode(kwargs["match_mode"])
        if kwargs.get("objects") is not None:
            kwargs["objects"] = schema_from_dict(cast(Dict[str, Any], kwargs["objects"]))
        if extra:
            kwargs["extra"] = extra
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Return the wire form, omitting unset attributes."""
        attr_to_wire = {attr: wire for wire, attr in _WIRE_TO_ATTR.items()}
        result: Dict[str, Any] = {}
        for f in fields(self):
            if f.name == "extra":
                continue
            value = getattr(self, f.name)
            if value is NO_DEFAULT or (value is None and f.name != "default"):
                continue
            if f.name in ("required", "allow_and_mode") and not value:
                continue
            if isinstance(value, Enum):
                value = value.value
            elif f.name == "objects":
                value = schema_to_dict(cast(Schema, value))
            result[attr_to_wire[f.name]] = value
        result.update(self.extra)
        return result


Schema: TypeAlias = Dict[str, FieldDefinition]
"""Ordered mapping of field name -> FieldDefinition."""


def schema_from_dict(data: Dict[str, Any]) -> Schema:
    """Build a Schema from its wire form."""
    return {
        name: definition
        if isinstance(definition, FieldDefinition)
        else FieldDefinition.from_dict(cast(Dict[str, Any], definition))
        for name, definition in data.items()
    }


def schema_to_dict(schema: Schema) -> Dict[str, Any]:
    """Return the wire form of a Schema."""
    return {name: definition.to_dict() for name, definition in schema.items()}


def copy_schema(schema: Schema) -> Schema:
    """Return a copy of a Schema whose definitions can be changed freely."""
    return {name: definition.copy() for name, definition in schema.items()}
