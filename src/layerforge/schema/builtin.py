"""
Built-in schemas for the standard content collections.

Declared in wire form so they read the same as schemas bundled with plugins.
"""

from typing import Any, Dict

from .registry import SchemaRegistry

CUSTOM_VALUE_FIELDS: Dict[str, Any] = {
    "type": {
        "type": "chooseOne",
        "options": [
            "number", "string", "boolean", "chooseOne", "chooseMany", "color",
            "image", "video", "array", "textarea", "htmlarea",
        ],
        "tooltip": "Data type of the value.",
    },
    "values": {
        "type": "string[]",
        "tooltip": "Values for the chooseOne or chooseMany type.",
        "show": {"type": ["chooseOne", "chooseMany"]},
    },
}

ENTITY_TRAIT_SCHEMA: Dict[str, Any] = {
    "uid": {"type": "uid", "required": True},
    "id": {"type": "string", "required": True, "tooltip": "Trait ID used to reference this trait."},
    **CUSTOM_VALUE_FIELDS,
    "order": {"type": "number", "tooltip": "Display order (lower numbers appear first)."},
    "description": {"type": "textarea"},
    "tags": {"type": "string[]"},
}

ENTITY_ATTRIBUTE_SCHEMA: Dict[str, Any] = {
    "uid": {"type": "uid", "required": True},
    "id": {"type": "string", "required": True},
    "values": {"type": "string[]", "tooltip": "Possible values for this attribute."},
    "description": {"type": "textarea"},
    "tags": {"type": "string[]"},
}

ENTITY_PROPERTY_SCHEMA: Dict[str, Any] = {
    "uid": {"type": "uid", "required": True},
    "id": {"type": "string", "required": True},
    "order": {"type": "number"},
    "description": {"type": "textarea"},
    "tags": {"type": "string[]"},
}

ITEM_SLOT_SCHEMA: Dict[str, Any] = {
    "uid": {"type": "uid", "required": True},
    "id": {"type": "string", "required": True},
    "name": {"type": "string"},
}

ITEM_TEMPLATE_SCHEMA: Dict[str, Any] = {
    "uid": {"type": "uid", "required": True},
    "id": {"type": "string", "required": True, "tooltip": "Item template ID."},
    "name": {"type": "string"},
    "traits": {
        "type": "object",
        "sourceCollection": "item_traits",
        "sourceKind": "custom",
        "tooltip": "Custom item traits defined in item_traits.",
    },
    "attributes": {
        "type": "object",
        "sourceCollection": "item_attributes",
        "sourceKind": "chooseOne",
        "tooltip": "Item attributes with selectable values.",
    },
    "properties": {
        "type": "object",
        "sourceCollection": "item_properties",
        "sourceKind": "number",
        "tooltip": "Numeric properties such as weight.",
    },
    "slots": {"type": "chooseMany", "sourceCollection": "item_slots"},
    "price": {
        "type": "object",
        "sourceCollection": "item_templates",
        "sourceKind": "number",
        "matchAll": {"is_currency": True},
        "tooltip": "Price in every item marked as currency.",
    },
    "is_currency": {"type": "boolean"},
    "actions": {
        "type": "object",
        "objects": {
            "item_create": {"type": "textarea"},
            "item_equip_before": {"type": "textarea"},
            "item_equip_after": {"type": "textarea"},
        },
    },
    "tags": {"type": "string[]"},
}

POOL_DEFINITION_SCHEMA: Dict[str, Any] = {
    "uid": {"type": "uid", "required": True},
    "id": {"type": "string", "required": True, "tooltip": "Pool ID."},
    "source": {
        "type": "chooseOne",
        "generator": "available_sources",
        "tooltip": "The collection to draw from (e.g. item_templates).",
    },
    "filter_fields": {
        "type": "string[]",
        "tooltip": 'Field paths of the source schema used as filters (e.g. "traits.rarity").',
    },
    "tags": {"type": "string[]"},
}

POOL_ENTRY_SCHEMA: Dict[str, Any] = {
    "uid": {"type": "uid", "required": True},
    "id": {"type": "string", "required": True},
    "pool": {
        "type": "chooseOne",
        "sourceCollection": "pool_definitions",
        "generator": "build_filters",
        "tooltip": "The pool this entry belongs to.",
    },
    "name": {"type": "string"},
    "entities": {
        "type": "object[]",
        "objects": {
            "id": {"type": "string"},
            "weight": {"type": "number", "default": 1},
            "chance": {"type": "number", "default": 50, "min": 0, "max": 100},
            "count": {"type": "number", "default": 1},
            "filters_include": {"type": "object", "objects": {}},
            "filters_exclude": {"type": "object", "objects": {}},
        },
    },
    "tags": {"type": "string[]"},
}

BUILTIN_SCHEMAS: Dict[str, Dict[str, Any]] = {
    "item_traits": ENTITY_TRAIT_SCHEMA,
    "item_attributes": ENTITY_ATTRIBUTE_SCHEMA,
    "item_properties": ENTITY_PROPERTY_SCHEMA,
    "item_slots": ITEM_SLOT_SCHEMA,
    "item_templates": ITEM_TEMPLATE_SCHEMA,
    "pool_definitions": POOL_DEFINITION_SCHEMA,
    "pool_entries": POOL_ENTRY_SCHEMA,
}


def builtin_registry() -> SchemaRegistry:
    """Return a registry pre-filled with the built-in schemas."""
    registry = SchemaRegistry()
    for name, schema in BUILTIN_SCHEMAS.items():
        registry.register(name, schema)
    return registry
