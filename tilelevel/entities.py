"""Entity list decoding."""

from typing import Any, Dict, List

from tilelevel.errors import SchemaError, INVALID_ENTITY
from tilelevel.model import EntityDefinition
from tilelevel.values import ValueKind, kind_of, coerce_property, int_field, str_field


def coerce_entities(source: Any) -> List[EntityDefinition]:
    """
    Decode an `entities` array into EntityDefinition records.

    A missing or non-array source yields no entities. Property values are
    converted with coerce_property(); arrays, objects and nulls are dropped.

    Raises:
        SchemaError: If an element is not an object or has mistyped type/x/y
    """
    if source is None or kind_of(source) is not ValueKind.ARRAY:
        return []

    entities = []
    for i, entry in enumerate(source):
        if kind_of(entry) is not ValueKind.OBJECT:
            raise SchemaError(f"entities[{i}] must be an object", code=INVALID_ENTITY)

        try:
            entity_type = str_field(entry, "type", "unknown")
            x = int_field(entry, "x", 0)
            y = int_field(entry, "y", 0)
        except SchemaError as e:
            raise SchemaError(f"entities[{i}]: {e}", code=INVALID_ENTITY) from e

        extras = {}
        properties = entry.get("properties")
        if properties is not None and kind_of(properties) is ValueKind.OBJECT:
            for key, value in properties.items():
                text = coerce_property(value)
                if text is not None:
                    extras[key] = text

        entities.append(EntityDefinition(type=entity_type, x=x, y=y, extras=extras))

    return entities


def entity_document(entity: EntityDefinition) -> Dict[str, Any]:
    """Entity as a level document entry; extras become string properties."""
    d = {"type": entity.type, "x": entity.x, "y": entity.y}
    if entity.extras:
        d["properties"] = dict(entity.extras)
    return d
