"""
Typed access to decoded JSON documents.

JSON values are classified into a closed set of kinds (ValueKind) before
they are read, so every field reader and the property coercion below branch
on an explicit kind rather than on whatever Python type json.loads produced.
"""

import json
from enum import Enum
from typing import Any, Dict, List, Optional

from tilelevel.errors import SchemaError, INVALID_FIELD, MALFORMED_DOCUMENT


class ValueKind(Enum):
    """Kind of a decoded JSON value."""
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    NULL = "null"


def kind_of(value: Any) -> ValueKind:
    """
    Classify a value produced by json.loads.

    bool is checked before int since it is an int subclass in Python.

    Raises:
        TypeError: If the value is not something json.loads can produce
    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, int):
        return ValueKind.INTEGER
    if isinstance(value, float):
        return ValueKind.FLOAT
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, list):
        return ValueKind.ARRAY
    if isinstance(value, dict):
        return ValueKind.OBJECT
    raise TypeError(f"Not a JSON value: {type(value).__name__}")


def parse_document(data: bytes, path: Optional[str] = None) -> Dict[str, Any]:
    """
    Parse UTF-8 JSON bytes into a top-level object. A leading BOM is skipped.

    Raises:
        SchemaError: If the bytes are not valid JSON or the root is not an object
    """
    try:
        doc = json.loads(data.decode("utf-8-sig"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise SchemaError(f"Invalid JSON document: {e}", code=MALFORMED_DOCUMENT, path=path) from e

    if kind_of(doc) is not ValueKind.OBJECT:
        raise SchemaError("Level document root must be an object", code=MALFORMED_DOCUMENT, path=path)
    return doc


def as_int(value: Any, name: str) -> int:
    """
    Read an integer value.

    Integral floats (e.g. 16.0) are accepted; anything else is a SchemaError.
    """
    kind = kind_of(value)
    if kind is ValueKind.INTEGER:
        return value
    if kind is ValueKind.FLOAT and value.is_integer():
        return int(value)
    raise SchemaError(f"Field '{name}' must be an integer, got {kind.value}", code=INVALID_FIELD)


def int_field(obj: Dict[str, Any], name: str, default: int) -> int:
    """Read an optional integer field. An explicit null counts as absent."""
    value = obj.get(name)
    if value is None:
        return default
    return as_int(value, name)


def dimension_field(obj: Dict[str, Any], name: str, default: int) -> int:
    """Read an optional grid dimension, which must not be negative."""
    value = int_field(obj, name, default)
    if value < 0:
        raise SchemaError(f"Field '{name}' must not be negative, got {value}", code=INVALID_FIELD)
    return value


def str_field(obj: Dict[str, Any], name: str, default: str) -> str:
    value = obj.get(name)
    if value is None:
        return default
    kind = kind_of(value)
    if kind is not ValueKind.STRING:
        raise SchemaError(f"Field '{name}' must be a string, got {kind.value}", code=INVALID_FIELD)
    return value


def int_list_field(obj: Dict[str, Any], name: str) -> List[int]:
    """Read an optional array of integers, defaulting to an empty list."""
    value = obj.get(name)
    if value is None:
        return []
    kind = kind_of(value)
    if kind is not ValueKind.ARRAY:
        raise SchemaError(f"Field '{name}' must be an array, got {kind.value}", code=INVALID_FIELD)
    return [as_int(item, f"{name}[{i}]") for i, item in enumerate(value)]


def coerce_property(value: Any) -> Optional[str]:
    """
    Convert an entity property value to its string form.

    Floats use repr(), the shortest string that parses back to the same
    float. Arrays, objects and null return None and are dropped by callers.
    """
    kind = kind_of(value)
    if kind is ValueKind.STRING:
        return value
    if kind is ValueKind.BOOLEAN:
        return "true" if value else "false"
    if kind is ValueKind.INTEGER:
        return str(value)
    if kind is ValueKind.FLOAT:
        return repr(value)
    return None
