"""
Parameter Coercion
Form submissions arrive as strings; convert them into declared parameter types.
"""

import math
import re
from typing import Any

import orjson

from .models import ParameterType, ToolParameter

_INTEGER = re.compile(r"^[+-]?\d+$")

TRUE_STRINGS = frozenset({"true", "1"})
FALSE_STRINGS = frozenset({"false", "0"})


def coerce_number(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    text = value.strip()
    if not text or "_" in text:
        return value
    if _INTEGER.match(text):
        return int(text)
    try:
        number = float(text)
    except ValueError:
        return value
    return number if math.isfinite(number) else value


def coerce_boolean(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    text = value.strip().lower()
    if text in TRUE_STRINGS:
        return True
    if text in FALSE_STRINGS:
        return False
    return value


def _decode(text: str) -> Any:
    try:
        return orjson.loads(text)
    except orjson.JSONDecodeError:
        return None


def coerce_object(value: Any) -> Any:
    """JSON object strings or ``key=value,key=value`` pairs."""
    if not isinstance(value, str):
        return value
    text = value.strip()
    if text.startswith("{"):
        decoded = _decode(text)
        return decoded if isinstance(decoded, dict) else value

    result: dict[str, str] = {}
    for pair in text.split(","):
        key, sep, item = pair.partition("=")
        if not sep or not key.strip():
            return value
        result[key.strip()] = item.strip()
    return result


def coerce_array(value: Any) -> Any:
    """JSON array strings or comma-separated items."""
    if not isinstance(value, str):
        return value
    text = value.strip()
    if text.startswith("["):
        decoded = _decode(text)
        return decoded if isinstance(decoded, list) else value
    if not text:
        return value
    return [item.strip() for item in text.split(",")]


_COERCERS = {
    ParameterType.NUMBER: coerce_number,
    ParameterType.BOOLEAN: coerce_boolean,
    ParameterType.OBJECT: coerce_object,
    ParameterType.ARRAY: coerce_array,
}


def coerce_parameters(parameters: list[ToolParameter], params: dict[str, Any]) -> dict[str, Any]:
    """
    Coerce submitted values into their declared types.

    Optional parameters submitted as ``""`` are dropped; required ones keep
    ``""`` so validation reports them missing. Values that cannot be
    converted are left untouched for type checking to report. Undeclared
    keys pass through as-is.
    """
    coerced = dict(params)

    for param in parameters:
        if param.name not in coerced:
            continue
        value = coerced[param.name]

        if value == "":
            if not param.required:
                del coerced[param.name]
            continue

        coercer = _COERCERS.get(param.type)
        if coercer is not None and value is not None:
            coerced[param.name] = coercer(value)

    return coerced


def matches_type(value: Any, expected: ParameterType) -> bool:
    """Check a coerced value against its declared type."""
    match expected:
        case ParameterType.STRING:
            return isinstance(value, str)
        case ParameterType.NUMBER:
            return isinstance(value, (int, float)) and not isinstance(value, bool) and not (
                isinstance(value, float) and math.isnan(value)
            )
        case ParameterType.BOOLEAN:
            return isinstance(value, bool)
        case ParameterType.OBJECT:
            return isinstance(value, dict)
        case ParameterType.ARRAY:
            return isinstance(value, list)
        case _:
            return True


def type_name(value: Any) -> str:
    """Wire-style name of a value's type, for error details."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"
