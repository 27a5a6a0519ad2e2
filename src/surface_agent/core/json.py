"""
JSON Helpers
Strict decoding for surfaces, tolerant object extraction for provider replies,
canonical encoding, and size/depth guards for untrusted payloads.
"""

import json
import re
from typing import Any

import msgspec
import orjson
from json_repair import repair_json

# ```json ... ``` (language tag optional)
_FENCE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)

INT64_LIMIT = 2**63
UINT64_LIMIT = 2**64


class JSONParseError(Exception):
    """A JSON payload could not be decoded or breaks a limit."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


def strict_loads(data: str | bytes) -> Any:
    """
    Decode a JSON document as-is.

    Raises:
        orjson.JSONDecodeError: On malformed input (``.pos`` holds the offset)
    """
    return orjson.loads(data)


def find_object_span(text: str) -> str | None:
    """
    Slice the outermost ``{...}`` out of a model reply.

    A fenced code block, when present, is searched instead of the whole reply.
    """
    fenced = _FENCE.search(text)
    body = fenced.group(1) if fenced else text

    first = body.find("{")
    last = body.rfind("}")
    if first == -1 or last < first:
        return None
    return body[first : last + 1]


def _as_object(value: Any) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise JSONParseError(f"Expected a JSON object, got {type(value).__name__}")
    return value


def extract_json(text: str, repair: bool = False) -> dict[str, Any]:
    """
    Pull a JSON object out of free-form model output.

    Repair is opt-in. The provider leaves it off so a malformed reply fails
    loudly; callers that prefer a best-effort object pass ``repair=True``.

    Args:
        text: Model reply, possibly wrapped in prose or a code fence
        repair: Fall back to json_repair when strict decoding fails

    Raises:
        JSONParseError: No object found, or it does not decode
    """
    candidate = find_object_span(text.strip())
    if candidate is None:
        raise JSONParseError("No JSON object found in text")

    try:
        return _as_object(msgspec.json.decode(candidate))
    except msgspec.DecodeError as e:
        if not repair:
            raise JSONParseError(f"Invalid JSON: {e}", e) from e

    try:
        repaired = json.loads(repair_json(candidate))
    except (ValueError, TypeError) as e:
        raise JSONParseError(f"JSON repair failed: {e}", e) from e
    return _as_object(repaired)


def safe_json_dumps(obj: Any, **kwargs: Any) -> str:
    """
    Encode with orjson; ``indent`` is 0 (compact) or 2.

    Values orjson rejects (integers wider than 64 bits) go through stdlib json.
    """
    indent = kwargs.get("indent", 0)
    if indent in (0, 2):
        try:
            return orjson.dumps(obj, option=orjson.OPT_INDENT_2 if indent == 2 else 0).decode("utf-8")
        except TypeError:
            pass

    return json.dumps(obj, indent=indent or None, ensure_ascii=False)


def encoded_size(data: str | bytes) -> int:
    """UTF-8 byte length; lone surrogates count as three bytes instead of raising."""
    return len(data) if isinstance(data, bytes) else len(data.encode("utf-8", "surrogatepass"))


def compact_size(obj: Any) -> int:
    """Byte length of the compact encoding of a decoded document."""
    return encoded_size(safe_json_dumps(obj))


def validate_json_size(data: str | bytes, max_size: int, name: str = "JSON") -> None:
    """Reject payloads larger than ``max_size`` bytes (UTF-8)."""
    size = encoded_size(data)
    if size > max_size:
        raise JSONParseError(f"{name} size {size} bytes exceeds maximum {max_size} bytes")


def _has_wide_float(obj: Any) -> bool:
    if isinstance(obj, float):
        return obj.is_integer() and abs(obj) >= INT64_LIMIT
    if isinstance(obj, dict):
        return any(_has_wide_float(value) for value in obj.values())
    if isinstance(obj, list):
        return any(_has_wide_float(item) for item in obj)
    return False


def _checked_int(literal: str) -> int:
    try:
        value = int(literal)
    except ValueError as e:
        raise JSONParseError(f"Integer literal {literal[:32]}... is too long", e) from e
    if not -INT64_LIMIT <= value < UINT64_LIMIT:
        raise JSONParseError(f"Integer literal {literal[:32]} does not fit in 64 bits")
    return value


def reject_wide_integers(data: str | bytes, document: Any) -> None:
    """
    Reject integer literals orjson could only decode as lossy floats.

    orjson keeps integers in the signed/unsigned 64-bit range and turns wider
    ones into floats. Only documents holding such a float are decoded a
    second time, with stdlib json, to tell ``1e30`` apart from a 31-digit
    integer.

    Raises:
        JSONParseError: An integer literal is wider than 64 bits
    """
    if _has_wide_float(document):
        json.loads(data, parse_int=_checked_int)


def validate_json_depth(obj: Any, max_depth: int = 20, current_depth: int = 0) -> None:
    """Reject containers nested deeper than ``max_depth``."""
    if current_depth > max_depth:
        raise JSONParseError(f"JSON nesting depth {current_depth} exceeds maximum {max_depth}")

    children = obj.values() if isinstance(obj, dict) else obj if isinstance(obj, list) else ()
    for child in children:
        validate_json_depth(child, max_depth, current_depth + 1)
