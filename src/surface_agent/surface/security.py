"""
Security Scan
Depth-first walk over decoded JSON rejecting script-like content.
"""

import re
from typing import Any

from .errors import SurfaceErrorCode, ValidationFailure

SNIPPET_LENGTH = 100

DANGEROUS_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("script_tag", re.compile(r"<\s*/?\s*script", re.IGNORECASE)),
    ("javascript_scheme", re.compile(r"javascript\s*:", re.IGNORECASE)),
    ("event_handler", re.compile(r"\bon[a-z]+\s*=", re.IGNORECASE)),
    ("eval_call", re.compile(r"\beval\s*\(", re.IGNORECASE)),
    ("function_constructor", re.compile(r"\bFunction\s*\(", re.IGNORECASE)),
    ("timer_call", re.compile(r"\bset(?:Timeout|Interval)\s*\(", re.IGNORECASE)),
    ("dom_global", re.compile(r"\b(?:document|window)\.[a-z_$]", re.IGNORECASE)),
    ("global_this", re.compile(r"\bglobalThis\b")),
    ("html_injection", re.compile(r"(?:inner|outer)HTML", re.IGNORECASE)),
    ("prototype_access", re.compile(r"\.prototype\b", re.IGNORECASE)),
    ("proto_marker", re.compile(r"__proto__", re.IGNORECASE)),
    ("constructor_index", re.compile(r"\bconstructor\s*\[", re.IGNORECASE)),
)


def find_dangerous_pattern(text: str) -> str | None:
    """Return the name of the first dangerous pattern found in ``text``."""
    for name, pattern in DANGEROUS_PATTERNS:
        if pattern.search(text):
            return name
    return None


def _violation(path: str, pattern: str, text: str) -> ValidationFailure:
    return ValidationFailure(
        code=SurfaceErrorCode.SECURITY_VIOLATION,
        message="Potentially dangerous content detected",
        details={"path": path or "root", "pattern": pattern, "snippet": text[:SNIPPET_LENGTH]},
    )


def scan(value: Any, max_depth: int, path: str = "", depth: int = 0) -> ValidationFailure | None:
    """
    Scan every string (object keys included) of a decoded JSON value.

    Args:
        value: Decoded JSON (str, number, bool, None, list or dict)
        max_depth: Nesting bound; exceeding it is a schema failure
        path: Dotted path of ``value`` for error reporting

    Returns:
        The first failure found, or None if the value is clean
    """
    if depth > max_depth:
        return ValidationFailure(
            code=SurfaceErrorCode.SCHEMA_INVALID,
            message=f"Nesting depth exceeds maximum {max_depth}",
            details={"path": path or "root", "maxDepth": max_depth},
        )

    if isinstance(value, str):
        pattern = find_dangerous_pattern(value)
        return _violation(path, pattern, value) if pattern else None

    if isinstance(value, list):
        for index, item in enumerate(value):
            failure = scan(item, max_depth, f"{path}[{index}]", depth + 1)
            if failure:
                return failure
    elif isinstance(value, dict):
        for key, item in value.items():
            child_path = f"{path}.{key}" if path else str(key)
            pattern = find_dangerous_pattern(str(key))
            if pattern:
                return _violation(child_path, pattern, str(key))
            failure = scan(item, max_depth, child_path, depth + 1)
            if failure:
                return failure

    return None
