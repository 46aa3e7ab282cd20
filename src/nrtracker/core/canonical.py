# src/nrtracker/core/canonical.py
"""
Canonical JSON serialization for wire payloads.

Two-phase approach:
1. Normalize: walk containers, reject non-finite floats and cycles (our code)
2. Serialize: Produce deterministic JSON per RFC 8785/JCS (rfc8785 package)

IMPORTANT: NaN and Infinity are strictly REJECTED, not silently converted.
The backend would reject them anyway, and a coerced value would misreport
the measurement. Cyclic structures and types JSON has no literal for
(bytes, Decimal, datetime, ...) are rejected as well.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

import rfc8785


def _normalize_value(obj: Any) -> Any:
    """Check a single value before serialization.

    Args:
        obj: Any Python value

    Returns:
        The value unchanged

    Raises:
        ValueError: If value is NaN or Infinity
    """
    # bool is an int, never a float
    if isinstance(obj, float) and (math.isnan(obj) or math.isinf(obj)):
        raise ValueError(f"Cannot canonicalize non-finite float: {obj}.")

    # bytes, Decimal, datetime and other non-JSON types are left for rfc8785
    # to reject; nothing is coerced into a different JSON shape
    return obj


def _normalize_for_canonical(data: Any, _active: frozenset[int] = frozenset()) -> Any:
    """Recursively normalize a data structure for canonical JSON.

    Args:
        data: Any data structure (mapping, list, primitive)
        _active: ids of containers on the current path, for cycle detection

    Returns:
        Normalized data structure with only JSON-safe types

    Raises:
        ValueError: If data contains NaN, Infinity, or a reference cycle
    """
    if isinstance(data, Mapping | list | tuple):
        if id(data) in _active:
            raise ValueError(f"Cannot canonicalize cyclic structure of type {type(data).__name__}")
        active = _active | {id(data)}
        if isinstance(data, Mapping):
            return {k: _normalize_for_canonical(v, active) for k, v in data.items()}
        return [_normalize_for_canonical(v, active) for v in data]
    return _normalize_value(data)


def canonical_json_bytes(obj: Any) -> bytes:
    """Produce canonical JSON as UTF-8 bytes.

    Raises:
        ValueError: If data contains NaN, Infinity, cycles, or values
            rfc8785 cannot represent (rfc8785 errors are ValueErrors)
        TypeError: If data contains types that cannot be serialized
    """
    normalized = _normalize_for_canonical(obj)
    result: bytes = rfc8785.dumps(normalized)
    return result


def canonical_json(obj: Any) -> str:
    """Produce canonical JSON (no whitespace, sorted keys) as a string.

    Args:
        obj: Data structure to serialize

    Returns:
        Canonical JSON string

    Raises:
        ValueError: If data contains NaN, Infinity, or other non-finite values
        TypeError: If data contains types that cannot be serialized
    """
    return canonical_json_bytes(obj).decode("utf-8")
