"""
Canonical JSON encoding and fingerprinting (internal).

Used to decide whether a build's inputs changed since the last run:
the same inputs always canonicalize to the same string, regardless of
dict ordering or path types.
"""

from __future__ import annotations

import dataclasses
import hashlib
import json
from pathlib import PurePath
from typing import Any


class CanonicalizeError(Exception):
    """Raised when an object cannot be canonicalized."""

    pass


def _encode_value(obj: Any) -> Any:
    if obj is None or isinstance(obj, (bool, int, str)):
        return obj
    if isinstance(obj, float):
        # repr() keeps full precision
        return repr(obj)
    if isinstance(obj, PurePath):
        return obj.as_posix()
    if isinstance(obj, (list, tuple)):
        return [_encode_value(item) for item in obj]
    if isinstance(obj, (set, frozenset)):
        return sorted(_encode_value(item) for item in obj)
    if isinstance(obj, dict):
        return {str(k): _encode_value(v) for k, v in sorted(obj.items(), key=lambda kv: str(kv[0]))}
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return _encode_value(dataclasses.asdict(obj))

    raise CanonicalizeError(f"Cannot canonicalize type: {type(obj).__name__}")


def canonical(obj: Any) -> str:
    """
    Convert an object to a canonical JSON string.

    Example:
        >>> canonical({"b": 1, "a": 2})
        '{"a":2,"b":1}'
    """
    return json.dumps(_encode_value(obj), sort_keys=True, separators=(",", ":"))


def fingerprint(obj: Any) -> str:
    """SHA-256 of the canonical form, truncated to 16 hex characters."""
    return hashlib.sha256(canonical(obj).encode("utf-8")).hexdigest()[:16]
