# execledger/core/canon.py
import math
from typing import Any

try:
    import jcs
except ImportError:
    raise ImportError("Please install jcs: pip install jcs")

from execledger.core.errors import SerializationError


def _check(value: Any, path: str, seen: set) -> None:
    """Reject anything RFC 8785 cannot encode identically everywhere."""
    if value is None or isinstance(value, (bool, str, int)):
        return
    if isinstance(value, float):
        if not math.isfinite(value):
            raise SerializationError(f"Non-finite number at {path}: {value!r}")
        return
    if isinstance(value, (dict, list, tuple)):
        marker = id(value)
        if marker in seen:
            raise SerializationError(f"Cyclic reference at {path}")
        seen.add(marker)
        try:
            if isinstance(value, dict):
                for key, item in value.items():
                    if not isinstance(key, str):
                        raise SerializationError(
                            f"Mapping key at {path} must be a string, got {type(key).__name__}"
                        )
                    _check(item, f"{path}.{key}", seen)
            else:
                for i, item in enumerate(value):
                    _check(item, f"{path}[{i}]", seen)
        finally:
            # only ancestors count: shared siblings are not cycles
            seen.discard(marker)
        return
    raise SerializationError(f"Unsupported type at {path}: {type(value).__name__}")


def canonical_json(obj: Any) -> bytes:
    """
    Produce deterministic UTF-8 bytes according to RFC 8785 (JSON Canonicalization Scheme).
    Returns bytes ready for hashing or signing.

    Raises SerializationError for non-finite numbers, cycles, non-string keys
    and values outside the JSON type set.
    """
    _check(obj, "$", set())
    try:
        return jcs.canonicalize(obj)
    except (TypeError, ValueError) as e:
        raise SerializationError(str(e)) from e


def canonical_json_str(obj: Any) -> str:
    """Same as above, but returns string (mostly for debugging)."""
    return canonical_json(obj).decode("utf-8")
