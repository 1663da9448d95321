"""Flatten decoded JSON documents into single-level field maps."""
from __future__ import annotations

from typing import Any, Dict, Union

from .errors import DecodeError

Primitive = Union[float, bool, str]

ARRAY_SEPARATOR = "_"


def flatten_json(value: Any, prefix: str = "", separator: str = ".") -> Dict[str, Primitive]:
    """Walk ``value`` and return a mapping of flat keys to primitive values.

    Object keys are joined to the prefix with ``separator``, array elements
    with ``_`` and their index. Numbers become floats, booleans and strings are
    kept as they are, ``None`` contributes nothing. A scalar at the top level
    ends up under the empty key.
    """
    fields: Dict[str, Primitive] = {}
    _flatten_into(fields, prefix, value, separator)
    return fields


def _flatten_into(fields: Dict[str, Primitive], prefix: str, value: Any, separator: str) -> None:
    if value is None:
        return
    if isinstance(value, dict):
        for key, item in value.items():
            name = str(key) if not prefix else f"{prefix}{separator}{key}"
            _flatten_into(fields, name, item, separator)
        return
    if isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            _flatten_into(fields, f"{prefix}{ARRAY_SEPARATOR}{index}", item, separator)
        return
    # bool is a subclass of int, so it has to be matched first.
    if isinstance(value, bool):
        fields[prefix] = value
    elif isinstance(value, (int, float)):
        try:
            fields[prefix] = float(value)
        except OverflowError as exc:
            raise DecodeError(f"number at {prefix!r} does not fit a float") from exc
    elif isinstance(value, str):
        fields[prefix] = value
    else:
        raise DecodeError(f"cannot flatten value of type {type(value).__name__} at {prefix!r}")
