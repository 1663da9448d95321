"""Registry of input plugins available to a collection scheduler."""
from __future__ import annotations

from typing import Any, Callable, Dict, List

Creator = Callable[[], Any]

_INPUTS: Dict[str, Creator] = {}


def add(name: str, creator: Creator) -> None:
    _INPUTS[name] = creator


def get(name: str) -> Creator:
    try:
        return _INPUTS[name]
    except KeyError:
        raise KeyError(f"unknown input: {name}") from None


def names() -> List[str]:
    return sorted(_INPUTS)
