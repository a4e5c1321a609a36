"""Deterministic dot-path flattening of nested variables."""

from collections.abc import Mapping
from typing import Any


def flatten(value: Any, prefix: str = "") -> list[tuple[str, Any]]:
    """Flatten nested mappings and lists into sorted ``(path, leaf)`` pairs.

    Mapping keys are visited in sorted order so that field order never
    changes the result. List items use their index as the path segment.
    Empty containers are kept as leaves.

    Example:
        >>> flatten({"b": 1, "a": {"d": [True], "c": None}})
        [('a.c', None), ('a.d.0', True), ('b', 1)]
    """
    if isinstance(value, Mapping) and value:
        pairs: list[tuple[str, Any]] = []
        for key in sorted(value, key=str):
            pairs.extend(flatten(value[key], _join(prefix, str(key))))
        return pairs

    if isinstance(value, (list, tuple)) and value:
        pairs = []
        for index, item in enumerate(value):
            pairs.extend(flatten(item, _join(prefix, str(index))))
        return pairs

    return [(prefix, value)]


def _join(prefix: str, segment: str) -> str:
    return f"{prefix}.{segment}" if prefix else segment
