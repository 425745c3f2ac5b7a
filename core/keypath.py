"""Keypath traversal over parsed JSON trees.

A keypath is a dot-separated list of object keys, e.g. ``"user.name"``.
Only object descent is supported; list indices are not.
"""

from typing import Any

from core.exceptions import KeypathError


class _Missing:
    """Sentinel for a keypath that did not resolve."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def split_keypath(keypath: str) -> list[str]:
    """Split a keypath into its segments."""
    return keypath.split(".")


def resolve_keypath(tree: Any, keypath: str) -> Any:
    """Return the value at ``keypath`` or ``MISSING``.

    A JSON ``null`` stored under the final key is a value, not a miss.
    """
    current = tree
    for segment in split_keypath(keypath):
        if not isinstance(current, dict) or segment not in current:
            return MISSING
        current = current[segment]
    return current


def extract_keypath(tree: Any, keypath: str) -> Any:
    """Return the value at ``keypath``, raising ``KeypathError`` with the full path."""
    value = resolve_keypath(tree, keypath)
    if value is MISSING:
        raise KeypathError(keypath)
    return value
