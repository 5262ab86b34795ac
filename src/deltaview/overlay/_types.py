"""
Type aliases and sentinels for the overlay package.

This module provides:
- Key: a key of a wrapped compound value (mapping key, index, attribute)
- Changes: the composed diff document ({"set": {...}, "unset": {...}})
- Pattern: what a diff filter accepts
- MISSING: sentinel returned by OverlayNode.read() for an absent key
"""

from __future__ import annotations

import re as _re
import typing as _typing

# Mapping keys, sequence indices and attribute names
Key: _typing.TypeAlias = _typing.Hashable

# Composed diff. Both groups are optional: an empty group is omitted.
# Example: {"set": {"a.b": 10}, "unset": {"c": True}}
Changes: _typing.TypeAlias = dict[str, dict[str, _typing.Any]]

Pattern: _typing.TypeAlias = "str | _re.Pattern[str]"


# Helper function to reconstruct MISSING singleton during unpickle
def _get_missing_singleton() -> _MissingType:
    """Return the MISSING singleton. Called by pickle to reconstruct."""
    return MISSING


class _MissingType:
    """Sentinel type marking a key as absent from a tracked view."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<MISSING>"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> tuple[_typing.Callable[[], _MissingType], tuple[()]]:
        """Pickle support: ensure singleton is preserved."""
        return (_get_missing_singleton, ())


MISSING = _MissingType()
