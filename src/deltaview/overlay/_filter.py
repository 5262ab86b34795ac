"""
Filtering of composed diffs by path pattern.

A pattern is either a string, compiled and searched as a regular
expression, or an already compiled ``re.Pattern``. Searching (not full
matching) means a plain substring such as ``"a"`` selects every path
containing ``a``.

Example:
    >>> filter_changes({"set": {"a": 1, "b.a": 2, "c": 3}}, "^a")
    {'set': {'a': 1}}
"""

from __future__ import annotations

import re as _re

import deltaview.overlay._types as _types


def path_matches(path: str, pattern: _types.Pattern) -> bool:
    """Check whether a dotted path satisfies a pattern."""
    if isinstance(pattern, str):
        return _re.search(pattern, path) is not None
    return pattern.search(path) is not None


def filter_changes(changes: _types.Changes, pattern: _types.Pattern) -> _types.Changes:
    """
    Project a composed diff onto the entries whose path matches.

    Args:
        changes: A composed diff ({"set": ..., "unset": ...}).
        pattern: Regular expression (string or compiled).

    Returns:
        New diff with the same groups, minus non-matching entries.
        Groups left empty are omitted.

    Raises:
        re.error: If a string pattern is not a valid regular expression.
    """
    result: _types.Changes = {}
    for group, entries in changes.items():
        kept = {path: value for path, value in entries.items() if path_matches(path, pattern)}
        if kept:
            result[group] = kept
    return result
