"""
Overlay: mutation tracking over read-only nested values.

This package wraps a nested value in a tracked view. Writes and deletes
made through the view are recorded in a shadow tree of OverlayNodes and
never reach the wrapped value. The recorded changes can be read back at
any time as a dotted-path update document.

Example:
    >>> from deltaview.overlay import tracker, wrap
    >>> view = wrap({"a": {"b": 1}, "c": 2})
    >>> view["a"]["b"] = 10
    >>> del view["c"]
    >>> tracker(view).get_changes()
    {'set': {'a.b': 10}, 'unset': {'c': True}}
"""

from deltaview.overlay._accessors import Accessor, AccessorResolver
from deltaview.overlay._filter import filter_changes, path_matches
from deltaview.overlay._node import OverlayNode, is_tracked, tracker, wrap
from deltaview.overlay._readonly import ReadOnlyMapping, ReadOnlySequence, read_only
from deltaview.overlay._types import MISSING, Changes
from deltaview.overlay._views import TrackedMapping, TrackedObject, TrackedSequence, TrackedView

__all__ = [
    "MISSING",
    "Accessor",
    "AccessorResolver",
    "Changes",
    "OverlayNode",
    "ReadOnlyMapping",
    "ReadOnlySequence",
    "TrackedMapping",
    "TrackedObject",
    "TrackedSequence",
    "TrackedView",
    "filter_changes",
    "is_tracked",
    "path_matches",
    "read_only",
    "tracker",
    "wrap",
]
