"""
deltaview - change tracking for read-only nested data

Wrap a snapshot, edit it as if it were writable, and read back exactly
what changed as a minimal set/unset update document.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("deltaview")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)

from deltaview.config import OverlayOptions, Settings  # noqa: E402
from deltaview.overlay import (  # noqa: E402
    Changes,
    OverlayNode,
    TrackedMapping,
    TrackedObject,
    TrackedSequence,
    TrackedView,
    filter_changes,
    is_tracked,
    read_only,
    tracker,
    wrap,
)

__all__ = [
    "__version__",
    "__version_info__",
    "Changes",
    "OverlayNode",
    "OverlayOptions",
    "Settings",
    "TrackedMapping",
    "TrackedObject",
    "TrackedSequence",
    "TrackedView",
    "filter_changes",
    "is_tracked",
    "read_only",
    "tracker",
    "wrap",
]
