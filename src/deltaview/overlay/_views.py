"""
Tracked views: the objects callers read and mutate.

Each view is a thin facade over one OverlayNode. Reads, writes, deletes,
containment checks and iteration are routed to the node; the view holds
no state of its own.

- TrackedMapping wraps mappings and behaves like a MutableMapping
- TrackedSequence wraps lists/tuples and behaves like a MutableSequence
- TrackedObject wraps attribute-bearing objects (attribute syntax)

Example:
    >>> view = deltaview.wrap({"a": {"b": 1}, "items": [1, 2]})
    >>> view["a"]["b"] = 99            # recorded as "a.b"
    >>> view["items"].append(3)        # recorded as "items.2"
    >>> del view["a"]["missing"]       # absent key: no-op
"""

from __future__ import annotations

import collections.abc as _abc
import operator as _operator
import typing as _typing

import deltaview.overlay._kinds as _kinds
import deltaview.overlay._types as _types

if _typing.TYPE_CHECKING:
    import deltaview.overlay._node as _node

_NODE_SLOT = "_deltaview_node"


class TrackedView:
    """Base class shared by all tracked views."""

    __slots__ = ()


class TrackedMapping(TrackedView, _abc.MutableMapping[_typing.Any, _typing.Any]):
    """
    Mutable view of a read-only mapping.

    Reads return the effective value: pending writes win over the
    target, and nested compound values come back as tracked views.
    """

    __slots__ = (_NODE_SLOT,)

    def __init__(self, node: _node.OverlayNode) -> None:
        self._deltaview_node = node

    def __getitem__(self, key: _typing.Any) -> _typing.Any:
        """
        Raises:
            KeyError: If key is absent or was deleted.
        """
        value = self._deltaview_node.read(key)
        if value is _types.MISSING:
            raise KeyError(key)
        return value

    def __setitem__(self, key: _typing.Any, value: _typing.Any) -> None:
        self._deltaview_node.write(key, value)

    def __delitem__(self, key: _typing.Any) -> None:
        """Mark key as removed. Deleting an absent key is a no-op."""
        self._deltaview_node.delete(key)

    def __iter__(self) -> _typing.Iterator[_typing.Any]:
        return iter(self._deltaview_node.keys())

    def __len__(self) -> int:
        return len(self._deltaview_node.keys())

    def __contains__(self, key: object) -> bool:
        try:
            return self._deltaview_node.exists(key)
        except TypeError:
            return False  # Unhashable

    def __repr__(self) -> str:
        return f"TrackedMapping({dict(self.items())!r})"

    def __eq__(self, other: object) -> bool:
        """Compare equal to any Mapping with same visible content."""
        if isinstance(other, _abc.Mapping):
            return dict(self.items()) == dict(other.items())
        return NotImplemented

    def __hash__(self) -> int:
        """Not hashable."""
        raise TypeError(f"unhashable type: '{type(self).__name__}'")


class TrackedSequence(TrackedView, _abc.MutableSequence[_typing.Any]):
    """
    Mutable view of a read-only sequence (list, tuple, ...).

    Item assignment records the index. Deleting or inserting in the
    middle keeps list semantics: following items move by one index, and
    each moved index is recorded as a write. Shrinking records the old
    last index as removed.

    Slice reads return plain lists; slice assignment and slice deletion
    are not supported.
    """

    __slots__ = (_NODE_SLOT,)

    def __init__(self, node: _node.OverlayNode) -> None:
        self._deltaview_node = node

    def _position(self, index: _typing.SupportsIndex) -> int:
        position = _operator.index(index)
        if position < 0:
            position += len(self)
        return position

    @_typing.overload
    def __getitem__(self, index: int) -> _typing.Any: ...

    @_typing.overload
    def __getitem__(self, index: slice) -> list[_typing.Any]: ...

    def __getitem__(self, index: int | slice) -> _typing.Any:
        """
        Raises:
            IndexError: If index is out of range.
        """
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(len(self)))]
        value = self._deltaview_node.read(self._position(index))
        if value is _types.MISSING:
            raise IndexError("tracked sequence index out of range")
        return value

    def __setitem__(self, index: _typing.Any, value: _typing.Any) -> None:
        """
        Raises:
            IndexError: If index is out of range.
            TypeError: If index is a slice.
        """
        if isinstance(index, slice):
            raise TypeError("tracked sequences do not support slice assignment")
        position = self._position(index)
        if not 0 <= position < len(self):
            raise IndexError("tracked sequence assignment index out of range")
        self._deltaview_node.write(position, value)

    def __delitem__(self, index: _typing.Any) -> None:
        """
        Remove one item, shifting the following items down.

        An out-of-range index is a no-op.

        Raises:
            TypeError: If index is a slice.
        """
        if isinstance(index, slice):
            raise TypeError("tracked sequences do not support slice deletion")
        node = self._deltaview_node
        length = len(self)
        position = self._position(index)
        if not 0 <= position < length:
            return
        for i in range(position, length - 1):
            node.write(i, node.snapshot(i + 1))
        node.delete(length - 1)

    def insert(self, index: _typing.SupportsIndex, value: _typing.Any) -> None:
        """Insert value before index, shifting the following items up."""
        node = self._deltaview_node
        length = len(self)
        position = _operator.index(index)
        if position < 0:
            position = max(0, position + length)
        position = min(position, length)
        for i in range(length, position, -1):
            node.write(i, node.snapshot(i - 1))
        node.write(position, value)

    def __iter__(self) -> _typing.Iterator[_typing.Any]:
        for position in range(len(self)):
            yield self[position]

    def __len__(self) -> int:
        return len(self._deltaview_node.keys())

    def __repr__(self) -> str:
        return f"TrackedSequence({list(self)!r})"

    def __eq__(self, other: object) -> bool:
        """Compare equal to any Sequence with same content (except strings)."""
        if isinstance(other, (str, bytes, bytearray)):
            return NotImplemented
        if isinstance(other, _abc.Sequence):
            return list(self) == list(other)
        return NotImplemented

    def __hash__(self) -> int:
        """Not hashable."""
        raise TypeError(f"unhashable type: '{type(self).__name__}'")


class TrackedObject(TrackedView):
    """
    Attribute view of a read-only object (instance, dataclass, namespace).

    ``view.name`` reads, ``view.name = value`` writes and ``del view.name``
    deletes, all through the overlay. Methods defined on the target's
    class come back bound to the view, so attribute changes they make
    are tracked as well. Dunder names are never routed to the target.

    Each target class gets its own TrackedObject subclass (see
    record_view_type). The view reports the target's class as
    ``__class__``, so ``isinstance(view, Target)`` holds and methods may
    call zero-argument ``super()``. Calling the view's type, as in
    ``type(self)(...)``, builds a plain instance of the target class.
    """

    __slots__ = (_NODE_SLOT,)

    # Target class, set on the subclasses built by record_view_type()
    _deltaview_record_type: _typing.ClassVar[type | None] = None

    def __new__(cls, *args: _typing.Any, **kwargs: _typing.Any) -> _typing.Any:
        """
        Raises:
            TypeError: On TrackedObject itself. Views come from wrap().
        """
        record_type = cls._deltaview_record_type
        if record_type is None:
            raise TypeError("tracked views are created with deltaview.wrap()")
        # Not an instance of cls, so __init__ is skipped
        return record_type(*args, **kwargs)

    @classmethod
    def _bind(cls, node: _node.OverlayNode) -> TrackedObject:
        view = object.__new__(cls)
        object.__setattr__(view, _NODE_SLOT, node)
        return view

    @property  # type: ignore[misc]
    def __class__(self) -> type:
        """The target's class (checked by isinstance() and super())."""
        return type(self._deltaview_node.target)

    def __getattr__(self, name: str) -> _typing.Any:
        """
        Called only when normal lookup fails, i.e. for target attributes.

        Raises:
            AttributeError: If the attribute is absent or was deleted.
        """
        if name.startswith("__") and name.endswith("__"):
            raise AttributeError(name)
        node = self._deltaview_node
        value = node.read(name)
        if value is _types.MISSING:
            raise AttributeError(
                f"{type(node.target).__name__!r} object has no attribute {name!r}"
            )
        return value

    def __setattr__(self, name: str, value: _typing.Any) -> None:
        self._deltaview_node.write(name, value)

    def __delattr__(self, name: str) -> None:
        """Mark the attribute as removed. Deleting an absent one is a no-op."""
        self._deltaview_node.delete(name)

    def __dir__(self) -> list[str]:
        return [key for key in self._deltaview_node.keys() if isinstance(key, str)]

    def __repr__(self) -> str:
        node = self._deltaview_node
        content = {key: node.read(key) for key in self.__dir__()}
        return f"TrackedObject({type(node.target).__name__}, {content!r})"

    def __eq__(self, other: object) -> bool:
        """
        Compare the effective object (see OverlayNode.materialize).

        Objects whose class keeps identity equality are compared by their
        attributes instead, so a view equals itself and its clean target.
        """
        if other is self:
            return True
        if isinstance(other, TrackedObject):
            other = other._deltaview_node.materialize()
        return _values_equal(self._deltaview_node.materialize(), other, set())

    def __hash__(self) -> int:
        """Not hashable."""
        raise TypeError(f"unhashable type: '{type(self).__name__}'")


def _has_identity_eq(value: object) -> bool:
    return _kinds.adapter_for(value) is _kinds.RECORD and type(value).__eq__ is object.__eq__


def _values_equal(left: _typing.Any, right: _typing.Any, seen: set[tuple[int, int]]) -> bool:
    """Deep ==, except identity-equality records compare by attributes."""
    if left is right:
        return True
    pair = (id(left), id(right))
    if pair in seen:
        return True  # Circular reference
    seen.add(pair)

    if _has_identity_eq(left):
        if type(left) is not type(right):
            return False
        mine = {key: getattr(left, key) for key in _kinds.RECORD.keys(left)}
        theirs = {key: getattr(right, key) for key in _kinds.RECORD.keys(right)}
        return mine.keys() == theirs.keys() and all(
            _values_equal(mine[key], theirs[key], seen) for key in mine
        )
    if _kinds.adapter_for(left) is _kinds.MAPPING and _kinds.adapter_for(right) is _kinds.MAPPING:
        return left.keys() == right.keys() and all(
            _values_equal(left[key], right[key], seen) for key in left
        )
    if _kinds.adapter_for(left) is _kinds.SEQUENCE and _kinds.adapter_for(right) is _kinds.SEQUENCE:
        return len(left) == len(right) and all(
            _values_equal(a, b, seen) for a, b in zip(left, right)
        )
    return bool(left == right)


_RECORD_VIEW_TYPES: dict[type, type[TrackedObject]] = {}


def record_view_type(record_type: type) -> type[TrackedObject]:
    """
    Return the TrackedObject subclass for a target class (built once).

    Example:
        >>> record_view_type(types.SimpleNamespace).__name__
        'TrackedSimpleNamespace'
    """
    view_type = _RECORD_VIEW_TYPES.get(record_type)
    if view_type is None:
        view_type = type(
            f"Tracked{record_type.__name__}",
            (TrackedObject,),
            {"__slots__": (), "__module__": __name__, "_deltaview_record_type": record_type},
        )
        _RECORD_VIEW_TYPES[record_type] = view_type
    return view_type


_VIEW_TYPES: dict[str, type[TrackedView]] = {
    "mapping": TrackedMapping,
    "sequence": TrackedSequence,
}


def view_for(node: _node.OverlayNode) -> TrackedView:
    """Create the view class matching the node's kind."""
    if node.kind == _kinds.RECORD.kind:
        return record_view_type(type(node.target))._bind(node)
    return _VIEW_TYPES[node.kind](node)  # type: ignore[call-arg]


def is_tracked(value: object) -> bool:
    """Check whether value is a tracked view."""
    return isinstance(value, TrackedView)


def tracker(view: TrackedView) -> _node.OverlayNode:
    """
    Return the administrative handle (OverlayNode) behind a view.

    Works for root and nested views alike.

    Raises:
        TypeError: If view is not a tracked view.

    Example:
        >>> view = deltaview.wrap({"a": 1})
        >>> del view["a"]
        >>> tracker(view).get_changes()
        {'unset': {'a': True}}
    """
    if not isinstance(view, TrackedView):
        raise TypeError(f"expected a tracked view, got {type(view).__name__!r}")
    return view._deltaview_node  # type: ignore[attr-defined, no-any-return]
