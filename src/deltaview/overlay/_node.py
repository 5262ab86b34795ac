"""
OverlayNode: the mutation-tracking unit behind every tracked view.

One node wraps one compound value (its target) and records what the
caller changed on top of it:

- pending set: key -> literal replacement value
- pending delete: keys marked as removed
- children: nodes created lazily for compound values read from the target

The target is never modified. Unmodified subtrees are never copied: a
child node only exists once its key has been read.

Composed diffs are cached per path prefix. Every mutation clears the
cache of the mutated node and of every ancestor, so the next
get_changes() call always sees it.

Thread safety: NOT thread-safe. A tree must be used from one thread at
a time; callers serialize access themselves if needed.
"""

from __future__ import annotations

import logging as _logging
import types as _types_module
import typing as _typing

import deltaview.config.types as config_types
import deltaview.constants as constants
import deltaview.overlay._accessors as _accessors
import deltaview.overlay._filter as _filter
import deltaview.overlay._kinds as _kinds
import deltaview.overlay._types as _types
import deltaview.overlay._views as _views

_logger = _logging.getLogger(__name__)


class OverlayNode:
    """
    Overlay of pending mutations on top of one read-only compound value.

    Nodes are created by ``wrap()`` (root) and by reads of compound-valued
    keys (children). Each node owns exactly one external view, reachable
    as ``node.view``; ``tracker(view)`` goes the other way.

    Example:
        >>> root = OverlayNode({"a": {"b": 1}})
        >>> root.view["a"]["b"] = 2
        >>> root.get_changes()
        {'set': {'a.b': 2}}
        >>> root.target
        {'a': {'b': 1}}
    """

    def __init__(
        self,
        target: _typing.Any,
        *,
        parent: OverlayNode | None = None,
        key: _types.Key = None,
        options: config_types.OverlayOptions | None = None,
        resolver: _accessors.AccessorResolver | None = None,
        adapter: _kinds.TargetAdapter | None = None,
    ) -> None:
        """
        Create a node.

        Args:
            target: The compound value to overlay. Never mutated.
            parent: Enclosing node, None for a root.
            key: Key under which the parent holds this node.
            options: Tree-wide options. Defaults to OverlayOptions().
            resolver: Tree-wide accessor cache. Defaults to a fresh one.
            adapter: Target adapter, if the caller already knows the kind.

        Raises:
            TypeError: If target is not a compound value.
        """
        if adapter is None:
            adapter = _kinds.adapter_for(target)
        if adapter is None:
            raise TypeError(
                f"cannot track a value of type {type(target).__name__!r}: "
                "expected a mapping, a sequence or an attribute-bearing object"
            )

        self._target = target
        self._parent = parent
        self._key = key
        self._adapter = adapter
        self._options = options if options is not None else config_types.OverlayOptions()
        self._resolver = resolver if resolver is not None else _accessors.AccessorResolver()

        self._pending_set: dict[_types.Key, _typing.Any] = {}
        # Used as an ordered set: key -> True
        self._pending_delete: dict[_types.Key, bool] = {}
        self._children: dict[_types.Key, OverlayNode] = {}
        self._dirty = False
        self._diff_cache: dict[str, _types.Changes] = {}
        self._view: _views.TrackedView | None = None

    # =========================================================================
    # Introspection
    # =========================================================================

    @property
    def target(self) -> _typing.Any:
        """The wrapped value (same object that was wrapped)."""
        return self._target

    @property
    def parent(self) -> OverlayNode | None:
        """Enclosing node, or None for a root."""
        return self._parent

    @property
    def kind(self) -> str:
        """Compound-value kind: 'mapping', 'sequence' or 'record'."""
        return self._adapter.kind

    @property
    def options(self) -> config_types.OverlayOptions:
        """Options shared by the whole tree."""
        return self._options

    @property
    def dirty(self) -> bool:
        """Whether this node or a live descendant holds a mutation."""
        return self._dirty

    @property
    def pending_set(self) -> dict[_types.Key, _typing.Any]:
        """Read-only access to recorded replacement values."""
        return self._pending_set

    @property
    def pending_delete(self) -> list[_types.Key]:
        """Keys recorded as removed, in the order they were removed."""
        return list(self._pending_delete)

    @property
    def children(self) -> dict[_types.Key, OverlayNode]:
        """Read-only access to live child nodes."""
        return self._children

    @property
    def view(self) -> _views.TrackedView:
        """The node's external tracked view (created once, then reused)."""
        if self._view is None:
            self._view = _views.view_for(self)
        return self._view

    def get_target(self) -> _typing.Any:
        """Return the wrapped value."""
        return self._target

    # =========================================================================
    # Read path
    # =========================================================================

    def read(self, key: _types.Key) -> _typing.Any:
        """
        Read the effective value of key.

        Returns:
            The pending value, a child view for compound target values,
            the raw target value, or MISSING if the key is absent.
        """
        if key in self._pending_delete:
            return _types.MISSING

        if key in self._pending_set:
            value = self._pending_set[key]
            self._check_nested_views(key, value)
            return value

        if self._adapter.supports_accessors:
            found = self._read_accessor(key)
            if found is not _types.MISSING:
                return found

        child = self._children.get(key)
        if child is not None:
            return child.view

        value = self._adapter.get(self._target, key)
        if value is _types.MISSING:
            return _types.MISSING

        adapter = _kinds.adapter_for(value)
        if adapter is None:
            return value

        child = OverlayNode(
            value,
            parent=self,
            key=key,
            options=self._options,
            resolver=self._resolver,
            adapter=adapter,
        )
        self._children[key] = child
        return child.view

    def exists(self, key: _types.Key) -> bool:
        """Check whether key is present, without creating a child node."""
        if key in self._pending_delete:
            return False
        if key in self._pending_set:
            return True
        return self._adapter.has(self._target, key)

    def keys(self) -> list[_types.Key]:
        """
        Enumerate present keys.

        Target keys come first in their original order, followed by keys
        only known from pending writes in the order they were written.
        Removed keys are left out.
        """
        target_keys = self._adapter.keys(self._target)
        known = set(target_keys)
        result = [key for key in target_keys if key not in self._pending_delete]
        result.extend(key for key in self._pending_set if key not in known)
        return self._adapter.order(result)

    def _read_accessor(self, key: _types.Key) -> _typing.Any:
        """Run a property getter or bind a method against the view."""
        if self._options.accessor_reads:
            getter = self._resolver.reader(self._target, key)
            if getter is not None:
                return getter(self.view)

        method = self._resolver.method(self._target, key)
        if method is not None and key not in getattr(self._target, "__dict__", {}):
            return _types_module.MethodType(method, self.view)

        return _types.MISSING

    # =========================================================================
    # Write path
    # =========================================================================

    def write(self, key: _types.Key, value: _typing.Any) -> None:
        """
        Record value as the new value of key.

        With accessor writes enabled and a property setter defined for
        key, the setter runs against the view instead and nothing is
        recorded for key itself.
        """
        if self._options.accessor_writes and self._adapter.supports_accessors:
            setter = self._resolver.writer(self._target, key)
            if setter is not None:
                setter(self.view, value)
                return

        self._check_nested_views(key, value)
        self._pending_delete.pop(key, None)
        self._children.pop(key, None)
        self._pending_set[key] = value
        self._touch()

    def delete(self, key: _types.Key) -> None:
        """
        Record key as removed.

        Deleting a key that neither the target nor a pending write holds
        is a no-op.
        """
        if key not in self._pending_set and not self._adapter.has(self._target, key):
            return

        self._pending_set.pop(key, None)
        self._children.pop(key, None)
        self._pending_delete[key] = True
        self._touch()

    def reset(self, key: _types.Key | _types._MissingType = _types.MISSING) -> None:
        """
        Roll back recorded mutations.

        Args:
            key: Only roll back this key. Without it, every pending
                record and child of this node is dropped.
        """
        if key is _types.MISSING:
            self._pending_set.clear()
            self._pending_delete.clear()
            self._children.clear()
        else:
            self._pending_set.pop(key, None)
            self._pending_delete.pop(key, None)
            self._children.pop(key, None)
        _logger.debug("Reset %s node (key=%r)", self.kind, key)
        self._refresh()

    def _attached_parent(self) -> OverlayNode | None:
        """Parent node, if it still holds this node as a live child."""
        parent = self._parent
        if parent is None or parent._children.get(self._key) is not self:
            return None
        return parent

    def _touch(self) -> None:
        """Mark this node and its ancestors dirty and drop their cached diffs."""
        node: OverlayNode | None = self
        while node is not None:
            node._dirty = True
            node._diff_cache.clear()
            node = node._attached_parent()

    def _refresh(self) -> None:
        """Recompute dirty flags and drop cached diffs up the ancestor chain."""
        node: OverlayNode | None = self
        while node is not None:
            node._dirty = bool(
                node._pending_set
                or node._pending_delete
                or any(child._dirty for child in node._children.values())
            )
            node._diff_cache.clear()
            node = node._attached_parent()

    # =========================================================================
    # Diff composition
    # =========================================================================

    def get_changes(
        self,
        prefix: str = "",
        pattern: _types.Pattern | None = None,
    ) -> _types.Changes:
        """
        Return the composed diff of this node and its live descendants.

        Args:
            prefix: Prepended to every path (e.g. "config.").
            pattern: Optional path filter (regex string or compiled).

        Returns:
            {"set": {path: value}, "unset": {path: True}} with empty
            groups omitted; {} when nothing changed. The returned dicts
            are fresh copies and may be modified by the caller.
        """
        changes = self._composed(prefix)
        if pattern is not None:
            return _filter.filter_changes(changes, pattern)
        return {group: dict(entries) for group, entries in changes.items()}

    def has_changes(self, pattern: _types.Pattern | None = None) -> bool:
        """Whether any change is recorded (optionally only matching paths)."""
        if pattern is None:
            return self._dirty
        return bool(self.get_changes(pattern=pattern))

    def _composed(self, prefix: str) -> _types.Changes:
        """Cached, unfiltered diff for prefix. Callers must not mutate it."""
        cached = self._diff_cache.get(prefix)
        if cached is not None:
            return cached

        set_group: dict[str, _typing.Any] = {}
        unset_group: dict[str, _typing.Any] = {}

        for key, value in self._pending_set.items():
            segment = _kinds.path_segment(key)
            if segment is not None:
                set_group[prefix + segment] = value

        for key in self._pending_delete:
            segment = _kinds.path_segment(key)
            if segment is not None:
                unset_group[prefix + segment] = True

        for key, child in self._children.items():
            segment = _kinds.path_segment(key)
            if segment is None or not child._dirty:
                continue
            child_changes = child._composed(prefix + segment + constants.PATH_SEPARATOR)
            set_group.update(child_changes.get(constants.SET_GROUP, {}))
            unset_group.update(child_changes.get(constants.UNSET_GROUP, {}))

        changes: _types.Changes = {}
        if set_group:
            changes[constants.SET_GROUP] = set_group
        if unset_group:
            changes[constants.UNSET_GROUP] = unset_group

        self._diff_cache[prefix] = changes
        return changes

    # =========================================================================
    # Copies
    # =========================================================================

    def clone_proxy(self) -> _views.TrackedView:
        """Return a view of a fresh, unmodified tree over the same target."""
        clone = OverlayNode(self._target, options=self._options, adapter=self._adapter)
        _logger.debug("Cloned %s node over target id=%#x", self.kind, id(self._target))
        return clone.view

    def snapshot(self, key: _types.Key) -> _typing.Any:
        """
        Plain deep copy of the effective value of one present key.

        Raises:
            KeyError: If key is not present.
        """
        if not self.exists(key):
            raise KeyError(key)
        return _plain(self._effective(key), {})

    def materialize(self, _memo: dict[int, _typing.Any] | None = None) -> _typing.Any:
        """
        Build a plain deep copy of the effective value.

        Mappings become dicts, sequences become lists, records become
        shallow copies of the target carrying the effective attributes.
        Property getters are not run. The target is left untouched and
        the result shares no containers with it.
        """
        memo = {} if _memo is None else _memo

        # Clean nodes over the same object materialize identically, which
        # also breaks cycles in the target. Entries hold the keyed object
        # so that its id is not reused while the memo lives.
        anchor = self if self._dirty else self._target
        if id(anchor) in memo:
            return memo[id(anchor)][0]

        result = self._adapter.blank(self._target)
        memo[id(anchor)] = (result, anchor)
        for key in self.keys():
            self._adapter.assign(result, key, _plain(self._effective(key), memo))
        for key in self._pending_delete:
            self._adapter.discard(result, key)
        return result

    def _effective(self, key: _types.Key) -> _typing.Any:
        """Stored value for a present key, without running accessors."""
        if key in self._pending_set:
            return self._pending_set[key]
        child = self._children.get(key)
        if child is not None:
            return child.view
        return self._adapter.get(self._target, key)

    # =========================================================================
    # Diagnostics
    # =========================================================================

    def _check_nested_views(self, key: _types.Key, value: _typing.Any) -> None:
        """Warn when a tracked view is stored inside a tracked tree."""
        if self._options.production:
            return
        if _contains_view(value, set()):
            _logger.warning(
                "Value for key %r is or contains a tracked view; nested tracking "
                "is not supported and changes made through that view are not "
                "reported by this tree",
                key,
            )

    def __repr__(self) -> str:
        parts = [f"{self.kind}"]
        if self._pending_set:
            parts.append(f"set={list(self._pending_set)!r}")
        if self._pending_delete:
            parts.append(f"unset={list(self._pending_delete)!r}")
        if self._children:
            parts.append(f"children={list(self._children)!r}")
        return f"OverlayNode({', '.join(parts)})"


def _contains_view(value: _typing.Any, seen: set[int]) -> bool:
    """Check whether value is, or transitively holds, a tracked view."""
    if isinstance(value, _views.TrackedView):
        return True

    adapter = _kinds.adapter_for(value)
    if adapter is None:
        return False

    obj_id = id(value)
    if obj_id in seen:
        return False  # Circular reference
    seen.add(obj_id)

    return any(
        _contains_view(adapter.get(value, key), seen) for key in adapter.keys(value)
    )


def _plain(value: _typing.Any, memo: dict[int, _typing.Any]) -> _typing.Any:
    """Convert a value (view, compound or leaf) to a plain deep copy."""
    if isinstance(value, _views.TrackedView):
        return _views.tracker(value).materialize(memo)

    adapter = _kinds.adapter_for(value)
    if adapter is None:
        return value
    return OverlayNode(value, adapter=adapter).materialize(memo)


def wrap(
    value: _typing.Any,
    options: config_types.OverlayOptions | None = None,
) -> _views.TrackedView:
    """
    Return a tracked view over value.

    Args:
        value: A mapping, non-text sequence or attribute-bearing object.
        options: Tree-wide options. Defaults to OverlayOptions().

    Returns:
        TrackedMapping, TrackedSequence or TrackedObject.

    Raises:
        TypeError: If value is a leaf (scalar, string, function, ...).

    Example:
        >>> view = wrap({"a": 1})
        >>> view["b"] = 2
        >>> tracker(view).get_changes()
        {'set': {'b': 2}}
    """
    node = OverlayNode(value, options=options)
    _logger.debug("Wrapped %s target id=%#x", node.kind, id(value))
    return node.view


tracker = _views.tracker
is_tracked = _views.is_tracked
