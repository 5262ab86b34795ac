"""
Target adapters: one strategy object per compound-value kind.

An OverlayNode never touches its target directly. It asks the adapter
for the target's kind whether a key exists, what value it holds, and
which keys it has. The same adapter also knows how to build a plain
copy of an overlaid value (see OverlayNode.materialize).

Kinds:
- mapping: any collections.abc.Mapping, keyed by mapping key
- sequence: any non-text collections.abc.Sequence, keyed by int index
- record: attribute-bearing objects (plain instances, dataclasses,
  SimpleNamespace), keyed by attribute name

Anything else is a leaf value and is never wrapped.
"""

from __future__ import annotations

import collections.abc as _abc
import copy as _copy
import dataclasses as _dataclasses
import enum as _enum
import inspect as _inspect
import types as _types_module
import typing as _typing

import deltaview.overlay._types as _types

# Sequences that are values, not containers
_TEXT_TYPES = (str, bytes, bytearray)

# Attribute-bearing objects that are still leaves
_LEAF_TYPES = (
    type,
    _types_module.FunctionType,
    _types_module.BuiltinFunctionType,
    _types_module.MethodType,
    _types_module.ModuleType,
    _enum.Enum,
    BaseException,
)


class TargetAdapter:
    """Base class for per-kind target access."""

    kind: _typing.ClassVar[str] = ""
    supports_accessors: _typing.ClassVar[bool] = False

    def has(self, target: _typing.Any, key: _types.Key) -> bool:
        raise NotImplementedError

    def get(self, target: _typing.Any, key: _types.Key) -> _typing.Any:
        """Return the target's value for key, or MISSING."""
        raise NotImplementedError

    def keys(self, target: _typing.Any) -> list[_types.Key]:
        raise NotImplementedError

    def order(self, keys: list[_types.Key]) -> list[_types.Key]:
        """Final ordering of an enumerated key list."""
        return keys

    def blank(self, target: _typing.Any) -> _typing.Any:
        """Empty plain container that materialize() fills in."""
        raise NotImplementedError

    def assign(self, container: _typing.Any, key: _types.Key, value: _typing.Any) -> None:
        raise NotImplementedError

    def discard(self, container: _typing.Any, key: _types.Key) -> None:
        """Drop key from a blank container (only records start non-empty)."""
        del container, key

    def __repr__(self) -> str:
        return f"<{self.kind} adapter>"


class MappingAdapter(TargetAdapter):
    kind = "mapping"

    def has(self, target: _abc.Mapping[_typing.Any, _typing.Any], key: _types.Key) -> bool:
        return key in target

    def get(self, target: _abc.Mapping[_typing.Any, _typing.Any], key: _types.Key) -> _typing.Any:
        # Containment first: subscripting a defaultdict would insert the key
        if key not in target:
            return _types.MISSING
        return target[key]

    def keys(self, target: _abc.Mapping[_typing.Any, _typing.Any]) -> list[_types.Key]:
        return list(target)

    def blank(self, target: _typing.Any) -> dict[_typing.Any, _typing.Any]:
        return {}

    def assign(self, container: dict[_typing.Any, _typing.Any], key: _types.Key, value: _typing.Any) -> None:
        container[key] = value


class SequenceAdapter(TargetAdapter):
    kind = "sequence"

    def has(self, target: _abc.Sequence[_typing.Any], key: _types.Key) -> bool:
        return _is_index(key) and key < len(target)  # type: ignore[operator]

    def get(self, target: _abc.Sequence[_typing.Any], key: _types.Key) -> _typing.Any:
        if not self.has(target, key):
            return _types.MISSING
        return target[key]  # type: ignore[index]

    def keys(self, target: _abc.Sequence[_typing.Any]) -> list[_types.Key]:
        return list(range(len(target)))

    def order(self, keys: list[_types.Key]) -> list[_types.Key]:
        return sorted(keys)  # type: ignore[type-var]

    def blank(self, target: _typing.Any) -> list[_typing.Any]:
        return []

    def assign(self, container: list[_typing.Any], key: _types.Key, value: _typing.Any) -> None:
        # Keys arrive in index order
        container.append(value)


class RecordAdapter(TargetAdapter):
    kind = "record"
    supports_accessors = True

    def has(self, target: _typing.Any, key: _types.Key) -> bool:
        if not isinstance(key, str):
            return False
        # Static lookup: never runs a property getter
        return _inspect.getattr_static(target, key, _types.MISSING) is not _types.MISSING

    def get(self, target: _typing.Any, key: _types.Key) -> _typing.Any:
        if not isinstance(key, str):
            return _types.MISSING
        try:
            return getattr(target, key)
        except AttributeError:
            return _types.MISSING

    def keys(self, target: _typing.Any) -> list[_types.Key]:
        names: list[_types.Key] = list(getattr(target, "__dict__", {}))
        if _dataclasses.is_dataclass(target):
            # Slotted dataclasses carry no __dict__
            for field in _dataclasses.fields(target):
                if field.name not in names and self.has(target, field.name):
                    names.append(field.name)
        return names

    def blank(self, target: _typing.Any) -> _typing.Any:
        return _copy.copy(target)

    def assign(self, container: _typing.Any, key: _types.Key, value: _typing.Any) -> None:
        namespace = getattr(container, "__dict__", None)
        if namespace is not None:
            namespace[key] = value
        else:
            object.__setattr__(container, key, value)  # type: ignore[arg-type]

    def discard(self, container: _typing.Any, key: _types.Key) -> None:
        namespace = getattr(container, "__dict__", None)
        if namespace is not None:
            namespace.pop(key, None)
            return
        try:
            object.__delattr__(container, key)  # type: ignore[arg-type]
        except AttributeError:
            pass


MAPPING = MappingAdapter()
SEQUENCE = SequenceAdapter()
RECORD = RecordAdapter()


def adapter_for(value: _typing.Any) -> TargetAdapter | None:
    """
    Return the adapter for a compound value, or None for a leaf.

    Example:
        >>> adapter_for({"a": 1}).kind
        'mapping'
        >>> adapter_for("text") is None
        True
    """
    if isinstance(value, _abc.Mapping):
        return MAPPING
    if isinstance(value, _abc.Sequence) and not isinstance(value, _TEXT_TYPES):
        return SEQUENCE
    if _is_record(value):
        return RECORD
    return None


def path_segment(key: _types.Key) -> str | None:
    """
    Render a key as one dotted-path segment.

    Strings are used as-is and non-negative ints (sequence indices) are
    rendered with str(). Any other key is not path-addressable and
    returns None, which keeps it out of composed diffs.
    """
    if isinstance(key, str):
        return key
    if _is_index(key):
        return str(key)
    return None


def _is_index(key: object) -> bool:
    return isinstance(key, int) and not isinstance(key, bool) and key >= 0


def _is_record(value: object) -> bool:
    if isinstance(value, _LEAF_TYPES):
        return False
    if _dataclasses.is_dataclass(value):
        return True
    return hasattr(value, "__dict__")
