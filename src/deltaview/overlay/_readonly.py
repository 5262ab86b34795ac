"""
Read-only wrappers for collections.

These wrappers give a view of a mutable container that refuses every
mutation with TypeError. Nested containers are wrapped on access, so
the whole structure is guarded. Wrapping a snapshot before tracking it
proves that the overlay never writes to its target:

    >>> view = deltaview.wrap(read_only({"a": {"b": 1}}))
    >>> view["a"]["b"] = 2   # recorded by the overlay, target untouched

ReadOnlyMapping wraps mappings, ReadOnlySequence wraps lists.
"""

from __future__ import annotations

import collections.abc as _abc
import typing as _typing


class ReadOnlyMapping(_abc.Mapping[_typing.Any, _typing.Any]):
    """
    Read-only view of a mapping.

    Example:
        >>> guarded = ReadOnlyMapping({"a": [1, 2]})
        >>> guarded["a"][0]
        1
        >>> guarded["a"] = 3
        Traceback (most recent call last):
        TypeError: 'ReadOnlyMapping' object is read-only
    """

    __slots__ = ("_data",)

    def __init__(self, data: _abc.Mapping[_typing.Any, _typing.Any]) -> None:
        """
        Wrap a mapping (by reference, never copied).
        """
        self._data = data

    def __getitem__(self, key: _typing.Any) -> _typing.Any:
        """Get a value, guarding nested containers."""
        return read_only(self._data[key])

    def __iter__(self) -> _typing.Iterator[_typing.Any]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __setitem__(self, key: _typing.Any, value: _typing.Any) -> None:
        raise TypeError(f"{type(self).__name__!r} object is read-only")

    def __delitem__(self, key: _typing.Any) -> None:
        raise TypeError(f"{type(self).__name__!r} object is read-only")

    def __repr__(self) -> str:
        return f"ReadOnlyMapping({self._data!r})"

    def __eq__(self, other: object) -> bool:
        """Compare equal to any Mapping with same content."""
        if isinstance(other, _abc.Mapping):
            return dict(self) == dict(other)
        return NotImplemented

    def __hash__(self) -> int:
        """Not hashable (values may be mutable)."""
        raise TypeError(f"unhashable type: '{type(self).__name__}'")


class ReadOnlySequence(_abc.Sequence[_typing.Any]):
    """
    Read-only view of a list.

    Example:
        >>> guarded = ReadOnlySequence([{"a": 1}])
        >>> guarded[0]["a"]
        1
        >>> guarded.append(2)
        Traceback (most recent call last):
        TypeError: 'ReadOnlySequence' object is read-only
    """

    __slots__ = ("_data",)

    def __init__(self, data: _abc.Sequence[_typing.Any]) -> None:
        """
        Wrap a sequence (by reference, never copied).
        """
        self._data = data

    @_typing.overload
    def __getitem__(self, index: int) -> _typing.Any: ...

    @_typing.overload
    def __getitem__(self, index: slice) -> ReadOnlySequence: ...

    def __getitem__(self, index: int | slice) -> _typing.Any:
        """Get an item or slice, guarding nested containers."""
        value = self._data[index]
        if isinstance(index, slice):
            return ReadOnlySequence(value)
        return read_only(value)

    def __len__(self) -> int:
        return len(self._data)

    def __setitem__(self, index: _typing.Any, value: _typing.Any) -> None:
        raise TypeError(f"{type(self).__name__!r} object is read-only")

    def __delitem__(self, index: _typing.Any) -> None:
        raise TypeError(f"{type(self).__name__!r} object is read-only")

    def append(self, value: _typing.Any) -> None:
        raise TypeError(f"{type(self).__name__!r} object is read-only")

    def __repr__(self) -> str:
        return f"ReadOnlySequence({self._data!r})"

    def __eq__(self, other: object) -> bool:
        """Compare equal to any Sequence with same content (except strings)."""
        if isinstance(other, (str, bytes, bytearray)):
            return NotImplemented
        if isinstance(other, _abc.Sequence):
            return list(self) == list(other)
        return NotImplemented

    def __hash__(self) -> int:
        """Not hashable (values may be mutable)."""
        raise TypeError(f"unhashable type: '{type(self).__name__}'")


def read_only(value: _typing.Any) -> _typing.Any:
    """
    Wrap mutable containers in read-only views.

    - Mapping → ReadOnlyMapping
    - Sequence → ReadOnlySequence (except str/bytes/tuple)
    - Already read-only values and other types are returned as-is

    Example:
        >>> read_only({"a": [1, 2]})
        ReadOnlyMapping({'a': [1, 2]})
        >>> read_only("string")
        'string'
    """
    if isinstance(value, (ReadOnlyMapping, ReadOnlySequence)):
        return value
    if isinstance(value, _abc.Mapping):
        return ReadOnlyMapping(value)
    # Tuple is already immutable, str/bytes are not containers
    if isinstance(value, _abc.Sequence) and not isinstance(value, (str, bytes, bytearray, tuple)):
        return ReadOnlySequence(value)
    return value
