"""
AccessorResolver: cached lookup of computed fields on record targets.

A record's class (or any class in its MRO) may define a property for an
attribute name. When accessor reads or writes are enabled, the overlay
runs the property's getter/setter with the tracked view as ``self``, so
the attribute reads and writes the property performs are tracked too.

Plain functions found on the class are resolved as well: a method read
through a view is bound to the view, never to the wrapped target.

Results are cached per (type, name) for the life of one tracked tree.
The resolver never mutates anything it inspects.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import types as _types_module
import typing as _typing

import deltaview.overlay._types as _types


@_dataclasses.dataclass(frozen=True, slots=True)
class Accessor:
    """Resolved class-level definition for one attribute name."""

    fget: _typing.Callable[[_typing.Any], _typing.Any] | None = None
    fset: _typing.Callable[[_typing.Any, _typing.Any], None] | None = None
    method: _types_module.FunctionType | None = None


class AccessorResolver:
    """
    Resolve and cache class-level accessors for record targets.

    Example:
        >>> class Box:
        ...     @property
        ...     def area(self):
        ...         return self.w * self.h
        >>> resolver = AccessorResolver()
        >>> resolver.reader(Box(), "area") is Box.area.fget
        True
        >>> resolver.writer(Box(), "area") is None
        True
    """

    def __init__(self) -> None:
        self._cache: dict[tuple[type, str], Accessor | None] = {}

    def __len__(self) -> int:
        """Number of cached (type, name) lookups."""
        return len(self._cache)

    def resolve(self, obj: _typing.Any, key: _types.Key) -> Accessor | None:
        """
        Return the accessor for ``key`` on ``obj``'s class, or None.

        The first class in the MRO that defines ``key`` wins, mirroring
        normal attribute lookup.
        """
        if not isinstance(key, str):
            return None

        cache_key = (type(obj), key)
        try:
            return self._cache[cache_key]
        except KeyError:
            pass

        accessor: Accessor | None = None
        for klass in type(obj).__mro__:
            attr = klass.__dict__.get(key, _types.MISSING)
            if attr is _types.MISSING:
                continue
            if isinstance(attr, property):
                accessor = Accessor(fget=attr.fget, fset=attr.fset)
            elif isinstance(attr, _types_module.FunctionType):
                accessor = Accessor(method=attr)
            break

        self._cache[cache_key] = accessor
        return accessor

    def reader(
        self,
        obj: _typing.Any,
        key: _types.Key,
    ) -> _typing.Callable[[_typing.Any], _typing.Any] | None:
        """Property getter for ``key``, if any."""
        accessor = self.resolve(obj, key)
        return accessor.fget if accessor is not None else None

    def writer(
        self,
        obj: _typing.Any,
        key: _types.Key,
    ) -> _typing.Callable[[_typing.Any, _typing.Any], None] | None:
        """Property setter for ``key``, if any."""
        accessor = self.resolve(obj, key)
        return accessor.fset if accessor is not None else None

    def method(self, obj: _typing.Any, key: _types.Key) -> _types_module.FunctionType | None:
        """Plain function defined on the class for ``key``, if any."""
        accessor = self.resolve(obj, key)
        return accessor.method if accessor is not None else None

    def clear(self) -> None:
        """Drop all cached lookups."""
        self._cache.clear()
