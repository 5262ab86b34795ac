"""Tests for accessor resolution and accessor-aware tracking."""

import typing as _typing

import pytest as _pytest

import deltaview
import deltaview.overlay as overlay


class Rect:
    """Record with a read-only and a read-write property."""

    def __init__(self, w: int, h: int) -> None:
        self.w = w
        self.h = h

    @property
    def area(self) -> int:
        return self.w * self.h

    @property
    def size(self) -> tuple[int, int]:
        return (self.w, self.h)

    @size.setter
    def size(self, value: tuple[int, int]) -> None:
        self.w, self.h = value

    def scale(self, factor: int) -> None:
        self.w *= factor
        self.h *= factor


class Square(Rect):
    """Subclass inheriting every accessor."""

    def __init__(self, side: int) -> None:
        super().__init__(side, side)


class TestAccessorResolver:
    """Tests for AccessorResolver lookups and caching."""

    def test_property_getter_and_setter(self) -> None:
        """Properties resolve to their fget and fset."""
        resolver = overlay.AccessorResolver()
        target = Rect(1, 2)

        assert resolver.reader(target, "size") is Rect.size.fget
        assert resolver.writer(target, "size") is Rect.size.fset

    def test_read_only_property_has_no_writer(self) -> None:
        """A property without setter has no writer."""
        resolver = overlay.AccessorResolver()

        assert resolver.reader(Rect(1, 2), "area") is Rect.area.fget
        assert resolver.writer(Rect(1, 2), "area") is None

    def test_method(self) -> None:
        """Plain functions resolve as methods, not properties."""
        resolver = overlay.AccessorResolver()

        assert resolver.method(Rect(1, 2), "scale") is Rect.scale
        assert resolver.reader(Rect(1, 2), "scale") is None

    def test_inherited_through_mro(self) -> None:
        """Accessors defined on a base class are found."""
        resolver = overlay.AccessorResolver()

        assert resolver.reader(Square(3), "area") is Rect.area.fget

    def test_instance_attribute_is_not_an_accessor(self) -> None:
        """Plain data attributes resolve to None."""
        resolver = overlay.AccessorResolver()

        assert resolver.resolve(Rect(1, 2), "w") is None

    def test_non_string_key(self) -> None:
        """Non-string keys are never accessors and are not cached."""
        resolver = overlay.AccessorResolver()

        assert resolver.resolve(Rect(1, 2), 0) is None
        assert len(resolver) == 0

    def test_cache_per_type_and_name(self) -> None:
        """Lookups are cached once per (type, name)."""
        resolver = overlay.AccessorResolver()

        resolver.resolve(Rect(1, 2), "area")
        resolver.resolve(Rect(3, 4), "area")
        resolver.resolve(Rect(3, 4), "w")
        resolver.resolve(Square(1), "area")

        assert len(resolver) == 3

    def test_clear(self) -> None:
        """clear() empties the cache."""
        resolver = overlay.AccessorResolver()
        resolver.resolve(Rect(1, 2), "area")

        resolver.clear()

        assert len(resolver) == 0

    def test_accessor_is_frozen(self) -> None:
        """Resolved accessors are immutable."""
        accessor = overlay.AccessorResolver().resolve(Rect(1, 2), "area")
        assert accessor is not None

        with _pytest.raises(AttributeError):
            accessor.fget = None  # type: ignore[misc]


class TestAccessorReads:
    """Property getters run against the view when enabled."""

    def test_disabled_reads_target_property(self) -> None:
        """Without accessor reads, a property reflects the target only."""
        view = deltaview.wrap(Rect(2, 3))
        view.w = 10

        assert view.area == 6

    def test_enabled_reads_effective_values(self) -> None:
        """With accessor reads, a property sees pending writes."""
        view = deltaview.wrap(Rect(2, 3), deltaview.OverlayOptions(accessor_reads=True))
        view.w = 10

        assert view.area == 30

    def test_enabled_inherited_property(self) -> None:
        """Inherited properties run against the view too."""
        view = deltaview.wrap(Square(2), deltaview.OverlayOptions(accessor_reads=True))
        view.h = 5

        assert view.area == 10

    def test_pending_write_beats_getter(self) -> None:
        """A recorded value for the property name wins over its getter."""
        view = deltaview.wrap(Rect(2, 3), deltaview.OverlayOptions(accessor_reads=True))
        view.area = 100

        assert view.area == 100

    def test_nested_record(self) -> None:
        """Options reach records below the root."""
        options = deltaview.OverlayOptions(accessor_reads=True)
        view = deltaview.wrap({"r": Rect(1, 1)}, options)
        view["r"].h = 7

        assert view["r"].area == 7


class TestAccessorWrites:
    """Property setters run against the view when enabled."""

    def test_disabled_records_property_name(self) -> None:
        """Without accessor writes, the property name itself is recorded."""
        view = deltaview.wrap(Rect(2, 3))
        view.size = (4, 5)

        assert deltaview.tracker(view).get_changes() == {"set": {"size": (4, 5)}}

    def test_enabled_records_setter_effects(self) -> None:
        """With accessor writes, the setter's own writes are recorded."""
        target = Rect(2, 3)
        view = deltaview.wrap(target, deltaview.OverlayOptions(accessor_writes=True))
        view.size = (4, 5)

        assert deltaview.tracker(view).get_changes() == {"set": {"w": 4, "h": 5}}
        assert (target.w, target.h) == (2, 3)

    def test_enabled_without_setter_records_name(self) -> None:
        """A property with no setter falls back to recording the name."""
        view = deltaview.wrap(Rect(2, 3), deltaview.OverlayOptions(accessor_writes=True))
        view.area = 1

        assert deltaview.tracker(view).get_changes() == {"set": {"area": 1}}

    def test_mappings_never_use_accessors(self) -> None:
        """Accessor options have no effect on mapping keys."""
        options = deltaview.OverlayOptions(accessor_reads=True, accessor_writes=True)
        view = deltaview.wrap({"keys": 1}, options)
        view["keys"] = 2

        assert view["keys"] == 2
        assert deltaview.tracker(view).get_changes() == {"set": {"keys": 2}}


class TestMethods:
    """Methods always act on the view."""

    @_pytest.mark.parametrize(
        "options",
        [deltaview.OverlayOptions(), deltaview.OverlayOptions(accessor_reads=True)],
    )
    def test_method_changes_are_tracked(self, options: _typing.Any) -> None:
        """A mutating method records its writes whatever the options."""
        target = Rect(2, 3)
        view = deltaview.wrap(target, options)

        view.scale(2)

        assert deltaview.tracker(view).get_changes() == {"set": {"w": 4, "h": 6}}
        assert (target.w, target.h) == (2, 3)
