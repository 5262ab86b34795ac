"""Tests for configuration type definitions.

Tests for the Pydantic models in deltaview.config.types.
"""

import pydantic as _pydantic
import pytest as _pytest

import deltaview.config.types as types

# =============================================================================
# ConfigBase Introspection Tests
# =============================================================================


class TestConfigBaseIntrospection:
    """Tests for ConfigBase introspection methods (extra field auditing)."""

    def test_get_extra_fields_empty(self) -> None:
        """Should return empty dict when no extra fields."""
        options = types.OverlayOptions()
        assert options.get_extra_fields() == {}
        assert not options.has_extra_fields()

    def test_get_extra_fields_with_extras(self) -> None:
        """Should return dict of extra fields when present."""
        options = types.OverlayOptions.model_validate(
            {
                "production": True,
                "acessor_reads": True,  # typo
            }
        )
        assert options.get_extra_fields() == {"acessor_reads": True}
        assert options.has_extra_fields()

    def test_collect_all_extra_fields_with_prefix(self) -> None:
        """Should use prefix for dotted paths."""
        options = types.OverlayOptions.model_validate({"typo": "value"})

        assert options.collect_all_extra_fields(prefix="overlay") == {"overlay.typo": "value"}

    def test_collect_all_extra_fields_nested(self) -> None:
        """Should collect extra fields from nested ConfigBase objects."""

        class Level2(types.ConfigBase):
            name: str = "default"

        class Level1(types.ConfigBase):
            level2: Level2 = _pydantic.Field(default_factory=Level2)

        class Root(types.ConfigBase):
            level1: Level1 = _pydantic.Field(default_factory=Level1)
            overlay: types.OverlayOptions = _pydantic.Field(default_factory=types.OverlayOptions)

        config = Root.model_validate(
            {
                "root_extra": "r",
                "level1": {
                    "level1_extra": "l1",
                    "level2": {"name": "custom", "level2_extra": "l2"},
                },
                "overlay": {"prodution": True},
            }
        )

        assert config.collect_all_extra_fields() == {
            "root_extra": "r",
            "level1.level1_extra": "l1",
            "level1.level2.level2_extra": "l2",
            "overlay.prodution": True,
        }


# =============================================================================
# OverlayOptions Tests
# =============================================================================


class TestOverlayOptions:
    """Tests for OverlayOptions."""

    def test_default_values(self) -> None:
        """Every toggle is off by default."""
        options = types.OverlayOptions()

        assert options.accessor_reads is False
        assert options.accessor_writes is False
        assert options.production is False

    def test_from_dict(self) -> None:
        """Should load from a YAML-style dict."""
        options = types.OverlayOptions.model_validate(
            {"accessor_reads": True, "accessor_writes": "yes", "production": 1}
        )

        assert options.accessor_reads is True
        assert options.accessor_writes is True
        assert options.production is True

    def test_invalid_bool(self) -> None:
        """Non-boolean strings are rejected."""
        with _pytest.raises(_pydantic.ValidationError):
            types.OverlayOptions.model_validate({"production": "sometimes"})

    def test_frozen(self) -> None:
        """Options cannot change after creation."""
        options = types.OverlayOptions()

        with _pytest.raises(_pydantic.ValidationError):
            options.production = True  # type: ignore[misc]

    def test_hashable_and_comparable(self) -> None:
        """Frozen options compare by value and can be hashed."""
        assert types.OverlayOptions(production=True) == types.OverlayOptions(production=True)
        assert hash(types.OverlayOptions()) == hash(types.OverlayOptions())

    def test_model_copy_update(self) -> None:
        """Derived options are created with model_copy."""
        base = types.OverlayOptions(accessor_reads=True)
        derived = base.model_copy(update={"production": True})

        assert derived.accessor_reads is True
        assert derived.production is True
        assert base.production is False
