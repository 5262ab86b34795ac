"""Configuration type definitions for deltaview.

This module defines the Pydantic models used to represent configuration
structures. They are nested within the Settings class, and
OverlayOptions is also passed directly to ``wrap()``.

- OverlayOptions: accessor_reads, accessor_writes, production

Design decision: types use `extra="allow"` to preserve unknown fields.
Settings logs them at load time so typos in config files do not go
unnoticed. Use `get_extra_fields()` to inspect unknown fields.
"""

import typing as _typing

import pydantic as _pydantic

import deltaview.constants as constants

# =============================================================================
# Base class with introspection
# =============================================================================


def _join(prefix: str, name: str) -> str:
    return f"{prefix}{constants.PATH_SEPARATOR}{name}" if prefix else name


class ConfigBase(_pydantic.BaseModel):
    """
    Base class for deltaview config models.

    Unknown keys are kept (`extra="allow"`) instead of being dropped, so
    that a misspelt option in a YAML file can be reported.
    """

    model_config = _pydantic.ConfigDict(extra="allow")

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """Unknown keys given to this model, mapped to their values."""
        return dict(self.model_extra or {})

    def has_extra_fields(self) -> bool:
        return bool(self.model_extra)

    def collect_all_extra_fields(self, prefix: str = "") -> dict[str, _typing.Any]:
        """
        Unknown keys of this model and every nested ConfigBase, flattened.

        Example:
            >>> OverlayOptions.model_validate({"prodution": 1}).collect_all_extra_fields("overlay")
            {'overlay.prodution': 1}
        """
        result = {_join(prefix, key): value for key, value in self.get_extra_fields().items()}
        for field_name in type(self).model_fields:
            nested = getattr(self, field_name, None)
            if isinstance(nested, ConfigBase):
                result.update(nested.collect_all_extra_fields(_join(prefix, field_name)))
        return result


# =============================================================================
# Overlay Settings
# =============================================================================


class OverlayOptions(ConfigBase):
    """
    Behaviour toggles for one tracked tree.

    Passed to ``wrap()`` and shared by every node of the resulting tree.
    Frozen so that a tree's behaviour cannot change while it is in use.

    YAML section: overlay.*
    """

    model_config = _pydantic.ConfigDict(frozen=True)

    accessor_reads: bool = False
    """Run property getters of record targets against the tracked view."""

    accessor_writes: bool = False
    """Run property setters of record targets against the tracked view."""

    production: bool = False
    """Skip the nested tracked-view check on reads and writes."""
