"""
Shared fixtures for overlay tests.
"""

import copy as _copy
import typing as _typing

import pytest as _pytest

import deltaview


@_pytest.fixture
def nested_target() -> dict[str, _typing.Any]:
    """Two nested branches, used by most composition tests."""
    return {"a": {"b": 1}, "c": {"d": {"e": 2}}}


@_pytest.fixture
def nested_view(nested_target: dict[str, _typing.Any]) -> deltaview.TrackedMapping:
    """Tracked view over nested_target."""
    return deltaview.wrap(nested_target)


@_pytest.fixture
def guarded_target(nested_target: dict[str, _typing.Any]) -> _typing.Any:
    """nested_target behind a wrapper that raises on any mutation."""
    return deltaview.read_only(nested_target)


@_pytest.fixture
def pristine(nested_target: dict[str, _typing.Any]) -> dict[str, _typing.Any]:
    """Deep copy of nested_target taken before any test action."""
    return _copy.deepcopy(nested_target)
