"""
Shared pytest fixtures for deltaview tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import pytest as _pytest

import deltaview.config as config
import deltaview.constants as constants


@_pytest.fixture
def isolated_env(
    monkeypatch: _pytest.MonkeyPatch,
    tmp_path: _pathlib.Path,
) -> _pathlib.Path:
    """
    Isolate a test from DELTAVIEW_* variables and any deltaview.yaml.

    Removes every DELTAVIEW_ environment variable and switches to an empty
    working directory. Returns that directory.
    """
    for key in list(_os.environ):
        if key.startswith(constants.ENV_PREFIX):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@_pytest.fixture
def clean_settings(isolated_env: _pathlib.Path) -> config.Settings:
    """
    Settings instance isolated from environment and config files.

    This fixture ensures tests get predictable default settings.
    """
    return config.Settings()


@_pytest.fixture
def write_config(isolated_env: _pathlib.Path) -> _typing.Callable[[str], _pathlib.Path]:
    """Write deltaview.yaml into the isolated working directory."""

    def _write(content: str) -> _pathlib.Path:
        path = isolated_env / constants.DEFAULT_CONFIG_FILENAME
        path.write_text(content, encoding="utf-8")
        return path

    return _write
