"""Custom pydantic-settings source for deltaview configuration.

This module provides:

- YamlSettingsSource: A pydantic-settings source that loads configuration
  from a single YAML file.

The file is located as follows (first match wins):
1. An explicit path passed to the source
2. The path in the DELTAVIEW_CONFIG_FILE environment variable
3. deltaview.yaml in the current working directory

A missing file is normal and contributes nothing. A file that exists but
cannot be read or parsed is an error.
"""

import collections.abc as _abc
import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic.fields as _pydantic_fields
import pydantic_settings as _pydantic_settings
import yaml as _yaml

import deltaview.constants as constants


class ConfigFileError(Exception):
    """Error loading or parsing a configuration file."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in config file {path}: {message}")


def get_config_path(explicit: _pathlib.Path | None = None) -> _pathlib.Path:
    """
    Resolve which config file to read.

    Args:
        explicit: Path that overrides every other lookup.

    Returns:
        Path to the config file (which may not exist).
    """
    if explicit is not None:
        return explicit
    if env_path := _os.environ.get(constants.ENV_CONFIG_FILE):
        return _pathlib.Path(env_path)
    return _pathlib.Path.cwd() / constants.DEFAULT_CONFIG_FILENAME


def load_yaml_file(path: _pathlib.Path) -> dict[str, _typing.Any] | None:
    """
    Load a YAML file and return its contents as a dict.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed YAML contents, or None if the file is empty.

    Raises:
        ConfigFileError: If the file cannot be read, is malformed YAML,
            or contains non-dict content at the top level.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except PermissionError as e:
        raise ConfigFileError(path, f"permission denied: {e}") from e
    except OSError as e:
        raise ConfigFileError(path, f"cannot read file: {e}") from e

    try:
        parsed = _yaml.safe_load(content)
    except _yaml.YAMLError as e:
        raise ConfigFileError(path, f"invalid YAML: {e}") from e

    if parsed is None:
        return None

    if not isinstance(parsed, dict):
        type_name = type(parsed).__name__
        raise ConfigFileError(
            path,
            f"config must be a YAML mapping (dict), got {type_name}",
        )

    return parsed


class YamlSettingsSource(_pydantic_settings.PydanticBaseSettingsSource):
    """
    Settings source backed by one YAML file.

    Sits below environment variables in precedence: a value from
    DELTAVIEW_* always beats the same value from the file.
    """

    def __init__(
        self,
        settings_cls: type[_pydantic_settings.BaseSettings],
        config_path: _pathlib.Path | None = None,
    ) -> None:
        """
        Initialize the settings source.

        Args:
            settings_cls: The Settings class being populated.
            config_path: Override path for the config file (for testing).
                If not provided, uses DELTAVIEW_CONFIG_FILE or the default.
        """
        super().__init__(settings_cls)
        self._path = get_config_path(config_path)
        self._data = self._load()

    @property
    def path(self) -> _pathlib.Path:
        """The config file this source reads (may not exist)."""
        return self._path

    def _load(self) -> dict[str, _typing.Any]:
        if not self._path.exists():
            return {}
        return load_yaml_file(self._path) or {}

    def get_field_value(
        self,
        field: _pydantic_fields.FieldInfo,  # noqa: ARG002 - required by pydantic-settings interface
        field_name: str,
    ) -> tuple[_typing.Any, str, bool]:
        """
        Get value for a field from the loaded file.

        Returns:
            Tuple of (value, field_name, is_complex).
            is_complex is True if the value is a dict or list.
        """
        value = self._data.get(field_name)
        return value, field_name, isinstance(value, (_abc.Mapping, list))

    def __call__(self) -> dict[str, _typing.Any]:
        """Return the file contents as a plain dict for Pydantic validation."""
        return dict(self._data)
