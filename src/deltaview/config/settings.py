"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with DELTAVIEW_ prefix
3. YAML config file (DELTAVIEW_CONFIG_FILE, or ./deltaview.yaml)
4. Field defaults (lowest)

Nested config uses double underscore delimiter:
  DELTAVIEW_OVERLAY__ACCESSOR_READS=true
  DELTAVIEW_OVERLAY__PRODUCTION=1

Settings are never consulted implicitly by the overlay. Load them once
and pass the options to each tree explicitly:

    settings = Settings()
    view = deltaview.wrap(snapshot, settings.overlay)
"""

import logging as _logging
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import deltaview.config.sources as sources
import deltaview.config.types as types
import deltaview.constants as constants

_logger = _logging.getLogger(__name__)

LogLevel: _typing.TypeAlias = _typing.Literal["debug", "info", "warning", "error"]


class Settings(_pydantic_settings.BaseSettings):
    """
    deltaview configuration settings.

    All settings can be overridden via environment variables with the
    DELTAVIEW_ prefix. For nested config, use double underscore:
    DELTAVIEW_OVERLAY__ACCESSOR_WRITES=true
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix=constants.ENV_PREFIX,
        env_nested_delimiter="__",  # DELTAVIEW_OVERLAY__PRODUCTION
        extra="allow",  # Preserve unknown fields so they can be reported
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[_pydantic_settings.BaseSettings],
        init_settings: _pydantic_settings.PydanticBaseSettingsSource,
        env_settings: _pydantic_settings.PydanticBaseSettingsSource,
        dotenv_settings: _pydantic_settings.PydanticBaseSettingsSource,
        file_secret_settings: _pydantic_settings.PydanticBaseSettingsSource,
    ) -> tuple[_pydantic_settings.PydanticBaseSettingsSource, ...]:
        """
        Configure settings sources with precedence:
        1. init_settings (constructor args), highest
        2. env_settings (DELTAVIEW_* env vars)
        3. dotenv_settings (only when a caller passes _env_file)
        4. yaml_settings (deltaview.yaml)
        5. (defaults via Field definitions), lowest
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            sources.YamlSettingsSource(settings_cls),
            file_secret_settings,
        )

    @classmethod
    def from_file(cls, path: _pathlib.Path | str, **kwargs: _typing.Any) -> "Settings":
        """Create Settings from an explicit YAML file.

        Values from the file are passed as constructor arguments, so they
        take precedence over environment variables. Keyword arguments
        override the file.

        Raises:
            ConfigFileError: If the file cannot be read or parsed.
        """
        data = sources.load_yaml_file(_pathlib.Path(path)) or {}
        data.update(kwargs)
        return cls(**data)

    @_pydantic.model_validator(mode="after")
    def _report_unknown_fields(self) -> "Settings":
        """Log config keys that match no known field (likely typos)."""
        unknown = dict(self.model_extra or {})
        unknown.update(self.overlay.collect_all_extra_fields("overlay"))
        for path in sorted(unknown):
            _logger.warning("Ignoring unknown deltaview config key %r", path)
        return self

    # =========================================================================
    # Nested config sections
    # =========================================================================

    overlay: types.OverlayOptions = _pydantic.Field(default_factory=types.OverlayOptions)
    """Options applied to trees created with these settings."""

    # =========================================================================
    # Flat fields
    # =========================================================================

    log_level: LogLevel = _pydantic.Field(
        default="warning",
        description="Level applied to the 'deltaview' logger by configure_logging()",
    )

    def configure_logging(self) -> None:
        """Apply log_level to the package logger. Installs no handlers."""
        _logging.getLogger("deltaview").setLevel(self.log_level.upper())
