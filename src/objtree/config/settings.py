"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with OBJTREE_ prefix
3. .env file (if OBJTREE_ENV_FILE points at one)
4. Layered YAML config files:
   - Project config: ./.objtree.yaml (highest)
   - User config: ~/.config/objtree/config.yaml
   - Built-in defaults: bundled defaults/config.yaml (lowest)

Nested config uses double underscore delimiter:
  OBJTREE_OUTPUT__FORMAT=yaml
  OBJTREE_CLEAN__EMPTY_STRINGS=false
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import objtree.config.sources as sources
import objtree.config.types as types
import objtree.constants as constants


def _get_env_file() -> str | None:
    """Determine which .env file to load.

    Only an explicit OBJTREE_ENV_FILE is honoured. If it is set but the
    file does not exist, nothing is loaded (no silent fallback).
    """
    if env_file := _os.environ.get(constants.ENV_ENV_FILE):
        if _pathlib.Path(env_file).exists():
            return env_file
    return None


class Settings(_pydantic_settings.BaseSettings):
    """
    objtree configuration settings.

    All settings can be overridden via environment variables with OBJTREE_ prefix.
    For nested config, use double underscore: OBJTREE_OUTPUT__INDENT=4

    Config precedence (highest to lowest):
    1. Constructor arguments
    2. Environment variables (OBJTREE_*)
    3. .env file
    4. Project config (./.objtree.yaml)
    5. User config (~/.config/objtree/config.yaml)
    6. Built-in defaults
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix=constants.ENV_PREFIX,
        env_file=_get_env_file(),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="allow",
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
        1. init_settings: constructor args (highest)
        2. env_settings (OBJTREE_* env vars)
        3. dotenv_settings (.env file)
        4. layered YAML config
        5. defaults via Field definitions (lowest)
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            sources.LayeredYamlSettingsSource(settings_cls, _pathlib.Path.cwd()),
            file_secret_settings,
        )

    @classmethod
    def construct_without_dotenv(cls, **kwargs: _typing.Any) -> "Settings":
        """Create Settings without loading any .env file (test isolation)."""
        return cls(_env_file=None, **kwargs)  # type: ignore[call-arg]

    version: int = _pydantic.Field(default=1, description="Config schema version")

    log_level: _typing.Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = (
        constants.DEFAULT_LOG_LEVEL
    )
    """Level of the CLI's root logger."""

    output: types.OutputConfig = _pydantic.Field(default_factory=types.OutputConfig)
    """Output formatting."""

    clean: types.CleanConfig = _pydantic.Field(default_factory=types.CleanConfig)
    """Default rules for the clean command."""

    merge: types.MergeConfig = _pydantic.Field(default_factory=types.MergeConfig)
    """Default strategy for the merge command."""

    @_pydantic.field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: _typing.Any) -> _typing.Any:
        """Accept log levels in any case."""
        return value.upper() if isinstance(value, str) else value

    def collect_unknown_keys(self) -> dict[str, _typing.Any]:
        """Return unknown config keys as {dotted.path: value}, for auditing typos."""
        result = dict(self.model_extra or {})
        for field_name in self.__class__.model_fields:
            value = getattr(self, field_name)
            if isinstance(value, types.ConfigBase):
                result.update(value.collect_all_extra_fields(field_name))
        return result
