"""Custom pydantic-settings source for objtree configuration.

LayeredYamlSettingsSource loads configuration from layered YAML files and
merges them with objtree's own merge_all (arrays replace rather than
concatenate, so a higher layer's clean_keys list wins outright).

Configuration layers (in precedence order, highest first):
1. Environment variables (handled by pydantic-settings)
2. Project config: .objtree.yaml in the current directory
3. User config: ~/.config/objtree/config.yaml (or OBJTREE_CONFIG_DIR)
4. Built-in defaults: bundled defaults/config.yaml
"""

import logging as _logging
import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic.fields as _pydantic_fields
import pydantic_settings as _pydantic_settings
import yaml as _yaml

import objtree.constants as constants
import objtree.errors as errors
import objtree.tree as tree

_logger = _logging.getLogger(__name__)

_LAYER_MERGE = tree.MergeOptions(array_merge="replace")


def get_builtin_defaults_path() -> _pathlib.Path:
    """Get the path to the built-in defaults config file."""
    return _pathlib.Path(__file__).parent / "defaults" / "config.yaml"


def get_user_config_dir() -> _pathlib.Path:
    """
    Get the user config directory.

    Respects OBJTREE_CONFIG_DIR if set, otherwise uses the XDG path.
    """
    config_dir_env = _os.environ.get(constants.ENV_CONFIG_DIR)
    if config_dir_env:
        return _pathlib.Path(config_dir_env)
    return _pathlib.Path.home() / ".config" / "objtree"


def get_user_config_path() -> _pathlib.Path:
    """Get the path to the user config file."""
    return get_user_config_dir() / "config.yaml"


def get_project_config_path(project_root: _pathlib.Path) -> _pathlib.Path:
    """Get the path to the project config file under project_root."""
    return project_root / constants.PROJECT_CONFIG_NAME


def load_yaml_file(path: _pathlib.Path) -> dict[str, _typing.Any] | None:
    """
    Load a YAML config file.

    Returns:
        Parsed mapping, or None if the file is empty.

    Raises:
        ConfigFileError: If the file cannot be read, is malformed YAML,
            or its top level is not a mapping.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except PermissionError as e:
        raise errors.ConfigFileError(path, f"permission denied: {e}") from e
    except OSError as e:
        raise errors.ConfigFileError(path, f"cannot read file: {e}") from e

    try:
        parsed = _yaml.safe_load(content)
    except _yaml.YAMLError as e:
        raise errors.ConfigFileError(path, f"invalid YAML: {e}") from e

    if parsed is None:
        return None

    if not isinstance(parsed, dict):
        type_name = type(parsed).__name__
        raise errors.ConfigFileError(
            path,
            f"config must be a YAML mapping (dict), got {type_name}",
        )

    return parsed


class LayeredYamlSettingsSource(_pydantic_settings.PydanticBaseSettingsSource):
    """
    Settings source that merges layered YAML config files.

    Flow:
    1. Load each YAML file into a dict
    2. merge_all() folds them, lowest precedence first
    3. The merged dict goes to pydantic for validation
    """

    def __init__(
        self,
        settings_cls: type[_pydantic_settings.BaseSettings],
        project_root: _pathlib.Path | None = None,
        *,
        user_config_path: _pathlib.Path | None = None,
        builtin_config_path: _pathlib.Path | None = None,
    ) -> None:
        """
        Initialize the settings source.

        Args:
            settings_cls: The Settings class being populated.
            project_root: Directory holding the project config. None skips it.
            user_config_path: Override path for user config file (for testing).
            builtin_config_path: Override path for builtin defaults (for testing).
        """
        super().__init__(settings_cls)
        self._project_root = project_root
        self._user_config_path = user_config_path
        self._builtin_config_path = builtin_config_path
        # Layers actually loaded, highest precedence first
        self._loaded_layers: list[tuple[str, _pathlib.Path]] = []
        self._merged = self._load_config_layers()

    def _load_config_layers(self) -> dict[str, _typing.Any]:
        """Load and merge config files, lowest precedence first."""
        layers: list[dict[str, _typing.Any]] = []
        layer_info: list[tuple[str, _pathlib.Path]] = []

        # Built-in defaults are required; a missing file is an installation bug
        builtin_path = self._builtin_config_path or get_builtin_defaults_path()
        if not builtin_path.exists():
            raise errors.ConfigFileError(
                builtin_path,
                "built-in defaults not found (possible installation problem)",
            )
        builtin_content = load_yaml_file(builtin_path)
        if not builtin_content:
            raise errors.ConfigFileError(
                builtin_path,
                "built-in defaults file is empty (possible installation problem)",
            )
        layers.append(builtin_content)
        layer_info.append(("built-in", builtin_path))

        user_path = self._user_config_path or get_user_config_path()
        if user_path.exists():
            content = load_yaml_file(user_path)
            if content:
                layers.append(content)
                layer_info.append(("user", user_path))

        if self._project_root is not None:
            project_path = get_project_config_path(self._project_root)
            if project_path.exists():
                content = load_yaml_file(project_path)
                if content:
                    layers.append(content)
                    layer_info.append(("project", project_path))

        layer_info.reverse()
        self._loaded_layers = layer_info
        for name, path in layer_info:
            _logger.debug("Loaded %s config layer from %s", name, path)

        return tree.merge_all(*layers, options=_LAYER_MERGE)

    def get_loaded_layers(self) -> list[tuple[str, _pathlib.Path]]:
        """Layers that were loaded, as (name, path), highest precedence first."""
        return list(self._loaded_layers)

    def get_field_value(
        self,
        field: _pydantic_fields.FieldInfo,  # noqa: ARG002 - required by pydantic-settings interface
        field_name: str,
    ) -> tuple[_typing.Any, str, bool]:
        """
        Get value for a field from the merged layers.

        Returns:
            Tuple of (value, field_name, is_complex).
        """
        value = self._merged.get(field_name)
        return value, field_name, tree.is_container(value)

    def __call__(self) -> dict[str, _typing.Any]:
        """Return the merged config (unknown keys included) for validation."""
        return tree.deep_clone(self._merged)
