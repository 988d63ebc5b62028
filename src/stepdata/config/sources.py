"""Layered YAML settings source for stepdata configuration.

Configuration layers (in precedence order, highest first):
1. Environment variables (handled by pydantic-settings)
2. Project config: .stepdata/config.yaml in project root
3. User config: ~/.config/stepdata/config.yaml (or STEPDATA_CONFIG_DIR)
4. Built-in defaults: bundled config.yaml

The YAML layers are deep-merged with object_operations.merge: nested
mappings merge key by key, everything else is replaced by the higher
layer.

Environment variables:
- STEPDATA_CONFIG_DIR: Override user config directory (default: ~/.config/stepdata)
"""

import collections.abc as _abc
import logging as _logging
import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic.fields as _pydantic_fields
import pydantic_settings as _pydantic_settings
import yaml as _yaml

import stepdata.constants as constants
import stepdata.utils.object_operations as object_operations

_logger = _logging.getLogger(__name__)

# Environment variable for overriding user config directory
ENV_CONFIG_DIR = "STEPDATA_CONFIG_DIR"


class ConfigFileError(Exception):
    """Error loading or parsing a configuration file."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in config file {path}: {message}")


def load_yaml_file(path: _pathlib.Path) -> dict[str, _typing.Any] | None:
    """
    Load a YAML config file.

    Returns:
        Parsed contents, or None if the file is empty.

    Raises:
        ConfigFileError: If the file cannot be read, is malformed YAML,
            or its top level is not a mapping.
    """
    try:
        content = path.read_text(encoding="utf-8")
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
        raise ConfigFileError(path, f"config must be a YAML mapping (dict), got {type_name}")

    return parsed


class LayeredYamlSettingsSource(_pydantic_settings.PydanticBaseSettingsSource):
    """
    Settings source that merges the built-in, user and project YAML layers.

    Layers (lowest to highest precedence):
    1. Built-in defaults (src/stepdata/config/defaults/config.yaml)
    2. User config (~/.config/stepdata/config.yaml)
    3. Project config (.stepdata/config.yaml)
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
            project_root: Optional project root path for project-level config.
            user_config_path: Override path for the user config file.
            builtin_config_path: Override path for the built-in defaults.
        """
        super().__init__(settings_cls)
        self._project_root = project_root
        self._user_config_path = user_config_path
        self._builtin_config_path = builtin_config_path
        self._loaded_layers: list[tuple[str, _pathlib.Path]] = []
        self._merged = self._load_config_layers()

    def _load_config_layers(self) -> dict[str, _typing.Any]:
        merged: dict[str, _typing.Any] = {}

        # Built-in defaults are required: a missing or empty file is an
        # installation problem
        builtin_path = self._builtin_config_path or get_builtin_defaults_path()
        if not builtin_path.exists():
            raise ConfigFileError(
                builtin_path,
                "built-in defaults not found (possible installation problem)",
            )
        builtin_content = load_yaml_file(builtin_path)
        if not builtin_content:
            raise ConfigFileError(
                builtin_path,
                "built-in defaults file is empty (possible installation problem)",
            )
        object_operations.merge(merged, builtin_content)
        self._loaded_layers.append(("built-in", builtin_path))

        optional_layers: list[tuple[str, _pathlib.Path]] = [
            ("user", self._user_config_path or get_user_config_path()),
        ]
        if self._project_root is not None:
            optional_layers.append(("project", get_project_config_path(self._project_root)))

        for name, path in optional_layers:
            if not path.exists():
                continue
            content = load_yaml_file(path)
            if content:
                _logger.debug("Loaded %s config from %s", name, path)
                object_operations.merge(merged, content)
                self._loaded_layers.append((name, path))

        return merged

    def get_loaded_layers(self) -> list[tuple[str, _pathlib.Path]]:
        """
        Layers that were actually loaded.

        Returns:
            List of (layer_name, path) tuples, lowest precedence first.
        """
        return list(self._loaded_layers)

    def get_field_value(
        self,
        field: _pydantic_fields.FieldInfo,  # noqa: ARG002 - required by pydantic-settings interface
        field_name: str,
    ) -> tuple[_typing.Any, str, bool]:
        value = self._merged.get(field_name)
        if value is None:
            return None, field_name, False
        return value, field_name, isinstance(value, (_abc.Mapping, list))

    def __call__(self) -> dict[str, _typing.Any]:
        """
        Return the merged config as a plain dict for pydantic validation.

        Unknown keys are included; Settings keeps them via extra="allow".
        """
        return dict(self._merged)


def get_builtin_defaults_path() -> _pathlib.Path:
    """Path to the bundled defaults/config.yaml."""
    return _pathlib.Path(__file__).parent / "defaults" / constants.CONFIG_FILE_NAME


def get_user_config_dir() -> _pathlib.Path:
    """
    Get the user config directory.

    Respects STEPDATA_CONFIG_DIR if set, otherwise uses the XDG path.
    """
    config_dir_env = _os.environ.get(ENV_CONFIG_DIR)
    if config_dir_env:
        return _pathlib.Path(config_dir_env)
    return _pathlib.Path.home() / ".config" / constants.CONFIG_DIR_NAME


def get_user_config_path() -> _pathlib.Path:
    """Path to config.yaml in the user config directory."""
    return get_user_config_dir() / constants.CONFIG_FILE_NAME


def get_project_config_path(project_root: _pathlib.Path) -> _pathlib.Path:
    """Path to .stepdata/config.yaml within the project."""
    return project_root / constants.PROJECT_CONFIG_DIR / constants.CONFIG_FILE_NAME
