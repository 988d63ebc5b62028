"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with STEPDATA_ prefix
3. Layered YAML config files:
   - Project config: .stepdata/config.yaml (highest)
   - User config: ~/.config/stepdata/config.yaml
   - Built-in defaults: bundled defaults/config.yaml (lowest)

Nested config uses double underscore delimiter:
  STEPDATA_LOGGING__LEVEL=debug
  STEPDATA_PARSING__MAX_DEPTH=16
"""

import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import stepdata.config.sources as sources
import stepdata.config.types as types
import stepdata.constants as constants

_PROJECT_MARKERS = (constants.PROJECT_CONFIG_DIR, "pyproject.toml", "setup.cfg", ".git")


def find_project_root(start_path: _pathlib.Path | None = None) -> _pathlib.Path:
    """
    Find the project root directory.

    Walks up from ``start_path`` to the first directory containing a
    ``.stepdata`` directory or a project marker (pyproject.toml,
    setup.cfg, .git). Falls back to ``start_path`` itself.

    Args:
        start_path: Starting path for search. Defaults to cwd.
    """
    if start_path is None:
        start_path = _pathlib.Path.cwd()

    start = start_path.resolve()
    current = start
    while True:
        for marker in _PROJECT_MARKERS:
            if (current / marker).exists():
                return current
        if current == current.parent:
            return start
        current = current.parent


class Settings(_pydantic_settings.BaseSettings):
    """
    stepdata configuration settings.

    All settings can be overridden via environment variables with STEPDATA_ prefix.
    For nested config, use double underscore: STEPDATA_LOGGING__LEVEL=debug

    Config precedence (highest to lowest):
    1. Constructor arguments
    2. Environment variables (STEPDATA_*)
    3. Project config (.stepdata/config.yaml)
    4. User config (~/.config/stepdata/config.yaml)
    5. Built-in defaults
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="STEPDATA_",
        env_nested_delimiter="__",  # STEPDATA_LOGGING__LEVEL
        extra="allow",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[_pydantic_settings.BaseSettings],
        init_settings: _pydantic_settings.PydanticBaseSettingsSource,
        env_settings: _pydantic_settings.PydanticBaseSettingsSource,
        dotenv_settings: _pydantic_settings.PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: _pydantic_settings.PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[_pydantic_settings.PydanticBaseSettingsSource, ...]:
        """
        Configure settings sources with precedence:
        1. init_settings (constructor args), highest
        2. env_settings (STEPDATA_* env vars)
        3. YAML layers
        4. Field defaults, lowest
        """
        return (
            init_settings,
            env_settings,
            sources.LayeredYamlSettingsSource(settings_cls, find_project_root()),
        )

    # =========================================================================
    # Config version (for future migrations)
    # =========================================================================

    version: int = _pydantic.Field(default=1, description="Config schema version")

    # =========================================================================
    # Nested config sections
    # =========================================================================

    logging: types.LoggingConfig = _pydantic.Field(default_factory=types.LoggingConfig)
    """Console logging settings."""

    parsing: types.ParsingConfig = _pydantic.Field(default_factory=types.ParsingConfig)
    """String argument parser settings."""

    world: dict[str, _typing.Any] = _pydantic.Field(default_factory=dict)
    """Configuration collection read by the ``config`` tag."""

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """
        Unknown keys at every level, as dotted paths.

        Example:
            {"parsing.max_dept": 3, "loging": {...}}
        """
        result: dict[str, _typing.Any] = dict(self.model_extra or {})
        for section_name in ("logging", "parsing"):
            section = getattr(self, section_name)
            for key, value in section.get_extra_fields().items():
                result[f"{section_name}.{key}"] = value
        return result
