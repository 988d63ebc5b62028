"""Configuration section types for stepdata settings.

- LoggingConfig: level
- ParsingConfig: max_depth

All types use `extra="allow"` so unknown keys survive validation and can
be reported by `config show` instead of being silently dropped.
"""

import typing as _typing

import pydantic as _pydantic

import stepdata.constants as constants
import stepdata.logging.console as console

# =============================================================================
# Base class with introspection
# =============================================================================


class ConfigBase(_pydantic.BaseModel):
    """Base class for all config sections."""

    model_config = _pydantic.ConfigDict(extra="allow")

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """Fields that were provided but are not in the schema."""
        return dict(self.model_extra) if self.model_extra else {}

    def has_extra_fields(self) -> bool:
        """Check if this section has any unrecognized fields."""
        return bool(self.model_extra)


# =============================================================================
# Sections
# =============================================================================


class LoggingConfig(ConfigBase):
    """
    Logging settings.

    YAML section: logging.*
    """

    level: str | int = constants.DEFAULT_LOG_LEVEL
    """Console log level: trace/debug/info/log/warn/error or 0-5."""

    @_pydantic.field_validator("level")
    @classmethod
    def _validate_level(cls, value: str | int) -> str | int:
        # Raises ValueError for unknown names, which pydantic reports
        console.parse_level(value)
        return value

    @property
    def numeric_level(self) -> int:
        """The level as a stdlib logging level."""
        return console.parse_level(self.level)


class ParsingConfig(ConfigBase):
    """
    String argument parser settings.

    YAML section: parsing.*
    """

    max_depth: int | None = _pydantic.Field(default=constants.DEFAULT_MAX_PARSE_DEPTH, ge=0)
    """Maximum nesting of tag:payload values. None = unbounded."""
