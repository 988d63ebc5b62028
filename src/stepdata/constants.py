"""
Shared constants for stepdata.

This module provides a single source of truth for default values
that are used across multiple modules.
"""

# Logging defaults
TRACE = 5
"""Numeric level for step-by-step traversal logs (below logging.DEBUG)."""

DEFAULT_LOG_LEVEL = "info"
"""Default log level for the stepdata console handler."""

# Parsing defaults
DEFAULT_MAX_PARSE_DEPTH: int | None = None
"""Default nesting limit for tag:payload resolution (None = unbounded)."""

# Config file locations
CONFIG_DIR_NAME = "stepdata"
"""Directory name under ~/.config for the user config file."""

PROJECT_CONFIG_DIR = ".stepdata"
"""Directory name under the project root for the project config file."""

CONFIG_FILE_NAME = "config.yaml"
"""File name used for every config layer."""
