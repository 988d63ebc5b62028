"""
CLI module for stepdata.

Provides the command-line interface using Click.
"""

from stepdata.cli.main import cli, main

__all__ = ["main", "cli"]
