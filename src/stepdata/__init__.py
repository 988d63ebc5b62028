"""
stepdata - typed step arguments and structured data lookups.

Helpers for BDD-style test harnesses: a case-insensitive ordered map,
collection utilities, a dot/bracket path resolver, and a parser that
turns ``tag:payload`` step arguments into typed values.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("stepdata")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)

from stepdata.logging import configure_logging  # noqa: E402
from stepdata.parsing import StringArgParser, extend, parse  # noqa: E402
from stepdata.utils import CaselessMap, ObjectOperations, Resolve, resolve  # noqa: E402
from stepdata.world import World  # noqa: E402

__all__ = [
    "__version__",
    "__version_info__",
    "CaselessMap",
    "ObjectOperations",
    "Resolve",
    "StringArgParser",
    "World",
    "configure_logging",
    "extend",
    "parse",
    "resolve",
]
