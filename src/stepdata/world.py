"""
Per-scenario world object.

A World holds the mutable state shared by the steps of one scenario plus
the read-only configuration the scenario runs against. State entries are
reachable both as mapping keys and as attributes:

    >>> world = World({"base_url": "http://localhost"}, user={"id": 7})
    >>> world.user["id"]
    7
    >>> world.token = "abc"
    >>> world["token"]
    'abc'
    >>> world.parse("config:base_url")
    'http://localhost'
"""

from __future__ import annotations

import collections.abc as _abc
import types as _types
import typing as _typing

import stepdata.parsing.parser as parser


class World(_abc.MutableMapping[str, _typing.Any]):
    """
    Mutable scenario state with attribute access and a read-only config.

    Args:
        config: Configuration for the ``config`` tag. Defaults to ``{}``.
        **state: Initial state entries.
    """

    __slots__ = ("_config", "_state")

    def __init__(
        self,
        config: _abc.Mapping[str, _typing.Any] | None = None,
        **state: _typing.Any,
    ) -> None:
        object.__setattr__(self, "_config", _types.MappingProxyType(dict(config or {})))
        object.__setattr__(self, "_state", dict(state))

    @property
    def config(self) -> _abc.Mapping[str, _typing.Any]:
        """Read-only configuration."""
        return self._config

    def parse(self, value: _typing.Any, *, max_depth: int | None = None) -> _typing.Any:
        """Parse a step argument against this world's state and config."""
        string_parser = parser.StringArgParser(self, self._config, max_depth=max_depth)
        return string_parser.parse(value)

    # =========================================================================
    # Mapping protocol
    # =========================================================================

    def __getitem__(self, key: str) -> _typing.Any:
        return self._state[key]

    def __setitem__(self, key: str, value: _typing.Any) -> None:
        self._state[key] = value

    def __delitem__(self, key: str) -> None:
        del self._state[key]

    def __iter__(self) -> _abc.Iterator[str]:
        return iter(self._state)

    def __len__(self) -> int:
        return len(self._state)

    # =========================================================================
    # Attribute access
    # =========================================================================

    def __getattr__(self, name: str) -> _typing.Any:
        # Only reached when normal lookup fails
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._state[name]
        except KeyError:
            raise AttributeError(f"'World' object has no attribute '{name}'") from None

    def __setattr__(self, name: str, value: _typing.Any) -> None:
        if name.startswith("_") or hasattr(type(self), name):
            raise AttributeError(f"'World' attribute '{name}' is read-only")
        self._state[name] = value

    def __delattr__(self, name: str) -> None:
        try:
            del self._state[name]
        except KeyError:
            raise AttributeError(f"'World' object has no attribute '{name}'") from None

    def __repr__(self) -> str:
        return f"World(config={dict(self._config)!r}, state={self._state!r})"
