"""
Handler registry for typed string arguments.

The registry maps tag names (case-insensitive) to handler functions. A
process-wide default registry holds the built-in handlers; parsers use it
unless given their own registry.
"""

from __future__ import annotations

import collections.abc as _abc
import dataclasses as _dataclasses
import logging as _logging
import threading as _threading
import typing as _typing

import stepdata.utils.caseless_map as caseless_map

_logger = _logging.getLogger(__name__)


@_dataclasses.dataclass(frozen=True)
class ParseContext:
    """
    Everything a handler may look at besides its payload.

    Attributes:
        tag: The tag as written in the input (original casing).
        value: The payload after nested resolution.
        default_value: The original, unparsed input string.
        config: Read-only configuration collection.
        state: Mutable per-scenario state collection, if any.
    """

    tag: str
    value: _typing.Any
    default_value: str
    config: _typing.Any = None
    state: _typing.Any = None


Handler: _typing.TypeAlias = _abc.Callable[[_typing.Any, ParseContext], _typing.Any]
"""Handler signature: ``handler(payload, context) -> value``."""


class HandlerRegistry:
    """
    Case-insensitive registry of tag handlers.

    Registration and lookup are guarded by a re-entrant lock, so a shared
    registry can be extended from multiple threads.
    """

    def __init__(self, handlers: _abc.Mapping[str, Handler] | None = None) -> None:
        self._lock = _threading.RLock()
        self._handlers: caseless_map.CaselessMap[Handler] = caseless_map.CaselessMap(
            handlers or {},
            silent=True,
        )

    def register(self, name: str, handler: Handler) -> HandlerRegistry:
        """
        Register (or replace) the handler for a tag.

        A name matching an existing handler, built-in or not, replaces it.

        Args:
            name: Tag name (case-insensitive).
            handler: Callable taking ``(payload, context)``.

        Returns:
            self, for chaining.

        Raises:
            TypeError: If handler is not callable.
            ValueError: If name is empty.
        """
        if not callable(handler):
            raise TypeError(f"Handler for '{name}' must be callable, got {type(handler).__name__}")
        if not name:
            raise ValueError("Handler name must be a non-empty string")

        with self._lock:
            if self._handlers.has(name):
                _logger.debug("Replacing handler for tag '%s'", name)
            self._handlers.set(name, handler)
        return self

    def unregister(self, name: str) -> bool:
        """
        Remove the handler for a tag.

        Returns:
            True if a handler was removed, False if none was registered.
        """
        with self._lock:
            return self._handlers.delete(name)

    def get(self, name: str) -> Handler | None:
        """Get the handler for a tag, or None."""
        with self._lock:
            return self._handlers.get(name)

    def has(self, name: str) -> bool:
        """Check whether a tag has a handler."""
        with self._lock:
            return self._handlers.has(name)

    def names(self) -> list[str]:
        """Registered tag names in registration order."""
        with self._lock:
            return list(self._handlers)

    def copy(self) -> HandlerRegistry:
        """Independent registry with the same handlers."""
        with self._lock:
            return HandlerRegistry(self._handlers.to_json())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def __len__(self) -> int:
        with self._lock:
            return len(self._handlers)

    def __repr__(self) -> str:
        return f"HandlerRegistry({self.names()!r})"


# Global default registry
_default_registry: HandlerRegistry | None = None
_default_lock = _threading.Lock()


def get_default_registry() -> HandlerRegistry:
    """
    Get the process-wide registry.

    Lazily created with all built-in handlers on first use, then kept for
    the life of the process.
    """
    global _default_registry
    if _default_registry is None:
        with _default_lock:
            if _default_registry is None:
                _default_registry = create_default_registry()
    return _default_registry


def create_default_registry() -> HandlerRegistry:
    """New registry with the built-in handlers registered."""
    # Import here to avoid circular imports
    import stepdata.parsing.handlers as handlers

    registry = HandlerRegistry()
    handlers.register_builtin_handlers(registry)
    return registry


def reset_default_registry() -> None:
    """
    Discard the process-wide registry.

    The next get_default_registry() call rebuilds it with only the
    built-ins. Intended for test isolation.
    """
    global _default_registry
    with _default_lock:
        _default_registry = None
