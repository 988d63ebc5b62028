"""
Typed string argument parser.

Turns ``tag:payload`` strings into values. The tag selects a handler from
a HandlerRegistry (case-insensitive); the payload is handed to it. A
payload that is itself ``tag:payload`` is resolved first, so tags nest:

    json:config:fixtures.user   # look up a config value, then decode it

Strings that are not tagged, and tags without a handler, come back
unchanged.

Example:
    >>> parse("int:3.7")
    4
    >>> parse("bool:yes")
    True
    >>> parse("config:db.port", config={"db": {"port": 5432}})
    5432
    >>> parse("plain text")
    'plain text'

Note:
    Nested resolution has no depth limit unless ``max_depth`` is given.
    Without one, a pathological input such as a long ``a:a:a:...`` chain
    is bounded only by Python's recursion limit.
"""

from __future__ import annotations

import logging as _logging
import re as _re
import typing as _typing

import stepdata.constants as constants
import stepdata.parsing.registry as handler_registry
import stepdata.utils.object_operations as object_operations

_logger = _logging.getLogger(__name__)

FORMAT = _re.compile(r"(?P<type>\w+):(?P<value>.*)", _re.DOTALL | _re.ASCII)
"""Tagged-string grammar: word characters, a colon, then anything (newlines included)."""

# Tag used when extraction yields no tag; never registered, so parsing
# falls back to the original input
DEFAULT_VALUE_TAG = "defaultValue"


class ParseDepthError(ValueError):
    """Raised when nested tags exceed the parser's max_depth."""

    def __init__(self, value: str, max_depth: int) -> None:
        self.value = value
        self.max_depth = max_depth
        super().__init__(f"Nested tags in {value!r} exceed max_depth={max_depth}")


def is_tagged(value: _typing.Any) -> bool:
    """True if ``value`` is a string of the form ``tag:payload``."""
    return isinstance(value, str) and FORMAT.fullmatch(value) is not None


class StringArgParser:
    """
    Parser bound to one state/config context and one registry.

    Args:
        state: Mutable per-scenario state read by the ``state``/``this`` tags.
        config: Read-only configuration read by the ``config`` tag. Defaults
            to the state's ``config`` entry or attribute, else ``{}``.
        registry: Handler registry. Defaults to the process-wide registry.
        max_depth: Maximum nesting of tagged payloads (None = unbounded).
    """

    def __init__(
        self,
        state: _typing.Any = None,
        config: _typing.Any = None,
        *,
        registry: handler_registry.HandlerRegistry | None = None,
        max_depth: int | None = constants.DEFAULT_MAX_PARSE_DEPTH,
    ) -> None:
        if config is None:
            config = object_operations.access(state, "config")
        self._state = state
        self._config = config if config is not None else {}
        self._registry = registry
        self._max_depth = max_depth

    @property
    def state(self) -> _typing.Any:
        return self._state

    @property
    def config(self) -> _typing.Any:
        return self._config

    @property
    def registry(self) -> handler_registry.HandlerRegistry:
        """The registry this parser dispatches through."""
        if self._registry is not None:
            return self._registry
        return handler_registry.get_default_registry()

    def extend(self, name: str, handler: handler_registry.Handler) -> StringArgParser:
        """
        Register a handler on this parser's registry.

        With the default registry the handler becomes visible to every
        parser in the process.

        Returns:
            self, for chaining.
        """
        self.registry.register(name, handler)
        return self

    def parse(self, value: _typing.Any) -> _typing.Any:
        """
        Resolve a possibly tagged string.

        Returns:
            The handler result; the input unchanged when it is not a tagged
            string or its tag has no handler.

        Raises:
            json.JSONDecodeError: From json/object/arr/array/list tags with
                malformed payloads.
            ParseDepthError: If max_depth is set and exceeded.
        """
        return self._parse(value, 0)

    def _parse(self, value: _typing.Any, depth: int) -> _typing.Any:
        default_value = value

        if not isinstance(value, str):
            return default_value

        match = FORMAT.fullmatch(value)
        if match is None:
            return default_value

        if self._max_depth is not None and depth > self._max_depth:
            raise ParseDepthError(value, self._max_depth)

        tag = match.group("type") or DEFAULT_VALUE_TAG
        payload: _typing.Any = match.group("value")
        _logger.debug("Resolved arg (%s) => %s", tag, payload)

        if is_tagged(payload):
            _logger.log(constants.TRACE, 'Payload "%s" is a nested parse target', payload)
            payload = self._parse(payload, depth + 1)

        handler = self.registry.get(tag)
        if handler is None:
            _logger.log(constants.TRACE, "No handler for tag '%s'; returning input unchanged", tag)
            return default_value

        context = handler_registry.ParseContext(
            tag=tag,
            value=payload,
            default_value=default_value,
            config=self._config,
            state=self._state,
        )
        return handler(payload, context)


def parse(
    value: _typing.Any,
    config: _typing.Any = None,
    state: _typing.Any = None,
    *,
    registry: handler_registry.HandlerRegistry | None = None,
    max_depth: int | None = constants.DEFAULT_MAX_PARSE_DEPTH,
) -> _typing.Any:
    """
    Parse a tagged string with a one-off parser.

    Args:
        value: Input; non-strings are returned unchanged.
        config: Configuration for the ``config`` tag.
        state: State for the ``state``/``this`` tags.
        registry: Handler registry (default: process-wide).
        max_depth: Maximum nesting of tagged payloads.
    """
    parser = StringArgParser(state, config, registry=registry, max_depth=max_depth)
    return parser.parse(value)


def extend(
    name: str,
    handler: handler_registry.Handler,
    *,
    registry: handler_registry.HandlerRegistry | None = None,
) -> handler_registry.HandlerRegistry:
    """
    Register a handler for a tag (case-insensitive).

    Registering a built-in name replaces the built-in for every parser
    using the same registry.

    Returns:
        The registry the handler was added to.
    """
    target = registry if registry is not None else handler_registry.get_default_registry()
    return target.register(name, handler)

