"""
Resolve a value from a dot/bracket accessor path.

Grammar:
    A path is split on whitespace and dots into tokens. Each token is
    ``attribute``, ``attribute[index]`` or ``[index]``, where the index may
    be quoted ('x' or "x") and chained (``[0][1]``, ``['a']['b']``).

Every step is best-effort: a None target or a missing key resolves to
None rather than raising. String values that hold JSON are decoded at
each step, so a path can walk into JSON stored inside the structure.

Example:
    >>> resolve({"a": {"b": [1, 2, 3]}}, "a.b[1]")
    2
    >>> resolve({"env": '{"region": "eu"}'}, "env.region")
    'eu'
    >>> resolve(None, "a.b") is None
    True
"""

from __future__ import annotations

import collections.abc as _abc
import functools as _functools
import logging as _logging
import re as _re
import typing as _typing

import stepdata.constants as constants
import stepdata.utils.object_operations as object_operations

_logger = _logging.getLogger(__name__)

_TOKEN_SEPARATOR = _re.compile(r"[\s.]")

_PATTERN_PARTS = _re.compile(
    r"""^(?P<attribute>[^\[\]]+)?(?:\[['"]?(?P<index>.+?)['"]?\])?$""",
    _re.DOTALL,
)

_INDEX_SEPARATOR = _re.compile(r"""[\[\].'"]""")


class Resolve:
    """
    Single-step path resolver.

    An instance holds the current target and the remaining tokens; each
    step derives ``attribute``/``index`` from the first token and hands the
    rest to the next step, reusing the same instance.

    Args:
        target: Object or sequence to traverse.
        patterns: Path string, or a sequence of already-split tokens.
    """

    def __init__(
        self,
        target: _typing.Any,
        patterns: str | _abc.Sequence[_typing.Any] | None,
    ) -> None:
        self.target: _typing.Any = None
        self._attribute: str | None = None
        self._index: str | None = None
        self._pattern: str | None = None
        self._patterns: list[str] = []
        self._rest: list[str] = []
        self.reset(target, patterns)

    @staticmethod
    def filter_patterns(patterns: _typing.Any) -> list[str]:
        """
        Normalize the path into a list of non-empty tokens.

        Strings are split on whitespace and dots; sequences keep only their
        non-empty string items; anything else yields no tokens.
        """
        if isinstance(patterns, str):
            return [token for token in _TOKEN_SEPARATOR.split(patterns) if token and token != "."]

        if isinstance(patterns, _abc.Sequence):
            return [token for token in patterns if isinstance(token, str) and token]

        return []

    def reset(
        self,
        target: _typing.Any,
        patterns: str | _abc.Sequence[_typing.Any] | None,
    ) -> None:
        """Point this instance at a new target and token list."""
        self.target = target
        self._patterns = self.filter_patterns(patterns)

        self._pattern = self._patterns[0] if self._patterns else None
        self._rest = self._patterns[1:]

        parts = self.pattern_parts
        self._attribute = parts["attribute"]
        self._index = parts["index"]

    @property
    def pattern_parts(self) -> dict[str, str | None]:
        """The current token split into attribute name and index expression."""
        match = _PATTERN_PARTS.match(self._pattern or "")
        if match is None:
            return {"attribute": None, "index": None}
        return {"attribute": match.group("attribute"), "index": match.group("index")}

    @property
    def complete(self) -> bool:
        """True when no tokens remain after the current one."""
        return not self._rest

    @staticmethod
    def reduce_index(target: _typing.Any, index: _typing.Any) -> _typing.Any:
        """Index one level into ``target``."""
        return object_operations.access(target, index)

    def resolve_index(self, target: _typing.Any, index_pattern: str | None = None) -> _typing.Any:
        """
        Apply a (possibly chained) index expression to ``target``.

        ``"0][1"`` and ``"a']['b"`` are split into successive indices.
        """
        if not index_pattern:
            return target

        indices = [index for index in _INDEX_SEPARATOR.split(index_pattern) if index]
        return _functools.reduce(self.reduce_index, indices, target)

    @staticmethod
    def try_parse_json(result: _typing.Any) -> _typing.Any:
        """Decode a JSON string; non-strings and invalid JSON pass through."""
        if not isinstance(result, str):
            return result

        try:
            return object_operations.loads_json(result)
        except ValueError:
            return result

    @property
    def property_value(self) -> _typing.Any:
        """The target read by the current attribute (or the target itself)."""
        if self._attribute is not None:
            result = object_operations.access(self.target, self._attribute)
        else:
            result = self.target
        return self.try_parse_json(result)

    @property
    def property_at_index(self) -> _typing.Any:
        """property_value with the current index expression applied."""
        if self._index:
            return self.resolve_index(self.property_value, self._index)
        return self.property_value

    @property
    def result(self) -> _typing.Any:
        """Final result of the traversal from this step onward."""
        value = self.property_at_index
        _logger.log(
            constants.TRACE,
            "Resolved token %r => %s",
            self._pattern,
            type(value).__name__,
        )
        if self.complete:
            return value
        return Resolve.resolve(value, self._rest, self)

    @classmethod
    def resolve(
        cls,
        target: _typing.Any,
        patterns: str | _abc.Sequence[_typing.Any] | None,
        this_arg: Resolve | None = None,
    ) -> _typing.Any:
        """
        Retrieve the value at ``patterns`` inside ``target``.

        Args:
            target: Object or sequence to traverse. None is returned as-is.
            patterns: Path string or token sequence.
            this_arg: Existing instance to reuse for this step.

        Returns:
            The resolved value, or None when any step is missing.
        """
        if target is None:
            return target

        if isinstance(this_arg, Resolve):
            this_arg.reset(target, patterns)
        else:
            this_arg = cls(target, patterns)

        return this_arg.result


def resolve(
    target: _typing.Any,
    patterns: str | _abc.Sequence[_typing.Any] | None,
) -> _typing.Any:
    """Retrieve a value from a dot/bracket path. See Resolve.resolve()."""
    return Resolve.resolve(target, patterns)
