"""
Generic operations over dictionary-like and array-like collections.

The module-level functions are the static forms; ObjectOperations wraps a
single collection and exposes the instance forms. Collections are
inspected structurally (Mapping / Sequence / plain object) throughout.

Two error policies apply:

- Lookups (get_property, dictionary_search, the fallback branch of
  check_enum) are best-effort and return None or the supplied default.
- Explicit decoding (the JSON step in traverse) lets json.JSONDecodeError
  propagate.

Note:
    merge() does not track visited containers. A source that contains
    itself recurses until Python's recursion limit is hit.
"""

from __future__ import annotations

import collections.abc as _abc
import enum as _enum
import logging as _logging
import re as _re
import typing as _typing

import stepdata.constants as constants
import stepdata.utils.caseless_map as caseless_map
import stepdata.utils.object_operations._access as _access
import stepdata.utils.object_operations._filtered as _filtered
import stepdata.utils.object_operations._types as _types

_logger = _logging.getLogger(__name__)

# Bracketed segments: ['name'] / ["name"] capture group 1, [3] capture group 2
_BRACKET_SEGMENT = _re.compile(r"""\[["'](\w+)["']\]|\[(\d+)\]""")

# Compact traverse segment: attribute, attribute['index'], attribute[index]
_TRAVERSE_SEGMENT = _re.compile(
    r"""^(?P<attribute>[^\[]+)?(?:\['?"?(?P<index>[^"'\]]+)'?"?\])?$"""
)

_MISSING: _typing.Any = object()

is_object = _access.is_object
is_array = _access.is_array
is_nested = _access.is_nested


# =============================================================================
# Enumeration
# =============================================================================


def keys(obj: _typing.Any) -> list[_typing.Any]:
    """Own enumerable keys (stringified indices for sequences)."""
    return _access.own_keys(obj)


def values(obj: _typing.Any) -> list[_typing.Any]:
    """Own values, in key order."""
    return [_access.access(obj, key) for key in _access.own_keys(obj)]


def entries(obj: _typing.Any) -> list[tuple[_typing.Any, _typing.Any]]:
    """Own (key, value) pairs, in key order."""
    return [(key, _access.access(obj, key)) for key in _access.own_keys(obj)]


def is_own_property(obj: _typing.Any, key: _typing.Any) -> bool:
    """True if ``key`` is an own key, in-bounds index, or instance attribute."""
    if isinstance(obj, (_abc.Mapping, _abc.Sequence)):
        return _access.has_key(obj, key)
    return isinstance(key, str) and hasattr(obj, "__dict__") and key in vars(obj)


def init_property(obj: _typing.Any, prop: _typing.Any, default: _typing.Any = None) -> _typing.Any:
    """
    Set ``prop`` to ``default`` if it is not already present.

    Mutable mappings and plain objects are written to; sequences and
    read-only mappings are left untouched.

    Returns:
        The (possibly updated) object.
    """
    if _access.has_key(obj, prop):
        return obj

    if isinstance(obj, _abc.MutableMapping):
        obj[prop] = default
    elif not isinstance(obj, (_abc.Mapping, _abc.Sequence)) and isinstance(prop, str):
        setattr(obj, prop, default)

    return obj


# =============================================================================
# Lookup
# =============================================================================


def normalize_path(path: _typing.Any) -> str:
    """
    Canonicalize an accessor path into dot-delimited form.

    Examples:
        "a['b'].c[3]" -> "a.b.c.3"
        ".a[\"b\"]"   -> "a.b"
    """
    text = str(path)
    if text.startswith("."):
        text = text[1:]
    parts = [part for part in _BRACKET_SEGMENT.split(text) if part]
    return ".".join(parts).replace("..", ".")


def get_property(obj: _typing.Any, path: _typing.Any) -> _typing.Any:
    """
    Walk a nested collection by accessor path.

    Returns:
        The value at the path, or None as soon as any step is missing.
    """
    result = obj
    for segment in normalize_path(path).split("."):
        if not segment:
            continue
        if result is None:
            return None
        result = _access.access(result, segment)
    return result


def dictionary_search(
    obj: _typing.Any,
    key: _typing.Any,
    default: _typing.Any = None,
) -> _typing.Any:
    """
    Find a value by key, index, substring, or pattern.

    Precedence (first match wins):
    1. Exact key membership
    2. Integer index into a sequence (out of bounds -> None)
    3. Linear scan: equal key, key containing the search string, or key
       matching the search pattern
    4. ``default``
    """
    is_pattern = isinstance(key, _re.Pattern)

    if not is_pattern and _access.has_key(obj, key):
        return _access.access(obj, key)

    if isinstance(key, int) and not isinstance(key, bool) and is_array(obj):
        if key < 0 or key >= len(obj):
            return None
        return obj[key]

    for entry_key, value in entries(obj):
        if key == entry_key:
            return value
        if isinstance(key, str) and key in str(entry_key):
            return value
        if is_pattern and key.search(str(entry_key)):
            return value

    return default


def filter_object(obj: _typing.Any, *selectors: _types.Selector) -> _typing.Any:
    """
    Select keys from a collection.

    String selectors match keys exactly but case-insensitively; pattern
    selectors keep every key they match.

    Returns:
        The original collection when no selectors are given, otherwise a
        FilteredView over the selected keys that falls back to ``obj``.
    """
    if not selectors:
        _logger.debug("No properties provided to filter. Returning original object")
        return obj

    _logger.debug("Filtering properties of provided object")
    mapped = caseless_map.CaselessMap(
        ((str(key), value) for key, value in entries(obj)),
        silent=True,
    )
    result: dict[str, _typing.Any] = {}

    for selector in selectors:
        if isinstance(selector, _re.Pattern):
            for key, value in mapped.entries():
                if selector.search(key):
                    _logger.log(constants.TRACE, 'Key "%s" matches %s', key, selector.pattern)
                    result[key] = value
        else:
            name = str(selector)
            if mapped.has(name):
                _logger.log(constants.TRACE, 'Filtered property "%s" found', name)
                result[name] = mapped.get(name)

    return _filtered.FilteredView(result, obj)


def check_enum(value: _typing.Any, obj: _typing.Any, default: _typing.Any = None) -> _typing.Any:
    """
    Validate ``value`` against the keys or values of ``obj``.

    ``obj`` may be a mapping, a sequence, a plain object, or an Enum class
    (member names are its keys, member values its values).

    Returns:
        ``value`` if it is a key, own key, or own value of ``obj``;
        otherwise ``default``.

    Raises:
        TypeError: If ``obj`` is None.
    """
    if obj is None:
        raise TypeError(
            'check_enum requires argument "obj" to be a collection with keys '
            f"or values of type [{type(value).__name__}]"
        )

    if isinstance(obj, type) and issubclass(obj, _enum.Enum):
        if isinstance(value, obj):
            return value
        candidates = list(obj.__members__) + [member.value for member in obj]
        return value if _contains(candidates, value) else default

    if _access.has_key(obj, value):
        return value
    if _contains(keys(obj), value) or _contains(values(obj), value):
        return value
    return default


def _contains(items: list[_typing.Any], value: _typing.Any) -> bool:
    try:
        return value in items
    except (TypeError, ValueError):
        return False


def traverse(target: _typing.Any, paths: str | _abc.Iterable[str]) -> _typing.Any:
    """
    Apply compact path segments in order, decoding JSON strings between steps.

    Each segment has the form ``attribute``, ``attribute['index']`` or
    ``attribute[index]``. After the attribute step, a string result is
    decoded with json.loads before the index step and the next segment.

    Raises:
        json.JSONDecodeError: If an intermediate string is not valid JSON.
    """
    if isinstance(paths, str):
        paths = [paths]

    result = target
    for path in paths:
        match = _TRAVERSE_SEGMENT.match(path)
        attribute = match.group("attribute") if match else None
        index = match.group("index") if match else None

        if attribute:
            result = get_property(result, attribute)
        if isinstance(result, str):
            result = _access.loads_json(result)
        if index is not None:
            result = get_property(result, index)

    return result


# =============================================================================
# Merge and zip
# =============================================================================


def merge(target: _typing.Any, *sources: _typing.Any) -> _typing.Any:
    """
    Deep-merge sources into ``target`` in place, left to right.

    For every key of a source: when both the target's value and the
    source's value are nested and the target's value can take the source's
    keys, they are merged recursively; otherwise the source value replaces
    the target's value outright. A mapping over a list, or anything over a
    tuple or read-only mapping, is therefore a replacement. Each source is
    merged completely before the next one. None and non-nested sources
    are skipped.

    Returns:
        The mutated target.
    """
    for source in sources:
        if source is None or not (is_nested(target) and is_nested(source)):
            _logger.debug(
                "Skipping merge of %s into %s",
                type(source).__name__,
                type(target).__name__,
            )
            continue

        for key, value in entries(source):
            current = _access.access(target, key)
            if (
                is_nested(current)
                and is_nested(value)
                and _access.accepts_keys(current, _access.own_keys(value))
            ):
                merge(current, value)
            else:
                _access.assign(target, key, value)

    return target


def zip_pairs(a: _abc.Iterable[_typing.Any], b: _abc.Iterable[_typing.Any]) -> list[tuple[_typing.Any, _typing.Any]]:
    """Pair items positionally, stopping at the shorter input."""
    return list(zip(a, b))


def kvs_to_object(key_value_sequence: _abc.Iterable[_typing.Any]) -> dict[_typing.Any, _typing.Any]:
    """
    Fold an alternating key/value sequence into a dict.

    Example:
        ["name", "x", "size", "3"] -> {"name": "x", "size": "3"}

    A trailing key without a value is dropped.
    """
    result: dict[_typing.Any, _typing.Any] = {}
    key: _typing.Any = _MISSING

    for item in key_value_sequence:
        if key is _MISSING:
            key = item
        else:
            result[key] = item
            key = _MISSING

    return result


# =============================================================================
# Wrapper
# =============================================================================


class ObjectOperations:
    """
    Operations bound to one collection.

    Example:
        >>> ops = ObjectOperations({"retries": 3})
        >>> ops.get("timeout", 30)
        30
        >>> ops.obj
        {'retries': 3, 'timeout': 30}
    """

    __slots__ = ("_obj",)

    get_property = staticmethod(get_property)
    check_enum = staticmethod(check_enum)
    traverse = staticmethod(traverse)
    kvs_to_object = staticmethod(kvs_to_object)
    zip_pairs = staticmethod(zip_pairs)

    def __init__(self, obj: _typing.Any) -> None:
        self._obj = obj

    @property
    def obj(self) -> _typing.Any:
        """The wrapped collection."""
        return self._obj

    def get(self, key: _typing.Any, default: _typing.Any = None) -> _typing.Any:
        """
        Read a property, initializing it with ``default`` first if absent.

        Repeated calls are idempotent once the default has been written.
        Collections that cannot be written to (sequences, read-only
        mappings) return ``default`` for an absent key.
        """
        self.init_property(key, default)
        if not _access.has_key(self._obj, key):
            return default
        return _access.access(self._obj, key)

    def has(self, key: _typing.Any) -> bool:
        """Key / index / attribute presence check."""
        return _access.has_key(self._obj, key)

    def init_property(self, prop: _typing.Any, default: _typing.Any = None) -> _typing.Any:
        """See module-level init_property()."""
        return init_property(self._obj, prop, default)

    def is_own_property(self, key: _typing.Any) -> bool:
        """See module-level is_own_property()."""
        return is_own_property(self._obj, key)

    @property
    def keys(self) -> list[_typing.Any]:
        """Own enumerable keys in enumeration order."""
        return keys(self._obj)

    @property
    def entries(self) -> list[tuple[_typing.Any, _typing.Any]]:
        """Own (key, value) pairs in enumeration order."""
        return entries(self._obj)

    @property
    def is_array(self) -> bool:
        return is_array(self._obj)

    @property
    def is_object(self) -> bool:
        return is_object(self._obj)

    @property
    def is_nested(self) -> bool:
        return is_nested(self._obj)

    def dictionary_search(self, key: _typing.Any, default: _typing.Any = None) -> _typing.Any:
        """See module-level dictionary_search()."""
        return dictionary_search(self._obj, key, default)

    def filter_object(self, *selectors: _types.Selector) -> _typing.Any:
        """See module-level filter_object()."""
        return filter_object(self._obj, *selectors)

    def merge(self, *sources: _typing.Any) -> _typing.Any:
        """See module-level merge()."""
        return merge(self._obj, *sources)

    def zip(self, other: _abc.Iterable[_typing.Any]) -> list[tuple[_typing.Any, _typing.Any]]:
        """
        Pair the wrapped collection with ``other``.

        Sequences contribute their items, everything else its keys.
        """
        own = list(self._obj) if self.is_array else keys(self._obj)
        return zip_pairs(own, other)

    def __repr__(self) -> str:
        return f"ObjectOperations({self._obj!r})"
