"""
Structural predicates, the best-effort accessor, and strict JSON decoding.

Values are inspected by shape (Mapping / Sequence / plain object), never
by concrete class. Reads never raise on a missing key.
"""

from __future__ import annotations

import collections.abc as _abc
import json as _json
import typing as _typing

_STRING_TYPES = (str, bytes, bytearray)


def is_object(item: _typing.Any) -> bool:
    """True for any Mapping."""
    return isinstance(item, _abc.Mapping)


def is_array(item: _typing.Any) -> bool:
    """True for any Sequence that is not a string."""
    return isinstance(item, _abc.Sequence) and not isinstance(item, _STRING_TYPES)


def is_nested(item: _typing.Any) -> bool:
    """True for values that are structurally an object or an array."""
    return is_object(item) or is_array(item)


def as_index(key: _typing.Any) -> int | None:
    """
    Interpret a key as a non-negative sequence index.

    Accepts ints and digit-only strings; anything else yields None.
    """
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key if key >= 0 else None
    if isinstance(key, str) and key.isdigit():
        return int(key)
    return None


def own_keys(obj: _typing.Any) -> list[_typing.Any]:
    """
    Own enumerable keys of a collection, in enumeration order.

    Mappings yield their keys, sequences their stringified indices,
    plain objects their public instance attributes.
    """
    if obj is None:
        return []
    if isinstance(obj, _abc.Mapping):
        return list(obj.keys())
    if isinstance(obj, _abc.Sequence):
        return [str(index) for index in range(len(obj))]
    if hasattr(obj, "__dict__"):
        return [key for key in vars(obj) if not key.startswith("_")]
    return []


def has_key(obj: _typing.Any, key: _typing.Any) -> bool:
    """Key / in-bounds index / public attribute presence check."""
    if obj is None:
        return False
    if isinstance(obj, _abc.Mapping):
        try:
            if key in obj:
                return True
        except TypeError:
            return False
        return isinstance(key, str) and key.isdigit() and int(key) in obj
    if isinstance(obj, _abc.Sequence):
        index = as_index(key)
        return index is not None and index < len(obj)
    return isinstance(key, str) and not key.startswith("_") and hasattr(obj, key)


def access(target: _typing.Any, key: _typing.Any) -> _typing.Any:
    """
    Read ``target[key]`` the way a loosely typed lookup would.

    - Mappings: the key itself, then its integer form for digit strings
    - Sequences (strings included): in-bounds non-negative indices
    - Other objects: public attributes

    Returns:
        The value, or None when the target is None or the key is missing.
    """
    if target is None or key is None:
        return None

    if isinstance(target, _abc.Mapping):
        try:
            if key in target:
                return target[key]
        except TypeError:
            return None
        if isinstance(key, str) and key.isdigit() and int(key) in target:
            return target[int(key)]
        return None

    if isinstance(target, _abc.Sequence):
        index = as_index(key)
        if index is None or index >= len(target):
            return None
        return target[index]

    if isinstance(key, str) and not key.startswith("_"):
        return getattr(target, key, None)

    return None


def assign(target: _typing.Any, key: _typing.Any, value: _typing.Any) -> None:
    """
    Write ``target[key] = value``.

    Sequence targets take digit-string keys as indices; writing at or past
    the end appends, padding any gap with None.

    Raises:
        TypeError: If the target cannot be written to.
    """
    if isinstance(target, _abc.MutableMapping):
        target[key] = value
        return

    if isinstance(target, _abc.MutableSequence):
        index = as_index(key)
        if index is None:
            raise TypeError(f"Cannot assign key {key!r} on a sequence")
        if index < len(target):
            target[index] = value
            return
        target.extend([None] * (index - len(target)))
        target.append(value)
        return

    if isinstance(target, (_abc.Mapping, _abc.Sequence)):
        raise TypeError(f"Cannot assign into immutable {type(target).__name__}")

    if not isinstance(key, str):
        raise TypeError(f"Attribute name must be a string, got {type(key).__name__}")
    setattr(target, key, value)


def accepts_keys(target: _typing.Any, keys: _abc.Iterable[_typing.Any]) -> bool:
    """
    True if assign() can write every key in ``keys`` into ``target``.

    Mutable mappings take any key, mutable sequences only index-like keys.
    Immutable containers take none.
    """
    if isinstance(target, _abc.MutableMapping):
        return True
    if isinstance(target, _abc.MutableSequence):
        return all(as_index(key) is not None for key in keys)
    return False


def loads_json(text: str | bytes | bytearray) -> _typing.Any:
    """
    Decode strict JSON.

    ``NaN``, ``Infinity`` and ``-Infinity`` are rejected like any other
    invalid token.

    Raises:
        json.JSONDecodeError: If ``text`` is not valid JSON.
    """
    return _json.loads(text, parse_constant=_reject_constant)


def _reject_constant(name: str) -> _typing.NoReturn:
    raise _json.JSONDecodeError(f"Invalid JSON constant {name!r}", name, 0)
