"""
CaselessMap: an insertion-ordered mapping with case-insensitive keys.

Keys are looked up by their lowercased form, but iteration always yields
the original casing in original insertion order. Two structures are kept
in sync on every mutation:

- Backing list: ``[(original_key, value), ...]`` in insertion order
- Index: ``{folded_key: position}`` into the backing list

Overwriting an existing key keeps its position but records the newly
supplied casing. Deleting shifts every later position down by one so the
index never has gaps.

Example:
    >>> m = CaselessMap([("Content-Type", "json"), ("Accept", "*/*")])
    >>> m["content-type"]
    'json'
    >>> m.set("CONTENT-TYPE", "xml")
    CaselessMap([('CONTENT-TYPE', 'xml'), ('Accept', '*/*')])
    >>> list(m)
    ['CONTENT-TYPE', 'Accept']
"""

from __future__ import annotations

import collections.abc as _abc
import logging as _logging
import typing as _typing

import stepdata.constants as constants

_logger = _logging.getLogger(__name__)

V = _typing.TypeVar("V")


class _MissingType:
    """Sentinel type for "no default supplied"."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<MISSING>"


_MISSING: _typing.Any = _MissingType()


def fold(key: str) -> str:
    """Return the lookup form of a key."""
    return key.lower()


class CaselessMap(_abc.MutableMapping[str, V], _typing.Generic[V]):
    """
    Ordered mapping with case-insensitive string keys.

    Args:
        entries: Initial pairs, or a mapping. Later duplicates (by folded
            key) overwrite the earlier value in place.
        silent: Suppress trace logging of index shifts.

    Note:
        ``delete()`` is a no-op returning False for absent keys, while
        ``del m[key]`` follows the mapping protocol and raises KeyError.
    """

    __slots__ = ("_entries", "_index", "_silent")

    def __init__(
        self,
        entries: _abc.Iterable[tuple[str, V]] | _abc.Mapping[str, V] = (),
        *,
        silent: bool = False,
    ) -> None:
        self._entries: list[tuple[str, V]] = []
        self._index: dict[str, int] = {}
        self._silent = silent

        if isinstance(entries, _abc.Mapping):
            entries = entries.items()

        for key, value in entries:
            self.set(key, value)

    # =========================================================================
    # Core operations
    # =========================================================================

    def set(self, key: str, value: V) -> CaselessMap[V]:
        """
        Insert or overwrite a value.

        An existing key keeps its position; the displayed key becomes the
        casing supplied here.

        Returns:
            self, for chaining.
        """
        folded = fold(key)
        index = self._index.get(folded)

        if index is None:
            self._index[folded] = len(self._entries)
            self._entries.append((key, value))
        else:
            self._trace(
                'Key "%s" already exists as "%s". Replacing at position %d',
                key,
                self._entries[index][0],
                index,
            )
            self._entries[index] = (key, value)

        return self

    def get(self, key: str, default: _typing.Any = _MISSING) -> _typing.Any:
        """
        Get the value for a key, case-insensitively.

        Returns:
            The stored value, ``default`` when absent and supplied,
            otherwise None.
        """
        index = self._index.get(fold(key))
        if index is None:
            return None if default is _MISSING else default
        return self._entries[index][1]

    def has(self, key: str) -> bool:
        """Case-insensitive membership test."""
        return fold(key) in self._index

    def delete(self, key: str) -> bool:
        """
        Remove a key if present.

        Every entry after the removed one shifts down by one position.

        Returns:
            True if an entry was removed, False if the key was absent.
        """
        folded = fold(key)
        index = self._index.pop(folded, None)
        if index is None:
            return False

        self._trace(
            "Shifting entries %d..%d down by one",
            index + 1,
            len(self._entries) - 1,
        )
        del self._entries[index]
        for position in range(index, len(self._entries)):
            self._index[fold(self._entries[position][0])] = position

        return True

    def clear(self) -> None:
        """Remove all entries."""
        self._entries = []
        self._index = {}

    # =========================================================================
    # Ordered views
    # =========================================================================

    def entries(self) -> _typing.Iterator[tuple[str, V]]:
        """Iterate (key, value) pairs in insertion order, original casing."""
        return iter(list(self._entries))

    def for_each(self, callback: _abc.Callable[[V, str, CaselessMap[V]], _typing.Any]) -> None:
        """Call ``callback(value, key, self)`` for every entry in order."""
        for key, value in self.entries():
            callback(value, key, self)

    @property
    def length(self) -> int:
        """Number of entries."""
        return len(self._entries)

    def to_array(self) -> list[tuple[str, V]]:
        """
        Return the backing list of pairs.

        The list is the live backing store; callers must not mutate it.
        """
        return self._entries

    def to_json(self) -> dict[str, V]:
        """Project the entries into a plain dict (original casing)."""
        return {key: value for key, value in self._entries}

    @classmethod
    def from_object(cls, obj: _typing.Any) -> CaselessMap[_typing.Any]:
        """
        Build a map from a mapping or an object's instance attributes.

        Entries are seeded in the object's own enumeration order.
        """
        if isinstance(obj, _abc.Mapping):
            return cls(obj.items())
        return cls(vars(obj).items())

    # =========================================================================
    # MutableMapping protocol
    # =========================================================================

    def __getitem__(self, key: str) -> V:
        index = self._index.get(fold(key))
        if index is None:
            raise KeyError(key)
        return self._entries[index][1]

    def __setitem__(self, key: str, value: V) -> None:
        self.set(key, value)

    def __delitem__(self, key: str) -> None:
        if not self.delete(key):
            raise KeyError(key)

    def __iter__(self) -> _typing.Iterator[str]:
        return iter([key for key, _ in self._entries])

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        return self.has(key)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._entries!r})"

    def __eq__(self, other: object) -> bool:
        """Compare equal to another CaselessMap with the same pairs in order,
        or to any Mapping with the same (case-sensitive) content."""
        if isinstance(other, CaselessMap):
            return self._entries == other._entries
        if isinstance(other, _abc.Mapping):
            return self.to_json() == dict(other.items())
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def _trace(self, message: str, *args: _typing.Any) -> None:
        if not self._silent:
            _logger.log(constants.TRACE, message, *args)
