"""
FilteredView: the result of filter_object().

A read-only view holding only the selected keys, plus an explicit
reference to the collection it was filtered from. Mapping operations
(iteration, len, ``in``, ``[]``, equality) see only the selection;
``lookup()`` falls back to the original for anything not selected.

Example:
    >>> view = filter_object({"a": 1, "b": 2}, "a")
    >>> dict(view)
    {'a': 1}
    >>> view.lookup("b")
    2
"""

from __future__ import annotations

import collections.abc as _abc
import typing as _typing

import stepdata.utils.object_operations._access as _access


class FilteredView(_abc.Mapping[str, _typing.Any]):
    """
    Selected keys of a collection with fallback to the original.

    Args:
        selected: The selected key/value pairs (copied).
        fallback: The collection the selection was taken from.
    """

    __slots__ = ("_selected", "_fallback")

    def __init__(
        self,
        selected: _abc.Mapping[str, _typing.Any],
        fallback: _typing.Any,
    ) -> None:
        self._selected = dict(selected)
        self._fallback = fallback

    @property
    def fallback(self) -> _typing.Any:
        """The collection this view was filtered from."""
        return self._fallback

    def is_own(self, key: str) -> bool:
        """True if the key is part of the selection."""
        return key in self._selected

    def lookup(self, key: _typing.Any, default: _typing.Any = None) -> _typing.Any:
        """
        Get a value from the selection, else from the fallback.

        The fallback read is best-effort: a missing key yields ``default``.
        """
        if key in self._selected:
            return self._selected[key]
        if _access.has_key(self._fallback, key):
            return _access.access(self._fallback, key)
        return default

    def to_dict(self) -> dict[str, _typing.Any]:
        """Copy of the selected pairs."""
        return dict(self._selected)

    def __getitem__(self, key: str) -> _typing.Any:
        return self._selected[key]

    def __iter__(self) -> _typing.Iterator[str]:
        return iter(self._selected)

    def __len__(self) -> int:
        return len(self._selected)

    def __repr__(self) -> str:
        return f"FilteredView({self._selected!r})"

    def __eq__(self, other: object) -> bool:
        """Compare equal to any Mapping with the same selected content."""
        if isinstance(other, _abc.Mapping):
            return self._selected == dict(other.items())
        return NotImplemented

    def __hash__(self) -> int:
        """Not hashable."""
        raise TypeError(f"unhashable type: '{type(self).__name__}'")
