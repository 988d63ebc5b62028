"""
Type aliases for object operations.

- Collection: a dictionary-like or array-like value
- Selector: an exact key (matched case-insensitively) or a compiled pattern
"""

from __future__ import annotations

import collections.abc as _abc
import re as _re
import typing as _typing

Collection: _typing.TypeAlias = _abc.Mapping[_typing.Any, _typing.Any] | _abc.Sequence[_typing.Any]

Selector: _typing.TypeAlias = str | _re.Pattern[str]
