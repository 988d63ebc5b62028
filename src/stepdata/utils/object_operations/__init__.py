"""
ObjectOperations: traversal, search, filter and deep merge for loosely
typed collections.

Example:
    >>> from stepdata.utils import object_operations as ops
    >>> ops.merge({"a": {"x": 1}}, {"a": {"y": 2}})
    {'a': {'x': 1, 'y': 2}}
    >>> ops.get_property({"a": {"b": [10, 20]}}, "a['b'][1]")
    20
"""

from stepdata.utils.object_operations._access import (
    access,
    as_index,
    assign,
    has_key,
    loads_json,
)
from stepdata.utils.object_operations._core import (
    ObjectOperations,
    check_enum,
    dictionary_search,
    entries,
    filter_object,
    get_property,
    init_property,
    is_array,
    is_nested,
    is_object,
    is_own_property,
    keys,
    kvs_to_object,
    merge,
    normalize_path,
    traverse,
    values,
    zip_pairs,
)
from stepdata.utils.object_operations._filtered import FilteredView
from stepdata.utils.object_operations._types import Collection, Selector

__all__ = [
    "Collection",
    "FilteredView",
    "ObjectOperations",
    "Selector",
    "access",
    "as_index",
    "assign",
    "check_enum",
    "dictionary_search",
    "entries",
    "filter_object",
    "get_property",
    "has_key",
    "init_property",
    "is_array",
    "is_nested",
    "is_object",
    "is_own_property",
    "keys",
    "kvs_to_object",
    "loads_json",
    "merge",
    "normalize_path",
    "traverse",
    "values",
    "zip_pairs",
]
