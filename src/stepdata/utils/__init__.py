"""
Data-access utilities for stepdata.

General-purpose collection helpers used by the parser and by harness code.
"""

import stepdata.utils.caseless_map as caseless_map
import stepdata.utils.object_operations as object_operations
import stepdata.utils.resolver as resolver
from stepdata.utils.caseless_map import CaselessMap
from stepdata.utils.object_operations import FilteredView, ObjectOperations
from stepdata.utils.resolver import Resolve, resolve

__all__ = [
    "CaselessMap",
    "FilteredView",
    "ObjectOperations",
    "Resolve",
    "caseless_map",
    "object_operations",
    "resolve",
    "resolver",
]
