"""
Typed string argument parsing.

Step arguments arrive as strings; a ``tag:payload`` string is turned into
a typed value by the handler registered for its tag.

Usage:
    from stepdata.parsing import StringArgParser, extend

    parser = StringArgParser(world)
    parser.parse("int:42")            # 42
    parser.parse("state:user.name")   # world["user"]["name"]

    extend("upper", lambda value, _ctx: value.upper())
    parser.parse("upper:abc")         # "ABC"
"""

from stepdata.parsing.handlers import (
    BUILTIN_HANDLERS,
    decode_json,
    register_builtin_handlers,
    round_half_up,
    to_number,
)
from stepdata.parsing.parser import (
    DEFAULT_VALUE_TAG,
    FORMAT,
    ParseDepthError,
    StringArgParser,
    extend,
    is_tagged,
    parse,
)
from stepdata.parsing.registry import (
    Handler,
    HandlerRegistry,
    ParseContext,
    create_default_registry,
    get_default_registry,
    reset_default_registry,
)

__all__ = [
    # Parser
    "DEFAULT_VALUE_TAG",
    "FORMAT",
    "ParseDepthError",
    "StringArgParser",
    "extend",
    "is_tagged",
    "parse",
    # Registry
    "Handler",
    "HandlerRegistry",
    "ParseContext",
    "create_default_registry",
    "get_default_registry",
    "reset_default_registry",
    # Built-ins
    "BUILTIN_HANDLERS",
    "decode_json",
    "register_builtin_handlers",
    "round_half_up",
    "to_number",
]
