"""
Built-in tag handlers.

| tag                     | result                                         |
|-------------------------|------------------------------------------------|
| arr, array, list        | JSON-decoded payload                           |
| bool, boolean           | True iff payload contains true/yes/y/1         |
| config                  | path lookup in the config collection           |
| this, state             | path lookup in the state collection            |
| float, num, number      | numeric coercion                               |
| int, integer            | numeric coercion rounded half up               |
| json, object            | JSON-decoded payload                           |
| nil, null, undefined    | None                                           |

JSON decoding errors propagate: a tag that asks for structured data
expects well-formed data.
"""

from __future__ import annotations

import collections.abc as _abc
import math as _math
import re as _re
import typing as _typing

import stepdata.parsing.registry as registry
import stepdata.utils.object_operations as object_operations
import stepdata.utils.resolver as resolver

_TRUTHY = _re.compile(r"true|yes|y|1", _re.IGNORECASE)

_PREFIXED_INTEGER = _re.compile(r"^0[xob][0-9a-f]+$", _re.IGNORECASE)


# =============================================================================
# Coercion helpers
# =============================================================================


def to_number(value: _typing.Any) -> int | float:
    """
    Coerce a value to a number the way a loosely typed runtime would.

    - Blank strings and None become 0
    - Booleans become 0/1
    - Decimal, exponent, and 0x/0o/0b strings are parsed
    - Anything else becomes NaN

    Integral decimal strings stay ints ("3" -> 3, "3.0" -> 3.0).
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if not isinstance(value, str):
        return _math.nan

    text = value.strip()
    if not text:
        return 0
    if not text.isascii():
        return _math.nan

    if "_" not in text:
        try:
            return int(text)
        except ValueError:
            pass

    if _PREFIXED_INTEGER.match(text):
        try:
            return int(text, 0)
        except ValueError:
            return _math.nan

    # Digit separators and the inf/nan spellings are not numeric; "Infinity" is
    unsigned = text.lstrip("+-")
    if "_" in text or (unsigned.lower() in ("inf", "infinity", "nan") and unsigned != "Infinity"):
        return _math.nan

    try:
        return float(text)
    except ValueError:
        return _math.nan


def round_half_up(number: int | float) -> int | float:
    """Round to the nearest integer, halves toward +infinity. NaN/inf pass through."""
    if isinstance(number, int):
        return number
    if _math.isnan(number) or _math.isinf(number):
        return number
    floor = _math.floor(number)
    return floor + 1 if number - floor >= 0.5 else floor


def decode_json(value: _typing.Any) -> _typing.Any:
    """
    Decode a JSON payload.

    Payloads that nested resolution already produced as a mapping or a
    list are returned unchanged.

    Raises:
        json.JSONDecodeError: If a string payload is not valid JSON.
    """
    if isinstance(value, (_abc.Mapping, list)):
        return value
    return object_operations.loads_json(value)


# =============================================================================
# Handlers
# =============================================================================


def handle_array(value: _typing.Any, context: registry.ParseContext) -> _typing.Any:
    return decode_json(value)


def handle_bool(value: _typing.Any, context: registry.ParseContext) -> bool:
    return _TRUTHY.search(str(value)) is not None


def handle_config(value: _typing.Any, context: registry.ParseContext) -> _typing.Any:
    return resolver.resolve(context.config, value)


def handle_state(value: _typing.Any, context: registry.ParseContext) -> _typing.Any:
    # Without a state collection the input is returned unparsed
    if context.state is None:
        return context.default_value
    return resolver.resolve(context.state, value)


def handle_number(value: _typing.Any, context: registry.ParseContext) -> int | float:
    return to_number(value)


def handle_int(value: _typing.Any, context: registry.ParseContext) -> int | float:
    return round_half_up(to_number(value))


def handle_json(value: _typing.Any, context: registry.ParseContext) -> _typing.Any:
    return decode_json(value)


def handle_none(value: _typing.Any, context: registry.ParseContext) -> None:
    return None


BUILTIN_HANDLERS: dict[str, registry.Handler] = {
    "arr": handle_array,
    "array": handle_array,
    "list": handle_array,
    "bool": handle_bool,
    "boolean": handle_bool,
    "config": handle_config,
    "this": handle_state,
    "state": handle_state,
    "float": handle_number,
    "num": handle_number,
    "number": handle_number,
    "int": handle_int,
    "integer": handle_int,
    "json": handle_json,
    "object": handle_json,
    "nil": handle_none,
    "null": handle_none,
    "undefined": handle_none,
}
"""Built-in tag → handler table, in registration order."""


def register_builtin_handlers(target: registry.HandlerRegistry) -> registry.HandlerRegistry:
    """Register every built-in handler on ``target``."""
    for name, handler in BUILTIN_HANDLERS.items():
        target.register(name, handler)
    return target

