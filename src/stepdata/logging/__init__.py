"""
Console logging for stepdata.

Library modules log through the standard library with a module-level
``_logger``; this package only adds the TRACE level and a rich console
handler for the CLI and for harnesses that want readable output.
"""

from stepdata.logging.console import (
    LEVEL_NAMES,
    TRACE,
    configure_logging,
    parse_level,
)

__all__ = ["LEVEL_NAMES", "TRACE", "configure_logging", "parse_level"]
