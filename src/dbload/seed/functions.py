"""Seed-file functions registered on top of the built-ins.

These are not part of the core function set; the seed runner registers
them before evaluating any cell, the same way an embedding application
would add its own.
"""

from datetime import datetime, timedelta, timezone

from dbload.value.builtins import format_rfc3339, parse_int
from dbload.value.functions import FunctionRegistry


def register_seed_functions(registry: FunctionRegistry) -> None:
    """Register upper and future with the given registry.

    Names the caller already registered are left alone, so an
    application can supply its own upper or future.
    """
    for name, handler in (("upper", _upper), ("future", _future)):
        if not registry.is_registered(name):
            registry.register(name, handler)


def _upper(args: list[str]) -> str:
    """Convert the argument to uppercase."""
    if len(args) != 1:
        raise ValueError(f"upper function requires exactly one argument, got {len(args)}")
    return args[0].upper()


def _future(args: list[str]) -> str:
    """Return the UTC time a number of days from now, RFC 3339."""
    if len(args) != 1:
        raise ValueError(f"future function requires exactly one argument (days), got {len(args)}")
    days = parse_int(args[0], "future days")
    return format_rfc3339(datetime.now(timezone.utc) + timedelta(days=days))
