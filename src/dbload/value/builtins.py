"""Built-in functions for dbload value expressions.

This module registers the built-in functions with a FunctionRegistry.

Functions:
- hash: SHA-256 hex digest of one argument
- bcrypt: bcrypt hash of a password, with an optional cost
- now: current UTC time, RFC 3339
- uuid: random UUID, or a deterministic one derived from a seed
"""

import hashlib
import re
import uuid
from datetime import datetime, timezone

from dbload.value.functions import FunctionRegistry
from dbload.value.hashing import DEFAULT_COST, PasswordHasher

# RFC 3339 with second precision and a literal Z, as written for UTC
RFC3339_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Namespace for seeded UUIDs; changing it changes every seeded value
SEED_NAMESPACE = uuid.NAMESPACE_OID

# Optional sign and ASCII digits only; no underscores or other scripts
INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


def register_all_builtins(registry: FunctionRegistry) -> None:
    """Register all built-in functions with the given registry."""
    registry.register("hash", _hash)
    registry.register("bcrypt", _bcrypt)
    registry.register("now", _now)
    registry.register("uuid", _uuid)


def format_rfc3339(moment: datetime) -> str:
    """Format an aware datetime as RFC 3339 in UTC."""
    return moment.astimezone(timezone.utc).strftime(RFC3339_FORMAT)


def parse_int(text: str, what: str) -> int:
    """Parse a decimal integer argument.

    Raises:
        ValueError: If text is not an optionally signed run of ASCII digits
    """
    if not INTEGER_PATTERN.fullmatch(text):
        raise ValueError(f"{what} must be a number, got {text!r}")
    return int(text)


def _hash(args: list[str]) -> str:
    """Return the SHA-256 digest of the argument as lowercase hex."""
    if len(args) != 1:
        raise ValueError(f"hash function requires exactly one argument, got {len(args)}")
    return hashlib.sha256(args[0].encode("utf-8")).hexdigest()


def _bcrypt(args: list[str]) -> str:
    """Hash a password with bcrypt: bcrypt <password> [cost]."""
    if len(args) < 1 or len(args) > 2:
        raise ValueError(
            f"bcrypt function requires 1 or 2 arguments (password, [cost]), got {len(args)}"
        )

    cost = DEFAULT_COST
    if len(args) == 2:
        cost = parse_int(args[1], "bcrypt cost")

    # PasswordHasher rejects costs outside the algorithm's range
    return PasswordHasher(rounds=cost).hash(args[0])


def _now(args: list[str]) -> str:
    if args:
        raise ValueError(f"now function requires no arguments, got {len(args)}")
    return format_rfc3339(datetime.now(timezone.utc))


def _uuid(args: list[str]) -> str:
    """Return a random UUID, or a name-based one when given a seed.

    The same seed always yields the same UUID, so seed files can refer
    to a row's generated key from other tables.
    """
    if len(args) > 1:
        raise ValueError(f"uuid function accepts at most one argument (seed), got {len(args)}")
    if args:
        return str(uuid.uuid5(SEED_NAMESPACE, args[0]))
    return str(uuid.uuid4())
