"""Identifier generation for worklog records."""

import re
import secrets
import time

RANDOM_BITS = 16
TIMESTAMP_BITS = 40

ID_PATTERN = re.compile(r"^[0-9a-f]{4}-[0-9a-f]{10}$")


def new_id() -> str:
    """Return a new id: 16 random bits and the Unix time, as fixed-width hex.

    Example: ``"1a2b-0065f1c2d3"``. Unique in practice on one machine; the
    random prefix only guards against collisions within the same second.
    """
    rand = secrets.randbelow(1 << RANDOM_BITS)
    stamp = int(time.time()) & ((1 << TIMESTAMP_BITS) - 1)
    return f"{rand:04x}-{stamp:010x}"


def is_valid_id(value: str) -> bool:
    """True if ``value`` has the shape produced by :func:`new_id`."""
    return bool(ID_PATTERN.match(value or ""))


def timestamp_of(worklog_id: str) -> int:
    """Return the Unix timestamp embedded in a generated id."""
    if not is_valid_id(worklog_id):
        raise ValueError(f"Not a generated worklog id: {worklog_id!r}")
    return int(worklog_id.split("-", 1)[1], 16)
