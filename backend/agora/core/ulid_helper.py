"""ULID generation helper utilities."""

from typing import Any, Optional

import ulid


def generate_ulid() -> str:
    """Generate a new ULID string."""
    return str(ulid.ULID())


def parse_ulid(ulid_str: Any) -> Optional[ulid.ULID]:
    """Parse and validate a ULID string. Crockford base32 is case-insensitive."""
    if not isinstance(ulid_str, str) or len(ulid_str) != 26:
        return None
    try:
        return ulid.ULID.from_str(ulid_str.upper())
    except (ValueError, TypeError):
        return None


def canonical_ulid(ulid_str: Any) -> Optional[str]:
    """
    The stored (uppercase) form of a ULID, or None if the value is not one.

    Ids are compared and looked up as plain strings, so every id taken from
    a client goes through here before it is used.
    """
    parsed = parse_ulid(ulid_str)
    return str(parsed) if parsed is not None else None
