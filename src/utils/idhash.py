"""Stable short identifiers derived from names.

Library items get their IDs from the sha256 of a name so that the same
directory always maps to the same ID across restarts and rescans.
"""

import hashlib
import secrets

BASE62_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
ID_LENGTH = 20


def _base62(num: int, length: int) -> str:
    """Encode the lowest digits of num as a fixed-length base62 string."""
    chars = []
    for _ in range(length):
        num, rem = divmod(num, 62)
        chars.append(BASE62_ALPHABET[rem])
    return "".join(chars)


def id_hash(name: str) -> str:
    """Hash a name into a 20 character base62 ID.

    Uses the first 119 bits of the sha256 digest, least significant
    digit first.
    """
    digest = hashlib.sha256(name.encode("utf-8")).digest()
    num = int.from_bytes(digest[:16], "big") >> 9
    return _base62(num, ID_LENGTH)


def new_random_id() -> str:
    """Generate a random base62 ID."""
    return _base62(int.from_bytes(secrets.token_bytes(16), "big"), 22)
