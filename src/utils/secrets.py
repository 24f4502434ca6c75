"""Secret generation helpers for tokens and pairing codes."""

import base64
import secrets


def generate_access_token() -> str:
    """Generate an opaque access token.

    26 characters of base32, 130 bits of randomness.
    """
    return base64.b32encode(secrets.token_bytes(20)).decode("ascii")[:26]


def generate_numeric_code(digits: int = 6) -> str:
    """Generate a random numeric code, zero padded."""
    return f"{secrets.randbelow(10**digits):0{digits}d}"


def mask_secret(secret: str, visible_chars: int = 4) -> str:
    """Mask a secret for safe logging.

    Args:
        secret: The secret to mask
        visible_chars: Number of characters to show at the end

    Returns:
        Masked secret like "****abcd"
    """
    if not secret:
        return ""
    if len(secret) <= visible_chars:
        return "*" * len(secret)
    return "*" * (len(secret) - visible_chars) + secret[-visible_chars:]
