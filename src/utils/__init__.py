"""Utility modules for the Jellofin server."""

from src.utils.idhash import id_hash, new_random_id
from src.utils.logging import get_logger, LogContext, setup_logging
from src.utils.secrets import (
    generate_access_token,
    generate_numeric_code,
    mask_secret,
)

__all__ = [
    # IDs
    "id_hash",
    "new_random_id",
    # Logging
    "get_logger",
    "LogContext",
    "setup_logging",
    # Secrets
    "generate_access_token",
    "generate_numeric_code",
    "mask_secret",
]
