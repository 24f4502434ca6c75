"""Authentication module."""

from src.auth.dependencies import (
    RequestContext,
    get_current_user,
    get_request_context,
    require_self,
    require_self_or_admin,
)
from src.auth.passwords import hash_password, verify_password
from src.auth.scheme import AuthScheme, find_token, get_auth_scheme, parse_auth_header
from src.auth.sessions import (
    AuthenticationError,
    authenticate_user,
    create_user,
    issue_token,
)

__all__ = [
    "AuthScheme",
    "AuthenticationError",
    "RequestContext",
    "authenticate_user",
    "create_user",
    "find_token",
    "get_auth_scheme",
    "get_current_user",
    "get_request_context",
    "hash_password",
    "issue_token",
    "parse_auth_header",
    "require_self",
    "require_self_or_admin",
    "verify_password",
]
