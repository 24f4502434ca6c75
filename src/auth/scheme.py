"""Parsing of the MediaBrowser/Emby authorization header."""

import re
from dataclasses import dataclass
from urllib.parse import unquote

from starlette.requests import HTTPConnection

AUTH_HEADERS = ("authorization", "x-emby-authorization")
SCHEME_PREFIXES = ("mediabrowser ", "emby ")
TOKEN_HEADERS = ("x-emby-token", "x-mediabrowser-token")
TOKEN_QUERY_PARAMS = ("apiKey", "api_key")

# Key="Value" or Key=Value, separated by commas
_PAIR_RE = re.compile(r'\s*([A-Za-z]+)\s*=\s*(?:"([^"]*)"|([^,]*))\s*,?')


@dataclass
class AuthScheme:
    """Client and device details sent with every request."""

    client: str = ""
    version: str = ""
    device: str = ""
    device_id: str = ""
    token: str = ""


def parse_auth_header(value: str) -> AuthScheme | None:
    """Parse a `MediaBrowser Client="...", Token="..."` header value.

    Returns None when the value does not use the MediaBrowser or Emby scheme.
    Unknown keys are ignored.
    """
    lowered = value.lower()
    for prefix in SCHEME_PREFIXES:
        if lowered.startswith(prefix):
            params = value[len(prefix):]
            break
    else:
        return None

    scheme = AuthScheme()
    for match in _PAIR_RE.finditer(params):
        key = match.group(1).lower()
        raw = match.group(2) if match.group(2) is not None else match.group(3)
        val = unquote(raw.strip())
        if key == "client":
            scheme.client = val
        elif key == "version":
            scheme.version = val
        elif key == "device":
            scheme.device = val
        elif key == "deviceid":
            scheme.device_id = val
        elif key == "token":
            scheme.token = val
    return scheme


def get_auth_scheme(conn: HTTPConnection) -> AuthScheme:
    """Auth scheme of a request, empty if no header carries one."""
    for header in AUTH_HEADERS:
        value = conn.headers.get(header)
        if value:
            scheme = parse_auth_header(value)
            if scheme is not None:
                return scheme
    return AuthScheme()


def find_token(conn: HTTPConnection, scheme: AuthScheme | None = None) -> str | None:
    """Locate the access token of a request.

    Looked up in order: the authorization header, X-Emby-Token,
    X-MediaBrowser-Token, then the apiKey and api_key query parameters.
    """
    if scheme is None:
        scheme = get_auth_scheme(conn)
    if scheme.token:
        return scheme.token
    for header in TOKEN_HEADERS:
        value = conn.headers.get(header)
        if value:
            return value
    for param in TOKEN_QUERY_PARAMS:
        value = conn.query_params.get(param)
        if value:
            return value
    return None
