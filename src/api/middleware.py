"""ASGI middleware: request normalization and selective compression."""

import logging
import re
from urllib.parse import parse_qsl, urlencode

from starlette.middleware.gzip import GZipMiddleware
from starlette.routing import BaseRoute, Route

logger = logging.getLogger(__name__)

EMBY_PREFIX = "/emby"
DROPPED_QUERY_PARAMS = {"fields"}
UNCOMPRESSED_SEGMENTS = ("/videos/", "/images/")

_SLASHES_RE = re.compile(r"/{2,}")


def normalize_query_string(query_string: str) -> str:
    """Lowercase the first letter of every key and drop ignored keys."""
    if not query_string:
        return query_string
    pairs = []
    for key, value in parse_qsl(query_string, keep_blank_values=True):
        if key:
            key = key[0].lower() + key[1:]
        if key in DROPPED_QUERY_PARAMS:
            continue
        pairs.append((key, value))
    return urlencode(pairs)


class PathCaseFolder:
    """Rewrites path segments to the casing of the registered routes.

    Only literal segments are rewritten; parameter segments keep the
    value the client sent. Among matching routes the one with the most
    literal segments wins, so /items/counts maps to /Items/Counts rather
    than /Items/{item_id}.
    """

    def __init__(self, routes: list[BaseRoute]) -> None:
        self._routes = routes
        self._templates: dict[int, list[list[str | None]]] | None = None

    def _build(self) -> dict[int, list[list[str | None]]]:
        templates: dict[int, list[list[str | None]]] = {}
        for route in self._routes:
            if not isinstance(route, Route):
                continue
            segments = route.path.strip("/").split("/")
            template = [None if "{" in s else s for s in segments]
            templates.setdefault(len(segments), []).append(template)
        return templates

    def fold(self, path: str) -> str:
        if self._templates is None:
            self._templates = self._build()
        segments = path.strip("/").split("/")
        best: list[str | None] | None = None
        best_score = -1
        for template in self._templates.get(len(segments), []):
            score = 0
            for want, got in zip(template, segments, strict=True):
                if want is None:
                    continue
                if want.lower() != got.lower():
                    break
                score += 1
            else:
                if score > best_score:
                    best, best_score = template, score
        if best is None:
            return path
        folded = [want if want is not None else got for want, got in zip(best, segments, strict=True)]
        return "/" + "/".join(folded)


def normalize_path(path: str) -> str:
    """Strip an /emby prefix, collapse duplicate slashes and drop a trailing slash."""
    path = _SLASHES_RE.sub("/", path)
    if path.lower() == EMBY_PREFIX or path.lower().startswith(EMBY_PREFIX + "/"):
        path = path[len(EMBY_PREFIX):] or "/"
    if len(path) > 1 and path.endswith("/"):
        path = path.rstrip("/") or "/"
    return path


class RequestNormalizerMiddleware:
    """Pure ASGI middleware that normalizes paths and query strings before routing."""

    def __init__(self, app, routes: list[BaseRoute]) -> None:
        self.app = app
        self.folder = PathCaseFolder(routes)

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        original = scope["path"]
        path = self.folder.fold(normalize_path(original))
        query = normalize_query_string(scope.get("query_string", b"").decode("latin-1"))
        if path != original:
            logger.debug(f"Rewrote path {original} to {path}")
        scope = dict(scope)
        scope["path"] = path
        scope["raw_path"] = path.encode("utf-8")
        scope["query_string"] = query.encode("latin-1")
        await self.app(scope, receive, send)


class MediaAwareGZipMiddleware(GZipMiddleware):
    """GZip compression that leaves video streams and images alone."""

    async def __call__(self, scope, receive, send):
        if scope["type"] == "http":
            path = scope["path"].lower()
            if any(segment in path for segment in UNCOMPRESSED_SEGMENTS):
                await self.app(scope, receive, send)
                return
        await super().__call__(scope, receive, send)
