"""Jellyfin API compatibility layer.

Turns the media library and per-user state into the documents Jellyfin
clients expect.

Usage:
    from src.services.jellyfin import ItemProjector, ItemQuery

    projector = ItemProjector(db, collections, user.id, settings.server_id)
    items = await projector.items_by_parent("collection_" + collection.id)
    page, total, start = ItemQuery.from_params(request.query_params).apply(items)
"""

from src.services.jellyfin.ids import (
    IdKind,
    InvalidIdError,
    decode_name,
    detect_kind,
    encode_name,
    is_of_kind,
    make_id,
    trim_prefix,
)
from src.services.jellyfin.items import ItemProjector, wire_id
from src.services.jellyfin.query import ItemQuery, parse_iso8601

__all__ = [
    # IDs
    "IdKind",
    "InvalidIdError",
    "decode_name",
    "detect_kind",
    "encode_name",
    "is_of_kind",
    "make_id",
    "trim_prefix",
    # Projection
    "ItemProjector",
    "wire_id",
    # Queries
    "ItemQuery",
    "parse_iso8601",
]
