"""External item IDs.

Every ID handed to clients carries a type prefix, except movies and shows
which use their library ID as is. Genre, studio and person IDs encode the
name itself so they can be turned back into a name without a lookup.
"""

import base64
import binascii
from enum import Enum

from src.constants import (
    COLLECTION_ROOT_ID,
    FAVORITES_COLLECTION_ID,
    PLAYLIST_COLLECTION_ID,
    PREFIX_COLLECTION,
    PREFIX_COLLECTION_FAVORITES,
    PREFIX_COLLECTION_PLAYLIST,
    PREFIX_DISPLAY_PREFERENCES,
    PREFIX_EPISODE,
    PREFIX_GENRE,
    PREFIX_PERSON,
    PREFIX_PLAYLIST,
    PREFIX_ROOT,
    PREFIX_SEASON,
    PREFIX_SEPARATOR,
    PREFIX_SHOW,
    PREFIX_STUDIO,
)


class IdKind(str, Enum):
    """Kinds of external IDs."""

    ROOT = "root"
    COLLECTION_FAVORITES = "collectionfavorites"
    COLLECTION_PLAYLIST = "collectionplaylist"
    COLLECTION = "collection"
    SHOW = "show"
    SEASON = "season"
    EPISODE = "episode"
    PLAYLIST = "playlist"
    GENRE = "genre"
    STUDIO = "studio"
    PERSON = "person"
    DISPLAY_PREFERENCES = "dp"
    ITEM = "item"  # movie or show, no prefix


# Detection order matters: the specific collection prefixes before "collection_"
_PREFIXES: tuple[tuple[IdKind, str], ...] = (
    (IdKind.ROOT, PREFIX_ROOT),
    (IdKind.COLLECTION_FAVORITES, PREFIX_COLLECTION_FAVORITES),
    (IdKind.COLLECTION_PLAYLIST, PREFIX_COLLECTION_PLAYLIST),
    (IdKind.COLLECTION, PREFIX_COLLECTION),
    (IdKind.SHOW, PREFIX_SHOW),
    (IdKind.SEASON, PREFIX_SEASON),
    (IdKind.EPISODE, PREFIX_EPISODE),
    (IdKind.PLAYLIST, PREFIX_PLAYLIST),
    (IdKind.GENRE, PREFIX_GENRE),
    (IdKind.STUDIO, PREFIX_STUDIO),
    (IdKind.PERSON, PREFIX_PERSON),
    (IdKind.DISPLAY_PREFERENCES, PREFIX_DISPLAY_PREFERENCES),
)

_NAME_KINDS = (IdKind.GENRE, IdKind.STUDIO, IdKind.PERSON)


class InvalidIdError(ValueError):
    """Raised when an ID cannot be decoded."""


def prefix_for(kind: IdKind) -> str:
    """Wire prefix of an ID kind, empty for movies and shows."""
    for k, prefix in _PREFIXES:
        if k == kind:
            return prefix
    return ""


def detect_kind(item_id: str) -> IdKind:
    """Determine the kind of an external ID from its prefix."""
    for kind, prefix in _PREFIXES:
        if item_id.startswith(prefix):
            return kind
    return IdKind.ITEM


def is_of_kind(item_id: str, kind: IdKind) -> bool:
    return detect_kind(item_id) == kind


def make_id(kind: IdKind, raw_id: str) -> str:
    """Prefix a raw library or database ID."""
    return prefix_for(kind) + raw_id


def trim_prefix(item_id: str) -> str:
    """Strip the type prefix, returning the raw ID.

    IDs without a known prefix are returned unchanged.
    """
    if detect_kind(item_id) == IdKind.ITEM:
        return item_id
    _, _, raw = item_id.partition(PREFIX_SEPARATOR)
    return raw


def encode_name(kind: IdKind, name: str) -> str:
    """Build a reversible ID for a genre, studio or person name."""
    if kind not in _NAME_KINDS:
        raise ValueError(f"{kind.value} IDs do not encode a name")
    encoded = base64.urlsafe_b64encode(name.encode("utf-8")).decode("ascii").rstrip("=")
    return prefix_for(kind) + encoded


def decode_name(kind: IdKind, item_id: str) -> str:
    """Recover the name from an ID made by encode_name."""
    prefix = prefix_for(kind)
    if kind not in _NAME_KINDS or not item_id.startswith(prefix):
        raise InvalidIdError(f"not a {kind.value} id: {item_id}")
    encoded = item_id[len(prefix):]
    padding = "=" * (-len(encoded) % 4)
    try:
        return base64.urlsafe_b64decode(encoded + padding).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise InvalidIdError(f"cannot decode {kind.value} id: {item_id}") from e


def make_genre_id(name: str) -> str:
    return encode_name(IdKind.GENRE, name)


def make_studio_id(name: str) -> str:
    return encode_name(IdKind.STUDIO, name)


def make_person_id(name: str) -> str:
    return encode_name(IdKind.PERSON, name)


def root_id() -> str:
    return PREFIX_ROOT + COLLECTION_ROOT_ID


def favorites_collection_id() -> str:
    return PREFIX_COLLECTION_FAVORITES + FAVORITES_COLLECTION_ID


def playlist_collection_id() -> str:
    return PREFIX_COLLECTION_PLAYLIST + PLAYLIST_COLLECTION_ID
