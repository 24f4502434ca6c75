"""Media library: Kodi style collections of movies and shows on disk."""

from src.services.library.models import (
    Actor,
    Collection,
    CollectionDetails,
    Episode,
    Item,
    Metadata,
    Movie,
    Season,
    Show,
    VideoDetails,
)
from src.services.library.nfo import NfoFile, parse_nfo
from src.services.library.repository import CollectionRepo
from src.services.library.scanner import scan_collection

__all__ = [
    "Actor",
    "Collection",
    "CollectionDetails",
    "CollectionRepo",
    "Episode",
    "Item",
    "Metadata",
    "Movie",
    "NfoFile",
    "Season",
    "Show",
    "VideoDetails",
    "parse_nfo",
    "scan_collection",
]
