"""Kodi style .nfo sidecar parsing."""

import logging
import re
import threading
import xml.etree.ElementTree as ET
from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.services.library.models import Metadata

logger = logging.getLogger(__name__)

# Root elements we understand; anything around them (URLs, junk) is ignored
_ROOT_RE = re.compile(
    r"<(movie|tvshow|episodedetails)\b.*?</\1\s*>", re.DOTALL | re.IGNORECASE
)

_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d %H:%M:%S",
    "%d %b %Y",
    "%d %b %Y %H:%M:%S",
)

GENRE_MAP = {
    "absurdist": "Absurdist",
    "action": "Action",
    "adventure": "Adventure",
    "animation": "Animation",
    "biography": "Biography",
    "children": "Children",
    "comedy": "Comedy",
    "crime": "Crime",
    "disaster": "Disaster",
    "documentary": "Documentary",
    "drama": "Drama",
    "erotic": "Erotic",
    "family": "Family",
    "fantasy": "Fantasy",
    "film noir": "Film Noir",
    "film-noir": "Film Noir",
    "foreign": "Foreign",
    "game show": "Game Show",
    "game-show": "Game Show",
    "historical": "Historical",
    "history": "History",
    "holiday": "Holiday",
    "horror": "Horror",
    "indie": "Indie",
    "mini series": "Mini Series",
    "mini-series": "Mini Series",
    "music": "Music",
    "musical": "Musical",
    "mystery": "Mystery",
    "news": "News",
    "philosophical": "Philosophical",
    "political": "Political",
    "reality": "Reality",
    "romance": "Romance",
    "satire": "Satire",
    "sci fi": "Sci-Fi",
    "sci-fi": "Sci-Fi",
    "science fiction": "Sci-Fi",
    "science-fiction": "Sci-Fi",
    "short": "Short",
    "soap": "Soap",
    "sport": "Sports",
    "sports": "Sports",
    "sports film": "Sports",
    "sports-film": "Sports",
    "surreal": "Surreal",
    "suspense": "Suspense",
    "tv movie": "TV Movie",
    "tv-movie": "TV Movie",
    "talk show": "Talk Show",
    "talk-show": "Talk Show",
    "telenovela": "Telenovela",
    "thriller": "Thriller",
    "urban": "Urban",
    "war": "War",
    "western": "Western",
}


def normalize_genres(raw: list[str]) -> list[str]:
    """Split combined genre strings and map them to canonical names."""
    genres: list[str] = []
    for value in raw:
        parts = value.split("/")
        if len(parts) == 1:
            parts = value.split(",")
        for part in parts:
            part = part.strip()
            genre = GENRE_MAP.get(part.lower(), part)
            if len(genre) > 1 and genre not in genres:
                genres.append(genre)
    return genres


def parse_date(value: str | None) -> datetime | None:
    """Parse the date formats found in the wild in .nfo files."""
    if not value:
        return None
    value = value.strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).replace(tzinfo=UTC)
        except ValueError:
            continue
    return None


def _text(element: ET.Element, path: str) -> str:
    el = element.find(path)
    if el is not None and el.text:
        return el.text.strip()
    return ""


def _texts(element: ET.Element, path: str) -> list[str]:
    return [el.text.strip() for el in element.findall(path) if el.text and el.text.strip()]


def _int(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        return 0


def _float(value: str) -> float:
    try:
        return float(value)
    except ValueError:
        return 0.0


def parse_nfo(content: str) -> "Metadata | None":
    """Parse the text of an .nfo file. Returns None if it is not usable."""
    from src.services.library.models import Actor, Metadata, VideoDetails

    match = _ROOT_RE.search(content)
    if match is None:
        return None
    try:
        root = ET.fromstring(match.group(0))
    except ET.ParseError as e:
        logger.debug(f"Failed to parse NFO XML: {e}")
        return None

    meta = Metadata(
        title=_text(root, "title"),
        original_title=_text(root, "originaltitle"),
        plot=_text(root, "plot"),
        tagline=_text(root, "tagline"),
        official_rating=_text(root, "mpaa"),
        rating=round(_float(_text(root, "rating")), 1),
        votes=_int(_text(root, "votes")),
        year=_int(_text(root, "year")),
        runtime_minutes=_int(_text(root, "runtime")),
        genres=normalize_genres(_texts(root, "genre")),
        studios=_texts(root, "studio"),
        tags=_texts(root, "tag"),
        directors=_texts(root, "director"),
        writers=_texts(root, "credits"),
    )

    meta.premiered = parse_date(_text(root, "aired")) or parse_date(_text(root, "premiered"))
    if not meta.year and meta.premiered is not None:
        meta.year = meta.premiered.year

    season = _text(root, "season")
    episode = _text(root, "episode")
    if season:
        meta.season = _int(season)
    if episode:
        meta.episode = _int(episode)

    for actor in root.findall("actor"):
        name = _text(actor, "name")
        if name:
            meta.actors.append(
                Actor(name=name, role=_text(actor, "role"), thumb=_text(actor, "thumb"))
            )

    for uid in root.findall("uniqueid"):
        value = (uid.text or "").strip()
        if not value:
            continue
        if uid.get("default") in ("true", "1"):
            meta.provider_ids["default"] = value
        if uid.get("type"):
            meta.provider_ids[uid.get("type", "").lower()] = value
    legacy_id = _text(root, "id")
    if legacy_id.startswith("tt") and "imdb" not in meta.provider_ids:
        meta.provider_ids["imdb"] = legacy_id

    video = VideoDetails()
    details = root.find("fileinfo/streamdetails")
    if details is not None:
        v = details.find("video")
        if v is not None:
            video.codec = _text(v, "codec") or "unknown"
            video.bitrate = _int(_text(v, "bitrate"))
            video.width = _int(_text(v, "width"))
            video.height = _int(_text(v, "height"))
            video.aspect = _float(_text(v, "aspect"))
            video.frame_rate = round(_float(_text(v, "framerate")), 2)
            video.duration_seconds = _int(_text(v, "durationinseconds"))
        a = details.find("audio")
        if a is not None:
            video.audio_codec = _text(a, "codec") or "unknown"
            video.audio_bitrate = _int(_text(a, "bitrate"))
            video.audio_channels = _int(_text(a, "channels"))
            video.audio_language = _text(a, "language")
    video.audio_language = video.audio_language[:3] if len(video.audio_language) >= 3 else "eng"
    meta.video = video

    return meta


class NfoFile:
    """An .nfo file on disk, parsed once on first use.

    Concurrent first calls serialize on a lock; every later call returns
    the cached result.
    """

    def __init__(self, filename: str, year: int = 0) -> None:
        self.filename = filename
        self.year = year
        self._lock = threading.Lock()
        self._loaded = False
        self._metadata: "Metadata | None" = None

    def load(self) -> "Metadata | None":
        if self._loaded:
            return self._metadata
        with self._lock:
            if not self._loaded:
                self._metadata = self._read()
                self._loaded = True
        return self._metadata

    def _read(self) -> "Metadata | None":
        try:
            with open(self.filename, "rb") as f:
                content = f.read().decode("utf-8", errors="replace")
        except OSError as e:
            logger.warning(f"Cannot read NFO file {self.filename}: {e}")
            return None

        meta = parse_nfo(content)
        if meta is None:
            logger.warning(f"Error parsing NFO file {self.filename}")
            return None
        if self.year:
            meta.year = self.year
        return meta

    def __repr__(self) -> str:
        return f"<NfoFile({self.filename})>"
