"""In-memory model of the media library.

Collections hold movies or shows. Shows own seasons, seasons own
episodes. All of it is rebuilt by the scanner and read-only afterwards.
"""

import re
import unicodedata
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from src.services.library.nfo import NfoFile

CollectionType = Literal["movies", "shows"]

_LEADING_ARTICLES = ("the ", "a ", "an ")


def make_sort_name(name: str) -> str:
    """Lowercase, drop a leading article and leading punctuation."""
    title = name.strip().lower()
    for prefix in _LEADING_ARTICLES:
        if title.startswith(prefix):
            title = title[len(prefix):].strip()
            break
    while title and (title[0].isspace() or unicodedata.category(title[0]).startswith("P")):
        title = title[1:]
    return title


@dataclass
class VideoDetails:
    """Stream details of a video file, as far as the sidecar knows them."""

    codec: str = "unknown"
    bitrate: int = 0
    width: int = 0
    height: int = 0
    aspect: float = 0.0
    frame_rate: float = 0.0
    duration_seconds: int = 0
    audio_codec: str = "unknown"
    audio_bitrate: int = 0
    audio_channels: int = 0
    audio_language: str = ""


@dataclass
class Actor:
    name: str
    role: str = ""
    thumb: str = ""


@dataclass
class Metadata:
    """Parsed contents of a Kodi style .nfo sidecar."""

    title: str = ""
    original_title: str = ""
    plot: str = ""
    tagline: str = ""
    premiered: datetime | None = None
    year: int = 0
    official_rating: str = ""
    rating: float = 0.0
    votes: int = 0
    runtime_minutes: int = 0
    genres: list[str] = field(default_factory=list)
    studios: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    actors: list[Actor] = field(default_factory=list)
    directors: list[str] = field(default_factory=list)
    writers: list[str] = field(default_factory=list)
    provider_ids: dict[str, str] = field(default_factory=dict)
    season: int | None = None
    episode: int | None = None
    video: VideoDetails = field(default_factory=VideoDetails)


_EMPTY_METADATA = Metadata()


@dataclass(eq=False)
class MediaItem:
    """Fields shared by movies, shows and episodes.

    Image attributes hold file names relative to ``path``; an empty
    string means the image does not exist.
    """

    id: str
    name: str
    path: str
    created: datetime
    sort_name: str = ""
    file_name: str = ""
    file_size: int = 0
    poster: str = ""
    fanart: str = ""
    banner: str = ""
    folder: str = ""
    logo: str = ""
    nfo: NfoFile | None = None

    def __post_init__(self) -> None:
        if not self.sort_name:
            self.sort_name = make_sort_name(self.name)

    @property
    def metadata(self) -> Metadata:
        """Sidecar metadata, loaded on first access. Never None."""
        if self.nfo is None:
            return _EMPTY_METADATA
        return self.nfo.load() or _EMPTY_METADATA

    @property
    def has_metadata(self) -> bool:
        return self.nfo is not None and self.nfo.load() is not None

    @property
    def duration(self) -> int:
        """Duration in seconds, 0 when unknown."""
        meta = self.metadata
        if meta.runtime_minutes:
            return meta.runtime_minutes * 60
        return meta.video.duration_seconds

    @property
    def genres(self) -> list[str]:
        return self.metadata.genres

    @property
    def studios(self) -> list[str]:
        return self.metadata.studios

    @property
    def official_rating(self) -> str:
        return self.metadata.official_rating

    @property
    def rating(self) -> float:
        return self.metadata.rating

    @property
    def video(self) -> VideoDetails:
        return self.metadata.video

    @property
    def file_path(self) -> str:
        return f"{self.path}/{self.file_name}" if self.file_name else ""


@dataclass(eq=False)
class Movie(MediaItem):
    year: int = 0

    @property
    def production_year(self) -> int:
        return self.metadata.year or self.year

    @property
    def kind(self) -> str:
        return "movie"

    @property
    def premiered(self) -> datetime | None:
        return self.metadata.premiered


@dataclass(eq=False)
class Episode(MediaItem):
    season_no: int = 0
    episode_no: int = 0
    thumb: str = ""
    show_id: str = ""
    season_id: str = ""

    @property
    def kind(self) -> str:
        return "episode"

    @property
    def title(self) -> str:
        """Episode title from the sidecar, else the file name without extension."""
        return self.metadata.title or self.name

    @property
    def premiered(self) -> datetime | None:
        return self.metadata.premiered


@dataclass(eq=False)
class Season:
    id: str
    show_id: str
    number: int
    path: str = ""
    poster: str = ""
    banner: str = ""
    episodes: list[Episode] = field(default_factory=list)

    @property
    def kind(self) -> str:
        return "season"

    @property
    def is_specials(self) -> bool:
        return self.number == 0

    @property
    def sort_index(self) -> int:
        """Season number for ordering, with specials last."""
        return 99 if self.number == 0 else self.number

    @property
    def name(self) -> str:
        return "Specials" if self.number == 0 else f"Season {self.number}"


@dataclass(eq=False)
class Show(MediaItem):
    year: int = 0
    season_all_poster: str = ""
    season_all_banner: str = ""
    seasons: list[Season] = field(default_factory=list)
    last_video: datetime | None = None

    @property
    def production_year(self) -> int:
        return self.metadata.year or self.year

    @property
    def kind(self) -> str:
        return "show"

    @property
    def premiered(self) -> datetime | None:
        return self.metadata.premiered

    @property
    def episodes(self) -> list[Episode]:
        return [episode for season in self.seasons for episode in season.episodes]

    @property
    def duration(self) -> int:
        return sum(episode.duration for episode in self.episodes)


Item = Movie | Show | Season | Episode


@dataclass
class CollectionDetails:
    """Aggregated facets of one collection or of the whole library."""

    movie_count: int = 0
    show_count: int = 0
    episode_count: int = 0
    genres: list[str] = field(default_factory=list)
    studios: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    official_ratings: list[str] = field(default_factory=list)
    years: list[int] = field(default_factory=list)

    def merge(self, other: "CollectionDetails") -> None:
        self.movie_count += other.movie_count
        self.show_count += other.show_count
        self.episode_count += other.episode_count
        for attr in ("genres", "studios", "tags", "official_ratings", "years"):
            mine = getattr(self, attr)
            for value in getattr(other, attr):
                if value not in mine:
                    mine.append(value)


@dataclass(eq=False)
class Collection:
    id: str
    name: str
    type: CollectionType
    directory: str
    items: list[Movie | Show] = field(default_factory=list)

    def details(self) -> CollectionDetails:
        details = CollectionDetails()
        for item in self.items:
            if isinstance(item, Show):
                details.show_count += 1
                details.episode_count += len(item.episodes)
            else:
                details.movie_count += 1
            meta = item.metadata
            _extend_unique(details.genres, meta.genres)
            _extend_unique(details.studios, meta.studios)
            _extend_unique(details.tags, meta.tags)
            if meta.official_rating:
                _extend_unique(details.official_ratings, [meta.official_rating])
            year = item.production_year
            if year:
                _extend_unique(details.years, [year])
        details.genres.sort()
        details.studios.sort()
        details.tags.sort()
        details.official_ratings.sort()
        details.years.sort()
        return details

    def genres(self) -> list[str]:
        return self.details().genres


def _extend_unique(target: list, values: list) -> None:
    for value in values:
        if value and value not in target:
            target.append(value)


_TOKEN_RE = re.compile(r"\w+", re.UNICODE)


def tokenize(text: str) -> list[str]:
    """Split text into lowercase word tokens."""
    return _TOKEN_RE.findall(text.lower())
