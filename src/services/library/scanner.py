"""Kodi style filesystem scanner.

Movies live in one directory each::

    Casablanca (1942)/
        casablanca.mp4
        casablanca.nfo
        poster.jpg
        fanart.jpg

Shows live in one directory each, with episodes either in the show
directory or in ``S<n>``/``Season <n>``/``Specials`` subdirectories::

    Fargo/
        tvshow.nfo
        poster.jpg
        season01-poster.jpg
        S01/
            Fargo.S01E01.mp4
            Fargo.S01E01.nfo
            Fargo.S01E01-thumb.jpg
"""

import logging
import os
import re
from datetime import UTC, datetime

from src.services.library.models import Collection, Episode, Movie, Season, Show
from src.services.library.nfo import NfoFile
from src.utils.idhash import id_hash
from src.utils.logging import LogContext

logger = logging.getLogger(__name__)

VIDEO_RE = re.compile(r"^(.*)\.(divx|mov|mp4|MP4|m4u|m4v|mkv)$")
IMAGE_RE = re.compile(r"^(.+)\.(jpg|jpeg|png|tbn)$")
IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "tbn"}
SEASON_IMAGE_RE = re.compile(r"^season([0-9]+)-?([a-z]+|)\.(jpg|jpeg|png|tbn)$")
SHOW_SUBDIR_RE = re.compile(r"^(?:S|Season ?)([0-9]+)$|^Specials([0-9]*)$", re.IGNORECASE)
SIDE_FILE_RE = re.compile(r"^(.*)()\.(png|jpg|jpeg|tbn|nfo|srt)$")
AUX_SIDE_FILE_RE = re.compile(r"^(.*)[.-]([a-z]+)\.(png|jpg|jpeg|tbn|nfo|srt)$")
YEAR_RE = re.compile(r" \(([0-9]+)\)$")

EPISODE_RES = (
    re.compile(r"[Ss]([0-9]{1,3})[ ._-]?[Ee]([0-9]{1,4})"),
    re.compile(r"(?<![0-9])([0-9]{1,2})x([0-9]{1,3})(?![0-9])"),
)
EPISODE_ONLY_RE = re.compile(r"(?:^|[ ._-])[Ee](?:p|pisode)?[ ._-]?([0-9]{1,4})")

# Image file stem in a show directory -> Show attribute (None: specials poster)
SHOW_IMAGES = {
    "banner": "banner",
    "clearlogo": "logo",
    "fanart": "fanart",
    "folder": "folder",
    "poster": "poster",
    "season-all-banner": "season_all_banner",
    "season-all-poster": "season_all_poster",
    "season-specials-poster": None,
}


def _skip(name: str) -> bool:
    return name.startswith(".") or name.startswith("+ ")


def _dir_year(dirname: str) -> int:
    """Year from a "Name (YYYY)" directory name, 0 if absent."""
    match = YEAR_RE.search(dirname)
    return int(match.group(1)) if match else 0


def _list_dir(directory: str) -> list[os.DirEntry]:
    try:
        with os.scandir(directory) as it:
            return sorted(it, key=lambda e: e.name)
    except OSError as e:
        logger.warning(f"Cannot read directory {directory}: {e}")
        return []


def _mtime(entry: os.DirEntry) -> datetime:
    return datetime.fromtimestamp(entry.stat().st_mtime, tz=UTC)


def parse_episode_name(name: str, season_hint: int) -> tuple[int, int] | None:
    """Extract (season, episode) numbers from a video file base name."""
    for pattern in EPISODE_RES:
        match = pattern.search(name)
        if match:
            return int(match.group(1)), int(match.group(2))
    if season_hint >= 0:
        match = EPISODE_ONLY_RE.search(name)
        if match:
            return season_hint, int(match.group(1))
    return None


def _side_file(name: str, base: str) -> tuple[str, str] | None:
    """Split a side file name into (aux, ext) if it belongs to ``base``.

    ``movie.nfo`` gives ("", "nfo"), ``movie-fanart.jpg`` gives
    ("fanart", "jpg"). A side file with a different base gives its own
    base as aux, so ``poster.jpg`` next to ``movie.mp4`` gives
    ("poster", "jpg").
    """
    match = SIDE_FILE_RE.match(name)
    aux = ext = ""
    if match:
        ext = match.group(3)
        if match.group(1) != base:
            aux = match.group(1)
    if match is None or match.group(1) != base:
        match2 = AUX_SIDE_FILE_RE.match(name)
        if match2 and match2.group(1) == base:
            aux, ext = match2.group(2), match2.group(3)
    if not ext:
        return None
    return aux, ext


def scan_movie(collection: Collection, dirname: str) -> Movie | None:
    """Build a movie from its directory. Returns None if there is no video."""
    directory = os.path.join(collection.directory, dirname)
    entries = _list_dir(directory)

    base = video = ""
    size = 0
    created: datetime | None = None
    for entry in entries:
        match = VIDEO_RE.match(entry.name)
        if match and entry.is_file():
            video, base = match.group(0), match.group(1)
            size = entry.stat().st_size
            created = _mtime(entry)
    if not video or created is None:
        return None

    dir_year = _dir_year(dirname)
    year = dir_year or created.year

    movie = Movie(
        id=id_hash(dirname),
        name=dirname,
        path=dirname,
        created=created,
        file_name=video,
        file_size=size,
        year=year,
    )

    for entry in entries:
        parts = _side_file(entry.name, base)
        if parts is None:
            continue
        aux, ext = parts
        if IMAGE_RE.match(entry.name):
            if ext == "tbn" and not aux:
                aux = "poster"
            if aux in ("banner", "fanart", "folder", "poster"):
                setattr(movie, aux, entry.name)
            elif aux in ("clearlogo", "logo"):
                movie.logo = entry.name
            continue
        if ext == "nfo":
            movie.nfo = NfoFile(os.path.join(directory, entry.name), year=dir_year)

    return movie


def _get_season(show: Show, number: int) -> Season:
    """Find or insert the season with this number, keeping number order."""
    for season in show.seasons:
        if season.number == number:
            return season
    name = id_hash(f"{show.name}-season-{number}")
    season = Season(id=id_hash(name), show_id=show.id, number=number, path=show.path)
    index = 0
    while index < len(show.seasons) and show.seasons[index].number < number:
        index += 1
    show.seasons.insert(index, season)
    return season


def _scan_show_dir(
    collection: Collection, show: Show, season_dir: str, season_hint: int
) -> None:
    """Scan the show directory (season_hint -1) or one of its season subdirectories."""
    directory = os.path.join(collection.directory, show.path, season_dir)
    entries = _list_dir(directory)
    episodes: dict[str, Episode] = {}

    for entry in entries:
        fn = entry.name
        if _skip(fn):
            continue
        rel = os.path.join(season_dir, fn) if season_dir else fn

        if season_hint < 0:
            match = SHOW_SUBDIR_RE.match(fn)
            if match and entry.is_dir():
                number = int(match.group(1)) if match.group(1) is not None else 0
                _scan_show_dir(collection, show, fn, number)
                continue
            if fn == "tvshow.nfo":
                show.nfo = NfoFile(os.path.join(directory, fn))
                continue
            match = IMAGE_RE.match(fn)
            if match and match.group(1) in SHOW_IMAGES:
                attr = SHOW_IMAGES[match.group(1)]
                if attr is None:
                    _get_season(show, 0).poster = fn
                else:
                    setattr(show, attr, fn)
                continue
        else:
            match = IMAGE_RE.match(fn)
            if match and match.group(1) in ("banner", "poster"):
                setattr(_get_season(show, season_hint), match.group(1), rel)
                continue

        match = SEASON_IMAGE_RE.match(fn)
        if match:
            season = _get_season(show, int(match.group(1)))
            if match.group(2) == "banner":
                season.banner = rel
            else:
                season.poster = rel
            continue

        match = VIDEO_RE.match(fn)
        if match and entry.is_file():
            numbers = parse_episode_name(match.group(1), season_hint)
            if numbers is None:
                logger.debug(f"Skipping unrecognized episode file {rel}")
                continue
            season = _get_season(show, numbers[0])
            episode = Episode(
                id=id_hash(fn),
                name=match.group(1),
                path=show.path,
                created=_mtime(entry),
                file_name=rel,
                file_size=entry.stat().st_size,
                season_no=numbers[0],
                episode_no=numbers[1],
                show_id=show.id,
                season_id=season.id,
            )
            season.episodes.append(episode)
            episodes[match.group(1)] = episode

    # Second pass for files that belong to an episode
    for entry in entries:
        fn = entry.name
        episode = None
        aux = ext = ""
        match = SIDE_FILE_RE.match(fn)
        if match and match.group(1) in episodes:
            episode, aux, ext = episodes[match.group(1)], match.group(2), match.group(3)
        else:
            match = AUX_SIDE_FILE_RE.match(fn)
            if match and match.group(1) in episodes:
                episode, aux, ext = episodes[match.group(1)], match.group(2), match.group(3)
        if episode is None:
            continue
        rel = os.path.join(season_dir, fn) if season_dir else fn
        if ext in IMAGE_EXTENSIONS:
            if ext == "tbn" and not aux:
                aux = "thumb"
            if aux == "thumb":
                episode.thumb = rel
        elif ext == "nfo":
            episode.nfo = NfoFile(os.path.join(directory, fn))


def scan_show(collection: Collection, dirname: str) -> Show | None:
    """Build a show from its directory.

    A show is kept if it has at least one episode, or if it has an NFO
    and a poster or fanart.
    """
    show = Show(
        id=id_hash(dirname),
        name=dirname,
        path=dirname,
        created=datetime.now(UTC),
    )
    _scan_show_dir(collection, show, "", -1)

    for season in show.seasons:
        season.episodes = [e for e in season.episodes if e.file_name]
        season.episodes.sort(key=lambda e: (e.episode_no, e.file_name))
        season.poster = season.poster or show.season_all_poster
        season.banner = season.banner or show.season_all_banner
    show.seasons = [s for s in show.seasons if s.episodes]
    show.seasons.sort(key=lambda s: s.sort_index)

    if show.seasons:
        first = show.seasons[0].episodes[0]
        last = show.seasons[-1].episodes[-1]
        show.created = first.created
        show.last_video = last.created
    elif not (show.nfo is not None and (show.fanart or show.poster)):
        return None

    show.year = _dir_year(dirname) or show.created.year
    return show


def scan_collection(collection: Collection) -> list[Movie | Show]:
    """Scan the directory of a collection and return its items."""
    log = LogContext(logger, collection=collection.name)
    log.debug(f"Scanning {collection.directory}")
    items: list[Movie | Show] = []
    for entry in _list_dir(collection.directory):
        if _skip(entry.name) or not entry.is_dir():
            continue
        if collection.type == "movies":
            item = scan_movie(collection, entry.name)
        else:
            item = scan_show(collection, entry.name)
        if item is None:
            log.debug(f"Skipping {entry.name}: no video found")
            continue
        items.append(item)
    log.info(f"Scanned {len(items)} items")
    return items
