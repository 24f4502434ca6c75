"""Read-only access to the scanned media library."""

import logging
from dataclasses import dataclass, field

from src.constants import MAX_SEARCH_RESULTS
from src.services.library.models import (
    Collection,
    CollectionDetails,
    CollectionType,
    Episode,
    Item,
    Movie,
    Season,
    Show,
    tokenize,
)
from src.services.library.scanner import scan_collection
from src.utils.idhash import id_hash

logger = logging.getLogger(__name__)

# Weights for ranking similar items
SIMILAR_WEIGHT_GENRE = 2.0
SIMILAR_WEIGHT_STUDIO = 1.0
SIMILAR_WEIGHT_PERSON = 2.0
SIMILAR_WEIGHT_RATING = 1.0
SIMILAR_YEAR_WINDOW = 10


@dataclass
class _SearchDocument:
    item_id: str
    name: str
    sort_name: str
    name_tokens: set[str]
    text_tokens: set[str] = field(default_factory=set)


class CollectionRepo:
    """The set of configured collections and lookups over their items.

    Built once at startup by ``scan()``; afterwards every method is a pure
    read and safe to call from concurrent requests.
    """

    def __init__(self, collections: list[Collection] | None = None) -> None:
        self.collections: list[Collection] = []
        self._items: dict[str, tuple[Collection, Movie | Show]] = {}
        self._seasons: dict[str, tuple[Collection, Show, Season]] = {}
        self._episodes: dict[str, tuple[Collection, Show, Season, Episode]] = {}
        self._documents: list[_SearchDocument] = []
        for collection in collections or []:
            self.collections.append(collection)
        self.reindex()

    def add_collection(
        self, name: str, collection_type: CollectionType, directory: str, collection_id: str | None = None
    ) -> Collection:
        """Register a collection. Its ID defaults to a hash of its name."""
        collection = Collection(
            id=collection_id or id_hash(name),
            name=name,
            type=collection_type,
            directory=directory,
        )
        self.collections.append(collection)
        return collection

    def scan(self) -> None:
        """Scan every collection directory and rebuild the lookup tables."""
        for collection in self.collections:
            collection.items = scan_collection(collection)
        self.reindex()

    def reindex(self) -> None:
        """Rebuild ID lookup tables and the search index from the collections."""
        self._items.clear()
        self._seasons.clear()
        self._episodes.clear()
        self._documents = []
        for collection in self.collections:
            for item in collection.items:
                self._items[item.id] = (collection, item)
                self._documents.append(self._make_document(item))
                if isinstance(item, Show):
                    for season in item.seasons:
                        self._seasons[season.id] = (collection, item, season)
                        for episode in season.episodes:
                            self._episodes[episode.id] = (collection, item, season, episode)

    # ==================== LOOKUPS ====================

    def get_collections(self) -> list[Collection]:
        return self.collections

    def get_collection(self, collection_id: str) -> Collection | None:
        for collection in self.collections:
            if collection.id == collection_id:
                return collection
        return None

    def get_item_by_id(self, item_id: str) -> tuple[Collection, Movie | Show] | None:
        """Find a movie or show and the collection it belongs to."""
        return self._items.get(item_id)

    def get_show_by_id(self, show_id: str) -> tuple[Collection, Show] | None:
        found = self._items.get(show_id)
        if found is None or not isinstance(found[1], Show):
            return None
        return found[0], found[1]

    def get_season_by_id(self, season_id: str) -> tuple[Collection, Show, Season] | None:
        return self._seasons.get(season_id)

    def get_episode_by_id(
        self, episode_id: str
    ) -> tuple[Collection, Show, Season, Episode] | None:
        return self._episodes.get(episode_id)

    def find(self, item_id: str) -> tuple[Collection, Item] | None:
        """Find a movie, show, season or episode by its raw ID."""
        if item_id in self._items:
            return self._items[item_id]
        if item_id in self._seasons:
            collection, _, season = self._seasons[item_id]
            return collection, season
        if item_id in self._episodes:
            collection, _, _, episode = self._episodes[item_id]
            return collection, episode
        return None

    def duration_of(self, item_id: str) -> int:
        """Duration in seconds of a movie or episode, 0 when unknown."""
        found = self.find(item_id)
        if found is None or isinstance(found[1], Season):
            return 0
        return found[1].duration

    # ==================== AGGREGATES ====================

    def details(self, collection_id: str | None = None) -> CollectionDetails:
        """Aggregated facets of one collection, or of all of them."""
        details = CollectionDetails()
        for collection in self.collections:
            if collection_id is None or collection.id == collection_id:
                details.merge(collection.details())
        details.genres.sort()
        details.studios.sort()
        details.tags.sort()
        details.official_ratings.sort()
        details.years.sort()
        return details

    def genre_item_count(self) -> dict[str, int]:
        """Number of movies and shows per genre."""
        counts: dict[str, int] = {}
        for collection in self.collections:
            for item in collection.items:
                for genre in item.genres:
                    if genre:
                        counts[genre] = counts.get(genre, 0) + 1
        return counts

    def studio_item_count(self) -> dict[str, int]:
        """Number of movies and shows per studio."""
        counts: dict[str, int] = {}
        for collection in self.collections:
            for item in collection.items:
                for studio in item.studios:
                    if studio:
                        counts[studio] = counts.get(studio, 0) + 1
        return counts

    def person_item_count(self) -> dict[str, int]:
        """Number of movies and shows each person appears in."""
        counts: dict[str, int] = {}
        for collection in self.collections:
            for item in collection.items:
                for name in _people(item):
                    counts[name] = counts.get(name, 0) + 1
        return counts

    # ==================== SEARCH ====================

    def _make_document(self, item: Movie | Show) -> _SearchDocument:
        meta = item.metadata
        name = meta.title or item.name
        text = " ".join([meta.plot, " ".join(meta.genres), " ".join(_people(item))])
        return _SearchDocument(
            item_id=item.id,
            name=name.lower(),
            sort_name=item.sort_name,
            name_tokens=set(tokenize(name)) | set(tokenize(item.sort_name)),
            text_tokens=set(tokenize(text)),
        )

    def search_item(self, term: str, limit: int = MAX_SEARCH_RESULTS) -> list[str]:
        """Find movies and shows matching a search term, best match first.

        Exact name matches rank first, then name prefixes, then the number
        of matching words in the name and in plot, genres and people.
        """
        term = term.strip().lower()
        tokens = tokenize(term)
        if not tokens:
            return []

        scored: list[tuple[float, int, str]] = []
        for position, doc in enumerate(self._documents):
            score = 0.0
            if doc.name == term or doc.sort_name == term:
                score += 100
            elif doc.name.startswith(term) or doc.sort_name.startswith(term):
                score += 50
            for token in tokens:
                if token in doc.name_tokens:
                    score += 10
                elif any(t.startswith(token) for t in doc.name_tokens):
                    score += 5
                if token in doc.text_tokens:
                    score += 1
            if score > 0:
                scored.append((-score, position, doc.item_id))

        scored.sort()
        return [item_id for _, _, item_id in scored[:limit]]

    def search_person(self, term: str, limit: int = MAX_SEARCH_RESULTS) -> list[str]:
        """Find names of people whose name contains the search term."""
        term = term.strip().lower()
        if not term:
            return []
        prefix: list[str] = []
        other: list[str] = []
        for name in self.person_item_count():
            lower = name.lower()
            if lower.startswith(term) or any(w.startswith(term) for w in lower.split()):
                prefix.append(name)
            elif term in lower:
                other.append(name)
        return (prefix + other)[:limit]

    def similar(
        self, collection: Collection, item: Movie | Show, limit: int = MAX_SEARCH_RESULTS
    ) -> list[str]:
        """Rank other items of the same collection by weighted overlap with item."""
        meta = item.metadata
        genres = set(meta.genres)
        studios = set(meta.studios)
        people = set(_people(item))
        year = item.production_year

        scored: list[tuple[float, int, str]] = []
        for position, other in enumerate(collection.items):
            if other.id == item.id:
                continue
            other_meta = other.metadata
            score = SIMILAR_WEIGHT_GENRE * len(genres & set(other_meta.genres))
            score += SIMILAR_WEIGHT_STUDIO * len(studios & set(other_meta.studios))
            score += SIMILAR_WEIGHT_PERSON * len(people & set(_people(other)))
            if meta.official_rating and meta.official_rating == other_meta.official_rating:
                score += SIMILAR_WEIGHT_RATING
            if score <= 0:
                continue
            distance = abs(year - other.production_year)
            if distance < SIMILAR_YEAR_WINDOW:
                score += (SIMILAR_YEAR_WINDOW - distance) / SIMILAR_YEAR_WINDOW
            scored.append((-score, position, other.id))

        scored.sort()
        return [item_id for _, _, item_id in scored[:limit]]

    # ==================== NEXT UP ====================

    def next_up_in_series(self, watched_episode_ids: list[str], series_id: str) -> list[str]:
        """Next episode to watch in one series, given all watched episodes."""
        return self._next_up(watched_episode_ids, series_id)

    def next_up_in_collection(
        self, watched_episode_ids: list[str], series_id: str | None = None
    ) -> list[str]:
        """Next episode to watch for every series in the recently watched list."""
        return self._next_up(watched_episode_ids, series_id)

    def _next_up(self, watched_episode_ids: list[str], series_id: str | None) -> list[str]:
        """For each show keep the furthest watched episode and return the one after it.

        Results are ordered by the most recently watched show first. Shows
        whose furthest watched episode is the last one are left out.
        """
        furthest: dict[str, tuple[Show, int, int]] = {}
        for episode_id in watched_episode_ids:
            found = self._episodes.get(episode_id)
            if found is None:
                continue
            collection, show, season, episode = found
            if collection.type != "shows":
                continue
            if series_id is not None and show.id != series_id:
                continue
            season_idx = show.seasons.index(season)
            episode_idx = season.episodes.index(episode)
            current = furthest.get(show.id)
            if current is None or (season_idx, episode_idx) > (current[1], current[2]):
                furthest[show.id] = (show, season_idx, episode_idx)

        next_up: list[str] = []
        for show, season_idx, episode_idx in furthest.values():
            season = show.seasons[season_idx]
            if episode_idx + 1 < len(season.episodes):
                next_up.append(season.episodes[episode_idx + 1].id)
            elif season_idx + 1 < len(show.seasons):
                next_up.append(show.seasons[season_idx + 1].episodes[0].id)
        logger.debug(f"Next up for {len(furthest)} shows: {next_up}")
        return next_up


def _people(item: Movie | Show | Episode) -> list[str]:
    meta = item.metadata
    return [a.name for a in meta.actors] + meta.directors + meta.writers
