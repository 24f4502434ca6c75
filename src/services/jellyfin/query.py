"""Filtering, sorting and pagination of item lists.

Implements the query string grammar Jellyfin clients use on every list
endpoint. Query parameter names are expected in their normalized form
(first letter lowercase), which the request normalizer guarantees.
"""

import functools
import logging
import random
import re
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Any

from starlette.datastructures import QueryParams

from src.models.jellyfin import JFItem

logger = logging.getLogger(__name__)

_LIST_SPLIT_RE = re.compile(r"[|,]")
_MIN_DATE = datetime.min.replace(tzinfo=UTC)

_DATE_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d", "%Y-%m", "%Y")


def parse_iso8601(value: str) -> datetime:
    """Parse the ISO 8601 variants clients send as date bounds.

    Naive values are taken as UTC. Raises ValueError if nothing matches.
    """
    value = value.strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).replace(tzinfo=UTC)
        except ValueError:
            continue
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _split(values: list[str], pattern: re.Pattern | str = ",") -> list[str]:
    """Flatten repeated and delimited query values into one list."""
    result = []
    for value in values:
        parts = pattern.split(value) if isinstance(pattern, re.Pattern) else value.split(pattern)
        result.extend(p.strip() for p in parts if p.strip())
    return result


def _tristate(value: str | None) -> bool | None:
    if value is None:
        return None
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return None


def _int(value: str | None) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _float(value: str | None) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _date(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return parse_iso8601(value)
    except ValueError:
        logger.debug(f"Ignoring unparseable date {value}")
        return None


@dataclass
class ItemQuery:
    """Parsed filter, sort and paging parameters of a list request.

    Every criterion is optional. None (or an empty list) means the
    criterion is not applied.
    """

    include_item_types: list[str] = field(default_factory=list)
    exclude_item_types: list[str] = field(default_factory=list)
    media_types: list[str] = field(default_factory=list)
    is_hd: bool | None = None
    is_4k: bool | None = None
    ids: list[str] = field(default_factory=list)
    exclude_item_ids: list[str] = field(default_factory=list)
    genre_ids: list[str] = field(default_factory=list)
    studio_ids: list[str] = field(default_factory=list)
    person_ids: list[str] = field(default_factory=list)
    series_id: str | None = None
    season_id: str | None = None
    parent_id: str | None = None
    parent_index_number: int | None = None
    index_number: int | None = None
    name_starts_with: str | None = None
    name_starts_with_or_greater: str | None = None
    name_less_than: str | None = None
    genres: list[str] = field(default_factory=list)
    studios: list[str] = field(default_factory=list)
    official_ratings: list[str] = field(default_factory=list)
    min_community_rating: float | None = None
    min_critic_rating: float | None = None
    min_premiere_date: datetime | None = None
    max_premiere_date: datetime | None = None
    years: list[int] = field(default_factory=list)
    is_played: bool | None = None
    is_favorite: bool | None = None
    filters: list[str] = field(default_factory=list)

    sort_by: list[str] = field(default_factory=list)
    sort_descending: bool = False

    start_index: int | None = None
    limit: int | None = None

    # Non-filter parameters some handlers act on
    search_term: str | None = None
    recursive: bool = False

    @classmethod
    def from_params(cls, params: QueryParams) -> "ItemQuery":
        """Build a query from (normalized) request query parameters."""
        years = []
        for year in _split(params.getlist("years")):
            parsed = _int(year)
            if parsed is not None:
                years.append(parsed)
        return cls(
            include_item_types=_split(params.getlist("includeItemTypes")),
            exclude_item_types=_split(params.getlist("excludeItemTypes")),
            media_types=_split(params.getlist("mediaTypes")),
            is_hd=_tristate(params.get("isHd")),
            is_4k=_tristate(params.get("is4K")),
            ids=_split(params.getlist("ids")),
            exclude_item_ids=_split(params.getlist("excludeItemIds")),
            genre_ids=_split(params.getlist("genreIds"), _LIST_SPLIT_RE),
            studio_ids=_split(params.getlist("studioIds"), _LIST_SPLIT_RE),
            person_ids=_split(params.getlist("personIds"), _LIST_SPLIT_RE),
            series_id=params.get("seriesId") or None,
            season_id=params.get("seasonId") or None,
            parent_id=params.get("parentId") or None,
            parent_index_number=_int(params.get("parentIndexNumber")),
            index_number=_int(params.get("indexNumber")),
            name_starts_with=params.get("nameStartsWith") or None,
            name_starts_with_or_greater=params.get("nameStartsWithOrGreater") or None,
            name_less_than=params.get("nameLessThan") or None,
            genres=_split(params.getlist("genres"), "|"),
            studios=_split(params.getlist("studios"), "|"),
            official_ratings=_split(params.getlist("officialRatings"), "|"),
            min_community_rating=_float(params.get("minCommunityRating")),
            min_critic_rating=_float(params.get("minCriticRating")),
            min_premiere_date=_date(params.get("minPremiereDate")),
            max_premiere_date=_date(params.get("maxPremiereDate")),
            years=years,
            is_played=_tristate(params.get("isPlayed")),
            is_favorite=_tristate(params.get("isFavorite")),
            filters=_split(params.getlist("filters")),
            sort_by=[f.lower() for f in _split(params.getlist("sortBy"))],
            sort_descending=(params.get("sortOrder") or "").lower().startswith("descending"),
            start_index=_int(params.get("startIndex")),
            limit=_int(params.get("limit")),
            search_term=params.get("searchTerm") or None,
            recursive=(params.get("recursive") or "").lower() == "true",
        )

    def without(self, **fields: Any) -> "ItemQuery":
        """Copy of this query with the given criteria replaced."""
        return replace(self, **fields)

    # ==================== FILTER ====================

    def matches(self, item: JFItem) -> bool:
        """Check whether an item passes every criterion of the query."""
        if self.include_item_types and item.type not in self.include_item_types:
            return False
        if self.exclude_item_types and item.type in self.exclude_item_types:
            return False
        if self.media_types and item.media_type not in self.media_types:
            return False
        if self.is_hd is not None and item.is_hd != self.is_hd:
            return False
        if self.is_4k is not None and item.is_4k != self.is_4k:
            return False

        if self.ids and item.id not in self.ids:
            return False
        if self.exclude_item_ids and item.id in self.exclude_item_ids:
            return False
        if self.genre_ids and not any(g.id in self.genre_ids for g in item.genre_items):
            return False
        if self.studio_ids and not any(s.id in self.studio_ids for s in item.studios):
            return False
        if self.person_ids and not any(p.id in self.person_ids for p in item.people):
            return False

        if self.series_id is not None and item.series_id != self.series_id:
            return False
        if self.season_id is not None and item.season_id != self.season_id:
            return False
        if self.parent_id is not None and item.parent_id != self.parent_id:
            return False
        if self.parent_index_number is not None and item.parent_index_number != self.parent_index_number:
            return False
        if self.index_number is not None and item.index_number != self.index_number:
            return False

        sort_name = sort_name_of(item)
        if self.name_starts_with and not sort_name.startswith(self.name_starts_with.lower()):
            return False
        if self.name_starts_with_or_greater and sort_name < self.name_starts_with_or_greater.lower():
            return False
        if self.name_less_than and sort_name > self.name_less_than.lower():
            return False

        if self.genres and not any(g in item.genres for g in self.genres):
            return False
        if self.studios and not any(s.name in self.studios for s in item.studios):
            return False
        if self.official_ratings and item.official_rating not in self.official_ratings:
            return False

        if self.min_community_rating is not None and (item.community_rating or 0) < self.min_community_rating:
            return False
        if self.min_critic_rating is not None and (item.critic_rating or 0) < self.min_critic_rating:
            return False
        premiere = item.premiere_date or _MIN_DATE
        if self.min_premiere_date is not None and premiere < self.min_premiere_date:
            return False
        if self.max_premiere_date is not None and premiere > self.max_premiere_date:
            return False
        if self.years and item.production_year not in self.years:
            return False

        played = item.user_data is not None and item.user_data.played
        favorite = item.user_data is not None and item.user_data.is_favorite
        if self.is_played is not None and played != self.is_played:
            return False
        if self.is_favorite is not None and favorite != self.is_favorite:
            return False
        for name in self.filters:
            if name in ("IsFavorite", "IsFavoriteOrLikes") and not favorite:
                return False
            if name == "IsPlayed" and not played:
                return False
            if name == "IsUnplayed" and played:
                return False
            if name == "IsResumable" and not (
                item.user_data is not None and item.user_data.playback_position_ticks > 0
            ):
                return False
        return True

    def filter(self, items: list[JFItem]) -> list[JFItem]:
        """Keep the items that match, preserving order."""
        return [item for item in items if self.matches(item)]

    # ==================== SORT ====================

    def sort(self, items: list[JFItem]) -> list[JFItem]:
        """Stable multi-key sort. Items equal on every key keep their order."""
        if not self.sort_by:
            return items
        keys: list[Callable[[JFItem], Any]] = []
        for name in self.sort_by:
            if name == "random":
                shuffled = {id(item): random.random() for item in items}
                keys.append(lambda item, s=shuffled: s[id(item)])
            elif name in SORT_KEYS:
                keys.append(SORT_KEYS[name])
            else:
                logger.debug(f"Unknown sort field {name}")
        if not keys:
            return items

        descending = self.sort_descending

        def compare(a: JFItem, b: JFItem) -> int:
            for key in keys:
                ka, kb = key(a), key(b)
                if ka != kb:
                    result = -1 if ka < kb else 1
                    return -result if descending else result
            return 0

        return sorted(items, key=functools.cmp_to_key(compare))

    # ==================== PAGINATE ====================

    def paginate(self, items: list[JFItem]) -> tuple[list[JFItem], int]:
        """Apply startIndex then limit. Returns the page and the effective start index."""
        start = self.start_index or 0
        start = max(0, min(start, len(items)))
        page = items[start:]
        if self.limit is not None and self.limit > 0:
            page = page[: self.limit]
        return page, start

    def apply(self, items: list[JFItem]) -> tuple[list[JFItem], int, int]:
        """Filter, sort and paginate. Returns (page, total count, start index)."""
        items = self.sort(self.filter(items))
        page, start = self.paginate(items)
        return page, len(items), start


def sort_name_of(item: JFItem) -> str:
    """Lowercase sort name, falling back to the display name."""
    return (item.sort_name or item.name or "").lower()


def _date_played(item: JFItem) -> datetime:
    if item.user_data is None or item.user_data.last_played_date is None:
        return _MIN_DATE
    return item.user_data.last_played_date


SORT_KEYS: dict[str, Callable[[JFItem], Any]] = {
    "communityrating": lambda i: i.community_rating or 0.0,
    "criticrating": lambda i: i.critic_rating or 0,
    "datecreated": lambda i: i.date_created or _MIN_DATE,
    "datelastcontentadded": lambda i: i.date_created or _MIN_DATE,
    "dateplayed": _date_played,
    "indexnumber": lambda i: i.index_number or 0,
    "isfavoriteorliked": lambda i: i.user_data is not None and i.user_data.is_favorite,
    "isfolder": lambda i: i.is_folder,
    "isplayed": lambda i: i.user_data is not None and i.user_data.played,
    "isunplayed": lambda i: not (i.user_data is not None and i.user_data.played),
    "officialrating": lambda i: i.official_rating or "",
    "parentindexnumber": lambda i: i.parent_index_number or 0,
    "premieredate": lambda i: i.premiere_date or _MIN_DATE,
    "productionyear": lambda i: i.production_year or 0,
    "runtime": lambda i: i.run_time_ticks or 0,
    "name": sort_name_of,
    "seriessortname": sort_name_of,
    "sortname": sort_name_of,
    "default": sort_name_of,
}
