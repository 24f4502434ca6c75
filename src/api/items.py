"""Item browsing endpoints: lists, single items and item details."""

import logging
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response

from src.api.deps import get_item_query, get_projector, jf_response
from src.constants import (
    DEFAULT_LATEST_LIMIT,
    ITEM_TYPE_EPISODE,
    ITEM_TYPE_SEASON,
    SESSION_ID,
    ZERO_ID,
)
from src.db import crud
from src.db.errors import NotFoundError
from src.models.jellyfin import (
    JFItem,
    JFItemCountResponse,
    JFItemFilter2Response,
    JFItemFilterResponse,
    JFNameId,
    JFPlaybackInfoResponse,
    JFSearchHintsResponse,
    JFThemeMediaResponse,
    JFThemeMediaResult,
    JFUserItemsResponse,
)
from src.services.jellyfin import IdKind, ItemProjector, ItemQuery, detect_kind, trim_prefix
from src.services.jellyfin.ids import make_genre_id, make_id
from src.services.library import Episode, Season

router = APIRouter()
logger = logging.getLogger(__name__)

Projector = Annotated[ItemProjector, Depends(get_projector)]
Query = Annotated[ItemQuery, Depends(get_item_query)]

# Upper bound of play state records considered for resume lists
RESUME_HISTORY = 1000
MIN_DATE = datetime.min.replace(tzinfo=UTC)


def items_response(items: list[JFItem], query: ItemQuery) -> Response:
    """Filter, sort and paginate items into a list response."""
    page, total, start = query.apply(items)
    return jf_response(JFUserItemsResponse(items=page, total_record_count=total, start_index=start))


def _wants_descendants(query: ItemQuery) -> bool:
    return query.recursive and any(
        t in (ITEM_TYPE_SEASON, ITEM_TYPE_EPISODE) for t in query.include_item_types
    )


# ==================== LISTS ====================


@router.get("/Items")
@router.get("/Users/{user_id}/Items")
async def get_items(projector: Projector, query: Query) -> Response:
    """The main item listing.

    Lists search results when searchTerm is given, else the children of
    parentId, else the items named by ids. When none of these match it lists
    the root folders, plus every item when recursive.
    """
    if query.search_term:
        items = await projector.make_items_by_ids(
            projector.collections.search_item(query.search_term)
        )
    elif query.parent_id:
        items = await projector.items_by_parent(query.parent_id)
        query = query.without(parent_id=None)
    else:
        items = []
        if query.ids:
            items = await projector.make_items_by_ids(query.ids)
            query = query.without(ids=[])
        if not items:
            items = await projector.root_overview()
            if query.recursive:
                items.extend(await projector.all_items())
    if _wants_descendants(query):
        items = await projector.with_descendants(items)
    return items_response(items, query)


@router.get("/Items/Latest")
@router.get("/Users/{user_id}/Items/Latest")
async def get_latest(projector: Projector, query: Query) -> Response:
    """Most recently premiered items, as a bare list."""
    if query.parent_id:
        items = await projector.items_by_parent(query.parent_id)
        query = query.without(parent_id=None)
    else:
        items = await projector.all_items()
    items = query.filter(items)
    items.sort(key=lambda i: i.premiere_date or MIN_DATE, reverse=True)
    limit = query.limit if query.limit and query.limit > 0 else DEFAULT_LATEST_LIMIT
    return jf_response(items[:limit])


@router.get("/UserItems/Resume")
@router.get("/Users/{user_id}/Items/Resume")
async def get_resume(projector: Projector, query: Query) -> Response:
    """Partially watched items, most recently watched first."""
    ids = await crud.get_recently_watched(
        projector.db, projector.user_id, RESUME_HISTORY, played_only=False
    )
    items = []
    for item_id in ids:
        found = projector.collections.find(item_id)
        if found is not None:
            items.append(await projector.make_item(*found))
    return items_response(items, query)


@router.get("/Items/Suggestions")
@router.get("/Users/{user_id}/Items/Suggestions")
async def get_suggestions(projector: Projector) -> Response:
    return jf_response(JFUserItemsResponse())


@router.get("/Items/Counts")
async def get_counts(projector: Projector) -> Response:
    details = projector.collections.details()
    return jf_response(JFItemCountResponse(
        movie_count=details.movie_count,
        series_count=details.show_count,
        episode_count=details.episode_count,
        item_count=details.movie_count + details.show_count + details.episode_count,
    ))


def _collection_filter(query: ItemQuery) -> str | None:
    if query.parent_id and detect_kind(query.parent_id) == IdKind.COLLECTION:
        return trim_prefix(query.parent_id)
    return None


@router.get("/Items/Filters")
async def get_filters(projector: Projector, query: Query) -> Response:
    details = projector.collections.details(_collection_filter(query))
    return jf_response(JFItemFilterResponse(
        genres=details.genres,
        tags=details.tags,
        official_ratings=details.official_ratings,
        years=details.years,
    ))


@router.get("/Items/Filters2")
async def get_filters2(projector: Projector, query: Query) -> Response:
    details = projector.collections.details(_collection_filter(query))
    return jf_response(JFItemFilter2Response(
        genres=[JFNameId(name=g, id=make_genre_id(g)) for g in details.genres],
        tags=details.tags,
    ))


@router.get("/Items/Root")
@router.get("/Users/{user_id}/Items/Root")
async def get_root(projector: Projector) -> Response:
    return jf_response(await projector.make_root())


@router.get("/Search/Hints")
async def search_hints(projector: Projector, query: Query) -> Response:
    """Quick search across the library, including people."""
    if query.parent_id and detect_kind(query.parent_id) == IdKind.COLLECTION_PLAYLIST:
        items = await projector.playlist_overview()
    elif query.search_term:
        items = await projector.make_items_by_ids(
            projector.collections.search_item(query.search_term)
        )
        collection_id = _collection_filter(query)
        if collection_id is not None:
            parent = make_id(IdKind.COLLECTION, collection_id)
            items = [i for i in items if i.parent_id == parent]
        for name in projector.collections.search_person(query.search_term):
            items.append(await projector.make_person(name))
    else:
        items = await projector.all_items(_collection_filter(query))
    query = query.without(parent_id=None, search_term=None)
    page, total, _ = query.apply(items)
    return jf_response(JFSearchHintsResponse(search_hints=page, total_record_count=total))


@router.get("/Movies/Recommendations")
async def movie_recommendations(projector: Projector) -> Response:
    return jf_response([])


@router.delete("/Items")
async def delete_items(projector: Projector) -> Response:
    raise HTTPException(status_code=403, detail="deleting items is not supported")


# ==================== SINGLE ITEM ====================


@router.get("/Items/{item_id}")
@router.get("/Users/{user_id}/Items/{item_id}")
async def get_item(item_id: str, projector: Projector) -> Response:
    return jf_response(await projector.make_item_by_id(item_id))


@router.delete("/Items/{item_id}")
async def delete_item(item_id: str, projector: Projector) -> Response:
    raise HTTPException(status_code=403, detail="deleting items is not supported")


@router.get("/UserItems/{item_id}/UserData")
@router.get("/Users/{user_id}/Items/{item_id}/UserData")
async def get_item_user_data(item_id: str, projector: Projector) -> Response:
    item = await projector.make_item_by_id(item_id)
    if item.user_data is not None:
        return jf_response(item.user_data)
    return jf_response(await projector.user_data(trim_prefix(item_id)))


@router.get("/Items/{item_id}/Ancestors")
async def get_ancestors(item_id: str, projector: Projector) -> Response:
    """Parents of an item up to the root folder, nearest first."""
    root = await projector.make_root()
    found = projector.collections.find(trim_prefix(item_id))
    if found is None:
        await projector.make_item_by_id(item_id)
        return jf_response([root])

    collection, item = found
    ancestors = []
    if isinstance(item, Episode):
        found_season = projector.collections.get_season_by_id(item.season_id)
        if found_season is not None:
            _, show, season = found_season
            ancestors.append(await projector.make_season(collection, show, season))
            ancestors.append(await projector.make_show(collection, show))
    elif isinstance(item, Season):
        found_show = projector.collections.get_show_by_id(item.show_id)
        if found_show is not None:
            ancestors.append(await projector.make_show(collection, found_show[1]))
    ancestors.append(await projector.make_collection(collection))
    ancestors.append(root)
    return jf_response(ancestors)


@router.get("/Items/{item_id}/PlaybackInfo")
@router.post("/Items/{item_id}/PlaybackInfo")
async def get_playback_info(item_id: str, projector: Projector) -> Response:
    item = await projector.make_item_by_id(item_id)
    if not item.media_sources:
        raise NotFoundError(f"item {item_id} is not playable")
    return jf_response(JFPlaybackInfoResponse(
        media_sources=item.media_sources,
        play_session_id=SESSION_ID,
    ))


@router.get("/Items/{item_id}/Similar")
async def get_similar(item_id: str, projector: Projector, query: Query) -> Response:
    """Other items of the same collection that resemble this one."""
    kind = detect_kind(item_id)
    if kind != IdKind.ITEM:
        return jf_response(JFUserItemsResponse())
    found = projector.collections.get_item_by_id(item_id)
    if found is None:
        raise NotFoundError(f"item {item_id} not found")
    collection, item = found
    items = []
    for similar_id in projector.collections.similar(collection, item):
        similar = projector.collections.get_item_by_id(similar_id)
        if similar is not None:
            items.append(await projector.make_item(*similar))
    return items_response(items, query)


@router.get("/Items/{item_id}/SpecialFeatures")
@router.get("/Items/{item_id}/LocalTrailers")
async def get_special_features(item_id: str, projector: Projector) -> Response:
    return jf_response([])


@router.get("/Items/{item_id}/Intros")
@router.get("/Users/{user_id}/Items/{item_id}/Intros")
async def get_intros(item_id: str, projector: Projector) -> Response:
    return jf_response(JFUserItemsResponse())


@router.get("/Items/{item_id}/ThemeMedia")
async def get_theme_media(item_id: str, projector: Projector) -> Response:
    return jf_response(JFThemeMediaResponse(
        theme_videos_result=JFThemeMediaResult(owner_id=item_id),
        theme_songs_result=JFThemeMediaResult(owner_id=item_id),
        soundtrack_songs_result=JFThemeMediaResult(owner_id=ZERO_ID),
    ))


@router.post("/Items/{item_id}/Refresh")
async def refresh_item(item_id: str, projector: Projector) -> Response:
    return Response(status_code=204)


@router.get("/MediaSegments/{item_id}")
async def get_media_segments(item_id: str, projector: Projector) -> Response:
    return jf_response(JFUserItemsResponse())
