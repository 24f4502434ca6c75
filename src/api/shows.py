"""TV show endpoints: next up, seasons and episodes."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response

from src.api.deps import get_item_query, get_projector, jf_response
from src.api.items import items_response
from src.constants import NEXT_UP_RECENT_WINDOW, NEXT_UP_SERIES_HISTORY
from src.db import crud
from src.db.errors import NotFoundError
from src.models.jellyfin import JFUserItemsResponse
from src.services.jellyfin import IdKind, ItemProjector, ItemQuery, detect_kind, trim_prefix

router = APIRouter()
logger = logging.getLogger(__name__)

Projector = Annotated[ItemProjector, Depends(get_projector)]
Query = Annotated[ItemQuery, Depends(get_item_query)]


@router.get("/Shows/NextUp")
async def get_next_up(projector: Projector, query: Query) -> Response:
    """The episode to watch next for each recently watched show.

    With seriesId the whole watch history of that series is considered.
    Otherwise, or if that yields nothing, only the most recently played
    episodes are.
    """
    series_id = query.series_id
    next_up: list[str] = []
    if series_id:
        watched = await crud.get_recently_watched(
            projector.db, projector.user_id, NEXT_UP_SERIES_HISTORY, played_only=True
        )
        next_up = projector.collections.next_up_in_series(watched, series_id)
    if not next_up:
        watched = await crud.get_recently_watched(
            projector.db, projector.user_id, NEXT_UP_RECENT_WINDOW, played_only=True
        )
        next_up = projector.collections.next_up_in_collection(watched, series_id)

    items = []
    for episode_id in next_up:
        found = projector.collections.get_episode_by_id(episode_id)
        if found is None:
            logger.debug(f"Next up episode {episode_id} not found")
            continue
        items.append(await projector.make_episode(*found))
    return items_response(items, query.without(series_id=None))


@router.get("/Shows/{show_id}/Seasons")
async def get_seasons(show_id: str, projector: Projector, query: Query) -> Response:
    """Seasons of a show, always in season order with specials last."""
    found = projector.collections.get_show_by_id(show_id)
    if found is None:
        raise NotFoundError(f"show {show_id} not found")
    seasons = query.filter(await projector.seasons_overview(*found))
    seasons.sort(key=lambda s: s.index_number or 0)
    return jf_response(JFUserItemsResponse(items=seasons, total_record_count=len(seasons)))


@router.get("/Shows/{show_id}/Episodes")
async def get_episodes(show_id: str, projector: Projector, query: Query) -> Response:
    """All episodes of a show, optionally limited to one season by seasonId.

    A season ID in place of the show ID is treated as a seasonId filter.
    """
    if detect_kind(show_id) == IdKind.SEASON:
        found_season = projector.collections.get_season_by_id(trim_prefix(show_id))
        if found_season is None:
            raise NotFoundError(f"season {show_id} not found")
        query = query.without(season_id=show_id)
        show_id = found_season[1].id

    found = projector.collections.get_show_by_id(show_id)
    if found is None:
        raise NotFoundError(f"show {show_id} not found")
    collection, show = found
    episodes = []
    for season in show.seasons:
        episodes.extend(await projector.episodes_overview(collection, show, season))
    episodes = query.sort(query.filter(episodes))
    return jf_response(JFUserItemsResponse(items=episodes, total_record_count=len(episodes)))
