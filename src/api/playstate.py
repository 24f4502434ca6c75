"""Playback reporting, played and favorite marks."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Response

from src.api.deps import get_projector, jf_response, parse_body
from src.db.errors import NotFoundError
from src.models.jellyfin import JFPlayStateRequest
from src.services.jellyfin import ItemProjector, trim_prefix
from src.services.jellyfin.userdata import set_favorite, set_played, update_play_state

router = APIRouter()
logger = logging.getLogger(__name__)

Projector = Annotated[ItemProjector, Depends(get_projector)]


def _library_id(projector: ItemProjector, item_id: str) -> str:
    """Raw ID of a movie, show, season or episode. Raises NotFoundError otherwise."""
    raw_id = trim_prefix(item_id)
    if projector.collections.find(raw_id) is None:
        raise NotFoundError(f"item {item_id} not found")
    return raw_id


async def _report(projector: ItemProjector, body: Any) -> Response:
    report = parse_body(body, JFPlayStateRequest)
    raw_id = _library_id(projector, report.item_id)
    await update_play_state(
        projector.db,
        projector.user_id,
        raw_id,
        report.position_ticks or 0,
        projector.collections.duration_of(raw_id),
    )
    return Response(status_code=204)


# ==================== PLAYBACK REPORTS ====================


@router.post("/Sessions/Playing")
async def playing_started(projector: Projector, body: Annotated[Any, Body()] = None) -> Response:
    return await _report(projector, body)


@router.post("/Sessions/Playing/Progress")
async def playing_progress(projector: Projector, body: Annotated[Any, Body()] = None) -> Response:
    return await _report(projector, body)


@router.post("/Sessions/Playing/Stopped")
async def playing_stopped(projector: Projector, body: Annotated[Any, Body()] = None) -> Response:
    return await _report(projector, body)


@router.post("/Sessions/Playing/Ping")
async def playing_ping(projector: Projector) -> Response:
    return Response(status_code=204)


# ==================== PLAYED ====================


@router.post("/UserPlayedItems/{item_id}")
@router.post("/Users/{user_id}/PlayedItems/{item_id}")
async def mark_played(item_id: str, projector: Projector) -> Response:
    raw_id = _library_id(projector, item_id)
    record = await set_played(projector.db, projector.user_id, raw_id, True)
    return jf_response(projector.make_user_data(raw_id, record))


@router.delete("/UserPlayedItems/{item_id}")
@router.delete("/Users/{user_id}/PlayedItems/{item_id}")
async def mark_unplayed(item_id: str, projector: Projector) -> Response:
    raw_id = _library_id(projector, item_id)
    record = await set_played(projector.db, projector.user_id, raw_id, False)
    return jf_response(projector.make_user_data(raw_id, record))


# ==================== FAVORITES ====================


@router.post("/UserFavoriteItems/{item_id}")
@router.post("/Users/{user_id}/FavoriteItems/{item_id}")
async def mark_favorite(item_id: str, projector: Projector) -> Response:
    raw_id = _library_id(projector, item_id)
    record = await set_favorite(projector.db, projector.user_id, raw_id, True)
    return jf_response(projector.make_user_data(raw_id, record))


@router.delete("/UserFavoriteItems/{item_id}")
@router.delete("/Users/{user_id}/FavoriteItems/{item_id}")
async def unmark_favorite(item_id: str, projector: Projector) -> Response:
    raw_id = _library_id(projector, item_id)
    record = await set_favorite(projector.db, projector.user_id, raw_id, False)
    return jf_response(projector.make_user_data(raw_id, record))
