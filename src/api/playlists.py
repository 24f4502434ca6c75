"""Playlist endpoints."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request, Response

from src.api.deps import get_item_query, get_projector, jf_response, parse_body
from src.api.items import items_response
from src.db import crud
from src.models.jellyfin import JFCreatePlaylistRequest, JFUpdatePlaylistRequest
from src.services.jellyfin import IdKind, ItemProjector, ItemQuery, make_id, trim_prefix, wire_id

router = APIRouter()
logger = logging.getLogger(__name__)

Projector = Annotated[ItemProjector, Depends(get_projector)]
Query = Annotated[ItemQuery, Depends(get_item_query)]


def _id_list(request: Request, name: str) -> list[str]:
    """Raw IDs from a comma separated query parameter."""
    ids = []
    for value in request.query_params.getlist(name):
        ids.extend(trim_prefix(v.strip()) for v in value.split(",") if v.strip())
    return ids


def _access(user_id: str) -> dict[str, Any]:
    return {"Users": [user_id], "CanEdit": True}


@router.post("/Playlists")
async def create_playlist(
    request: Request,
    projector: Projector,
    body: Annotated[Any, Body()] = None,
) -> Response:
    """Create a playlist from a JSON body or from name and ids query parameters."""
    if body is not None:
        create = parse_body(body, JFCreatePlaylistRequest)
        name, item_ids = create.name, [trim_prefix(i) for i in create.ids]
    else:
        name, item_ids = request.query_params.get("name", ""), _id_list(request, "ids")
    if not name:
        raise HTTPException(status_code=400, detail="playlist name is required")

    playlist = await crud.create_playlist(projector.db, projector.user_id, name, item_ids)
    logger.info(f"Created playlist {name} with {len(playlist.item_ids)} items")
    return jf_response({"Id": make_id(IdKind.PLAYLIST, playlist.id)}, status_code=201)


@router.get("/Playlists/{playlist_id}")
async def get_playlist(playlist_id: str, projector: Projector) -> Response:
    playlist = await crud.get_playlist(projector.db, projector.user_id, trim_prefix(playlist_id))
    item_ids = []
    for item_id in playlist.item_ids or []:
        found = projector.collections.find(item_id)
        # Items gone from the library keep their stored ID
        item_ids.append(wire_id(found[1]) if found is not None else item_id)
    return jf_response({"OpenAccess": False, "Shares": [], "ItemIds": item_ids})


@router.post("/Playlists/{playlist_id}")
async def update_playlist(
    playlist_id: str,
    projector: Projector,
    body: Annotated[Any, Body()] = None,
) -> Response:
    """Rename a playlist and/or replace its items."""
    update = parse_body(body, JFUpdatePlaylistRequest)
    playlist = await crud.get_playlist(projector.db, projector.user_id, trim_prefix(playlist_id))
    if update.name:
        await crud.rename_playlist(projector.db, projector.user_id, playlist.id, update.name)
    if update.ids is not None:
        await crud.set_playlist_items(
            projector.db, projector.user_id, playlist.id, [trim_prefix(i) for i in update.ids]
        )
    return Response(status_code=204)


@router.get("/Playlists/{playlist_id}/Items")
async def get_playlist_items(playlist_id: str, projector: Projector, query: Query) -> Response:
    items = await projector.playlist_items(playlist_id)
    return items_response(items, query)


@router.post("/Playlists/{playlist_id}/Items")
async def add_playlist_items(playlist_id: str, request: Request, projector: Projector) -> Response:
    await crud.add_items_to_playlist(
        projector.db, projector.user_id, trim_prefix(playlist_id), _id_list(request, "ids")
    )
    return Response(status_code=204)


@router.delete("/Playlists/{playlist_id}/Items")
async def delete_playlist_items(
    playlist_id: str, request: Request, projector: Projector
) -> Response:
    """Remove entries. Entry IDs are the item IDs."""
    entry_ids = _id_list(request, "entryIds") or _id_list(request, "ids")
    await crud.delete_items_from_playlist(
        projector.db, projector.user_id, trim_prefix(playlist_id), entry_ids
    )
    return Response(status_code=204)


@router.get("/Playlists/{playlist_id}/Items/{item_id}/Move/{new_index}")
@router.post("/Playlists/{playlist_id}/Items/{item_id}/Move/{new_index}")
async def move_playlist_item(
    playlist_id: str, item_id: str, new_index: int, projector: Projector
) -> Response:
    await crud.move_playlist_item(
        projector.db, projector.user_id, trim_prefix(playlist_id), trim_prefix(item_id), new_index
    )
    return Response(status_code=204)


@router.get("/Playlists/{playlist_id}/Users")
async def get_playlist_users(playlist_id: str, projector: Projector) -> Response:
    await crud.get_playlist(projector.db, projector.user_id, trim_prefix(playlist_id))
    return jf_response([_access(projector.user_id)])


@router.get("/Playlists/{playlist_id}/Users/{user_id}")
async def get_playlist_user(playlist_id: str, user_id: str, projector: Projector) -> Response:
    await crud.get_playlist(projector.db, projector.user_id, trim_prefix(playlist_id))
    return jf_response(_access(projector.user_id))
