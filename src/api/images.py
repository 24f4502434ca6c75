"""Image endpoints: posters, backdrops and logos from disk, uploaded images from the database.

Image GET endpoints are public since some clients cannot send
credentials with image URLs.
"""

import base64
import binascii
import logging
import os
from email.utils import format_datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import FileResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_collections, get_image_resizer, jf_response
from src.auth import RequestContext, get_request_context, require_self
from src.auth.sessions import PROFILE_IMAGE_TYPE
from src.constants import (
    CACHE_MAX_AGE_IMAGE,
    CACHE_MAX_AGE_IMAGE_REDIRECT,
    MAX_IMAGE_UPLOAD_BYTES,
    TAG_PREFIX_REDIRECT,
)
from src.db import crud, get_db
from src.db.errors import NotFoundError
from src.models.base import as_utc
from src.models.image import Image
from src.services.imaging import (
    ImageResizer,
    content_etag,
    file_etag,
    mime_type_by_extension,
    sniff_mime_type,
)
from src.services.jellyfin import IdKind, decode_name, detect_kind, trim_prefix
from src.services.jellyfin.ids import make_genre_id, make_studio_id
from src.services.jellyfin.items import IMAGE_TYPE_PRIMARY
from src.services.library import CollectionRepo, Episode, Season

router = APIRouter()
logger = logging.getLogger(__name__)

Authenticated = Annotated[RequestContext, Depends(get_request_context)]
Session = Annotated[AsyncSession, Depends(get_db)]
Collections = Annotated[CollectionRepo, Depends(get_collections)]
Resizer = Annotated[ImageResizer, Depends(get_image_resizer)]

# IDs whose images are uploaded rather than read from the library
_STORED_IMAGE_KINDS = (
    IdKind.COLLECTION,
    IdKind.COLLECTION_FAVORITES,
    IdKind.COLLECTION_PLAYLIST,
    IdKind.GENRE,
    IdKind.STUDIO,
)


def canonical_image_type(image_type: str) -> str:
    """'primary' and 'PRIMARY' both become 'Primary'."""
    return image_type[:1].upper() + image_type[1:].lower()


def _int_param(request: Request, name: str) -> int | None:
    value = request.query_params.get(name)
    if not value:
        return None
    try:
        return int(float(value))
    except (ValueError, OverflowError):
        raise HTTPException(status_code=400, detail=f"invalid {name}") from None


# ==================== SERVING ====================


def stored_image_response(image: Image) -> Response:
    return Response(
        content=image.data,
        media_type=image.mime_type,
        headers={
            "etag": image.etag,
            "last-modified": format_datetime(as_utc(image.updated), usegmt=True),
        },
    )


async def _serve_stored(db: AsyncSession, owner_id: str, image_type: str) -> Response:
    try:
        image = await crud.get_image(db, owner_id, image_type)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="image not found") from None
    return stored_image_response(image)


def _serve_file(path: str) -> Response:
    if not os.path.isfile(path):
        raise HTTPException(status_code=404, detail="image file not found")
    return FileResponse(
        path,
        media_type=mime_type_by_extension(path),
        headers={
            "etag": file_etag(path),
            "cache-control": f"max-age={CACHE_MAX_AGE_IMAGE}",
        },
    )


def _image_file(item, image_type: str) -> tuple[str, bool]:
    """File name relative to the item directory and whether it may be resized.

    The file name is empty if the item has no image of that type.
    """
    if image_type == "Primary":
        return (item.thumb if isinstance(item, Episode) else item.poster), True
    if isinstance(item, Season | Episode):
        return "", False
    if image_type == "Backdrop":
        return item.fanart, False
    if image_type == "Logo":
        return item.logo, True
    return "", False


async def _serve_library_image(
    request: Request,
    collections: CollectionRepo,
    resizer: ImageResizer,
    item_id: str,
    image_type: str,
) -> Response:
    found = collections.find(trim_prefix(item_id))
    if found is None:
        raise HTTPException(status_code=404, detail="item not found")
    collection, item = found

    directory = item.path
    file_name, resizable = _image_file(item, image_type)
    if isinstance(item, Season):
        show = collections.get_show_by_id(item.show_id)
        if not file_name and show is not None:
            file_name = show[1].season_all_poster
    if not file_name:
        logger.debug(f"No {image_type} image for {item_id}")
        raise HTTPException(status_code=404, detail=f"{image_type} image not found")

    path = os.path.join(collection.directory, directory, file_name)
    if resizable and os.path.isfile(path):
        path = await resizer.resize_async(
            path,
            _int_param(request, "maxWidth"),
            _int_param(request, "maxHeight"),
            _int_param(request, "quality"),
        )
    return _serve_file(path)


@router.get("/Items/{item_id}/Images/{image_type}")
@router.get("/Items/{item_id}/Images/{image_type}/{image_index}")
async def get_item_image(
    request: Request,
    item_id: str,
    image_type: str,
    db: Session,
    collections: Collections,
    resizer: Resizer,
) -> Response:
    tag = request.query_params.get("tag", "")
    if tag.startswith(TAG_PREFIX_REDIRECT):
        return RedirectResponse(
            tag[len(TAG_PREFIX_REDIRECT):],
            status_code=302,
            headers={"cache-control": f"max-age={CACHE_MAX_AGE_IMAGE_REDIRECT}"},
        )

    image_type = canonical_image_type(image_type)
    kind = detect_kind(item_id)
    if kind in _STORED_IMAGE_KINDS:
        return await _serve_stored(db, item_id, image_type)
    if kind == IdKind.PERSON:
        name = decode_name(IdKind.PERSON, item_id)
        try:
            person = await crud.get_person_by_name(db, name, "")
        except NotFoundError:
            person = None
        if person is None or not person.poster_url:
            raise HTTPException(status_code=404, detail="person image not found")
        return RedirectResponse(person.poster_url, status_code=302)
    return await _serve_library_image(request, collections, resizer, item_id, image_type)


@router.get("/Genres/{name}/Images/{image_type}")
async def get_genre_image(name: str, image_type: str, db: Session) -> Response:
    return await _serve_stored(db, make_genre_id(name), canonical_image_type(image_type))


@router.get("/Studios/{name}/Images/{image_type}")
async def get_studio_image(name: str, image_type: str, db: Session) -> Response:
    return await _serve_stored(db, make_studio_id(name), canonical_image_type(image_type))


# ==================== UPLOADS ====================


async def read_image_upload(request: Request) -> tuple[bytes, str]:
    """Read an uploaded image, raw or base64 encoded. Returns data and mime type."""
    buffer = bytearray()
    async for chunk in request.stream():
        buffer.extend(chunk)
        if len(buffer) > MAX_IMAGE_UPLOAD_BYTES:
            raise HTTPException(status_code=413, detail="image too large")
    data = bytes(buffer)

    mime_type = sniff_mime_type(data)
    if not mime_type.startswith("image/"):
        try:
            data = base64.b64decode(data)
        except (binascii.Error, ValueError):
            raise HTTPException(status_code=400, detail="uploaded file is not a valid image") from None
        mime_type = sniff_mime_type(data)
        if not mime_type.startswith("image/"):
            raise HTTPException(status_code=400, detail="uploaded file is not a valid image")
    return data, mime_type


@router.post("/Items/{item_id}/Images/{image_type}")
async def upload_item_image(
    request: Request, item_id: str, image_type: str, context: Authenticated, db: Session
) -> Response:
    """Upload a primary image for a collection, virtual folder, genre or studio."""
    image_type = canonical_image_type(image_type)
    if image_type != IMAGE_TYPE_PRIMARY:
        raise HTTPException(status_code=400, detail="only primary images can be uploaded")
    data, mime_type = await read_image_upload(request)
    await crud.store_image(db, item_id, image_type, mime_type, content_etag(data), data)
    logger.info(f"{context.user.username} uploaded {image_type} image for {item_id}")
    return Response(status_code=204)


# ==================== LISTINGS ====================


@router.get("/Items/{item_id}/Images")
async def list_item_images(item_id: str, context: Authenticated, collections: Collections) -> Response:
    found = collections.get_item_by_id(trim_prefix(item_id))
    if found is None:
        raise NotFoundError(f"item {item_id} not found")
    _, item = found
    images = []
    for image_type, file_name in (
        ("Primary", item.poster),
        ("Backdrop", item.fanart),
        ("Logo", item.logo),
    ):
        if file_name:
            images.append({"ImageType": image_type, "ImageIndex": len(images), "ImageTag": item.id})
    return jf_response(images)


@router.get("/Items/{item_id}/RemoteImages")
async def list_remote_images(item_id: str, context: Authenticated) -> Response:
    return jf_response({"Images": [], "TotalRecordCount": 0, "Providers": []})


@router.get("/Items/{item_id}/RemoteImages/Providers")
async def list_remote_image_providers(item_id: str, context: Authenticated) -> Response:
    return jf_response([{"Name": "Local Repository", "SupportedImages": [IMAGE_TYPE_PRIMARY]}])


# ==================== USER IMAGES ====================


def _user_id_param(request: Request) -> str:
    user_id = request.query_params.get("userId")
    if not user_id:
        raise HTTPException(status_code=400, detail="userId parameter is required")
    return user_id


@router.get("/Users/{user_id}/Images/{image_type}")
async def get_user_image(user_id: str, image_type: str, db: Session) -> Response:
    return await _serve_stored(db, user_id, PROFILE_IMAGE_TYPE)


@router.get("/UserImage")
async def get_user_image_by_query(request: Request, db: Session) -> Response:
    return await _serve_stored(db, _user_id_param(request), PROFILE_IMAGE_TYPE)


@router.post("/UserImage")
async def upload_user_image(request: Request, context: Authenticated, db: Session) -> Response:
    user_id = _user_id_param(request)
    require_self(context.user, user_id)
    data, mime_type = await read_image_upload(request)
    await crud.store_image(db, user_id, PROFILE_IMAGE_TYPE, mime_type, content_etag(data), data)
    logger.info(f"{context.user.username} uploaded a profile image")
    return Response(status_code=204)


@router.delete("/UserImage")
async def delete_user_image(request: Request, context: Authenticated, db: Session) -> Response:
    user_id = _user_id_param(request)
    require_self(context.user, user_id)
    await crud.delete_image(db, user_id, PROFILE_IMAGE_TYPE)
    return Response(status_code=204)
