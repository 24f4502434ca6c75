"""Video file streaming. Public, like the image endpoints."""

import logging
import os
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import FileResponse

from src.api.deps import get_collections
from src.services.imaging import mime_type_by_extension
from src.services.jellyfin import trim_prefix
from src.services.library import CollectionRepo, Season, Show

router = APIRouter()
logger = logging.getLogger(__name__)

Collections = Annotated[CollectionRepo, Depends(get_collections)]


def video_path(collections: CollectionRepo, item_id: str) -> str:
    """Absolute path of the video file of a movie or episode."""
    found = collections.find(trim_prefix(item_id))
    if found is None:
        raise HTTPException(status_code=404, detail="item not found")
    collection, item = found
    if isinstance(item, Show | Season) or not item.file_name:
        raise HTTPException(status_code=404, detail="item has no video file")
    return os.path.join(collection.directory, item.path, item.file_name)


@router.get("/Videos/{item_id}/stream")
@router.get("/Videos/{item_id}/stream.{container}")
async def stream_video(item_id: str, collections: Collections) -> Response:
    """Serve the file as is. Range requests are handled by FileResponse."""
    path = video_path(collections, item_id)
    if not os.path.isfile(path):
        logger.warning(f"Video file missing: {path}")
        raise HTTPException(status_code=404, detail="video file not found")
    return FileResponse(path, media_type=mime_type_by_extension(path))
