"""Library level endpoints: user views and media folders."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response

from src.api.deps import get_projector, jf_response
from src.auth import RequestContext, get_request_context
from src.models.jellyfin import JFMediaLibrary, JFNameId, JFUserItemsResponse
from src.services.jellyfin import ItemProjector

router = APIRouter()
logger = logging.getLogger(__name__)

Projector = Annotated[ItemProjector, Depends(get_projector)]


@router.get("/UserViews")
@router.get("/Users/{user_id}/Views")
@router.get("/Library/MediaFolders")
async def get_user_views(projector: Projector) -> Response:
    """Top level folders shown on the home screen."""
    items = await projector.root_overview()
    return jf_response(JFUserItemsResponse(items=items, total_record_count=len(items)))


@router.get("/Users/{user_id}/GroupingOptions")
async def get_grouping_options(projector: Projector) -> Response:
    result = []
    for collection in projector.collections.get_collections():
        item = await projector.make_collection(collection)
        result.append(JFNameId(name=item.name, id=item.id))
    return jf_response(result)


@router.get("/Library/VirtualFolders")
async def get_virtual_folders(projector: Projector) -> Response:
    libraries = []
    for collection in projector.collections.get_collections():
        item = await projector.make_collection(collection)
        libraries.append(JFMediaLibrary(
            name=item.name,
            item_id=item.id,
            primary_image_item_id=item.id,
            collection_type=item.collection_type,
            locations=["/"],
        ))
    return jf_response(libraries)


@router.post("/Library/Refresh")
async def refresh_library(
    context: Annotated[RequestContext, Depends(get_request_context)],
) -> Response:
    logger.info(f"Library refresh requested by {context.user.username}, ignoring")
    return Response(status_code=204)
