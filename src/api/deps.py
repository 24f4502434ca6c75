"""Shared dependencies of the API routers."""

from functools import lru_cache
from typing import Annotated, Any, TypeVar

from fastapi import Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth import RequestContext, get_request_context
from src.config import get_settings
from src.db import get_db
from src.models.jellyfin import JFModel
from src.services.imaging import ImageResizer
from src.services.jellyfin import ItemProjector, ItemQuery
from src.services.library import CollectionRepo

JFModelT = TypeVar("JFModelT", bound=JFModel)


def get_collections(request: Request) -> CollectionRepo:
    """The media library scanned at startup."""
    return request.app.state.collections


@lru_cache
def get_image_resizer() -> ImageResizer:
    settings = get_settings()
    return ImageResizer(settings.image_cache_dir, settings.image_quality_poster)


async def get_projector(
    db: Annotated[AsyncSession, Depends(get_db)],
    collections: Annotated[CollectionRepo, Depends(get_collections)],
    context: Annotated[RequestContext, Depends(get_request_context)],
) -> ItemProjector:
    return ItemProjector(db, collections, context.user.id, get_settings().server_id)


def get_item_query(request: Request) -> ItemQuery:
    """Filter, sort and paging parameters of the request."""
    return ItemQuery.from_params(request.query_params)


def wire(value: JFModel | list[JFModel] | Any) -> Any:
    """Serialize wire models, or lists of them, to plain JSON values."""
    if isinstance(value, JFModel):
        return value.to_wire()
    if isinstance(value, list):
        return [wire(v) for v in value]
    return value


def jf_response(value: JFModel | list[JFModel] | Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse(content=wire(value), status_code=status_code)


def parse_body(body: Any, model: type[JFModelT]) -> JFModelT:
    """Validate a JSON request body against a wire model, 400 when it does not fit."""
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="invalid request body")
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=f"invalid request body: {e.error_count()} errors") from None
