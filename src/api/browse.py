"""Genre, studio and person endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response

from src.api.deps import get_item_query, get_projector, jf_response
from src.api.items import items_response
from src.db.errors import NotFoundError
from src.models.jellyfin import JFItem
from src.services.jellyfin import ItemProjector, ItemQuery

router = APIRouter()
logger = logging.getLogger(__name__)

Projector = Annotated[ItemProjector, Depends(get_projector)]
Query = Annotated[ItemQuery, Depends(get_item_query)]


async def _source_items(projector: ItemProjector, query: ItemQuery) -> list[JFItem]:
    if query.parent_id:
        return await projector.items_by_parent(query.parent_id)
    return await projector.all_items()


def _page(items: list[JFItem], query: ItemQuery) -> Response:
    """Sort and paginate. Item filters do not apply to facet lists."""
    page_query = ItemQuery(
        sort_by=query.sort_by,
        sort_descending=query.sort_descending,
        start_index=query.start_index,
        limit=query.limit,
    )
    return items_response(items, page_query)


# ==================== GENRES ====================


@router.get("/Genres")
async def get_genres(projector: Projector, query: Query) -> Response:
    """Genres of the items under parentId, or of the whole library."""
    counts = projector.collections.genre_item_count()
    seen: set[str] = set()
    genres = []
    for item in await _source_items(projector, query):
        for genre in item.genres:
            if genre in seen:
                continue
            seen.add(genre)
            genres.append(await projector.make_genre(genre, counts.get(genre, 1)))
    return _page(genres, query)


@router.get("/Genres/{name}")
async def get_genre(name: str, projector: Projector) -> Response:
    if name not in projector.collections.genre_item_count():
        raise NotFoundError(f"genre {name} not found")
    return jf_response(await projector.make_genre(name))


# ==================== STUDIOS ====================


@router.get("/Studios")
async def get_studios(projector: Projector, query: Query) -> Response:
    counts = projector.collections.studio_item_count()
    seen: set[str] = set()
    studios = []
    for item in await _source_items(projector, query):
        for studio in item.studios:
            if studio.name in seen:
                continue
            seen.add(studio.name)
            studios.append(await projector.make_studio(studio.name, counts.get(studio.name, 1)))
    return _page(studios, query)


@router.get("/Studios/{name}")
async def get_studio(name: str, projector: Projector) -> Response:
    if name not in projector.collections.studio_item_count():
        raise NotFoundError(f"studio {name} not found")
    return jf_response(await projector.make_studio(name))


# ==================== PERSONS ====================


@router.get("/Persons")
async def get_persons(projector: Projector, query: Query) -> Response:
    """Everyone credited in the library, or the matches of searchTerm."""
    counts = projector.collections.person_item_count()
    if query.search_term:
        names = projector.collections.search_person(query.search_term)
    else:
        names = sorted(counts)
    logger.debug(f"Listing {len(names)} persons")
    persons = [await projector.make_person(name, counts.get(name, 1)) for name in names]
    return items_response(persons, query.without(search_term=None))


@router.get("/Persons/{name}")
async def get_person(name: str, projector: Projector) -> Response:
    if name not in projector.collections.person_item_count():
        raise NotFoundError(f"person {name} not found")
    return jf_response(await projector.make_person(name))
