"""Main API router.

Jellyfin clients expect every endpoint at the server root, so routers
are mounted without a prefix.
"""

from fastapi import APIRouter

from src.api.branding import router as branding_router
from src.api.browse import router as browse_router
from src.api.images import router as images_router
from src.api.items import router as items_router
from src.api.library import router as library_router
from src.api.playlists import router as playlists_router
from src.api.playstate import router as playstate_router
from src.api.quick_connect import router as quick_connect_router
from src.api.sessions import router as sessions_router
from src.api.shows import router as shows_router
from src.api.system import router as system_router
from src.api.users import router as users_router
from src.api.videos import router as videos_router

api_router = APIRouter()

api_router.include_router(system_router, tags=["system"])
api_router.include_router(users_router, tags=["users"])
api_router.include_router(quick_connect_router, tags=["quickconnect"])
api_router.include_router(library_router, tags=["library"])
# Shows and browse before items so /Items/{id} does not shadow them
api_router.include_router(shows_router, tags=["shows"])
api_router.include_router(browse_router, tags=["browse"])
api_router.include_router(playlists_router, tags=["playlists"])
api_router.include_router(playstate_router, tags=["playstate"])
api_router.include_router(sessions_router, tags=["sessions"])
api_router.include_router(images_router, tags=["images"])
api_router.include_router(items_router, tags=["items"])
api_router.include_router(videos_router, tags=["videos"])
api_router.include_router(branding_router, tags=["branding"])
