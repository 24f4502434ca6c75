"""Main FastAPI application."""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from src.api import api_router
from src.api.errors import register_exception_handlers
from src.api.middleware import MediaAwareGZipMiddleware, RequestNormalizerMiddleware
from src.config import Settings, get_settings
from src.constants import SERVER_VERSION
from src.db import init_db
from src.services.library import CollectionRepo
from src.utils.logging import get_logger, setup_logging

settings = get_settings()
setup_logging()
logger = get_logger(__name__)


def build_collections(settings: Settings) -> CollectionRepo:
    """Register the configured collections, without scanning them."""
    repo = CollectionRepo()
    for entry in settings.collections:
        collection = repo.add_collection(entry.name, entry.type, entry.directory, entry.id)
        logger.info(f"Collection {collection.name} ({collection.type}) at {collection.directory}")
    return repo


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup
    await init_db()
    logger.info("Database initialized")

    collections = build_collections(settings)
    await asyncio.to_thread(collections.scan)
    for collection in collections.get_collections():
        logger.info(f"Scanned {collection.name}: {len(collection.items)} items")
    app.state.collections = collections

    yield

    logger.info("Application shutdown complete")


app = FastAPI(
    title=settings.app_name,
    version=SERVER_VERSION,
    lifespan=lifespan,
)

# Middleware (order matters - first added = last executed)
app.add_middleware(MediaAwareGZipMiddleware, minimum_size=500)  # Compress responses > 500 bytes

# Jellyfin clients run on arbitrary origins (web client, TV apps)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Runs before routing so that case and prefix variants reach the right route
app.add_middleware(RequestNormalizerMiddleware, routes=app.router.routes)

register_exception_handlers(app)

# Routers
app.include_router(api_router)


@app.get("/health", include_in_schema=True, tags=["monitoring"])
async def health_check() -> PlainTextResponse:
    """Health check endpoint for monitoring and load balancers."""
    return PlainTextResponse("Healthy", headers={"cache-control": "no-cache, no-store"})


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8096)
