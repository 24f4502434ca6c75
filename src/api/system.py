"""System information and server level endpoints."""

import logging
import secrets
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from src.api.deps import jf_response
from src.auth import RequestContext, get_request_context
from src.config import get_settings
from src.constants import (
    BITRATE_TEST_DEFAULT_BYTES,
    BITRATE_TEST_MAX_BYTES,
    OPERATING_SYSTEM,
    PRODUCT_NAME,
    SERVER_VERSION,
)
from src.models.base import utcnow
from src.models.jellyfin import JFSystemInfoPublicResponse, JFSystemInfoResponse
from src.utils.idhash import id_hash

router = APIRouter()
logger = logging.getLogger(__name__)

Authenticated = Annotated[RequestContext, Depends(get_request_context)]


def local_address(request: Request) -> str:
    return f"{request.url.scheme}://{request.url.netloc}"


@router.get("/System/Info/Public")
async def system_info_public(request: Request) -> Response:
    """Unauthenticated server identity, used by clients to find the server."""
    settings = get_settings()
    return jf_response(JFSystemInfoPublicResponse(
        local_address=local_address(request),
        server_name=settings.server_name,
        version=SERVER_VERSION,
        product_name=PRODUCT_NAME,
        operating_system=OPERATING_SYSTEM,
        id=settings.server_id,
    ))


@router.get("/System/Info")
async def system_info(request: Request, context: Authenticated) -> Response:
    settings = get_settings()
    return jf_response(JFSystemInfoResponse(
        local_address=local_address(request),
        server_name=settings.server_name,
        version=SERVER_VERSION,
        product_name=PRODUCT_NAME,
        operating_system=OPERATING_SYSTEM,
        operating_system_display_name=OPERATING_SYSTEM,
        id=settings.server_id,
    ))


@router.get("/System/Ping")
@router.post("/System/Ping")
async def system_ping() -> Response:
    return jf_response(PRODUCT_NAME)


@router.get("/System/Endpoint")
async def system_endpoint(context: Authenticated) -> Response:
    return jf_response({"IsLocal": False, "IsInNetwork": False})


@router.get("/System/Logs")
async def system_logs(context: Authenticated) -> Response:
    return jf_response([])


@router.post("/System/Restart")
@router.post("/System/Shutdown")
async def system_restart(context: Authenticated) -> Response:
    raise HTTPException(status_code=403, detail="not allowed")


@router.get("/ScheduledTasks")
async def scheduled_tasks(context: Authenticated) -> Response:
    return jf_response([{
        "Name": "Scan collections",
        "State": "Idle",
        "Id": id_hash("Scan collections"),
        "Category": "Library",
        "Description": "Scans collection directories for new and changed media.",
        "IsHidden": False,
        "Key": "RefreshLibrary",
        "Triggers": [],
    }])


@router.get("/Playback/BitrateTest")
async def bitrate_test(request: Request, context: Authenticated) -> Response:
    """Random payload clients download to estimate the connection speed."""
    size_param = request.query_params.get("size")
    size = BITRATE_TEST_DEFAULT_BYTES
    if size_param:
        try:
            size = int(size_param)
        except ValueError:
            raise HTTPException(status_code=400, detail="invalid size") from None
        if size <= 0 or size > BITRATE_TEST_MAX_BYTES:
            raise HTTPException(status_code=400, detail="invalid size")
    return Response(content=secrets.token_bytes(size), media_type="application/octet-stream")


@router.get("/GetUtcTime")
async def get_utc_time() -> Response:
    now = utcnow().isoformat()
    return jf_response({"RequestReceptionTime": now, "ResponseTransmissionTime": now})


@router.get("/Plugins")
async def plugins(context: Authenticated) -> Response:
    return jf_response([])
