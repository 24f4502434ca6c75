"""Sessions, devices and SyncPlay."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import jf_response
from src.api.users import make_session_info
from src.auth import RequestContext, get_request_context
from src.db import crud, get_db
from src.db.errors import NotFoundError
from src.models.base import as_utc
from src.models.jellyfin import JFDeviceInfoResponse, JFDeviceItem
from src.models.user import AccessToken, User

router = APIRouter()
logger = logging.getLogger(__name__)

Authenticated = Annotated[RequestContext, Depends(get_request_context)]
Session = Annotated[AsyncSession, Depends(get_db)]


def make_device_item(user: User, token: AccessToken) -> JFDeviceItem:
    return JFDeviceItem(
        id=token.device_id,
        name=token.device_name,
        app_name=token.application_name,
        app_version=token.application_version,
        date_last_activity=as_utc(token.last_used),
        last_user_id=user.id,
        last_user_name=user.username,
    )


def _device_id(request: Request) -> str:
    device_id = request.query_params.get("id")
    if not device_id:
        raise HTTPException(status_code=400, detail="device id missing")
    return device_id


async def _device_token(db: AsyncSession, user: User, device_id: str) -> AccessToken:
    for token in await crud.get_access_tokens(db, user.id):
        if token.device_id == device_id:
            return token
    raise NotFoundError(f"device {device_id} not found")


# ==================== SESSIONS ====================


@router.get("/Sessions")
async def get_sessions(context: Authenticated, db: Session) -> Response:
    """One session per device the user is logged in on."""
    tokens = await crud.get_access_tokens(db, context.user.id)
    return jf_response([make_session_info(context.user, t) for t in tokens])


@router.post("/Sessions/Capabilities")
@router.post("/Sessions/Capabilities/Full")
async def post_capabilities(context: Authenticated) -> Response:
    return Response(status_code=204)


@router.post("/Sessions/Logout")
async def logout(context: Authenticated, db: Session) -> Response:
    await crud.delete_access_token(db, context.token.token)
    logger.info(f"User {context.user.username} logged out of {context.token.device_name}")
    return Response(status_code=204)


# ==================== DEVICES ====================


@router.get("/Devices")
async def get_devices(context: Authenticated, db: Session) -> Response:
    tokens = await crud.get_access_tokens(db, context.user.id)
    devices = [make_device_item(context.user, t) for t in tokens]
    return jf_response(JFDeviceInfoResponse(items=devices, total_record_count=len(devices)))


@router.delete("/Devices")
async def delete_device(request: Request, context: Authenticated, db: Session) -> Response:
    """Log out a device by revoking its token."""
    token = await _device_token(db, context.user, _device_id(request))
    await crud.delete_access_token(db, token.token)
    logger.info(f"Revoked device {token.device_id} of {context.user.username}")
    return Response(status_code=204)


@router.get("/Devices/Info")
async def get_device_info(request: Request, context: Authenticated, db: Session) -> Response:
    token = await _device_token(db, context.user, _device_id(request))
    return jf_response(make_device_item(context.user, token))


@router.get("/Devices/Options")
async def get_device_options(request: Request, context: Authenticated) -> Response:
    return jf_response({
        "DeviceId": _device_id(request),
        "CustomName": context.token.device_name,
        "DisableAutoLogin": False,
    })


# ==================== SYNCPLAY ====================


@router.get("/SyncPlay/List")
async def syncplay_list(context: Authenticated) -> Response:
    return jf_response([])


@router.post("/SyncPlay/New")
async def syncplay_new(context: Authenticated) -> Response:
    raise HTTPException(status_code=501, detail="SyncPlay is not supported")
