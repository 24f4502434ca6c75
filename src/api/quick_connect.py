"""QuickConnect device pairing.

A new device initiates a request and shows its code. A logged in user
authorizes the code, after which the device polls with its secret and
exchanges it for an access token.
"""

import logging
from datetime import timedelta
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import jf_response, parse_body
from src.api.users import make_jf_user, make_session_info
from src.auth import AuthScheme, RequestContext, get_auth_scheme, get_request_context, issue_token
from src.auth.dependencies import remote_address
from src.config import get_settings
from src.constants import QUICK_CONNECT_CODE_VALIDITY_MINUTES
from src.db import crud, get_db
from src.db.errors import NotFoundError
from src.models.base import as_utc, utcnow
from src.models.jellyfin import (
    JFAuthenticateByNameResponse,
    JFQuickConnectAuthRequest,
    JFQuickConnectResult,
)
from src.models.quick_connect import QuickConnectCode
from src.utils.idhash import new_random_id
from src.utils.secrets import generate_numeric_code

router = APIRouter()
logger = logging.getLogger(__name__)

Authenticated = Annotated[RequestContext, Depends(get_request_context)]
Session = Annotated[AsyncSession, Depends(get_db)]


def _require_enabled() -> None:
    if not get_settings().quickconnect_enabled:
        raise HTTPException(status_code=401, detail="QuickConnect is disabled")


def _is_expired(entry: QuickConnectCode) -> bool:
    age = utcnow() - as_utc(entry.created)
    return age > timedelta(minutes=QUICK_CONNECT_CODE_VALIDITY_MINUTES)


def make_quick_connect_result(entry: QuickConnectCode) -> JFQuickConnectResult:
    return JFQuickConnectResult(
        authenticated=entry.authorized,
        secret=entry.secret,
        code=entry.code,
        device_id=entry.device_id,
        device_name=entry.device_name,
        app_name=entry.application_name,
        app_version=entry.application_version,
        date_added=as_utc(entry.created),
    )


async def _get_by_secret(db: AsyncSession, secret: str) -> QuickConnectCode:
    if not secret:
        raise HTTPException(status_code=400, detail="secret is required")
    try:
        return await crud.get_quick_connect_code_by_secret(db, secret)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="unknown secret") from None


@router.get("/QuickConnect/Enabled")
async def quick_connect_enabled() -> Response:
    return jf_response(get_settings().quickconnect_enabled)


@router.api_route("/QuickConnect/Initiate", methods=["GET", "POST"])
async def quick_connect_initiate(request: Request, db: Session) -> Response:
    _require_enabled()
    scheme: AuthScheme = get_auth_scheme(request)
    entry = QuickConnectCode(
        secret=new_random_id(),
        code=generate_numeric_code(6),
        device_id=scheme.device_id,
        device_name=scheme.device,
        application_name=scheme.client,
        application_version=scheme.version,
        authorized=False,
        created=utcnow(),
    )
    entry = await crud.upsert_quick_connect_code(db, entry)
    logger.info(f"QuickConnect initiated by {scheme.device or 'unknown device'}")
    return jf_response(make_quick_connect_result(entry))


@router.get("/QuickConnect/Connect")
async def quick_connect_connect(request: Request, db: Session) -> Response:
    entry = await _get_by_secret(db, request.query_params.get("secret", ""))
    return jf_response(make_quick_connect_result(entry))


@router.api_route("/QuickConnect/Authorize", methods=["GET", "POST"])
async def quick_connect_authorize(request: Request, context: Authenticated, db: Session) -> Response:
    _require_enabled()
    code = request.query_params.get("code", "")
    if not code:
        raise HTTPException(status_code=400, detail="code is required")
    try:
        entry = await crud.get_quick_connect_code_by_code(db, code)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="unknown code") from None
    if _is_expired(entry):
        raise HTTPException(status_code=404, detail="code expired")

    entry.authorized = True
    entry.user_id = context.user.id
    await crud.upsert_quick_connect_code(db, entry)
    logger.info(f"{context.user.username} authorized QuickConnect code for {entry.device_name}")
    return jf_response(True)


@router.post("/Users/AuthenticateWithQuickConnect")
async def authenticate_with_quick_connect(
    request: Request,
    db: Session,
    body: Annotated[Any, Body()] = None,
) -> Response:
    """Exchange the secret of an authorized request for an access token."""
    _require_enabled()
    auth = parse_body(body, JFQuickConnectAuthRequest)
    entry = await _get_by_secret(db, auth.secret)
    if not entry.authorized or not entry.user_id or _is_expired(entry):
        raise HTTPException(status_code=401, detail="QuickConnect request is not authorized")
    try:
        user = await crud.get_user_by_id(db, entry.user_id)
    except NotFoundError:
        raise HTTPException(status_code=401, detail="QuickConnect user no longer exists") from None

    scheme = get_auth_scheme(request)
    if not scheme.device_id:
        scheme.device_id = entry.device_id
    token = await issue_token(db, user, scheme, remote_address(request))
    logger.info(f"User {user.username} logged in with QuickConnect on {scheme.device}")
    return jf_response(JFAuthenticateByNameResponse(
        user=await make_jf_user(db, user),
        session_info=make_session_info(user, token),
        access_token=token.token,
        server_id=get_settings().server_id,
    ))
