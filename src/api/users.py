"""User and login endpoints."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import jf_response, parse_body
from src.auth import (
    AuthenticationError,
    RequestContext,
    authenticate_user,
    create_user,
    get_auth_scheme,
    get_request_context,
    hash_password,
    issue_token,
    require_self_or_admin,
    verify_password,
)
from src.auth.dependencies import remote_address
from src.auth.sessions import PROFILE_IMAGE_TYPE
from src.config import get_settings
from src.db import crud, get_db
from src.db.errors import ConflictError, NotFoundError
from src.models.base import as_utc
from src.models.jellyfin import (
    JFAuthenticateByNameResponse,
    JFAuthenticateUserByNameRequest,
    JFCreateUserRequest,
    JFSessionInfo,
    JFUpdatePasswordRequest,
    JFUser,
    JFUserConfiguration,
    JFUserPolicy,
)
from src.models.user import AccessToken, User
from src.utils.idhash import id_hash

router = APIRouter()
logger = logging.getLogger(__name__)

Authenticated = Annotated[RequestContext, Depends(get_request_context)]
Session = Annotated[AsyncSession, Depends(get_db)]

# Policy flags a user record keeps in its properties
POLICY_FLAGS = ("IsAdministrator", "IsHidden", "IsDisabled")


async def make_jf_user(db: AsyncSession, user: User) -> JFUser:
    """User document, with the profile image tag if an avatar is stored."""
    properties = user.properties or {}
    image = await crud.has_image(db, user.id, PROFILE_IMAGE_TYPE)
    policy = JFUserPolicy(
        is_administrator=user.is_admin,
        is_hidden=user.is_hidden,
        is_disabled=user.is_disabled,
    )
    return JFUser(
        name=user.username,
        server_id=get_settings().server_id,
        id=user.id,
        primary_image_tag=image.etag if image is not None else None,
        last_login_date=as_utc(user.last_login),
        last_activity_date=as_utc(user.last_used),
        configuration=JFUserConfiguration.model_validate(properties.get("Configuration", {})),
        policy=policy,
    )


def make_session_info(user: User, token: AccessToken) -> JFSessionInfo:
    return JFSessionInfo(
        id=id_hash(token.token),
        user_id=user.id,
        user_name=user.username,
        client=token.application_name,
        device_name=token.device_name,
        device_id=token.device_id,
        application_version=token.application_version,
        remote_end_point=token.remote_address,
        last_activity_date=as_utc(token.last_used),
        last_playback_check_in=as_utc(token.last_used),
        server_id=get_settings().server_id,
        is_active=True,
    )


# ==================== LOGIN ====================


@router.post("/Users/AuthenticateByName")
async def authenticate_by_name(
    request: Request,
    db: Session,
    body: Annotated[Any, Body()] = None,
) -> Response:
    """Log in with a username and password and get an access token."""
    credentials = parse_body(body, JFAuthenticateUserByNameRequest)
    scheme = get_auth_scheme(request)
    try:
        user = await authenticate_user(
            db, credentials.username, credentials.pw, get_settings().auto_register
        )
    except AuthenticationError as e:
        raise HTTPException(status_code=401, detail=str(e)) from None

    token = await issue_token(db, user, scheme, remote_address(request))
    logger.info(f"User {user.username} logged in from {scheme.client} on {scheme.device}")
    return jf_response(JFAuthenticateByNameResponse(
        user=await make_jf_user(db, user),
        session_info=make_session_info(user, token),
        access_token=token.token,
        server_id=get_settings().server_id,
    ))


# ==================== LISTING ====================


def _flag(request: Request, name: str) -> bool | None:
    value = request.query_params.get(name)
    if value is None:
        return None
    return value.lower() == "true"


@router.get("/Users")
async def get_users(request: Request, context: Authenticated, db: Session) -> Response:
    """Users visible to the caller. Administrators see everyone."""
    is_hidden = _flag(request, "isHidden")
    is_disabled = _flag(request, "isDisabled")
    result = []
    for user in await crud.get_users(db):
        if not context.user.is_admin and user.id != context.user.id and user.is_hidden:
            continue
        if is_hidden is not None and user.is_hidden != is_hidden:
            continue
        if is_disabled is not None and user.is_disabled != is_disabled:
            continue
        result.append(await make_jf_user(db, user))
    return jf_response(result)


@router.get("/Users/Public")
async def get_public_users(db: Session) -> Response:
    users = [u for u in await crud.get_users(db) if not u.is_hidden and not u.is_disabled]
    return jf_response([await make_jf_user(db, u) for u in users])


@router.get("/Users/Me")
async def get_me(context: Authenticated, db: Session) -> Response:
    return jf_response(await make_jf_user(db, context.user))


@router.get("/Users/{user_id}")
async def get_user(user_id: str, context: Authenticated, db: Session) -> Response:
    user = await crud.get_user_by_id(db, user_id)
    return jf_response(await make_jf_user(db, user))


# ==================== MANAGEMENT ====================


@router.post("/Users/New")
async def create_new_user(
    context: Authenticated,
    db: Session,
    body: Annotated[Any, Body()] = None,
) -> Response:
    if not context.user.is_admin:
        raise HTTPException(status_code=403, detail="forbidden")
    request_body = parse_body(body, JFCreateUserRequest)
    try:
        user = await create_user(db, request_body.name, request_body.password)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    except ConflictError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    return jf_response(await make_jf_user(db, user))


@router.post("/Users")
async def update_user(
    request: Request,
    context: Authenticated,
    db: Session,
    body: Annotated[Any, Body()] = None,
) -> Response:
    """Update name, policy and configuration of the user given by ?userId=."""
    user_id = request.query_params.get("userId") or context.user.id
    require_self_or_admin(context.user, user_id)
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="invalid request body")
    user = await crud.get_user_by_id(db, user_id)

    name = body.get("Name")
    if name and name.lower() != user.username:
        try:
            await crud.get_user(db, name)
        except NotFoundError:
            user.username = name.lower()
        else:
            raise HTTPException(status_code=400, detail=f"user {name} already exists")

    if isinstance(body.get("Configuration"), dict):
        _store_configuration(user, body["Configuration"])
    if isinstance(body.get("Policy"), dict) and context.user.is_admin:
        _store_policy(user, body["Policy"], is_self=user.id == context.user.id)
    await db.flush()
    return Response(status_code=204)


@router.post("/Users/Password")
async def update_password(
    request: Request,
    context: Authenticated,
    db: Session,
    body: Annotated[Any, Body()] = None,
) -> Response:
    user_id = request.query_params.get("userId") or context.user.id
    require_self_or_admin(context.user, user_id)
    request_body = parse_body(body, JFUpdatePasswordRequest)
    user = await crud.get_user_by_id(db, user_id)
    if not context.user.is_admin and not verify_password(request_body.current_pw, user.password):
        raise HTTPException(status_code=403, detail="invalid current password")
    user.password = hash_password(request_body.new_pw)
    await db.flush()
    logger.info(f"Password changed for {user.username}")
    return Response(status_code=204)


@router.delete("/Users/{user_id}")
async def delete_user(user_id: str, context: Authenticated, db: Session) -> Response:
    if not context.user.is_admin or user_id == context.user.id:
        raise HTTPException(status_code=403, detail="forbidden")
    await crud.delete_user(db, user_id)
    logger.info(f"Deleted user {user_id}")
    return Response(status_code=204)


@router.post("/Users/{user_id}/Configuration")
async def update_configuration(
    user_id: str,
    context: Authenticated,
    db: Session,
    body: Annotated[Any, Body()] = None,
) -> Response:
    require_self_or_admin(context.user, user_id)
    user = await crud.get_user_by_id(db, user_id)
    if isinstance(body, dict):
        _store_configuration(user, body)
        await db.flush()
    return Response(status_code=204)


@router.post("/Users/{user_id}/Policy")
async def update_policy(
    user_id: str,
    context: Authenticated,
    db: Session,
    body: Annotated[Any, Body()] = None,
) -> Response:
    require_self_or_admin(context.user, user_id)
    user = await crud.get_user_by_id(db, user_id)
    if isinstance(body, dict) and context.user.is_admin:
        _store_policy(user, body, is_self=user.id == context.user.id)
        await db.flush()
    return Response(status_code=204)


def _store_configuration(user: User, configuration: dict) -> None:
    config = JFUserConfiguration.model_validate(configuration)
    properties = dict(user.properties or {})
    properties["Configuration"] = config.to_wire()
    user.properties = properties


def _store_policy(user: User, policy: dict, is_self: bool) -> None:
    """Store policy flags. Administrators cannot revoke their own admin flag."""
    properties = dict(user.properties or {})
    for key in POLICY_FLAGS:
        if key not in policy:
            continue
        if key == "IsAdministrator" and is_self:
            continue
        properties[key] = bool(policy[key])
    user.properties = properties
