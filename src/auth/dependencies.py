"""Authentication dependencies for FastAPI."""

import logging
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.scheme import AuthScheme, find_token, get_auth_scheme
from src.db import crud, get_db
from src.db.errors import NotFoundError
from src.models.base import utcnow
from src.models.user import AccessToken, User

logger = logging.getLogger(__name__)


@dataclass
class RequestContext:
    """Identity of an authenticated request."""

    user: User
    token: AccessToken


def remote_address(request: Request) -> str:
    return request.client.host if request.client else ""


def _refresh_token_fields(token: AccessToken, scheme: AuthScheme, address: str) -> bool:
    """Copy changed client details onto the token. Returns True if anything changed."""
    changed = False
    updates = {
        "application_name": scheme.client,
        "application_version": scheme.version,
        "device_name": scheme.device,
        "device_id": scheme.device_id,
        "remote_address": address,
    }
    for attr, value in updates.items():
        if value and getattr(token, attr) != value:
            setattr(token, attr, value)
            changed = True
    return changed


async def get_request_context(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> RequestContext:
    """Resolve the access token of a request to its user, raising 401 if that fails."""
    scheme = get_auth_scheme(request)
    token_value = find_token(request, scheme)
    if not token_value:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="no token provided",
        )

    try:
        token = await crud.get_access_token(db, token_value)
        user = await crud.get_user_by_id(db, token.user_id)
    except NotFoundError:
        logger.info(f"Rejected invalid access token from {remote_address(request)}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid access token",
        ) from None

    if _refresh_token_fields(token, scheme, remote_address(request)):
        logger.debug(f"Updated client details of token for {user.username}")
    now = utcnow()
    token.last_used = now
    user.last_used = now
    await db.flush()

    request.state.user = user
    return RequestContext(user=user, token=token)


async def get_current_user(
    context: Annotated[RequestContext, Depends(get_request_context)],
) -> User:
    return context.user


def require_self(user: User, user_id: str) -> None:
    """Raise 403 unless the user acts on itself."""
    if user.id != user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="forbidden")


def require_self_or_admin(user: User, user_id: str) -> None:
    """Raise 403 unless the user acts on itself or is an administrator."""
    if user.id != user_id and not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="forbidden")
