"""Login, access token issuing and user creation."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.passwords import hash_password, verify_password
from src.auth.scheme import AuthScheme
from src.db import crud
from src.db.errors import ConflictError, NotFoundError
from src.models.base import utcnow
from src.models.user import AccessToken, User
from src.services.imaging import content_etag, make_identicon
from src.utils.idhash import new_random_id
from src.utils.secrets import generate_access_token, mask_secret

logger = logging.getLogger(__name__)

RESERVED_USERNAMES = {"new", "me"}
PROFILE_IMAGE_TYPE = "Profile"


class AuthenticationError(Exception):
    """Raised when a username and password do not match."""


async def create_user(
    db: AsyncSession, username: str, password: str, is_admin: bool = False
) -> User:
    """Create a user with a hashed password and a generated avatar.

    Raises ConflictError if the name is taken, ValueError if it is not allowed.
    """
    username = username.strip()
    if not username or username.lower() in RESERVED_USERNAMES:
        raise ValueError(f"username {username!r} is not allowed")
    try:
        await crud.get_user(db, username)
    except NotFoundError:
        pass
    else:
        raise ConflictError(f"user {username} already exists")

    if not is_admin and not await crud.get_users(db):
        # The first account administers the server
        is_admin = True

    user = User(
        id=new_random_id(),
        username=username.lower(),
        password=hash_password(password),
        properties={"IsAdministrator": is_admin},
    )
    user = await crud.upsert_user(db, user)

    avatar = make_identicon(user.id)
    await crud.store_image(db, user.id, PROFILE_IMAGE_TYPE, "image/png", content_etag(avatar), avatar)
    logger.info(f"Created user {user.username} (admin={is_admin})")
    return user


async def authenticate_user(
    db: AsyncSession, username: str, password: str, auto_register: bool = False
) -> User:
    """Check a username and password.

    With auto_register, an unknown username is created with the given
    password. Raises AuthenticationError on mismatch.
    """
    try:
        user = await crud.get_user(db, username)
    except NotFoundError:
        if not auto_register:
            logger.info(f"Login failed for unknown user {username}")
            raise AuthenticationError("invalid username or password") from None
        return await create_user(db, username, password)

    if user.is_disabled or not verify_password(password, user.password):
        logger.info(f"Login failed for user {username}")
        raise AuthenticationError("invalid username or password")
    return user


async def issue_token(
    db: AsyncSession, user: User, scheme: AuthScheme, remote_address: str
) -> AccessToken:
    """Get the access token of the user's device, creating it on first login."""
    now = utcnow()
    try:
        token = await crud.get_access_token_by_device_id(db, scheme.device_id, user.id)
    except NotFoundError:
        token = AccessToken(
            token=generate_access_token(),
            user_id=user.id,
            device_id=scheme.device_id,
            created=now,
        )
        logger.info(
            f"Issued token {mask_secret(token.token)} to {user.username} "
            f"on device {scheme.device or scheme.device_id}"
        )

    token.device_name = scheme.device
    token.application_name = scheme.client
    token.application_version = scheme.version
    token.remote_address = remote_address
    token.last_used = now
    token = await crud.upsert_access_token(db, token)

    user.last_login = now
    user.last_used = now
    await db.flush()
    return token
