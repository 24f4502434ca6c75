"""SQLAlchemy models."""

from src.models.base import Base
from src.models.image import Image
from src.models.person import Person
from src.models.playlist import Playlist
from src.models.quick_connect import QuickConnectCode
from src.models.user import AccessToken, User
from src.models.user_data import UserData

__all__ = [
    "Base",
    "User",
    "AccessToken",
    "UserData",
    "Playlist",
    "Image",
    "Person",
    "QuickConnectCode",
]
