"""CRUD operations module."""

from src.db.crud.images import delete_image, get_image, has_image, store_image
from src.db.crud.persons import get_person_by_name, upsert_person
from src.db.crud.playlists import (
    add_items_to_playlist,
    create_playlist,
    delete_items_from_playlist,
    get_playlist,
    get_playlists,
    move_playlist_item,
    rename_playlist,
    set_playlist_items,
)
from src.db.crud.quick_connect import (
    get_quick_connect_code_by_code,
    get_quick_connect_code_by_secret,
    upsert_quick_connect_code,
)
from src.db.crud.tokens import (
    delete_access_token,
    get_access_token,
    get_access_token_by_device_id,
    get_access_tokens,
    upsert_access_token,
)
from src.db.crud.user_data import (
    get_all_user_data,
    get_favorites,
    get_recently_watched,
    get_user_data,
    update_user_data,
)
from src.db.crud.users import (
    delete_user,
    get_user,
    get_user_by_id,
    get_users,
    upsert_user,
)

__all__ = [
    "add_items_to_playlist",
    "create_playlist",
    "delete_access_token",
    "delete_image",
    "delete_items_from_playlist",
    "delete_user",
    "get_access_token",
    "get_access_token_by_device_id",
    "get_access_tokens",
    "get_all_user_data",
    "get_favorites",
    "get_image",
    "get_person_by_name",
    "get_playlist",
    "get_playlists",
    "get_quick_connect_code_by_code",
    "get_quick_connect_code_by_secret",
    "get_recently_watched",
    "get_user",
    "get_user_by_id",
    "get_user_data",
    "get_users",
    "has_image",
    "move_playlist_item",
    "rename_playlist",
    "set_playlist_items",
    "store_image",
    "update_user_data",
    "upsert_access_token",
    "upsert_person",
    "upsert_quick_connect_code",
    "upsert_user",
]
