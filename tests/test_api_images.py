"""Tests for image endpoints."""

import base64
import io

import pytest
from httpx import AsyncClient
from PIL import Image

from src.models.user import User
from src.services.imaging import make_identicon
from src.services.jellyfin.ids import IdKind, make_id
from src.services.library import CollectionRepo
from src.utils.idhash import id_hash
from tests.conftest import MOVIES_COLLECTION_ID

CASABLANCA_ID = id_hash("Casablanca (1942)")
FARGO_ID = id_hash("Fargo")


@pytest.mark.asyncio
class TestLibraryImages:
    """Tests for images read from the media directories."""

    async def test_redirect_tag(self, client: AsyncClient):
        response = await client.get(
            f"/Items/{CASABLANCA_ID}/Images/Primary",
            params={"tag": "redirect_https://images.example.com/p/bogart.jpg"},
        )

        assert response.status_code == 302
        assert response.headers["location"] == "https://images.example.com/p/bogart.jpg"
        assert response.headers["cache-control"] == "max-age=2592000"

    async def test_poster(self, client: AsyncClient):
        response = await client.get(f"/Items/{CASABLANCA_ID}/Images/Primary")

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/jpeg"
        assert response.headers["etag"]
        with Image.open(io.BytesIO(response.content)) as img:
            assert img.size == (400, 600)

    async def test_resized_poster(self, client: AsyncClient):
        response = await client.get(f"/Items/{CASABLANCA_ID}/Images/primary", params={"maxWidth": "100"})

        assert response.status_code == 200
        with Image.open(io.BytesIO(response.content)) as img:
            assert img.size == (100, 150)

    @pytest.mark.parametrize("value", ["inf", "1e999", "wide"])
    async def test_invalid_size_parameter(self, client: AsyncClient, value: str):
        response = await client.get(f"/Items/{CASABLANCA_ID}/Images/Primary", params={"maxWidth": value})
        assert response.status_code == 400

    async def test_backdrop(self, client: AsyncClient):
        response = await client.get(f"/Items/{CASABLANCA_ID}/Images/Backdrop/0")
        assert response.status_code == 200
        assert "content-encoding" not in response.headers

    async def test_missing_image_type(self, client: AsyncClient):
        response = await client.get(f"/Items/{CASABLANCA_ID}/Images/Logo")
        assert response.status_code == 404

    async def test_unknown_item(self, client: AsyncClient):
        response = await client.get("/Items/nope/Images/Primary")
        assert response.status_code == 404

    async def test_season_poster(self, client: AsyncClient, collections: CollectionRepo):
        found = collections.get_show_by_id(FARGO_ID)
        season = found[1].seasons[0]
        response = await client.get(f"/Items/{make_id(IdKind.SEASON, season.id)}/Images/Primary")
        assert response.status_code == 200

    async def test_episode_thumb(self, client: AsyncClient, collections: CollectionRepo):
        found = collections.get_show_by_id(FARGO_ID)
        episode = found[1].seasons[0].episodes[0]
        response = await client.get(f"/Items/{make_id(IdKind.EPISODE, episode.id)}/Images/Primary")
        assert response.status_code == 200
        with Image.open(io.BytesIO(response.content)) as img:
            assert img.size == (640, 360)

    async def test_image_list(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get(f"/Items/{CASABLANCA_ID}/Images")
        assert [i["ImageType"] for i in response.json()] == ["Primary", "Backdrop"]


@pytest.mark.asyncio
class TestUploadedImages:
    """Tests for images stored in the database."""

    async def test_collection_image(self, authenticated_client: AsyncClient):
        collection_id = make_id(IdKind.COLLECTION, MOVIES_COLLECTION_ID)
        png = make_identicon("movies", size=32)

        response = await authenticated_client.post(
            f"/Items/{collection_id}/Images/Primary", content=base64.b64encode(png)
        )
        assert response.status_code == 204

        response = await authenticated_client.get(f"/Items/{collection_id}/Images/Primary")
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.content == png

        views = (await authenticated_client.get("/UserViews")).json()["Items"]
        assert views[0]["ImageTags"]["Primary"] == response.headers["etag"]

    async def test_upload_requires_authentication(self, client: AsyncClient):
        response = await client.post(
            f"/Items/{make_id(IdKind.COLLECTION, MOVIES_COLLECTION_ID)}/Images/Primary",
            content=make_identicon("x", size=32),
        )
        assert response.status_code == 401

    async def test_rejects_non_images(self, authenticated_client: AsyncClient):
        response = await authenticated_client.post(
            f"/Items/{make_id(IdKind.COLLECTION, MOVIES_COLLECTION_ID)}/Images/Primary",
            content=b"definitely not an image",
        )
        assert response.status_code == 400

    async def test_missing_collection_image(self, client: AsyncClient):
        response = await client.get(f"/Items/{make_id(IdKind.COLLECTION, MOVIES_COLLECTION_ID)}/Images/Primary")
        assert response.status_code == 404


@pytest.mark.asyncio
class TestUserImages:
    """Tests for profile images."""

    async def test_generated_avatar(self, client: AsyncClient, test_user: User):
        response = await client.get("/UserImage", params={"userId": test_user.id})
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"

        response = await client.get(f"/Users/{test_user.id}/Images/Primary")
        assert response.status_code == 200

    async def test_replace_and_delete(self, authenticated_client: AsyncClient, test_user: User):
        png = make_identicon("replacement", size=32)
        response = await authenticated_client.post("/UserImage", params={"userId": test_user.id}, content=png)
        assert response.status_code == 204

        response = await authenticated_client.get("/UserImage", params={"userId": test_user.id})
        assert response.content == png

        response = await authenticated_client.delete("/UserImage", params={"userId": test_user.id})
        assert response.status_code == 204
        response = await authenticated_client.get("/UserImage", params={"userId": test_user.id})
        assert response.status_code == 404

    async def test_cannot_change_other_users_image(self, authenticated_client: AsyncClient, other_user: User):
        response = await authenticated_client.post(
            "/UserImage", params={"userId": other_user.id}, content=make_identicon("x", size=32)
        )
        assert response.status_code == 403

    async def test_user_id_required(self, client: AsyncClient):
        response = await client.get("/UserImage")
        assert response.status_code == 400
