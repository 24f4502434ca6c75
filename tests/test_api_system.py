"""Tests for system, branding, session and QuickConnect endpoints."""

import pytest
from httpx import AsyncClient

from src.config import get_settings
from src.models.user import AccessToken, User
from tests.conftest import auth_header


@pytest.mark.asyncio
class TestHealthCheck:
    """Tests for health check endpoint."""

    async def test_health_check(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.text == "Healthy"
        assert response.headers["cache-control"] == "no-cache, no-store"


@pytest.mark.asyncio
class TestSystem:
    """Tests for server information endpoints."""

    async def test_public_info(self, client: AsyncClient):
        response = await client.get("/System/Info/Public")

        assert response.status_code == 200
        data = response.json()
        assert data["Id"] == get_settings().server_id
        assert data["ServerName"] == get_settings().server_name
        assert data["ProductName"] == "Jellyfin Server"
        assert data["LocalAddress"] == "http://test"
        assert data["StartupWizardCompleted"] is True

    async def test_full_info_requires_authentication(self, client: AsyncClient):
        response = await client.get("/System/Info")
        assert response.status_code == 401

    async def test_full_info(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get("/System/Info")
        assert response.status_code == 200
        assert response.json()["Id"] == get_settings().server_id

    async def test_ping(self, client: AsyncClient):
        response = await client.post("/System/Ping")
        assert response.json() == "Jellyfin Server"

    async def test_bitrate_test(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get("/Playback/BitrateTest", params={"size": "1024"})
        assert response.status_code == 200
        assert len(response.content) == 1024

        response = await authenticated_client.get("/Playback/BitrateTest", params={"size": "-1"})
        assert response.status_code == 400

    async def test_unknown_route(self, client: AsyncClient):
        response = await client.get("/Nothing/Here")
        assert response.status_code == 404
        assert response.headers["content-type"] == "application/problem+json"


@pytest.mark.asyncio
class TestBranding:
    """Tests for branding, localization and display preferences."""

    async def test_branding(self, client: AsyncClient):
        response = await client.get("/Branding/Configuration")
        assert response.json() == {"LoginDisclaimer": "", "CustomCss": "", "SplashscreenEnabled": False}

        response = await client.get("/Branding/Css.css")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/css")

    @pytest.mark.parametrize("path", ["Countries", "Cultures", "Options", "ParentalRatings"])
    async def test_localization_is_cacheable(self, client: AsyncClient, path: str):
        response = await client.get(f"/Localization/{path}")
        assert response.status_code == 200
        assert response.headers["cache-control"] == "max-age=3600"
        assert isinstance(response.json(), list)

    async def test_display_preferences(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get("/DisplayPreferences/usersettings", params={"client": "emby"})
        assert response.json()["Id"] == "usersettings"
        assert response.json()["SortOrder"] == "Ascending"

        response = await authenticated_client.post("/DisplayPreferences/usersettings", json={"SortBy": "Name"})
        assert response.status_code == 204


@pytest.mark.asyncio
class TestSessions:
    """Tests for sessions and devices."""

    async def test_sessions(self, authenticated_client: AsyncClient, test_user: User):
        response = await authenticated_client.get("/Sessions")
        sessions = response.json()
        assert len(sessions) == 1
        assert sessions[0]["UserId"] == test_user.id
        assert sessions[0]["DeviceId"] == "d1"

    async def test_capabilities(self, authenticated_client: AsyncClient):
        response = await authenticated_client.post("/Sessions/Capabilities/Full", json={"PlayableMediaTypes": ["Video"]})
        assert response.status_code == 204

    async def test_devices(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get("/Devices")
        data = response.json()
        assert data["TotalRecordCount"] == 1
        assert data["Items"][0]["Id"] == "d1"

        response = await authenticated_client.get("/Devices/Info", params={"id": "d1"})
        assert response.json()["AppName"] == "Test"

        response = await authenticated_client.get("/Devices/Info", params={"id": "other"})
        assert response.status_code == 404

    async def test_delete_device_revokes_token(self, authenticated_client: AsyncClient):
        response = await authenticated_client.delete("/Devices", params={"id": "d1"})
        assert response.status_code == 204

        response = await authenticated_client.get("/Users/Me")
        assert response.status_code == 401

    async def test_logout(self, authenticated_client: AsyncClient, access_token: AccessToken):
        response = await authenticated_client.post("/Sessions/Logout")
        assert response.status_code == 204

        response = await authenticated_client.get("/Users/Me")
        assert response.status_code == 401


@pytest.mark.asyncio
class TestQuickConnect:
    """Tests for QuickConnect device pairing."""

    @pytest.fixture
    def enabled(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(get_settings(), "quickconnect_enabled", True)

    async def test_disabled_by_default(self, client: AsyncClient):
        response = await client.get("/QuickConnect/Enabled")
        assert response.json() is False

        response = await client.post("/QuickConnect/Initiate", headers=auth_header(device_id="tv1"))
        assert response.status_code == 401

    async def test_pairing(self, authenticated_client: AsyncClient, test_user: User, enabled):
        tv = auth_header(device_id="tv1")
        assert (await authenticated_client.get("/QuickConnect/Enabled")).json() is True

        response = await authenticated_client.post("/QuickConnect/Initiate", headers=tv)
        assert response.status_code == 200
        request = response.json()
        assert request["Authenticated"] is False
        assert len(request["Code"]) == 6
        assert request["DeviceId"] == "tv1"

        response = await authenticated_client.get("/QuickConnect/Connect", params={"secret": request["Secret"]})
        assert response.json()["Authenticated"] is False

        # Not authorized yet
        response = await authenticated_client.post(
            "/Users/AuthenticateWithQuickConnect", json={"Secret": request["Secret"]}, headers=tv
        )
        assert response.status_code == 401

        response = await authenticated_client.post("/QuickConnect/Authorize", params={"code": request["Code"]})
        assert response.status_code == 200
        assert response.json() is True

        response = await authenticated_client.get("/QuickConnect/Connect", params={"secret": request["Secret"]})
        assert response.json()["Authenticated"] is True

        response = await authenticated_client.post(
            "/Users/AuthenticateWithQuickConnect", json={"Secret": request["Secret"]}, headers=tv
        )
        assert response.status_code == 200
        login = response.json()
        assert login["User"]["Id"] == test_user.id
        assert login["SessionInfo"]["DeviceId"] == "tv1"

        response = await authenticated_client.get("/Users/Me", headers=auth_header(login["AccessToken"], "tv1"))
        assert response.status_code == 200

    async def test_unknown_code(self, authenticated_client: AsyncClient, enabled):
        response = await authenticated_client.post("/QuickConnect/Authorize", params={"code": "000000x"})
        assert response.status_code == 404

    async def test_unknown_secret(self, client: AsyncClient, enabled):
        response = await client.get("/QuickConnect/Connect", params={"secret": "nope"})
        assert response.status_code == 404

        response = await client.get("/QuickConnect/Connect")
        assert response.status_code == 400
