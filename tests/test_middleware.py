"""Tests for request normalization."""

import pytest
from httpx import AsyncClient
from starlette.routing import Route

from src.api.middleware import PathCaseFolder, normalize_path, normalize_query_string


async def endpoint(request):
    return None


ROUTES = [
    Route("/Items/{item_id}", endpoint),
    Route("/Items/Counts", endpoint),
    Route("/Users/{user_id}/Items/Latest", endpoint),
    Route("/Users/{user_id}/Items/{item_id}", endpoint),
    Route("/System/Info/Public", endpoint),
]


class TestNormalizePath:
    """Tests for path cleanup."""

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("/emby/System/Info", "/System/Info"),
            ("/Emby/Items", "/Items"),
            ("/emby", "/"),
            ("/embyfoo/Items", "/embyfoo/Items"),
            ("//Items//Latest", "/Items/Latest"),
            ("/Items/", "/Items"),
            ("/", "/"),
        ],
    )
    def test_paths(self, path: str, expected: str):
        assert normalize_path(path) == expected


class TestNormalizeQueryString:
    """Tests for query string cleanup."""

    def test_lowercases_first_letter(self):
        assert normalize_query_string("SortBy=SortName&ParentId=abc") == "sortBy=SortName&parentId=abc"

    def test_drops_fields(self):
        assert normalize_query_string("Fields=Overview,Genres&limit=5") == "limit=5"

    def test_keeps_blank_values_and_repeats(self):
        assert normalize_query_string("ids=a&Ids=b&searchTerm=") == "ids=a&ids=b&searchTerm="

    def test_empty(self):
        assert normalize_query_string("") == ""


class TestPathCaseFolder:
    """Tests for rewriting paths to the registered casing."""

    def test_literal_segments_are_folded(self):
        folder = PathCaseFolder(ROUTES)
        assert folder.fold("/system/info/public") == "/System/Info/Public"

    def test_parameter_segments_keep_their_value(self):
        folder = PathCaseFolder(ROUTES)
        assert folder.fold("/items/AbCdEf") == "/Items/AbCdEf"

    def test_most_literal_template_wins(self):
        folder = PathCaseFolder(ROUTES)
        assert folder.fold("/items/counts") == "/Items/Counts"
        assert folder.fold("/users/u1/items/latest") == "/Users/u1/Items/Latest"
        assert folder.fold("/users/u1/items/m1") == "/Users/u1/Items/m1"

    def test_unknown_path_is_unchanged(self):
        folder = PathCaseFolder(ROUTES)
        assert folder.fold("/nothing/here") == "/nothing/here"


@pytest.mark.asyncio
class TestRequestNormalizerMiddleware:
    """Tests for the middleware in front of the application."""

    async def test_emby_prefix_and_lowercase_path(self, client: AsyncClient):
        response = await client.get("/emby/system/info/public")
        assert response.status_code == 200
        assert response.json()["ProductName"] == "Jellyfin Server"

    async def test_trailing_slash(self, client: AsyncClient):
        response = await client.get("/System/Info/Public/")
        assert response.status_code == 200

    async def test_capitalized_query_parameters(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get("/Items", params={"IncludeItemTypes": "Movie", "Recursive": "true"})
        assert response.status_code == 200
        assert {item["Type"] for item in response.json()["Items"]} == {"Movie"}
