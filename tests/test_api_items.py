"""Tests for browsing, play state and show endpoints."""

import pytest
from httpx import AsyncClient

from src.constants import TICKS_PER_SECOND
from src.services.jellyfin.ids import (
    IdKind,
    favorites_collection_id,
    make_genre_id,
    make_id,
    root_id,
)
from src.services.library import CollectionRepo, Show
from src.utils.idhash import id_hash
from tests.conftest import MOVIES_COLLECTION_ID, SHOWS_COLLECTION_ID

CASABLANCA_ID = id_hash("Casablanca (1942)")
FALCON_ID = id_hash("The Maltese Falcon (1941)")
FARGO_ID = id_hash("Fargo")


def fargo(collections: CollectionRepo) -> Show:
    found = collections.get_show_by_id(FARGO_ID)
    assert found is not None
    return found[1]


def episode_id(collections: CollectionRepo, season: int, episode: int) -> str:
    """Wire ID of a Fargo episode, by position in the scanned season list."""
    return make_id(IdKind.EPISODE, fargo(collections).seasons[season].episodes[episode].id)


@pytest.mark.asyncio
class TestViews:
    """Tests for the home screen folders."""

    async def test_user_views(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get("/UserViews")

        assert response.status_code == 200
        data = response.json()
        assert data["TotalRecordCount"] == 4
        assert [i["Name"] for i in data["Items"]] == ["Movies", "Shows", "Favorites", "Playlists"]
        assert all(i["ParentId"] == root_id() for i in data["Items"])
        assert data["Items"][0]["CollectionType"] == "movies"
        assert data["Items"][1]["CollectionType"] == "tvshows"

    async def test_requires_authentication(self, client: AsyncClient):
        response = await client.get("/UserViews")
        assert response.status_code == 401
        assert response.json()["status"] == 401

    async def test_virtual_folders(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get("/Library/VirtualFolders")
        assert response.status_code == 200
        assert [f["Name"] for f in response.json()] == ["Movies", "Shows"]

    async def test_media_folders(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get("/Library/MediaFolders")
        assert response.status_code == 200
        data = response.json()
        assert data["TotalRecordCount"] == 4
        assert [i["Name"] for i in data["Items"]][:2] == ["Movies", "Shows"]

    async def test_counts(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get("/Items/Counts")
        data = response.json()
        assert (data["MovieCount"], data["SeriesCount"], data["EpisodeCount"]) == (2, 1, 5)


@pytest.mark.asyncio
class TestItems:
    """Tests for item listings and single items."""

    async def test_items_of_collection(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get(
            "/Items",
            params={"parentId": make_id(IdKind.COLLECTION, MOVIES_COLLECTION_ID), "sortBy": "SortName"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["TotalRecordCount"] == 2
        assert [i["Name"] for i in data["Items"]] == ["Casablanca", "The Maltese Falcon"]

    async def test_paging(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get(
            "/Items",
            params={
                "parentId": make_id(IdKind.COLLECTION, MOVIES_COLLECTION_ID),
                "sortBy": "SortName",
                "startIndex": "1",
                "limit": "1",
            },
        )
        data = response.json()
        assert data["TotalRecordCount"] == 2
        assert data["StartIndex"] == 1
        assert [i["Name"] for i in data["Items"]] == ["The Maltese Falcon"]

    async def test_unknown_parent(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get("/Items", params={"parentId": "collection_nope"})
        assert response.status_code == 404

    async def test_recursive_episodes(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get(
            "/Items", params={"recursive": "true", "includeItemTypes": "Episode"}
        )
        assert response.json()["TotalRecordCount"] == 5

    async def test_unknown_ids_list_root_folders(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get("/Items", params={"ids": "nope"})
        assert response.status_code == 200
        assert [i["Name"] for i in response.json()["Items"]] == ["Movies", "Shows", "Favorites", "Playlists"]

    async def test_items_by_ids(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get("/Items", params={"ids": f"{FALCON_ID},{CASABLANCA_ID}"})
        assert [i["Id"] for i in response.json()["Items"]] == [FALCON_ID, CASABLANCA_ID]

    async def test_search(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get("/Items", params={"searchTerm": "casa"})
        assert response.json()["Items"][0]["Id"] == CASABLANCA_ID

    async def test_movie(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get(f"/Items/{CASABLANCA_ID}")

        assert response.status_code == 200
        data = response.json()
        assert data["Type"] == "Movie"
        assert data["ParentId"] == make_id(IdKind.COLLECTION, MOVIES_COLLECTION_ID)
        assert data["RunTimeTicks"] == 6120 * TICKS_PER_SECOND
        assert data["Genres"] == ["Drama", "Romance"]
        assert data["GenreItems"][0] == {"Name": "Drama", "Id": make_genre_id("Drama")}
        assert data["OfficialRating"] == "PG"
        assert data["IsHD"] is True
        assert data["ProviderIds"]["Imdb"] == "tt0034583"
        assert {p["Name"] for p in data["People"]} >= {"Humphrey Bogart", "Michael Curtiz"}
        assert data["UserData"]["Played"] is False
        assert data["ImageTags"]["Primary"]
        assert data["BackdropImageTags"]

    async def test_user_scoped_path(self, authenticated_client: AsyncClient, test_user):
        response = await authenticated_client.get(f"/Users/{test_user.id}/Items/{CASABLANCA_ID}")
        assert response.status_code == 200
        assert response.json()["Name"] == "Casablanca"

    async def test_unknown_item(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get("/Items/doesnotexist")
        assert response.status_code == 404

    async def test_root(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get(f"/Items/{root_id()}")
        assert response.json()["Type"] == "UserRootFolder"

    async def test_latest_is_a_bare_list(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get(
            "/Items/Latest", params={"parentId": make_id(IdKind.COLLECTION, MOVIES_COLLECTION_ID)}
        )
        assert response.status_code == 200
        assert isinstance(response.json(), list)
        assert response.json()[0]["Name"] == "Casablanca"

    async def test_similar(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get(f"/Items/{CASABLANCA_ID}/Similar")
        assert [i["Id"] for i in response.json()["Items"]] == [FALCON_ID]

    async def test_playback_info(self, authenticated_client: AsyncClient):
        response = await authenticated_client.post(f"/Items/{CASABLANCA_ID}/PlaybackInfo", json={})
        data = response.json()
        assert data["MediaSources"][0]["Id"] == CASABLANCA_ID
        assert data["PlaySessionId"]

    async def test_ancestors_of_episode(self, authenticated_client: AsyncClient, collections: CollectionRepo):
        response = await authenticated_client.get(f"/Items/{episode_id(collections, 0, 0)}/Ancestors")
        assert [i["Type"] for i in response.json()] == ["Season", "Series", "CollectionFolder", "UserRootFolder"]

    async def test_genres(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get("/Genres", params={"sortBy": "SortName"})
        names = [g["Name"] for g in response.json()["Items"]]
        assert names == ["Crime", "Drama", "Film Noir", "Romance"]

    async def test_items_of_genre(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get("/Items", params={"parentId": make_genre_id("Film Noir")})
        assert [i["Id"] for i in response.json()["Items"]] == [FALCON_ID]


@pytest.mark.asyncio
class TestShows:
    """Tests for seasons, episodes and next up."""

    async def test_seasons_in_order_with_specials_last(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get(f"/Shows/{FARGO_ID}/Seasons")

        assert response.status_code == 200
        seasons = response.json()["Items"]
        assert [s["Name"] for s in seasons] == ["Season 1", "Season 2", "Specials"]
        assert [s["IndexNumber"] for s in seasons] == [1, 2, 99]
        assert all(s["SeriesId"] == FARGO_ID for s in seasons)
        assert seasons[0]["ChildCount"] == 3

    async def test_episodes_of_season(self, authenticated_client: AsyncClient, collections: CollectionRepo):
        season_id = make_id(IdKind.SEASON, fargo(collections).seasons[0].id)
        response = await authenticated_client.get(f"/Shows/{FARGO_ID}/Episodes", params={"seasonId": season_id})

        episodes = response.json()["Items"]
        assert [e["IndexNumber"] for e in episodes] == [1, 2, 3]
        assert all(e["SeasonId"] == season_id for e in episodes)
        assert episodes[0]["ImageTags"]["Primary"] == episodes[0]["Id"]

    async def test_unknown_show(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get("/Shows/nope/Seasons")
        assert response.status_code == 404

    async def test_next_up(self, authenticated_client: AsyncClient, collections: CollectionRepo):
        response = await authenticated_client.get("/Shows/NextUp")
        assert response.json()["Items"] == []

        await authenticated_client.post(f"/UserPlayedItems/{episode_id(collections, 0, 0)}")
        response = await authenticated_client.get("/Shows/NextUp")
        assert [e["Id"] for e in response.json()["Items"]] == [episode_id(collections, 0, 1)]

        # Finishing a season moves on to the first episode of the next one
        await authenticated_client.post(f"/UserPlayedItems/{episode_id(collections, 0, 2)}")
        response = await authenticated_client.get("/Shows/NextUp", params={"seriesId": FARGO_ID})
        assert [e["Id"] for e in response.json()["Items"]] == [episode_id(collections, 1, 0)]


@pytest.mark.asyncio
class TestPlayState:
    """Tests for playback reports, played and favorite marks."""

    async def test_progress_then_stopped(self, authenticated_client: AsyncClient):
        response = await authenticated_client.post(
            "/Sessions/Playing/Progress",
            json={"ItemId": CASABLANCA_ID, "PositionTicks": 600 * TICKS_PER_SECOND},
        )
        assert response.status_code == 204

        response = await authenticated_client.get("/UserItems/Resume")
        items = response.json()["Items"]
        assert [i["Id"] for i in items] == [CASABLANCA_ID]
        assert items[0]["UserData"]["PlaybackPositionTicks"] == 600 * TICKS_PER_SECOND
        assert items[0]["UserData"]["PlayedPercentage"] == 9

        response = await authenticated_client.post(
            "/Sessions/Playing/Stopped",
            json={"ItemId": CASABLANCA_ID, "PositionTicks": 6100 * TICKS_PER_SECOND},
        )
        assert response.status_code == 204

        response = await authenticated_client.get("/UserItems/Resume")
        assert response.json()["Items"] == []
        item = (await authenticated_client.get(f"/Items/{CASABLANCA_ID}")).json()
        assert item["UserData"]["Played"] is True
        assert item["UserData"]["PlayCount"] == 1
        assert item["UserData"]["PlaybackPositionTicks"] == 0

    async def test_report_for_unknown_item(self, authenticated_client: AsyncClient):
        response = await authenticated_client.post(
            "/Sessions/Playing", json={"ItemId": "nope", "PositionTicks": 0}
        )
        assert response.status_code == 404

    async def test_mark_played_and_unplayed(self, authenticated_client: AsyncClient):
        response = await authenticated_client.post(f"/UserPlayedItems/{CASABLANCA_ID}")
        assert response.status_code == 200
        assert response.json()["Played"] is True

        response = await authenticated_client.delete(f"/UserPlayedItems/{CASABLANCA_ID}")
        assert response.json()["Played"] is False

    async def test_is_played_filter(self, authenticated_client: AsyncClient):
        await authenticated_client.post(f"/UserPlayedItems/{CASABLANCA_ID}")
        params = {"parentId": make_id(IdKind.COLLECTION, MOVIES_COLLECTION_ID)}

        unplayed = await authenticated_client.get("/Items", params={**params, "isPlayed": "false"})
        played = await authenticated_client.get("/Items", params={**params, "isPlayed": "true"})
        assert [i["Id"] for i in unplayed.json()["Items"]] == [FALCON_ID]
        assert [i["Id"] for i in played.json()["Items"]] == [CASABLANCA_ID]

    async def test_favorites(self, authenticated_client: AsyncClient):
        response = await authenticated_client.post(f"/UserFavoriteItems/{FARGO_ID}")
        assert response.json()["IsFavorite"] is True

        response = await authenticated_client.get("/Items", params={"parentId": favorites_collection_id()})
        assert [i["Id"] for i in response.json()["Items"]] == [FARGO_ID]

        await authenticated_client.delete(f"/UserFavoriteItems/{FARGO_ID}")
        response = await authenticated_client.get("/Items", params={"parentId": favorites_collection_id()})
        assert response.json()["Items"] == []

    async def test_show_aggregates_episode_state(self, authenticated_client: AsyncClient, collections: CollectionRepo):
        await authenticated_client.post(f"/UserPlayedItems/{episode_id(collections, 0, 0)}")

        response = await authenticated_client.get(f"/Items/{FARGO_ID}")
        user_data = response.json()["UserData"]
        assert user_data["Played"] is False
        assert user_data["UnplayedItemCount"] == 4
