"""Tests for the library scanner, NFO parsing and collection lookups."""

from pathlib import Path

import pytest

from src.services.library import CollectionRepo, Movie, Show, parse_nfo
from src.services.library.models import make_sort_name
from src.services.library.nfo import normalize_genres, parse_date
from src.services.library.scanner import parse_episode_name
from src.utils.idhash import id_hash

from tests.conftest import MOVIES_COLLECTION_ID, SHOWS_COLLECTION_ID


def _fargo(collections: CollectionRepo) -> Show:
    found = collections.get_show_by_id(id_hash("Fargo"))
    assert found is not None
    return found[1]


class TestNfo:
    """Tests for .nfo sidecar parsing."""

    def test_movie(self):
        meta = parse_nfo(
            "<movie><title>Heat</title><year>1995</year><genre>Crime/Thriller</genre>"
            "<runtime>170</runtime><actor><name>Al Pacino</name><role>Hanna</role></actor>"
            "<uniqueid type=\"tmdb\">949</uniqueid></movie>"
        )
        assert meta is not None
        assert meta.title == "Heat"
        assert meta.year == 1995
        assert meta.genres == ["Crime", "Thriller"]
        assert meta.runtime_minutes == 170
        assert meta.actors[0].name == "Al Pacino"
        assert meta.actors[0].role == "Hanna"
        assert meta.provider_ids["tmdb"] == "949"

    def test_junk_around_the_document(self):
        meta = parse_nfo("https://www.imdb.com/title/tt0113277/\n<movie><title>Heat</title></movie>")
        assert meta is not None
        assert meta.title == "Heat"

    def test_unusable(self):
        assert parse_nfo("just a url") is None
        assert parse_nfo("<movie><title>broken</movie>") is None

    def test_year_from_premiere_date(self):
        meta = parse_nfo("<movie><premiered>2001-12-19</premiered></movie>")
        assert meta is not None
        assert meta.year == 2001

    def test_episode_numbers(self):
        meta = parse_nfo("<episodedetails><season>2</season><episode>5</episode></episodedetails>")
        assert meta is not None
        assert (meta.season, meta.episode) == (2, 5)

    def test_legacy_imdb_id(self):
        meta = parse_nfo("<movie><id>tt0113277</id></movie>")
        assert meta is not None
        assert meta.provider_ids["imdb"] == "tt0113277"

    def test_normalize_genres(self):
        assert normalize_genres(["science fiction, Action", "sci-fi", "x"]) == ["Sci-Fi", "Action"]

    def test_parse_date(self):
        assert parse_date("2020-01-31").year == 2020
        assert parse_date("31 Jan 2020").month == 1
        assert parse_date("someday") is None


class TestEpisodeNames:
    """Tests for season and episode numbers in file names."""

    @pytest.mark.parametrize(
        ("name", "hint", "expected"),
        [
            ("Fargo.S01E02", -1, (1, 2)),
            ("fargo s3e10 720p", -1, (3, 10)),
            ("Fargo 2x05", -1, (2, 5)),
            ("Episode 7", 4, (4, 7)),
            ("E07 - Title", 1, (1, 7)),
        ],
    )
    def test_recognized(self, name: str, hint: int, expected: tuple[int, int]):
        assert parse_episode_name(name, hint) == expected

    def test_unrecognized(self):
        assert parse_episode_name("Behind the scenes", -1) is None


class TestScanner:
    """Tests for scanning the test library."""

    def test_collections(self, collections: CollectionRepo):
        movies = collections.get_collection(MOVIES_COLLECTION_ID)
        shows = collections.get_collection(SHOWS_COLLECTION_ID)
        assert movies is not None and shows is not None
        assert sorted(item.name for item in movies.items) == [
            "Casablanca (1942)",
            "The Maltese Falcon (1941)",
        ]
        assert [item.name for item in shows.items] == ["Fargo"]

    def test_movie_files(self, collections: CollectionRepo):
        found = collections.get_item_by_id(id_hash("Casablanca (1942)"))
        assert found is not None
        movie = found[1]
        assert isinstance(movie, Movie)
        assert movie.file_name == "casablanca.mp4"
        assert movie.poster == "poster.jpg"
        assert movie.fanart == "fanart.jpg"
        assert movie.year == 1942
        assert movie.metadata.title == "Casablanca"
        assert movie.genres == ["Drama", "Romance"]
        assert movie.duration == 102 * 60

    def test_movie_without_nfo_metadata(self, collections: CollectionRepo):
        found = collections.get_item_by_id(id_hash("The Maltese Falcon (1941)"))
        assert found is not None
        assert found[1].sort_name == "maltese falcon (1941)"
        assert found[1].genres == ["Drama", "Film Noir"]

    def test_show_seasons(self, collections: CollectionRepo):
        show = _fargo(collections)
        assert [s.number for s in show.seasons] == [1, 2, 0]
        assert [len(s.episodes) for s in show.seasons] == [3, 1, 1]
        assert show.seasons[0].poster == "season01-poster.jpg"

    def test_episode_files(self, collections: CollectionRepo):
        show = _fargo(collections)
        first = show.seasons[0].episodes[0]
        assert first.file_name == "S01/Fargo.S01E01.mp4"
        assert first.thumb == "S01/Fargo.S01E01-thumb.jpg"
        assert (first.season_no, first.episode_no) == (1, 1)
        assert first.show_id == show.id
        assert first.season_id == show.seasons[0].id

    def test_ids_are_stable(self, library_dir: Path, collections: CollectionRepo):
        again = CollectionRepo()
        again.add_collection("Shows", "shows", str(library_dir / "shows"), SHOWS_COLLECTION_ID)
        again.scan()
        assert [e.id for e in _fargo(again).episodes] == [e.id for e in _fargo(collections).episodes]

    def test_show_without_episodes_or_artwork_is_skipped(self, tmp_path: Path):
        (tmp_path / "Nothing").mkdir()
        repo = CollectionRepo()
        repo.add_collection("Shows", "shows", str(tmp_path))
        repo.scan()
        assert repo.get_collections()[0].items == []

    def test_missing_directory(self, tmp_path: Path):
        repo = CollectionRepo()
        repo.add_collection("Gone", "movies", str(tmp_path / "missing"))
        repo.scan()
        assert repo.get_collections()[0].items == []

    def test_sort_name(self):
        assert make_sort_name("The Thing") == "thing"
        assert make_sort_name("'Allo 'Allo!") == "allo 'allo!"


class TestCollectionRepo:
    """Tests for lookups, facets, search and next up."""

    def test_find(self, collections: CollectionRepo):
        show = _fargo(collections)
        season = show.seasons[1]
        episode = season.episodes[0]
        assert collections.find(show.id)[1] is show
        assert collections.find(season.id)[1] is season
        assert collections.find(episode.id)[1] is episode
        assert collections.find("nope") is None

    def test_duration_defaults_to_zero(self, collections: CollectionRepo):
        episode = _fargo(collections).episodes[0]
        assert collections.duration_of(episode.id) == 0
        assert collections.duration_of(id_hash("Casablanca (1942)")) == 6120

    def test_details(self, collections: CollectionRepo):
        details = collections.details()
        assert details.movie_count == 2
        assert details.show_count == 1
        assert details.episode_count == 5
        assert details.genres == ["Crime", "Drama", "Film Noir", "Romance"]

    def test_facet_counts(self, collections: CollectionRepo):
        assert collections.genre_item_count()["Drama"] == 2
        assert collections.studio_item_count()["Warner Bros."] == 2
        assert collections.person_item_count()["Humphrey Bogart"] == 2

    def test_search_item(self, collections: CollectionRepo):
        results = collections.search_item("casa")
        assert results[0] == id_hash("Casablanca (1942)")

    def test_search_item_matches_people(self, collections: CollectionRepo):
        results = collections.search_item("bogart")
        assert set(results) == {id_hash("Casablanca (1942)"), id_hash("The Maltese Falcon (1941)")}

    def test_search_person(self, collections: CollectionRepo):
        assert collections.search_person("ingrid") == ["Ingrid Bergman"]
        assert collections.search_person("") == []

    def test_similar(self, collections: CollectionRepo):
        collection, movie = collections.get_item_by_id(id_hash("Casablanca (1942)"))
        assert collections.similar(collection, movie) == [id_hash("The Maltese Falcon (1941)")]

    def test_next_up_in_series(self, collections: CollectionRepo):
        show = _fargo(collections)
        s1 = show.seasons[0].episodes
        assert collections.next_up_in_series([s1[1].id], show.id) == [s1[2].id]

    def test_next_up_crosses_seasons(self, collections: CollectionRepo):
        show = _fargo(collections)
        s1 = show.seasons[0].episodes
        s2 = show.seasons[1].episodes
        watched = [s1[0].id, s1[2].id, s1[1].id]
        assert collections.next_up_in_series(watched, show.id) == [s2[0].id]

    def test_next_up_after_last_episode(self, collections: CollectionRepo):
        show = _fargo(collections)
        last = show.seasons[-1].episodes[-1]
        assert collections.next_up_in_collection([last.id]) == []

    def test_next_up_ignores_other_series(self, collections: CollectionRepo):
        show = _fargo(collections)
        first = show.seasons[0].episodes[0]
        assert collections.next_up_in_series([first.id], "someothershow") == []
