"""Tests for filtering, sorting and pagination of item lists."""

from datetime import UTC, datetime

import pytest
from starlette.datastructures import QueryParams

from src.models.jellyfin import JFItem, JFNameId, JFUserData
from src.services.jellyfin import ItemQuery, parse_iso8601
from src.services.jellyfin.ids import make_genre_id


def make_item(item_id: str, name: str, **fields) -> JFItem:
    return JFItem(id=item_id, name=name, sort_name=name.lower(), **fields)


@pytest.fixture
def items() -> list[JFItem]:
    return [
        make_item(
            "a", "Alien", type="Movie", production_year=1979, community_rating=8.5,
            genres=["Horror"], genre_items=[JFNameId(name="Horror", id=make_genre_id("Horror"))],
            premiere_date=datetime(1979, 5, 25, tzinfo=UTC),
            user_data=JFUserData(played=True),
        ),
        make_item(
            "b", "Brazil", type="Movie", production_year=1985, community_rating=7.9,
            genres=["Comedy"], genre_items=[JFNameId(name="Comedy", id=make_genre_id("Comedy"))],
            premiere_date=datetime(1985, 2, 20, tzinfo=UTC),
            user_data=JFUserData(is_favorite=True, playback_position_ticks=10_000_000),
        ),
        make_item(
            "c", "Cosmos", type="Series", production_year=1980, is_folder=True,
            user_data=JFUserData(),
        ),
    ]


def query(**params: str) -> ItemQuery:
    return ItemQuery.from_params(QueryParams(params))


class TestFromParams:
    """Tests for query string parsing."""

    def test_lists(self):
        q = query(includeItemTypes="Movie,Series", genres="Horror|Comedy", years="1979,1985")
        assert q.include_item_types == ["Movie", "Series"]
        assert q.genres == ["Horror", "Comedy"]
        assert q.years == [1979, 1985]

    def test_tristate(self):
        assert query(isPlayed="true").is_played is True
        assert query(isPlayed="false").is_played is False
        assert query(isPlayed="maybe").is_played is None
        assert query().is_played is None

    def test_sort(self):
        q = query(sortBy="SortName,ProductionYear", sortOrder="Descending")
        assert q.sort_by == ["sortname", "productionyear"]
        assert q.sort_descending is True

    def test_invalid_numbers_are_ignored(self):
        q = query(startIndex="x", limit="")
        assert q.start_index is None
        assert q.limit is None


class TestFilter:
    """Tests for ItemQuery.filter."""

    def test_item_types(self, items: list[JFItem]):
        assert [i.id for i in query(includeItemTypes="Movie").filter(items)] == ["a", "b"]
        assert [i.id for i in query(excludeItemTypes="Movie").filter(items)] == ["c"]

    def test_is_played_false_keeps_unplayed(self, items: list[JFItem]):
        assert [i.id for i in query(isPlayed="false").filter(items)] == ["b", "c"]

    def test_is_played_true_keeps_played(self, items: list[JFItem]):
        assert [i.id for i in query(isPlayed="true").filter(items)] == ["a"]

    def test_is_favorite(self, items: list[JFItem]):
        assert [i.id for i in query(isFavorite="true").filter(items)] == ["b"]
        assert [i.id for i in query(isFavorite="false").filter(items)] == ["a", "c"]

    def test_filters(self, items: list[JFItem]):
        assert [i.id for i in query(filters="IsResumable").filter(items)] == ["b"]
        assert [i.id for i in query(filters="IsUnplayed").filter(items)] == ["b", "c"]

    def test_genre_ids(self, items: list[JFItem]):
        q = query(genreIds=make_genre_id("Comedy"))
        assert [i.id for i in q.filter(items)] == ["b"]

    def test_name_bounds(self, items: list[JFItem]):
        assert [i.id for i in query(nameStartsWith="b").filter(items)] == ["b"]
        assert [i.id for i in query(nameStartsWithOrGreater="b").filter(items)] == ["b", "c"]
        assert [i.id for i in query(nameLessThan="b").filter(items)] == ["a"]

    def test_rating_and_dates(self, items: list[JFItem]):
        assert [i.id for i in query(minCommunityRating="8").filter(items)] == ["a"]
        assert [i.id for i in query(minPremiereDate="1980-01-01").filter(items)] == ["b"]
        assert [i.id for i in query(years="1980").filter(items)] == ["c"]

    def test_ids(self, items: list[JFItem]):
        assert [i.id for i in query(ids="c,a").filter(items)] == ["a", "c"]
        assert [i.id for i in query(excludeItemIds="a").filter(items)] == ["b", "c"]


class TestSortAndPaginate:
    """Tests for ItemQuery.sort and ItemQuery.paginate."""

    def test_sort_by_year_descending(self, items: list[JFItem]):
        q = query(sortBy="ProductionYear", sortOrder="Descending")
        assert [i.id for i in q.sort(items)] == ["b", "c", "a"]

    def test_secondary_key(self, items: list[JFItem]):
        q = query(sortBy="IsFolder,SortName")
        assert [i.id for i in q.sort(items)] == ["a", "b", "c"]

    @pytest.mark.parametrize(
        ("order", "expected"),
        [("Ascending", ["b", "a", "c"]), ("Descending", ["c", "b", "a"])],
    )
    def test_ties_keep_input_order(self, items: list[JFItem], order: str, expected: list[str]):
        reordered = [items[1], items[0], items[2]]
        q = query(sortBy="IsFolder", sortOrder=order)
        assert [i.id for i in q.sort(reordered)] == expected

    def test_unknown_sort_keeps_order(self, items: list[JFItem]):
        assert [i.id for i in query(sortBy="Bogus").sort(items)] == ["a", "b", "c"]

    def test_random_keeps_all_items(self, items: list[JFItem]):
        assert sorted(i.id for i in query(sortBy="Random").sort(items)) == ["a", "b", "c"]

    def test_paginate(self, items: list[JFItem]):
        page, start = query(startIndex="1", limit="1").paginate(items)
        assert [i.id for i in page] == ["b"]
        assert start == 1

    def test_start_index_past_the_end(self, items: list[JFItem]):
        page, start = query(startIndex="10").paginate(items)
        assert page == []
        assert start == 3

    def test_apply_counts_before_paging(self, items: list[JFItem]):
        page, total, start = query(includeItemTypes="Movie", limit="1").apply(items)
        assert [i.id for i in page] == ["a"]
        assert total == 2
        assert start == 0


class TestParseIso8601:
    """Tests for date bounds."""

    @pytest.mark.parametrize(
        "value", ["2020-03-01", "2020-03-01 12:00:00", "2020-03-01T12:00:00Z", "2020-03-01T12:00:00.000+00:00"]
    )
    def test_formats(self, value: str):
        parsed = parse_iso8601(value)
        assert (parsed.year, parsed.month, parsed.day) == (2020, 3, 1)
        assert parsed.tzinfo is not None

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_iso8601("yesterday")
