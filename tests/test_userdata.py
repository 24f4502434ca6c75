"""Tests for per-user play state."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from src.constants import TICKS_PER_SECOND
from src.db import crud
from src.db.errors import NotFoundError
from src.models.user import User
from src.services.jellyfin.userdata import (
    compute_play_state,
    set_favorite,
    set_played,
    update_play_state,
)


class TestComputePlayState:
    """Tests for turning a position into play state."""

    def test_partial_progress(self):
        assert compute_play_state(600 * TICKS_PER_SECOND, 6000, False) == (600, 10, False)

    def test_past_threshold_counts_as_played(self):
        assert compute_play_state(5900 * TICKS_PER_SECOND, 6000, False) == (0, 0, True)

    def test_just_below_threshold(self):
        position, percentage, played = compute_play_state(5870 * TICKS_PER_SECOND, 6000, False)
        assert (position, percentage, played) == (5870, 97, False)

    def test_mark_played(self):
        assert compute_play_state(10 * TICKS_PER_SECOND, 6000, True) == (0, 0, True)

    def test_unknown_duration_assumes_one_hour(self):
        assert compute_play_state(1800 * TICKS_PER_SECOND, 0, False) == (1800, 50, False)

    def test_negative_position(self):
        assert compute_play_state(-5, 6000, False) == (0, 0, False)


@pytest.mark.asyncio
class TestUpdatePlayState:
    """Tests for storing play state."""

    async def test_progress_is_stored(self, db_session: AsyncSession, test_user: User):
        await update_play_state(db_session, test_user.id, "movie1", 600 * TICKS_PER_SECOND, 6000)

        data = await crud.get_user_data(db_session, test_user.id, "movie1")
        assert data.position == 600
        assert data.played_percentage == 10
        assert data.played is False
        assert data.play_count == 0
        assert data.timestamp is not None

    async def test_play_count_increments_on_transition(self, db_session: AsyncSession, test_user: User):
        await update_play_state(db_session, test_user.id, "movie1", 5990 * TICKS_PER_SECOND, 6000)
        data = await crud.get_user_data(db_session, test_user.id, "movie1")
        assert data.played is True
        assert data.play_count == 1

        # Still played: no second count
        await update_play_state(db_session, test_user.id, "movie1", 5995 * TICKS_PER_SECOND, 6000)
        data = await crud.get_user_data(db_session, test_user.id, "movie1")
        assert data.play_count == 1

        # Unplayed, then played again
        await set_played(db_session, test_user.id, "movie1", False)
        await set_played(db_session, test_user.id, "movie1", True)
        data = await crud.get_user_data(db_session, test_user.id, "movie1")
        assert data.play_count == 2

    async def test_set_unplayed_resets_position(self, db_session: AsyncSession, test_user: User):
        await update_play_state(db_session, test_user.id, "movie1", 600 * TICKS_PER_SECOND, 6000)
        data = await set_played(db_session, test_user.id, "movie1", False)
        assert data.position == 0
        assert data.played is False

    async def test_favorite_keeps_play_state(self, db_session: AsyncSession, test_user: User):
        await update_play_state(db_session, test_user.id, "movie1", 600 * TICKS_PER_SECOND, 6000)
        data = await set_favorite(db_session, test_user.id, "movie1", True)
        assert data.favorite is True
        assert data.position == 600

        assert await crud.get_favorites(db_session, test_user.id) == ["movie1"]

    async def test_users_are_isolated(self, db_session: AsyncSession, test_user: User, other_user: User):
        await set_favorite(db_session, test_user.id, "movie1", True)

        assert await crud.get_favorites(db_session, other_user.id) == []
        with pytest.raises(NotFoundError):
            await crud.get_user_data(db_session, other_user.id, "movie1")

    async def test_recently_watched(self, db_session: AsyncSession, test_user: User):
        await update_play_state(db_session, test_user.id, "resumable", 600 * TICKS_PER_SECOND, 6000)
        await set_played(db_session, test_user.id, "finished", True)
        await set_favorite(db_session, test_user.id, "untouched", True)

        resumable = await crud.get_recently_watched(db_session, test_user.id, 10, played_only=False)
        played = await crud.get_recently_watched(db_session, test_user.id, 10, played_only=True)
        assert resumable == ["resumable"]
        assert played == ["finished"]
