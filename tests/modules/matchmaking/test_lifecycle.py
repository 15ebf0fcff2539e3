"""Tests for match creation and ending."""

import pytest

from modules.matchmaking.exceptions import MatchAccessDeniedError, MatchNotFoundError
from modules.matchmaking.lifecycle import MatchLifecycle
from modules.matchmaking.models import MatchStatus
from modules.matchmaking.repository import MatchRepository
from modules.profiles.repository import ProfileRepository

from tests.conftest import profile_document, seed, sequential_ids


@pytest.fixture
def lifecycle(store, clock) -> MatchLifecycle:
    return MatchLifecycle(store, clock=clock, id_factory=sequential_ids())


async def create_match(store, lifecycle, clock, first="u1", second="u2"):
    """Seed two profiles and pair them."""
    await seed(store, "profiles", first, profile_document(display_name="Anna", photo_url="a.png"))
    await seed(store, "profiles", second, profile_document())
    profiles = ProfileRepository(store)

    async def pair(tx):
        a = await profiles.get(first, tx)
        b = await profiles.get(second, tx)
        return lifecycle.stage_create(tx, a, b, clock())

    return await store.run_transaction(pair)


class TestCreateMatch:
    @pytest.mark.asyncio
    async def test_create_snapshots_profiles(self, store, lifecycle, clock):
        match = await create_match(store, lifecycle, clock)

        assert match.id == "match-1"
        assert match.status == MatchStatus.ACTIVE
        assert match.participants == ["u1", "u2"]
        assert match.participant_names == {"u1": "Anna", "u2": "Anonymous"}
        assert match.participant_photo_urls == {"u1": "a.png", "u2": None}
        assert await MatchRepository(store).get("match-1") == match

    @pytest.mark.asyncio
    async def test_create_points_profiles_at_match(self, store, lifecycle, clock):
        await create_match(store, lifecycle, clock)

        for user_id in ("u1", "u2"):
            profile = await ProfileRepository(store).get(user_id)
            assert profile.current_match_id == "match-1"
            assert profile.is_looking_for_match is False

    @pytest.mark.asyncio
    async def test_later_profile_edits_do_not_change_snapshot(self, store, lifecycle, clock):
        await create_match(store, lifecycle, clock)
        async with store.transaction() as tx:
            tx.update("profiles", "u1", {"display_name": "Annika"})

        match = await MatchRepository(store).get("match-1")
        assert match.participant_names["u1"] == "Anna"


class TestEndMatch:
    @pytest.mark.asyncio
    async def test_end_clears_both_participants(self, store, lifecycle, clock):
        await create_match(store, lifecycle, clock)

        ended = await lifecycle.end_match("u1", "match-1")

        assert ended.status == MatchStatus.ENDED
        stored = await MatchRepository(store).get("match-1")
        assert stored.status == MatchStatus.ENDED
        assert stored.ended_at is not None
        for user_id in ("u1", "u2"):
            assert (await ProfileRepository(store).get(user_id)).current_match_id is None

    @pytest.mark.asyncio
    async def test_end_by_non_participant(self, store, lifecycle, clock):
        await create_match(store, lifecycle, clock)
        await seed(store, "profiles", "u3", profile_document())

        with pytest.raises(MatchAccessDeniedError):
            await lifecycle.end_match("u3", "match-1")

        assert (await MatchRepository(store).get("match-1")).status == MatchStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_end_twice_is_idempotent(self, store, lifecycle, clock):
        await create_match(store, lifecycle, clock)
        await lifecycle.end_match("u1", "match-1")
        first = await store.get("matches", "match-1")

        again = await lifecycle.end_match("u2", "match-1")

        assert again.status == MatchStatus.ENDED
        assert (await store.get("matches", "match-1")).version == first.version

    @pytest.mark.asyncio
    async def test_end_ended_match_clears_dangling_reference(self, store, lifecycle, clock):
        await create_match(store, lifecycle, clock)
        await lifecycle.end_match("u1", "match-1")
        async with store.transaction() as tx:
            tx.update("profiles", "u2", {"current_match_id": "match-1"})

        await lifecycle.end_match("u2", "match-1")

        assert (await ProfileRepository(store).get("u2")).current_match_id is None

    @pytest.mark.asyncio
    async def test_end_missing_match_clears_reference(self, store, lifecycle):
        await seed(store, "profiles", "u1", profile_document(current_match_id="gone"))

        assert await lifecycle.end_match("u1", "gone") is None
        assert (await ProfileRepository(store).get("u1")).current_match_id is None

    @pytest.mark.asyncio
    async def test_end_keeps_unrelated_reference(self, store, lifecycle, clock):
        """A participant already in another match keeps that match."""
        await create_match(store, lifecycle, clock)
        async with store.transaction() as tx:
            tx.update("profiles", "u2", {"current_match_id": "other"})

        await lifecycle.end_match("u1", "match-1")

        assert (await ProfileRepository(store).get("u2")).current_match_id == "other"


class TestGetMatch:
    @pytest.mark.asyncio
    async def test_participant_can_read(self, store, lifecycle, clock):
        await create_match(store, lifecycle, clock)

        match = await lifecycle.get_match("u2", "match-1")

        assert match.partner_of("u2") == "u1"

    @pytest.mark.asyncio
    async def test_non_participant_denied(self, store, lifecycle, clock):
        await create_match(store, lifecycle, clock)

        with pytest.raises(MatchAccessDeniedError):
            await lifecycle.get_match("u3", "match-1")

    @pytest.mark.asyncio
    async def test_missing_match(self, lifecycle):
        with pytest.raises(MatchNotFoundError):
            await lifecycle.get_match("u1", "nope")
