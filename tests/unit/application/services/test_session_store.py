"""Tests for the single-use session code store."""

import asyncio
import re
from datetime import UTC, datetime, timedelta

import pytest

from soundbridge.application.services.code_generator import generate_session_code
from soundbridge.application.services.session_store import (
    InMemorySessionCodeStore,
    SessionCodeStore,
)
from soundbridge.domain.entities import CredentialBundle


def make_bundle(access_token: str = "access-1") -> CredentialBundle:
    return CredentialBundle(
        access_token=access_token,
        refresh_token="refresh-1",
        user={"id": "spotify-user", "display_name": "Test User"},
    )


@pytest.fixture
def store() -> InMemorySessionCodeStore:
    return InMemorySessionCodeStore(ttl_seconds=300)


class TestGenerateSessionCode:
    """Test session code generation."""

    def test_code_is_64_hex_chars(self) -> None:
        code = generate_session_code()
        assert re.fullmatch(r"[0-9a-f]{64}", code)

    def test_codes_are_unique(self) -> None:
        codes = {generate_session_code() for _ in range(1000)}
        assert len(codes) == 1000


class TestPutAndTake:
    """Test put()/take() single-use semantics."""

    def test_store_implements_interface(self, store: InMemorySessionCodeStore) -> None:
        assert isinstance(store, SessionCodeStore)

    async def test_take_unknown_code_returns_none(
        self, store: InMemorySessionCodeStore
    ) -> None:
        assert await store.take("never-issued") is None

    async def test_take_returns_stored_bundle_once(
        self, store: InMemorySessionCodeStore
    ) -> None:
        code = await store.put(make_bundle())

        bundle = await store.take(code)

        assert bundle is not None
        assert bundle.access_token == "access-1"
        assert bundle.refresh_token == "refresh-1"
        assert bundle.user == {"id": "spotify-user", "display_name": "Test User"}
        assert await store.take(code) is None
        assert len(store) == 0

    async def test_put_stamps_expiry_from_ttl(
        self, store: InMemorySessionCodeStore
    ) -> None:
        before = datetime.now(UTC)
        code = await store.put(make_bundle())
        after = datetime.now(UTC)

        bundle = await store.take(code)

        assert bundle is not None
        assert before + timedelta(seconds=300) <= bundle.expires_at
        assert bundle.expires_at <= after + timedelta(seconds=300)

    async def test_put_issues_distinct_codes(
        self, store: InMemorySessionCodeStore
    ) -> None:
        first = await store.put(make_bundle("a"))
        second = await store.put(make_bundle("b"))

        assert first != second
        assert (await store.take(second)).access_token == "b"
        assert (await store.take(first)).access_token == "a"

    async def test_put_regenerates_on_collision(self) -> None:
        codes = iter(["dup", "dup", "fresh"])
        store = InMemorySessionCodeStore(code_factory=lambda: next(codes))

        first = await store.put(make_bundle("a"))
        second = await store.put(make_bundle("b"))

        assert first == "dup"
        assert second == "fresh"
        assert (await store.take("dup")).access_token == "a"

    async def test_take_expired_code_returns_none(self) -> None:
        store = InMemorySessionCodeStore(ttl_seconds=0)
        code = await store.put(make_bundle())

        assert await store.take(code) is None
        assert len(store) == 0

    async def test_concurrent_takes_deliver_exactly_once(
        self, store: InMemorySessionCodeStore
    ) -> None:
        code = await store.put(make_bundle())

        results = await asyncio.gather(*(store.take(code) for _ in range(50)))

        delivered = [r for r in results if r is not None]
        assert len(delivered) == 1
        assert delivered[0].access_token == "access-1"


class TestSweep:
    """Test expiry sweeps."""

    async def test_sweep_removes_expired_entries(
        self, store: InMemorySessionCodeStore
    ) -> None:
        code = await store.put(make_bundle())

        removed = await store.sweep(datetime.now(UTC) + timedelta(seconds=301))

        assert removed == 1
        assert len(store) == 0
        assert await store.take(code) is None

    async def test_sweep_removes_entry_expiring_exactly_now(
        self, store: InMemorySessionCodeStore
    ) -> None:
        code = await store.put(make_bundle())
        # Peek at the stamped expiry without consuming the code
        expires_at = store._entries[code].expires_at

        assert await store.sweep(expires_at) == 1

    async def test_sweep_keeps_live_entries(
        self, store: InMemorySessionCodeStore
    ) -> None:
        code = await store.put(make_bundle())

        removed = await store.sweep()

        assert removed == 0
        assert (await store.take(code)) is not None

    async def test_sweep_accepts_naive_utc_time(
        self, store: InMemorySessionCodeStore
    ) -> None:
        await store.put(make_bundle("old"))
        naive_later = (datetime.now(UTC) + timedelta(seconds=301)).replace(tzinfo=None)

        assert await store.sweep(naive_later) == 1
        assert len(store) == 0

    async def test_sweep_naive_time_keeps_live_entries(
        self, store: InMemorySessionCodeStore
    ) -> None:
        await store.put(make_bundle())
        naive_now = datetime.now(UTC).replace(tzinfo=None)

        assert await store.sweep(naive_now) == 0
        assert len(store) == 1

    async def test_sweep_concurrent_with_take(self) -> None:
        store = InMemorySessionCodeStore(ttl_seconds=0)
        code = await store.put(make_bundle())

        removed, taken = await asyncio.gather(store.sweep(), store.take(code))

        # Whichever runs first removes the entry; nobody sees a half-deleted one
        assert taken is None
        assert removed in (0, 1)
        assert len(store) == 0


class TestStats:
    """Test get_stats()."""

    async def test_stats_counts_active_and_expired(self) -> None:
        live_store = InMemorySessionCodeStore(ttl_seconds=300)
        await live_store.put(make_bundle())
        dead_store = InMemorySessionCodeStore(ttl_seconds=0)
        await dead_store.put(make_bundle())

        assert live_store.get_stats() == {
            "total_entries": 1,
            "active_entries": 1,
            "expired_entries": 0,
            "ttl_seconds": 300,
        }
        assert dead_store.get_stats()["expired_entries"] == 1
