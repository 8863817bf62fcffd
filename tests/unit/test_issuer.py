"""Tests for licensing.issuer — atomic batch issuance."""

import re
from itertools import count as counter
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from keymint.common.config import KeymintSettings
from keymint.common.database import DatabaseManager
from keymint.common.exceptions import StoreUnavailableError
from keymint.licensing.issuer import IssueResult, LicenseIssuer
from keymint.licensing.models import LicenseModel
from keymint.licensing.store import LicenseStore

KEY_RE = re.compile(r"^[A-Z0-9]{4}-[A-Z0-9]{4}-[A-Z0-9]{4}-[A-Z0-9]{4}$")


def sequential_keys(prefix: str = "AAAA"):
    """Deterministic key factory: AAAA-0000-0000-0001, AAAA-0000-0000-0002, ..."""
    seq = counter(1)
    return lambda: f"{prefix}-0000-0000-{next(seq):04d}"


def scripted_keys(keys: list[str]):
    it = iter(keys)
    return lambda: next(it)


async def stored_count(db) -> int:
    async with db.get_session() as session:
        return await LicenseStore().count_licenses(session)


class TestIssue:
    async def test_issue_ten_on_empty_store(self, db, settings):
        result = await LicenseIssuer(settings, db).issue(10)
        assert result.success is True
        assert result.code == "COMMITTED"
        assert len(result.keys) == 10
        assert all(KEY_RE.match(k) for k in result.keys)

        async with db.get_session() as session:
            store = LicenseStore()
            assert await store.count_licenses(session) == 10
            assert await store.count_licenses(session, is_used=False) == 10
            for key in result.keys:
                lic = await store.get_by_key(session, key)
                assert lic is not None
                assert lic.is_used is False
                assert lic.created_at is not None

    async def test_returns_committed_keys(self, db, settings):
        issuer = LicenseIssuer(settings, db, key_factory=sequential_keys())
        result = await issuer.issue(3)
        assert sorted(result.keys) == [
            "AAAA-0000-0000-0001", "AAAA-0000-0000-0002", "AAAA-0000-0000-0003",
        ]

    async def test_single_key(self, db, settings):
        result = await LicenseIssuer(settings, db).issue(1)
        assert result.success and len(result.keys) == 1

    async def test_max_batch(self, db, settings):
        result = await LicenseIssuer(settings, db).issue(settings.max_batch_size)
        assert result.success
        assert len(set(result.keys)) == 100
        assert await stored_count(db) == 100

    async def test_batches_accumulate(self, db, settings):
        issuer = LicenseIssuer(settings, db)
        first = await issuer.issue(5)
        second = await issuer.issue(5)
        assert not set(first.keys) & set(second.keys)
        assert await stored_count(db) == 10


class TestCountBounds:
    @pytest.mark.parametrize("bad", [0, -5, 101, 10_000])
    async def test_out_of_range_rejected_before_store(self, db, settings, bad):
        store = LicenseStore()
        store.insert_batch = AsyncMock()
        result = await LicenseIssuer(settings, db, store=store).issue(bad)
        assert result.success is False
        assert result.code == "INVALID_COUNT"
        assert result.retryable is False
        store.insert_batch.assert_not_called()
        assert await stored_count(db) == 0

    @pytest.mark.parametrize("bad", [True, 2.5, "10", None])
    async def test_non_integer_rejected(self, db, settings, bad):
        result = await LicenseIssuer(settings, db).issue(bad)
        assert result.code == "INVALID_COUNT"
        assert await stored_count(db) == 0

    async def test_not_clamped(self, db, settings):
        result = await LicenseIssuer(settings, db).issue(-5)
        assert result.keys == []
        assert "-5" in result.message

    async def test_configurable_limit(self, db):
        settings = KeymintSettings(db_url="sqlite+aiosqlite://", max_batch_size=5)
        issuer = LicenseIssuer(settings, db)
        assert (await issuer.issue(6)).code == "INVALID_COUNT"
        assert (await issuer.issue(5)).success


class TestAtomicity:
    async def test_collision_on_seventh_row_persists_nothing(self, db, settings):
        existing = "ZZZZ-0000-0000-0007"
        async with db.get_session() as session:
            await LicenseStore().insert_batch(session, [{"key": existing, "is_used": False}])

        keys = [f"ZZZZ-0000-0000-{i:04d}" for i in range(1, 11)]
        assert keys[6] == existing
        issuer = LicenseIssuer(settings, db, key_factory=scripted_keys(keys))

        result = await issuer.issue(10)
        assert result.success is False
        assert result.code == "UNIQUENESS_VIOLATION"
        assert result.retryable is True
        assert result.keys == []
        assert await stored_count(db) == 1

    async def test_duplicate_within_batch_persists_nothing(self, db, settings):
        keys = [f"DUPE-0000-0000-{i:04d}" for i in range(1, 11)]
        keys[6] = keys[2]
        issuer = LicenseIssuer(settings, db, key_factory=scripted_keys(keys))
        result = await issuer.issue(10)
        assert result.code == "UNIQUENESS_VIOLATION"
        assert await stored_count(db) == 0

    async def test_store_error_on_row_k_persists_nothing(self, db, settings):
        class FailingStore(LicenseStore):
            """Writes rows one by one and fails on the k-th."""

            def __init__(self, fail_at: int):
                self.fail_at = fail_at

            async def insert_batch(self, session, rows):
                written = []
                for i, row in enumerate(rows, start=1):
                    if i == self.fail_at:
                        raise StoreUnavailableError(f"write failed at row {i}")
                    lic = LicenseModel(key=row["key"], is_used=row["is_used"])
                    session.add(lic)
                    await session.flush()
                    written.append(lic)
                return written

        issuer = LicenseIssuer(settings, db, store=FailingStore(fail_at=7))
        result = await issuer.issue(10)
        assert result.success is False
        assert result.code == "STORE_UNAVAILABLE"
        assert result.retryable is True
        assert await stored_count(db) == 0

    async def test_retry_after_collision_succeeds(self, db, settings):
        keys = ["RTRY-0000-0000-0001", "RTRY-0000-0000-0001", "RTRY-0000-0000-0002", "RTRY-0000-0000-0003"]
        issuer = LicenseIssuer(settings, db, key_factory=scripted_keys(keys))
        assert (await issuer.issue(2)).code == "UNIQUENESS_VIOLATION"
        retry = await issuer.issue(2)
        assert retry.success
        assert sorted(retry.keys) == ["RTRY-0000-0000-0002", "RTRY-0000-0000-0003"]


class TestStoreFailures:
    async def test_database_error_returns_failure(self, db, settings):
        store = LicenseStore()
        store.insert_batch = AsyncMock(
            side_effect=OperationalError("INSERT", {}, Exception("disk I/O error"))
        )
        result = await LicenseIssuer(settings, db, store=store).issue(3)
        assert result.success is False
        assert result.code == "STORE_UNAVAILABLE"

    async def test_store_unavailable_error_returns_failure(self, db, settings):
        store = LicenseStore()
        store.insert_batch = AsyncMock(side_effect=StoreUnavailableError())
        result = await LicenseIssuer(settings, db, store=store).issue(3)
        assert result.code == "STORE_UNAVAILABLE"
        assert result.keys == []

    async def test_missing_tables(self, settings):
        bare = DatabaseManager(settings)
        await bare.init()
        try:
            result = await LicenseIssuer(settings, bare).issue(3)
        finally:
            await bare.close()
        assert result.success is False
        assert result.code == "STORE_UNAVAILABLE"

    async def test_uninitialized_store(self, settings):
        result = await LicenseIssuer(settings, DatabaseManager(settings)).issue(3)
        assert result.success is False
        assert result.code == "STORE_UNAVAILABLE"
        assert result.retryable is True
        assert result.keys == []

    async def test_unexpected_error_returns_failure(self, db, settings):
        store = LicenseStore()
        store.insert_batch = AsyncMock(side_effect=RuntimeError("driver exploded"))
        result = await LicenseIssuer(settings, db, store=store).issue(3)
        assert result.success is False
        assert result.code == "STORE_UNAVAILABLE"
        assert await stored_count(db) == 0

    async def test_session_before_init_is_store_unavailable(self, settings):
        manager = DatabaseManager(settings)
        assert manager.is_initialized is False
        with pytest.raises(StoreUnavailableError):
            async with manager.get_session():
                pass


class TestIssueResult:
    def test_committed(self):
        result = IssueResult.committed(["A", "B"])
        assert result.success and result.code == "COMMITTED"
        assert result.retryable is False

    def test_failed_uses_error_code(self):
        result = IssueResult.failed(StoreUnavailableError("boom"))
        assert result.code == "STORE_UNAVAILABLE"
        assert result.message == "boom"
        assert result.retryable is True
