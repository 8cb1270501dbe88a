"""Tests for best-effort batch persistence."""

import logging

from breachscan.batching import BatchWriter
from breachscan.digest import digest_secret
from breachscan.models import BreachRecord
from breachscan.storage.memory import InMemoryRecordStorage


def _record(username: str) -> BreachRecord:
    return BreachRecord(
        username=username,
        domain="example.com",
        password_hash=digest_secret("pw"),
        source_file="dump.txt",
    )


class TestBatchWriter:
    """Group dispatch with isolated per-record failures."""

    async def test_writes_every_record(self):
        """All records of a healthy batch are stored."""
        store = InMemoryRecordStorage()
        await BatchWriter(store).write([_record("a"), _record("b"), _record("c")])
        assert sorted(r.username for r in store.records) == ["a", "b", "c"]

    async def test_empty_batch_is_noop(self, flaky_records):
        """Writing nothing touches nothing."""
        store = flaky_records()
        await BatchWriter(store).write([])
        assert store.attempts == 0

    async def test_failed_record_does_not_block_others(self, flaky_records, caplog):
        """One rejected insert is logged and dropped; the rest land and nothing raises."""
        store = flaky_records("bad")
        batch = [_record("a"), _record("bad"), _record("c")]

        with caplog.at_level(logging.WARNING, logger="breachscan.batching"):
            await BatchWriter(store).write(batch)

        assert store.attempts == 3
        assert sorted(r.username for r in store.records) == ["a", "c"]
        assert "Failed to persist 1 of 3 records" in caplog.text

    async def test_all_records_failing_still_returns(self, flaky_records):
        """Even a batch with no successful inserts completes without raising."""
        store = flaky_records("a", "b")
        await BatchWriter(store).write([_record("a"), _record("b")])
        assert store.records == []
