"""Unit tests for per-repository sync leases."""

import asyncio

import pytest

from fork_sync_manager.synchronize.locks import RepositorySyncLocks


@pytest.mark.asyncio
async def test_lease_is_acquired_and_released() -> None:
    """Test that a free repository is leased for the duration of the block."""
    locks = RepositorySyncLocks()
    async with locks.try_acquire("acme/widgets") as acquired:
        assert acquired is True
        assert locks.is_locked("acme/widgets") is True
    assert locks.is_locked("acme/widgets") is False


@pytest.mark.asyncio
async def test_overlapping_attempt_is_skipped() -> None:
    """Test that a second attempt on a leased repository does not acquire it."""
    locks = RepositorySyncLocks()
    async with locks.try_acquire("acme/widgets") as first:
        async with locks.try_acquire("ACME/Widgets") as second:
            assert first is True
            assert second is False
        assert locks.is_locked("acme/widgets") is True


@pytest.mark.asyncio
async def test_different_repositories_do_not_block_each_other() -> None:
    """Test that leases are keyed per repository."""
    locks = RepositorySyncLocks()
    async with locks.try_acquire("acme/widgets") as first:
        async with locks.try_acquire("acme/gadgets") as second:
            assert first is True
            assert second is True


@pytest.mark.asyncio
async def test_concurrent_tasks_only_one_runs() -> None:
    """Test that of two concurrent tasks for one repository only one does the work."""
    locks = RepositorySyncLocks()
    started = asyncio.Event()
    release = asyncio.Event()
    runs: list[str] = []

    async def attempt(name: str) -> bool:
        async with locks.try_acquire("acme/widgets") as acquired:
            if not acquired:
                return False
            runs.append(name)
            started.set()
            await release.wait()
            return True

    first = asyncio.create_task(attempt("first"))
    await started.wait()
    second = await attempt("second")
    release.set()

    assert await first is True
    assert second is False
    assert runs == ["first"]


@pytest.mark.asyncio
async def test_lease_is_released_when_block_raises() -> None:
    """Test that an exception inside the block frees the lease."""
    locks = RepositorySyncLocks()
    with pytest.raises(RuntimeError):
        async with locks.try_acquire("acme/widgets"):
            raise RuntimeError("sync failed")
    assert locks.is_locked("acme/widgets") is False


@pytest.mark.asyncio
async def test_released_leases_are_forgotten() -> None:
    """Test that the registry only holds repositories with a sync in flight."""
    locks = RepositorySyncLocks()
    for index in range(3):
        async with locks.try_acquire(f"acme/widgets-{index}") as acquired:
            assert acquired is True
            assert list(locks._locks) == [f"acme/widgets-{index}"]
    with pytest.raises(RuntimeError):
        async with locks.try_acquire("acme/gadgets"):
            raise RuntimeError("sync failed")
    assert locks._locks == {}


@pytest.mark.asyncio
async def test_skipped_attempt_keeps_the_held_lease() -> None:
    """Test that a skipped attempt does not drop the lease of the running one."""
    locks = RepositorySyncLocks()
    async with locks.try_acquire("acme/widgets"):
        async with locks.try_acquire("acme/widgets") as second:
            assert second is False
        assert "acme/widgets" in locks._locks
        assert locks.is_locked("acme/widgets") is True
    assert locks._locks == {}
