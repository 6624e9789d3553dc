"""Tests for per-user fold serialization."""
import asyncio

import pytest

from fitlog.core.exceptions import AggregationError
from fitlog.services.analytics import UserLockRegistry


async def _critical_section(registry, user_id, log, name):
    async with registry.hold(user_id, timeout=1):
        log.append(f"{name}:start")
        await asyncio.sleep(0.01)
        log.append(f"{name}:end")


class TestUserLockRegistry:
    @pytest.mark.asyncio
    async def test_same_user_is_serialized(self):
        registry = UserLockRegistry()
        log = []

        await asyncio.gather(
            _critical_section(registry, "u1", log, "a"),
            _critical_section(registry, "u1", log, "b"),
        )

        assert log in (
            ["a:start", "a:end", "b:start", "b:end"],
            ["b:start", "b:end", "a:start", "a:end"],
        )

    @pytest.mark.asyncio
    async def test_different_users_overlap(self):
        registry = UserLockRegistry()
        log = []

        await asyncio.gather(
            _critical_section(registry, "u1", log, "a"),
            _critical_section(registry, "u2", log, "b"),
        )

        assert log[:2] == ["a:start", "b:start"]
        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_timeout_raises(self):
        registry = UserLockRegistry()

        async with registry.hold("u1", timeout=1):
            with pytest.raises(AggregationError):
                async with registry.hold("u1", timeout=0.01):
                    pass

        # Released after the block
        async with registry.hold("u1", timeout=0.01):
            pass

    @pytest.mark.asyncio
    async def test_lock_released_on_error(self):
        registry = UserLockRegistry()

        with pytest.raises(RuntimeError):
            async with registry.hold("u1", timeout=1):
                raise RuntimeError("boom")

        assert "u1" not in registry

    @pytest.mark.asyncio
    async def test_entry_dropped_after_hold(self):
        registry = UserLockRegistry()

        async with registry.hold("u1", timeout=1):
            assert "u1" in registry
            assert len(registry) == 1

        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_entry_kept_while_waiters_remain(self):
        registry = UserLockRegistry()
        log = []

        async with registry.hold("u1", timeout=1):
            waiter = asyncio.create_task(_critical_section(registry, "u1", log, "b"))
            await asyncio.sleep(0)
            log.append("a:end")

        # The waiter still owns the entry until it finishes
        assert "u1" in registry
        await waiter

        assert log == ["a:end", "b:start", "b:end"]
        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_timed_out_waiter_does_not_leak(self):
        registry = UserLockRegistry()

        async with registry.hold("u1", timeout=1):
            with pytest.raises(AggregationError):
                async with registry.hold("u1", timeout=0.01):
                    pass
            assert len(registry) == 1

        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_many_users_leave_registry_empty(self):
        registry = UserLockRegistry()

        for i in range(1000):
            async with registry.hold(f"user-{i}", timeout=1):
                pass

        assert len(registry) == 0
