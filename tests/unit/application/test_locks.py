"""
Unit tests for InvoiceLockRegistry.
"""

import asyncio

import pytest

from invoicing.application.locks import InvoiceLockRegistry


class TestInvoiceLockRegistry:
    """Test cases for per-invoice locking."""

    @pytest.mark.asyncio
    async def test_same_invoice_is_serialized(self, locks):
        """Test that a second holder waits for the first."""
        order = []

        async def worker(name: str):
            async with locks.hold("inv-1"):
                order.append(f"{name}-in")
                await asyncio.sleep(0.01)
                order.append(f"{name}-out")

        await asyncio.gather(worker("a"), worker("b"))

        assert order == ["a-in", "a-out", "b-in", "b-out"]

    @pytest.mark.asyncio
    async def test_different_invoices_run_in_parallel(self, locks):
        """Test that holding one invoice does not block another."""
        async with locks.hold("inv-1"):
            await asyncio.wait_for(self._enter(locks, "inv-2"), timeout=1)
            assert locks.is_locked("inv-1")

    @pytest.mark.asyncio
    async def test_locks_are_released_on_error(self, locks):
        """Test release and cleanup when the block raises."""
        with pytest.raises(ValueError):
            async with locks.hold("inv-1"):
                raise ValueError("boom")

        assert not locks.is_locked("inv-1")
        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_timeout(self):
        """Test that a waiter gives up after the configured timeout."""
        locks = InvoiceLockRegistry(timeout=0.01)
        async with locks.hold("inv-1"):
            with pytest.raises(asyncio.TimeoutError):
                async with locks.hold("inv-1"):
                    pass
        assert len(locks) == 0

    @staticmethod
    async def _enter(locks, key):
        async with locks.hold(key):
            return True
