"""
Unit tests for the domain event dispatcher.
"""

import pytest
from datetime import date

from invoicing.domain.events.base import EventDispatcher, EventHandler, DomainEvent
from invoicing.domain.events.invoice_events import InvoiceMarkedAsSent
from invoicing.domain.events.payment_events import PaymentRecorded


class FailingHandler(EventHandler):

    async def handle(self, event: DomainEvent) -> None:
        raise RuntimeError("mail server down")


def sent_event() -> InvoiceMarkedAsSent:
    return InvoiceMarkedAsSent(invoice_id="inv-1", invoice_number="INV-1000", customer_id="c-1", total="1100.0000")


class TestEventDispatcher:
    """Test cases for EventDispatcher."""

    @pytest.mark.asyncio
    async def test_dispatch_to_specific_and_global_handlers(self, recorder):
        """Test that both kinds of handlers receive the event."""
        specific = type(recorder)()
        dispatcher = EventDispatcher()
        dispatcher.register_handler("InvoiceMarkedAsSent", specific)
        dispatcher.register_global_handler(recorder)

        await dispatcher.dispatch(sent_event())

        assert specific.event_types == ["InvoiceMarkedAsSent"]
        assert recorder.event_types == ["InvoiceMarkedAsSent"]

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_stop_others(self, recorder):
        """Test that handler errors are logged and contained."""
        dispatcher = EventDispatcher()
        dispatcher.register_global_handler(FailingHandler())
        dispatcher.register_global_handler(recorder)

        await dispatcher.dispatch(sent_event())

        assert recorder.event_types == ["InvoiceMarkedAsSent"]

    @pytest.mark.asyncio
    async def test_dispatch_all_preserves_order(self, recorder):
        dispatcher = EventDispatcher()
        dispatcher.register_global_handler(recorder)
        payment = PaymentRecorded(
            payment_id="p-1",
            invoice_id="inv-1",
            amount="100.0000",
            payment_method="cash",
            payment_date=date(2026, 1, 5),
            remaining_balance="0.0000",
        )

        await dispatcher.dispatch_all([sent_event(), payment])

        assert recorder.event_types == ["InvoiceMarkedAsSent", "PaymentRecorded"]

    @pytest.mark.asyncio
    async def test_event_log_is_bounded(self):
        dispatcher = EventDispatcher(max_log_size=2)
        for _ in range(3):
            await dispatcher.dispatch(sent_event())

        log = dispatcher.get_event_log()
        assert len(log) == 2
        assert log[0]["event_type"] == "InvoiceMarkedAsSent"
        dispatcher.clear_event_log()
        assert dispatcher.get_event_log() == []

    def test_event_to_dict(self):
        data = sent_event().to_dict()
        assert data["event_type"] == "InvoiceMarkedAsSent"
        assert data["data"]["total"] == "1100.0000"
        assert data["event_id"]
