"""
Event system setup and configuration.
Registers all event handlers with the event dispatcher.
"""

import logging

from invoicing.domain.events.base import DomainEvent, EventDispatcher, EventHandler
from invoicing.domain.events.invoice_events import InvoiceMarkedAsSent, InvoicePaid
from invoicing.domain.events.payment_events import PaymentRecorded


logger = logging.getLogger(__name__)


class LoggingEventHandler(EventHandler):
    """Records every domain event in the application log."""

    async def handle(self, event: DomainEvent) -> None:
        logger.info(f"Domain event {event.event_type} (ID: {event.event_id}): {event._get_event_data()}")


class InvoiceActivityHandler(EventHandler):
    """Handler for invoice lifecycle and payment activity."""

    def can_handle(self, event: DomainEvent) -> bool:
        return isinstance(event, (InvoiceMarkedAsSent, InvoicePaid, PaymentRecorded))

    async def handle(self, event: DomainEvent) -> None:
        if isinstance(event, InvoiceMarkedAsSent):
            logger.info(f"Invoice {event.invoice_number} sent to customer {event.customer_id} for {event.total}")
        elif isinstance(event, PaymentRecorded):
            logger.info(
                f"Payment {event.payment_id} of {event.amount} via {event.payment_method} "
                f"on invoice {event.invoice_id}, remaining {event.remaining_balance}"
            )
        elif isinstance(event, InvoicePaid):
            logger.info(f"Invoice {event.invoice_number} fully paid on {event.paid_date.isoformat()}")


def setup_event_handlers(dispatcher: EventDispatcher) -> None:
    """Set up and register all event handlers."""
    dispatcher.register_global_handler(LoggingEventHandler())

    activity_handler = InvoiceActivityHandler()
    dispatcher.register_handler("InvoiceMarkedAsSent", activity_handler)
    dispatcher.register_handler("InvoicePaid", activity_handler)
    dispatcher.register_handler("PaymentRecorded", activity_handler)

    registered = dispatcher.get_registered_handlers()
    for event_type, handlers in registered.items():
        logger.info(f"Event {event_type}: {', '.join(handlers)} handlers")


def initialize_event_system(dispatcher: EventDispatcher) -> EventDispatcher:
    """Initialize the complete event system."""
    try:
        setup_event_handlers(dispatcher)
        logger.info("Event system initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize event system: {str(e)}")
        raise
    return dispatcher
