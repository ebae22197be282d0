"""
FastAPI dependencies for the shared application services.
The app factory stores them on ``app.state``; tests can replace them there.
"""

from typing import Annotated

from fastapi import Depends, Request

from invoicing.application.locks import InvoiceLockRegistry
from invoicing.application.use_cases.base_use_case import UnitOfWorkFactory
from invoicing.domain.events.base import EventDispatcher


def get_uow_factory(request: Request) -> UnitOfWorkFactory:
    """Dependency to get the unit of work factory."""
    return request.app.state.uow_factory


def get_event_dispatcher(request: Request) -> EventDispatcher:
    """Dependency to get the event dispatcher."""
    return request.app.state.event_dispatcher


def get_invoice_locks(request: Request) -> InvoiceLockRegistry:
    """Dependency to get the invoice lock registry."""
    return request.app.state.invoice_locks


UowFactory = Annotated[UnitOfWorkFactory, Depends(get_uow_factory)]
Dispatcher = Annotated[EventDispatcher, Depends(get_event_dispatcher)]
InvoiceLocks = Annotated[InvoiceLockRegistry, Depends(get_invoice_locks)]
