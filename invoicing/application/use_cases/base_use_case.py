"""
Base use case classes for the application layer.
Provides common patterns and structure for use case implementations.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, TypeVar, Generic, List
from dataclasses import dataclass

from invoicing.domain.models.base import DomainException, utc_now
from invoicing.domain.events.base import DomainEvent, EventDispatcher
from invoicing.domain.repositories.unit_of_work import UnitOfWork


logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')

UnitOfWorkFactory = Callable[[], UnitOfWork]


@dataclass
class UseCaseResult(Generic[T]):
    """Result wrapper for use case operations."""

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    exception: Optional[DomainException] = None
    metadata: Optional[Dict[str, Any]] = None

    @classmethod
    def success_result(cls, data: T, metadata: Optional[Dict[str, Any]] = None) -> "UseCaseResult[T]":
        """Create a successful result."""
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def error_result(
        cls,
        error: str,
        error_code: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> "UseCaseResult[T]":
        """Create an error result."""
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            metadata=metadata
        )

    @classmethod
    def from_exception(cls, exc: DomainException) -> "UseCaseResult[T]":
        """Create error result from a domain exception."""
        result = cls.error_result(exc.message, exc.code)
        result.exception = exc
        return result

    def unwrap(self) -> T:
        """Return the data, re-raising the domain exception of a failed result."""
        if self.success:
            return self.data
        if self.exception is not None:
            raise self.exception
        raise DomainException(self.error or "Use case failed", self.error_code)


class BaseUseCase(ABC, Generic[T, R]):
    """
    Base class for all use cases.

    Domain exceptions are returned as failed results. Anything else (a broken
    database connection, a bug) is logged and propagates unchanged.
    """

    def __init__(self, uow_factory: UnitOfWorkFactory):
        self.uow_factory = uow_factory

    async def execute(self, request: T) -> UseCaseResult[R]:
        """
        Execute the use case with error handling and logging.
        """
        started = utc_now()
        name = self.__class__.__name__

        try:
            result = await self._execute_business_logic(request)
        except DomainException as exc:
            elapsed = (utc_now() - started).total_seconds()
            logger.info(f"{name} rejected: {exc.code}: {exc.message}")
            error_result = UseCaseResult.from_exception(exc)
            error_result.metadata = {
                "execution_time_seconds": elapsed,
                "exception_type": type(exc).__name__
            }
            return error_result
        except Exception:
            logger.exception(f"{name} failed with an unexpected error")
            raise

        elapsed = (utc_now() - started).total_seconds()
        logger.debug(f"{name} succeeded in {elapsed:.3f}s")
        return UseCaseResult.success_result(
            result,
            metadata={"execution_time_seconds": elapsed}
        )

    @abstractmethod
    async def _execute_business_logic(self, request: T) -> R:
        """
        Execute the core business logic. Must be implemented by subclasses.
        """
        pass


class QueryUseCase(BaseUseCase[T, R]):
    """
    Base class for query use cases (read operations).
    """


class CommandUseCase(BaseUseCase[T, R]):
    """
    Base class for command use cases (write operations).
    Domain events collected during the command are published after it commits.
    """

    def __init__(self, uow_factory: UnitOfWorkFactory, dispatcher: Optional[EventDispatcher] = None):
        super().__init__(uow_factory)
        self.dispatcher = dispatcher
        self.events: List[DomainEvent] = []

    async def _execute_business_logic(self, request: T) -> R:
        """
        Run the command, then publish its events.
        Events from a failed command are discarded.
        """
        self.events = []
        try:
            result = await self._execute_command_logic(request)
        except Exception:
            self.events.clear()
            raise

        await self._publish_events()
        return result

    @abstractmethod
    async def _execute_command_logic(self, request: T) -> R:
        """Execute the command logic. Must be implemented by subclasses."""
        pass

    def _collect_events(self, *entities) -> None:
        """Take pending events from aggregates once their changes are committed."""
        for entity in entities:
            self.events.extend(entity.pull_events())

    async def _publish_events(self) -> None:
        """Publish collected domain events."""
        events, self.events = self.events, []
        if self.dispatcher is None:
            return
        await self.dispatcher.dispatch_all(events)
