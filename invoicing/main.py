"""
Main FastAPI application entry point.
Configures the app, middleware, routers, and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
from typing import Dict, Any, Optional

from invoicing.config import settings
from invoicing.application.locks import InvoiceLockRegistry
from invoicing.application.use_cases.base_use_case import UnitOfWorkFactory
from invoicing.domain.events.base import EventDispatcher
from invoicing.infrastructure.db.database import engine, create_all_tables
from invoicing.infrastructure.db.unit_of_work import sqlalchemy_uow_factory
from invoicing.infrastructure.events.event_setup import initialize_event_system
from invoicing.infrastructure.web.middleware.error_handler import (
    ErrorHandlerMiddleware,
    register_exception_handlers,
)
from invoicing.infrastructure.web.routers import customers, invoices, payments, dashboard

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle.
    Setup and teardown operations.
    """
    # Startup
    logger.info(f"Starting {settings.api_title} v{settings.api_version}")
    logger.info(f"Environment: {settings.environment}")

    if settings.is_development and app.state.create_tables:
        create_all_tables(engine)
        logger.info("Database tables created")

    initialize_event_system(app.state.event_dispatcher)

    yield

    # Shutdown
    logger.info("Shutting down application")


def create_application(
    uow_factory: Optional[UnitOfWorkFactory] = None,
    event_dispatcher: Optional[EventDispatcher] = None,
    invoice_locks: Optional[InvoiceLockRegistry] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Collaborators default to the configured database; tests pass their own.
    """
    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        debug=settings.debug,
        docs_url=f"{settings.api_prefix}/docs" if settings.debug else None,
        redoc_url=f"{settings.api_prefix}/redoc" if settings.debug else None,
        openapi_url=f"{settings.api_prefix}/openapi.json" if settings.debug else None,
        lifespan=lifespan
    )

    app.state.create_tables = uow_factory is None
    app.state.uow_factory = uow_factory or sqlalchemy_uow_factory()
    app.state.event_dispatcher = event_dispatcher or EventDispatcher()
    app.state.invoice_locks = invoice_locks or InvoiceLockRegistry()

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    # Add custom error handler middleware
    app.add_middleware(ErrorHandlerMiddleware)
    register_exception_handlers(app)

    # Include routers
    app.include_router(
        customers.router,
        prefix=f"{settings.api_prefix}/customers",
        tags=["Customers"]
    )
    app.include_router(
        invoices.router,
        prefix=f"{settings.api_prefix}/invoices",
        tags=["Invoices"]
    )
    app.include_router(
        payments.router,
        prefix=f"{settings.api_prefix}/invoices/{{invoice_id}}/payments",
        tags=["Payments"]
    )
    app.include_router(
        payments.lookup_router,
        prefix=f"{settings.api_prefix}/payments",
        tags=["Payments"]
    )
    app.include_router(
        dashboard.router,
        prefix=f"{settings.api_prefix}/dashboard",
        tags=["Dashboard"]
    )

    # Root endpoint
    @app.get("/")
    async def root() -> Dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": settings.api_title,
            "version": settings.api_version,
            "environment": settings.environment,
            "docs": f"{settings.api_prefix}/docs" if settings.debug else None,
            "health": f"{settings.api_prefix}/health"
        }

    # Health check endpoint
    @app.get(f"{settings.api_prefix}/health")
    async def health_check() -> Dict[str, Any]:
        """Health check endpoint for monitoring."""
        return {
            "status": "healthy",
            "environment": settings.environment,
            "version": settings.api_version
        }

    # Unknown paths
    @app.exception_handler(404)
    async def not_found_handler(request: Request, exc):
        """Custom 404 error handler for unknown routes."""
        return JSONResponse(
            status_code=404,
            content={
                "error": "Not Found",
                "code": "NOT_FOUND",
                "message": f"The path {request.url.path} was not found",
                "path": request.url.path
            }
        )

    return app


# Create the FastAPI app instance
app = create_application()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "invoicing.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level="debug" if settings.debug else "info",
    )
