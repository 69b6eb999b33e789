import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError

from budgetsync.api.middleware.error_handler import (
    handle_budget_sync_error,
    handle_generic_error,
    handle_integrity_error,
    handle_validation_error,
)
from budgetsync.api.middleware.logging import RequestLoggingMiddleware, configure_logging
from budgetsync.api.routes import router as api_router
from budgetsync.api.routes.health import router as health_router
from budgetsync.config import settings
from budgetsync.core.exceptions import BudgetSyncError
from budgetsync.core.locks import UserLockRegistry
from budgetsync.db.session import async_engine
from budgetsync.models.base import Base
from budgetsync.providers.base import TransactionProvider
from budgetsync.providers.plaid import PlaidClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    if settings.db_create_all:
        async with async_engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    logger.info(
        "Budget Sync API started",
        extra={"app_env": settings.app_env, "plaid_env": settings.plaid_env},
    )
    yield
    # Shutdown
    await async_engine.dispose()


def create_app(provider: TransactionProvider | None = None) -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="Budget Sync API",
        description="Bank transaction sync and keyword categorization for personal budgets",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.state.provider = provider or PlaidClient.from_settings(settings)
    app.state.user_locks = UserLockRegistry()

    app.add_middleware(RequestLoggingMiddleware)

    # Register exception handlers (order matters - most specific first)
    app.add_exception_handler(BudgetSyncError, handle_budget_sync_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(IntegrityError, handle_integrity_error)
    app.add_exception_handler(Exception, handle_generic_error)

    app.include_router(health_router)
    app.include_router(api_router)

    return app


app = create_app()


def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""
    uvicorn.run("budgetsync.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
