"""FastAPI application entry point for Whistle Ledger."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from whistleledger import __version__
from whistleledger.api.dependencies.cases import (
    get_lifecycle_config,
    get_reward_config,
)
from whistleledger.api.middleware.logging_middleware import LoggingMiddleware
from whistleledger.api.routes.health import router as health_router
from whistleledger.api.routes.investigator import router as investigator_router
from whistleledger.api.routes.management import router as management_router
from whistleledger.api.routes.whistleblower import router as whistleblower_router
from whistleledger.bootstrap.logging import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_logging()
    lifecycle = get_lifecycle_config()
    rewards = get_reward_config()
    structlog.get_logger().bind(component="startup").info(
        "case_service_started",
        lifecycle=lifecycle.variant.value,
        reward_balance=str(rewards.initial_balance),
        reward_currency=rewards.currency,
    )
    yield


app = FastAPI(
    title="Whistle Ledger API",
    description="Whistleblower case management",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(LoggingMiddleware)

app.include_router(health_router)
app.include_router(whistleblower_router)
app.include_router(investigator_router)
app.include_router(management_router)
