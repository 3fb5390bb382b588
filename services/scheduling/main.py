from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from services.common.http_errors import register_exception_handlers
from services.common.logging_config import (
    create_request_logging_middleware,
    get_logger,
    log_service_shutdown,
    log_service_startup,
    setup_service_logging,
)
from services.scheduling.api import calendar_router, employees_router
from services.scheduling.models import close_db
from services.scheduling.settings import get_settings

# Logging is configured in lifespan
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = get_settings()

    setup_service_logging(
        service_name="scheduling",
        log_level=settings.log_level,
        log_format=settings.log_format,
    )

    log_service_startup(
        "scheduling",
        version="0.1.0",
        prevent_double_booking=settings.prevent_double_booking,
    )
    yield
    close_db()
    log_service_shutdown("scheduling")


def include_routers(app: FastAPI) -> None:
    app.include_router(
        employees_router, prefix="/api/v1/calendar/employees", tags=["employees"]
    )
    app.include_router(calendar_router, prefix="/api/v1/calendar", tags=["calendar"])


app = FastAPI(
    title="Scheduling Service",
    version="0.1.0",
    description="Meeting booking, conflict detection and free-slot search.",
    lifespan=lifespan,
)

# Add request logging middleware
app.middleware("http")(create_request_logging_middleware())

# Register standardized exception handlers
register_exception_handlers(app)

include_routers(app)


@app.get("/")
def root() -> dict:
    logger.info("Root endpoint accessed")
    return {"message": "Welcome to the Scheduling Service"}


@app.get("/health")
def health() -> dict:
    logger.info("Health check endpoint accessed")
    return {"status": "ok"}
