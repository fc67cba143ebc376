"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from attendance_payroll.api.routes import (
    attendance_router,
    contributions_router,
    employees_router,
    health_router,
    payroll_router,
)
from attendance_payroll.config import configure_logging, get_settings
from attendance_payroll.database import dispose_db, init_db
from attendance_payroll.exceptions import (
    ConfigurationError,
    DuplicateEmployeeError,
    EmployeeNotFoundError,
    InvalidInputError,
    PayrollError,
    UnknownContributionError,
)

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    EmployeeNotFoundError: status.HTTP_404_NOT_FOUND,
    UnknownContributionError: status.HTTP_404_NOT_FOUND,
    DuplicateEmployeeError: status.HTTP_409_CONFLICT,
    ConfigurationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    init_db()
    yield
    await dispose_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Attendance Payroll API",
        description="Attendance-based payroll with Philippine statutory deductions",
        version=settings.engine_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(PayrollError)
    async def payroll_error_handler(request: Request, exc: PayrollError) -> JSONResponse:
        """Map domain errors to HTTP status codes."""
        status_code = status.HTTP_400_BAD_REQUEST
        for error_type, code in ERROR_STATUS.items():
            if isinstance(exc, error_type):
                status_code = code
                break
        if status_code == status.HTTP_422_UNPROCESSABLE_ENTITY:
            logger.warning("%s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=status_code,
            content={"detail": exc.message, "code": exc.code},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(contributions_router, prefix="/api/v1")
    app.include_router(employees_router, prefix="/api/v1")
    app.include_router(payroll_router, prefix="/api/v1")
    app.include_router(attendance_router, prefix="/api/v1")

    return app
