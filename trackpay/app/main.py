"""
FastAPI Application Entry Point.

This is the main application file for the TrackPay Backend.
Run with ``uvicorn trackpay.app.main:app``.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from trackpay.app.core.config import settings
from trackpay.app.core.observability import ObservabilityMiddleware, configure_logging
from trackpay.app.api.router import router as api_router
from trackpay.app.db.session import Database
from trackpay.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)

# Import models to ensure they are registered with Base
from trackpay.app.models.user import User
from trackpay.app.models.customer import Customer
from trackpay.app.models.purchase import Purchase
from trackpay.app.models.transaction import Transaction

configure_logging(settings.log_level)
logger = logging.getLogger("trackpay")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    1. Builds the database handle and creates missing tables on startup.
    2. Disposes the engine (closing pooled connections) on shutdown.
    """
    database = Database.from_settings()
    await database.create_all()
    app.state.database = database
    logger.info("%s %s started (%s)", settings.app_name, settings.app_version, settings.environment)

    yield

    await database.dispose()
    logger.info("Database disconnected, shutdown complete")


# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    description="Finance tracker backend: transactions, customers and purchase ledger sync",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(ObservabilityMiddleware)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


# Include API router
app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint.

    Returns:
        dict: Service status and version
    """
    return {
        "status": "OK",
        "message": f"{settings.app_name} is running",
        "version": settings.app_version,
        "environment": settings.environment,
    }
