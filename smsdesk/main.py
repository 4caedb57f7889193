"""Main FastAPI application"""
from typing import Optional
import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from smsdesk.api.v1.api import api_router
from smsdesk.core.config import settings
from smsdesk.core.context import AppContext, build_context
from smsdesk.db.init_db import create_initial_data, init_db
from smsdesk.errors.handlers import (
    general_exception_handler,
    http_exception_handler,
    sqlalchemy_exception_handler,
    validation_exception_handler,
)
from smsdesk.middleware.request_logging import log_api_requests
from smsdesk.utils.logger import setup_file_logging

logger = logging.getLogger(__name__)


def create_app(context: Optional[AppContext] = None) -> FastAPI:
    """
    Build the application. A prepared *context* is used as-is; otherwise one
    is built from settings on startup.
    """
    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Credit-metered SMS sending with admin oversight and protected numbers",
        version=settings.PROJECT_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
    )
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(log_api_requests)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.on_event("startup")
    async def startup_event():
        """Build the context, initialize the database and log application startup"""
        if app.state.context is None:
            app.state.context = build_context(settings)
        ctx = app.state.context
        try:
            init_db(ctx.engine)
            create_initial_data(ctx.session_factory)
            logger.warning(f"{settings.PROJECT_NAME} STARTED - Database initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize database: {str(e)}")
            logger.warning(f"{settings.PROJECT_NAME} STARTED - Database initialization failed, but API is running")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Release the gateway client and the database pool"""
        if app.state.context is not None:
            await app.state.context.close()
        logger.warning(f"{settings.PROJECT_NAME} SHUTDOWN")

    return app


setup_file_logging(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO), settings.LOG_FILE)
app = create_app()
