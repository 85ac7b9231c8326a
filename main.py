"""
WhatCanICook FastAPI Application
Main entry point: client construction, middleware, and route registration
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import uvicorn
from contextlib import asynccontextmanager
from typing import Optional

from api.routes import auth, users, premium, generation, health

from adapters import Clients, build_clients

from app.config import settings

from api.middleware import (
    RequestLoggingMiddleware,
    validation_exception_handler,
    http_exception_handler,
    app_exception_handler,
    general_exception_handler,
)
from app.exceptions import AppError

# Setup logging with configured level and format
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()), format=settings.log_format
)
_logger = logging.getLogger("whatcanicook.main")


def create_app(clients: Optional[Clients] = None) -> FastAPI:
    """
    Build the application. ``clients`` is used as-is when given (tests pass
    fakes); otherwise real clients are built from settings at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        _logger.info(f"Starting WhatCanICook in {settings.environment.value} mode")

        owned = clients is None
        app.state.clients = clients or build_clients(settings)

        # Best-effort: the profile endpoints fail until MongoDB is reachable
        if owned:
            try:
                app.state.clients.mongo.connect()
            except Exception as e:
                _logger.warning("Failed to connect to MongoDB; continuing: %s", e)

        try:
            yield
        finally:
            _logger.info("Shutting down WhatCanICook")
            if owned:
                app.state.clients.close()

    app = FastAPI(
        title=settings.api_title,
        version=settings.app_version,
        description=settings.api_description,
        lifespan=lifespan,
        debug=settings.debug,
        openapi_url=(
            f"{settings.api_prefix}/openapi.json" if not settings.is_production() else None
        ),
        docs_url=f"{settings.api_prefix}/docs" if not settings.is_production() else None,
        redoc_url=f"{settings.api_prefix}/redoc" if not settings.is_production() else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(AppError, app_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(auth.router, prefix=settings.api_prefix)
    app.include_router(users.router, prefix=settings.api_prefix)
    app.include_router(premium.router, prefix=settings.api_prefix)
    app.include_router(generation.router, prefix=settings.api_prefix)
    app.include_router(health.router, prefix=settings.api_prefix)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development(),
        log_level=settings.log_level.lower(),
    )
