from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from .errors import (
    ServiceError,
    service_error_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from .logging_config import configure_logging
from .repositories import Store, get_store
from .routers import auth as auth_router
from .routers import todos as todos_router
from .security import PasswordHasher, TokenService
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "auth", "description": "Signup and login; login returns the token for todo routes."},
    {"name": "todos", "description": "CRUD operations over the caller's own todo items."},
]


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None, store: Optional[Store] = None) -> FastAPI:
    """
    Build the FastAPI application.

    The store is opened when the app starts and closed when it shuts down;
    handlers reach it through ``app.state.store``.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    store = store or get_store(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        store.open()
        logger.info("todo service started with %s backend", store.name)
        try:
            yield
        finally:
            store.close()
            logger.info("todo service stopped")

    app = FastAPI(
        title="Todo Service",
        description="Per-user todo lists with signup, login and token-gated CRUD.",
        version="0.1.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.hasher = PasswordHasher(settings.bcrypt_rounds)
    app.state.tokens = TokenService(settings.jwt_secret)

    # Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # PUBLIC_INTERFACE
    @app.get("/", summary="Health Check", tags=["health"])
    def health_check(request: Request):
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health.
        """
        return {"message": "Healthy", "backend": request.app.state.store.name}

    app.include_router(auth_router.router)
    app.include_router(todos_router.router)
    return app
