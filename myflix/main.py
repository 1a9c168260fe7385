"""
myFlix - Application Factory

This is the thin orchestration layer that:
1. Loads configuration
2. Builds the service object at startup
3. Registers middleware, routers and error handlers

All business logic is in the modules, following black box principles.
Run it with `myflix serve`.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import redis.asyncio as redis
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from myflix import __version__
from myflix.config.provider import ConfigProvider, EnvConfigProvider
from myflix.modules.api import create_movies_router, create_users_router
from myflix.modules.api.models import HealthResponse
from myflix.modules.auth.interfaces import Clock
from myflix.modules.errors import AuthenticationError, FieldError, MyFlixError, ValidationError
from myflix.modules.middleware import create_bearer_token_middleware
from myflix.modules.storage import StorageModule
from myflix.modules.users.store import DEFAULT_BCRYPT_ROUNDS
from myflix.services import build_services

logger = logging.getLogger(__name__)

VERSION = __version__


def _error_body(status_code: int, message: str) -> dict:
    return {"error": message, "status": status_code}


def _validation_response(errors) -> JSONResponse:
    return JSONResponse(status_code=422, content={"errors": [e.to_dict() for e in errors]})


def register_error_handlers(app: FastAPI) -> None:
    """Translate module errors into HTTP responses at the route boundary."""

    @app.exception_handler(MyFlixError)
    async def myflix_error_handler(request: Request, exc: MyFlixError):
        if isinstance(exc, ValidationError):
            return _validation_response(exc.errors)

        if isinstance(exc, AuthenticationError):
            # Cause stays server-side; the client sees one uniform message
            logger.warning(
                f"{request.method} {request.url.path} rejected "
                f"({type(exc).__name__}): {exc.reason}"
            )
            return JSONResponse(
                status_code=exc.status_code,
                content=_error_body(exc.status_code, exc.public_message),
                headers={"WWW-Authenticate": "Bearer"},
            )

        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.status_code, exc.message),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = []
        for error in exc.errors():
            loc = [str(part) for part in error.get("loc", ())]
            location = loc[0] if loc else "body"
            param = ".".join(loc[1:]) or location
            errors.append(FieldError(param=param, msg=error.get("msg", "Invalid value"), location=location))
        return _validation_response(errors)

    @app.exception_handler(redis.ConnectionError)
    async def redis_error_handler(request: Request, exc: redis.ConnectionError):
        """Handle Redis connection errors."""
        logger.error(f"Redis connection error: {exc}")
        return JSONResponse(
            status_code=503,
            content=_error_body(503, "Database connection failed"),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content=_error_body(500, "Something went wrong"),
        )


def create_app(
    config_provider: Optional[ConfigProvider] = None,
    redis_client: Optional[redis.Redis] = None,
    bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS,
    clock: Optional[Clock] = None,
) -> FastAPI:
    """
    Build the myFlix FastAPI application.

    Args:
        config_provider: Configuration source; defaults to environment variables
        redis_client: Pre-built Redis client; when None one is connected at startup
        bcrypt_rounds: bcrypt cost factor for new password hashes
        clock: Optional clock for token issue/verify

    Returns:
        Configured FastAPI application

    Raises:
        ValueError: If required configuration (JWT_SECRET) is missing
    """
    config_provider = config_provider or EnvConfigProvider()
    api_config = config_provider.get_api_config()
    # Fail at construction rather than on the first login
    config_provider.get_auth_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Manage application lifecycle - initialize and cleanup resources.
        """
        logger.info("Starting myFlix API...")

        storage = None
        client = redis_client
        if client is None:
            storage = StorageModule(config_provider.get_storage_config())
            client = await storage.connect()

        app.state.services = build_services(
            config_provider, client, bcrypt_rounds=bcrypt_rounds, clock=clock
        )
        logger.info("myFlix API started successfully")

        yield

        logger.info("Shutting down myFlix API...")
        app.state.services = None
        if storage:
            await storage.disconnect()
        logger.info("myFlix API shutdown complete")

    app = FastAPI(
        title="myFlix API",
        description="Movie catalog with user accounts and favorite lists",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.services = None

    def resolve_auth_service(request: Request):
        services = request.app.state.services
        return services.auth if services else None

    auth_middleware = create_bearer_token_middleware(resolve_auth_service)

    @app.middleware("http")
    async def authentication_middleware(request, call_next):
        return await auth_middleware(request, call_next)

    # Added last so it wraps authentication: preflights and 401s carry CORS headers
    app.add_middleware(
        CORSMiddleware,
        allow_origins=api_config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(create_users_router())
    app.include_router(create_movies_router())
    register_error_handlers(app)

    @app.get("/")
    async def read_root():
        return {"message": "Welcome to myFlix!"}

    @app.get("/healthz")
    async def healthz():
        """
        Minimal health check endpoint for readiness/liveness probes.

        Returns:
            200: Service is running
        """
        return {"status": "ok"}

    @app.get("/health", response_model=HealthResponse)
    async def health_check(request: Request):
        """
        Health check including the Redis connection.

        Returns:
            200: Service healthy
            503: Service unhealthy
        """
        services = request.app.state.services
        try:
            if services is None:
                raise RuntimeError("services not initialized")
            await services.redis.ping()
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return JSONResponse(
                status_code=503,
                content={"status": "unhealthy", "redis": "disconnected", "version": VERSION},
            )
        return HealthResponse(status="healthy", redis="connected", version=VERSION)

    return app
