"""
foodlog API application factory.

This is the thin orchestration layer that:
1. Reads configuration through a ConfigProvider
2. Builds the token store and auth service once per process
3. Exposes the /auth endpoints and health checks

All business logic is in the modules, following black box principles.
The auth service lives on app.state and reaches handlers through
dependencies; there are no module-level service globals.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Body, Depends, FastAPI, Header, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from foodlog import __version__
from foodlog.config.provider import ConfigProvider, EnvConfigProvider
from foodlog.modules.api import (
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    TokenRequest,
    ValidateResponse,
)
from foodlog.modules.auth import AuthFactory, DefaultAuthenticationService, ValidateResult, extract_token
from foodlog.modules.storage import (
    InMemoryTokenStore,
    RedisTokenStore,
    TokenStore,
    TokenStoreUnavailable,
    create_redis_client,
)

logger = logging.getLogger("foodlog.api")

SESSION_EXPIRED_MESSAGE = "Session expired, please log in again"
STORE_UNAVAILABLE_MESSAGE = "Token store unavailable, please try again"


def create_app(
    config_provider: Optional[ConfigProvider] = None,
    token_store: Optional[TokenStore] = None,
    clock=None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        config_provider: Configuration source; environment by default
        token_store: Prebuilt token store. When omitted the store named by
            TOKEN_STORE is created in the lifespan.
        clock: Optional time source passed to the auth module

    Returns:
        Configured FastAPI application
    """
    config_provider = config_provider or EnvConfigProvider()
    api_config = config_provider.get_api_config()
    build_kwargs = {"clock": clock} if clock is not None else {}

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifecycle - initialize and cleanup resources."""
        logger.info("Starting foodlog auth API...")
        redis_client = None

        if app.state.auth_service is None:
            if api_config.token_store == "memory":
                logger.warning("Using in-memory token store; sessions are lost on restart")
                store = InMemoryTokenStore(**build_kwargs)
            else:
                redis_config = config_provider.get_redis_config()
                redis_client = create_redis_client(redis_config)
                store = RedisTokenStore(redis_client)
                logger.info(f"Token store: Redis at {redis_config.host}:{redis_config.port}")

            app.state.token_store = store
            app.state.auth_service = AuthFactory.build(config_provider, store, **build_kwargs)

        logger.info("foodlog auth API started successfully")

        yield

        logger.info("Shutting down foodlog auth API...")
        if redis_client is not None:
            await redis_client.aclose()
        logger.info("foodlog auth API shutdown complete")

    app = FastAPI(
        title="foodlog API",
        description="Admin authentication for the foodlog food tracker",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=api_config.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["Authorization", "Content-Type", "X-Admin-Token"],
    )

    app.state.token_store = token_store
    app.state.auth_service = (
        AuthFactory.build(config_provider, token_store, **build_kwargs)
        if token_store is not None
        else None
    )

    _register_routes(app)
    _register_error_handlers(app)
    return app


# Dependency injection helpers


def get_auth_service(request: Request) -> DefaultAuthenticationService:
    """Return the auth service built at startup."""
    auth_service = getattr(request.app.state, "auth_service", None)
    if auth_service is None:
        raise HTTPException(503, "Service not initialized")
    return auth_service


async def require_admin(
    authorization: Optional[str] = Header(None, description="Bearer session token"),
    x_admin_token: Optional[str] = Header(None, description="Session token"),
    auth_service: DefaultAuthenticationService = Depends(get_auth_service),
) -> ValidateResult:
    """
    Guard for admin-only routes.

    Returns:
        ValidateResult of the request's token
    """
    result = await auth_service.authenticate(authorization, x_admin_token)
    if not result.valid:
        raise HTTPException(
            status_code=401,
            detail=SESSION_EXPIRED_MESSAGE,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return result


def _request_token(
    payload: Optional[TokenRequest],
    authorization: Optional[str],
    x_admin_token: Optional[str],
) -> str:
    return extract_token(
        body_token=payload.token if payload else None,
        authorization=authorization,
        x_admin_token=x_admin_token,
    )


def _register_routes(app: FastAPI) -> None:
    @app.post("/auth/login", response_model=LoginResponse)
    async def login(
        payload: LoginRequest,
        auth_service: DefaultAuthenticationService = Depends(get_auth_service),
    ):
        """
        Exchange the admin PIN for a session token.

        Returns:
            200 with token and expiry, 401 for any rejected PIN
        """
        result = await auth_service.login(payload.pin.get_secret_value())
        if not result.ok:
            raise HTTPException(401, result.error)
        return LoginResponse(token=result.token, expires_at=result.expires_at)

    @app.post("/auth/validate", response_model=ValidateResponse, response_model_exclude_none=True)
    async def validate(
        payload: Optional[TokenRequest] = Body(None),
        authorization: Optional[str] = Header(None),
        x_admin_token: Optional[str] = Header(None),
        auth_service: DefaultAuthenticationService = Depends(get_auth_service),
    ):
        """Report whether a session token is still active."""
        token = _request_token(payload, authorization, x_admin_token)
        result = await auth_service.validate(token)
        return ValidateResponse(valid=result.valid, role=result.role, expires_at=result.expires_at)

    @app.post("/auth/logout", response_model=LogoutResponse)
    async def logout(
        payload: Optional[TokenRequest] = Body(None),
        authorization: Optional[str] = Header(None),
        x_admin_token: Optional[str] = Header(None),
        auth_service: DefaultAuthenticationService = Depends(get_auth_service),
    ):
        """Revoke a session token. Always acknowledges."""
        token = _request_token(payload, authorization, x_admin_token)
        await auth_service.logout(token)
        return LogoutResponse()

    # Health/Monitoring Endpoints

    @app.get("/healthz")
    async def healthz():
        """
        Minimal health check endpoint for readiness/liveness probes.

        Returns:
            200: Service is running
        """
        return {"status": "ok"}

    @app.get("/health")
    async def health_check(request: Request):
        """
        Health check with token store status.

        Returns:
            200: Service healthy
            503: Token store unreachable or service not initialized
        """
        auth_service = getattr(request.app.state, "auth_service", None)
        store = getattr(request.app.state, "token_store", None)
        if auth_service is None or store is None:
            return JSONResponse(status_code=503, content={"status": "unhealthy", "modules": "not initialized"})

        try:
            await store.ping()
        except TokenStoreUnavailable as e:
            logger.error(f"Health check failed: {e}")
            return JSONResponse(
                status_code=503,
                content={"status": "unhealthy", "token_store": "disconnected"},
            )

        return {
            "status": "healthy",
            "token_store": "connected",
            "admin_login": "enabled" if auth_service.is_enabled else "disabled",
            "version": __version__,
        }


# Error handlers


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(TokenStoreUnavailable)
    async def token_store_error_handler(request: Request, exc: TokenStoreUnavailable):
        """Handle token store outages as retryable service errors."""
        logger.error(f"Token store error on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=503,
            content=ErrorResponse(error=STORE_UNAVAILABLE_MESSAGE).model_dump(),
            headers={"Retry-After": "1"},
        )
