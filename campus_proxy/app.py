"""
FastAPI application entry point for the proxy.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional, Sequence

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from campus_proxy.auth import AuthClient
from campus_proxy.cache import TableCache
from campus_proxy.config import Settings, get_settings
from campus_proxy.debug_routes import router as debug_router
from campus_proxy.dependencies import build_backends
from campus_proxy.errors import ProxyError, ValidationFailed
from campus_proxy.routes import router
from campus_proxy.schemas import StatusResponse
from campus_proxy.store import StoreClient
from campus_proxy.tables import TABLES, TableService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Proxy ready, caching %s", ", ".join(app.state.cache.slots))
    yield
    app.state.cache.clear_all()


async def handle_proxy_error(request: Request, exc: ProxyError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "Error in %s %s: %s",
        request.method,
        request.url.path,
        exc.to_dict(),
        exc_info=exc.__cause__,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def _describe_validation_errors(errors: Sequence[dict]) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}"
        for error in errors
    )


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return await handle_proxy_error(
        request,
        ValidationFailed(
            "Invalid request", details=_describe_validation_errors(exc.errors())
        ),
    )


def create_app(
    settings: Optional[Settings] = None,
    *,
    store: Optional[StoreClient] = None,
    auth: Optional[AuthClient] = None,
    cache: Optional[TableCache] = None,
) -> FastAPI:
    settings = settings or get_settings()
    if store is None or auth is None:
        default_store, default_auth = build_backends(settings)
        store = default_store if store is None else store
        auth = default_auth if auth is None else auth
    if cache is None:
        cache = TableCache(
            [config.slot for config in TABLES], ttl_seconds=settings.cache_ttl_seconds
        )

    app = FastAPI(title="Campus Proxy", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.auth = auth
    app.state.cache = cache
    app.state.tables = {
        config.slot: TableService(config, store, cache) for config in TABLES
    }

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ProxyError, handle_proxy_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)

    @app.get("/", response_model=StatusResponse)
    def read_root():
        return StatusResponse(
            status="ok",
            message="Supabase proxy server is running",
            supabaseConnected=settings.supabase_configured,
        )

    app.include_router(router, prefix=settings.api_prefix)
    app.include_router(debug_router, prefix=settings.api_prefix)
    return app
