"""
FastAPI application for RedInsight.

This module wires the Reddit proxy, the HTML fragment routes and static
serving of the single-page UI into one same-origin application.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from redinsight.api.endpoints import proxy, views
from redinsight.config.settings import settings
from redinsight.core.client import RedditProxyClient
from redinsight.core.dispatcher import Dispatcher
from redinsight.core.gateway import ProxyGateway
from redinsight.core.pipeline import ContentPipeline
from redinsight.models.dtos import ErrorBody
from redinsight.utils.logging_utils import setup_logging

logger = logging.getLogger(__name__)

INDEX_FILE = "index.html"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager for startup and shutdown events.

    Creates the upstream gateway and the in-process proxy client the fragment
    routes use, and closes both on shutdown.
    """
    setup_logging()
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    gateway = ProxyGateway()
    # Fragment routes reach Reddit through this app's own proxy route, without a network hop
    client = RedditProxyClient(
        base_url="http://redinsight.internal",
        transport=httpx.ASGITransport(app=app),
    )
    app.state.gateway = gateway
    app.state.dispatcher = Dispatcher(ContentPipeline(client))

    logger.info(f"Reddit API proxy available at {settings.PROXY_PREFIX}/*")
    logger.info("Health check at /api/health")

    yield

    logger.info("Shutting down application")
    await client.aclose()
    await gateway.close()


def _static_file(static_dir: Path, asset_path: str) -> Path | None:
    """Resolve ``asset_path`` inside ``static_dir``; None if missing or outside it."""
    root = static_dir.resolve()
    candidate = (root / asset_path).resolve()
    if not candidate.is_relative_to(root) or not candidate.is_file():
        return None
    return candidate


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Same-origin proxy for Reddit's JSON API and a browser viewer on top of it.",
        debug=settings.DEBUG,
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url=None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )

    app.include_router(proxy.router, prefix="/api", tags=["proxy"])
    app.include_router(views.router, prefix="/ui", tags=["ui"])

    static_dir = Path(settings.STATIC_DIR)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            body = ErrorBody(error="Not found")
        else:
            body = ErrorBody(error=f"HTTP error {exc.status_code}", message=str(exc.detail))
        return JSONResponse(body.model_dump(), status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Server error on {request.url.path}: {exc}", exc_info=exc)
        body = ErrorBody(error="Internal server error", message=str(exc))
        return JSONResponse(body.model_dump(), status_code=500)

    @app.get("/", include_in_schema=False)
    async def index() -> FileResponse:
        return FileResponse(static_dir / INDEX_FILE)

    @app.get("/{asset_path:path}", include_in_schema=False)
    async def static_asset(asset_path: str) -> FileResponse:
        path = _static_file(static_dir, asset_path)
        if path is None:
            raise StarletteHTTPException(status_code=404)
        return FileResponse(path)

    return app


# Create the application instance
app = create_app()
