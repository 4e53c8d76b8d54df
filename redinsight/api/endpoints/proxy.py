"""
Reddit proxy and health endpoints.

``/api/reddit/<path>`` forwards to ``https://www.reddit.com/<path>.json`` and
relays the upstream status and body; ``/api/health`` is a liveness probe that
does not touch the upstream.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from redinsight.config.settings import settings
from redinsight.core.gateway import CORS_HEADERS, ProxyGateway
from redinsight.models.dtos import HealthStatus

router = APIRouter()
logger = logging.getLogger(__name__)


def get_gateway(request: Request) -> ProxyGateway:
    """Gateway created by the application lifespan."""
    return request.app.state.gateway


@router.get("/reddit/{reddit_path:path}", summary="Forward a read-only request to Reddit")
async def proxy_reddit(
    reddit_path: str,
    request: Request,
    gateway: ProxyGateway = Depends(get_gateway),
) -> JSONResponse:
    """
    Forward a request to Reddit's JSON API.

    Args:
        reddit_path: Path below ``/api/reddit``, e.g. ``r/python/top``
        request: Incoming request; its query string is passed through verbatim
        gateway: Upstream forwarder

    Returns:
        JSONResponse: Upstream JSON (200), or ``{error, message}`` with the
        upstream status, or 500 when Reddit could not be reached.
    """
    result = await gateway.forward(reddit_path, request.query_params.multi_items())
    return JSONResponse(content=result.body, status_code=result.status_code, headers=CORS_HEADERS)


@router.get("/health", response_model=HealthStatus, summary="Health Check")
async def health_check() -> HealthStatus:
    return HealthStatus(status="OK", message=f"{settings.APP_NAME} API is running")
