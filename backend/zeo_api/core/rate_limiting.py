"""
Per-client request throttling (slowapi, keyed on the remote address).

Public reads are unthrottled apart from search; admin writes and the
health probes carry their own budgets.
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
import logging

from zeo_api.core.config import settings

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)

SEARCH_LIMIT = "120/minute"   # GET /api/search
ADMIN_LIMIT = "60/minute"     # every /api/admin write
HEALTH_LIMIT = "1000/minute"  # uptime monitors poll /api/health*

DEFAULT_RETRY_AFTER = 60


def _retry_after(exc: RateLimitExceeded) -> int:
    """Length of the exceeded window in seconds."""
    item = getattr(getattr(exc, "limit", None), "limit", None)
    return item.get_expiry() if item is not None else DEFAULT_RETRY_AFTER


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    retry_after = _retry_after(exc)
    client = request.client.host if request.client else "unknown"
    logger.warning(f"{request.method} {request.url.path} throttled for {client} ({exc.detail})")
    return JSONResponse(
        status_code=429,
        content={
            "error": "too_many_requests",
            "message": f"Rate limit of {exc.detail} exceeded. Try again in {retry_after} seconds.",
            "retry_after": retry_after,
        },
        headers={"Retry-After": str(retry_after)},
    )
