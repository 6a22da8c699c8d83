"""
Zeo Tourism Website API -- FastAPI Application
Destinations, tours, activities and hero sliders backed by SQLite,
plus static hosting of the built single-page frontend.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from pathlib import Path
import logging
import time

from slowapi.errors import RateLimitExceeded

from zeo_api.core.config import settings, resolve_path
from zeo_api.core.monitoring import configure_logging
from zeo_api.core.rate_limiting import limiter, rate_limit_handler
from zeo_api.api.errors import INTERNAL_ERROR
from zeo_api.db.database import init_db
from zeo_api.api import (
    health,
    routes_activities,
    routes_admin,
    routes_destinations,
    routes_search,
    routes_sliders,
    routes_tours,
)

configure_logging()
logger = logging.getLogger(__name__)

FRONTEND_DIR = resolve_path(settings.frontend_dist_dir)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment} | Database: {settings.database_url}")
    init_db()
    if not (FRONTEND_DIR / "index.html").is_file():
        logger.warning(f"Frontend build not found at {FRONTEND_DIR}; SPA fallback disabled")
    logger.info(f"API ready at {settings.api_prefix}/health")

    yield

    logger.info("Application shutting down")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Zeo Tourism website API -- destinations, tours, activities and sliders.",
    docs_url="/docs" if settings.debug else None,
    redoc_url=None,
    openapi_url="/openapi.json" if settings.debug else None,
    lifespan=lifespan,
)

# Rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_handler)

# GZip compression (min 500 bytes)
app.add_middleware(GZipMiddleware, minimum_size=500)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)


# Body-size cap + request logging + security headers (single pass)
@app.middleware("http")
async def request_middleware(request: Request, call_next):
    start = time.perf_counter()

    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit() and int(content_length) > settings.max_request_body_bytes:
        logger.warning(f"{request.method} {request.url.path} rejected: body of {content_length} bytes")
        return JSONResponse(status_code=413, content={"error": "Request body too large"})

    response = await call_next(request)

    elapsed = time.perf_counter() - start
    response.headers["X-Process-Time"] = f"{elapsed:.3f}"
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

    path = request.url.path
    if path.startswith(settings.api_prefix):
        logger.info(f"{request.method} {path} -> {response.status_code} in {elapsed:.3f}s")

    return response


# ---------------------------------------------------------------------------
# Exception handlers -- every error body is {"error": "..."}
# ---------------------------------------------------------------------------

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed path/query/body parameters answer 400."""
    first = exc.errors()[0] if exc.errors() else {}
    field = str(first.get("loc", ["request"])[-1])
    reason = first.get("msg", "invalid value")
    return JSONResponse(status_code=400, content={"error": f"Invalid {field}: {reason}"})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR})


# Include routers
app.include_router(health.router, prefix=settings.api_prefix)
app.include_router(routes_destinations.router, prefix=settings.api_prefix)
app.include_router(routes_activities.router, prefix=settings.api_prefix)
app.include_router(routes_tours.router, prefix=settings.api_prefix)
app.include_router(routes_search.router, prefix=settings.api_prefix)
app.include_router(routes_sliders.router, prefix=settings.api_prefix)
app.include_router(routes_admin.router, prefix=settings.api_prefix)


@app.api_route(
    settings.api_prefix + "/{rest:path}",
    methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
    include_in_schema=False,
)
async def api_not_found(rest: str):
    """Unknown API paths never fall through to the frontend."""
    return JSONResponse(status_code=404, content={"error": "API endpoint not found"})


# ---------------------------------------------------------------------------
# Built frontend: real files are served as-is, every other path gets index.html
# ---------------------------------------------------------------------------

def _frontend_file(path: str) -> Path:
    candidate = (FRONTEND_DIR / path).resolve()
    if path and candidate.is_file() and FRONTEND_DIR in candidate.parents:
        return candidate
    return FRONTEND_DIR / "index.html"


@app.get("/{full_path:path}", include_in_schema=False)
async def spa_fallback(full_path: str):
    target = _frontend_file(full_path)
    if not target.is_file():
        return JSONResponse(status_code=404, content={"error": "Not found"})
    return FileResponse(target)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "zeo_api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        workers=settings.api_workers,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
