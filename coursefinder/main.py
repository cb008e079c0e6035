"""
FastAPI application entry point.
Mounts routes, Prometheus metrics, startup index check and the search-backend error handler.
"""

import logging
from contextlib import asynccontextmanager

from elasticsearch import ApiError, TransportError
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from coursefinder.config import get_settings
from coursefinder.api.v1.router import api_router
from coursefinder.search.elasticsearch_client import close_elasticsearch, ensure_courses_index

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: ensure the courses index when ES is available. Shutdown: close the ES client."""
    try:
        await ensure_courses_index()
    except (ApiError, TransportError) as e:
        # ES may be down at boot; searches fail with 503 until it is reachable
        logger.warning("Could not ensure courses index at startup: %s", e)
    yield
    await close_elasticsearch()


async def search_backend_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Elasticsearch unreachable or faulted: generic failure, no retry."""
    logger.warning("Search backend error on %s %s: %r", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": "Search backend unavailable"})


async def search_api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Elasticsearch answered with an error: 5xx is an outage, 4xx is a rejected request."""
    if exc.meta.status >= 500:
        return await search_backend_error_handler(request, exc)
    logger.info("Search request rejected on %s %s: %r", request.method, request.url.path, exc)
    return JSONResponse(status_code=400, content={"detail": "Search request rejected by the index"})


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title=settings.app_name,
        description="Course search over Elasticsearch: keyword, age, price, category, type and date filters with sort and paging.",
        version="1.0.0",
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ApiError, search_api_error_handler)
    app.add_exception_handler(TransportError, search_backend_error_handler)

    # Prometheus metrics at /metrics
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()
