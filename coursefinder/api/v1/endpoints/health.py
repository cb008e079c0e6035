"""
Health checks - for load balancers, Kubernetes, and monitoring.
Liveness is process-only; readiness pings Elasticsearch.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from coursefinder.config import get_settings
from coursefinder.core.dependencies import ElasticsearchClient
from coursefinder.search.elasticsearch_client import ping

logger = logging.getLogger(__name__)

router = APIRouter()
settings = get_settings()


@router.get("")
async def health():
    """Liveness: is the process up?"""
    return {"status": "ok", "app": settings.app_name}


@router.get("/ready")
async def ready(es: ElasticsearchClient):
    """Readiness: can Elasticsearch be reached?"""
    try:
        reachable = await ping(es)
    except Exception as e:
        logger.warning("readiness ping failed: %s", e)
        reachable = False
    if not reachable:
        return JSONResponse(status_code=503, content={"status": "unavailable", "elasticsearch": "down"})
    return {"status": "ready", "elasticsearch": "up"}
