"""
Course search service - runs a translated query and shapes the result.
Keeps the endpoint thin: translation lives in search.query_builder, I/O in search.elasticsearch_client.
Elasticsearch errors propagate unchanged (no retry, no fallback).
"""

import logging
import time
from typing import Any

from elasticsearch import AsyncElasticsearch
from prometheus_client import Counter, Histogram

from coursefinder.schemas.course import (
    CourseDocument,
    CourseSearchRequest,
    CourseSearchResponse,
    CourseSummary,
)
from coursefinder.search.elasticsearch_client import search_courses
from coursefinder.search.query_builder import build_course_query, resolve_sort

logger = logging.getLogger(__name__)

SEARCH_REQUESTS = Counter(
    "course_search_requests_total",
    "Course searches issued to Elasticsearch",
    ["sort_field"],
)
SEARCH_LATENCY = Histogram(
    "course_search_latency_seconds",
    "Time spent waiting on Elasticsearch for a course search",
)


def _hit_to_document(hit: dict[str, Any]) -> CourseDocument:
    """Hit _source as a document; id falls back to the index _id."""
    source = {"id": hit.get("_id"), **hit.get("_source", {})}
    return CourseDocument.model_validate(source)


def _document_to_summary(doc: CourseDocument) -> CourseSummary:
    """Drop description, grade range and ages from the response."""
    return CourseSummary(
        id=doc.id,
        title=doc.title,
        category=doc.category,
        type=doc.type,
        price=doc.price,
        next_session_date=doc.next_session_date,
    )


def _total_hits(hits: dict[str, Any]) -> int:
    total = hits.get("total")
    if isinstance(total, dict):
        return int(total.get("value", 0))
    if isinstance(total, int):
        return total
    return len(hits.get("hits", []))


class CourseSearchService:
    """Single-shot course search: translate, execute, project."""

    def __init__(self, es: AsyncElasticsearch):
        self.es = es

    async def search(self, request: CourseSearchRequest) -> CourseSearchResponse:
        body = build_course_query(request)
        sort_field, _ = resolve_sort(request.sort)
        logger.debug("course search body=%s", body)

        SEARCH_REQUESTS.labels(sort_field=sort_field).inc()
        start = time.perf_counter()
        try:
            response = await search_courses(self.es, body)
        finally:
            SEARCH_LATENCY.observe(time.perf_counter() - start)

        hits = response["hits"]
        total = _total_hits(hits)
        if total == 0:
            logger.info("course search returned 0 hits: %s", request.model_dump(exclude_none=True))
        courses = [_document_to_summary(_hit_to_document(hit)) for hit in hits.get("hits", [])]
        return CourseSearchResponse(total=total, courses=courses)
