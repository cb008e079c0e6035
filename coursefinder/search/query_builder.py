"""
Course query translator: CourseSearchRequest -> Elasticsearch search body.
Pure and stateless; every optional filter becomes at most one bool clause.
"""

from collections.abc import Callable
from typing import Any

from coursefinder.schemas.course import CourseSearchRequest

# Index field names (must match the courses mapping)
TITLE_FIELD = "title"
DESCRIPTION_FIELD = "description"
CATEGORY_FIELD = "category"
TYPE_FIELD = "type"
MIN_AGE_FIELD = "minAge"
MAX_AGE_FIELD = "maxAge"
PRICE_FIELD = "price"
NEXT_SESSION_DATE_FIELD = "nextSessionDate"

DEFAULT_SORT = (NEXT_SESSION_DATE_FIELD, "asc")
SORT_OPTIONS: dict[str, tuple[str, str]] = {
    "priceasc": (PRICE_FIELD, "asc"),
    "pricedesc": (PRICE_FIELD, "desc"),
}

Clause = dict[str, Any]


def _present(value: Any) -> bool:
    """None and empty strings mean 'no constraint'. Zero is a real bound."""
    if value is None:
        return False
    if isinstance(value, str):
        return value != ""
    return True


def _range(field: str, op: str, value: Any) -> Clause:
    return {"range": {field: {op: value}}}


def _term(field: str, value: Any) -> Clause:
    return {"term": {field: value}}


def _keyword_match(keyword: str) -> Clause:
    return {
        "multi_match": {
            "query": keyword,
            "fields": [TITLE_FIELD, DESCRIPTION_FIELD],
        }
    }


# (occurrence, request attribute, clause builder). "must" scores, "filter" does not.
FILTERS: list[tuple[str, str, Callable[[Any], Clause]]] = [
    ("must", "keyword", _keyword_match),
    ("filter", "min_age", lambda v: _range(MIN_AGE_FIELD, "gte", v)),
    ("filter", "max_age", lambda v: _range(MAX_AGE_FIELD, "lte", v)),
    ("filter", "min_price", lambda v: _range(PRICE_FIELD, "gte", v)),
    ("filter", "max_price", lambda v: _range(PRICE_FIELD, "lte", v)),
    ("filter", "category", lambda v: _term(CATEGORY_FIELD, v)),
    ("filter", "type", lambda v: _term(TYPE_FIELD, v)),
    ("filter", "start_date", lambda v: _range(NEXT_SESSION_DATE_FIELD, "gte", v)),
]


def build_bool_query(request: CourseSearchRequest) -> Clause:
    """Conjunctive bool query over every filter present on the request. Empty bool matches all."""
    bool_query: dict[str, list[Clause]] = {}
    for occurrence, attr, build in FILTERS:
        value = getattr(request, attr)
        if _present(value):
            bool_query.setdefault(occurrence, []).append(build(value))
    return {"bool": bool_query}


def resolve_sort(sort: str | None) -> tuple[str, str]:
    """Map the sort parameter (case-insensitive) to (field, order). Unknown values use the default."""
    if not sort:
        return DEFAULT_SORT
    return SORT_OPTIONS.get(sort.lower(), DEFAULT_SORT)


def build_sort(sort: str | None) -> list[Clause]:
    field, order = resolve_sort(sort)
    return [{field: {"order": order}}]


def build_course_query(request: CourseSearchRequest) -> dict[str, Any]:
    """
    Full search body for the courses index: query, single sort key and page window.
    Keys match AsyncElasticsearch.search() kwargs so the result can be splatted into it.
    """
    return {
        "query": build_bool_query(request),
        "sort": build_sort(request.sort),
        "from_": request.page * request.size,
        "size": request.size,
        "track_total_hits": True,
    }
