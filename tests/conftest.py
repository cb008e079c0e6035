"""
Pytest fixtures - in-memory Elasticsearch stand-in, API client, sample courses.
The fake evaluates the query DSL the app emits (bool/multi_match/range/term, sort, from/size)
so API tests check real filtering, ordering and paging without a cluster.
"""

import re
from datetime import datetime, timezone
from typing import Any

import pytest
import pytest_asyncio
from elastic_transport import ApiResponseMeta, HttpHeaders, NodeConfig
from httpx import ASGITransport, AsyncClient

from coursefinder.main import app
from coursefinder.search.elasticsearch_client import get_elasticsearch

DATE_FIELDS = {"nextSessionDate"}


def _parse_date(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _coerce(field: str, value: Any) -> Any:
    if field in DATE_FIELDS and isinstance(value, str):
        return _parse_date(value)
    return value


def _tokens(text: Any) -> set[str]:
    return set(re.findall(r"\w+", str(text or "").lower()))


def _clause_matches(clause: dict, doc: dict) -> bool:
    (kind, body), = clause.items()
    if kind == "multi_match":
        wanted = _tokens(body["query"])
        return any(wanted & _tokens(doc.get(f)) for f in body["fields"])
    if kind == "term":
        (field, value), = body.items()
        return doc.get(field) == value
    if kind == "range":
        (field, bounds), = body.items()
        if doc.get(field) is None:
            return False
        actual = _coerce(field, doc[field])
        for op, bound in bounds.items():
            bound = _coerce(field, bound)
            if op == "gte" and not actual >= bound:
                return False
            if op == "lte" and not actual <= bound:
                return False
        return True
    raise AssertionError(f"unexpected clause {kind}")


class FakeIndices:
    def __init__(self):
        self.created: dict[str, dict] = {}
        self.fail_with: Exception | None = None

    async def exists(self, index: str) -> bool:
        if self.fail_with is not None:
            raise self.fail_with
        return index in self.created

    async def create(self, index: str, settings: dict | None = None, mappings: dict | None = None):
        self.created[index] = {"settings": settings, "mappings": mappings}
        return {"acknowledged": True, "index": index}


class FakeElasticsearch:
    """Async client double holding documents in a list."""

    def __init__(self, docs: list[dict] | None = None):
        self.docs = list(docs or [])
        self.indices = FakeIndices()
        self.calls: list[dict] = []
        self.fail_with: Exception | None = None
        self.closed = False

    async def close(self):
        self.closed = True

    async def ping(self) -> bool:
        return self.fail_with is None

    async def search(self, *, index: str, query: dict, sort: list, from_: int = 0, size: int = 10, **kwargs):
        self.calls.append({"index": index, "query": query, "sort": sort, "from_": from_, "size": size, **kwargs})
        if self.fail_with is not None:
            raise self.fail_with
        bool_query = query["bool"]
        clauses = bool_query.get("must", []) + bool_query.get("filter", [])
        matched = [d for d in self.docs if all(_clause_matches(c, d) for c in clauses)]
        for sort_key in reversed(sort):
            (field, opts), = sort_key.items()
            matched.sort(key=lambda d: _coerce(field, d[field]), reverse=opts["order"] == "desc")
        page = matched[from_:from_ + size]
        return {
            "hits": {
                "total": {"value": len(matched), "relation": "eq"},
                "hits": [{"_index": index, "_id": d["id"], "_score": 1.0, "_source": d} for d in page],
            }
        }


def api_error(error_cls, status: int, message: str):
    """Elasticsearch ApiError (or subclass) as the client raises it for an HTTP error response."""
    meta = ApiResponseMeta(
        status=status,
        http_version="1.1",
        headers=HttpHeaders(),
        duration=0.0,
        node=NodeConfig("http", "localhost", 9200),
    )
    return error_cls(message, meta=meta, body={"error": {"reason": message}, "status": status})


def _course(id, title, description, category, type, grade_range, min_age, max_age, price, next_session_date):
    return {
        "id": id,
        "title": title,
        "description": description,
        "category": category,
        "type": type,
        "gradeRange": grade_range,
        "minAge": min_age,
        "maxAge": max_age,
        "price": price,
        "nextSessionDate": next_session_date,
    }


CATALOG = [
    _course("c1", "Intro to Algebra", "Equations and graphs for beginners", "Math", "COURSE", "6-8", 11, 14, 120.0, "2025-03-10T15:00:00Z"),
    _course("c2", "Robotics Club", "Build and program robots together", "Science", "CLUB", "5-8", 10, 14, 80.0, "2025-02-01T16:00:00Z"),
    _course("c3", "Watercolor Workshop", "One afternoon of painting with watercolor", "Art", "ONE_TIME", "1-3", 6, 9, 35.0, "2025-04-05T10:00:00Z"),
    _course("c4", "Chess Club", "Weekly chess strategy and games", "Games", "CLUB", "3-6", 8, 12, 50.0, "2025-01-20T17:00:00Z"),
    _course("c5", "Geometry Explorers", "Shapes, angles and graphs", "Math", "COURSE", "4-6", 9, 12, 95.0, "2025-05-12T15:30:00Z"),
    _course("c6", "Little Chemists", "Kitchen chemistry experiments", "Science", "ONE_TIME", "K-2", 5, 7, 25.0, "2025-02-15T09:00:00Z"),
]

ABC_COURSES = [
    _course("A", "Counting Games", "Numbers through play", "Math", "COURSE", "K-2", 5, 10, 10.0, "2025-03-01T10:00:00Z"),
    _course("B", "Fractions Lab", "Hands-on fractions", "Math", "COURSE", "3-5", 8, 12, 20.0, "2025-03-02T10:00:00Z"),
    _course("C", "Nature Walk", "Plants and insects outdoors", "Science", "ONE_TIME", "K-3", 5, 9, 15.0, "2025-03-03T10:00:00Z"),
]


@pytest.fixture
def fake_es() -> FakeElasticsearch:
    return FakeElasticsearch(CATALOG)


@pytest.fixture
def abc_courses() -> list[dict]:
    return [dict(c) for c in ABC_COURSES]


@pytest_asyncio.fixture
async def client(fake_es: FakeElasticsearch):
    async def override_get_elasticsearch():
        return fake_es

    app.dependency_overrides[get_elasticsearch] = override_get_elasticsearch
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_api_error():
    return api_error
