"""
Course search endpoint - filters, sort and paging over the courses index.
Query parameter names are camelCase to match the public API.
Parameters the index would reject are refused here with 422.
"""

import re
from datetime import datetime

from fastapi import APIRouter, HTTPException, Query

from coursefinder.config import get_settings
from coursefinder.core.dependencies import SearchService
from coursefinder.schemas.course import CourseSearchRequest, CourseSearchResponse

router = APIRouter()
settings = get_settings()

# Extended ISO-8601 only (what the index date format accepts): 2025-03-01 or 2025-03-01T10:00:00Z
ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}(T.+)?")


def _check_start_date(start_date: str | None) -> None:
    """startDate must be an ISO-8601 date or date-time. Empty means no filter."""
    if not start_date:
        return
    if ISO_DATE.fullmatch(start_date):
        try:
            datetime.fromisoformat(start_date.replace("Z", "+00:00"))
            return
        except ValueError:
            pass
    raise HTTPException(
        status_code=422,
        detail="startDate must be an ISO-8601 date or date-time",
    )


def _check_result_window(page: int, size: int) -> None:
    if (page + 1) * size > settings.max_result_window:
        raise HTTPException(
            status_code=422,
            detail=f"(page + 1) * size must not exceed {settings.max_result_window}",
        )


@router.get("", response_model=CourseSearchResponse)
async def search_courses_endpoint(
    svc: SearchService,
    keyword: str | None = Query(None),
    min_age: int | None = Query(None, alias="minAge"),
    max_age: int | None = Query(None, alias="maxAge"),
    min_price: float | None = Query(None, alias="minPrice"),
    max_price: float | None = Query(None, alias="maxPrice"),
    category: str | None = Query(None),
    type: str | None = Query(None),
    start_date: str | None = Query(None, alias="startDate", description="ISO-8601 date or date-time"),
    sort: str | None = Query(None, description="priceAsc, priceDesc; anything else sorts by next session date"),
    page: int = Query(0, ge=0),
    size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
):
    """Search courses. Absent or empty filters apply no constraint. REST: GET /search?category=Math&sort=priceAsc."""
    _check_start_date(start_date)
    _check_result_window(page, size)
    request = CourseSearchRequest(
        keyword=keyword,
        min_age=min_age,
        max_age=max_age,
        min_price=min_price,
        max_price=max_price,
        category=category,
        type=type,
        start_date=start_date,
        sort=sort,
        page=page,
        size=size,
    )
    return await svc.search(request)
