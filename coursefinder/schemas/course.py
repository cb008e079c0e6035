"""Course request/response schemas - search API contract (camelCase on the wire)."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CourseDocument(BaseModel):
    """Full course as stored in the courses index."""

    id: str
    title: str | None = None
    description: str | None = None
    category: str | None = None
    type: str | None = None  # ONE_TIME, COURSE or CLUB; not enforced here
    grade_range: str | None = Field(None, alias="gradeRange")
    min_age: int | None = Field(None, alias="minAge")
    max_age: int | None = Field(None, alias="maxAge")
    price: float = 0.0
    next_session_date: datetime | None = Field(None, alias="nextSessionDate")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("price", mode="before")
    @classmethod
    def null_price_is_zero(cls, value):
        return 0.0 if value is None else value


class CourseSearchRequest(BaseModel):
    """Optional filters, sort and paging for a course search. Absent filter means no constraint."""

    keyword: str | None = None
    min_age: int | None = Field(None, alias="minAge")
    max_age: int | None = Field(None, alias="maxAge")
    min_price: float | None = Field(None, alias="minPrice")
    max_price: float | None = Field(None, alias="maxPrice")
    category: str | None = None
    type: str | None = None
    start_date: str | None = Field(None, alias="startDate")
    sort: str | None = None
    page: int = Field(0, ge=0)
    size: int = Field(10, ge=1)

    model_config = ConfigDict(populate_by_name=True)


class CourseSummary(BaseModel):
    """Reduced projection returned to clients (no description, grade range or ages)."""

    id: str
    title: str | None = None
    category: str | None = None
    type: str | None = None
    price: float = 0.0
    next_session_date: datetime | None = Field(None, alias="nextSessionDate")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("price", mode="before")
    @classmethod
    def null_price_is_zero(cls, value):
        return 0.0 if value is None else value


class CourseSearchResponse(BaseModel):
    total: int
    courses: list[CourseSummary]
