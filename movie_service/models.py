"""Pydantic request/response schemas for the Movie API."""

from datetime import date, datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MIN_RELEASE_YEAR = 1888
RELEASE_YEAR_LEEWAY = 5
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

# SQLite stores signed 64-bit integers; larger values cannot be bound to a query.
SQLITE_MAX_INT = 2**63 - 1
SQLITE_MIN_INT = -(2**63)
MAX_MOVIE_ID = SQLITE_MAX_INT
# Keeps the OFFSET (page - 1) * limit within SQLITE_MAX_INT.
MAX_PAGE = SQLITE_MAX_INT // MAX_PAGE_SIZE


def max_release_year() -> int:
    return date.today().year + RELEASE_YEAR_LEEWAY


def _check_release_year(value: int) -> int:
    if value > max_release_year():
        raise ValueError(f"must be at most {max_release_year()}")
    return value


ReleaseYear = Annotated[int, Field(ge=MIN_RELEASE_YEAR), AfterValidator(_check_release_year)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Movie payloads

class MovieCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    director: str = Field(..., min_length=1, max_length=100)
    genre: str = Field(..., min_length=1, max_length=50)
    release_year: ReleaseYear
    rating: float | None = Field(None, ge=0, le=10)
    description: str | None = Field(None, max_length=1000)


class MovieUpdate(CamelModel):
    """Partial update; only the fields present in the request are applied."""

    title: str | None = Field(None, min_length=1, max_length=200)
    director: str | None = Field(None, min_length=1, max_length=100)
    genre: str | None = Field(None, min_length=1, max_length=50)
    release_year: ReleaseYear | None = None
    rating: float | None = Field(None, ge=0, le=10)
    description: str | None = Field(None, max_length=1000)

    @field_validator("title", "director", "genre", "release_year")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class Movie(CamelModel):
    id: int
    title: str
    director: str
    genre: str
    release_year: int
    rating: float | None = None
    description: str | None = None
    created_at: datetime
    updated_at: datetime


# Listing

class MovieFilters(CamelModel):
    genre: str | None = None
    director: str | None = None
    min_year: int | None = Field(None, ge=SQLITE_MIN_INT, le=SQLITE_MAX_INT)
    max_year: int | None = Field(None, ge=SQLITE_MIN_INT, le=SQLITE_MAX_INT)
    min_rating: float | None = None
    page: int = Field(1, ge=1, le=MAX_PAGE)
    limit: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


# Responses

class MovieResponse(CamelModel):
    message: str
    data: Movie


class MovieListResponse(CamelModel):
    message: str
    data: list[Movie]
    pagination: Pagination


class ErrorResponse(BaseModel):
    code: int
    error: str


class HealthResponse(BaseModel):
    status: str
    database: bool
    timestamp: datetime
