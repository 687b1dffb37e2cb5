"""Movie CRUD endpoints."""

import logging

from fastapi import APIRouter, Path, Query, Response, status
from fastapi.responses import JSONResponse

from movie_service.models import (
    DEFAULT_PAGE_SIZE,
    MAX_MOVIE_ID,
    MAX_PAGE,
    MAX_PAGE_SIZE,
    SQLITE_MAX_INT,
    SQLITE_MIN_INT,
    ErrorResponse,
    Movie,
    MovieCreate,
    MovieFilters,
    MovieListResponse,
    MovieResponse,
    MovieUpdate,
    Pagination,
)
from movie_service.services.movies import MovieService
from movie_service.services.results import Failure

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/movies", tags=["movies"])

_service: MovieService | None = None

FAILURE_RESPONSES = {
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_409_CONFLICT: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def init_router(service: MovieService) -> None:
    global _service
    _service = service


def _get_service() -> MovieService:
    assert _service is not None, "movies router not initialized"
    return _service


def _failure_response(failure: Failure) -> JSONResponse:
    return JSONResponse(status_code=failure.http_status, content=failure.error.to_dict())


def _movie_response(message: str, movie: dict) -> MovieResponse:
    return MovieResponse(message=message, data=Movie.model_validate(movie))


@router.post(
    "",
    response_model=MovieResponse,
    status_code=status.HTTP_201_CREATED,
    responses=FAILURE_RESPONSES,
)
def create_movie(payload: MovieCreate):
    """Create a movie. Titles must be unique."""
    result = _get_service().create_movie(payload)
    if isinstance(result, Failure):
        return _failure_response(result)
    return _movie_response(result.message, result.data)


@router.get("", response_model=MovieListResponse, responses=FAILURE_RESPONSES)
def list_movies(
    genre: str | None = Query(None, description="Genre contains (case-insensitive)"),
    director: str | None = Query(None, description="Director contains (case-insensitive)"),
    min_year: int | None = Query(
        None, alias="minYear", ge=SQLITE_MIN_INT, le=SQLITE_MAX_INT,
        description="Earliest release year",
    ),
    max_year: int | None = Query(
        None, alias="maxYear", ge=SQLITE_MIN_INT, le=SQLITE_MAX_INT,
        description="Latest release year",
    ),
    min_rating: float | None = Query(None, alias="minRating", description="Lowest rating"),
    page: int = Query(1, ge=1, le=MAX_PAGE, description="1-based page number"),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Results per page"),
):
    """List movies, newest first, with optional filters and pagination."""
    filters = MovieFilters(
        genre=genre,
        director=director,
        min_year=min_year,
        max_year=max_year,
        min_rating=min_rating,
        page=page,
        limit=limit,
    )
    result = _get_service().get_movies(filters)
    if isinstance(result, Failure):
        return _failure_response(result)
    return MovieListResponse(
        message=result.message,
        data=[Movie.model_validate(m) for m in result.data["records"]],
        pagination=Pagination.model_validate(result.data["pagination"]),
    )


@router.get("/{movie_id}", response_model=MovieResponse, responses=FAILURE_RESPONSES)
def get_movie(movie_id: int = Path(..., ge=1, le=MAX_MOVIE_ID)):
    """Get a single movie by its id."""
    result = _get_service().get_movie_by_id(movie_id)
    if isinstance(result, Failure):
        return _failure_response(result)
    return _movie_response(result.message, result.data)


@router.put("/{movie_id}", response_model=MovieResponse, responses=FAILURE_RESPONSES)
def update_movie(payload: MovieUpdate, movie_id: int = Path(..., ge=1, le=MAX_MOVIE_ID)):
    """Apply a partial update; fields left out of the body are unchanged."""
    result = _get_service().update_movie(movie_id, payload)
    if isinstance(result, Failure):
        return _failure_response(result)
    return _movie_response(result.message, result.data)


@router.delete(
    "/{movie_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=FAILURE_RESPONSES,
)
def delete_movie(movie_id: int = Path(..., ge=1, le=MAX_MOVIE_ID)):
    """Delete a movie; responds with an empty 204 body."""
    result = _get_service().delete_movie(movie_id)
    if isinstance(result, Failure):
        return _failure_response(result)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
