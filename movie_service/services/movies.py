"""Business rules for movie records: title uniqueness, filtered listing and typed outcomes.

Every public method returns a :class:`Success` or a :class:`Failure`. Expected
conditions (missing record, duplicate title, database failure) never escape as
exceptions; anything else is a defect and propagates to the HTTP layer.
"""

import logging
import math

from movie_service.errors import ServiceError
from movie_service.models import MovieCreate, MovieFilters, MovieUpdate
from movie_service.services.database import (
    MoviePredicate,
    MovieRepository,
    PersistenceError,
    RecordNotFoundError,
    UniqueViolationError,
)
from movie_service.services.results import Failure, ServiceResult, Success

logger = logging.getLogger(__name__)


def _fail(error: ServiceError) -> Failure:
    logger.warning("%s: %s", error.code.name, error.message)
    return Failure(error)


def _database_failure(action: str, exc: PersistenceError) -> Failure:
    logger.exception("Database error while trying to %s: %s", action, exc)
    return Failure(ServiceError.database_error(f"Failed to {action}"))


class MovieService:
    def __init__(self, repository: MovieRepository):
        self._repo = repository

    def _title_taken(self, title: str, exclude_id: int | None = None) -> bool:
        return self._repo.find_one(MoviePredicate(title=title, exclude_id=exclude_id)) is not None

    def create_movie(self, payload: MovieCreate) -> ServiceResult[dict]:
        fields = payload.model_dump()
        try:
            if self._title_taken(payload.title):
                return _fail(ServiceError.duplicate_movie())
            movie = self._repo.create(fields)
        except UniqueViolationError:
            # Lost a race with a concurrent create of the same title.
            return _fail(ServiceError.duplicate_movie())
        except PersistenceError as exc:
            return _database_failure("create movie", exc)

        logger.info("Created movie id=%s title=%r", movie["id"], movie["title"])
        return Success("Movie created successfully", movie)

    def get_movies(self, filters: MovieFilters | None = None) -> ServiceResult[dict]:
        filters = filters or MovieFilters()
        predicate = MoviePredicate(
            genre=filters.genre,
            director=filters.director,
            min_year=filters.min_year,
            max_year=filters.max_year,
            min_rating=filters.min_rating,
        )
        skip = (filters.page - 1) * filters.limit

        try:
            movies, total = self._repo.find_page(predicate, skip=skip, limit=filters.limit)
        except PersistenceError as exc:
            return _database_failure("fetch movies", exc)

        return Success(
            "Movies retrieved successfully",
            {
                "records": movies,
                "pagination": {
                    "page": filters.page,
                    "limit": filters.limit,
                    "total": total,
                    "total_pages": math.ceil(total / filters.limit),
                },
            },
        )

    def get_movie_by_id(self, movie_id: int) -> ServiceResult[dict]:
        try:
            movie = self._repo.find_by_id(movie_id)
        except PersistenceError as exc:
            return _database_failure("fetch movie", exc)

        if movie is None:
            return _fail(ServiceError.movie_not_found(movie_id))
        return Success("Movie retrieved successfully", movie)

    def update_movie(self, movie_id: int, payload: MovieUpdate) -> ServiceResult[dict]:
        changes = payload.changes()
        try:
            if self._repo.find_by_id(movie_id) is None:
                return _fail(ServiceError.movie_not_found(movie_id))
            if "title" in changes and self._title_taken(changes["title"], exclude_id=movie_id):
                return _fail(ServiceError.duplicate_movie())
            movie = self._repo.update(movie_id, changes)
        except RecordNotFoundError:
            # Deleted between the existence check and the write.
            return _fail(ServiceError.movie_not_found(movie_id))
        except UniqueViolationError:
            return _fail(ServiceError.duplicate_movie())
        except PersistenceError as exc:
            return _database_failure("update movie", exc)

        logger.info("Updated movie id=%s fields=%s", movie_id, sorted(changes))
        return Success("Movie updated successfully", movie)

    def delete_movie(self, movie_id: int) -> ServiceResult[None]:
        try:
            if self._repo.find_by_id(movie_id) is None:
                return _fail(ServiceError.movie_not_found(movie_id))
            self._repo.delete(movie_id)
        except RecordNotFoundError:
            return _fail(ServiceError.movie_not_found(movie_id))
        except PersistenceError as exc:
            return _database_failure("delete movie", exc)

        logger.info("Deleted movie id=%s", movie_id)
        return Success("Movie deleted successfully")
