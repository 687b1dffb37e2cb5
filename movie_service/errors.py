"""Application error codes and the typed failure carried through the service layer."""

from dataclasses import dataclass
from enum import IntEnum

from fastapi import status


class ErrorCode(IntEnum):
    VALIDATION_ERROR = 9990
    EXTERNAL_SERVICE_ERROR = 9991
    INTERNAL_SERVICE_ERROR = 9992
    UNKNOWN_ERROR = 9999

    # Movie errors
    DUPLICATE_MOVIE_EXISTS = 10001
    MOVIE_NOT_FOUND = 10002
    DATABASE_ERROR = 10003


@dataclass(frozen=True)
class ServiceError:
    """An error code bound to the HTTP status and message sent to the client."""

    code: ErrorCode
    http_status: int
    message: str

    def to_dict(self) -> dict:
        return {"code": int(self.code), "error": self.message}

    @classmethod
    def duplicate_movie(cls) -> "ServiceError":
        return cls(
            ErrorCode.DUPLICATE_MOVIE_EXISTS,
            status.HTTP_409_CONFLICT,
            "A movie with this title already exists",
        )

    @classmethod
    def movie_not_found(cls, movie_id: int) -> "ServiceError":
        return cls(
            ErrorCode.MOVIE_NOT_FOUND,
            status.HTTP_404_NOT_FOUND,
            f"Movie {movie_id} not found",
        )

    @classmethod
    def database_error(cls, message: str) -> "ServiceError":
        return cls(
            ErrorCode.DATABASE_ERROR,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            message,
        )
