"""Outcome types returned by every MovieService operation."""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from movie_service.errors import ErrorCode, ServiceError

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    message: str
    data: T | None = None

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    error: ServiceError

    @property
    def ok(self) -> bool:
        return False

    @property
    def code(self) -> ErrorCode:
        return self.error.code

    @property
    def http_status(self) -> int:
        return self.error.http_status

    @property
    def message(self) -> str:
        return self.error.message


ServiceResult = Union[Success[T], Failure]
