from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class MixmatchError(Exception):
    """Base class for errors raised by mixmatch services."""


class ScoringUnavailable(MixmatchError):
    """The remote compatibility model could not produce a usable answer."""


class FeedFetchError(MixmatchError):
    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class FeedBusyError(MixmatchError):
    """A feed load is already in flight for this session."""


class FeedClosedError(MixmatchError):
    """The feed session was torn down."""


class InvalidBaseItemError(MixmatchError, ValueError):
    pass


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """Outcome of a fetch; callers decide what to substitute on error."""

    data: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: T) -> "FetchResult[T]":
        return cls(data=data)

    @classmethod
    def failure(cls, error: str) -> "FetchResult[T]":
        return cls(error=error)

    def unwrap_or(self, default: T) -> T:
        return self.data if self.ok and self.data is not None else default
