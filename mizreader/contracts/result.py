"""Parse outcome: the mission read from one archive, plus why it failed if it did."""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from mizreader.contracts.enums import FailureCode

T = TypeVar("T")


class ParseFailure(BaseModel):
    """Why an archive could not be read."""

    code: FailureCode
    message: str = Field(..., description="Human-readable reason, prefixed with the path")


class ParseResult(BaseModel, Generic[T]):
    """Result of reading one archive.

    ``data`` is populated either way.  On failure it is the best-effort
    partial result (a ``MissionDetails`` whose briefing describes the
    failure) and ``error`` says what went wrong.
    """

    path: str
    data: T
    error: ParseFailure | None = None
    duration_ms: float | None = Field(default=None, ge=0)

    @property
    def success(self) -> bool:
        return self.error is None

    @classmethod
    def ok(cls, path: str, data: T, duration_ms: float | None = None) -> "ParseResult[T]":
        return cls(path=path, data=data, duration_ms=duration_ms)

    @classmethod
    def fail(cls, path: str, code: FailureCode, message: str, data: T) -> "ParseResult[T]":
        return cls(path=path, data=data, error=ParseFailure(code=code, message=message))
