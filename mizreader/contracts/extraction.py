"""Per-field extraction outcomes.

Every scalar read from a mission table reports whether the value was
found, defaulted because the key is absent, or defaulted because the value
is present but unparsable.  Only the last case is worth surfacing as a
``FieldIssue`` diagnostic.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

from mizreader.contracts.enums import FieldStatus

T = TypeVar("T")


@dataclass(frozen=True)
class Extracted(Generic[T]):
    """Typed value of one field plus how it was obtained."""

    value: T
    status: FieldStatus
    raw: str | None = None

    @classmethod
    def found(cls, value: T, raw: str | None = None) -> Extracted[T]:
        return cls(value=value, status=FieldStatus.FOUND, raw=raw)

    @classmethod
    def defaulted(cls, default: T) -> Extracted[T]:
        return cls(value=default, status=FieldStatus.DEFAULTED)

    @classmethod
    def malformed(cls, default: T, raw: str) -> Extracted[T]:
        return cls(value=default, status=FieldStatus.MALFORMED, raw=raw)

    @property
    def is_found(self) -> bool:
        return self.status == FieldStatus.FOUND

    @property
    def is_malformed(self) -> bool:
        return self.status == FieldStatus.MALFORMED


class FieldIssue(BaseModel):
    """A field that was present in the mission but could not be read."""

    path: str
    raw: str | None = None
    message: str

    model_config = ConfigDict(frozen=True)
