"""
Tagged result of a single provider call.

Adapters never raise past their boundary; they return one of:
  OK      - the provider answered with data.
  EMPTY   - the provider answered, but had nothing (e.g. 403 on a paid feature).
  FAILED  - the call was attempted and failed; ``reason`` says why.
  SKIPPED - the call was never attempted (no API key, market closed, ...).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class FetchStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    status: FetchStatus
    data: Optional[T] = None
    reason: Optional[str] = None

    @classmethod
    def ok(cls, data: T) -> "FetchResult[T]":
        return cls(FetchStatus.OK, data=data)

    @classmethod
    def empty(cls, reason: Optional[str] = None) -> "FetchResult[T]":
        return cls(FetchStatus.EMPTY, reason=reason)

    @classmethod
    def failed(cls, reason: str) -> "FetchResult[T]":
        return cls(FetchStatus.FAILED, reason=reason)

    @classmethod
    def skipped(cls, reason: str) -> "FetchResult[T]":
        return cls(FetchStatus.SKIPPED, reason=reason)

    @property
    def is_ok(self) -> bool:
        return self.status is FetchStatus.OK

    @property
    def attempted(self) -> bool:
        return self.status is not FetchStatus.SKIPPED

    def value_or_none(self) -> Optional[T]:
        return self.data if self.is_ok else None
