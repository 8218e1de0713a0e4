"""
Result — the success/failure track every parsing stage returns.

A Result[T] is either Success(value) or Failure(FailureDescription). Stages are
chained with flat_map; the first failure short-circuits the rest of the chain:

    decode ──Success──▶ select ──Success──▶ map ──▶ Result[ParsedCertificate]
      │                   │
      └──Failure──────────┴────────────────────────▶ Result[ParsedCertificate]

Exceptions are only caught at adapter boundaries, via Result.from_computation().
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pfx_parser.domain.errors import DecodeErrorKind, FailureDescription

T = TypeVar("T")
U = TypeVar("U")


class Result(Generic[T]):
    """
    Either a Success carrying a value or a Failure carrying a FailureDescription.

        >>> Result.success(2).map(lambda x: x * 3).value()
        6
        >>> Result.failure(DecodeErrorKind.NO_CERTIFICATE_FOUND, "empty").is_failure()
        True
    """

    def is_failure(self) -> bool:
        return isinstance(self, Failure)

    def value(self) -> T:
        """Return the success value. Raises ValueError on a Failure."""
        if isinstance(self, Failure):
            raise ValueError(f"No value on the failure track: {self.error().message}")
        return self._value  # type: ignore[attr-defined, no-any-return]

    def error(self) -> FailureDescription:
        """Return the failure description. Raises ValueError on a Success."""
        if not isinstance(self, Failure):
            raise ValueError(f"No error on the success track: {self.value()!r}")
        return self._error

    # ─────────────────────── Chaining ───────────────────────

    def map(self, mapper: Callable[[T], U]) -> Result[U]:
        """Transform the success value. Failures pass through untouched."""
        match self:
            case Success(v):
                return Success(mapper(v))
            case _:
                return Failure(self.error())

    def flat_map(self, mapper: Callable[[T], Result[U]]) -> Result[U]:
        """Chain a Result-returning stage. Short-circuits on failure."""
        match self:
            case Success(v):
                return mapper(v)
            case _:
                return Failure(self.error())

    def peek(self, action: Callable[[T], Any]) -> Result[T]:
        """Run a side effect (typically logging) on the success value."""
        if not self.is_failure():
            action(self.value())
        return self

    def peek_failure(self, action: Callable[[FailureDescription], Any]) -> Result[T]:
        """Run a side effect on the failure description."""
        if self.is_failure():
            action(self.error())
        return self

    # ─────────────────────── Factories ───────────────────────

    @staticmethod
    def success(value: T) -> Result[T]:
        return Success(value)

    @staticmethod
    def failure(
        kind: DecodeErrorKind,
        message: str,
        exception: BaseException | None = None,
    ) -> Result[T]:
        return Failure(FailureDescription(kind=kind, message=message, exception=exception))

    @staticmethod
    def from_computation(
        computation: Callable[[], T],
        kind: DecodeErrorKind,
        message: str,
    ) -> Result[T]:
        """
        Run a computation that may raise and put its outcome on the right track.

        Any Exception becomes Result.failure(kind, message, exception).
        """
        try:
            return Result.success(computation())
        except Exception as e:
            return Result.failure(kind, message, e)


@dataclass(frozen=True, slots=True)
class Success(Result[T]):
    _value: T

    def __post_init__(self) -> None:
        if self._value is None:
            raise TypeError("Success value must not be None")

    def __repr__(self) -> str:
        return f"Success({self._value!r})"


@dataclass(frozen=True, slots=True)
class Failure(Result[T]):
    _error: FailureDescription

    def __post_init__(self) -> None:
        if self._error is None:
            raise TypeError("Failure error must not be None")

    def __repr__(self) -> str:
        return f"Failure({self._error.kind.value}: {self._error.message!r})"
