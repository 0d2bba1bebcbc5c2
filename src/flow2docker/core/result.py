"""
Result envelope for stage outcomes.

Stages return ``Ok`` or ``Err`` instead of raising, so the pipeline can
decide what happens next from the value alone. A ``BuildResult`` is a
``Result[None]``: success carries no payload, failure carries exactly one
``Flow2DockerError``.

Examples:
    >>> from flow2docker.core.result import Ok, Err, Result
    >>> def halve(n: int) -> Result[int]:
    ...     if n % 2:
    ...         return Err(ValueError("odd"))
    ...     return Ok(n // 2)
    >>> halve(10).unwrap()
    5
    >>> halve(3).is_err()
    True

    Pattern matching:

    >>> match halve(4):
    ...     case Ok(value):
    ...         print(value)
    ...     case Err(error):
    ...         print(error)
    2

Tags:
    result-pattern, error-handling, flow2docker
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from flow2docker.core.errors import Flow2DockerError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result containing a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the value. Safe for Ok."""
        return self.value

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """Transform the value if Ok."""
        return Ok(f(self.value))

    def flat_map(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """Chain to another Result-returning function."""
        return f(self.value)

    def map_err(self, f: Callable[[Exception], Exception]) -> Result[T]:
        return self

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[T]):
    """
    Failed result containing an error.

    ``map`` and ``flat_map`` pass an Err through unchanged, so a chain of
    operations stops at the first failure.
    """

    error: Exception

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Raise the contained error."""
        raise self.error

    def map(self, f: Callable[[T], U]) -> Result[U]:
        return Err(self.error)

    def flat_map(self, f: Callable[[T], Result[U]]) -> Result[U]:
        return Err(self.error)

    def map_err(self, f: Callable[[Exception], Exception]) -> Result[T]:
        """Transform the error."""
        return Err(f(self.error))

    @property
    def message(self) -> str:
        """The operator-facing message of the contained error."""
        if isinstance(self.error, Flow2DockerError):
            return self.error.message
        return str(self.error)

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Ok[T] | Err[T]

BuildResult = Result[None]
"""Outcome of one build stage: ``Ok(None)`` or ``Err(Flow2DockerError)``."""


def ok() -> Ok[None]:
    """The payload-free success value shared by all stages."""
    return Ok(None)


def try_result(f: Callable[[], T]) -> Result[T]:
    """
    Execute a function and wrap its outcome in a Result.

    Any exception raised by ``f`` becomes ``Err(exception)``.

    Examples:
        >>> try_result(lambda: int("42")).unwrap()
        42
        >>> try_result(lambda: int("x")).is_err()
        True
    """
    try:
        return Ok(f())
    except Exception as e:
        return Err(e)


__all__ = ["Ok", "Err", "Result", "BuildResult", "ok", "try_result"]
