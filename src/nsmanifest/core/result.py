"""
Result values for the resolution engine.

Engine steps report bad input graphs as values: they return ``Ok`` with their
product or ``Err`` carrying one of the typed errors from ``errors.py``. Steps
chain with ``and_then``; the first ``Err`` short-circuits the rest. Only
``ManifestBuilder`` turns an ``Err`` back into an exception, via ``unwrap``.
"""

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A step that produced ``value``."""
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def and_then(self, step: Callable[[T], "Result[U, E]"]) -> "Result[U, E]":
        """Feed the value into the next step."""
        return step(self.value)

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    """A step that failed with ``error``; later steps are skipped."""
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def and_then(self, step: Callable) -> "Err[E]":
        return self

    def unwrap(self):
        """Raise the carried error."""
        if isinstance(self.error, BaseException):
            raise self.error
        raise ValueError(f"Called unwrap on Err: {self.error}")


Result = Union[Ok[T], Err[E]]
