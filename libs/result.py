"""
Result type shared by use cases.

Use cases return ``Return.ok(value)`` or ``Return.err(Error(...))`` instead of
raising for expected business outcomes; the API layer maps errors to HTTP.
"""

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Error:
    code: str
    message: str
    details: Optional[dict] = None


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False


@dataclass(frozen=True)
class Err:
    error: Error

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True


Result = Union[Ok[T], Err]


class Return:
    @staticmethod
    def ok(value: Any = None) -> Ok:
        return Ok(value)

    @staticmethod
    def err(error: Error) -> Err:
        return Err(error)
