"""Result envelope returned by every application-service operation.

A ``Result[T]`` is either a ``Success`` carrying a value of type ``T``
or a ``Failure`` carrying a machine-checkable error code plus a
human-readable description.  Business-rule violations travel through
this envelope; exceptions are reserved for contract violations and
infrastructure faults.

Consumers branch with structural pattern matching::

    match result:
        case Success(value=customer_id):
            ...
        case Failure(code=ErrorCode.CUSTOMER_ALREADY_EXISTS):
            ...
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeAlias, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    """Successful outcome wrapping ``value``."""

    value: T

    @property
    def is_success(self) -> bool:
        return True

    def failed_with(self, code: StrEnum) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Failure:
    """Failed outcome: a closed-set error ``code`` and a diagnostic ``description``.

    ``description`` is for humans and logs only; clients branch on ``code``.
    """

    code: StrEnum
    description: str

    def __post_init__(self) -> None:
        if not isinstance(self.code, StrEnum):
            raise TypeError("Failure.code must be a member of an error-code enum.")
        if not self.description:
            raise ValueError("Failure.description must not be empty.")

    @property
    def is_success(self) -> bool:
        return False

    def failed_with(self, code: StrEnum) -> bool:
        return self.code == code

    def unwrap(self):
        raise ValueError(f"Called unwrap() on a Failure: {self.code}: {self.description}")


Result: TypeAlias = Union[Success[T], Failure]
