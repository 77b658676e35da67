"""Errors, pagination and small helpers shared by the services."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Generic, Iterable, List, Optional, TypeVar

T = TypeVar("T")

NIL_UUID = uuid.UUID(int=0)

_BLANKS = " \a\b\f\n\r\t\v"

# Lengths of the textual forms accepted for a UUID.
_UUID_LENGTHS = frozenset({32, 36, 38, 45})


class ServiceError(Exception):
    """Base class for errors raised by the services."""


class NilParameterError(ServiceError):
    """A required parameter was missing or held the nil UUID."""

    def __init__(self, routine: str, parameter: str) -> None:
        self.routine = routine
        self.parameter = parameter
        super().__init__(
            f"{routine}: parameter {parameter!r} cannot be nil"
        )


class TooLongError(ServiceError):
    """A field value exceeds its maximum length."""

    def __init__(self, field_name: str, entity: str, limit: int) -> None:
        self.field_name = field_name
        self.entity = entity
        self.limit = limit
        super().__init__(
            f"{field_name} of {entity} is too long: max length is {limit}"
        )


class UserNotFoundError(ServiceError):
    """The requested user does not exist."""

    def __init__(self, message: str = "user not found") -> None:
        super().__init__(message)


class PasswordTooLongError(ServiceError):
    """The password cannot be hashed because it is too long."""

    def __init__(self, message: str = "password is too long") -> None:
        super().__init__(message)


class InvalidPasswordError(ServiceError):
    """The password does not meet the password policy."""

    def __init__(self, details: Iterable[str]) -> None:
        self.details = list(details)
        super().__init__(" ".join(self.details))


@dataclass
class Pagination:
    """Page number and records per page."""

    page: int = 1
    rpp: int = 10


@dataclass
class Result(Generic[T]):
    """One page of records."""

    page: int
    rpp: int
    retrieved: int
    payload: List[T] = field(default_factory=list)

    @classmethod
    def from_payload(cls, pagination: Pagination, payload: Iterable[T]) -> "Result[T]":
        """Build a result for the given page from the records retrieved."""
        records = list(payload)
        return cls(
            page=pagination.page,
            rpp=pagination.rpp,
            retrieved=len(records),
            payload=records,
        )


def trim(value: Optional[str]) -> Optional[str]:
    """Strip leading and trailing blanks; None stays None."""
    if value is None:
        return None
    return value.strip(_BLANKS)


def trim_all(*args: Optional[str]) -> tuple:
    """Trim every given string, keeping None values in place."""
    return tuple(trim(arg) for arg in args)


def default_pagination(pagination: Optional[Pagination]) -> Optional[Pagination]:
    """Replace non-positive page and rpp with 1 and 10, in place."""
    if pagination is None:
        return None
    if pagination.page <= 0:
        pagination.page = 1
    if pagination.rpp <= 0:
        pagination.rpp = 10
    return pagination


def parse_uuid(value: str) -> uuid.UUID:
    """Parse a UUID from its textual form."""
    try:
        return uuid.UUID(value)
    except (ValueError, TypeError, AttributeError):
        length = len(value) if isinstance(value, str) else 0
        if length not in _UUID_LENGTHS:
            raise ValueError(f"invalid UUID length: {length}") from None
        raise ValueError("invalid UUID format") from None