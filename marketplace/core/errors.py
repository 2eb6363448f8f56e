"""Error kinds and the Outcome value returned by service operations.

Routers never catch business-rule exceptions; they check ``outcome.ok`` and
hand ``outcome.failure`` to :func:`marketplace.core.responses.failure_response`.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    INVALID_INTERVAL = "invalid_interval"
    INVALID_TRANSITION = "invalid_transition"
    PROVIDER_UNAVAILABLE = "provider_unavailable"
    ALREADY_REVIEWED = "already_reviewed"
    NOT_COMPLETED = "not_completed"
    UNEXPECTED = "unexpected"


STATUS_CODES = {
    ErrorKind.VALIDATION: 422,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INVALID_INTERVAL: 422,
    ErrorKind.INVALID_TRANSITION: 422,
    ErrorKind.PROVIDER_UNAVAILABLE: 422,
    ErrorKind.ALREADY_REVIEWED: 422,
    ErrorKind.NOT_COMPLETED: 422,
    ErrorKind.UNEXPECTED: 500,
}


@dataclass
class Failure:
    kind: ErrorKind
    message: str
    errors: dict[str, list[str]] = field(default_factory=dict)

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]


@dataclass
class Outcome(Generic[T]):
    value: Optional[T] = None
    failure: Optional[Failure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, kind: ErrorKind, message: str, field_name: str = "general", detail: Optional[str] = None) -> "Outcome[T]":
        return cls(failure=Failure(kind, message, {field_name: [detail or message]}))


def not_found(entity: str) -> Outcome:
    return Outcome.fail(ErrorKind.NOT_FOUND, f"{entity} not found", entity.lower().replace(" ", "_"))


def forbidden(detail: str) -> Outcome:
    return Outcome.fail(ErrorKind.FORBIDDEN, "Unauthorized access", "general", detail)
