"""Cache entry state exposed to subscribers."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

from pycustomers.exceptions import (
    CustomersApiError,
    CustomersError,
    CustomersTransportError,
    CustomersValidationError,
)

T = TypeVar("T")


class ResourceStatus(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    RESOLVED = "resolved"
    FAILED = "failed"


class ErrorKind(StrEnum):
    VALIDATION = "validation"
    REMOTE = "remote"
    TRANSPORT = "transport"
    UNEXPECTED = "unexpected"


class ErrorInfo(BaseModel):
    """Immutable description of a failure, safe to keep in a snapshot."""

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    code: str
    message: str
    status_code: int | None = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> ErrorInfo:
        if isinstance(exc, CustomersValidationError):
            return cls(kind=ErrorKind.VALIDATION, code=exc.code, message=str(exc))
        if isinstance(exc, CustomersApiError):
            return cls(kind=ErrorKind.REMOTE, code=exc.code, message=str(exc), status_code=exc.status_code)
        if isinstance(exc, CustomersTransportError):
            return cls(kind=ErrorKind.TRANSPORT, code=exc.code, message=str(exc), status_code=exc.status_code)
        if isinstance(exc, CustomersError):
            return cls(kind=ErrorKind.UNEXPECTED, code=exc.code, message=str(exc))
        return cls(kind=ErrorKind.UNEXPECTED, code=type(exc).__name__, message=str(exc))


class ResourceSnapshot(BaseModel, Generic[T]):
    """Point-in-time view of one cache entry.

    ``value`` keeps the last resolved value while a refresh is loading
    and after a refresh fails.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    key: str
    value: T | None = None
    status: ResourceStatus = ResourceStatus.IDLE
    error: ErrorInfo | None = None
    stale: bool = False
    updated_at: datetime | None = None

    @property
    def is_loading(self) -> bool:
        return self.status == ResourceStatus.LOADING

    @property
    def has_value(self) -> bool:
        return self.value is not None
