"""Custom exception hierarchy for pycustomers."""

from __future__ import annotations

from collections.abc import Sequence


class CustomersError(Exception):
    """Base exception for all pycustomers errors."""

    code: str = "error"

    @property
    def message(self) -> str:
        return str(self)


class CustomersConfigError(CustomersError):
    """Invalid or missing configuration."""

    code = "config_error"


class CustomersValidationError(CustomersError):
    """Required input is missing; raised before any request is sent."""

    code = "validation_error"

    def __init__(self, message: str, *, fields: Sequence[str] = ()) -> None:
        self.fields = list(fields)
        super().__init__(message)


class CustomersTransportError(CustomersError):
    """HTTP-level failure (network, timeout, invalid JSON)."""

    code = "transport_error"

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class CustomersApiError(CustomersError):
    """The remote store rejected the call (e.g. duplicate email, not found).

    ``code`` and ``message`` are taken verbatim from the ``{code, message}``
    error body when the API provides them.
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.code = code
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)
