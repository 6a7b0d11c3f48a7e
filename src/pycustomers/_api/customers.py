"""Customers collection endpoints: list, create and delete.

Every function raises on failure; :class:`pycustomers.store.HttpCustomerStore`
turns those exceptions into :class:`pycustomers.result.Failure` values.
"""

from __future__ import annotations

from typing import Any

from pydantic import TypeAdapter, ValidationError

from pycustomers._constants import CREATE_FAILED_MESSAGE, DELETE_FAILED_MESSAGE, LIST_FAILED_MESSAGE
from pycustomers._transport import HttpResponse, Transport
from pycustomers.exceptions import CustomersApiError, CustomersTransportError
from pycustomers.models.customer import Customer, NewCustomerInput

_CUSTOMER_LIST = TypeAdapter(list[Customer])


def _raise_for_response(*, endpoint: str, response: HttpResponse, fallback_message: str) -> None:
    """Map a non-2xx response to :class:`CustomersApiError`.

    The API answers errors with ``{"code": ..., "message": ...}``; either
    key may be missing, in which case the HTTP status and the per-operation
    fallback message are used.
    """
    if response.ok:
        return
    body = response.body if isinstance(response.body, dict) else {}
    code = body.get("code")
    message = body.get("message")
    raise CustomersApiError(
        str(message) if message else fallback_message,
        code=str(code) if code not in (None, "") else str(response.status),
        status_code=response.status,
        endpoint=endpoint,
    )


async def list_customers(transport: Transport, endpoint: str) -> list[Customer]:
    """Fetch the full collection, in the order the store returns it."""
    response = await transport.request("GET", endpoint)
    _raise_for_response(endpoint=endpoint, response=response, fallback_message=LIST_FAILED_MESSAGE)

    decoded: Any = response.body
    if not isinstance(decoded, list):
        raise CustomersTransportError(
            f"Expected a JSON array from {endpoint}, got {type(decoded).__name__}",
            status_code=response.status,
            endpoint=endpoint,
        )
    try:
        return _CUSTOMER_LIST.validate_python(decoded)
    except ValidationError as exc:
        raise CustomersTransportError(
            f"Malformed customer list from {endpoint}: {exc.error_count()} invalid item(s)",
            status_code=response.status,
            endpoint=endpoint,
        ) from exc


async def create_customer(transport: Transport, endpoint: str, customer: NewCustomerInput) -> None:
    response = await transport.request("POST", endpoint, json_body=customer.to_payload())
    _raise_for_response(endpoint=endpoint, response=response, fallback_message=CREATE_FAILED_MESSAGE)


async def delete_customer(transport: Transport, endpoint: str, email: str) -> None:
    response = await transport.request("DELETE", endpoint, params={"email": email})
    _raise_for_response(endpoint=endpoint, response=response, fallback_message=DELETE_FAILED_MESSAGE)
