"""Remote customer store.

The store is the boundary where exceptions stop: every call returns a
:data:`pycustomers.result.Result` so callers above it handle failures
as values.
"""

from __future__ import annotations

import logging
from typing import Protocol

from pycustomers._api import customers as _customers_api
from pycustomers._transport import Transport
from pycustomers.exceptions import CustomersError
from pycustomers.models.customer import Customer, NewCustomerInput
from pycustomers.result import Failure, Result, Success

_logger = logging.getLogger(__name__)


class RemoteCustomerStore(Protocol):
    """List/create/delete operations keyed by e-mail."""

    async def list_customers(self) -> Result[list[Customer]]:
        ...

    async def create_customer(self, customer: NewCustomerInput) -> Result[None]:
        ...

    async def delete_customer(self, email: str) -> Result[None]:
        ...


class HttpCustomerStore:
    """:class:`RemoteCustomerStore` backed by the customers HTTP API."""

    def __init__(self, transport: Transport, endpoint: str) -> None:
        self._transport = transport
        self._endpoint = endpoint

    async def list_customers(self) -> Result[list[Customer]]:
        try:
            customers = await _customers_api.list_customers(self._transport, self._endpoint)
        except CustomersError as exc:
            _logger.debug("List customers failed: %s", exc)
            return Failure(exc)
        return Success(customers)

    async def create_customer(self, customer: NewCustomerInput) -> Result[None]:
        try:
            await _customers_api.create_customer(self._transport, self._endpoint, customer)
        except CustomersError as exc:
            _logger.debug("Create customer failed: %s", exc)
            return Failure(exc)
        return Success(None)

    async def delete_customer(self, email: str) -> Result[None]:
        try:
            await _customers_api.delete_customer(self._transport, self._endpoint, email)
        except CustomersError as exc:
            _logger.debug("Delete customer failed: %s", exc)
            return Failure(exc)
        return Success(None)
