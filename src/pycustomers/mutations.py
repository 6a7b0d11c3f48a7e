"""Mutation coordinator: remote write first, cache invalidation second.

The coordinator never writes cache values. After the store confirms a
write it invalidates the collection key, so the refreshed collection
always comes from the store itself.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Mapping
from typing import Any

from pydantic import ValidationError

from pycustomers._redact import mask_email
from pycustomers.cache.store import ResourceCache
from pycustomers.exceptions import CustomersError, CustomersValidationError
from pycustomers.models.customer import NewCustomerInput
from pycustomers.models.resource import ResourceSnapshot
from pycustomers.result import Failure, Result, Success
from pycustomers.store import RemoteCustomerStore

_logger = logging.getLogger(__name__)


def _coerce_input(customer: NewCustomerInput | Mapping[str, Any]) -> NewCustomerInput | Failure:
    if isinstance(customer, NewCustomerInput):
        return customer
    try:
        return NewCustomerInput.model_validate(dict(customer))
    except ValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
        return Failure(CustomersValidationError(f"Invalid customer input: {', '.join(fields)}", fields=fields))


class MutationCoordinator:
    """Run create/delete against the store and refresh the cache on success.

    Mutations are serialized in invocation order. A failed mutation (local
    validation or remote) leaves the cache exactly as it was.
    """

    def __init__(self, store: RemoteCustomerStore, cache: ResourceCache, *, key: str) -> None:
        self._store = store
        self._cache = cache
        self._key = key
        self._lock = asyncio.Lock()

    async def _write(self, call: Awaitable[Result[None]]) -> Result[None]:
        # Stores report failures as values; anything raised is a bug in the store.
        try:
            return await call
        except Exception as exc:
            _logger.error("Customer store raised during a write", exc_info=True)
            error = CustomersError(f"Unexpected store error: {exc}")
            error.__cause__ = exc
            return Failure(error)

    async def create(self, customer: NewCustomerInput | Mapping[str, Any]) -> Result[ResourceSnapshot[Any]]:
        """Create a customer, then re-fetch the collection.

        Returns the refreshed collection snapshot on success.
        """
        coerced = _coerce_input(customer)
        if isinstance(coerced, Failure):
            return coerced
        missing = coerced.missing_fields()
        if missing:
            return Failure(
                CustomersValidationError(
                    f"Please fill out {', '.join(missing)}",
                    fields=missing,
                )
            )

        async with self._lock:
            result = await self._write(self._store.create_customer(coerced))
            if isinstance(result, Failure):
                _logger.debug("Create rejected (%s): %s", result.code, result.message)
                return result
            _logger.debug("Created customer %s; invalidating %s", mask_email(coerced.email), self._key)
            refresh = self._cache.invalidate(self._key)
        return Success(await refresh)

    async def remove(self, email: str) -> Result[ResourceSnapshot[Any]]:
        """Delete the customer keyed by *email*, then re-fetch the collection."""
        email = email.strip()
        if not email:
            return Failure(CustomersValidationError("Please provide the e-mail of the customer to delete", fields=["email"]))

        async with self._lock:
            result = await self._write(self._store.delete_customer(email))
            if isinstance(result, Failure):
                _logger.debug("Delete rejected (%s): %s", result.code, result.message)
                return result
            _logger.debug("Deleted customer %s; invalidating %s", mask_email(email), self._key)
            refresh = self._cache.invalidate(self._key)
        return Success(await refresh)
