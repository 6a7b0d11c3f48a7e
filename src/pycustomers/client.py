"""High-level async client for the customers API."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import aiohttp

from pycustomers._transport import HttpTransport
from pycustomers.cache.store import ResourceCache
from pycustomers.config import CustomersConfig
from pycustomers.exceptions import CustomersError
from pycustomers.models.customer import Customer, NewCustomerInput
from pycustomers.models.resource import ResourceSnapshot
from pycustomers.mutations import MutationCoordinator
from pycustomers.result import Result
from pycustomers.store import HttpCustomerStore, RemoteCustomerStore

_logger = logging.getLogger(__name__)


class CustomersClient:
    """Async client exposing the cached customers collection.

    This is the composition root: it owns the HTTP session, the resource
    cache and the mutation coordinator for as long as the ``async with``
    block lasts.

    Usage::

        async with CustomersClient(config) as client:
            snapshot = await client.get_customers()
            result = await client.create_customer(
                first_name="Ada", last_name="Lovelace", email="ada@example.com"
            )
    """

    def __init__(
        self,
        config: CustomersConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        store: RemoteCustomerStore | None = None,
    ) -> None:
        self._config = config if config is not None else CustomersConfig()
        self._external_session = session is not None
        self._http_session = session
        self._injected_store = store
        self._store: RemoteCustomerStore | None = None
        self._cache: ResourceCache | None = None
        self._mutations: MutationCoordinator | None = None

    @property
    def customers_key(self) -> str:
        return self._config.resource_path

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> CustomersClient:
        store = self._injected_store
        if store is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            transport = HttpTransport(self._config, self._http_session)
            store = HttpCustomerStore(transport, self._config.resource_path)
        self._store = store
        self._cache = ResourceCache()
        self._cache.register(self.customers_key, store.list_customers)
        self._mutations = MutationCoordinator(store, self._cache, key=self.customers_key)
        _logger.debug("Customers client ready for %s", self._config.resource_url)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._cache is not None:
            await self._cache.close()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._cache = None
        self._mutations = None
        self._store = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_cache(self) -> ResourceCache:
        if self._cache is None:
            raise CustomersError("Client not initialized. Use 'async with CustomersClient(...) as client:'")
        return self._cache

    def _require_mutations(self) -> MutationCoordinator:
        if self._mutations is None:
            raise CustomersError("Client not initialized. Use 'async with CustomersClient(...) as client:'")
        return self._mutations

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def read_customers(self) -> ResourceSnapshot[list[Customer]]:
        """Current snapshot; the first call starts loading the collection."""
        return self._require_cache().read(self.customers_key)

    async def get_customers(self) -> ResourceSnapshot[list[Customer]]:
        """Wait for the collection to settle and return its snapshot."""
        return await self._require_cache().fetch(self.customers_key)

    async def refresh_customers(self) -> ResourceSnapshot[list[Customer]]:
        """Force a re-fetch of the collection."""
        return await self._require_cache().invalidate(self.customers_key)

    def subscribe(self, callback: Callable[[ResourceSnapshot[list[Customer]]], None]) -> Callable[[], None]:
        """Observe every state change of the collection."""
        return self._require_cache().subscribe(self.customers_key, callback)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create_customer(
        self,
        customer: NewCustomerInput | None = None,
        **fields: Any,
    ) -> Result[ResourceSnapshot[list[Customer]]]:
        """Create a customer from a model or from keyword fields."""
        payload: NewCustomerInput | dict[str, Any] = customer if customer is not None else fields
        return await self._require_mutations().create(payload)

    async def remove_customer(self, email: str) -> Result[ResourceSnapshot[list[Customer]]]:
        """Delete the customer identified by *email*."""
        return await self._require_mutations().remove(email)
