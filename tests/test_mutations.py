from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

import pytest

from pycustomers.cache.store import ResourceCache
from pycustomers.exceptions import CustomersApiError, CustomersError, CustomersValidationError
from pycustomers.models.customer import Customer, NewCustomerInput
from pycustomers.models.resource import ResourceStatus
from pycustomers.mutations import MutationCoordinator
from pycustomers.result import Failure, Result, Success

KEY = "/api/customers"


@dataclass
class FakeCustomerStore:
    """In-memory store that rejects duplicate e-mails and unknown deletes."""

    customers: list[Customer] = field(
        default_factory=lambda: [Customer(first_name="A", last_name="B", business_name="", email="a@x.com")]
    )
    list_calls: int = 0
    create_calls: list[str] = field(default_factory=list)
    delete_calls: list[str] = field(default_factory=list)
    events: list[str] = field(default_factory=list)
    write_gate: asyncio.Event | None = None

    async def list_customers(self) -> Result[list[Customer]]:
        self.list_calls += 1
        self.events.append("list")
        return Success(list(self.customers))

    async def create_customer(self, customer: NewCustomerInput) -> Result[None]:
        self.create_calls.append(customer.email)
        self.events.append(f"create-start:{customer.email}")
        if self.write_gate is not None:
            await self.write_gate.wait()
        self.events.append(f"create-end:{customer.email}")
        if any(c.email == customer.email for c in self.customers):
            return Failure(
                CustomersApiError("Customer already exists", code="duplicate_email", status_code=409, endpoint=KEY)
            )
        self.customers.append(Customer.model_validate(customer.to_payload()))
        return Success(None)

    async def delete_customer(self, email: str) -> Result[None]:
        self.delete_calls.append(email)
        if not any(c.email == email for c in self.customers):
            return Failure(CustomersApiError("Customer not found", code="404", status_code=404, endpoint=KEY))
        self.customers = [c for c in self.customers if c.email != email]
        return Success(None)


def _setup(store: FakeCustomerStore) -> tuple[ResourceCache, MutationCoordinator]:
    cache = ResourceCache()
    cache.register(KEY, store.list_customers)
    return cache, MutationCoordinator(store, cache, key=KEY)


def _emails(customers: list[Customer] | None) -> list[str]:
    return [c.email for c in customers or []]


@pytest.mark.asyncio
async def test_create_success_refetches_collection() -> None:
    store = FakeCustomerStore()
    cache, coordinator = _setup(store)
    await cache.fetch(KEY)

    result = await coordinator.create(
        NewCustomerInput(first_name="C", last_name="D", business_name="", email="c@x.com")
    )

    assert isinstance(result, Success)
    assert result.ok is True
    assert _emails(result.value.value) == ["a@x.com", "c@x.com"]
    assert _emails(cache.read(KEY).value) == ["a@x.com", "c@x.com"]
    assert store.list_calls == 2


@pytest.mark.asyncio
async def test_create_accepts_camel_case_mapping() -> None:
    store = FakeCustomerStore()
    _, coordinator = _setup(store)

    result = await coordinator.create({"firstName": "C", "lastName": "D", "email": "c@x.com"})

    assert isinstance(result, Success)
    assert store.create_calls == ["c@x.com"]


@pytest.mark.asyncio
async def test_create_with_empty_email_fails_validation_without_remote_call() -> None:
    store = FakeCustomerStore()
    cache, coordinator = _setup(store)
    before = await cache.fetch(KEY)

    result = await coordinator.create({"firstName": "C", "lastName": "D", "email": ""})

    assert isinstance(result, Failure)
    assert isinstance(result.error, CustomersValidationError)
    assert result.code == "validation_error"
    assert result.error.fields == ["email"]
    assert store.create_calls == []
    assert store.list_calls == 1
    assert cache.peek(KEY) == before


@pytest.mark.asyncio
async def test_create_with_blank_names_reports_every_missing_field() -> None:
    store = FakeCustomerStore()
    _, coordinator = _setup(store)

    result = await coordinator.create(NewCustomerInput(first_name="  ", last_name="", email="c@x.com"))

    assert isinstance(result, Failure)
    assert isinstance(result.error, CustomersValidationError)
    assert result.error.fields == ["firstName", "lastName"]
    assert store.create_calls == []


@pytest.mark.asyncio
async def test_create_with_wrongly_typed_field_fails_validation() -> None:
    store = FakeCustomerStore()
    _, coordinator = _setup(store)

    result = await coordinator.create({"firstName": 123, "lastName": "D", "email": "c@x.com"})

    assert isinstance(result, Failure)
    assert isinstance(result.error, CustomersValidationError)
    assert result.error.fields == ["firstName"]
    assert store.create_calls == []


@pytest.mark.asyncio
async def test_remote_create_failure_leaves_cache_untouched() -> None:
    store = FakeCustomerStore()
    cache, coordinator = _setup(store)
    before = await cache.fetch(KEY)

    result = await coordinator.create({"firstName": "A", "lastName": "B", "email": "a@x.com"})

    assert isinstance(result, Failure)
    assert isinstance(result.error, CustomersApiError)
    assert result.code == "duplicate_email"
    assert result.message == "Customer already exists"
    assert cache.peek(KEY) == before
    assert store.list_calls == 1


@pytest.mark.asyncio
async def test_remove_of_unknown_customer_returns_remote_error_and_keeps_cache() -> None:
    store = FakeCustomerStore(customers=[])
    cache = ResourceCache()
    cached = [Customer(first_name="A", last_name="B", email="a@x.com")]

    async def _list() -> Result[list[Customer]]:
        return Success(list(cached))

    cache.register(KEY, _list)
    coordinator = MutationCoordinator(store, cache, key=KEY)
    before = await cache.fetch(KEY)

    result = await coordinator.remove("a@x.com")

    assert isinstance(result, Failure)
    assert isinstance(result.error, CustomersApiError)
    assert result.error.status_code == 404
    assert cache.peek(KEY) == before
    assert _emails(cache.read(KEY).value) == ["a@x.com"]


@pytest.mark.asyncio
async def test_remove_success_refetches_collection() -> None:
    store = FakeCustomerStore()
    cache, coordinator = _setup(store)
    await cache.fetch(KEY)

    result = await coordinator.remove("a@x.com")

    assert isinstance(result, Success)
    assert result.value.status == ResourceStatus.RESOLVED
    assert _emails(result.value.value) == []
    assert store.delete_calls == ["a@x.com"]


@pytest.mark.asyncio
async def test_remove_with_blank_email_fails_validation() -> None:
    store = FakeCustomerStore()
    _, coordinator = _setup(store)

    result = await coordinator.remove("   ")

    assert isinstance(result, Failure)
    assert isinstance(result.error, CustomersValidationError)
    assert store.delete_calls == []


@pytest.mark.asyncio
async def test_invalidation_happens_only_after_remote_success() -> None:
    store = FakeCustomerStore(write_gate=asyncio.Event())
    cache, coordinator = _setup(store)
    await cache.fetch(KEY)

    pending = asyncio.create_task(coordinator.create({"firstName": "C", "lastName": "D", "email": "c@x.com"}))
    await asyncio.sleep(0)
    await asyncio.sleep(0)
    assert store.create_calls == ["c@x.com"]
    assert store.list_calls == 1
    assert cache.read(KEY).status == ResourceStatus.RESOLVED

    store.write_gate.set()
    result = await pending

    assert isinstance(result, Success)
    assert store.events == ["list", "create-start:c@x.com", "create-end:c@x.com", "list"]


@pytest.mark.asyncio
async def test_mutations_run_in_invocation_order() -> None:
    store = FakeCustomerStore(write_gate=asyncio.Event())
    _, coordinator = _setup(store)

    first = asyncio.create_task(coordinator.create({"firstName": "C", "lastName": "D", "email": "c@x.com"}))
    second = asyncio.create_task(coordinator.create({"firstName": "E", "lastName": "F", "email": "e@x.com"}))
    await asyncio.sleep(0)
    store.write_gate.set()
    await asyncio.gather(first, second)

    writes = [e for e in store.events if e.startswith("create")]
    assert writes == [
        "create-start:c@x.com",
        "create-end:c@x.com",
        "create-start:e@x.com",
        "create-end:e@x.com",
    ]


@pytest.mark.asyncio
async def test_store_that_raises_is_reported_as_failure() -> None:
    store = FakeCustomerStore()
    cache, coordinator = _setup(store)
    before = await cache.fetch(KEY)

    async def _raises(_email: str) -> Result[None]:
        raise RuntimeError("connection pool exhausted")

    store.delete_customer = _raises  # type: ignore[method-assign]

    result = await coordinator.remove("a@x.com")

    assert isinstance(result, Failure)
    assert isinstance(result.error, CustomersError)
    assert "connection pool exhausted" in result.message
    assert isinstance(result.error.__cause__, RuntimeError)
    assert cache.peek(KEY) == before
    assert store.list_calls == 1
