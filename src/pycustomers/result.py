"""Typed success/failure values returned by store calls and mutations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar, Union

from pycustomers.exceptions import CustomersError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Failure:
    """A failed call. ``error`` carries ``code`` and ``message``."""

    error: CustomersError

    @property
    def ok(self) -> bool:
        return False

    @property
    def code(self) -> str:
        return self.error.code

    @property
    def message(self) -> str:
        return str(self.error)


Result: TypeAlias = Union[Success[T], Failure]  # noqa: UP007
