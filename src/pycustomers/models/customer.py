"""Customer models."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator, model_validator

from pycustomers.models._base import CustomersBaseModel

_REQUIRED_FIELDS: tuple[tuple[str, str], ...] = (
    ("first_name", "firstName"),
    ("last_name", "lastName"),
    ("email", "email"),
)


class Customer(CustomersBaseModel):
    """A customer record as returned by the remote store.

    ``email`` is the natural key of the collection.
    """

    first_name: str = ""
    """Given name."""
    last_name: str = ""
    """Family name."""
    business_name: str | None = None
    """Optional company name; blank values are normalised to ``None``."""
    email: str = ""
    """Unique identifier within the collection."""

    raw: dict[str, Any] = Field(default_factory=dict, exclude=True)
    """Original API payload."""

    @model_validator(mode="before")
    @classmethod
    def _stash_raw(cls, values: Any) -> Any:
        if isinstance(values, dict) and "raw" not in values:
            return {**values, "raw": dict(values)}
        return values

    @field_validator("business_name")
    @classmethod
    def _blank_business_name(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    @property
    def display_name(self) -> str:
        """Business name when present, otherwise ``"first last"``."""
        if self.business_name:
            return self.business_name
        return f"{self.first_name} {self.last_name}"


class NewCustomerInput(CustomersBaseModel):
    """Payload for creating a customer.

    Construction never fails on empty values; required fields are
    checked by :meth:`missing_fields` so the caller can report them
    without a request ever being made.
    """

    first_name: str = ""
    last_name: str = ""
    business_name: str = ""
    email: str = ""

    def missing_fields(self) -> list[str]:
        """Return the camelCase names of empty required fields."""
        return [alias for name, alias in _REQUIRED_FIELDS if not getattr(self, name)]

    def to_payload(self) -> dict[str, str]:
        """JSON body for the create request."""
        return self.model_dump(by_alias=True)
