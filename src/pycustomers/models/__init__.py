"""Data models for the customers API and the resource cache."""

from pycustomers.models._base import CustomersBaseModel
from pycustomers.models.customer import Customer, NewCustomerInput
from pycustomers.models.resource import ErrorInfo, ErrorKind, ResourceSnapshot, ResourceStatus

__all__ = [
    "Customer",
    "CustomersBaseModel",
    "ErrorInfo",
    "ErrorKind",
    "NewCustomerInput",
    "ResourceSnapshot",
    "ResourceStatus",
]
