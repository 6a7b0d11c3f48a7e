"""pycustomers - Async Python client and cache for a customers API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pycustomers")
except PackageNotFoundError:
    __version__ = "0+local"
from pycustomers.cache.store import ResourceCache
from pycustomers.client import CustomersClient
from pycustomers.config import CustomersConfig
from pycustomers.exceptions import (
    CustomersApiError,
    CustomersConfigError,
    CustomersError,
    CustomersTransportError,
    CustomersValidationError,
)
from pycustomers.models import (
    Customer,
    ErrorInfo,
    ErrorKind,
    NewCustomerInput,
    ResourceSnapshot,
    ResourceStatus,
)
from pycustomers.mutations import MutationCoordinator
from pycustomers.result import Failure, Result, Success
from pycustomers.store import HttpCustomerStore, RemoteCustomerStore

__all__ = [
    "__version__",
    "Customer",
    "CustomersApiError",
    "CustomersClient",
    "CustomersConfig",
    "CustomersConfigError",
    "CustomersError",
    "CustomersTransportError",
    "CustomersValidationError",
    "ErrorInfo",
    "ErrorKind",
    "Failure",
    "HttpCustomerStore",
    "MutationCoordinator",
    "NewCustomerInput",
    "RemoteCustomerStore",
    "ResourceCache",
    "ResourceSnapshot",
    "ResourceStatus",
    "Result",
    "Success",
]
