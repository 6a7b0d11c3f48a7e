"""Internal constants shared across the library."""

BASE_URL = "http://localhost:3000"
RESOURCE_PATH = "/api/customers"
USER_AGENT = "pycustomers"

#: Fallback messages used when an error response carries no ``message``.
LIST_FAILED_MESSAGE = "Error fetching customers"
CREATE_FAILED_MESSAGE = "Error adding new customer"
DELETE_FAILED_MESSAGE = "Error deleting customer"
