"""Client configuration for pycustomers."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pycustomers._constants import BASE_URL, RESOURCE_PATH
from pycustomers.exceptions import CustomersConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class CustomersConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        Scheme and host of the customers API (no trailing slash needed).
    resource_path : str
        Path of the customers collection. Also used as the cache key
        for the collection.
    request_timeout : float
        Total per-request timeout in seconds. ``0`` disables the timeout.
    api_trace_enabled : bool
        Log redacted request/response bodies at DEBUG level.
    """

    base_url: str = BASE_URL
    resource_path: str = RESOURCE_PATH
    request_timeout: float = 10.0
    api_trace_enabled: bool = False

    def __post_init__(self) -> None:
        if not self.base_url.startswith(("http://", "https://")):
            raise CustomersConfigError(f"base_url must start with http:// or https://, got {self.base_url!r}")
        if not self.resource_path.startswith("/"):
            raise CustomersConfigError(f"resource_path must start with '/', got {self.resource_path!r}")
        if self.request_timeout < 0:
            raise CustomersConfigError(f"request_timeout must be >= 0, got {self.request_timeout}")

    @property
    def resource_url(self) -> str:
        return f"{self.base_url.rstrip('/')}{self.resource_path}"

    @classmethod
    def from_env(cls, **overrides: Any) -> CustomersConfig:
        """Create configuration from environment variables.

        Reads ``CUSTOMERS_BASE_URL``, ``CUSTOMERS_RESOURCE_PATH``,
        ``CUSTOMERS_REQUEST_TIMEOUT`` and ``CUSTOMERS_API_TRACE_ENABLED``.
        Explicit keyword arguments override environment values.

        Raises
        ------
        CustomersConfigError
            If a numeric variable cannot be parsed or a value is invalid.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "CUSTOMERS_BASE_URL": "base_url",
            "CUSTOMERS_RESOURCE_PATH": "resource_path",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        timeout_env = env.get("CUSTOMERS_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            try:
                config_kwargs["request_timeout"] = float(timeout_env)
            except ValueError as exc:
                raise CustomersConfigError(f"CUSTOMERS_REQUEST_TIMEOUT is not a number: {timeout_env!r}") from exc

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(
                env.get("CUSTOMERS_API_TRACE_ENABLED"),
                False,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
