"""HTTP transport for the customers API."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

import aiohttp

from pycustomers._constants import USER_AGENT
from pycustomers._redact import redact_for_log
from pycustomers.config import CustomersConfig
from pycustomers.exceptions import CustomersTransportError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """Decoded HTTP response. ``body`` is ``None`` for an empty payload."""

    status: int
    body: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, str] | None = None,
        json_body: Mapping[str, Any] | None = None,
    ) -> HttpResponse:
        ...


class HttpTransport:
    """JSON-over-HTTP transport backed by an :class:`aiohttp.ClientSession`."""

    def __init__(self, config: CustomersConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout or None)

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, str] | None = None,
        json_body: Mapping[str, Any] | None = None,
    ) -> HttpResponse:
        """Send a request and decode the JSON reply.

        Non-2xx statuses are returned, not raised; the endpoint layer
        maps them to API errors.

        Raises
        ------
        CustomersTransportError
            On network failure, timeout, or a 2xx reply whose body is not
            UTF-8 JSON. An unparsable error body is returned as ``None``.
        """
        url = f"{self._config.base_url.rstrip('/')}{endpoint}"
        headers = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }

        _logger.debug("%s %s", method, url)
        if self._config.api_trace_enabled and json_body is not None:
            _logger.debug("Request body %s: %s", endpoint, redact_for_log(dict(json_body)))

        try:
            async with self._http.request(
                method,
                url,
                params=dict(params) if params else None,
                json=dict(json_body) if json_body is not None else None,
                headers=headers,
                timeout=self._timeout,
            ) as resp:
                status = resp.status
                raw = await resp.read()
        except TimeoutError as exc:
            raise CustomersTransportError(
                f"Request to {endpoint} timed out",
                endpoint=endpoint,
            ) from exc
        except aiohttp.ClientError as exc:
            raise CustomersTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        body: Any = None
        if raw.strip():
            try:
                body = json.loads(raw.decode("utf-8"))
            except (UnicodeDecodeError, json.JSONDecodeError) as exc:
                if not 200 <= status < 300:
                    # Error pages (HTML, plain text) still carry a usable status.
                    _logger.debug("Unparsable HTTP %d body from %s", status, endpoint)
                    return HttpResponse(status=status, body=None)
                raise CustomersTransportError(
                    f"Invalid JSON from {endpoint} (HTTP {status}): {raw[:200]!r}",
                    status_code=status,
                    endpoint=endpoint,
                ) from exc

        if self._config.api_trace_enabled:
            _logger.debug("Response %s HTTP %d: %s", endpoint, status, redact_for_log(body))

        return HttpResponse(status=status, body=body)
