# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""HTTP client for the managed database backend.

The backend exposes PostgREST-style row inserts and database function
calls. This client is deliberately thin: it builds URLs and headers,
turns transport failures and non-2xx responses into ``BackendError``,
and leaves payload meaning to the services built on it.

Example:
    client = BackendClient(settings.backend)
    await client.insert("hub_activity_log", {"action": "feedback", ...})
    await client.rpc("increment_hard_day_count")
    await client.aclose()
"""

import logging
from typing import Any

import httpx

from hubengage.core.config.settings import BackendSettings
from hubengage.infrastructure.backend.exceptions import BackendError

logger = logging.getLogger(__name__)


class BackendClient:
    """Async HTTP client for the managed database backend.

    Attributes:
        settings: Backend settings (URL, key, timeout).
    """

    def __init__(
        self,
        settings: BackendSettings,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the backend client.

        Args:
            settings: Backend settings.
            client: Shared httpx client. When omitted the backend client
                creates and owns one.
        """
        self.settings = settings
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=settings.timeout)

    @property
    def http(self) -> httpx.AsyncClient:
        """The underlying httpx client (shared with the feed clients)."""
        return self._client

    def _get_headers(self) -> dict[str, str]:
        """Get headers for API requests."""
        return {
            **self.settings.auth_headers,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _handle_response(self, response: httpx.Response, operation: str) -> Any:
        """Return the decoded body of a successful response.

        Raises:
            BackendError: On a non-2xx status.
        """
        if response.is_success:
            if not response.content:
                return None
            try:
                return response.json()
            except ValueError:
                return response.text

        error_detail = response.text
        try:
            error_data = response.json()
            if isinstance(error_data, dict):
                error_detail = error_data.get("message") or error_data.get("detail") or error_detail
        except ValueError:
            pass

        raise BackendError(
            message=f"{operation} failed: {error_detail}",
            status_code=response.status_code,
        )

    async def insert(self, table: str, row: dict[str, Any]) -> Any:
        """Insert one row into a table.

        Args:
            table: Table name.
            row: Column values.

        Returns:
            Decoded response body, if any.

        Raises:
            BackendError: If the request fails.
        """
        url = f"{self.settings.rest_url}/{table}"
        logger.debug("Inserting row into %s", table)
        try:
            response = await self._client.post(url, json=row, headers=self._get_headers())
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error("Backend connection error: %s", str(e))
            raise BackendError(
                message=f"Failed to reach backend: {str(e)}",
                details={"error_type": type(e).__name__, "table": table},
            ) from e
        return self._handle_response(response, f"Insert into {table}")

    async def rpc(self, function: str, params: dict[str, Any] | None = None) -> Any:
        """Call a database function.

        Args:
            function: Function name.
            params: Named arguments.

        Returns:
            Decoded response body, if any.

        Raises:
            BackendError: If the request fails.
        """
        url = f"{self.settings.rest_url}/rpc/{function}"
        logger.debug("Calling rpc %s", function)
        try:
            response = await self._client.post(url, json=params or {}, headers=self._get_headers())
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error("Backend connection error: %s", str(e))
            raise BackendError(
                message=f"Failed to reach backend: {str(e)}",
                details={"error_type": type(e).__name__, "function": function},
            ) from e
        return self._handle_response(response, f"RPC {function}")

    async def aclose(self) -> None:
        """Close the underlying client if this instance owns it."""
        if self._owns_client:
            await self._client.aclose()
