"""Printful REST API client for print-on-demand order creation."""

import logging
import time
from typing import Any

import httpx

from src.core.config import Settings, get_settings
from src.core.errors import PrintfulAPIError

logger = logging.getLogger(__name__)

# Latency threshold for logging (milliseconds)
SLOW_CALL_THRESHOLD_MS = 3000


class PrintfulClient:
    """Async Printful API client.

    Wraps a single httpx.AsyncClient carrying the bearer token and store
    header. Orders created through ``create_order`` are drafts: they are not
    charged or shipped until confirmed in the Printful dashboard.
    """

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.is_configured = settings.is_printful_configured
        self._client = httpx.AsyncClient(
            base_url=settings.printful_api_url,
            headers={
                "Authorization": f"Bearer {settings.printful_access_token}",
                "X-PF-Store-Id": settings.printful_store_id,
                "Content-Type": "application/json",
            },
            timeout=settings.printful_timeout_seconds,
            transport=transport,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        start_time = time.perf_counter()
        response = None
        try:
            response = await self._client.request(method, path, **kwargs)
            return response
        finally:
            latency_ms = (time.perf_counter() - start_time) * 1000
            status_code = response.status_code if response is not None else "error"
            log_msg = f"Printful {method} {path}: status={status_code}, latency={latency_ms:.2f}ms"
            if latency_ms > SLOW_CALL_THRESHOLD_MS:
                logger.warning("SLOW %s", log_msg)
            else:
                logger.info(log_msg)

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Extract the most useful error message from a Printful error body."""
        try:
            data = response.json()
        except ValueError:
            return response.text or response.reason_phrase
        if isinstance(data, dict):
            error = data.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
            if isinstance(data.get("result"), str):
                return data["result"]
        return response.reason_phrase or "Failed to create order"

    async def create_order(
        self,
        recipient: dict[str, Any],
        items: list[dict[str, int]],
        external_id: str | None = None,
    ) -> dict[str, Any]:
        """Create a draft order.

        Args:
            recipient: Printful recipient object (name, address1, city, ...).
            items: Printful items as ``{"sync_variant_id", "quantity"}`` pairs.
            external_id: Our order number, stored by Printful for correlation.

        Returns:
            dict: The ``result`` object of the Printful response.

        Raises:
            PrintfulAPIError: If Printful answers with a non-2xx status.
            httpx.HTTPError: On transport failure or timeout.
        """
        payload: dict[str, Any] = {"recipient": recipient, "items": items}
        if external_id:
            payload["external_id"] = external_id

        response = await self._request("POST", "/orders", json=payload)
        if not response.is_success:
            raise PrintfulAPIError(response.status_code, self._error_message(response))

        return response.json()["result"]

    async def get_order_by_external_id(self, external_id: str) -> dict[str, Any] | None:
        """Look up an order by the external id we assigned to it.

        Returns:
            dict | None: The order ``result`` object, or None if Printful has no such order.

        Raises:
            PrintfulAPIError: For non-2xx statuses other than 404.
            httpx.HTTPError: On transport failure or timeout.
        """
        response = await self._request("GET", f"/orders/@{external_id}")
        if response.status_code == 404:
            return None
        if not response.is_success:
            raise PrintfulAPIError(response.status_code, self._error_message(response))

        return response.json()["result"]


# Global client shared across requests, opened and closed by the app lifespan
_printful_client: PrintfulClient | None = None


def get_printful_client() -> PrintfulClient:
    """Get or create the global Printful client."""
    global _printful_client
    if _printful_client is None:
        _printful_client = PrintfulClient(get_settings())
    return _printful_client


async def init_printful_client() -> None:
    """Create the global Printful client at application startup."""
    client = get_printful_client()
    if not client.is_configured:
        logger.warning("PRINTFUL_ACCESS_TOKEN or PRINTFUL_STORE_ID is missing. Orders will need manual fulfillment.")


async def shutdown_printful_client() -> None:
    """Close the global Printful client at application shutdown."""
    global _printful_client
    if _printful_client is not None:
        await _printful_client.aclose()
        _printful_client = None
