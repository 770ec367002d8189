"""Print-on-demand fulfillment through Printful draft orders."""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from src.core.errors import PrintfulAPIError
from src.core.printful import PrintfulClient
from src.schemas.checkout import OrderDraft

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FulfillmentResult:
    """Outcome of a draft order request.

    skipped is True when the cart had no Printful-mapped items, in which
    case Printful was never called and success is also True.
    """

    success: bool
    order_id: int | None = None
    status: str | None = None
    error: str | None = None
    skipped: bool = False


def build_recipient(draft: OrderDraft) -> dict[str, Any]:
    """Map the customer and shipping address onto a Printful recipient."""
    return {
        "name": draft.customer.name,
        "address1": draft.shipping.street,
        "city": draft.shipping.city,
        "state_code": draft.shipping.state,
        "zip": draft.shipping.zip,
        "country_code": draft.shipping.country,
        "email": draft.customer.email,
        "phone": draft.customer.phone,
    }


def build_items(draft: OrderDraft) -> list[dict[str, int]]:
    """Printful items for every line mapped to a sync variant.

    Lines without a variant_id (digital goods) are left out.
    """
    return [
        {"sync_variant_id": item.variant_id, "quantity": item.quantity}
        for item in draft.fulfillable_items
    ]


class FulfillmentService:
    """Creates Printful draft orders for checkouts."""

    def __init__(self, client: PrintfulClient) -> None:
        self.client = client

    async def create_draft_order(self, draft: OrderDraft, order_number: str) -> FulfillmentResult:
        """Request a draft order for the Printful-mapped items of a checkout.

        The order number is sent as Printful's external_id so the two
        systems can be reconciled by hand.

        Args:
            draft: Validated checkout.
            order_number: Our public order number.

        Returns:
            FulfillmentResult: Never raises; failures come back with success=False.
        """
        items = build_items(draft)
        if not items:
            logger.info("Order %s has no Printful items, skipping fulfillment", order_number)
            return FulfillmentResult(success=True, skipped=True)

        if not self.client.is_configured:
            logger.warning("PRINTFUL_ACCESS_TOKEN or PRINTFUL_STORE_ID is missing")
            return FulfillmentResult(success=False, error="Printful not configured")

        try:
            order = await self.client.create_order(build_recipient(draft), items, external_id=order_number)
        except PrintfulAPIError as e:
            logger.error("Printful order creation failed for %s: %s", order_number, e.message)
            return FulfillmentResult(success=False, error=e.message)
        except httpx.HTTPError as e:
            # The request may have reached Printful; check before reporting failure
            logger.warning("Printful request for %s failed in transit: %s", order_number, str(e))
            return await self._recover_by_external_id(order_number, e)

        logger.info("Printful order created: ID %s, Status: %s", order["id"], order.get("status"))
        return FulfillmentResult(success=True, order_id=int(order["id"]), status=order.get("status"))

    async def _recover_by_external_id(self, order_number: str, cause: Exception) -> FulfillmentResult:
        """Look the order up once by external id after an ambiguous failure.

        The create request is never re-sent, so a timeout cannot produce a
        second draft order for the same checkout.
        """
        try:
            existing = await self.client.get_order_by_external_id(order_number)
        except (PrintfulAPIError, httpx.HTTPError) as e:
            logger.error("Printful lookup for %s failed: %s", order_number, str(e))
            return FulfillmentResult(success=False, error=f"{type(cause).__name__}: {cause}")

        if existing is None:
            return FulfillmentResult(success=False, error=f"{type(cause).__name__}: {cause}")

        logger.info("Found Printful order %s for %s after failed request", existing["id"], order_number)
        return FulfillmentResult(success=True, order_id=int(existing["id"]), status=existing.get("status"))
