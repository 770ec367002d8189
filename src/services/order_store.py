"""Order persistence against the Supabase orders and order_items tables."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, TypeVar

from supabase import Client, PostgrestAPIError

from src.core.errors import OrderNumberConflictError, OrderStoreError
from src.models.order import (
    OrderCreate,
    OrderFulfillmentUpdate,
    OrderItemCreate,
    OrderRow,
    OrderWithItems,
)
from src.schemas.checkout import LineItem, OrderDraft

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Postgres error code for unique_violation
UNIQUE_VIOLATION = "23505"


class OrderStore:
    """Order store client.

    The supabase-py client is synchronous, so each call runs in a worker
    thread under a timeout. A timeout is reported as an ordinary
    OrderStoreError.
    """

    def __init__(self, client: Client, timeout_seconds: float = 10.0) -> None:
        self.client = client
        self.timeout_seconds = timeout_seconds

    async def _execute(self, operation: str, func: Callable[[], T]) -> T:
        try:
            return await asyncio.wait_for(asyncio.to_thread(func), timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            raise OrderStoreError(f"{operation} timed out after {self.timeout_seconds}s") from e

    async def create_order(self, draft: OrderDraft, order_number: str) -> OrderRow:
        """Insert the order header with status pending.

        Args:
            draft: Validated checkout.
            order_number: Freshly generated public order number.

        Returns:
            OrderRow: The inserted row, including its generated id.

        Raises:
            OrderNumberConflictError: If the order number is already taken.
            OrderStoreError: On any other database failure or timeout.
        """
        order_data: OrderCreate = {
            "order_number": order_number,
            "customer_name": draft.customer.name,
            "customer_email": draft.customer.email,
            "customer_phone": draft.customer.phone,
            "shipping_street": draft.shipping.street,
            "shipping_city": draft.shipping.city,
            "shipping_state": draft.shipping.state,
            "shipping_zip": draft.shipping.zip,
            "shipping_country": draft.shipping.country,
            "subtotal": str(draft.subtotal),
            "total": str(draft.total),
            "status": "pending",
        }

        query = self.client.table("orders").insert(order_data)
        try:
            response = await self._execute("create_order", query.execute)
        except PostgrestAPIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise OrderNumberConflictError(order_number) from e
            raise OrderStoreError(f"Failed to insert order {order_number}: {e.message}") from e
        except OrderStoreError:
            raise
        except Exception as e:
            raise OrderStoreError(f"Failed to insert order {order_number}: {e}") from e

        if not response.data:
            raise OrderStoreError(f"Insert returned no row for order {order_number}")

        order = response.data[0]
        logger.info("Order %s saved with id %s", order_number, order["id"])
        return order

    async def attach_line_items(self, order_id: str, items: list[LineItem]) -> None:
        """Insert the line items of a committed order.

        Raises:
            OrderStoreError: If the insert fails or times out.
        """
        rows: list[OrderItemCreate] = [
            {
                "order_id": str(order_id),
                "product_name": item.product_name,
                "variant_name": item.variant_name,
                "variant_id": item.variant_id,
                "quantity": item.quantity,
                "price": str(item.unit_price),
            }
            for item in items
        ]

        query = self.client.table("order_items").insert(rows)
        try:
            await self._execute("attach_line_items", query.execute)
        except OrderStoreError:
            raise
        except Exception as e:
            raise OrderStoreError(f"Failed to insert items for order {order_id}: {e}") from e

    async def mark_fulfilled(self, order_id: str, provider_order_id: int) -> None:
        """Attach the Printful order id and move the order to paid.

        Both columns are written by a single UPDATE statement.

        Raises:
            OrderStoreError: If the update fails or times out.
        """
        update_data: OrderFulfillmentUpdate = {
            "printful_order_id": provider_order_id,
            "status": "paid",
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }

        query = self.client.table("orders").update(update_data).eq("id", str(order_id))
        try:
            await self._execute("mark_fulfilled", query.execute)
        except OrderStoreError:
            raise
        except Exception as e:
            raise OrderStoreError(f"Failed to mark order {order_id} fulfilled: {e}") from e

    async def get_order(self, order_number: str) -> OrderWithItems | None:
        """Get an order and its line items by public order number.

        Returns:
            dict | None: The order data or None if not found.
        """
        query = (
            self.client.table("orders")
            .select("*, order_items(*)")
            .eq("order_number", order_number)
            .maybe_single()
        )
        response = await self._execute("get_order", query.execute)
        return response.data if response and response.data else None

    async def list_unfulfilled_orders(self, older_than: datetime) -> list[OrderRow]:
        """List pending orders that never got a Printful order id.

        Args:
            older_than: Only orders created before this instant are returned.

        Returns:
            list[dict]: Orders, oldest first.
        """
        query = (
            self.client.table("orders")
            .select("*")
            .eq("status", "pending")
            .is_("printful_order_id", "null")
            .lt("created_at", older_than.isoformat())
            .order("created_at")
        )
        response = await self._execute("list_unfulfilled_orders", query.execute)
        return response.data or []

