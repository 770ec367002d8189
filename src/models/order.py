"""Order model type definitions for database operations."""

from datetime import datetime
from typing import Literal, TypedDict
from uuid import UUID


# Order status enum values matching database enum
OrderStatus = Literal["pending", "paid", "shipped", "completed", "cancelled"]


class OrderItemRow(TypedDict):
    """order_items table row representation.

    Each row belongs to exactly one order; rows are removed with their
    order through an ON DELETE CASCADE foreign key.
    """

    id: UUID
    order_id: UUID
    product_name: str
    variant_name: str
    variant_id: int | None
    quantity: int
    price: float


class OrderRow(TypedDict):
    """orders table row representation.

    printful_order_id and status are written in the same UPDATE, so a
    reader never sees one changed without the other.
    """

    id: UUID
    order_number: str
    customer_name: str
    customer_email: str
    customer_phone: str
    shipping_street: str
    shipping_city: str
    shipping_state: str
    shipping_zip: str
    shipping_country: str
    subtotal: float
    total: float
    status: OrderStatus
    printful_order_id: int | None
    created_at: datetime
    updated_at: datetime


class OrderWithItems(OrderRow):
    """Order header joined with its line items."""

    order_items: list[OrderItemRow]


class OrderCreate(TypedDict):
    """Data required to insert a new order header."""

    order_number: str
    customer_name: str
    customer_email: str
    customer_phone: str
    shipping_street: str
    shipping_city: str
    shipping_state: str
    shipping_zip: str
    shipping_country: str
    subtotal: str
    total: str
    status: OrderStatus


class OrderItemCreate(TypedDict):
    """Data required to insert one order line item."""

    order_id: str
    product_name: str
    variant_name: str
    variant_id: int | None
    quantity: int
    price: str


class OrderFulfillmentUpdate(TypedDict):
    """Columns written when the Printful draft order is created."""

    printful_order_id: int
    status: OrderStatus
    updated_at: str
