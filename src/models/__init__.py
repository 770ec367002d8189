"""Database model type definitions."""

from src.models.order import (
    OrderCreate,
    OrderFulfillmentUpdate,
    OrderItemCreate,
    OrderItemRow,
    OrderRow,
    OrderStatus,
    OrderWithItems,
)

__all__ = [
    "OrderCreate",
    "OrderFulfillmentUpdate",
    "OrderItemCreate",
    "OrderItemRow",
    "OrderRow",
    "OrderStatus",
    "OrderWithItems",
]
