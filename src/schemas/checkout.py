"""Checkout and order Pydantic schemas for API request/response models."""

from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.models.order import OrderStatus

CENTS = Decimal("0.01")


def quantize_cents(amount: Decimal) -> Decimal:
    """Round a currency amount to whole cents."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


class CamelModel(BaseModel):
    """Base model exposing camelCase field names on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class CustomerInfo(CamelModel):
    """Normalized customer contact details."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Customer full name")
    email: str = Field(min_length=3, description="Lowercased customer email")
    phone: str = Field(min_length=1, description="Customer phone number")

    @property
    def first_name(self) -> str:
        return self.name.split(" ")[0]


class ShippingAddress(CamelModel):
    """Normalized shipping address."""

    model_config = ConfigDict(frozen=True)

    street: str = Field(min_length=1)
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    zip: str = Field(min_length=1)
    country: str = Field(min_length=1)


class LineItem(CamelModel):
    """A single cart line.

    variant_id is the Printful sync variant id; it is None for products
    with no print-on-demand mapping, such as digital goods.
    """

    model_config = ConfigDict(frozen=True)

    product_name: str = Field(min_length=1, description="Product display name")
    variant_name: str = Field(default="", description="Variant display name")
    variant_id: int | None = Field(default=None, description="Printful sync variant ID")
    quantity: int = Field(ge=1, description="Quantity ordered")
    unit_price: Decimal = Field(ge=0, description="Unit price")

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class OrderDraft(CamelModel):
    """A validated checkout, ready to be persisted.

    Totals are derived from the line items and never taken from the client.
    """

    model_config = ConfigDict(frozen=True)

    customer: CustomerInfo
    shipping: ShippingAddress
    items: list[LineItem] = Field(min_length=1)

    @property
    def subtotal(self) -> Decimal:
        return quantize_cents(sum((item.line_total for item in self.items), Decimal("0")))

    @property
    def total(self) -> Decimal:
        # Shipping is calculated at fulfillment time
        return self.subtotal

    @property
    def fulfillable_items(self) -> list[LineItem]:
        """Items mapped to a Printful variant."""
        return [item for item in self.items if item.variant_id is not None]


class EmailsSent(CamelModel):
    """Which transactional emails went out."""

    notification: bool = Field(description="Store owner notification was sent")
    confirmation: bool = Field(description="Customer confirmation was sent")


class CheckoutResponse(CamelModel):
    """Schema for a successful checkout response."""

    success: bool = Field(default=True)
    order_number: str = Field(description="Public order number")
    fulfillment_order_id: int | None = Field(default=None, description="Printful order ID, if created")
    status: OrderStatus = Field(description="Order status after checkout")
    message: str = Field(description="Message to show the customer")
    subtotal: float = Field(description="Server-computed subtotal")
    total: float = Field(description="Server-computed total")
    emails_sent: EmailsSent


class CheckoutErrorResponse(CamelModel):
    """Schema for a rejected checkout."""

    success: bool = Field(default=False)
    error: str = Field(description="Human-readable error message")
