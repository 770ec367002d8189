"""Checkout request validation and normalization.

Pure functions, no I/O. Rules are checked in a fixed order and the first
failing rule wins, so the customer always sees exactly one message.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any

from src.core.errors import CheckoutValidationError
from src.schemas.checkout import CustomerInfo, LineItem, OrderDraft, ShippingAddress, quantize_cents

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# (field, message) in the order they are checked
SHIPPING_FIELDS = (
    ("street", "Street address is required"),
    ("city", "City is required"),
    ("state", "State is required"),
    ("zip", "ZIP code is required"),
    ("country", "Country is required"),
)


def _section(payload: dict[str, Any], key: str) -> dict[str, Any]:
    value = payload.get(key)
    return value if isinstance(value, dict) else {}


def _text(section: dict[str, Any], key: str) -> str:
    value = section.get(key)
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        return ""
    return value.strip()


def is_valid_email(email: str) -> bool:
    """Check an address against the local@domain.tld shape."""
    return bool(EMAIL_PATTERN.match(email))


def _parse_quantity(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _parse_price(value: Any) -> Decimal | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        price = Decimal(str(value))
    except InvalidOperation:
        return None
    if not price.is_finite():
        return None
    return price


def _parse_variant_id(value: Any) -> int | None:
    """Parse a Printful sync variant id; raises on a present but malformed value."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise CheckoutValidationError("Invalid item variant")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise CheckoutValidationError("Invalid item variant")


def _total_fits(items: list[LineItem]) -> bool:
    """Check that the cart total can be held at cent precision."""
    try:
        quantize_cents(sum((item.line_total for item in items), Decimal("0")))
    except InvalidOperation:
        return False
    return True


def _validate_item(raw: Any) -> LineItem:
    item = raw if isinstance(raw, dict) else {}

    name = _text(item, "name")
    if not name:
        raise CheckoutValidationError("Item name is missing")

    quantity = _parse_quantity(item.get("quantity"))
    if quantity is None or quantity < 1:
        raise CheckoutValidationError("Invalid item quantity")

    price = _parse_price(item.get("price"))
    if price is None or price < 0:
        raise CheckoutValidationError("Invalid item price")

    return LineItem(
        product_name=name,
        variant_name=_text(item, "variantName"),
        variant_id=_parse_variant_id(item.get("variantId")),
        quantity=quantity,
        unit_price=price,
    )


def validate_checkout_request(payload: Any) -> OrderDraft:
    """Validate and normalize a raw checkout payload.

    Args:
        payload: Decoded JSON body with customer, shipping and items.

    Returns:
        OrderDraft: Normalized draft with server-computed totals. Any
        client-submitted subtotal or total is ignored.

    Raises:
        CheckoutValidationError: With the message of the first failing rule.
    """
    body = payload if isinstance(payload, dict) else {}
    customer = _section(body, "customer")
    shipping = _section(body, "shipping")

    name = _text(customer, "name")
    if not name:
        raise CheckoutValidationError("Customer name is required")

    email = _text(customer, "email").lower()
    if not email:
        raise CheckoutValidationError("Customer email is required")
    if not is_valid_email(email):
        raise CheckoutValidationError("Invalid email address")

    phone = _text(customer, "phone")
    if not phone:
        raise CheckoutValidationError("Phone number is required")

    address: dict[str, str] = {}
    for field, message in SHIPPING_FIELDS:
        value = _text(shipping, field)
        if not value:
            raise CheckoutValidationError(message)
        address[field] = value

    raw_items = body.get("items")
    if not isinstance(raw_items, list) or not raw_items:
        raise CheckoutValidationError("Cart is empty")

    items = [_validate_item(raw) for raw in raw_items]
    if not _total_fits(items):
        raise CheckoutValidationError("Invalid item price")

    return OrderDraft(
        customer=CustomerInfo(name=name, email=email, phone=phone),
        shipping=ShippingAddress(**address),
        items=items,
    )
