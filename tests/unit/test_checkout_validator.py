"""Unit tests for checkout request validation."""

from decimal import Decimal
from typing import Any

import pytest

from src.core.errors import CheckoutValidationError
from src.services.checkout_validator import is_valid_email, validate_checkout_request


def _rejects(payload: Any, message: str) -> None:
    with pytest.raises(CheckoutValidationError) as exc_info:
        validate_checkout_request(payload)
    assert exc_info.value.message == message


class TestNormalization:
    """Tests for the normalized draft."""

    def test_trims_strings_and_lowercases_email(self, checkout_payload: dict) -> None:
        """Test that customer and shipping strings are trimmed and email lowercased."""
        draft = validate_checkout_request(checkout_payload)

        assert draft.customer.name == "Ada Lovelace"
        assert draft.customer.email == "ada@example.com"
        assert draft.customer.phone == "555-0100"
        assert draft.shipping.street == "1 Main St"
        assert draft.items[0].product_name == "Tee"
        assert draft.items[0].variant_name == "Black / L"
        assert draft.items[0].variant_id == 42

    def test_total_is_computed_from_items(self, checkout_payload: dict) -> None:
        """Test that a tampered client total is ignored."""
        checkout_payload["items"].append({"name": "Sticker", "variantName": "", "quantity": 3, "price": "1.10"})
        checkout_payload["subtotal"] = 0.01
        checkout_payload["total"] = 0.01

        draft = validate_checkout_request(checkout_payload)

        assert draft.subtotal == Decimal("53.30")
        assert draft.total == Decimal("53.30")

    def test_float_prices_do_not_drift(self, checkout_payload: dict) -> None:
        """Test that float prices are summed exactly."""
        checkout_payload["items"] = [{"name": "Pin", "quantity": 3, "price": 0.1}]

        draft = validate_checkout_request(checkout_payload)

        assert draft.total == Decimal("0.30")

    def test_items_without_variant_are_not_fulfillable(self, checkout_payload: dict) -> None:
        """Test that digital items carry no variant id."""
        checkout_payload["items"].append({"name": "Album Download", "variantName": "MP3", "quantity": 1, "price": 10})

        draft = validate_checkout_request(checkout_payload)

        assert draft.items[1].variant_id is None
        assert [item.product_name for item in draft.fulfillable_items] == ["Tee"]

    def test_zero_price_is_allowed(self, checkout_payload: dict) -> None:
        """Test that free items pass validation."""
        checkout_payload["items"] = [{"name": "Free Poster", "quantity": 1, "price": 0}]

        assert validate_checkout_request(checkout_payload).total == Decimal("0.00")


class TestRules:
    """Tests for the ordered validation rules."""

    @pytest.mark.parametrize(
        ("section", "field", "message"),
        [
            ("customer", "name", "Customer name is required"),
            ("customer", "email", "Customer email is required"),
            ("customer", "phone", "Phone number is required"),
            ("shipping", "street", "Street address is required"),
            ("shipping", "city", "City is required"),
            ("shipping", "state", "State is required"),
            ("shipping", "zip", "ZIP code is required"),
            ("shipping", "country", "Country is required"),
        ],
    )
    def test_blank_required_field(self, checkout_payload: dict, section: str, field: str, message: str) -> None:
        """Test that each whitespace-only required field is rejected."""
        checkout_payload[section][field] = "   "
        _rejects(checkout_payload, message)

    def test_invalid_email_shape(self, checkout_payload: dict) -> None:
        """Test that an address without a dotted domain is rejected."""
        checkout_payload["customer"]["email"] = "ada@localhost"
        _rejects(checkout_payload, "Invalid email address")

    def test_first_failure_wins(self, checkout_payload: dict) -> None:
        """Test that the earliest rule is reported when several fail."""
        checkout_payload["customer"]["phone"] = ""
        checkout_payload["shipping"]["city"] = ""
        checkout_payload["items"] = []
        _rejects(checkout_payload, "Phone number is required")

    def test_empty_cart(self, checkout_payload: dict) -> None:
        """Test that an empty items array is rejected."""
        checkout_payload["items"] = []
        _rejects(checkout_payload, "Cart is empty")

    def test_missing_items(self, checkout_payload: dict) -> None:
        """Test that a missing items key counts as an empty cart."""
        del checkout_payload["items"]
        _rejects(checkout_payload, "Cart is empty")

    def test_item_without_name(self, checkout_payload: dict) -> None:
        """Test that an unnamed item is rejected."""
        checkout_payload["items"][0]["name"] = ""
        _rejects(checkout_payload, "Item name is missing")

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, "2", None, True])
    def test_invalid_quantity(self, checkout_payload: dict, quantity: Any) -> None:
        """Test that quantities must be integers of at least one."""
        checkout_payload["items"][0]["quantity"] = quantity
        _rejects(checkout_payload, "Invalid item quantity")

    @pytest.mark.parametrize("price", [-0.01, "abc", None, "NaN"])
    def test_invalid_price(self, checkout_payload: dict, price: Any) -> None:
        """Test that prices must be non-negative numbers."""
        checkout_payload["items"][0]["price"] = price
        _rejects(checkout_payload, "Invalid item price")

    @pytest.mark.parametrize(("quantity", "price"), [(1, 1e30), (10**27, 25), (2, "9" * 40)])
    def test_total_too_large(self, checkout_payload: dict, quantity: int, price: Any) -> None:
        """Test that a cart total beyond cent precision is rejected."""
        checkout_payload["items"][0]["quantity"] = quantity
        checkout_payload["items"][0]["price"] = price
        _rejects(checkout_payload, "Invalid item price")

    def test_large_total_within_precision(self, checkout_payload: dict) -> None:
        checkout_payload["items"][0]["price"] = 1e20

        assert validate_checkout_request(checkout_payload).total == Decimal("200000000000000000000.00")

    def test_invalid_variant_id(self, checkout_payload: dict) -> None:
        """Test that a malformed variant id is rejected."""
        checkout_payload["items"][0]["variantId"] = "abc"
        _rejects(checkout_payload, "Invalid item variant")

    def test_second_item_is_checked(self, checkout_payload: dict) -> None:
        """Test that every item is validated, not just the first."""
        checkout_payload["items"].append({"name": "Hat", "quantity": 0, "price": 20})
        _rejects(checkout_payload, "Invalid item quantity")

    @pytest.mark.parametrize("payload", [None, [], "checkout", {"customer": "Ada"}])
    def test_malformed_body(self, payload: Any) -> None:
        """Test that non-object bodies fail on the first rule."""
        _rejects(payload, "Customer name is required")


class TestIsValidEmail:
    """Tests for is_valid_email."""

    @pytest.mark.parametrize("email", ["a@b.co", "first.last@sub.example.org"])
    def test_accepts(self, email: str) -> None:
        assert is_valid_email(email)

    @pytest.mark.parametrize("email", ["plain", "a@b", "a b@c.de", "@c.de"])
    def test_rejects(self, email: str) -> None:
        assert not is_valid_email(email)
