"""Pytest configuration and fixtures."""

import os
from collections.abc import Generator
from copy import deepcopy
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing application modules
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SECRET_KEY", "test-secret-key")
os.environ.setdefault("PRINTFUL_ACCESS_TOKEN", "test-printful-token")
os.environ.setdefault("PRINTFUL_STORE_ID", "1234567")
os.environ.setdefault("RESEND_API_KEY", "re_test_key")
os.environ.setdefault("ORDER_NOTIFICATION_EMAIL", "owner@example.com")

CHECKOUT_PAYLOAD: dict[str, Any] = {
    "customer": {
        "name": "  Ada Lovelace ",
        "email": " Ada@Example.COM ",
        "phone": " 555-0100 ",
    },
    "shipping": {
        "street": " 1 Main St ",
        "city": "Springfield",
        "state": "IL",
        "zip": "62701",
        "country": "US",
    },
    "items": [
        {"name": "Tee", "variantName": "Black / L", "variantId": 42, "quantity": 2, "price": 25.00},
    ],
    "subtotal": 50.00,
    "total": 50.00,
}


@pytest.fixture(scope="session")
def test_settings() -> Generator[Any, None, None]:
    """Provide test settings with cleared cache.

    Yields:
        Settings: Test configuration settings.
    """
    from src.core.config import get_settings

    get_settings.cache_clear()

    settings = get_settings()
    yield settings

    get_settings.cache_clear()


@pytest.fixture
def checkout_payload() -> dict[str, Any]:
    """A valid checkout body with one Printful-mapped item."""
    return deepcopy(CHECKOUT_PAYLOAD)


@pytest.fixture
def order_draft(checkout_payload: dict[str, Any]) -> Any:
    """The normalized draft for checkout_payload."""
    from src.services.checkout_validator import validate_checkout_request

    return validate_checkout_request(checkout_payload)


@pytest.fixture
def mock_supabase_client() -> Generator[MagicMock, None, None]:
    """Provide a mocked Supabase client.

    Yields:
        MagicMock: Mocked Supabase client for testing.
    """
    mock_client = MagicMock()

    mock_response = MagicMock()
    mock_response.data = []
    mock_client.table.return_value.select.return_value.limit.return_value.execute.return_value = (
        mock_response
    )

    with patch("src.core.supabase.get_supabase_client", return_value=mock_client):
        yield mock_client


@pytest.fixture
def client(mock_supabase_client: MagicMock) -> Generator[TestClient, None, None]:
    """Provide a test client for the FastAPI application.

    Args:
        mock_supabase_client: Mocked Supabase client fixture.

    Yields:
        TestClient: FastAPI test client.
    """
    from src.main import app

    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
