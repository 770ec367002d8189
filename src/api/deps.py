"""FastAPI dependency injection functions.

Settings are read once and handed to every client constructor here, so
services never look up configuration on their own.
"""

from typing import Annotated

from fastapi import Depends

from src.core.config import Settings, get_settings
from src.core.printful import get_printful_client
from src.core.supabase import get_supabase_client
from src.services.checkout_service import CheckoutService
from src.services.email_service import EmailService
from src.services.fulfillment_service import FulfillmentService
from src.services.order_store import OrderStore


def get_order_store(settings: Annotated[Settings, Depends(get_settings)]) -> OrderStore:
    """Order store bound to the shared Supabase client."""
    return OrderStore(get_supabase_client(), timeout_seconds=settings.store_timeout_seconds)


def get_fulfillment_service() -> FulfillmentService:
    """Fulfillment service bound to the shared Printful client."""
    return FulfillmentService(get_printful_client())


def get_email_service(settings: Annotated[Settings, Depends(get_settings)]) -> EmailService:
    """Email service configured from settings."""
    return EmailService(settings)


def get_checkout_service(
    settings: Annotated[Settings, Depends(get_settings)],
    store: Annotated[OrderStore, Depends(get_order_store)],
    fulfillment: Annotated[FulfillmentService, Depends(get_fulfillment_service)],
    email: Annotated[EmailService, Depends(get_email_service)],
) -> CheckoutService:
    """Checkout orchestrator wired with its collaborators."""
    return CheckoutService(store=store, fulfillment=fulfillment, email=email, settings=settings)


CheckoutServiceDep = Annotated[CheckoutService, Depends(get_checkout_service)]
