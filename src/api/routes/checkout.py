"""Checkout API route for storefront orders."""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from src.api.deps import CheckoutServiceDep
from src.core.errors import CheckoutValidationError, FatalStoreError
from src.schemas.checkout import CheckoutErrorResponse, CheckoutResponse, EmailsSent
from src.services.checkout_service import FATAL_MESSAGE, SUCCESS_MESSAGE

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/checkout", tags=["checkout"])


def _error(message: str, status_code: int) -> JSONResponse:
    body = CheckoutErrorResponse(error=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", by_alias=True))


@router.post(
    "",
    response_model=CheckoutResponse,
    response_model_exclude_none=True,
    responses={
        400: {"model": CheckoutErrorResponse, "description": "Invalid checkout request"},
        500: {"model": CheckoutErrorResponse, "description": "Order could not be saved"},
    },
    summary="Place an order",
    description="Validates the cart, saves the order, creates a Printful draft order and sends order emails.",
)
async def checkout(request: Request, service: CheckoutServiceDep) -> CheckoutResponse | JSONResponse:
    """Place a storefront order.

    The order succeeds once it is saved. Printful and email failures after
    that point are logged and reported through fulfillmentOrderId and
    emailsSent, but the response is still a success.

    Args:
        request: FastAPI request object for reading the raw JSON body.
        service: Checkout orchestrator.

    Returns:
        CheckoutResponse: Order number, Printful order id and email flags.
        JSONResponse: 400 on invalid input, 500 if the order was not saved.
    """
    try:
        payload = await request.json()
    except ValueError:
        # Covers JSONDecodeError, UnicodeDecodeError and oversized integer literals
        return _error("Invalid request body", status.HTTP_400_BAD_REQUEST)

    try:
        outcome = await service.process_checkout(payload)
    except CheckoutValidationError as e:
        logger.info("Checkout rejected: %s", e.message)
        return _error(e.message, status.HTTP_400_BAD_REQUEST)
    except FatalStoreError as e:
        logger.error("Checkout failed: %s", e.message)
        return _error(e.message, status.HTTP_500_INTERNAL_SERVER_ERROR)
    except Exception:
        logger.exception("Unexpected error during checkout")
        return _error(FATAL_MESSAGE, status.HTTP_500_INTERNAL_SERVER_ERROR)

    return CheckoutResponse(
        order_number=outcome.order_number,
        fulfillment_order_id=outcome.fulfillment_order_id,
        status=outcome.status,
        message=SUCCESS_MESSAGE,
        subtotal=float(outcome.draft.subtotal),
        total=float(outcome.draft.total),
        emails_sent=EmailsSent(
            notification=outcome.notification_sent,
            confirmation=outcome.confirmation_sent,
        ),
    )
