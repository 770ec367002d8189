"""Checkout orchestration: validate, persist, fulfill, notify."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Union

from tenacity import before_sleep_log, retry, retry_if_exception_type, stop_after_attempt

from src.core.config import Settings
from src.core.errors import (
    DegradedStepError,
    FatalStoreError,
    OrderNumberConflictError,
    OrderStoreError,
)
from src.models.order import OrderRow, OrderStatus
from src.schemas.checkout import OrderDraft
from src.services.checkout_validator import validate_checkout_request
from src.services.email_service import EmailService
from src.services.fulfillment_service import FulfillmentService
from src.services.order_number import generate_order_number
from src.services.order_store import OrderStore
from src.services.step_result import Degraded, Fatal, Ok, run_degradable

logger = logging.getLogger(__name__)

# One fresh order number after a unique-constraint collision
ORDER_NUMBER_ATTEMPTS = 2

SUCCESS_MESSAGE = "Order placed successfully! You'll receive a confirmation email shortly."
FATAL_MESSAGE = "Failed to process order. Please try again."

EmailSender = Callable[[OrderDraft, str, datetime], Awaitable[bool]]


@dataclass
class CheckoutOutcome:
    """Result of a checkout whose order header was committed."""

    order_number: str
    order_id: str
    draft: OrderDraft
    status: OrderStatus = "pending"
    fulfillment_order_id: int | None = None
    notification_sent: bool = False
    confirmation_sent: bool = False
    degraded_steps: list[str] = field(default_factory=list)


class CheckoutService:
    """Runs one checkout attempt.

    Only validation and the order header insert can fail the checkout.
    Once the header is committed, item persistence, the Printful draft
    order and both emails run concurrently and each may fail on its own
    without changing the outcome.
    """

    def __init__(
        self,
        store: OrderStore,
        fulfillment: FulfillmentService,
        email: EmailService,
        settings: Settings,
    ) -> None:
        self.store = store
        self.fulfillment = fulfillment
        self.email = email
        self.settings = settings

    async def process_checkout(self, payload: Any) -> CheckoutOutcome:
        """Process a raw checkout payload.

        Args:
            payload: Decoded JSON request body.

        Returns:
            CheckoutOutcome: Order number plus which downstream steps succeeded.

        Raises:
            CheckoutValidationError: If the payload is invalid. Nothing is written.
            FatalStoreError: If the order header could not be saved.
        """
        draft = validate_checkout_request(payload)

        created_at = datetime.now(timezone.utc)
        header = await self._persist_header(draft)
        if isinstance(header, Fatal):
            raise FatalStoreError(FATAL_MESSAGE)

        order = header.value
        order_id = str(order["id"])
        order_number = order["order_number"]
        outcome = CheckoutOutcome(order_number=order_number, order_id=order_id, draft=draft)

        items_result, fulfillment_result, notification_result, confirmation_result = await asyncio.gather(
            run_degradable("persist_items", order_number, self.store.attach_line_items(order_id, draft.items)),
            run_degradable("fulfillment", order_number, self._fulfill(outcome)),
            run_degradable(
                "notification_email",
                order_number,
                self._deliver("notification_email", self.email.send_order_notification, outcome, created_at),
            ),
            run_degradable(
                "confirmation_email",
                order_number,
                self._deliver("confirmation_email", self.email.send_order_confirmation, outcome, created_at),
            ),
        )

        for result in (items_result, fulfillment_result, notification_result, confirmation_result):
            if isinstance(result, Degraded):
                outcome.degraded_steps.append(result.step)

        outcome.notification_sent = isinstance(notification_result, Ok) and notification_result.value
        outcome.confirmation_sent = isinstance(confirmation_result, Ok) and confirmation_result.value

        logger.info(
            "Order %s processed: status=%s, printful_order_id=%s, notification_sent=%s, "
            "confirmation_sent=%s, item_count=%d, total=%s, degraded=%s",
            order_number,
            outcome.status,
            outcome.fulfillment_order_id,
            outcome.notification_sent,
            outcome.confirmation_sent,
            len(draft.items),
            draft.total,
            outcome.degraded_steps,
        )
        return outcome

    @retry(
        retry=retry_if_exception_type(OrderNumberConflictError),
        stop=stop_after_attempt(ORDER_NUMBER_ATTEMPTS),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _create_order_header(self, draft: OrderDraft) -> OrderRow:
        """Insert the header under a freshly generated order number."""
        order_number = generate_order_number(self.settings.order_number_prefix)
        return await self.store.create_order(draft, order_number)

    async def _persist_header(self, draft: OrderDraft) -> Union[Ok[OrderRow], Fatal]:
        try:
            order = await self._create_order_header(draft)
        except OrderStoreError as e:
            logger.error("Failed to save order to Supabase: %s", str(e), extra={"step": "persist_header"})
            return Fatal(step="persist_header", error=str(e))
        return Ok(order)

    async def _fulfill(self, outcome: CheckoutOutcome) -> int | None:
        """Create the Printful draft order and record it on the local order.

        Returns:
            int | None: Printful order id, or None when nothing needed fulfilling.

        Raises:
            DegradedStepError: If Printful did not create the order.
        """
        result = await self.fulfillment.create_draft_order(outcome.draft, outcome.order_number)
        if result.skipped:
            return None
        if not result.success or result.order_id is None:
            raise DegradedStepError("fulfillment", result.error or "Printful returned no order id")

        outcome.fulfillment_order_id = result.order_id
        marked = await run_degradable(
            "mark_fulfilled",
            outcome.order_number,
            self.store.mark_fulfilled(outcome.order_id, result.order_id),
        )
        if isinstance(marked, Ok):
            outcome.status = "paid"
        else:
            outcome.degraded_steps.append(marked.step)
        return result.order_id

    async def _deliver(
        self,
        step: str,
        send: EmailSender,
        outcome: CheckoutOutcome,
        created_at: datetime,
    ) -> bool:
        """Send one email. An unconfigured provider is a silent no-op, not a failure."""
        sent = await send(outcome.draft, outcome.order_number, created_at)
        if not sent and self.email.is_configured:
            raise DegradedStepError(step, "email was not sent")
        return sent
