"""Domain exceptions raised by the checkout pipeline."""


class CheckoutValidationError(Exception):
    """The checkout payload failed validation.

    Carries one human-readable message describing the first failing rule.
    Maps to HTTP 400 and is not logged as an incident.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class OrderStoreError(Exception):
    """A read or write against the order tables failed."""


class OrderNumberConflictError(OrderStoreError):
    """The order number already exists in the orders table."""

    def __init__(self, order_number: str) -> None:
        self.order_number = order_number
        super().__init__(f"Order number already exists: {order_number}")


class FatalStoreError(Exception):
    """The order header could not be persisted; the checkout fails."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DegradedStepError(Exception):
    """A step after the header commit failed.

    Raised inside a step and converted to a degraded step result by the
    orchestrator; it never reaches the route.
    """

    def __init__(self, step: str, message: str) -> None:
        self.step = step
        self.message = message
        super().__init__(f"{step}: {message}")


class PrintfulAPIError(Exception):
    """Printful answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"Printful API error {status_code}: {message}")
