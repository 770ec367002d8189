"""Human-readable order number generation."""

import secrets
import string
import time

BASE36_ALPHABET = string.digits + string.ascii_lowercase
RANDOM_SUFFIX_LENGTH = 4
DEFAULT_PREFIX = "STG"


def to_base36(value: int) -> str:
    """Encode a non-negative integer in base 36 (0-9, a-z)."""
    if value < 0:
        raise ValueError("value must be non-negative")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


def generate_order_number(prefix: str = DEFAULT_PREFIX, timestamp_ms: int | None = None) -> str:
    """Generate an order number like ``STG-MGXK2Z1Q-7F3A``.

    The number is the prefix, the base-36 wall-clock time in milliseconds
    and four random base-36 characters, uppercased. Uniqueness is only
    probabilistic; the unique constraint on orders.order_number rejects the
    rare collision.

    Args:
        prefix: Short store prefix.
        timestamp_ms: Override for the current time, in milliseconds.

    Returns:
        str: The order number.
    """
    if timestamp_ms is None:
        timestamp_ms = time.time_ns() // 1_000_000
    suffix = "".join(secrets.choice(BASE36_ALPHABET) for _ in range(RANDOM_SUFFIX_LENGTH))
    return f"{prefix}-{to_base36(timestamp_ms)}-{suffix}".upper()
