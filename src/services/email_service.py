"""Email service using Resend for transactional emails."""

import asyncio
import logging
from datetime import datetime
from html import escape
from typing import Any

import resend

from src.core.config import Settings
from src.schemas.checkout import OrderDraft

logger = logging.getLogger(__name__)

ACCENT = "#dc2626"


def format_order_time(created_at: datetime) -> str:
    """Human-readable order time, e.g. 'Monday, October 19, 2026 at 8:21 PM UTC'."""
    hour = created_at.strftime("%I").lstrip("0") or "12"
    return (
        f"{created_at.strftime('%A, %B')} {created_at.day}, {created_at.year} "
        f"at {hour}:{created_at.strftime('%M %p')} {created_at.tzname() or 'UTC'}"
    )


def _items_rows(order: OrderDraft) -> str:
    return "".join(
        f"""
            <tr>
                <td style="padding: 12px; border-bottom: 1px solid #333;">
                    <strong>{escape(item.product_name)}</strong><br/>
                    <span style="color: #888;">{escape(item.variant_name)}</span>
                </td>
                <td style="padding: 12px; border-bottom: 1px solid #333; text-align: center;">{item.quantity}</td>
                <td style="padding: 12px; border-bottom: 1px solid #333; text-align: right;">${item.line_total:.2f}</td>
            </tr>"""
        for item in order.items
    )


def _shipping_block(order: OrderDraft) -> str:
    shipping = order.shipping
    return (
        f"{escape(shipping.street)}<br/>"
        f"{escape(shipping.city)}, {escape(shipping.state)} {escape(shipping.zip)}<br/>"
        f"{escape(shipping.country)}"
    )


class EmailService:
    """Service for sending order emails via Resend.

    Both sends are best-effort: failures are logged and reported as False,
    never raised. With no RESEND_API_KEY nothing is sent.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize email service with Resend API key."""
        self.is_configured = settings.is_email_configured
        if self.is_configured:
            resend.api_key = settings.resend_api_key
        self.from_email = settings.email_from_address
        self.notification_email = settings.order_notification_email
        self.store_name = settings.store_name
        self.timeout_seconds = settings.email_timeout_seconds

    async def _send(self, kind: str, order_number: str, params: dict[str, Any]) -> bool:
        try:
            response = await asyncio.wait_for(
                asyncio.to_thread(resend.Emails.send, params),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.error("Timed out sending %s email for order %s", kind, order_number)
            return False
        except Exception as e:
            logger.error("Failed to send %s email for order %s: %s", kind, order_number, str(e))
            return False

        logger.info("%s email sent for order %s, id: %s", kind.capitalize(), order_number, response.get("id"))
        return True

    async def send_order_notification(self, order: OrderDraft, order_number: str, created_at: datetime) -> bool:
        """Send the new-order email to the store owner.

        Args:
            order: Validated checkout snapshot.
            order_number: Public order number.
            created_at: Time the order was placed.

        Returns:
            bool: True if Resend accepted the email.
        """
        if not self.is_configured:
            logger.warning("RESEND_API_KEY not configured - skipping notification for order %s", order_number)
            return False

        customer = order.customer
        html_content = f"""
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>New Order - {order_number}</title>
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; background: #111; color: #fff; padding: 40px; margin: 0;">
    <div style="max-width: 600px; margin: 0 auto; background: #1a1a1a; border-radius: 12px; overflow: hidden;">
        <div style="background: linear-gradient(135deg, {ACCENT} 0%, #991b1b 100%); padding: 30px; text-align: center;">
            <h1 style="margin: 0; font-size: 24px; letter-spacing: 2px;">NEW ORDER</h1>
            <p style="margin: 10px 0 0; font-size: 18px; opacity: 0.9;">{order_number}</p>
        </div>

        <div style="padding: 30px;">
            <h2 style="margin: 0 0 15px; font-size: 16px; color: {ACCENT}; text-transform: uppercase;">Customer Details</h2>
            <p style="margin: 0 0 8px;"><strong>Name:</strong> {escape(customer.name)}</p>
            <p style="margin: 0 0 8px;"><strong>Email:</strong> <a href="mailto:{escape(customer.email)}" style="color: {ACCENT};">{escape(customer.email)}</a></p>
            <p style="margin: 0;"><strong>Phone:</strong> {escape(customer.phone)}</p>
        </div>

        <div style="padding: 0 30px 30px;">
            <h2 style="margin: 0 0 15px; font-size: 16px; color: {ACCENT}; text-transform: uppercase;">Shipping Address</h2>
            <p style="margin: 0; line-height: 1.6;">{_shipping_block(order)}</p>
        </div>

        <div style="padding: 0 30px 30px;">
            <h2 style="margin: 0 0 15px; font-size: 16px; color: {ACCENT}; text-transform: uppercase;">Order Items</h2>
            <table style="width: 100%; border-collapse: collapse;">
                <thead>
                    <tr style="border-bottom: 2px solid {ACCENT};">
                        <th style="padding: 12px; text-align: left;">Item</th>
                        <th style="padding: 12px; text-align: center;">Qty</th>
                        <th style="padding: 12px; text-align: right;">Price</th>
                    </tr>
                </thead>
                <tbody>{_items_rows(order)}
                </tbody>
                <tfoot>
                    <tr>
                        <td colspan="2" style="padding: 15px 12px; text-align: right; font-weight: bold; font-size: 18px;">TOTAL:</td>
                        <td style="padding: 15px 12px; text-align: right; font-weight: bold; font-size: 18px; color: {ACCENT};">${order.total:.2f}</td>
                    </tr>
                </tfoot>
            </table>
        </div>

        <div style="padding: 0 30px 30px; text-align: center;">
            <a href="https://www.printful.com/dashboard/orders" style="display: inline-block; background: {ACCENT}; color: white; padding: 15px 40px; text-decoration: none; border-radius: 8px; font-weight: bold;">
                Fulfill on Printful
            </a>
        </div>

        <div style="background: #111; padding: 20px; text-align: center; color: #666; font-size: 12px;">
            Order placed: {format_order_time(created_at)}
        </div>
    </div>
</body>
</html>
"""

        return await self._send(
            "notification",
            order_number,
            {
                "from": self.from_email,
                "to": [self.notification_email],
                "subject": f"New Order: {order_number} - {customer.name}",
                "html": html_content,
                "reply_to": customer.email,
            },
        )

    async def send_order_confirmation(self, order: OrderDraft, order_number: str, created_at: datetime) -> bool:
        """Send the order confirmation email to the customer.

        Args:
            order: Validated checkout snapshot.
            order_number: Public order number.
            created_at: Time the order was placed.

        Returns:
            bool: True if Resend accepted the email.
        """
        if not self.is_configured:
            logger.warning("RESEND_API_KEY not configured - skipping confirmation for order %s", order_number)
            return False

        store_name = escape(self.store_name)
        html_content = f"""
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>Order Confirmation - {order_number}</title>
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; background: #111; color: #fff; padding: 40px; margin: 0;">
    <div style="max-width: 600px; margin: 0 auto; background: #1a1a1a; border-radius: 12px; overflow: hidden;">
        <div style="background: linear-gradient(135deg, {ACCENT} 0%, #991b1b 100%); padding: 30px; text-align: center;">
            <h1 style="margin: 0; font-size: 28px; letter-spacing: 2px;">{store_name.upper()}</h1>
            <p style="margin: 10px 0 0; font-size: 14px; opacity: 0.9; letter-spacing: 3px;">OFFICIAL MERCH</p>
        </div>

        <div style="padding: 30px; text-align: center;">
            <h2 style="margin: 0 0 10px; font-size: 24px;">Thank You, {escape(order.customer.first_name)}!</h2>
            <p style="margin: 0; color: #888;">We've received your order and will ship it soon.</p>
            <p style="margin: 20px 0 0; padding: 15px 25px; background: #222; display: inline-block; border-radius: 8px;">
                Order #: <strong style="color: {ACCENT};">{order_number}</strong>
            </p>
            <p style="margin: 15px 0 0; color: #888; font-size: 13px;">Placed {format_order_time(created_at)}</p>
        </div>

        <div style="padding: 0 30px 30px;">
            <h3 style="margin: 0 0 15px; font-size: 14px; color: {ACCENT}; text-transform: uppercase;">Your Items</h3>
            <table style="width: 100%; border-collapse: collapse;">
                <tbody>{_items_rows(order)}
                </tbody>
                <tfoot>
                    <tr>
                        <td colspan="2" style="padding: 15px 12px; text-align: right; font-weight: bold;">Total:</td>
                        <td style="padding: 15px 12px; text-align: right; font-weight: bold; color: {ACCENT};">${order.total:.2f}</td>
                    </tr>
                </tfoot>
            </table>
        </div>

        <div style="padding: 0 30px 30px;">
            <h3 style="margin: 0 0 15px; font-size: 14px; color: {ACCENT}; text-transform: uppercase;">Shipping To</h3>
            <p style="margin: 0; line-height: 1.6; color: #ccc;">{_shipping_block(order)}</p>
        </div>

        <div style="background: #111; padding: 20px; text-align: center; color: #666; font-size: 12px;">
            <p style="margin: 0 0 10px;">Questions? Reply to this email.</p>
            <p style="margin: 0;">&copy; {store_name}. All rights reserved.</p>
        </div>
    </div>
</body>
</html>
"""

        text_content = f"""
Thank you, {order.customer.first_name}!

We've received your order {order_number} and will ship it soon.

Total: ${order.total:.2f}

Questions? Reply to this email.
"""

        return await self._send(
            "confirmation",
            order_number,
            {
                "from": self.from_email,
                "to": [order.customer.email],
                "subject": f"Order Confirmed: {order_number} - {self.store_name}",
                "html": html_content,
                "text": text_content,
            },
        )
