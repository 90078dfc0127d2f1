"""Payment reminder messages and delivery links"""

from datetime import datetime
from typing import Optional
from urllib.parse import quote

from retailpro.domain.models import Invoice, ReminderHistory, ReminderMethod
from retailpro.utils.ids import generate_id


def format_currency(amount: float, symbol: str = "₹") -> str:
    """Format an amount for display, e.g. 1234.5 -> ₹1,234.50"""
    return f"{symbol}{amount:,.2f}"


def default_reminder_message(invoice: Invoice, currency_symbol: str = "₹") -> str:
    return (
        f"Hi {invoice.customer_name}, a friendly reminder that your payment of "
        f"{format_currency(invoice.grand_total, currency_symbol)} is due."
    )


def build_reminder(
    invoice: Invoice,
    method: ReminderMethod,
    sent_at: datetime,
    message: Optional[str] = None,
    currency_symbol: str = "₹",
) -> ReminderHistory:
    """Custom message when given and non-blank, otherwise the default template"""
    text = message if message and message.strip() else default_reminder_message(invoice, currency_symbol)
    return ReminderHistory(id=generate_id("REM"), date=sent_at, message=text, method=method)


def whatsapp_link(phone: str, message: str, base_url: str = "https://wa.me") -> str:
    """Click-to-chat link addressed to the customer's phone number"""
    return f"{base_url.rstrip('/')}/{phone}?text={quote(message, safe='')}"
