"""Dashboard and receivables figures derived from the collections"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence

from retailpro.domain.inventory import low_stock_products
from retailpro.domain.models import Invoice, Product


@dataclass
class DashboardSummary:
    total_sales: float
    pending_collection: float
    low_stock: List[Product]

    @property
    def low_stock_count(self) -> int:
        return len(self.low_stock)


def pending_invoices(invoices: Sequence[Invoice]) -> List[Invoice]:
    return [inv for inv in invoices if not inv.is_paid]


def total_outstanding(invoices: Sequence[Invoice]) -> float:
    return sum((inv.grand_total for inv in pending_invoices(invoices)), 0)


def is_overdue(invoice: Invoice, now: datetime) -> bool:
    """Unpaid with a due date strictly in the past"""
    return not invoice.is_paid and invoice.due_date is not None and invoice.due_date < now


def last_reminded(invoice: Invoice) -> Optional[datetime]:
    if not invoice.reminders:
        return None
    return invoice.reminders[-1].date


def dashboard_summary(invoices: Sequence[Invoice], products: Sequence[Product]) -> DashboardSummary:
    """
    Headline figures for the dashboard.

    - total_sales: every invoice's grand total, paid or not
    - pending_collection: grand totals of unpaid invoices
    - low_stock: products at or below their threshold
    """
    return DashboardSummary(
        total_sales=sum((inv.grand_total for inv in invoices), 0),
        pending_collection=total_outstanding(invoices),
        low_stock=low_stock_products(products),
    )
