"""Default records written on first start"""

from datetime import datetime
from typing import List

from retailpro.domain.models import Invoice, Product
from retailpro.utils.date_utils import add_days


def default_products() -> List[Product]:
    return [
        Product(id="1", name="Britannia Biscuits", hsn="1905", stock=15, rate=20, low_stock_threshold=20, category="FMCG"),
        Product(id="2", name="Amul Milk 500ml", hsn="0401", stock=120, rate=27, low_stock_threshold=30, category="Dairy"),
        Product(id="3", name="Tata Salt 1kg", hsn="2501", stock=8, rate=25, low_stock_threshold=15, category="Groceries"),
    ]


def default_invoices(now: datetime) -> List[Invoice]:
    """One pending invoice, already a day overdue, so the receivables view is not empty"""
    return [
        Invoice(
            id="INV-1001",
            customer_name="Rahul Sharma",
            customer_phone="9876543210",
            date=now,
            due_date=add_days(now, -1),
            items=[],
            sub_total=500,
            tax_total=90,
            grand_total=590,
            is_paid=False,
            reminders=[],
        )
    ]
