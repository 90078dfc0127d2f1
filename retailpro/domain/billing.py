"""Billing engine - line-item taxation and invoice totals"""

from dataclasses import replace
from datetime import datetime
from typing import List, Optional, Sequence, Union

from retailpro.domain.models import (
    AD_HOC_PRODUCT_ID,
    Invoice,
    InvoiceItem,
    InvoiceTotals,
    Product,
    ProductSuggestion,
)
from retailpro.utils.date_utils import utc_now
from retailpro.utils.ids import generate_id


def calculate_item_total(
    quantity: float,
    rate: float,
    discount: float,
    sgst: float,
    cgst: float,
) -> float:
    """
    Compute a line total: discount first, then both GST components on the discounted amount.

    No rounding and no validation; negative inputs or a discount above 100
    simply produce negative totals. Presentation formats to 2 decimals.

    Example:
        2 x 20.00, no discount, 9% SGST + 9% CGST
        base 40.00 -> discounted 40.00 -> tax 7.20 -> total 47.20
    """
    base = quantity * rate
    discounted = base * (1 - discount / 100)
    tax = discounted * ((sgst + cgst) / 100)
    return discounted + tax


def with_total(item: InvoiceItem) -> InvoiceItem:
    """Return a copy of the item with its total recomputed"""
    return replace(
        item,
        total=calculate_item_total(item.quantity, item.rate, item.discount, item.sgst, item.cgst),
    )


def build_item(
    source: Union[Product, ProductSuggestion],
    sgst: float,
    cgst: float,
    is_quotation: bool = False,
) -> InvoiceItem:
    """
    Start a new line (quantity 1, no discount) from a catalog product or an assistant suggestion.

    Suggestions are not in the catalog, so they carry the ad-hoc product id and
    their estimated rate. sgst/cgst are the shop's default split; quotations
    carry no tax.
    """
    if isinstance(source, Product):
        product_id = source.id
        rate = source.rate or 0
    else:
        product_id = AD_HOC_PRODUCT_ID
        rate = source.estimated_rate or 0

    return with_total(
        InvoiceItem(
            product_id=product_id,
            name=source.name,
            hsn=source.hsn,
            quantity=1,
            rate=rate,
            discount=0,
            sgst=0 if is_quotation else sgst,
            cgst=0 if is_quotation else cgst,
        )
    )


def update_item(item: InvoiceItem, **changes) -> InvoiceItem:
    """Edit quantity/rate/discount/taxes on a line and recompute its total"""
    return with_total(replace(item, **changes))


def summarize_items(items: Sequence[InvoiceItem]) -> InvoiceTotals:
    """
    Aggregate line items into invoice totals.

    sub_total is the pre-discount, pre-tax amount. tax_total is the residual
    grand_total - sub_total, so it nets out every line discount rather than
    summing the tax components.
    """
    sub_total = sum((item.quantity * item.rate for item in items), 0)
    grand_total = sum((item.total for item in items), 0)
    tax_total = grand_total - sub_total

    return InvoiceTotals(sub_total=sub_total, tax_total=tax_total, grand_total=grand_total)


def create_invoice(
    customer_name: str,
    customer_phone: str,
    items: List[InvoiceItem],
    is_paid: bool = True,
    due_date: Optional[datetime] = None,
    is_quotation: bool = False,
    created_at: Optional[datetime] = None,
) -> Invoice:
    """
    Build an invoice draft ready for commit.

    Quotations are never paid and carry no tax; their lines are re-taxed at 0%.
    """
    if is_quotation:
        items = [update_item(item, sgst=0, cgst=0) for item in items]
        is_paid = False
    else:
        items = [with_total(item) for item in items]

    totals = summarize_items(items)

    return Invoice(
        id=generate_id("INV"),
        customer_name=customer_name,
        customer_phone=customer_phone,
        date=created_at or utc_now(),
        items=items,
        sub_total=totals.sub_total,
        tax_total=totals.tax_total,
        grand_total=totals.grand_total,
        is_paid=is_paid,
        due_date=due_date,
        reminders=[],
    )
