"""/v1/invoices - billing, quotations, payments and reminders"""

import logging
from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request

from retailpro.api.v1.schemas import (
    InvoiceCreateRequest,
    InvoiceItemRequest,
    InvoiceSchema,
    PendingInvoicesResponse,
    ReminderRequest,
    ReminderResponse,
    ReminderSchema,
    invoice_schema,
)
from retailpro.api.dependencies import get_messaging_client, get_request_id, get_store
from retailpro.config import settings
from retailpro.domain.billing import build_item, create_invoice, update_item
from retailpro.domain.exceptions import StorageError
from retailpro.domain.models import InvoiceItem, ProductSuggestion, ReminderMethod
from retailpro.domain.reports import total_outstanding
from retailpro.infrastructure.clients.messaging import WhatsAppClient
from retailpro.services.store import ShopStore
from retailpro.utils.date_utils import ensure_utc

router = APIRouter()


def build_line(item: InvoiceItemRequest, store: ShopStore, is_quotation: bool) -> Optional[InvoiceItem]:
    """
    Turn a requested line into a priced invoice item.

    Catalog products and suggestions supply the starting name, HSN and rate;
    request fields override them. Returns None for an ad-hoc line without a
    name or rate.
    """
    sgst = settings.default_sgst if item.sgst is None else item.sgst
    cgst = settings.default_cgst if item.cgst is None else item.cgst

    product = store.get_product(item.product_id)
    if product is not None:
        source = product
    elif item.suggestion is not None:
        source = ProductSuggestion(**item.suggestion.model_dump())
    else:
        source = None

    if source is not None:
        line = build_item(source, sgst=sgst, cgst=cgst, is_quotation=is_quotation)
    elif item.name and item.rate is not None:
        line = InvoiceItem(
            product_id=item.product_id,
            name=item.name,
            hsn=item.hsn or "",
            quantity=1,
            rate=item.rate,
            discount=0,
            sgst=sgst,
            cgst=cgst,
        )
    else:
        return None

    changes = {"quantity": item.quantity, "discount": item.discount}
    if item.name:
        changes["name"] = item.name
    if item.hsn is not None:
        changes["hsn"] = item.hsn
    if item.rate is not None:
        changes["rate"] = item.rate
    if item.sgst is not None:
        changes["sgst"] = item.sgst
    if item.cgst is not None:
        changes["cgst"] = item.cgst
    return update_item(line, **changes)


@router.post("/invoices", response_model=InvoiceSchema, status_code=201)
def submit_invoice(
    request_body: InvoiceCreateRequest,
    request: Request,
    store: ShopStore = Depends(get_store),
):
    """
    Create an invoice (or quotation) and commit it.

    Flow:
    1. Compute every line total and the invoice totals
    2. Default the due date for unpaid invoices
    3. Decrement stock for catalog items
    4. Record an income transaction if paid
    """
    request_id = get_request_id(request)

    items = []
    for item in request_body.items:
        line = build_line(item, store, request_body.is_quotation)
        if line is None:
            raise HTTPException(status_code=422, detail="Each ad-hoc item needs a name and a rate")
        items.append(line)

    draft = create_invoice(
        customer_name=request_body.customer_name,
        customer_phone=request_body.customer_phone,
        items=items,
        is_paid=request_body.is_paid,
        due_date=ensure_utc(request_body.due_date) if request_body.due_date else None,
        is_quotation=request_body.is_quotation,
        created_at=store.now(),
    )

    try:
        invoice = store.commit_invoice(draft)
    except StorageError as e:
        logging.error(f"Storage error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Storage unavailable")

    if invoice is None:
        raise HTTPException(status_code=422, detail="Customer name and at least one item are required")

    return invoice_schema(invoice, store.now())


@router.get("/invoices", response_model=List[InvoiceSchema])
def list_invoices(store: ShopStore = Depends(get_store)):
    """All invoices, most recent first"""
    now = store.now()
    return [invoice_schema(inv, now) for inv in store.invoices]


@router.get("/invoices/pending", response_model=PendingInvoicesResponse)
def list_pending_invoices(store: ShopStore = Depends(get_store)):
    """Unpaid invoices with the total outstanding amount"""
    now = store.now()
    pending = store.pending_invoices()
    return PendingInvoicesResponse(
        total_outstanding=total_outstanding(pending),
        invoices=[invoice_schema(inv, now) for inv in pending],
    )


@router.post("/invoices/{invoice_id}/pay", response_model=InvoiceSchema)
def mark_invoice_paid(
    invoice_id: str,
    request: Request,
    store: ShopStore = Depends(get_store),
):
    try:
        invoice = store.mark_paid(invoice_id)
    except StorageError as e:
        logging.error(f"Storage error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=503, detail="Storage unavailable")

    if invoice is None:
        raise HTTPException(status_code=404, detail="Invoice not found")

    return invoice_schema(invoice, store.now())


@router.post("/invoices/{invoice_id}/reminders", response_model=ReminderResponse, status_code=201)
def send_reminder(
    invoice_id: str,
    request_body: ReminderRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    store: ShopStore = Depends(get_store),
    messaging: WhatsAppClient = Depends(get_messaging_client),
):
    """
    Record a payment reminder.

    WHATSAPP reminders are handed to the messaging channel after the
    response is sent; IN_APP reminders are only recorded.
    """
    try:
        outcome = store.send_reminder(invoice_id, request_body.method, request_body.message)
    except StorageError as e:
        logging.error(f"Storage error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=503, detail="Storage unavailable")

    if outcome is None:
        raise HTTPException(status_code=404, detail="Invoice not found")

    if outcome.reminder.method == ReminderMethod.WHATSAPP:
        background_tasks.add_task(
            messaging.send_message,
            outcome.invoice.customer_phone,
            outcome.reminder.message,
        )

    return ReminderResponse(
        invoice_id=outcome.invoice.id,
        reminder=ReminderSchema(
            id=outcome.reminder.id,
            date=outcome.reminder.date,
            message=outcome.reminder.message,
            method=outcome.reminder.method,
        ),
        delivery_url=outcome.delivery_url,
    )
