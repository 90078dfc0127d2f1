"""Pydantic schemas for API request/response validation"""

from dataclasses import asdict
from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional

from retailpro.domain.inventory import is_low_stock
from retailpro.domain.reports import is_overdue, last_reminded
from retailpro.domain.models import (
    AD_HOC_PRODUCT_ID,
    Invoice,
    Product,
    ReminderMethod,
    StockAction,
    TransactionDirection,
    TransactionType,
)


class ProductSchema(BaseModel):
    """Catalog product with its low-stock flag"""

    id: str
    name: str
    hsn: str
    stock: int
    rate: float
    low_stock_threshold: int
    category: str
    is_low_stock: bool = False


class ProductCreateRequest(BaseModel):
    """Request body for POST /v1/products"""

    name: str = Field(..., min_length=1)
    hsn: str = ""
    rate: float = Field(..., ge=0)
    stock: int = Field(0, ge=0)
    low_stock_threshold: int = Field(0, ge=0)
    category: str = "General"


class ThresholdUpdateRequest(BaseModel):
    """Request body for PATCH /v1/products/{product_id}/threshold"""

    low_stock_threshold: int = Field(..., ge=0)


class StockAdjustRequest(BaseModel):
    """Request body for POST /v1/stock/adjust"""

    product_name: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0)
    action: StockAction


class StockAdjustResponse(BaseModel):
    action: StockAction
    product_name: str
    quantity: int
    matched_product_ids: List[str]
    message: str


class StockParseRequest(BaseModel):
    """Request body for POST /v1/stock/parse"""

    transcript: str = Field(..., min_length=1)


class StockCommandSchema(BaseModel):
    """Parsed command awaiting user confirmation"""

    action: StockAction
    product_name: str
    quantity: int
    transcript: str


class StockParseResponse(BaseModel):
    command: Optional[StockCommandSchema] = None


class SuggestionSchema(BaseModel):
    name: str
    hsn: str
    category: Optional[str] = None
    estimated_rate: Optional[float] = None


class SuggestionsResponse(BaseModel):
    query: str
    suggestions: List[SuggestionSchema]


class InvoiceItemRequest(BaseModel):
    """
    Single line of a new invoice.

    A line starts from a catalog product (product_id), from an assistant
    suggestion, or from scratch (name and rate required). Any field given
    here overrides the starting values; taxes default to the configured
    GST split.
    """

    product_id: str = AD_HOC_PRODUCT_ID
    suggestion: Optional[SuggestionSchema] = None
    name: Optional[str] = Field(None, min_length=1)
    hsn: Optional[str] = None
    quantity: int = 1
    rate: Optional[float] = None
    discount: float = 0
    sgst: Optional[float] = None
    cgst: Optional[float] = None


class InvoiceCreateRequest(BaseModel):
    """Request body for POST /v1/invoices"""

    customer_name: str = Field(..., min_length=1, description="Customer name")
    customer_phone: str = ""
    items: List[InvoiceItemRequest] = Field(..., min_length=1)
    is_paid: bool = True
    due_date: Optional[datetime] = None
    is_quotation: bool = False


class InvoiceItemSchema(BaseModel):
    product_id: str
    name: str
    hsn: str
    quantity: int
    rate: float
    discount: float
    sgst: float
    cgst: float
    total: float


class ReminderSchema(BaseModel):
    id: str
    date: datetime
    message: str
    method: ReminderMethod


class InvoiceSchema(BaseModel):
    id: str
    customer_name: str
    customer_phone: str
    date: datetime
    items: List[InvoiceItemSchema]
    sub_total: float
    tax_total: float
    grand_total: float
    is_paid: bool
    due_date: Optional[datetime] = None
    reminders: List[ReminderSchema] = []
    is_overdue: bool = False
    last_reminded: Optional[datetime] = None


class PendingInvoicesResponse(BaseModel):
    """Response for GET /v1/invoices/pending"""

    total_outstanding: float
    invoices: List[InvoiceSchema]


class ReminderRequest(BaseModel):
    """Request body for POST /v1/invoices/{invoice_id}/reminders"""

    method: ReminderMethod
    message: Optional[str] = None


class ReminderResponse(BaseModel):
    invoice_id: str
    reminder: ReminderSchema
    delivery_url: Optional[str] = None


class TransactionSchema(BaseModel):
    id: str
    date: datetime
    type: TransactionType
    direction: TransactionDirection
    amount: float
    description: str
    reference_id: Optional[str] = None


class DashboardResponse(BaseModel):
    """Response for GET /v1/dashboard"""

    total_sales: float
    pending_collection: float
    low_stock_count: int
    low_stock: List[ProductSchema]


def product_schema(product: Product) -> ProductSchema:
    return ProductSchema(**asdict(product), is_low_stock=is_low_stock(product))


def invoice_schema(invoice: Invoice, now: datetime) -> InvoiceSchema:
    return InvoiceSchema(
        **asdict(invoice),
        is_overdue=is_overdue(invoice, now),
        last_reminded=last_reminded(invoice),
    )
