"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

# Sentinel productId for items that are not in the catalog (e.g. picked from a suggestion)
AD_HOC_PRODUCT_ID = "new"


class ReminderMethod(str, Enum):
    IN_APP = "IN_APP"
    WHATSAPP = "WHATSAPP"


class TransactionType(str, Enum):
    CASH = "CASH"
    ONLINE = "ONLINE"


class TransactionDirection(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class StockAction(str, Enum):
    ADD_STOCK = "ADD_STOCK"
    REDUCE_STOCK = "REDUCE_STOCK"


@dataclass
class Product:
    """Catalog entry with stock on hand"""

    id: str
    name: str
    hsn: str
    stock: int
    rate: float
    low_stock_threshold: int
    category: str = "General"


@dataclass
class InvoiceItem:
    """Single line within an invoice"""

    product_id: str
    name: str
    hsn: str
    quantity: int
    rate: float
    discount: float  # percent, 0-100
    sgst: float  # percent
    cgst: float  # percent
    total: float = 0.0


@dataclass
class ReminderHistory:
    """Payment reminder sent for an invoice"""

    id: str
    date: datetime
    message: str
    method: ReminderMethod


@dataclass
class Invoice:
    """Invoice or quotation. Totals are written only by the aggregator."""

    id: str
    customer_name: str
    customer_phone: str
    date: datetime
    items: List[InvoiceItem]
    sub_total: float
    tax_total: float
    grand_total: float
    is_paid: bool
    due_date: Optional[datetime] = None
    reminders: List[ReminderHistory] = field(default_factory=list)


@dataclass
class Transaction:
    """Ledger entry created when a paid invoice is committed"""

    id: str
    date: datetime
    type: TransactionType
    direction: TransactionDirection
    amount: float
    description: str
    reference_id: Optional[str] = None


@dataclass
class Dealer:
    """Supplier account. Declared for the stored data shape only."""

    id: str
    name: str
    phone: str
    total_billed: float
    amount_paid: float
    pending_amount: float


@dataclass
class InvoiceTotals:
    """Output of the invoice aggregator"""

    sub_total: float
    tax_total: float
    grand_total: float


@dataclass
class ProductSuggestion:
    """Candidate product returned by the assistant"""

    name: str
    hsn: str
    category: Optional[str] = None
    estimated_rate: Optional[float] = None


@dataclass
class StockCommand:
    """Parsed stock command (typed or transcribed)"""

    action: str
    product_name: Optional[str] = None
    quantity: Optional[int] = None
    rate: Optional[float] = None


@dataclass
class StockAdjustment:
    """Outcome of a stock-adjustment workflow"""

    action: StockAction
    product_name: str
    quantity: int
    matched_product_ids: List[str]
    message: str
