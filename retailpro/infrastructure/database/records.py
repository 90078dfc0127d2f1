"""Persisted record shapes (camelCase JSON) and conversion to domain models"""

from dataclasses import asdict
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, TypeAdapter
from pydantic.alias_generators import to_camel

from retailpro.domain.models import (
    Invoice,
    InvoiceItem,
    Product,
    ReminderHistory,
    ReminderMethod,
    Transaction,
    TransactionDirection,
    TransactionType,
)
from retailpro.utils.date_utils import ensure_utc


class Record(BaseModel):
    """Base for stored records: camelCase on disk, snake_case in Python"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ProductRecord(Record):
    id: str
    name: str
    hsn: str
    stock: int
    rate: float
    low_stock_threshold: int
    category: str = "General"

    def to_domain(self) -> Product:
        return Product(**self.model_dump())


class InvoiceItemRecord(Record):
    product_id: str
    name: str
    hsn: str
    quantity: int
    rate: float
    discount: float
    sgst: float
    cgst: float
    total: float

    def to_domain(self) -> InvoiceItem:
        return InvoiceItem(**self.model_dump())


class ReminderRecord(Record):
    id: str
    date: datetime
    message: str
    method: ReminderMethod

    def to_domain(self) -> ReminderHistory:
        return ReminderHistory(id=self.id, date=ensure_utc(self.date), message=self.message, method=self.method)


class InvoiceRecord(Record):
    id: str
    customer_name: str
    customer_phone: str = ""
    date: datetime
    items: List[InvoiceItemRecord]
    sub_total: float
    tax_total: float
    grand_total: float
    is_paid: bool
    due_date: Optional[datetime] = None
    reminders: Optional[List[ReminderRecord]] = None

    def to_domain(self) -> Invoice:
        return Invoice(
            id=self.id,
            customer_name=self.customer_name,
            customer_phone=self.customer_phone,
            date=ensure_utc(self.date),
            items=[item.to_domain() for item in self.items],
            sub_total=self.sub_total,
            tax_total=self.tax_total,
            grand_total=self.grand_total,
            is_paid=self.is_paid,
            due_date=ensure_utc(self.due_date) if self.due_date else None,
            reminders=[r.to_domain() for r in self.reminders or []],
        )


class TransactionRecord(Record):
    id: str
    date: datetime
    type: TransactionType
    direction: TransactionDirection
    amount: float
    description: str
    reference_id: Optional[str] = None

    def to_domain(self) -> Transaction:
        return Transaction(
            id=self.id,
            date=ensure_utc(self.date),
            type=self.type,
            direction=self.direction,
            amount=self.amount,
            description=self.description,
            reference_id=self.reference_id,
        )


products_adapter = TypeAdapter(List[ProductRecord])
invoices_adapter = TypeAdapter(List[InvoiceRecord])
transactions_adapter = TypeAdapter(List[TransactionRecord])


def dump_records(adapter: TypeAdapter, entities: list) -> str:
    """Serialize domain dataclasses to a camelCase JSON array"""
    records = adapter.validate_python([asdict(entity) for entity in entities])
    return adapter.dump_json(records, by_alias=True, exclude_none=True).decode("utf-8")


def load_records(adapter: TypeAdapter, raw: str) -> list:
    """Parse a stored JSON array back into domain dataclasses"""
    return [record.to_domain() for record in adapter.validate_json(raw)]
