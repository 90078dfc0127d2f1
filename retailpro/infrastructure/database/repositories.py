"""Data access layer for the stored collections"""

from typing import List, Optional
from sqlalchemy.orm import Session
from retailpro.infrastructure.database.models import (
    CollectionEntry,
    INVOICES_KEY,
    PRODUCTS_KEY,
    TRANSACTIONS_KEY,
)
from retailpro.infrastructure.database.records import (
    dump_records,
    invoices_adapter,
    load_records,
    products_adapter,
    transactions_adapter,
)
from retailpro.domain.models import Invoice, Product, Transaction


class CollectionRepository:
    """
    Key-value repository: one row per collection, each save overwrites the whole collection.

    The repository never commits; callers own the transaction so several
    collections can be written atomically.
    """

    def __init__(self, db: Session):
        self.db = db

    def load(self, key: str) -> Optional[str]:
        """Raw JSON for a collection, or None when the key was never written"""
        entry = self.db.get(CollectionEntry, key)
        return entry.value if entry else None

    def save(self, key: str, value: str) -> None:
        """Overwrite a collection with a serialized JSON array"""
        entry = self.db.get(CollectionEntry, key)
        if entry is None:
            self.db.add(CollectionEntry(key=key, value=value))
        else:
            entry.value = value
        self.db.flush()

    def load_products(self) -> Optional[List[Product]]:
        raw = self.load(PRODUCTS_KEY)
        return load_records(products_adapter, raw) if raw is not None else None

    def save_products(self, products: List[Product]) -> None:
        self.save(PRODUCTS_KEY, dump_records(products_adapter, products))

    def load_invoices(self) -> Optional[List[Invoice]]:
        raw = self.load(INVOICES_KEY)
        return load_records(invoices_adapter, raw) if raw is not None else None

    def save_invoices(self, invoices: List[Invoice]) -> None:
        self.save(INVOICES_KEY, dump_records(invoices_adapter, invoices))

    def load_transactions(self) -> Optional[List[Transaction]]:
        raw = self.load(TRANSACTIONS_KEY)
        return load_records(transactions_adapter, raw) if raw is not None else None

    def save_transactions(self, transactions: List[Transaction]) -> None:
        self.save(TRANSACTIONS_KEY, dump_records(transactions_adapter, transactions))
