"""Shop store - owns the product, invoice and transaction collections for a session"""

import logging
from threading import RLock
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from retailpro.config import Settings, settings as default_settings
from retailpro.domain.assistant import actionable_stock_action
from retailpro.domain.exceptions import StorageError
from retailpro.domain.inventory import apply_stock_adjustment, decrement_for_items
from retailpro.domain.models import (
    Invoice,
    Product,
    ReminderHistory,
    ReminderMethod,
    StockAction,
    StockAdjustment,
    StockCommand,
    Transaction,
    TransactionDirection,
    TransactionType,
)
from retailpro.domain.reminders import build_reminder, whatsapp_link
from retailpro.domain.reports import DashboardSummary, dashboard_summary, pending_invoices
from retailpro.infrastructure.database.repositories import CollectionRepository
from retailpro.infrastructure.database.seed import default_invoices, default_products
from retailpro.infrastructure.observability.logging import (
    log_invoice_committed,
    log_reminder_sent,
    log_stock_adjusted,
)
from retailpro.infrastructure.observability.metrics import (
    record_invoice,
    record_stock_adjustment,
    reminder_counter,
)
from retailpro.utils.date_utils import add_days, utc_now
from retailpro.utils.ids import generate_id

logger = logging.getLogger(__name__)


@dataclass
class ReminderOutcome:
    invoice: Invoice
    reminder: ReminderHistory
    delivery_url: Optional[str] = None  # set for WHATSAPP


class ShopStore:
    """
    In-memory collections mirrored to the key-value store after every mutation.

    Each workflow stages its new collections, writes every touched collection
    in one database transaction, and only then swaps them in. A failed write
    raises StorageError and leaves the in-memory state as it was.

    Workflows hold the store lock from the read of a collection through the
    swap, so concurrent requests are applied one after another.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        clock: Callable[[], datetime] = utc_now,
        config: Settings | None = None,
    ):
        self._session_factory = session_factory
        self._clock = clock
        self._config = config or default_settings
        self._products: List[Product] = []
        self._invoices: List[Invoice] = []
        self._transactions: List[Transaction] = []
        self._lock = RLock()

    @classmethod
    def open(
        cls,
        session_factory: sessionmaker,
        clock: Callable[[], datetime] = utc_now,
        config: Settings | None = None,
    ) -> "ShopStore":
        """Create a store and load (or seed) its collections"""
        store = cls(session_factory, clock=clock, config=config)
        store.load()
        return store

    # Collections (copies; mutate only through the workflows)

    @property
    def products(self) -> List[Product]:
        return list(self._products)

    @property
    def invoices(self) -> List[Invoice]:
        return list(self._invoices)

    @property
    def transactions(self) -> List[Transaction]:
        return list(self._transactions)

    def now(self) -> datetime:
        return self._clock()

    def get_invoice(self, invoice_id: str) -> Optional[Invoice]:
        return next((inv for inv in self._invoices if inv.id == invoice_id), None)

    def get_product(self, product_id: str) -> Optional[Product]:
        return next((p for p in self._products if p.id == product_id), None)

    # Persistence

    def load(self) -> None:
        """Load collections; products and invoices are seeded (and saved) when absent"""
        try:
            with self._session_factory() as db, db.begin():
                repo = CollectionRepository(db)
                products = repo.load_products()
                invoices = repo.load_invoices()
                transactions = repo.load_transactions()

                if products is None:
                    products = default_products()
                    repo.save_products(products)
                if invoices is None:
                    invoices = default_invoices(self._clock())
                    repo.save_invoices(invoices)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load collections: {e}") from e

        self._products = products
        self._invoices = invoices
        self._transactions = transactions or []

    def _persist(
        self,
        products: Optional[List[Product]] = None,
        invoices: Optional[List[Invoice]] = None,
        transactions: Optional[List[Transaction]] = None,
    ) -> None:
        """Write every given collection in a single transaction"""
        try:
            with self._session_factory() as db, db.begin():
                self._write(db, products, invoices, transactions)
        except SQLAlchemyError as e:
            logger.error(f"Persistence failure: {e}")
            raise StorageError(f"Failed to save collections: {e}") from e

        if products is not None:
            self._products = products
        if invoices is not None:
            self._invoices = invoices
        if transactions is not None:
            self._transactions = transactions

    @staticmethod
    def _write(
        db: Session,
        products: Optional[List[Product]],
        invoices: Optional[List[Invoice]],
        transactions: Optional[List[Transaction]],
    ) -> None:
        repo = CollectionRepository(db)
        if invoices is not None:
            repo.save_invoices(invoices)
        if products is not None:
            repo.save_products(products)
        if transactions is not None:
            repo.save_transactions(transactions)

    # Workflows

    def commit_invoice(self, invoice: Invoice) -> Optional[Invoice]:
        """
        Record a new invoice and reconcile stock and ledger.

        Steps:
        1. Unpaid without a due date: due date = invoice date + default_due_days
        2. Prepend the invoice (most recent first)
        3. Decrement stock for items whose productId matches a product (no floor)
        4. Paid: prepend a CASH/INCOME transaction for the grand total
        5. Persist invoices, products and, when paid, transactions

        A missing customer name or an empty item list is a caller error; the
        store ignores the call and returns None.
        """
        if not invoice.customer_name.strip() or not invoice.items:
            logger.warning("Invoice commit skipped: customer name and items are required")
            return None

        if not invoice.is_paid and invoice.due_date is None:
            invoice = replace(invoice, due_date=add_days(invoice.date, self._config.default_due_days))

        with self._lock:
            invoices = [invoice] + self._invoices
            products = decrement_for_items(self._products, invoice.items)

            transactions = None
            transaction_id = None
            if invoice.is_paid:
                transaction = Transaction(
                    id=generate_id("TX"),
                    date=self._clock(),
                    type=TransactionType.CASH,
                    direction=TransactionDirection.INCOME,
                    amount=invoice.grand_total,
                    description=f"Invoice {invoice.id}",
                    reference_id=invoice.id,
                )
                transactions = [transaction] + self._transactions
                transaction_id = transaction.id

            self._persist(products=products, invoices=invoices, transactions=transactions)

        record_invoice(invoice.is_paid, invoice.grand_total)
        log_invoice_committed(invoice.id, invoice.customer_name, invoice.grand_total, invoice.is_paid, transaction_id)
        return invoice

    def adjust_stock(self, product_name: str, quantity: int, action: StockAction | str) -> StockAdjustment:
        """
        Add or remove stock for every product whose name matches.

        No match is a silent success with an empty matched list. In strict
        matching mode an ambiguous name raises AmbiguousProductMatchError.
        """
        action = StockAction(action)
        with self._lock:
            products, matched_ids = apply_stock_adjustment(
                self._products,
                product_name,
                quantity,
                action,
                strict=self._config.stock_match_mode == "strict",
            )
            self._persist(products=products)

        record_stock_adjustment(action.value, len(matched_ids))
        log_stock_adjusted(product_name, quantity, action.value, matched_ids)

        verb = "added" if action == StockAction.ADD_STOCK else "reduced"
        return StockAdjustment(
            action=action,
            product_name=product_name,
            quantity=quantity,
            matched_product_ids=matched_ids,
            message=f"Successfully {verb} {quantity} units for {product_name}",
        )

    def apply_stock_command(self, command: Optional[StockCommand]) -> Optional[StockAdjustment]:
        """Run a parsed command; anything but ADD_STOCK/REDUCE_STOCK with a product and quantity is ignored"""
        action = actionable_stock_action(command)
        if action is None:
            return None
        return self.adjust_stock(command.product_name, command.quantity, action)

    def send_reminder(
        self,
        invoice_id: str,
        method: ReminderMethod | str,
        message: Optional[str] = None,
    ) -> Optional[ReminderOutcome]:
        """
        Append a reminder to an invoice and persist invoices.

        Unknown invoice ids are a silent no-op. For WHATSAPP the outcome carries
        the click-to-chat link; handing the message to the channel is the
        caller's job. Never changes the paid flag.
        """
        method = ReminderMethod(method)
        with self._lock:
            invoice = self.get_invoice(invoice_id)
            if invoice is None:
                return None

            reminder = build_reminder(invoice, method, self._clock(), message, self._config.currency_symbol)
            updated = replace(invoice, reminders=[*invoice.reminders, reminder])
            self._persist(invoices=[updated if inv.id == invoice_id else inv for inv in self._invoices])

        reminder_counter.labels(method=method.value).inc()
        log_reminder_sent(invoice_id, reminder.id, method.value)

        delivery_url = None
        if method == ReminderMethod.WHATSAPP:
            delivery_url = whatsapp_link(invoice.customer_phone, reminder.message, self._config.whatsapp_base_url)
        return ReminderOutcome(invoice=updated, reminder=reminder, delivery_url=delivery_url)

    def mark_paid(self, invoice_id: str) -> Optional[Invoice]:
        """Settle an invoice. No ledger transaction is written retroactively."""
        with self._lock:
            invoice = self.get_invoice(invoice_id)
            if invoice is None:
                return None

            updated = replace(invoice, is_paid=True)
            self._persist(invoices=[updated if inv.id == invoice_id else inv for inv in self._invoices])
        return updated

    def add_product(
        self,
        name: str,
        hsn: str,
        rate: float,
        stock: int = 0,
        low_stock_threshold: int = 0,
        category: str = "General",
    ) -> Product:
        product = Product(
            id=generate_id("PRD"),
            name=name,
            hsn=hsn,
            stock=stock,
            rate=rate,
            low_stock_threshold=low_stock_threshold,
            category=category,
        )
        with self._lock:
            self._persist(products=self._products + [product])
        return product

    def set_low_stock_threshold(self, product_id: str, threshold: int) -> Optional[Product]:
        with self._lock:
            product = self.get_product(product_id)
            if product is None:
                return None

            updated = replace(product, low_stock_threshold=threshold)
            self._persist(products=[updated if p.id == product_id else p for p in self._products])
        return updated

    # Reports

    def pending_invoices(self) -> List[Invoice]:
        return pending_invoices(self._invoices)

    def dashboard(self) -> DashboardSummary:
        return dashboard_summary(self._invoices, self._products)
