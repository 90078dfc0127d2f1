"""Pytest fixtures for testing"""

import pytest
from unittest.mock import AsyncMock
from datetime import datetime, timezone
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from retailpro.api.main import create_app
from retailpro.api.dependencies import get_assistant, get_messaging_client, get_store
from retailpro.domain.assistant import NullAssistant
from retailpro.domain.billing import create_invoice, with_total
from retailpro.domain.models import Invoice, InvoiceItem, Product
from retailpro.infrastructure.database.models import Base
from retailpro.services.store import ShopStore

FIXED_NOW = datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)


class FixedClock:
    """Deterministic clock for store workflows"""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def engine(tmp_path) -> Generator[Engine, None, None]:
    """Create test database (file-backed SQLite so every session sees the same data)"""
    test_engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}", connect_args={"check_same_thread": False}
    )
    Base.metadata.create_all(bind=test_engine)
    try:
        yield test_engine
    finally:
        Base.metadata.drop_all(bind=test_engine)
        test_engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def store(session_factory: sessionmaker, clock: FixedClock) -> ShopStore:
    """Store opened on an empty database, so it starts from the seed data"""
    return ShopStore.open(session_factory, clock=clock)


@pytest.fixture
def messaging() -> AsyncMock:
    """Stand-in WhatsApp channel that records hand-offs"""
    return AsyncMock()


@pytest.fixture
def client(store: ShopStore, messaging: AsyncMock) -> TestClient:
    """Create FastAPI test client bound to the test store"""
    app = create_app()

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_assistant] = lambda: NullAssistant()
    app.dependency_overrides[get_messaging_client] = lambda: messaging
    return TestClient(app)


@pytest.fixture
def catalog() -> list[Product]:
    """Small catalog, independent of the seed data"""
    return [
        Product(id="p1", name="Digestive Biscuits Pack", hsn="1905", stock=40, rate=30, low_stock_threshold=10),
        Product(id="p2", name="Amul Milk 500ml", hsn="0401", stock=120, rate=27, low_stock_threshold=30),
        Product(id="p3", name="Amul Milk 1L", hsn="0401", stock=5, rate=54, low_stock_threshold=10),
    ]


@pytest.fixture
def make_item():
    """Factory for priced invoice lines"""

    def _make_item(
        product_id: str = "2",
        quantity: int = 2,
        rate: float = 20,
        discount: float = 0,
        sgst: float = 9,
        cgst: float = 9,
        name: str = "Item",
    ) -> InvoiceItem:
        return with_total(
            InvoiceItem(
                product_id=product_id,
                name=name,
                hsn="0000",
                quantity=quantity,
                rate=rate,
                discount=discount,
                sgst=sgst,
                cgst=cgst,
            )
        )

    return _make_item


@pytest.fixture
def make_invoice():
    """Factory for invoice drafts dated at FIXED_NOW"""

    def _make_invoice(items: list[InvoiceItem], is_paid: bool = True, **kwargs) -> Invoice:
        kwargs.setdefault("created_at", FIXED_NOW)
        kwargs.setdefault("customer_name", "Priya Nair")
        kwargs.setdefault("customer_phone", "9800011122")
        return create_invoice(items=items, is_paid=is_paid, **kwargs)

    return _make_invoice
