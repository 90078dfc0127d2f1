"""SQLAlchemy ORM models for the collection key-value store"""

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

PRODUCTS_KEY = "products"
INVOICES_KEY = "invoices"
TRANSACTIONS_KEY = "transactions"


class CollectionEntry(Base):
    """One logical collection, stored whole as a JSON array"""

    __tablename__ = "collection_entry"

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )
