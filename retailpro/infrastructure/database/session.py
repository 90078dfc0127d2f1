"""Database engine and session factory"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from retailpro.config import settings
from retailpro.infrastructure.database.models import Base


def build_engine(database_url: str) -> Engine:
    """Create an engine; pooling options apply to server databases only"""
    if database_url.startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False})

    return create_engine(
        database_url,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=5,
        max_overflow=5,
        pool_recycle=3600,
    )


def init_db(bind: Engine) -> None:
    """Create the collection table if it does not exist yet"""
    Base.metadata.create_all(bind=bind)


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
