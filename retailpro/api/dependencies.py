"""Dependency injection for FastAPI endpoints"""

from threading import Lock
from fastapi import Request
from retailpro.config import settings
from retailpro.domain.assistant import NullAssistant, ProductAssistant
from retailpro.infrastructure.clients.assistant import HttpAssistantClient
from retailpro.infrastructure.clients.messaging import WhatsAppClient
from retailpro.infrastructure.database.session import SessionLocal, engine, init_db
from retailpro.services.store import ShopStore

_store_lock = Lock()


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_store(request: Request) -> ShopStore:
    """Session-scoped store, opened once on first use"""
    store = getattr(request.app.state, "store", None)
    if store is None:
        with _store_lock:
            store = getattr(request.app.state, "store", None)
            if store is None:
                init_db(engine)
                store = ShopStore.open(SessionLocal)
                request.app.state.store = store
    return store


def get_assistant() -> ProductAssistant:
    """Provide the product assistant (no-op when no service is configured)"""
    if settings.assistant_api_base:
        return HttpAssistantClient()
    return NullAssistant()


def get_messaging_client() -> WhatsAppClient:
    """Provide WhatsApp messaging client instance"""
    return WhatsAppClient()
