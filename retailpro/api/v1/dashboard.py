"""GET /v1/dashboard and /v1/transactions - headline figures and the ledger"""

from typing import List
from fastapi import APIRouter, Depends

from retailpro.api.v1.schemas import DashboardResponse, TransactionSchema, product_schema
from retailpro.api.dependencies import get_store
from retailpro.services.store import ShopStore

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(store: ShopStore = Depends(get_store)):
    summary = store.dashboard()
    return DashboardResponse(
        total_sales=summary.total_sales,
        pending_collection=summary.pending_collection,
        low_stock_count=summary.low_stock_count,
        low_stock=[product_schema(p) for p in summary.low_stock],
    )


@router.get("/transactions", response_model=List[TransactionSchema])
def list_transactions(store: ShopStore = Depends(get_store)):
    """Ledger entries, most recent first"""
    return [
        TransactionSchema(
            id=tx.id,
            date=tx.date,
            type=tx.type,
            direction=tx.direction,
            amount=tx.amount,
            description=tx.description,
            reference_id=tx.reference_id,
        )
        for tx in store.transactions
    ]
