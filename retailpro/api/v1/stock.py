"""/v1/stock and /v1/suggestions - stock adjustments and assistant look-ups"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from retailpro.api.v1.schemas import (
    StockAdjustRequest,
    StockAdjustResponse,
    StockCommandSchema,
    StockParseRequest,
    StockParseResponse,
    SuggestionSchema,
    SuggestionsResponse,
)
from retailpro.api.dependencies import get_assistant, get_request_id, get_store
from retailpro.config import settings
from retailpro.domain.assistant import ProductAssistant, actionable_stock_action
from retailpro.domain.exceptions import AmbiguousProductMatchError, StorageError
from retailpro.services.store import ShopStore

router = APIRouter()


@router.post("/stock/adjust", response_model=StockAdjustResponse)
def adjust_stock(
    request_body: StockAdjustRequest,
    request: Request,
    store: ShopStore = Depends(get_store),
):
    """
    Add or reduce stock for every product whose name matches.

    A name that matches nothing still succeeds, with an empty matched list.
    """
    request_id = get_request_id(request)

    try:
        adjustment = store.adjust_stock(request_body.product_name, request_body.quantity, request_body.action)
    except AmbiguousProductMatchError as e:
        logging.warning(f"Ambiguous product name: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail=str(e))
    except StorageError as e:
        logging.error(f"Storage error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Storage unavailable")

    return StockAdjustResponse(
        action=adjustment.action,
        product_name=adjustment.product_name,
        quantity=adjustment.quantity,
        matched_product_ids=adjustment.matched_product_ids,
        message=adjustment.message,
    )


@router.post("/stock/parse", response_model=StockParseResponse)
async def parse_stock_command(
    request_body: StockParseRequest,
    assistant: ProductAssistant = Depends(get_assistant),
):
    """
    Turn a transcript into a stock command for the user to confirm.

    Nothing is changed here; the confirmed command goes to /v1/stock/adjust.
    """
    command = await assistant.parse_command(request_body.transcript)
    action = actionable_stock_action(command)
    if action is None:
        return StockParseResponse(command=None)

    return StockParseResponse(
        command=StockCommandSchema(
            action=action,
            product_name=command.product_name,
            quantity=command.quantity,
            transcript=request_body.transcript,
        )
    )


@router.get("/suggestions", response_model=SuggestionsResponse)
async def get_suggestions(
    q: str = Query(..., description="Partial product name or HSN"),
    assistant: ProductAssistant = Depends(get_assistant),
):
    """Assistant product suggestions; short queries return nothing without a call"""
    if len(q) < settings.min_suggestion_query_length:
        return SuggestionsResponse(query=q, suggestions=[])

    suggestions = await assistant.suggest(q)
    return SuggestionsResponse(
        query=q,
        suggestions=[
            SuggestionSchema(name=s.name, hsn=s.hsn, category=s.category, estimated_rate=s.estimated_rate)
            for s in suggestions
        ],
    )
