"""/v1/products - catalog listing, new products and low-stock thresholds"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request

from retailpro.api.v1.schemas import (
    ProductCreateRequest,
    ProductSchema,
    ThresholdUpdateRequest,
    product_schema,
)
from retailpro.api.dependencies import get_request_id, get_store
from retailpro.domain.exceptions import StorageError
from retailpro.domain.inventory import low_stock_products
from retailpro.services.store import ShopStore

router = APIRouter()


@router.get("/products", response_model=List[ProductSchema])
def list_products(store: ShopStore = Depends(get_store)):
    return [product_schema(p) for p in store.products]


@router.get("/products/low-stock", response_model=List[ProductSchema])
def list_low_stock(store: ShopStore = Depends(get_store)):
    """Products at or below their low-stock threshold"""
    return [product_schema(p) for p in low_stock_products(store.products)]


@router.post("/products", response_model=ProductSchema, status_code=201)
def create_product(
    request_body: ProductCreateRequest,
    request: Request,
    store: ShopStore = Depends(get_store),
):
    try:
        product = store.add_product(
            name=request_body.name,
            hsn=request_body.hsn,
            rate=request_body.rate,
            stock=request_body.stock,
            low_stock_threshold=request_body.low_stock_threshold,
            category=request_body.category,
        )
    except StorageError as e:
        logging.error(f"Storage error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=503, detail="Storage unavailable")

    return product_schema(product)


@router.patch("/products/{product_id}/threshold", response_model=ProductSchema)
def update_threshold(
    product_id: str,
    request_body: ThresholdUpdateRequest,
    request: Request,
    store: ShopStore = Depends(get_store),
):
    try:
        product = store.set_low_stock_threshold(product_id, request_body.low_stock_threshold)
    except StorageError as e:
        logging.error(f"Storage error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=503, detail="Storage unavailable")

    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")

    return product_schema(product)
