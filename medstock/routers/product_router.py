# medstock/routers/product_router.py

from typing import List

from fastapi import APIRouter, Depends, Path, Response, status

from medstock.dependencies import get_store
from medstock.schemas.base import MAX_DB_INT
from medstock.schemas.movement_schemas import MovementOut
from medstock.schemas.product_schemas import ProductCreate, ProductOut, ProductUpdate
from medstock.services.ledger_store import LedgerStore
from medstock.services.movement_service import list_movements_for_product
from medstock.services.product_service import (
    create_product,
    delete_product,
    get_product,
    list_products,
    update_product,
)

router = APIRouter(prefix="/api/products", tags=["Products"])


@router.get("", response_model=List[ProductOut])
async def list_products_api(store: LedgerStore = Depends(get_store)):
    return await list_products(store)


@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
async def create_product_api(
    payload: ProductCreate,
    store: LedgerStore = Depends(get_store),
):
    return await create_product(store, payload)


@router.get("/{product_id}", response_model=ProductOut)
async def get_product_api(
    product_id: int = Path(..., le=MAX_DB_INT),
    store: LedgerStore = Depends(get_store),
):
    return await get_product(store, product_id)


@router.put("/{product_id}", response_model=ProductOut)
async def update_product_api(
    payload: ProductUpdate,
    product_id: int = Path(..., le=MAX_DB_INT),
    store: LedgerStore = Depends(get_store),
):
    return await update_product(store, product_id, payload)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product_api(
    product_id: int = Path(..., le=MAX_DB_INT),
    store: LedgerStore = Depends(get_store),
):
    await delete_product(store, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{product_id}/movements", response_model=List[MovementOut])
async def list_product_movements_api(
    product_id: int = Path(..., le=MAX_DB_INT),
    store: LedgerStore = Depends(get_store),
):
    return await list_movements_for_product(store, product_id)
