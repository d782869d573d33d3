# medstock/routers/movement_router.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from medstock.dependencies import get_store
from medstock.schemas.movement_schemas import MovementCreate, MovementOut
from medstock.services.ledger_store import LedgerStore
from medstock.services.movement_service import list_movements, record_movement

router = APIRouter(prefix="/api/movements", tags=["Movements"])


@router.get("", response_model=List[MovementOut])
async def list_movements_api(
    store: LedgerStore = Depends(get_store),
    search: Optional[str] = Query(None, description="Filter by product name"),
):
    return await list_movements(store, search=search)


@router.post("", response_model=MovementOut, status_code=status.HTTP_201_CREATED)
async def record_movement_api(
    payload: MovementCreate,
    store: LedgerStore = Depends(get_store),
):
    return await record_movement(store, payload)
