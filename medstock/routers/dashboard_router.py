from typing import List

from fastapi import APIRouter, Depends

from medstock.constants.categories import ProductCategory
from medstock.dependencies import get_store
from medstock.schemas.dashboard_schemas import DashboardOut
from medstock.services.dashboard_service import build_dashboard
from medstock.services.ledger_store import LedgerStore

router = APIRouter(prefix="/api", tags=["Dashboard"])


@router.get("/dashboard", response_model=DashboardOut)
async def dashboard_api(store: LedgerStore = Depends(get_store)):
    return await build_dashboard(store)


@router.get("/categories", response_model=List[str])
async def categories_api():
    return [c.value for c in ProductCategory]
