# medstock/routers/__init__.py

from .product_router import router as product_router
from .movement_router import router as movement_router
from .dashboard_router import router as dashboard_router


__all__ = [
    "product_router",
    "movement_router",
    "dashboard_router",
]
