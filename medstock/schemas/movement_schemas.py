# medstock/schemas/movement_schemas.py

from datetime import datetime
from typing import Optional

from pydantic import Field

from medstock.constants.movement_type import MovementType
from medstock.schemas.base import MAX_DB_INT, CamelModel


class MovementCreate(CamelModel):
    product_id: int = Field(gt=0, le=MAX_DB_INT, strict=True)
    type: MovementType
    quantity: int = Field(gt=0, le=MAX_DB_INT, strict=True)


class MovementOut(CamelModel):
    id: int
    product_id: int
    type: MovementType
    quantity: int
    date: datetime
    product_name: Optional[str] = None
