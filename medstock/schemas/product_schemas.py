# medstock/schemas/product_schemas.py

from datetime import date, datetime
from typing import Any, Optional

from pydantic import ConfigDict, Field, field_validator, model_validator

from medstock.constants.categories import ProductCategory
from medstock.constants.stock_status import StockStatus
from medstock.schemas.base import MAX_DB_INT, CamelModel


def _required_text(value: Optional[str], label: str) -> str:
    if value is None or not value.strip():
        raise ValueError(f"{label} is required")
    return value.strip()


def _optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class ProductCreate(CamelModel):
    name: str
    category: ProductCategory
    quantity: int = Field(default=0, ge=0, le=MAX_DB_INT, strict=True)
    unit: str
    batch: Optional[str] = None
    expiration_date: Optional[date] = None
    supplier: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name(cls, v):
        return _required_text(v, "Name")

    @field_validator("unit")
    @classmethod
    def _unit(cls, v):
        return _required_text(v, "Unit")

    @field_validator("batch", "supplier")
    @classmethod
    def _blank_to_none(cls, v):
        return _optional_text(v)


class ProductUpdate(CamelModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    category: Optional[ProductCategory] = None
    unit: Optional[str] = None
    batch: Optional[str] = None
    expiration_date: Optional[date] = None
    supplier: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _no_direct_quantity(cls, data: Any):
        if isinstance(data, dict) and "quantity" in data:
            raise ValueError("Quantity can only be changed through stock movements")
        return data

    @field_validator("name")
    @classmethod
    def _name(cls, v):
        return _required_text(v, "Name")

    @field_validator("unit")
    @classmethod
    def _unit(cls, v):
        return _required_text(v, "Unit")

    @field_validator("category")
    @classmethod
    def _category(cls, v):
        if v is None:
            raise ValueError("Category is required")
        return v

    @field_validator("batch", "supplier")
    @classmethod
    def _blank_to_none(cls, v):
        return _optional_text(v)


class ProductOut(CamelModel):
    id: int
    name: str
    category: str
    quantity: int
    unit: str
    batch: Optional[str]
    expiration_date: Optional[date]
    supplier: Optional[str]
    status: StockStatus

    created_at: datetime
    updated_at: Optional[datetime]
