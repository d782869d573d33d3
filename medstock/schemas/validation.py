# medstock/schemas/validation.py
"""
Explicit validators for each request shape.

Each ``validate_*`` function takes raw decoded JSON and returns a
``ValidationResult`` instead of raising, so callers outside the HTTP layer
(seeding, scripts) get the same rules and the same first-error message the
API reports.
"""

from dataclasses import dataclass, field
from typing import Any, Generic, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from medstock.schemas.movement_schemas import MovementCreate
from medstock.schemas.product_schemas import ProductCreate, ProductUpdate

T = TypeVar("T", bound=BaseModel)

_VALUE_ERROR_PREFIX = "Value error, "


@dataclass
class ValidationResult(Generic[T]):
    ok: bool
    value: Optional[T] = None
    message: Optional[str] = None
    errors: list = field(default_factory=list)


def first_error_message(errors: Sequence[dict]) -> str:
    if not errors:
        return "Invalid request data"

    first = errors[0]
    msg = first.get("msg", "Invalid value")
    if msg.startswith(_VALUE_ERROR_PREFIX):
        # Messages raised by our own validators are already user facing
        return msg[len(_VALUE_ERROR_PREFIX):]

    loc = [str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path")]
    if loc:
        return f"{'.'.join(loc)}: {msg}"
    return msg


def _validate(model: Type[T], data: Any) -> ValidationResult[T]:
    if not isinstance(data, dict):
        return ValidationResult(ok=False, message="Request body must be a JSON object")
    try:
        return ValidationResult(ok=True, value=model.model_validate(data))
    except ValidationError as exc:
        errors = exc.errors(include_url=False, include_context=False)
        return ValidationResult(
            ok=False,
            message=first_error_message(errors),
            errors=errors,
        )


def validate_product_create(data: Any) -> ValidationResult[ProductCreate]:
    return _validate(ProductCreate, data)


def validate_product_update(data: Any) -> ValidationResult[ProductUpdate]:
    return _validate(ProductUpdate, data)


def validate_movement_create(data: Any) -> ValidationResult[MovementCreate]:
    return _validate(MovementCreate, data)
