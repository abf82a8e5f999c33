# backend/inventory_service/inventory/schemas.py

from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import InvalidField

INSERT = "insert"
UPDATE = "update"


class _StockFields(BaseModel):
    """Integer columns accept integer-like strings but never booleans."""

    @field_validator("price", "quantity", mode="before", check_fields=False)
    @classmethod
    def reject_booleans(cls, value):
        if isinstance(value, bool):
            raise ValueError("Input should be a valid integer, not a boolean")
        return value


class ProductCreate(_StockFields):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, description="Product name, required.")
    price: Optional[int] = Field(None, ge=0)
    quantity: Optional[int] = Field(None, ge=0)
    supplier_name: str = Field(..., description="Supplier name, required.")
    supplier_phone: str = Field(..., description="Supplier phone, required.")


class ProductUpdate(_StockFields):
    """
    Partial update. A field left out is untouched; a field sent as null is
    rejected unless the column is optional (price, quantity).
    """

    model_config = ConfigDict(extra="forbid")

    # Defaults are not validated, so an absent field passes while an
    # explicit null fails the str check.
    name: str = Field(None)
    price: Optional[int] = Field(None, ge=0)
    quantity: Optional[int] = Field(None, ge=0)
    supplier_name: str = Field(None)
    supplier_phone: str = Field(None)


class ProductResponse(BaseModel):
    id: int
    name: str
    price: Optional[int] = None
    quantity: Optional[int] = None
    supplier_name: str
    supplier_phone: str

    model_config = ConfigDict(from_attributes=True)


_SCHEMAS = {INSERT: ProductCreate, UPDATE: ProductUpdate}


def _schema_for(kind: str):
    try:
        return _SCHEMAS[kind]
    except KeyError:
        raise ValueError(f"No validation rules for operation '{kind}'") from None


def _invalid_fields(exc: ValidationError) -> List[InvalidField]:
    problems = []
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else "__root__"
        problems.append(InvalidField(field, error["msg"]))
    return problems


def validate(kind: str, fields: Optional[Mapping[str, Any]]) -> List[InvalidField]:
    """Return every rule broken by ``fields`` for an insert or update; empty when valid."""
    schema = _schema_for(kind)
    try:
        schema.model_validate(dict(fields or {}))
    except ValidationError as e:
        return _invalid_fields(e)
    return []


def clean(kind: str, fields: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Validate ``fields`` and return only the fields that were supplied, with
    integer columns coerced. Raises the first InvalidField found.
    """
    schema = _schema_for(kind)
    try:
        model = schema.model_validate(dict(fields or {}))
    except ValidationError as e:
        raise _invalid_fields(e)[0] from None
    return model.model_dump(exclude_unset=True)
