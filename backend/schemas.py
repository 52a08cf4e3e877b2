# backend/schemas.py
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator


class ProductRecord(BaseModel):
    """A product as stored in products.json; unknown keys are passed through."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(min_length=1)
    name: str
    description: str = ""
    price: int = Field(ge=0)
    category: Optional[str] = None
    category_id: Optional[str] = Field(default=None, alias="categoryId")
    image: Optional[str] = None
    gallery: Optional[List[str]] = None
    highlights: Optional[List[str]] = None


class OrderLineIn(BaseModel):
    id: StrictStr
    quantity: StrictInt = Field(ge=1)


class OrderIn(BaseModel):
    cart: List[OrderLineIn]
    customer: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("customer", mode="before")
    @classmethod
    def _missing_customer(cls, v: Any) -> Any:
        return {} if v is None else v
