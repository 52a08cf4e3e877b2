# storefront/models.py
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

ALL_CATEGORIES = "all"
UNCATEGORIZED = "uncategorized"


# ---------------------------
# Wire models (validated at the data-source boundary)
# ---------------------------
class Product(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    name: str
    description: str = ""
    price: int = Field(ge=0)
    category: str = ""
    category_id: str = Field(default="", alias="categoryId")
    image: str = ""
    gallery: List[str] = Field(default_factory=list)
    highlights: List[str] = Field(default_factory=list)

    @field_validator("description", "category", "category_id", "image", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("gallery", "highlights", mode="before")
    @classmethod
    def _none_to_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @property
    def images(self) -> List[str]:
        """Gallery images, or the main image alone when no gallery is set."""
        if self.gallery:
            return list(self.gallery)
        return [self.image] if self.image else []


class CartLineItem(BaseModel):
    id: str = Field(min_length=1)
    name: str = ""
    price: int = Field(ge=0)
    quantity: int = Field(ge=1)

    @property
    def line_total(self) -> int:
        return self.price * self.quantity


class CustomerInfo(BaseModel):
    name: str
    email: str


class OrderLine(BaseModel):
    id: str
    quantity: int


class Order(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    cart: List[OrderLine]
    customer: Dict[str, Any] = Field(default_factory=dict)
    created_at: str = Field(alias="createdAt")


class OrderReceipt(BaseModel):
    message: str = ""
    order: Order


# ---------------------------
# Page session state
# ---------------------------
@dataclass
class Category:
    id: str
    label: str
    display_label: str
    count: int = 0


@dataclass
class FilterState:
    keyword: str = ""
    category_id: str = ALL_CATEGORIES


@dataclass
class PaginationState:
    page_size: int = 12
    current_page: int = 1
    total_pages: int = 0


@dataclass
class PageControl:
    label: str
    page: int
    disabled: bool = False
    active: bool = False


@dataclass
class AppState:
    """Everything one page session knows; engines read and mutate this explicitly."""

    products: List[Product] = field(default_factory=list)
    filtered: List[Product] = field(default_factory=list)
    cart: List[CartLineItem] = field(default_factory=list)
    filters: FilterState = field(default_factory=FilterState)
    categories: List[Category] = field(default_factory=list)
    pagination: PaginationState = field(default_factory=PaginationState)
    loading: bool = False
    error: Optional[str] = None
