from datetime import datetime
from typing import List, Optional

from pydantic import Field

from shared.api import ApiResponse, CamelModel


class ProductCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    category: str
    sub_category: str
    brand: str
    size: Optional[str] = None
    color: Optional[str] = None
    quantity: int = Field(ge=0)
    base_price: Optional[float] = Field(default=None, ge=0)
    discount_price: Optional[float] = Field(default=None, ge=0)
    final_price: float = Field(ge=0)
    active: bool = True


class ProductUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = None
    sub_category: Optional[str] = None
    brand: Optional[str] = None
    size: Optional[str] = None
    color: Optional[str] = None
    quantity: Optional[int] = Field(default=None, ge=0)
    base_price: Optional[float] = Field(default=None, ge=0)
    discount_price: Optional[float] = Field(default=None, ge=0)
    final_price: Optional[float] = Field(default=None, ge=0)
    active: Optional[bool] = None


class CatalogRef(CamelModel):
    id: str
    name: str


class ProductResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    category: Optional[CatalogRef] = None
    sub_category: Optional[CatalogRef] = None
    brand: Optional[CatalogRef] = None
    size: Optional[str] = None
    color: Optional[str] = None
    quantity: int
    base_price: Optional[float] = None
    discount_price: Optional[float] = None
    final_price: float
    images: List[str] = []
    active: bool = True
    created_at: Optional[datetime] = None


class Pagination(CamelModel):
    total: int
    page: int
    limit: int
    skip: int
    total_pages: int


class ProductEnvelope(ApiResponse):
    record: ProductResponse


class ProductListEnvelope(ApiResponse):
    status: Optional[str] = None
    data: List[ProductResponse]
    pagination: Optional[Pagination] = None
