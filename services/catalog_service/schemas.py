from typing import List, Optional

from pydantic import Field

from shared.api import ApiResponse, CamelModel


class CatalogEntryCreate(CamelModel):
    name: str = Field(min_length=1, max_length=120)


class CatalogEntryUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)


class SubCategoryCreate(CatalogEntryCreate):
    category_id: Optional[str] = None


class SubCategoryUpdate(CatalogEntryUpdate):
    category_id: Optional[str] = None


class CatalogRef(CamelModel):
    id: str
    name: str


class CatalogEntryResponse(CamelModel):
    id: str
    name: str
    category: Optional[CatalogRef] = None


class CatalogEntryEnvelope(ApiResponse):
    record: Optional[CatalogEntryResponse] = None


class CatalogListEnvelope(ApiResponse):
    total: int
    records: List[CatalogEntryResponse]
