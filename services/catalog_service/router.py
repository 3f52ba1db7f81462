from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.api import ApiResponse
from shared.config.database import get_db
from shared.security import require_admin
from .schemas import (
    CatalogEntryCreate,
    CatalogEntryEnvelope,
    CatalogEntryUpdate,
    CatalogListEnvelope,
    SubCategoryCreate,
    SubCategoryUpdate,
)
from .service import CatalogService

public_router = APIRouter()  # For any public endpoints (e.g. health check)

@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "catalog", "status": "running"}


def build_catalog_router(kind: str, create_schema, update_schema) -> APIRouter:
    """Reads are public; create/update/delete need an administrator."""
    service = CatalogService(kind)
    label = service.label
    router = APIRouter(prefix=f"/{kind}", tags=[label])

    @router.post("/", response_model=CatalogEntryEnvelope, status_code=status.HTTP_201_CREATED)
    async def create_entry(
        payload: create_schema,
        db: AsyncSession = Depends(get_db),
        _admin=Depends(require_admin),
    ):
        entry = await service.create(db, payload)
        return {"message": f"{label} created successfully", "record": entry}

    @router.get("/", response_model=CatalogListEnvelope)
    async def list_entries(db: AsyncSession = Depends(get_db)):
        entries = await service.list_all(db)
        return {"message": f"fetched all {kind} successfully", "total": len(entries), "records": entries}

    @router.get("/{entry_id}", response_model=CatalogEntryEnvelope)
    async def get_entry(entry_id: str, db: AsyncSession = Depends(get_db)):
        entry = await service.get(db, entry_id)
        return {"message": f"{label} fetched successfully", "record": entry}

    @router.put("/{entry_id}", response_model=CatalogEntryEnvelope)
    async def update_entry(
        entry_id: str,
        payload: update_schema,
        db: AsyncSession = Depends(get_db),
        _admin=Depends(require_admin),
    ):
        entry = await service.update(db, entry_id, payload)
        return {"message": f"{label} updated successfully", "record": entry}

    @router.delete("/{entry_id}", response_model=ApiResponse)
    async def delete_entry(
        entry_id: str,
        db: AsyncSession = Depends(get_db),
        _admin=Depends(require_admin),
    ):
        await service.delete(db, entry_id)
        return {"message": f"{label} deleted successfully"}

    return router


categories_router = build_catalog_router("categories", CatalogEntryCreate, CatalogEntryUpdate)
subcategories_router = build_catalog_router("subcategories", SubCategoryCreate, SubCategoryUpdate)
brands_router = build_catalog_router("brands", CatalogEntryCreate, CatalogEntryUpdate)
