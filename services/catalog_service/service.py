from typing import Type

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from shared.api import InvalidIdentifierError, NotFoundError
from shared.persistence import is_valid_id
from .models import Brand, Category, SubCategory
from .repository import CatalogRepository

logger = structlog.get_logger(__name__)

# kind -> (model, human label used in messages)
CATALOG_KINDS = {
    "categories": (Category, "Category"),
    "subcategories": (SubCategory, "SubCategory"),
    "brands": (Brand, "Brand"),
}


class CatalogService:

    def __init__(self, kind: str):
        self.model: Type
        self.model, self.label = CATALOG_KINDS[kind]

    async def _get_or_404(self, db: AsyncSession, entry_id: str):
        if not is_valid_id(entry_id):
            raise InvalidIdentifierError(f"{self.label} ID is Invalid")
        entry = await CatalogRepository.get_by_id(db, self.model, entry_id)
        if not entry:
            raise NotFoundError(f"{self.label} not found")
        return entry

    async def _check_parent(self, db: AsyncSession, category_id):
        if category_id is None:
            return
        if not is_valid_id(category_id):
            raise InvalidIdentifierError("Category ID is Invalid")
        if not await CatalogRepository.get_by_id(db, Category, category_id):
            raise NotFoundError("Category not found")

    async def create(self, db: AsyncSession, data):
        values = data.model_dump(exclude_none=True)
        await self._check_parent(db, values.get("category_id"))
        entry = await CatalogRepository.create(db, self.model(**values))
        logger.info("catalog_entry_created", kind=self.label, id=entry.id, name=entry.name)
        return entry

    async def list_all(self, db: AsyncSession):
        return await CatalogRepository.list_all(db, self.model)

    async def get(self, db: AsyncSession, entry_id: str):
        return await self._get_or_404(db, entry_id)

    async def update(self, db: AsyncSession, entry_id: str, data):
        entry = await self._get_or_404(db, entry_id)
        values = data.model_dump(exclude_unset=True)
        if "category_id" in values:
            await self._check_parent(db, values["category_id"])
        for field, value in values.items():
            setattr(entry, field, value)
        return await CatalogRepository.update(db, entry)

    async def delete(self, db: AsyncSession, entry_id: str) -> None:
        entry = await self._get_or_404(db, entry_id)
        await CatalogRepository.delete(db, entry)
        logger.info("catalog_entry_deleted", kind=self.label, id=entry_id)
