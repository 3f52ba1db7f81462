from typing import Optional, Type

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import AsyncSessionLocal


class CatalogRepository:
    """Shared persistence for the name-keyed catalog collections
    (Category, SubCategory, Brand)."""

    @staticmethod
    async def create(db: AsyncSession, entry):
        db.add(entry)
        await db.commit()
        return await CatalogRepository.reload(db, type(entry), entry.id)

    @staticmethod
    async def reload(db: AsyncSession, model: Type, entry_id: str):
        result = await db.execute(
            select(model).where(model.id == entry_id).execution_options(populate_existing=True)
        )
        return result.scalars().first()

    @staticmethod
    async def list_all(db: AsyncSession, model: Type):
        result = await db.execute(select(model).order_by(model.name))
        return result.scalars().all()

    @staticmethod
    async def get_by_id(db: AsyncSession, model: Type, entry_id: str):
        result = await db.execute(select(model).where(model.id == entry_id))
        return result.scalars().first()

    @staticmethod
    async def update(db: AsyncSession, entry):
        db.add(entry)
        await db.commit()
        return await CatalogRepository.reload(db, type(entry), entry.id)

    @staticmethod
    async def delete(db: AsyncSession, entry) -> None:
        await db.delete(entry)
        await db.commit()

    @staticmethod
    async def find_id_by_name(model: Type, name: str) -> Optional[str]:
        """Resolve a human-readable name to its id.

        Opens its own session so several lookups can run concurrently;
        an AsyncSession must not be shared between concurrent tasks.
        """
        async with AsyncSessionLocal() as session:
            result = await session.execute(select(model.id).where(model.name == name))
            return result.scalars().first()
