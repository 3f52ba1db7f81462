from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select
from .models import Product

class ProductRepository:

    @staticmethod
    async def create_product(db: AsyncSession, product: Product) -> Product:
        db.add(product)
        await db.commit()
        return await ProductRepository.reload(db, product.id)

    @staticmethod
    async def get_product_by_id(db: AsyncSession, product_id: str) -> Optional[Product]:
        result = await db.execute(select(Product).where(Product.id == product_id))
        return result.scalars().first()

    @staticmethod
    async def reload(db: AsyncSession, product_id: str) -> Optional[Product]:
        """Fetch again, overwriting the identity map so references are re-populated."""
        result = await db.execute(
            select(Product)
            .where(Product.id == product_id)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    @staticmethod
    async def count_products(db: AsyncSession, filters: list) -> int:
        result = await db.execute(select(func.count()).select_from(Product).where(*filters))
        return result.scalar_one()

    @staticmethod
    async def find_products(
        db: AsyncSession, filters: list, order_by: list, skip: int, limit: int
    ) -> List[Product]:
        result = await db.execute(
            select(Product).where(*filters).order_by(*order_by).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    @staticmethod
    async def update_product(db: AsyncSession, product: Product) -> Product:
        db.add(product)
        try:
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return await ProductRepository.reload(db, product.id)

    @staticmethod
    async def delete_product(db: AsyncSession, product: Product) -> None:
        await db.delete(product)
        await db.commit()
