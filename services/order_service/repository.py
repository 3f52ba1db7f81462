from datetime import datetime
from typing import Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update

from shared.api import InsufficientStockError
from services.product_service.models import Product
from .models import Order

class OrderRepository:

    @staticmethod
    async def place_order(db: AsyncSession, order: Order, reservations: Dict[str, int]) -> Order:
        """Insert the order and decrement stock in one transaction.

        Each decrement only applies while enough stock is left, so two
        concurrent checkouts cannot both take the last units; if any line
        cannot be reserved nothing is written.
        """
        try:
            db.add(order)
            await db.flush()
            for product_id, quantity in reservations.items():
                result = await db.execute(
                    update(Product)
                    .where(Product.id == product_id, Product.quantity >= quantity)
                    .values(quantity=Product.quantity - quantity)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount != 1:
                    raise InsufficientStockError("Stock not available")
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return await OrderRepository.reload(db, order.id)

    @staticmethod
    async def reload(db: AsyncSession, order_id: str) -> Optional[Order]:
        result = await db.execute(
            select(Order).where(Order.id == order_id).execution_options(populate_existing=True)
        )
        return result.scalars().first()

    @staticmethod
    async def get_order(db: AsyncSession, order_id: str) -> Optional[Order]:
        result = await db.execute(select(Order).where(Order.id == order_id))
        return result.scalars().first()

    @staticmethod
    async def list_orders(db: AsyncSession, newest_first: bool = False):
        stmt = select(Order)
        if newest_first:
            stmt = stmt.order_by(Order.created_at.desc())
        result = await db.execute(stmt)
        return result.scalars().all()

    @staticmethod
    async def list_orders_for_user(db: AsyncSession, user_id: str):
        result = await db.execute(
            select(Order).where(Order.user_id == user_id).order_by(Order.created_at.desc())
        )
        return result.scalars().all()

    @staticmethod
    async def list_orders_created_between(db: AsyncSession, start: datetime, end: datetime):
        result = await db.execute(
            select(Order)
            .where(Order.created_at >= start, Order.created_at <= end)
            .order_by(Order.created_at.desc())
        )
        return result.scalars().all()

    @staticmethod
    async def update_status(db: AsyncSession, order: Order, status: str) -> Order:
        order.status = status
        await db.commit()
        return await OrderRepository.reload(db, order.id)

    @staticmethod
    async def delete_order(db: AsyncSession, order: Order) -> None:
        await db.delete(order)
        await db.commit()
