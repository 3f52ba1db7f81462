from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Address


class AddressRepository:

    @staticmethod
    async def create(db: AsyncSession, address: Address) -> Address:
        db.add(address)
        await db.commit()
        await db.refresh(address)
        return address

    @staticmethod
    async def get_by_id(db: AsyncSession, address_id: str) -> Optional[Address]:
        result = await db.execute(select(Address).where(Address.id == address_id))
        return result.scalars().first()

    @staticmethod
    async def list_for_user(db: AsyncSession, user_id: str):
        result = await db.execute(
            select(Address).where(Address.user_id == user_id).order_by(Address.created_at)
        )
        return result.scalars().all()
