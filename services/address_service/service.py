from sqlalchemy.ext.asyncio import AsyncSession

from shared.api import InvalidIdentifierError, NotFoundError
from shared.persistence import is_valid_id
from shared.security import RequestContext
from .models import Address
from .repository import AddressRepository
from .schemas import AddressCreate


class AddressService:

    @staticmethod
    async def create_address(db: AsyncSession, ctx: RequestContext, data: AddressCreate) -> Address:
        address = Address(user_id=ctx.user_id, **data.model_dump())
        return await AddressRepository.create(db, address)

    @staticmethod
    async def list_my_addresses(db: AsyncSession, ctx: RequestContext):
        return await AddressRepository.list_for_user(db, ctx.user_id)

    @staticmethod
    async def get_address(db: AsyncSession, ctx: RequestContext, address_id: str) -> Address:
        if not is_valid_id(address_id):
            raise InvalidIdentifierError("address id not valid")
        address = await AddressRepository.get_by_id(db, address_id)
        if not address or not (ctx.is_admin or address.user_id == ctx.user_id):
            raise NotFoundError("Address is not found")
        return address
