from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.security import RequestContext, get_request_context
from .schemas import AddressCreate, AddressEnvelope, AddressListEnvelope
from .service import AddressService

# Every address endpoint needs an authenticated caller
router = APIRouter(dependencies=[Depends(get_request_context)])
public_router = APIRouter()  # For any public endpoints (e.g. health check)

@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "address", "status": "running"}


@router.post("/", response_model=AddressEnvelope, status_code=status.HTTP_201_CREATED)
async def create_address(
    payload: AddressCreate,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    address = await AddressService.create_address(db, ctx, payload)
    return {"message": "Address saved successfully", "record": address}


@router.get("/", response_model=AddressListEnvelope)
async def list_my_addresses(
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    addresses = await AddressService.list_my_addresses(db, ctx)
    return {"message": "Here are your addresses", "total": len(addresses), "records": addresses}


@router.get("/{address_id}", response_model=AddressEnvelope)
async def get_address(
    address_id: str,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    address = await AddressService.get_address(db, ctx, address_id)
    return {"message": "Address fetched successfully", "record": address}
