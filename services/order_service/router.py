from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from shared.api import ApiResponse
from shared.config.database import get_db
from shared.config.settings import ORDER_RATE_LIMIT
from shared.security import RequestContext, get_request_context, limiter, require_admin
from .schemas import OrderCreate, OrderEnvelope, OrderListEnvelope, OrderStatusUpdate
from .service import OrderService

router = APIRouter()
public_router = APIRouter()  # For any public endpoints (e.g. health check)

@public_router.get("/health")
async def health_check():
    return {"service": "order", "status": "running"}


@router.post("/", response_model=OrderEnvelope)
@limiter.limit(ORDER_RATE_LIMIT)  # per user, falls back to IP
async def create_order(
    request: Request,                          # REQUIRED: slowapi needs this to check IP/Headers
    payload: OrderCreate,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    order = await OrderService.create_order(db, ctx, payload)
    return {"message": "Order placed successfully", "data": order}


@router.get("/", response_model=OrderListEnvelope)
async def get_all_orders(
    _admin: RequestContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    orders = await OrderService.get_all_orders(db)
    return {"message": "Here is your all order", "total": len(orders), "orders": orders}


# Static paths must be declared before /{order_id}
@router.get("/mine", response_model=OrderListEnvelope)
async def get_my_orders(
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    orders = await OrderService.get_my_orders(db, ctx)
    message = "Here are all your orders" if orders else "No orders found for the user"
    return {"message": message, "total": len(orders), "orders": orders}


@router.get("/recent", response_model=OrderListEnvelope)
async def get_recent_orders(
    _admin: RequestContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    orders = await OrderService.get_recent_orders(db)
    return {"message": "Here are today's orders", "total": len(orders), "orders": orders}


@router.get("/latest", response_model=OrderListEnvelope)
async def get_latest_orders(
    _admin: RequestContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    orders = await OrderService.get_latest_orders(db)
    return {"message": "here is your all recent data", "total": len(orders), "orders": orders}


@router.get("/{order_id}", response_model=OrderEnvelope)
async def get_order(
    order_id: str,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    order = await OrderService.get_order_by_id(db, ctx, order_id)
    return {"message": "your data is getting successfully", "data": order}


@router.put("/{order_id}", response_model=OrderEnvelope)
async def update_order_status(
    order_id: str,
    payload: OrderStatusUpdate,
    _admin: RequestContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    order = await OrderService.update_order_status(db, order_id, payload.status)
    return {"message": "Order updated successfully", "data": order}


@router.delete("/{order_id}", response_model=ApiResponse)
async def delete_order(
    order_id: str,
    _admin: RequestContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await OrderService.delete_order(db, order_id)
    return {"message": "order Deleted successfully"}
