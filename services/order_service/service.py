from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Tuple

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from services.address_service.repository import AddressRepository
from services.product_service.repository import ProductRepository
from shared.api import AppError, InsufficientStockError, InvalidIdentifierError, NotFoundError
from shared.observability import ecomm_order_value, ecomm_orders_total, ecomm_stock_units_reserved_total
from shared.persistence import is_valid_id, populate
from shared.security import RequestContext
from .models import Order, OrderItem, OrderStatus
from .repository import OrderRepository
from .schemas import OrderCreate

logger = structlog.get_logger(__name__)

# Projections used when populating orders for output
ORDER_PRODUCT_FIELDS = ("name", "images")
# the brand reference goes out under `brand`, unpopulated
MY_ORDER_PRODUCT_FIELDS = ("name", "color", ("brand", "brand_id"), "size")
ADDRESS_FIELDS = ("name", "mobile", "email", "pincode", "landmark", "district", "state")


def order_document(
    order: Order,
    product_fields: Iterable[str] = ORDER_PRODUCT_FIELDS,
    address_fields: Optional[Iterable[str]] = ADDRESS_FIELDS,
) -> dict:
    """Order with line products (and optionally the address) populated.
    Ids of populated sub-documents are suppressed."""
    product_fields = tuple(product_fields)
    if address_fields is None:
        address = order.address_id
    else:
        address = populate(order.address, address_fields, include_id=False)
    return {
        "id": order.id,
        "userId": order.user_id,
        "orderItems": [
            {
                "productId": populate(item.product, product_fields, include_id=False),
                "quantity": item.quantity,
            }
            for item in order.items
        ],
        "address": address,
        "totalPrice": order.total_price,
        "status": order.status,
        "createdAt": order.created_at,
    }


def current_day_window(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """Start and end of today in server-local time, returned as UTC instants."""
    if now is None or now.tzinfo is None:
        now = (now or datetime.now()).astimezone()
    start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    end = now.replace(hour=23, minute=59, second=59, microsecond=999000)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


class OrderService:

    @staticmethod
    async def create_order(db: AsyncSession, ctx: RequestContext, data: OrderCreate) -> dict:
        try:
            order, reservations = await OrderService._build_order(db, ctx, data)
            order = await OrderRepository.place_order(db, order, reservations)
        except AppError as exc:
            ecomm_orders_total.labels(status="rejected").inc()
            logger.info("order_rejected", user_id=ctx.user_id, reason=exc.message)
            raise

        ecomm_orders_total.labels(status="placed").inc()
        ecomm_order_value.observe(order.total_price)
        ecomm_stock_units_reserved_total.inc(sum(reservations.values()))
        logger.info(
            "order_placed",
            order_id=order.id,
            user_id=ctx.user_id,
            items=len(order.items),
            total_price=order.total_price,
        )
        return order_document(order)

    @staticmethod
    async def _build_order(
        db: AsyncSession, ctx: RequestContext, data: OrderCreate
    ) -> Tuple[Order, Dict[str, int]]:
        """Validate the request against current stock and price it."""
        if not is_valid_id(data.address_id):
            raise InvalidIdentifierError("address id not valid")

        address = await AddressRepository.get_by_id(db, data.address_id)
        # another shopper's address is treated as missing
        if not address or address.user_id != ctx.user_id:
            # 401 kept for client compatibility
            raise NotFoundError("Address is not found", status_code=401)

        items: List[OrderItem] = []
        reservations: Dict[str, int] = {}
        total_price = 0.0

        for position, line in enumerate(data.products or []):
            if not is_valid_id(line.product_id):
                raise InvalidIdentifierError("product id is not valid")

            product = await ProductRepository.get_product_by_id(db, line.product_id)
            if not product:
                raise NotFoundError("Product is not available", status_code=400)

            # repeated lines for one product draw on the same stock
            reservations[product.id] = reservations.get(product.id, 0) + line.quantity
            if product.quantity < reservations[product.id]:
                raise InsufficientStockError("Stock not available")

            total_price += product.final_price * line.quantity
            items.append(OrderItem(position=position, product_id=product.id, quantity=line.quantity))

        order = Order(
            user_id=ctx.user_id,
            address_id=address.id,
            items=items,
            total_price=total_price,
            status=OrderStatus.PENDING.value,
        )
        return order, reservations

    @staticmethod
    async def get_all_orders(db: AsyncSession) -> list:
        return [order_document(order) for order in await OrderRepository.list_orders(db)]

    @staticmethod
    async def get_latest_orders(db: AsyncSession) -> list:
        orders = await OrderRepository.list_orders(db, newest_first=True)
        return [order_document(order) for order in orders]

    @staticmethod
    async def get_my_orders(db: AsyncSession, ctx: RequestContext) -> list:
        # An empty history is a normal answer, not an error
        orders = await OrderRepository.list_orders_for_user(db, ctx.user_id)
        return [
            order_document(order, MY_ORDER_PRODUCT_FIELDS, address_fields=None) for order in orders
        ]

    @staticmethod
    async def get_recent_orders(db: AsyncSession, now: Optional[datetime] = None) -> list:
        start, end = current_day_window(now)
        orders = await OrderRepository.list_orders_created_between(db, start, end)
        return [order_document(order) for order in orders]

    @staticmethod
    async def _get_or_raise(db: AsyncSession, order_id: str, not_found_status: int = 404) -> Order:
        if not is_valid_id(order_id):
            raise InvalidIdentifierError("Invalid order ID")
        order = await OrderRepository.get_order(db, order_id)
        if not order:
            raise NotFoundError("Order not found", status_code=not_found_status)
        return order

    @staticmethod
    async def get_order_by_id(db: AsyncSession, ctx: RequestContext, order_id: str) -> dict:
        order = await OrderService._get_or_raise(db, order_id)
        if not ctx.is_admin and order.user_id != ctx.user_id:
            raise NotFoundError("Order not found")
        return order_document(order)

    @staticmethod
    async def update_order_status(db: AsyncSession, order_id: str, status: OrderStatus) -> dict:
        order = await OrderService._get_or_raise(db, order_id, not_found_status=400)
        previous = order.status
        order = await OrderRepository.update_status(db, order, status.value)
        logger.info("order_status_updated", order_id=order_id, previous=previous, status=order.status)
        return order_document(order)

    @staticmethod
    async def delete_order(db: AsyncSession, order_id: str) -> None:
        order = await OrderService._get_or_raise(db, order_id)
        await OrderRepository.delete_order(db, order)
        logger.info("order_deleted", order_id=order_id)
