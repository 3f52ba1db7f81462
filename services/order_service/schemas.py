from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import Field

from shared.api import ApiResponse, CamelModel
from .models import OrderStatus


class OrderLine(CamelModel):
    product_id: str
    quantity: int = Field(ge=1)


class OrderCreate(CamelModel):
    address_id: str
    products: Optional[List[OrderLine]] = None


class OrderStatusUpdate(CamelModel):
    status: OrderStatus


class OrderItemResponse(CamelModel):
    # populated product projection; None once the product has been deleted
    product_id: Optional[Dict[str, Any]] = None
    quantity: int


class OrderResponse(CamelModel):
    id: str
    user_id: str
    order_items: List[OrderItemResponse]
    address: Optional[Union[Dict[str, Any], str]] = None
    total_price: float
    status: str
    created_at: datetime


class OrderEnvelope(ApiResponse):
    data: OrderResponse


class OrderListEnvelope(ApiResponse):
    total: int
    orders: List[OrderResponse]
