from .setup import setup_observability
from .metrics import (
    ecomm_orders_total,
    ecomm_order_value,
    ecomm_stock_units_reserved_total,
    ecomm_product_queries_total,
    ecomm_media_uploads_total
)
