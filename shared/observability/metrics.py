from prometheus_client import Counter, Histogram

# Business Metrics
ecomm_orders_total = Counter(
    "ecomm_orders_total",
    "Total order placements attempted",
    ["status"] # Labels: 'placed', 'rejected'
)

ecomm_order_value = Histogram(
    "ecomm_order_value",
    "Total price of placed orders",
    buckets=(0, 10, 50, 100, 250, 500, 1000, 2500, 5000, 10000)
)

ecomm_stock_units_reserved_total = Counter(
    "ecomm_stock_units_reserved_total",
    "Stock units decremented by order placement"
)

ecomm_product_queries_total = Counter(
    "ecomm_product_queries_total",
    "Product listing queries served",
    ["result"] # Labels: 'hit', 'empty', 'page_out_of_range'
)

ecomm_media_uploads_total = Counter(
    "ecomm_media_uploads_total",
    "Product image uploads to the media host",
    ["status"] # Labels: 'success', 'failed'
)
