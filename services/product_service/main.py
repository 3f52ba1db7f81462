from fastapi import FastAPI
from shared.api import register_exception_handlers
from shared.config.database import create_tables
from shared.observability import setup_observability
from .router import router, public_router
from .models import Product # Import to register with Base

product_app = FastAPI(
    title="Product Service",
    version="1.0.0"
)

# --- OBSERVABILITY BOOTSTRAP ---
setup_observability(product_app, "product_service")
register_exception_handlers(product_app)

product_app.include_router(public_router)
product_app.include_router(router)

@product_app.on_event("startup")
async def startup_event():
    await create_tables()
