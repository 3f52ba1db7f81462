from fastapi import FastAPI
from shared.api import register_exception_handlers
from shared.config.database import create_tables
from shared.observability import setup_observability
from .router import brands_router, categories_router, public_router, subcategories_router
from .models import Brand, Category, SubCategory # Import to register with Base

catalog_app = FastAPI(title="Catalog Service", version="1.0.0")

# --- OBSERVABILITY BOOTSTRAP ---
setup_observability(catalog_app, "catalog_service")
register_exception_handlers(catalog_app)

catalog_app.include_router(public_router)
catalog_app.include_router(categories_router)
catalog_app.include_router(subcategories_router)
catalog_app.include_router(brands_router)

@catalog_app.on_event("startup")
async def startup_event():
    await create_tables()
