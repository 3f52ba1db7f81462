from fastapi import FastAPI
from shared.api import register_exception_handlers
from shared.config.database import create_tables
from shared.observability import setup_observability
from .router import router, public_router
from .models import Address # Import to register with Base

address_app = FastAPI(title="Address Service", version="1.0.0")

# --- OBSERVABILITY BOOTSTRAP ---
setup_observability(address_app, "address_service")
register_exception_handlers(address_app)

address_app.include_router(public_router)
address_app.include_router(router)

@address_app.on_event("startup")
async def startup_event():
    await create_tables()
