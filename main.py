from fastapi import FastAPI
from shared.config.database import create_tables

# IMPORTANT: import models so they register with Base
from services.catalog_service import models as catalog_models
from services.address_service import models as address_models
from services.product_service import models as product_models
from services.order_service import models as order_models

from services.catalog_service.main import catalog_app
from services.address_service.main import address_app
from services.product_service.main import product_app
from services.order_service.main import order_app

app = FastAPI(title="Catalog & Orders Cluster")

@app.on_event("startup")
async def startup_event():
    # Mounted sub-apps do not receive startup events, so tables are created here
    await create_tables()

app.mount("/products", product_app)
app.mount("/orders", order_app)
app.mount("/catalog", catalog_app)
app.mount("/addresses", address_app)
