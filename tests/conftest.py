import os
import tempfile

# Configure the environment before any application module is imported
_DB_DIR = tempfile.mkdtemp(prefix="catalog-orders-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/test.db"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["TRACING_ENABLED"] = "false"
os.environ["MEDIA_PROVIDER"] = "fake"

import httpx
import pytest

from main import app
from services.address_service.models import Address
from services.catalog_service.models import Brand, Category, SubCategory
from services.product_service.models import Product
from shared.config.database import AsyncSessionLocal, Base, engine
from shared.media import FakeMediaUploader, reset_uploader, set_uploader
from shared.security import create_access_token

ADMIN_ID = "admin-1"
USER_ID = "user-1"
OTHER_USER_ID = "user-2"


def auth_headers(user_id: str, role: str | None = None) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id, role)}"}


@pytest.fixture(autouse=True)
async def database():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    # connections are bound to this test's event loop
    await engine.dispose()


@pytest.fixture()
def media():
    uploader = FakeMediaUploader()
    set_uploader(uploader)
    yield uploader
    reset_uploader()


@pytest.fixture()
async def client(media):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def admin_headers():
    return auth_headers(ADMIN_ID, role="admin")


@pytest.fixture()
def user_headers():
    return auth_headers(USER_ID, role="customer")


@pytest.fixture()
def other_user_headers():
    return auth_headers(OTHER_USER_ID, role="customer")


class Seeder:
    """Writes fixtures straight to the database, bypassing the API."""

    async def _save(self, *records):
        async with AsyncSessionLocal() as session:
            session.add_all(records)
            await session.commit()
        return records[0] if len(records) == 1 else records

    async def catalog(self, category="Men", sub_category="Shirts", brand="Acme"):
        cat = Category(name=category)
        await self._save(cat)
        sub = SubCategory(name=sub_category, category_id=cat.id)
        br = Brand(name=brand)
        await self._save(sub, br)
        return {"category": cat.id, "sub_category": sub.id, "brand": br.id}

    async def product(self, refs: dict, **overrides) -> Product:
        values = dict(
            name="Oxford Shirt",
            category_id=refs["category"],
            sub_category_id=refs["sub_category"],
            brand_id=refs["brand"],
            size="M",
            color="blue",
            quantity=10,
            final_price=100.0,
            images=["https://media.example.test/a.jpg"],
        )
        values.update(overrides)
        return await self._save(Product(**values))

    async def address(self, user_id: str = USER_ID, **overrides) -> Address:
        values = dict(
            user_id=user_id,
            name="Asha Rao",
            mobile="9876543210",
            email="asha.rao@gmail.com",
            pincode="560001",
            landmark="Near the park",
            district="Bengaluru Urban",
            state="Karnataka",
        )
        values.update(overrides)
        return await self._save(Address(**values))

    async def get_product(self, product_id: str) -> Product | None:
        async with AsyncSessionLocal() as session:
            return await session.get(Product, product_id)


@pytest.fixture()
def seed():
    return Seeder()
