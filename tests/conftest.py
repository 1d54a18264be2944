import os

# Must be set before bistro is imported: settings are read once per process
os.environ["ENV_MODE"] = "development"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["ADMIN_MOBILE"] = "9000000000"
os.environ["ADMIN_PASSWORD"] = "admin-pass"

import pytest
import httpx
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from bistro.core.config import get_settings

get_settings.cache_clear()

from bistro.database import Base, get_db
from bistro.main import app
from bistro.models import FoodType, MenuCategory, MenuItem, User, UserRole
from bistro.core.security import hash_password

ADMIN_MOBILE = "9000000000"
ADMIN_PASSWORD = "admin-pass"


@pytest.fixture
async def session_maker():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
async def client(session_maker):
    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


# =============================================================================
# HTTP HELPERS
# =============================================================================

def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


async def register(client, mobile="9876543210", name="Asha Rao", password="secret123"):
    response = await client.post(
        "/api/auth/register",
        json={"fullName": name, "mobileNumber": mobile, "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def add_menu_item(client, headers, name="Burger", price=150.0, **fields):
    body = {
        "name": name,
        "description": f"Tasty {name.lower()}",
        "category": "Burger",
        "type": "non-veg",
        "price": price,
    }
    body.update(fields)
    response = await client.post("/api/menu", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
async def admin_headers(client):
    response = await client.post(
        "/api/auth/admin-login",
        json={"mobileNumber": ADMIN_MOBILE, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200, response.text
    # Keep later "anonymous" requests anonymous
    client.cookies.clear()
    return bearer(response.json()["data"]["token"])


@pytest.fixture
async def user_headers(client):
    data = await register(client)
    return bearer(data["token"])


# =============================================================================
# SERVICE-LEVEL HELPERS
# =============================================================================

async def make_user(db, mobile="9123456780", name="Ravi", role=UserRole.USER) -> User:
    user = User(
        full_name=name,
        mobile_number=mobile,
        password_hash=hash_password("secret123"),
        role=role,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def make_item(db, name="Burger", price=150.0, available=True) -> MenuItem:
    item = MenuItem(
        name=name,
        description=f"Tasty {name.lower()}",
        category=MenuCategory.BURGER,
        type=FoodType.NON_VEG,
        price=price,
        is_available=available,
    )
    db.add(item)
    await db.commit()
    await db.refresh(item)
    return item
