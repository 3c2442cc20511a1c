"""Shared fixtures: in-memory database, seeded users/categories and an API client."""

from types import SimpleNamespace
from typing import Callable, Dict

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.core.config import Settings
from app.core.database import build_engine, build_session_maker, close_db, create_db_and_tables
from app.core.security import Identity, TokenVerifier
from app.dao.product_dao import ProductDAO
from app.main import create_app
from app.models import Category, User
from app.services.product_service import ProductService

TEST_SECRET = "test-secret-key"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite://",
        jwt_secret_key=TEST_SECRET,
        environment="test",
    )


@pytest_asyncio.fixture
async def engine(settings: Settings):
    engine = build_engine(settings)
    await create_db_and_tables(engine)
    yield engine
    await close_db(engine)


@pytest.fixture
def session_maker(engine):
    return build_session_maker(engine)


@pytest_asyncio.fixture
async def seed(session_maker) -> SimpleNamespace:
    """Two users and two categories; products reference these."""
    alice = User(id="user-1", name="Alice", email="alice@example.com")
    bob = User(id="user-2", name="Bob", email="bob@example.com")
    async with session_maker() as db:
        db.add_all([alice, bob])
        await db.commit()

    office = Category(name="Office", created_by=alice.id)
    kitchen = Category(name="Kitchen", created_by=bob.id)
    async with session_maker() as db:
        db.add_all([office, kitchen])
        await db.commit()

    return SimpleNamespace(alice=alice, bob=bob, office=office, kitchen=kitchen)


@pytest.fixture
def token_verifier() -> TokenVerifier:
    return TokenVerifier(secret_key=TEST_SECRET)


@pytest.fixture
def auth_headers(token_verifier: TokenVerifier) -> Callable[[str], Dict[str, str]]:
    def _headers(subject: str = "user-1") -> Dict[str, str]:
        return {"Authorization": f"Bearer {token_verifier.create_access_token(subject)}"}
    return _headers


@pytest.fixture
def identity() -> Identity:
    return Identity(subject="user-1", claims={"sub": "user-1"})


@pytest.fixture
def product_dao(session_maker) -> ProductDAO:
    return ProductDAO(session_maker)


@pytest.fixture
def product_service(product_dao: ProductDAO) -> ProductService:
    return ProductService(product_dao, default_page_limit=5, max_page_limit=100)


@pytest_asyncio.fixture
async def client(settings: Settings, token_verifier: TokenVerifier, product_service: ProductService, seed):
    app = create_app(settings, token_verifier=token_verifier, product_service=product_service)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_body(seed) -> Callable[..., dict]:
    """Valid product body in the Office category unless overridden."""
    def _make_body(**overrides) -> dict:
        body = {
            "name": "Pen",
            "category": str(seed.office.id),
            "price": "1.50",
            "description": "Blue ink",
        }
        body.update(overrides)
        return body
    return _make_body
