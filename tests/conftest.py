"""
Общие фикстуры: тестовая БД (SQLite in-memory), репозиторий, клиенты с разными цепочками проверок.
"""
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.auth import AuthSettings
from app.database import Base
from app.errors import CollaboratorError
from app.main import create_app
from app.repositories.company_repo import CompanyRepository, get_company_repository
from app.services.geolocation import get_geolocator

# In-memory SQLite для тестов: одно соединение на весь прогон (StaticPool)
TEST_DATABASE_URL = "sqlite+aiosqlite://"

test_engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    poolclass=StaticPool,
    connect_args={"check_same_thread": False},
)
TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

TEST_USER = "user"
TEST_PASSWORD = "pass"


class FakeLocator:
    """Подмена сервиса геолокации: фиксированная страна или ошибка, вызовы запоминаются."""

    def __init__(self, country: str = "Cyprus", fail: bool = False):
        self.country = country
        self.fail = fail
        self.calls: list[str] = []

    async def country_name(self, ip: str) -> str:
        self.calls.append(ip)
        if self.fail:
            raise CollaboratorError(f"GET https://geo.test/{ip}: Service Unavailable")
        return self.country


@pytest_asyncio.fixture
async def create_tables():
    """Чистые таблицы на каждый тест (данные in-memory БД иначе переживают тест)."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


@pytest_asyncio.fixture
async def repo(create_tables) -> CompanyRepository:
    return CompanyRepository(TestSessionLocal)


@pytest.fixture
def locator() -> FakeLocator:
    return FakeLocator()


def make_settings(*options: str, outermost_first: bool = False, country: str = "Cyprus") -> AuthSettings:
    return AuthSettings(
        username=TEST_USER,
        password=TEST_PASSWORD,
        allowed_country=country,
        options=options,
        outermost_first=outermost_first,
    )


def make_client(
    settings: AuthSettings,
    locator: FakeLocator,
    remote: tuple[str, int] = ("127.0.0.1", 123),
) -> AsyncClient:
    """HTTP-клиент к новому приложению с подменой репозитория и геолокации."""
    app = create_app(settings)
    app.dependency_overrides[get_company_repository] = lambda: CompanyRepository(TestSessionLocal)
    app.dependency_overrides[get_geolocator] = lambda: locator
    return AsyncClient(
        transport=ASGITransport(app=app, client=remote),
        base_url="http://test",
    )


@pytest_asyncio.fixture
async def client(create_tables, locator) -> AsyncGenerator[AsyncClient, None]:
    """Клиент без проверок доступа."""
    async with make_client(make_settings(), locator) as ac:
        yield ac


@pytest_asyncio.fixture
async def client_basic(create_tables, locator) -> AsyncGenerator[AsyncClient, None]:
    """Клиент с Basic-Auth на POST/DELETE (опция 2)."""
    async with make_client(make_settings("2"), locator) as ac:
        yield ac
