"""
Fixtures for integration tests.

Provides:
- In-memory SQLite database shared by every unit of work of a test
- Seeded customers and users
- Test client for the FastAPI app with the database overridden
"""

from datetime import datetime, timezone
from functools import partial
from typing import AsyncGenerator, Callable, Dict

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from default_management.main import app
from default_management.application.services import (
    ApplicationService,
    QueryService,
    StatisticsService,
    UserService,
)
from default_management.core.security import PasswordHasher, TokenService
from default_management.domain.entities import Customer, User, UserRole
from default_management.infrastructure.database import Base, get_session_factory
from default_management.infrastructure.repositories import SqlAlchemyUnitOfWork


CUSTOMERS = [
    Customer(name="Acme", industry="Finance", region="East", latest_ext_grade="BB"),
    Customer(name="Globex", industry="Retail", region="West", latest_ext_grade="B"),
    Customer(name="Initech", industry="Finance", region="North"),
    Customer(name="Umbrella", industry="Healthcare", region="East"),
]


class FixedClock:
    """Settable clock for stamping transitions at known times."""

    def __init__(self, now: datetime | None = None):
        self.now = now or datetime.now(timezone.utc)

    def set(self, year: int, month: int = 6, day: int = 15) -> None:
        self.now = datetime(year, month, day, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """Create an in-memory SQLite async engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


@pytest.fixture
def uow_factory(session_factory) -> Callable[[], SqlAlchemyUnitOfWork]:
    return partial(SqlAlchemyUnitOfWork, session_factory)


@pytest_asyncio.fixture
async def customers(uow_factory) -> Dict[str, Customer]:
    """Seed the customer table. Customers are maintained outside this service."""
    seeded = {}
    async with uow_factory() as uow:
        for template in CUSTOMERS:
            customer = Customer(
                name=template.name,
                industry=template.industry,
                region=template.region,
                latest_ext_grade=template.latest_ext_grade,
            )
            await uow.customers.create(customer)
            seeded[customer.name] = customer
        await uow.commit()
    return seeded


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_service() -> TokenService:
    return TokenService()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def application_service(uow_factory, clock) -> ApplicationService:
    return ApplicationService(uow_factory, clock=clock)


@pytest.fixture
def query_service(uow_factory) -> QueryService:
    return QueryService(uow_factory)


@pytest.fixture
def statistics_service(uow_factory) -> StatisticsService:
    return StatisticsService(uow_factory)


@pytest.fixture
def user_service(uow_factory, password_hasher, token_service) -> UserService:
    return UserService(uow_factory, password_hasher, token_service)


@pytest_asyncio.fixture
async def applicant(user_service) -> User:
    return await user_service.register("alice", "secret123", UserRole.APPLICANT)


@pytest_asyncio.fixture
async def approver(user_service) -> User:
    return await user_service.register("bob", "secret456", UserRole.APPROVER)


# =============================================================================
# App Client Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client backed by the in-memory database.

    Lifespan events do not run under ASGITransport, so the engine is
    provided through a dependency override instead.
    """
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def login(client: AsyncClient, username: str, password: str) -> Dict[str, str]:
    """Log in through the API and return bearer auth headers."""
    response = await client.post(
        "/api/v1/login",
        json={"username": username, "password": password},
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


async def register(client: AsyncClient, username: str, password: str, role: str) -> Dict[str, str]:
    """Register through the API, then log in."""
    response = await client.post(
        "/api/v1/register",
        json={"username": username, "password": password, "role": role},
    )
    assert response.status_code == 201, response.text
    return await login(client, username, password)


@pytest_asyncio.fixture
async def alice_headers(client) -> Dict[str, str]:
    return await register(client, "alice", "secret123", "Applicant")


@pytest_asyncio.fixture
async def bob_headers(client) -> Dict[str, str]:
    return await register(client, "bob", "secret456", "Approver")


@pytest.fixture
def login_as(client) -> Callable:
    """Return a coroutine function logging an existing user in via the API."""
    return partial(login, client)
