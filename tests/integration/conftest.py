import pytest_asyncio
from datetime import datetime
from decimal import Decimal
from httpx import ASGITransport, AsyncClient

from src.adapter.database import build_engine, build_session_factory, create_schema
from src.adapter.services.simulated_authorization_gateway import SimulatedAuthorizationGateway
from src.depends import get_authorization_gateway, get_session
from src.domain.payment_link import PaymentLink


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Create a file-backed SQLite database with a fresh schema"""
    db_path = tmp_path / "payment_links_test.db"
    engine = build_engine(f"sqlite+aiosqlite:///{db_path}", busy_timeout_seconds=30)

    await create_schema(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    """Session factory bound to the test database"""
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a new database session for each test"""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def create_link(session_factory):
    """Insert a payment link directly and return it"""
    async def _create(**overrides) -> PaymentLink:
        now = datetime.utcnow()
        data = {
            "link_token": "tok_integration",
            "owner_id": "merchant_1",
            "amount": Decimal("25.00"),
            "currency": "USD",
            "description": "Workshop ticket",
            "current_uses": 0,
            "is_active": True,
            "created_at": now,
            "updated_at": now,
        }
        data.update(overrides)
        async with session_factory() as session:
            link = PaymentLink(**data)
            session.add(link)
            await session.commit()
            return link

    return _create


@pytest_asyncio.fixture
async def client(session_factory):
    """Create test client with database session and gateway overrides"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    # One session per request, like production
    async def override_get_session():
        async with session_factory() as session:
            yield session

    gateway = SimulatedAuthorizationGateway(min_delay_seconds=0, max_delay_seconds=0)

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_authorization_gateway] = lambda: gateway

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
