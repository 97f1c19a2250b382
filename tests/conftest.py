"""Canonical test fixtures used across engine, store and API tests.

Fixture loans:
    mortgage: $200K, 5%, 30yr, starting 2025-01-15 -> $1,073.64/mo
    personal: $10K, 6%, 12mo, starting 2025-01-01 -> $860.66/mo
"""

from datetime import date
from decimal import Decimal

import httpx
import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from loan_tracker.api.app import create_app
from loan_tracker.api.deps import get_db, init_db
from loan_tracker.models.loan import LoanTerms


@pytest.fixture
def mortgage_terms() -> LoanTerms:
    return LoanTerms(
        principal=Decimal("200000"),
        annual_rate=Decimal("0.05"),
        term_months=360,
        start_date=date(2025, 1, 15),
    )


@pytest.fixture
def personal_terms() -> LoanTerms:
    return LoanTerms(
        principal=Decimal("10000"),
        annual_rate=Decimal("0.06"),
        term_months=12,
        start_date=date(2025, 1, 1),
    )


@pytest.fixture
async def db_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    app = create_app()

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
