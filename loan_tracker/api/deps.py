"""FastAPI dependency injection."""

from typing import AsyncIterator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from loan_tracker.config import settings
from loan_tracker.models.db import Base
from loan_tracker.store.audit import AuditLog
from loan_tracker.store.loans import LoanStore

engine = create_async_engine(settings.database_url, echo=settings.debug)
async_session = async_sessionmaker(engine, expire_on_commit=False)


async def init_db(bind: AsyncEngine = engine) -> None:
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db() -> AsyncIterator[AsyncSession]:
    async with async_session() as session:
        yield session


def get_audit_log(session: AsyncSession = Depends(get_db)) -> AuditLog:
    return AuditLog(session)


def get_store(
    session: AsyncSession = Depends(get_db),
    audit: AuditLog = Depends(get_audit_log),
) -> LoanStore:
    return LoanStore(session, listeners=[audit])
