"""History log: persists LoanEvents as loan_history rows."""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from loan_tracker.models.db import LoanHistoryRecord
from loan_tracker.store.events import LoanEvent

logger = logging.getLogger(__name__)


class AuditLog:
    """LoanStore listener.

    Rows are added to the store's session, so they commit (or roll back)
    together with the loan change that produced them.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __call__(self, event: LoanEvent) -> None:
        changed = event.changed_fields
        self.session.add(LoanHistoryRecord(
            loan_id=event.loan_id,
            action=event.action.value,
            changed_fields=changed,
            previous_data={k: event.previous[k] for k in changed if k in event.previous} if event.previous else None,
            new_data={k: event.current[k] for k in changed if k in event.current} if event.current else None,
            details=event.details,
            occurred_at=event.occurred_at,
        ))
        logger.debug("History row queued: %s %s", event.action.value, event.loan_id)

    async def history(self, loan_id: uuid.UUID, limit: int = 50) -> list[LoanHistoryRecord]:
        """Most recent history rows for a loan, newest first."""
        result = await self.session.execute(
            select(LoanHistoryRecord)
            .where(LoanHistoryRecord.loan_id == loan_id)
            .order_by(LoanHistoryRecord.occurred_at.desc(), LoanHistoryRecord.id.desc())
            .limit(limit)
        )
        return list(result.scalars())
