"""Loan persistence. Calls the engine on create, edit and payment."""

import logging
import uuid
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Any, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from loan_tracker.engine.amortization import as_decimal, round_money
from loan_tracker.engine.payments import open_loan, record_payment, revise_terms, split_payment
from loan_tracker.models.db import LoanRecord, utcnow
from loan_tracker.models.loan import LoanStatus, LoanTerms, LoanType, PaymentSplit
from loan_tracker.store.events import LoanAction, LoanEvent, LoanListener

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset({
    "name", "loan_type", "lender", "notes", "status",
    "principal", "annual_rate", "term_months", "start_date",
})


class LoanStore:
    def __init__(self, session: AsyncSession, listeners: Sequence[LoanListener] = ()):
        self.session = session
        self.listeners = list(listeners)

    async def _emit(self, event: LoanEvent) -> None:
        for listener in self.listeners:
            logger.debug("Dispatching %s for loan %s", event.action.value, event.loan_id)
            await listener(event)

    async def get(self, loan_id: uuid.UUID) -> LoanRecord | None:
        return await self.session.get(LoanRecord, loan_id)

    async def list_loans(self, status: LoanStatus | None = None) -> list[LoanRecord]:
        """All loans, newest first, optionally filtered by status."""
        stmt = select(LoanRecord).order_by(LoanRecord.created_at.desc())
        if status is not None:
            stmt = stmt.where(LoanRecord.status == status.value)
        result = await self.session.execute(stmt)
        return list(result.scalars())

    async def create(
        self,
        name: str,
        loan_type: LoanType,
        terms: LoanTerms,
        lender: str | None = None,
        notes: str | None = None,
    ) -> LoanRecord:
        now = utcnow()
        record = LoanRecord(
            id=uuid.uuid4(),
            created_at=now,
            updated_at=now,
            name=name,
            loan_type=loan_type.value,
            lender=lender,
            notes=notes,
            principal=as_decimal(terms.principal),
            annual_rate=as_decimal(terms.annual_rate),
            term_months=terms.term_months,
            start_date=terms.start_date,
        )
        record.apply_state(open_loan(terms))
        self.session.add(record)
        await self.session.flush()

        await self._emit(LoanEvent(LoanAction.CREATED, record.id, None, record.snapshot()))
        await self.session.commit()
        logger.info("Created loan %s (%s, payment %s)", record.id, record.loan_type, record.monthly_payment)
        return record

    async def update(self, loan_id: uuid.UUID, **changes: Any) -> LoanRecord | None:
        """Apply edits and recompute derived fields.

        The monthly payment is recomputed when principal, rate or term change;
        the next payment date when the start date changes.
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not editable: {', '.join(sorted(unknown))}")

        record = await self.get(loan_id)
        if record is None:
            return None

        previous = record.snapshot()
        previous_terms = record.terms

        for key, value in changes.items():
            if key in ("loan_type", "status"):
                value = getattr(value, "value", value)
            elif key in ("principal", "annual_rate"):
                value = as_decimal(value)
            setattr(record, key, value)

        state = revise_terms(record.state, previous_terms, record.terms)
        record.apply_state(state)
        record.updated_at = utcnow()
        await self.session.flush()

        await self._emit(LoanEvent(LoanAction.UPDATED, record.id, previous, record.snapshot()))
        await self.session.commit()
        return record

    async def delete(self, loan_id: uuid.UUID) -> bool:
        record = await self.get(loan_id)
        if record is None:
            return False

        previous = record.snapshot()
        await self.session.delete(record)
        await self.session.flush()

        await self._emit(LoanEvent(LoanAction.DELETED, loan_id, previous, None))
        await self.session.commit()
        logger.info("Deleted loan %s", loan_id)
        return True

    async def record_payment(
        self,
        loan_id: uuid.UUID,
        amount: Decimal,
        payment_date: date | None = None,
    ) -> tuple[LoanRecord, PaymentSplit] | None:
        """Apply one payment and return the updated loan with its rounded split.

        The row is read FOR UPDATE so two payments on the same loan cannot both
        split against the same stale balance.
        """
        result = await self.session.execute(
            select(LoanRecord)
            .where(LoanRecord.id == loan_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        record = result.scalar_one_or_none()
        if record is None:
            return None

        amount = as_decimal(amount)
        payment_date = payment_date or date.today()
        previous = record.snapshot()
        state = record.state

        split = split_payment(state.remaining_balance, state.annual_rate, amount)
        record.apply_state(record_payment(state, amount, payment_date))
        record.updated_at = utcnow()
        await self.session.flush()

        breakdown = replace(
            split,
            interest=round_money(split.interest),
            principal=round_money(split.principal),
        )
        details = {
            "payment_amount": str(round_money(amount)),
            "payment_date": payment_date.isoformat(),
            "principal_paid": str(breakdown.principal),
            "interest_paid": str(breakdown.interest),
        }
        await self._emit(LoanEvent(LoanAction.PAYMENT_RECORDED, record.id, previous, record.snapshot(), details))
        await self.session.commit()
        logger.info(
            "Recorded payment %s on loan %s; balance %s, status %s",
            amount, record.id, record.remaining_balance, record.status,
        )
        return record, breakdown
