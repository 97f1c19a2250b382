"""SQLAlchemy ORM models for loan persistence."""

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import JSON, Date, DateTime, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from loan_tracker.models.loan import LoanState, LoanStatus, LoanTerms


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class LoanRecord(Base):
    __tablename__ = "loans"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    name: Mapped[str] = mapped_column(String(120))
    loan_type: Mapped[str] = mapped_column(String(20), index=True)
    lender: Mapped[str | None] = mapped_column(String(120), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Terms
    principal: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    annual_rate: Mapped[Decimal] = mapped_column(Numeric(7, 6))
    term_months: Mapped[int] = mapped_column(Integer)
    start_date: Mapped[date] = mapped_column(Date)

    # State
    monthly_payment: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    remaining_balance: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    total_paid: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    interest_paid: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    status: Mapped[str] = mapped_column(String(20), default=LoanStatus.ACTIVE.value, index=True)
    next_payment_date: Mapped[date] = mapped_column(Date, index=True)

    @property
    def terms(self) -> LoanTerms:
        return LoanTerms(
            principal=self.principal,
            annual_rate=self.annual_rate,
            term_months=self.term_months,
            start_date=self.start_date,
        )

    @property
    def state(self) -> LoanState:
        return LoanState(
            annual_rate=self.annual_rate,
            remaining_balance=self.remaining_balance,
            monthly_payment=self.monthly_payment,
            next_payment_date=self.next_payment_date,
            total_paid=self.total_paid,
            interest_paid=self.interest_paid,
            status=LoanStatus(self.status),
        )

    def apply_state(self, state: LoanState) -> None:
        self.annual_rate = state.annual_rate
        self.remaining_balance = state.remaining_balance
        self.monthly_payment = state.monthly_payment
        self.next_payment_date = state.next_payment_date
        self.total_paid = state.total_paid
        self.interest_paid = state.interest_paid
        self.status = state.status.value

    def snapshot(self) -> dict[str, str | int | None]:
        """JSON-safe copy of the tracked fields, for history rows."""
        return {
            "name": self.name,
            "loan_type": self.loan_type,
            "lender": self.lender,
            "notes": self.notes,
            "principal": str(self.principal),
            "annual_rate": str(self.annual_rate),
            "term_months": self.term_months,
            "start_date": self.start_date.isoformat(),
            "monthly_payment": str(self.monthly_payment),
            "remaining_balance": str(self.remaining_balance),
            "total_paid": str(self.total_paid),
            "interest_paid": str(self.interest_paid),
            "status": self.status,
            "next_payment_date": self.next_payment_date.isoformat(),
        }


class LoanHistoryRecord(Base):
    __tablename__ = "loan_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # No foreign key: history outlives deleted loans
    loan_id: Mapped[uuid.UUID] = mapped_column(Uuid, index=True)
    action: Mapped[str] = mapped_column(String(30))
    changed_fields: Mapped[list] = mapped_column(JSON, default=list)
    previous_data: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    new_data: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    details: Mapped[dict | None] = mapped_column(JSON, nullable=True)  # Payment breakdown
    occurred_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
