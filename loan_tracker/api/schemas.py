"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from loan_tracker.models.loan import LoanStatus, LoanType


# ---- Request schemas ----

class LoanCreate(BaseModel):
    name: str = Field(..., min_length=1)
    loan_type: LoanType
    principal: Decimal = Field(..., ge=0)
    annual_rate: Decimal = Field(
        ..., ge=0, le=1, description="Decimal between 0 and 1 (e.g. 0.05 for 5%)"
    )
    term_months: int = Field(..., ge=1)
    start_date: date
    lender: str | None = None
    notes: str | None = None

    @field_validator("name", "lender", "notes")
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        return v.strip() if v is not None else v

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v:
            raise ValueError("Loan name is required")
        return v


class LoanUpdate(BaseModel):
    name: str | None = Field(None, min_length=1)
    loan_type: LoanType | None = None
    principal: Decimal | None = Field(None, ge=0)
    annual_rate: Decimal | None = Field(None, ge=0, le=1)
    term_months: int | None = Field(None, ge=1)
    start_date: date | None = None
    status: LoanStatus | None = None
    lender: str | None = None
    notes: str | None = None


class PaymentRequest(BaseModel):
    payment_amount: Decimal
    payment_date: date | None = None


# ---- Response schemas ----

class LoanResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: UUID
    name: str
    loan_type: str
    lender: str | None = None
    notes: str | None = None
    principal: Decimal
    annual_rate: Decimal
    term_months: int
    start_date: date
    monthly_payment: Decimal
    remaining_balance: Decimal
    total_paid: Decimal
    interest_paid: Decimal
    status: str
    next_payment_date: date
    created_at: datetime
    updated_at: datetime


class LoanListSummary(BaseModel):
    total_debt: Decimal
    total_monthly_payment: Decimal
    total_interest_paid: Decimal
    loan_count: int
    active_loans: int


class LoanListResponse(BaseModel):
    loans: list[LoanResponse]
    summary: LoanListSummary


class LoanTypeStatsResponse(BaseModel):
    count: int
    total_debt: Decimal
    monthly_payment: Decimal


class PortfolioStatsResponse(BaseModel):
    total_loans: int
    active_loans: int
    total_debt: Decimal
    total_monthly_payment: Decimal
    total_interest_paid: Decimal
    average_interest_rate: Decimal  # Percentage
    by_type: dict[str, LoanTypeStatsResponse]


class AmortizationEntryResponse(BaseModel):
    payment_number: int
    payment_date: date
    payment_amount: Decimal
    principal_paid: Decimal
    interest_paid: Decimal
    remaining_balance: Decimal


class ScheduleSummaryResponse(BaseModel):
    total_payments: int
    total_paid: Decimal
    total_interest: Decimal
    total_principal: Decimal


class ScheduleResponse(BaseModel):
    loan_id: UUID
    name: str
    principal: Decimal
    annual_rate: Decimal
    term_months: int
    monthly_payment: Decimal
    schedule: list[AmortizationEntryResponse]
    summary: ScheduleSummaryResponse


class PaymentBreakdown(BaseModel):
    total_payment: Decimal
    principal_paid: Decimal
    interest_paid: Decimal
    new_balance: Decimal


class PaymentResponse(BaseModel):
    loan: LoanResponse
    breakdown: PaymentBreakdown


class PayoffResponse(BaseModel):
    as_of: date
    payoff_date: date
    remaining_balance: Decimal
    monthly_payment: Decimal
    months_remaining: int  # By the original term and calendar, not by balance
    progress_percentage: int


class ExtraPaymentResponse(BaseModel):
    extra_payment: Decimal
    months_saved: int
    interest_saved: Decimal
    new_payoff_months: int
    new_payoff_date: date


class HistoryEntryResponse(BaseModel):
    model_config = {"from_attributes": True}

    action: str
    changed_fields: list[str]
    previous_data: dict | None = None
    new_data: dict | None = None
    details: dict | None = None
    occurred_at: datetime
