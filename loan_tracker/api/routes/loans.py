"""Loan routes: CRUD, payments, schedules and projections."""

import csv
import io
from urllib.parse import quote
from datetime import date
from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from loan_tracker.api.deps import get_audit_log, get_store
from loan_tracker.api.schemas import (
    AmortizationEntryResponse,
    ExtraPaymentResponse,
    HistoryEntryResponse,
    LoanCreate,
    LoanListResponse,
    LoanListSummary,
    LoanResponse,
    LoanTypeStatsResponse,
    LoanUpdate,
    PaymentBreakdown,
    PaymentRequest,
    PaymentResponse,
    PayoffResponse,
    PortfolioStatsResponse,
    ScheduleResponse,
    ScheduleSummaryResponse,
)
from loan_tracker.engine.amortization import amortization_schedule, round_money, schedule_summary
from loan_tracker.engine.calendar import add_months
from loan_tracker.engine.portfolio import portfolio_stats
from loan_tracker.engine.projection import (
    extra_payment_impact,
    months_remaining,
    payoff_date,
    progress_percentage,
)
from loan_tracker.models.db import LoanRecord
from loan_tracker.models.loan import LoanStatus, LoanTerms
from loan_tracker.store.audit import AuditLog
from loan_tracker.store.loans import LoanStore

router = APIRouter(prefix="/api/v1/loans", tags=["loans"])

NULLABLE_FIELDS = frozenset({"lender", "notes"})


async def _get_or_404(store: LoanStore, loan_id: UUID) -> LoanRecord:
    record = await store.get(loan_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Loan not found")
    return record


def _attachment(name: str) -> str:
    """Content-Disposition for a download named after user text.

    Header values must be latin-1, so the plain ``filename`` is an ASCII
    fallback and the real name travels in ``filename*`` (RFC 5987).
    """
    filename = "_".join(name.split())
    fallback = filename.encode("ascii", "ignore").decode().replace('"', "").replace("\\", "")
    return f"attachment; filename=\"{fallback or 'loan.csv'}\"; filename*=UTF-8''{quote(filename, safe='')}"


@router.get("", response_model=LoanListResponse)
async def list_loans(
    status: LoanStatus | None = None,
    store: LoanStore = Depends(get_store),
):
    """List loans, newest first, with portfolio totals."""
    loans = await store.list_loans(status)
    stats = portfolio_stats(loans)
    return LoanListResponse(
        loans=[LoanResponse.model_validate(loan) for loan in loans],
        summary=LoanListSummary(
            total_debt=stats.total_debt,
            total_monthly_payment=stats.total_monthly_payment,
            total_interest_paid=stats.total_interest_paid,
            loan_count=stats.total_loans,
            active_loans=stats.active_loans,
        ),
    )


@router.get("/stats", response_model=PortfolioStatsResponse)
async def loan_stats(store: LoanStore = Depends(get_store)):
    stats = portfolio_stats(await store.list_loans())
    return PortfolioStatsResponse(
        total_loans=stats.total_loans,
        active_loans=stats.active_loans,
        total_debt=stats.total_debt,
        total_monthly_payment=stats.total_monthly_payment,
        total_interest_paid=stats.total_interest_paid,
        average_interest_rate=stats.average_interest_rate,
        by_type={
            loan_type: LoanTypeStatsResponse(
                count=s.count,
                total_debt=s.total_debt,
                monthly_payment=s.monthly_payment,
            )
            for loan_type, s in stats.by_type.items()
        },
    )


@router.post("", response_model=LoanResponse, status_code=201)
async def create_loan(req: LoanCreate, store: LoanStore = Depends(get_store)):
    terms = LoanTerms(
        principal=req.principal,
        annual_rate=req.annual_rate,
        term_months=req.term_months,
        start_date=req.start_date,
    )
    record = await store.create(req.name, req.loan_type, terms, lender=req.lender, notes=req.notes)
    return LoanResponse.model_validate(record)


@router.get("/{loan_id}", response_model=LoanResponse)
async def get_loan(loan_id: UUID, store: LoanStore = Depends(get_store)):
    return LoanResponse.model_validate(await _get_or_404(store, loan_id))


@router.put("/{loan_id}", response_model=LoanResponse)
async def update_loan(loan_id: UUID, req: LoanUpdate, store: LoanStore = Depends(get_store)):
    changes = {
        key: value for key, value in req.model_dump(exclude_unset=True).items()
        if value is not None or key in NULLABLE_FIELDS
    }
    record = await store.update(loan_id, **changes)
    if record is None:
        raise HTTPException(status_code=404, detail="Loan not found")
    return LoanResponse.model_validate(record)


@router.delete("/{loan_id}")
async def delete_loan(loan_id: UUID, store: LoanStore = Depends(get_store)):
    if not await store.delete(loan_id):
        raise HTTPException(status_code=404, detail="Loan not found")
    return {"message": "Loan deleted"}


@router.get("/{loan_id}/amortization", response_model=ScheduleResponse)
async def get_amortization(loan_id: UUID, store: LoanStore = Depends(get_store)):
    """Full schedule from the loan's original terms and stored payment."""
    loan = await _get_or_404(store, loan_id)
    entries = amortization_schedule(
        loan.principal, loan.annual_rate, loan.term_months, loan.start_date, loan.monthly_payment
    )
    summary = schedule_summary(loan.principal, loan.annual_rate, loan.term_months, loan.monthly_payment)
    return ScheduleResponse(
        loan_id=loan.id,
        name=loan.name,
        principal=loan.principal,
        annual_rate=loan.annual_rate,
        term_months=loan.term_months,
        monthly_payment=loan.monthly_payment,
        schedule=[
            AmortizationEntryResponse(
                payment_number=e.payment_number,
                payment_date=e.payment_date,
                payment_amount=e.payment_amount,
                principal_paid=e.principal_paid,
                interest_paid=e.interest_paid,
                remaining_balance=e.remaining_balance,
            )
            for e in entries
        ],
        summary=ScheduleSummaryResponse(
            total_payments=summary.total_payments,
            total_paid=summary.total_paid,
            total_interest=summary.total_interest,
            total_principal=summary.total_principal,
        ),
    )


@router.get("/{loan_id}/amortization.csv")
async def export_amortization(loan_id: UUID, store: LoanStore = Depends(get_store)):
    loan = await _get_or_404(store, loan_id)
    entries = amortization_schedule(
        loan.principal, loan.annual_rate, loan.term_months, loan.start_date, loan.monthly_payment
    )

    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(["Payment #", "Date", "Payment Amount", "Principal", "Interest", "Remaining Balance"])
    for e in entries:
        writer.writerow([
            e.payment_number,
            e.payment_date.isoformat(),
            f"{e.payment_amount:.2f}",
            f"{e.principal_paid:.2f}",
            f"{e.interest_paid:.2f}",
            f"{e.remaining_balance:.2f}",
        ])

    return Response(
        content=buf.getvalue(),
        media_type="text/csv",
        headers={"Content-Disposition": _attachment(loan.name + " amortization schedule.csv")},
    )


@router.post("/{loan_id}/payment", response_model=PaymentResponse)
async def record_loan_payment(
    loan_id: UUID,
    req: PaymentRequest,
    store: LoanStore = Depends(get_store),
):
    if req.payment_amount <= 0:
        raise HTTPException(status_code=400, detail="Valid payment amount is required")

    result = await store.record_payment(loan_id, req.payment_amount, req.payment_date)
    if result is None:
        raise HTTPException(status_code=404, detail="Loan not found")

    record, split = result
    return PaymentResponse(
        loan=LoanResponse.model_validate(record),
        breakdown=PaymentBreakdown(
            total_payment=round_money(req.payment_amount),
            principal_paid=split.principal,
            interest_paid=split.interest,
            new_balance=record.remaining_balance,
        ),
    )


@router.get("/{loan_id}/payoff", response_model=PayoffResponse)
async def get_payoff(
    loan_id: UUID,
    as_of: date | None = None,
    store: LoanStore = Depends(get_store),
):
    """Projected payoff from the current balance at the stored payment."""
    loan = await _get_or_404(store, loan_id)
    as_of = as_of or date.today()
    return PayoffResponse(
        as_of=as_of,
        payoff_date=payoff_date(loan.remaining_balance, loan.monthly_payment, loan.annual_rate, as_of),
        remaining_balance=loan.remaining_balance,
        monthly_payment=loan.monthly_payment,
        months_remaining=months_remaining(loan.term_months, loan.start_date, as_of),
        progress_percentage=progress_percentage(loan.principal, loan.remaining_balance),
    )


@router.get("/{loan_id}/extra-payment", response_model=ExtraPaymentResponse)
async def get_extra_payment_impact(
    loan_id: UUID,
    amount: Decimal = Query(..., ge=0, description="Extra amount added to every monthly payment"),
    store: LoanStore = Depends(get_store),
):
    """What-if: the loan had carried `amount` extra on every payment since it started."""
    loan = await _get_or_404(store, loan_id)
    impact = extra_payment_impact(loan.principal, loan.annual_rate, loan.term_months, amount)
    return ExtraPaymentResponse(
        extra_payment=amount,
        months_saved=impact.months_saved,
        interest_saved=impact.interest_saved,
        new_payoff_months=impact.new_payoff_months,
        new_payoff_date=add_months(loan.start_date, impact.new_payoff_months),
    )


@router.get("/{loan_id}/history", response_model=list[HistoryEntryResponse])
async def get_history(
    loan_id: UUID,
    limit: int = Query(50, ge=1, le=500),
    audit: AuditLog = Depends(get_audit_log),
):
    """Change history. Still available after the loan is deleted."""
    rows = await audit.history(loan_id, limit=limit)
    return [HistoryEntryResponse.model_validate(row) for row in rows]
