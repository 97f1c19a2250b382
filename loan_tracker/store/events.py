"""Loan change events emitted by the store after each mutation."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable

from loan_tracker.models.db import utcnow


class LoanAction(Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    PAYMENT_RECORDED = "payment_recorded"


@dataclass(frozen=True)
class LoanEvent:
    action: LoanAction
    loan_id: uuid.UUID
    previous: dict[str, Any] | None  # None on create
    current: dict[str, Any] | None  # None on delete
    details: dict[str, Any] | None = None
    occurred_at: datetime = field(default_factory=utcnow)

    @property
    def changed_fields(self) -> list[str]:
        before = self.previous or {}
        after = self.current or {}
        return sorted(k for k in before.keys() | after.keys() if before.get(k) != after.get(k))


LoanListener = Callable[[LoanEvent], Awaitable[None]]
