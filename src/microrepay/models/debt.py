"""Debt snapshots and the values produced by the optimization engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping

from ..exceptions import InvalidInput
from ..money import ZERO, to_money, to_rate


def parse_date(value: Any, *, field_name: str = "date") -> date:
    """Accept a ``date``, a ``datetime`` (date part kept) or an ISO-8601 string."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            # Timestamps such as 2024-03-01T12:00:00Z
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError as exc:
            raise InvalidInput(
                f"{field_name} is not an ISO date: {value!r}", field=field_name, value=value
            ) from exc
    raise InvalidInput(
        f"{field_name} must be a date or ISO string, got {type(value).__name__}",
        field=field_name,
        value=value,
    )


def _pick(data: Mapping[str, Any], *keys: str, required: bool = True) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    if required:
        raise InvalidInput(f"creditor balance is missing {keys[0]!r}", field=keys[0])
    return None


@dataclass(slots=True, frozen=True)
class DebtAccount:
    """Snapshot of one creditor balance at allocation time."""

    id: str
    creditor_id: str
    account_id: str
    current_balance: Decimal
    interest_rate: Decimal
    minimum_payment: Decimal = ZERO
    due_date: date | None = None

    def __post_init__(self) -> None:
        # Frozen dataclass: normalize through object.__setattr__.
        object.__setattr__(
            self, "current_balance", to_money(self.current_balance, field="current_balance")
        )
        object.__setattr__(self, "interest_rate", to_rate(self.interest_rate))
        object.__setattr__(
            self, "minimum_payment", to_money(self.minimum_payment, field="minimum_payment")
        )
        if self.due_date is not None:
            object.__setattr__(self, "due_date", parse_date(self.due_date, field_name="due_date"))

    @classmethod
    def from_creditor_balance(cls, creditor_id: str, data: Mapping[str, Any]) -> "DebtAccount":
        """Build an account from a creditor balance record.

        Accepts both camelCase keys (as returned by creditor feeds) and
        snake_case keys. The account ``id`` is ``"<creditor_id>-<account_id>"``.
        """

        account_id = str(_pick(data, "accountId", "account_id"))
        return cls(
            id=f"{creditor_id}-{account_id}",
            creditor_id=creditor_id,
            account_id=account_id,
            current_balance=_pick(data, "balance", "currentBalance", "current_balance"),
            interest_rate=_pick(data, "interestRate", "interest_rate"),
            minimum_payment=_pick(data, "minimumPayment", "minimum_payment"),
            due_date=_pick(data, "dueDate", "due_date", required=False),
        )


@dataclass(slots=True, frozen=True)
class PaymentScheduleEntry:
    """One planned payment. Priority 1 is executed first."""

    account_id: str
    amount: Decimal
    date: date
    priority: int

    def __post_init__(self) -> None:
        amount = to_money(self.amount, field="amount", allow_negative=False)
        if amount <= 0:
            raise InvalidInput(
                f"Payment to {self.account_id} must be positive, got {amount}",
                field="amount",
                value=self.amount,
                account_id=self.account_id,
            )
        object.__setattr__(self, "amount", amount)
        object.__setattr__(self, "date", parse_date(self.date))

    def as_dict(self) -> dict[str, Any]:
        return {
            "account_id": self.account_id,
            "amount": str(self.amount),
            "date": self.date.isoformat(),
            "priority": self.priority,
        }


@dataclass(slots=True, frozen=True)
class ProjectionResult:
    """Outcome of repeatedly applying a schedule compared to minimum payments."""

    total_interest_saved: Decimal
    months_to_payoff: int
    total_payments: Decimal
    baseline_total: Decimal

    def as_dict(self) -> dict[str, Any]:
        return {
            "total_interest_saved": str(self.total_interest_saved),
            "months_to_payoff": self.months_to_payoff,
            "total_payments": str(self.total_payments),
            "baseline_total": str(self.baseline_total),
        }


@dataclass(slots=True, frozen=True)
class StrategyDescriptor:
    """Display metadata for a registered strategy."""

    name: str
    label: str
    description: str


@dataclass(slots=True, frozen=True)
class RepaymentPlan:
    """Allocation and projection computed from the same debt snapshot."""

    strategy: str
    available_funds: Decimal
    schedule: tuple[PaymentScheduleEntry, ...] = field(default_factory=tuple)
    projection: ProjectionResult | None = None

    @property
    def allocated(self) -> Decimal:
        return sum((entry.amount for entry in self.schedule), ZERO)

    @property
    def unallocated(self) -> Decimal:
        return self.available_funds - self.allocated

    def as_dict(self) -> dict[str, Any]:
        return {
            "strategy": self.strategy,
            "available_funds": str(self.available_funds),
            "allocated": str(self.allocated),
            "unallocated": str(self.unallocated),
            "schedule": [entry.as_dict() for entry in self.schedule],
            "projection": self.projection.as_dict() if self.projection else None,
        }
