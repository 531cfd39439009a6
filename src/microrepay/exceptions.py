"""Exception hierarchy for the repayment optimization engine."""

from __future__ import annotations

from typing import Any, Iterable, Mapping


class MicroRepayError(Exception):
    """Base exception for all engine errors."""

    def as_dict(self) -> dict[str, Any]:
        """Return structured context suitable for ``logger.error(..., extra=...)``."""

        context = {
            key: value
            for key, value in vars(self).items()
            if not key.startswith("_")
        }
        return {"error": type(self).__name__, "message": str(self), **context}


class InvalidInput(MicroRepayError, ValueError):
    """Raised when a caller supplies negative funds/balances or malformed values."""

    def __init__(
        self, message: str, *, field: str | None = None, value: Any = None, account_id: str | None = None
    ) -> None:
        super().__init__(message)
        self.field = field
        self.value = value
        self.account_id = account_id


class UnknownStrategy(MicroRepayError, LookupError):
    """Raised when an optimization strategy name is not registered."""

    def __init__(self, name: Any, available: Iterable[str] = ()) -> None:
        self.name = name
        self.available = tuple(available)
        super().__init__(
            f"Unknown optimization strategy: {name!r} (available: {', '.join(self.available)})"
        )


class ConfigurationError(MicroRepayError, ValueError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, *, setting: str | None = None, value: Any = None) -> None:
        super().__init__(message)
        self.setting = setting
        self.value = value


class ProjectionError(MicroRepayError):
    """Base class for projections that cannot produce a finite result."""


class NonAmortizingMinimumPayment(ProjectionError):
    """Raised when a minimum payment does not exceed the interest it accrues."""

    def __init__(self, *, account_id: str, minimum_payment: Any, monthly_interest: Any) -> None:
        self.account_id = account_id
        self.minimum_payment = minimum_payment
        self.monthly_interest = monthly_interest
        super().__init__(
            f"Account {account_id} cannot be paid off at its minimum payment: "
            f"minimum {minimum_payment} <= monthly interest {monthly_interest}"
        )


class PayoffHorizonExceeded(ProjectionError):
    """Raised when the simulated payoff does not finish within the month cap."""

    def __init__(self, *, max_months: int, remaining_balances: Mapping[str, Any]) -> None:
        self.max_months = max_months
        self.remaining_balances = dict(remaining_balances)
        unpaid = ", ".join(sorted(self.remaining_balances)) or "none"
        super().__init__(
            f"Debts not paid off within {max_months} months (still outstanding: {unpaid})"
        )
