"""Value objects exchanged with the optimization engine."""

from .debt import (
    DebtAccount,
    PaymentScheduleEntry,
    ProjectionResult,
    RepaymentPlan,
    StrategyDescriptor,
    parse_date,
)

__all__ = [
    "DebtAccount",
    "PaymentScheduleEntry",
    "ProjectionResult",
    "RepaymentPlan",
    "StrategyDescriptor",
    "parse_date",
]
