"""MicroRepay debt repayment optimization engine."""

from __future__ import annotations

from .config import BaseConfig
from .engine import OptimizationEngine
from .exceptions import (
    ConfigurationError,
    InvalidInput,
    MicroRepayError,
    NonAmortizingMinimumPayment,
    PayoffHorizonExceeded,
    ProjectionError,
    UnknownStrategy,
)
from .models import (
    DebtAccount,
    PaymentScheduleEntry,
    ProjectionResult,
    RepaymentPlan,
    StrategyDescriptor,
)
from .services.strategies import Strategy

__all__ = [
    "BaseConfig",
    "ConfigurationError",
    "DebtAccount",
    "InvalidInput",
    "MicroRepayError",
    "NonAmortizingMinimumPayment",
    "OptimizationEngine",
    "PaymentScheduleEntry",
    "PayoffHorizonExceeded",
    "ProjectionError",
    "ProjectionResult",
    "RepaymentPlan",
    "Strategy",
    "StrategyDescriptor",
    "UnknownStrategy",
]
