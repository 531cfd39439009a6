"""Optimization engine facade: strategy registry, allocation and projection."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Mapping, Sequence

from .config import BaseConfig
from .exceptions import UnknownStrategy
from .logging_config import get_logger
from .models.debt import (
    DebtAccount,
    PaymentScheduleEntry,
    ProjectionResult,
    RepaymentPlan,
    StrategyDescriptor,
    parse_date,
)
from .money import to_money
from .services.projection import project_savings
from .services.strategies import (
    AllocationStrategy,
    AvalancheStrategy,
    HybridStrategy,
    SnowballStrategy,
    Strategy,
    describe,
)

logger = get_logger("engine")


def _build_strategy(kind: Strategy, config: BaseConfig) -> AllocationStrategy:
    if kind is Strategy.AVALANCHE:
        return AvalancheStrategy()
    if kind is Strategy.SNOWBALL:
        return SnowballStrategy()
    if kind is Strategy.HYBRID:
        return HybridStrategy(
            high_interest_threshold=config.HYBRID_HIGH_INTEREST_THRESHOLD,
            low_balance_threshold=config.HYBRID_LOW_BALANCE_THRESHOLD,
            high_interest_share=config.HYBRID_HIGH_INTEREST_SHARE,
        )
    raise AssertionError(f"unhandled strategy {kind!r}")


class OptimizationEngine:
    """Dispatches allocation requests by strategy name and projects their outcome.

    The registry is built once from the ``Strategy`` enum and is read-only
    afterwards, so one engine can serve concurrent callers.
    """

    def __init__(self, config: BaseConfig | None = None) -> None:
        self.config = config or BaseConfig()
        self._strategies: Mapping[str, AllocationStrategy] = MappingProxyType(
            {kind.value: _build_strategy(kind, self.config) for kind in Strategy}
        )

    def list_strategies(self) -> list[StrategyDescriptor]:
        """Return name/label/description for each strategy, for display."""

        return [describe(strategy) for strategy in self._strategies.values()]

    def get_strategy(self, name: Any) -> AllocationStrategy:
        """Case-insensitive strategy lookup."""

        key = name.strip().lower() if isinstance(name, str) else None
        strategy = self._strategies.get(key) if key else None
        if strategy is None:
            raise UnknownStrategy(name, available=self._strategies.keys())
        return strategy

    def optimize(
        self,
        strategy_name: str,
        accounts: Sequence[DebtAccount],
        available_funds: Decimal | int | str,
        as_of_date: date | str | None = None,
    ) -> list[PaymentScheduleEntry]:
        """Allocate ``available_funds`` across ``accounts`` with the named strategy."""

        strategy = self.get_strategy(strategy_name)
        funds = to_money(available_funds, field="available_funds", allow_negative=False)
        when = date.today() if as_of_date is None else parse_date(as_of_date, field_name="as_of_date")
        snapshot = list(accounts)

        schedule = strategy.allocate(snapshot, funds, when)
        logger.debug(
            "Allocated funds",
            extra={
                "strategy": strategy.key.value,
                "available_funds": funds,
                "accounts": len(snapshot),
                "entries": len(schedule),
            },
        )
        return schedule

    def project(
        self, accounts: Sequence[DebtAccount], schedule: Sequence[PaymentScheduleEntry]
    ) -> ProjectionResult:
        """Project payoff horizon and interest saved for a schedule."""

        return project_savings(
            list(accounts), list(schedule), max_months=self.config.MAX_PROJECTION_MONTHS
        )

    def plan(
        self,
        strategy_name: str | None,
        accounts: Sequence[DebtAccount],
        available_funds: Decimal | int | str,
        as_of_date: date | str | None = None,
    ) -> RepaymentPlan:
        """Allocate then project on the same snapshot.

        ``strategy_name=None`` selects the configured default strategy.
        """

        name = self.config.DEFAULT_STRATEGY if strategy_name is None else strategy_name
        strategy = self.get_strategy(name)
        accounts = list(accounts)
        schedule = self.optimize(name, accounts, available_funds, as_of_date)
        projection = self.project(accounts, schedule)

        plan = RepaymentPlan(
            strategy=strategy.key.value,
            available_funds=to_money(available_funds, field="available_funds"),
            schedule=tuple(schedule),
            projection=projection,
        )
        logger.info(
            "Repayment plan computed",
            extra={
                "strategy": plan.strategy,
                "allocated": plan.allocated,
                "months_to_payoff": projection.months_to_payoff,
                "total_interest_saved": projection.total_interest_saved,
            },
        )
        return plan
