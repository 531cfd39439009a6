"""Allocation strategies for distributing round-up funds across debts.

Every strategy reduces to the same greedy walk over an ordered account list;
strategies differ only in how they order (and, for hybrid, partition) the
accounts before walking.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Iterable, Protocol, Sequence

from ..exceptions import InvalidInput
from ..models.debt import DebtAccount, PaymentScheduleEntry, StrategyDescriptor
from ..money import ZERO, round_money, to_money, to_rate

HIGH_INTEREST_THRESHOLD = Decimal("0.15")  # 15% APR
LOW_BALANCE_THRESHOLD = Decimal("1000.00")
HIGH_INTEREST_SHARE = Decimal("0.70")


class Strategy(str, Enum):
    """The closed set of allocation strategies."""

    AVALANCHE = "avalanche"
    SNOWBALL = "snowball"
    HYBRID = "hybrid"


class AllocationStrategy(Protocol):
    """Maps a debt snapshot and a fund budget to a payment schedule."""

    key: Strategy
    label: str
    description: str

    def allocate(
        self, accounts: Sequence[DebtAccount], available_funds: Decimal, as_of_date: date
    ) -> list[PaymentScheduleEntry]:  # pragma: no cover - interface
        ...


def describe(strategy: AllocationStrategy) -> StrategyDescriptor:
    return StrategyDescriptor(
        name=strategy.key.value, label=strategy.label, description=strategy.description
    )


def validate_allocation_inputs(accounts: Iterable[DebtAccount], available_funds: Decimal) -> None:
    """Reject negative funds or balances before any allocation work."""

    if available_funds < 0:
        raise InvalidInput(
            f"available_funds must not be negative, got {available_funds}",
            field="available_funds",
            value=available_funds,
        )
    for account in accounts:
        if account.current_balance < 0:
            raise InvalidInput(
                f"Account {account.account_id} has a negative balance {account.current_balance}",
                field="current_balance",
                value=account.current_balance,
                account_id=account.account_id,
            )


def greedy_allocate(
    ordered_accounts: Iterable[DebtAccount],
    budget: Decimal,
    as_of_date: date,
    *,
    first_priority: int = 1,
    balances: dict[str, Decimal] | None = None,
) -> list[PaymentScheduleEntry]:
    """Pay each account in order until the budget runs out.

    Each account receives ``min(remaining, balance)``; accounts with nothing
    to pay are skipped without consuming a priority. When ``balances`` is
    given it supplies (and receives) per-account balances in place of the
    snapshot values, so consecutive runs see each other's payments.
    """

    schedule: list[PaymentScheduleEntry] = []
    remaining = budget

    for account in ordered_accounts:
        if remaining <= 0:
            break

        balance = account.current_balance
        if balances is not None:
            balance = balances.get(account.account_id, balance)

        payment = min(remaining, balance)
        if payment <= 0:
            continue

        schedule.append(
            PaymentScheduleEntry(
                account_id=account.account_id,
                amount=payment,
                date=as_of_date,
                priority=first_priority + len(schedule),
            )
        )
        remaining -= payment
        if balances is not None:
            balances[account.account_id] = balance - payment

    return schedule


class AvalancheStrategy:
    """Highest interest rate first."""

    key = Strategy.AVALANCHE
    label = "Debt Avalanche"
    description = "Prioritizes debts with highest interest rates to minimize total interest paid"

    def allocate(
        self, accounts: Sequence[DebtAccount], available_funds: Decimal, as_of_date: date
    ) -> list[PaymentScheduleEntry]:
        validate_allocation_inputs(accounts, available_funds)
        # sorted() is stable, so equal rates keep their input order.
        ordered = sorted(accounts, key=lambda a: a.interest_rate, reverse=True)
        return greedy_allocate(ordered, available_funds, as_of_date)


class SnowballStrategy:
    """Smallest balance first."""

    key = Strategy.SNOWBALL
    label = "Debt Snowball"
    description = "Prioritizes smallest debts first to build momentum"

    def allocate(
        self, accounts: Sequence[DebtAccount], available_funds: Decimal, as_of_date: date
    ) -> list[PaymentScheduleEntry]:
        validate_allocation_inputs(accounts, available_funds)
        ordered = sorted(accounts, key=lambda a: a.current_balance)
        return greedy_allocate(ordered, available_funds, as_of_date)


class HybridStrategy:
    """Split funds between a high-interest bucket and a low-balance bucket.

    The high-interest bucket (``rate >= high_interest_threshold``, highest
    rate first) receives ``high_interest_share`` of the funds rounded to the
    cent; the low-balance bucket (``balance <= low_balance_threshold``,
    smallest first) receives the rest. Each bucket is walked independently and
    leftover funds are not moved between buckets.

    An account that qualifies for both buckets can appear twice in the
    schedule. The low-balance walk sees the balance left after the
    high-interest walk, so the two entries never exceed the account balance.
    """

    key = Strategy.HYBRID
    label = "Hybrid Strategy"
    description = "Combines avalanche and snowball approaches based on debt characteristics"

    def __init__(
        self,
        *,
        high_interest_threshold: Decimal | str | float = HIGH_INTEREST_THRESHOLD,
        low_balance_threshold: Decimal | str | float = LOW_BALANCE_THRESHOLD,
        high_interest_share: Decimal | str | float = HIGH_INTEREST_SHARE,
    ) -> None:
        self.high_interest_threshold = to_rate(high_interest_threshold, field="high_interest_threshold")
        self.low_balance_threshold = to_money(low_balance_threshold, field="low_balance_threshold")
        self.high_interest_share = to_rate(high_interest_share, field="high_interest_share")
        if not ZERO <= self.high_interest_share <= 1:
            raise InvalidInput(
                f"high_interest_share must be between 0 and 1, got {self.high_interest_share}",
                field="high_interest_share",
                value=self.high_interest_share,
            )

    def split_funds(self, available_funds: Decimal) -> tuple[Decimal, Decimal]:
        """Return (high_interest_budget, low_balance_budget); they sum to the funds."""

        high = round_money(available_funds * self.high_interest_share)
        return high, available_funds - high

    def allocate(
        self, accounts: Sequence[DebtAccount], available_funds: Decimal, as_of_date: date
    ) -> list[PaymentScheduleEntry]:
        validate_allocation_inputs(accounts, available_funds)

        high_interest = sorted(
            (a for a in accounts if a.interest_rate >= self.high_interest_threshold),
            key=lambda a: a.interest_rate,
            reverse=True,
        )
        low_balance = sorted(
            (a for a in accounts if a.current_balance <= self.low_balance_threshold),
            key=lambda a: a.current_balance,
        )
        high_budget, low_budget = self.split_funds(available_funds)

        balances: dict[str, Decimal] = {}
        schedule = greedy_allocate(high_interest, high_budget, as_of_date, balances=balances)
        schedule += greedy_allocate(
            low_balance,
            low_budget,
            as_of_date,
            first_priority=len(schedule) + 1,
            balances=balances,
        )
        return schedule
