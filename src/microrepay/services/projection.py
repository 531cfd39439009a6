"""Month-by-month payoff projection against a minimum-payment baseline."""

# The schedule is treated as recurring behaviour: every simulated month the
# same entries are paid again until every balance is cleared.

from __future__ import annotations

from decimal import ROUND_CEILING, Decimal
from typing import Iterable, Sequence

from ..exceptions import InvalidInput, NonAmortizingMinimumPayment, PayoffHorizonExceeded
from ..logging_config import get_logger
from ..models.debt import DebtAccount, PaymentScheduleEntry, ProjectionResult
from ..money import ZERO, monthly_interest

DEFAULT_MAX_MONTHS = 600  # 50 years

logger = get_logger("services.projection")


def _validate_accounts(accounts: Sequence[DebtAccount]) -> None:
    seen: set[str] = set()
    for account in accounts:
        if account.current_balance < 0:
            raise InvalidInput(
                f"Account {account.account_id} has a negative balance {account.current_balance}",
                field="current_balance",
                value=account.current_balance,
                account_id=account.account_id,
            )
        if account.account_id in seen:
            raise InvalidInput(
                f"Duplicate account_id {account.account_id} in projection input",
                field="account_id",
                value=account.account_id,
                account_id=account.account_id,
            )
        seen.add(account.account_id)


def minimum_payment_baseline(accounts: Iterable[DebtAccount]) -> Decimal:
    """Total paid if every debt only ever receives its minimum payment.

    Uses the closed form ``minimum * ceil(balance / (minimum - interest))``
    with interest taken on the opening balance. Raises
    ``NonAmortizingMinimumPayment`` when a minimum payment cannot outpace
    its interest.
    """

    baseline_total = ZERO
    for account in accounts:
        if account.current_balance <= 0:
            continue

        interest = monthly_interest(account.current_balance, account.interest_rate)
        principal_reduction = account.minimum_payment - interest
        if principal_reduction <= 0:
            raise NonAmortizingMinimumPayment(
                account_id=account.account_id,
                minimum_payment=account.minimum_payment,
                monthly_interest=interest,
            )

        months = (account.current_balance / principal_reduction).to_integral_value(
            rounding=ROUND_CEILING
        )
        baseline_total += account.minimum_payment * months

    return baseline_total


def simulate_payoff(
    accounts: Sequence[DebtAccount],
    schedule: Sequence[PaymentScheduleEntry],
    *,
    max_months: int = DEFAULT_MAX_MONTHS,
) -> tuple[int, Decimal]:
    """Return (months_to_payoff, total_payments) for a recurring schedule."""

    remaining = {account.account_id: account.current_balance for account in accounts}
    rates = {account.account_id: account.interest_rate for account in accounts}

    unknown = sorted({entry.account_id for entry in schedule} - remaining.keys())
    if unknown:
        logger.warning(
            "Ignoring schedule entries for unknown accounts",
            extra={"account_ids": unknown},
        )

    months = 0
    total_payments = ZERO
    while any(balance > 0 for balance in remaining.values()):
        if months >= max_months:
            outstanding = {key: value for key, value in remaining.items() if value > 0}
            raise PayoffHorizonExceeded(max_months=max_months, remaining_balances=outstanding)
        months += 1

        for account_id, balance in remaining.items():
            if balance > 0:
                remaining[account_id] = balance + monthly_interest(balance, rates[account_id])

        for entry in schedule:
            balance = remaining.get(entry.account_id)
            if balance is None or balance <= 0:
                continue
            payment = min(entry.amount, balance)
            remaining[entry.account_id] = balance - payment
            total_payments += payment

    return months, total_payments


def project_savings(
    accounts: Sequence[DebtAccount],
    schedule: Sequence[PaymentScheduleEntry],
    *,
    max_months: int = DEFAULT_MAX_MONTHS,
) -> ProjectionResult:
    """Estimate payoff horizon and interest saved by following ``schedule``."""

    if max_months < 1:
        raise InvalidInput(
            f"max_months must be at least 1, got {max_months}", field="max_months", value=max_months
        )
    _validate_accounts(accounts)

    # Baseline first so a non-amortizing debt fails before the simulation runs.
    baseline_total = minimum_payment_baseline(accounts)
    months, total_payments = simulate_payoff(accounts, schedule, max_months=max_months)

    result = ProjectionResult(
        total_interest_saved=baseline_total - total_payments,
        months_to_payoff=months,
        total_payments=total_payments,
        baseline_total=baseline_total,
    )
    logger.debug("Projection complete", extra=result.as_dict())
    return result
