"""Pytest configuration and shared fixtures for MicroRepay tests.

Provides debt-account factories and money helpers for exercising the
allocation strategies, the projection calculator and the engine facade.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from microrepay.config import BaseConfig
from microrepay.engine import OptimizationEngine
from microrepay.models import DebtAccount

AS_OF = date(2024, 3, 1)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep developer .env values and data dirs out of the tests."""

    for name in (
        "MICROREPAY_DEV_MODE",
        "MICROREPAY_LOG_LEVEL",
        "MICROREPAY_DEFAULT_STRATEGY",
        "MICROREPAY_MAX_PROJECTION_MONTHS",
        "MICROREPAY_HYBRID_HIGH_INTEREST_THRESHOLD",
        "MICROREPAY_HYBRID_LOW_BALANCE_THRESHOLD",
        "MICROREPAY_HYBRID_HIGH_INTEREST_SHARE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("MICROREPAY_DATA_DIR", str(tmp_path / "instance"))


@pytest.fixture
def account_factory():
    """Factory for DebtAccount snapshots with sensible defaults.

    Usage:
        account = account_factory("A", balance="1000", rate="0.05")
    """

    def _create(
        account_id: str,
        *,
        balance="1000.00",
        rate="0.10",
        minimum_payment="50.00",
        creditor_id: str = "creditor",
        due_date=None,
    ) -> DebtAccount:
        return DebtAccount(
            id=f"{creditor_id}-{account_id}",
            creditor_id=creditor_id,
            account_id=account_id,
            current_balance=balance,
            interest_rate=rate,
            minimum_payment=minimum_payment,
            due_date=due_date,
        )

    return _create


@pytest.fixture
def three_accounts(account_factory):
    """Three debts where rate order, balance order and input order all differ."""

    return [
        account_factory("card", balance="2500.00", rate="0.2499", minimum_payment="75.00"),
        account_factory("store", balance="400.00", rate="0.12", minimum_payment="25.00"),
        account_factory("auto", balance="9000.00", rate="0.065", minimum_payment="250.00"),
    ]


@pytest.fixture
def config():
    return BaseConfig()


@pytest.fixture
def engine(config):
    return OptimizationEngine(config)


def money(value) -> Decimal:
    """Shorthand for a cent-precise Decimal in assertions."""

    return Decimal(str(value)).quantize(Decimal("0.01"))


def assert_money_equal(actual: Decimal, expected, tolerance: str = "0.01"):
    """Assert two amounts agree within ``tolerance`` (one cent by default).

    Args:
        actual: Actual value
        expected: Expected value (anything Decimal(str(x)) accepts)
        tolerance: Maximum allowed difference

    Raises:
        AssertionError: If values differ by more than tolerance
    """
    expected_value = Decimal(str(expected))
    diff = abs(Decimal(actual) - expected_value)
    assert diff <= Decimal(tolerance), (
        f"Expected {expected_value}, got {actual} (diff: {diff}, tolerance: {tolerance})"
    )
