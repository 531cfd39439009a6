"""Tests for the allocation strategies (avalanche, snowball, hybrid).

These tests verify the core allocation logic, including:
- Ordering rules for each strategy (rate, balance, hybrid buckets)
- The shared greedy walk (caps, skips, priorities)
- Input validation and boundaries
- Hybrid fund split and double-entry behaviour
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from microrepay.exceptions import InvalidInput
from microrepay.services.strategies import (
    AvalancheStrategy,
    HybridStrategy,
    SnowballStrategy,
    greedy_allocate,
)
from tests.conftest import AS_OF, money

ALL_STRATEGIES = [AvalancheStrategy(), SnowballStrategy(), HybridStrategy()]


@pytest.fixture
def two_accounts(account_factory):
    return [
        account_factory("A", balance="1000.00", rate="0.05"),
        account_factory("B", balance="500.00", rate="0.20"),
    ]


def _shape(schedule):
    return [(entry.account_id, entry.amount, entry.priority) for entry in schedule]


class TestGreedyAllocate:
    """Tests for the greedy walk shared by every strategy."""

    def test_pays_in_order_until_budget_runs_out(self, account_factory):
        accounts = [
            account_factory("x", balance="100.00"),
            account_factory("y", balance="250.00"),
            account_factory("z", balance="80.00"),
        ]

        schedule = greedy_allocate(accounts, money(300), AS_OF)

        assert _shape(schedule) == [("x", money(100), 1), ("y", money(200), 2)]
        assert all(entry.date == AS_OF for entry in schedule)

    def test_zero_balance_accounts_do_not_consume_priority(self, account_factory):
        accounts = [
            account_factory("paid", balance="0.00"),
            account_factory("open", balance="40.00"),
        ]

        schedule = greedy_allocate(accounts, money(100), AS_OF)

        assert _shape(schedule) == [("open", money(40), 1)]

    def test_first_priority_offsets_numbering(self, account_factory):
        schedule = greedy_allocate(
            [account_factory("x", balance="10.00")], money(10), AS_OF, first_priority=4
        )
        assert schedule[0].priority == 4


class TestAvalancheStrategy:
    """Tests for highest-rate-first allocation."""

    def test_example_caps_payment_at_remaining_funds(self, two_accounts):
        """B has the highest rate; it takes all 300 and A receives nothing."""
        schedule = AvalancheStrategy().allocate(two_accounts, money(300), AS_OF)
        assert _shape(schedule) == [("B", money(300), 1)]

    def test_orders_by_rate_descending(self, three_accounts):
        schedule = AvalancheStrategy().allocate(three_accounts, money(3000), AS_OF)

        assert _shape(schedule) == [
            ("card", money(2500), 1),
            ("store", money(400), 2),
            ("auto", money(100), 3),
        ]

    def test_equal_rates_keep_input_order(self, account_factory):
        accounts = [
            account_factory("first", balance="50.00", rate="0.18"),
            account_factory("second", balance="50.00", rate="0.18"),
        ]

        schedule = AvalancheStrategy().allocate(accounts, money(60), AS_OF)

        assert _shape(schedule) == [("first", money(50), 1), ("second", money(10), 2)]

    def test_first_entry_has_highest_rate_among_open_debts(self, account_factory):
        accounts = [
            account_factory("closed", balance="0.00", rate="0.35"),
            account_factory("low", balance="300.00", rate="0.08"),
            account_factory("high", balance="900.00", rate="0.27"),
        ]

        schedule = AvalancheStrategy().allocate(accounts, money(100), AS_OF)

        assert schedule[0].account_id == "high"


class TestSnowballStrategy:
    """Tests for smallest-balance-first allocation."""

    def test_example_matches_avalanche_when_orders_coincide(self, two_accounts):
        schedule = SnowballStrategy().allocate(two_accounts, money(300), AS_OF)
        assert _shape(schedule) == [("B", money(300), 1)]

    def test_orders_by_balance_ascending(self, three_accounts):
        schedule = SnowballStrategy().allocate(three_accounts, money(3000), AS_OF)

        assert _shape(schedule) == [
            ("store", money(400), 1),
            ("card", money(2500), 2),
            ("auto", money(100), 3),
        ]

    def test_differs_from_avalanche_on_three_accounts(self, three_accounts):
        avalanche = AvalancheStrategy().allocate(three_accounts, money(500), AS_OF)
        snowball = SnowballStrategy().allocate(three_accounts, money(500), AS_OF)

        assert _shape(avalanche) == [("card", money(500), 1)]
        assert _shape(snowball) == [("store", money(400), 1), ("card", money(100), 2)]

    def test_first_entry_has_smallest_open_balance(self, account_factory):
        accounts = [
            account_factory("big", balance="5000.00"),
            account_factory("zero", balance="0.00"),
            account_factory("small", balance="120.00"),
        ]

        schedule = SnowballStrategy().allocate(accounts, money(50), AS_OF)

        assert schedule[0].account_id == "small"


class TestHybridStrategy:
    """Tests for the 70/30 high-interest / low-balance split."""

    def test_splits_funds_between_buckets(self, three_accounts):
        schedule = HybridStrategy().allocate(three_accounts, money(1000), AS_OF)

        # card is the only high-interest debt, store the only low-balance one
        assert _shape(schedule) == [("card", money(700), 1), ("store", money(300), 2)]

    def test_split_always_sums_to_funds(self):
        high, low = HybridStrategy().split_funds(money("10.01"))

        assert high == money("7.01")
        assert low == money("3.00")
        assert high + low == money("10.01")

    def test_split_rounds_half_to_even(self):
        high, low = HybridStrategy().split_funds(money("0.05"))
        # 0.035 rounds to the even cent
        assert (high, low) == (money("0.04"), money("0.01"))

    def test_account_in_both_buckets_can_receive_two_entries(self, account_factory):
        accounts = [account_factory("both", balance="500.00", rate="0.20")]

        schedule = HybridStrategy().allocate(accounts, money(200), AS_OF)

        assert _shape(schedule) == [("both", money(140), 1), ("both", money(60), 2)]

    def test_second_bucket_sees_balance_left_by_first(self, account_factory):
        accounts = [account_factory("both", balance="500.00", rate="0.20")]

        schedule = HybridStrategy().allocate(accounts, money(1000), AS_OF)

        assert _shape(schedule) == [("both", money(500), 1)]
        assert sum(entry.amount for entry in schedule) <= accounts[0].current_balance

    def test_unmatched_debts_leave_funds_unallocated(self, account_factory):
        accounts = [account_factory("mortgage", balance="150000.00", rate="0.045")]
        assert HybridStrategy().allocate(accounts, money(250), AS_OF) == []

    def test_leftover_high_interest_budget_is_not_reassigned(self, account_factory):
        accounts = [
            account_factory("card", balance="100.00", rate="0.22"),
            account_factory("loan", balance="800.00", rate="0.07"),
        ]

        schedule = HybridStrategy().allocate(accounts, money(1000), AS_OF)

        # card takes 100 of its 700; loan only gets the 300 low-balance share
        assert _shape(schedule) == [("card", money(100), 1), ("loan", money(300), 2)]

    def test_custom_thresholds(self, account_factory):
        strategy = HybridStrategy(
            high_interest_threshold="0.10", low_balance_threshold="50", high_interest_share="0.5"
        )
        accounts = [
            account_factory("mid", balance="400.00", rate="0.11"),
            account_factory("tiny", balance="40.00", rate="0.03"),
        ]

        schedule = strategy.allocate(accounts, money(100), AS_OF)

        assert _shape(schedule) == [("mid", money(50), 1), ("tiny", money(40), 2)]

    def test_share_outside_unit_interval_rejected(self):
        with pytest.raises(InvalidInput):
            HybridStrategy(high_interest_share="1.5")


@pytest.mark.parametrize("strategy", ALL_STRATEGIES, ids=lambda s: s.key.value)
class TestCommonStrategyBehaviour:
    """Boundaries, validation and invariants shared by every strategy."""

    def test_zero_funds_returns_empty_schedule(self, strategy, three_accounts):
        assert strategy.allocate(three_accounts, money(0), AS_OF) == []

    def test_no_accounts_returns_empty_schedule(self, strategy):
        assert strategy.allocate([], money(100), AS_OF) == []

    def test_negative_funds_rejected(self, strategy, three_accounts):
        with pytest.raises(InvalidInput) as excinfo:
            strategy.allocate(three_accounts, money("-0.01"), AS_OF)
        assert excinfo.value.field == "available_funds"

    def test_negative_balance_rejected(self, strategy, account_factory):
        accounts = [account_factory("ok"), account_factory("bad", balance="-5.00")]

        with pytest.raises(InvalidInput) as excinfo:
            strategy.allocate(accounts, money(100), AS_OF)

        assert excinfo.value.account_id == "bad"

    @pytest.mark.parametrize("funds", ["0.01", "99.99", "450", "2900", "50000"])
    def test_schedule_never_exceeds_funds_or_balances(self, strategy, three_accounts, funds):
        schedule = strategy.allocate(three_accounts, money(funds), AS_OF)

        total = sum((entry.amount for entry in schedule), Decimal("0"))
        assert total <= money(funds)
        assert total <= sum(account.current_balance for account in three_accounts)
        assert all(entry.amount > 0 for entry in schedule)
        assert [entry.priority for entry in schedule] == list(range(1, len(schedule) + 1))

    def test_same_inputs_give_same_schedule(self, strategy, three_accounts):
        first = strategy.allocate(three_accounts, money(1234), AS_OF)
        second = strategy.allocate(three_accounts, money(1234), AS_OF)
        assert first == second

    def test_input_list_is_not_reordered(self, strategy, three_accounts):
        before = list(three_accounts)
        strategy.allocate(three_accounts, money(1000), AS_OF)
        assert three_accounts == before
