"""Tests for the cash plan builder and the queries on a built plan."""

from datetime import date, timedelta

import pytest

from cashgap.analyzers.cashplan import (
    NEW_ORDER_ID,
    build_cash_plan,
    evaluate_order_impact,
    first_gap_day,
    project_balance_on_date,
    with_candidate,
)
from cashgap.models.plan import CashEventType, CashPlanResult
from cashgap.models.records import (
    Account,
    AppSettings,
    IncomingPayment,
    OrderDraft,
    PlannedExpense,
    SupplierOrder,
)
from cashgap.parsing import round_money

TODAY = date(2026, 3, 10)


def _day(offset: int) -> str:
    return (TODAY + timedelta(days=offset)).isoformat()


def _accounts(*balances: float) -> list[Account]:
    return [Account(id=f"acc-{i}", name=f"Account {i}", balance=b) for i, b in enumerate(balances)]


def _inflow(amount: float, offset: int, kind: str = "fixed", id: str = "in-1") -> IncomingPayment:
    return IncomingPayment(id=id, counterparty="Ромашка", amount=amount, expected_date=_day(offset), kind=kind)


def _order(**overrides) -> SupplierOrder:
    data = {
        "id": "ord-1",
        "title": "Партия",
        "total_amount": 2000,
        "deposit_amount": 800,
        "deposit_paid": False,
        "deposit_date": _day(5),
        "due_date": _day(20),
        "currency": "RUB",
    }
    data.update(overrides)
    return SupplierOrder(**data)


def _scenario(**order_overrides) -> dict:
    return {
        "accounts": _accounts(1000),
        "inflows": [_inflow(500, 10)],
        "orders": [_order(**order_overrides)],
    }


class TestBuildPlanScenario:
    def test_running_balance(self) -> None:
        plan = build_cash_plan(**_scenario(), today=TODAY)

        assert plan.opening_balance == 1000
        assert [(d.date, d.balance) for d in plan.daily] == [
            (_day(5), 200),
            (_day(10), 700),
            (_day(20), -500),
        ]
        assert plan.min_balance == -500
        assert plan.cash_gap == 500

    def test_events_per_day(self) -> None:
        plan = build_cash_plan(**_scenario(), today=TODAY)

        amounts = [[e.amount for e in d.events] for d in plan.daily]
        assert amounts == [[-800], [500], [-1200]]
        assert plan.daily[1].events[0].type == CashEventType.INFLOW

    def test_cny_conversion(self) -> None:
        plan = build_cash_plan(**_scenario(currency="CNY"), settings=AppSettings(cny_rate=2), today=TODAY)

        amounts = [e.amount for e in plan.events if e.type == CashEventType.OUTFLOW]
        assert amounts == [-1600, -2400]
        assert plan.min_balance == 1000 - 1600 + 500 - 2400
        assert plan.cash_gap == 2500

    def test_paid_deposit_only_remainder(self) -> None:
        plan = build_cash_plan(**_scenario(deposit_paid=True), today=TODAY)

        outflows = [e for e in plan.events if e.type == CashEventType.OUTFLOW]
        assert [e.amount for e in outflows] == [-1200]
        assert plan.min_balance == 300
        assert plan.cash_gap == 0

    def test_stale_planned_inflow_excluded(self) -> None:
        plan = build_cash_plan(_accounts(1000), [_inflow(500, -1, kind="planned")], [], today=TODAY)

        assert plan.daily == []
        assert plan.min_balance == 1000

    def test_monthly_expenses_included(self) -> None:
        expense = PlannedExpense(id="exp-1", title="Аренда", amount=300, day_primary=15)
        plan = build_cash_plan(_accounts(1000), [], [], [expense], today=TODAY, horizon_days=60)

        assert [(d.date, d.balance) for d in plan.daily] == [("2026-03-15", 700), ("2026-04-15", 400)]
        assert plan.daily[0].events[0].source == "exp-1"


class TestBuildPlanWindow:
    def test_empty_plan(self) -> None:
        plan = build_cash_plan(_accounts(1000, 250.25), [], [], today=TODAY)

        assert plan.daily == []
        assert plan.opening_balance == 1250.25
        assert plan.min_balance == 1250.25
        assert plan.cash_gap == 0

    def test_empty_plan_negative_opening(self) -> None:
        plan = build_cash_plan(_accounts(-300), [], [], today=TODAY)

        assert plan.daily == []
        assert plan.min_balance == -300
        assert plan.cash_gap == 300

    def test_no_accounts(self) -> None:
        plan = build_cash_plan([], [_inflow(100, 1)], [], today=TODAY)
        assert plan.opening_balance == 0
        assert plan.daily[0].balance == 100

    def test_events_past_horizon_truncated(self) -> None:
        inflows = [_inflow(100, 5, id="a"), _inflow(100, 200, id="b")]
        plan = build_cash_plan(_accounts(0), inflows, [], today=TODAY, horizon_days=120)

        assert [d.date for d in plan.daily] == [_day(5)]

    def test_horizon_day_itself_included(self) -> None:
        plan = build_cash_plan(_accounts(0), [_inflow(100, 30)], [], today=TODAY, horizon_days=30)
        assert [d.date for d in plan.daily] == [_day(30)]

    def test_all_events_past_horizon(self) -> None:
        plan = build_cash_plan(_accounts(-50), [_inflow(100, 200)], [], today=TODAY, horizon_days=120)

        assert plan.daily == []
        assert plan.min_balance == -50
        assert plan.cash_gap == 50

    def test_past_deposit_starts_window_early(self) -> None:
        plan = build_cash_plan(**_scenario(deposit_date=_day(-7)), today=TODAY)
        assert plan.daily[0].date == _day(-7)

    def test_same_day_events_keep_input_order(self) -> None:
        inflows = [_inflow(100, 3, id="first"), _inflow(200, 3, id="second")]
        orders = [_order(id="o", deposit_date=_day(3), deposit_amount=50, total_amount=50)]
        plan = build_cash_plan(_accounts(0), inflows, orders, today=TODAY)

        [day] = plan.daily
        assert [e.source for e in day.events] == ["first", "second", "o"]
        assert day.balance == 250

    def test_min_balance_is_opening_when_only_inflows(self) -> None:
        plan = build_cash_plan(_accounts(1000), [_inflow(500, 3)], [], today=TODAY)
        assert plan.min_balance == 1000

    def test_defaults_to_real_today(self) -> None:
        today = date.today()
        inflow = IncomingPayment(id="x", counterparty="A", amount=10, expected_date=today)
        plan = build_cash_plan(_accounts(0), [inflow], [])
        assert plan.daily[0].date == today.isoformat()


class TestBuildPlanProperties:
    def test_idempotent(self) -> None:
        first = build_cash_plan(**_scenario(), today=TODAY)
        second = build_cash_plan(**_scenario(), today=TODAY)

        assert first == second
        assert first.to_json() == second.to_json()

    @pytest.mark.parametrize("balances", [(), (0.1, 0.2), (1000.005,), (-10, 5.5, 3.333)])
    def test_opening_balance_rounded_sum(self, balances) -> None:
        plan = build_cash_plan(_accounts(*balances), [], [], today=TODAY)
        assert plan.opening_balance == round_money(sum(balances))

    @pytest.mark.parametrize("opening", [-5000, -500, 0, 500, 5000])
    def test_cash_gap_matches_min_balance(self, opening) -> None:
        plan = build_cash_plan(_accounts(opening), [_inflow(500, 10)], [_order()], today=TODAY)

        assert plan.cash_gap >= 0
        assert (plan.cash_gap == 0) == (plan.min_balance >= 0)
        if plan.min_balance < 0:
            assert plan.cash_gap == -plan.min_balance

    def test_daily_list_is_sparse(self) -> None:
        expense = PlannedExpense(id="e", title="Связь", amount=100, day_primary=1, day_secondary=16, amount_primary=40)
        plan = build_cash_plan(**_scenario(), expenses=[expense], today=TODAY)

        assert plan.daily
        assert all(len(d.events) >= 1 for d in plan.daily)
        assert [d.date for d in plan.daily] == sorted({d.date for d in plan.daily})

    def test_inputs_not_mutated(self) -> None:
        scenario = _scenario()
        orders = scenario["orders"]
        before = [o.model_dump() for o in orders]
        build_cash_plan(**scenario, today=TODAY)
        assert [o.model_dump() for o in orders] == before
        assert len(orders) == 1

    def test_running_balance_rounded_only_in_snapshots(self) -> None:
        inflows = [_inflow(0.1, offset, id=str(offset)) for offset in range(1, 11)]
        plan = build_cash_plan(_accounts(0), inflows, [], today=TODAY)

        assert [d.balance for d in plan.daily] == [0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 1.0]


class TestOpeningEventMode:
    def test_extra_opening_entry(self) -> None:
        plan = build_cash_plan(**_scenario(), today=TODAY, include_opening_event=True)

        first = plan.daily[0]
        assert first.date == TODAY.isoformat()
        assert first.balance == 1000
        assert first.events[0].type == CashEventType.OPENING
        assert [d.balance for d in plan.daily[1:]] == [200, 700, -500]
        assert plan.min_balance == -500
        assert plan.cash_gap == 500

    def test_same_gap_as_default_mode(self) -> None:
        default = build_cash_plan(**_scenario(), today=TODAY)
        with_event = build_cash_plan(**_scenario(), today=TODAY, include_opening_event=True)

        assert len(with_event.daily) == len(default.daily) + 1
        assert with_event.cash_gap == default.cash_gap
        assert with_event.opening_balance == default.opening_balance

    def test_opens_before_past_dated_deposit(self) -> None:
        scenario = _scenario(deposit_date=_day(-7), total_amount=800, deposit_amount=800)
        default = build_cash_plan(**scenario, today=TODAY)
        with_event = build_cash_plan(**scenario, today=TODAY, include_opening_event=True)

        first = with_event.daily[0]
        assert first.date == _day(-7)
        assert [e.type for e in first.events] == [CashEventType.OPENING, CashEventType.OUTFLOW]
        assert first.balance == 200
        assert with_event.min_balance == default.min_balance == 200
        assert with_event.cash_gap == default.cash_gap == 0


class TestProjectBalanceOnDate:
    def test_exact_day(self) -> None:
        plan = build_cash_plan(**_scenario(), today=TODAY)
        assert project_balance_on_date(plan, _day(10)) == 700

    def test_accepts_date(self) -> None:
        plan = build_cash_plan(**_scenario(), today=TODAY)
        assert project_balance_on_date(plan, TODAY + timedelta(days=5)) == 200

    def test_missing_day_uses_last_entry(self) -> None:
        plan = build_cash_plan(**_scenario(), today=TODAY)

        # between entries and before the first one: still the last entry
        assert project_balance_on_date(plan, _day(12)) == -500
        assert project_balance_on_date(plan, _day(1)) == -500

    def test_empty_plan(self) -> None:
        assert project_balance_on_date(CashPlanResult(), "2026-03-10") is None


class TestFirstGapDay:
    def test_first_negative_day(self) -> None:
        plan = build_cash_plan(**_scenario(), today=TODAY)
        gap_day = first_gap_day(plan)
        assert gap_day is not None
        assert gap_day.date == _day(20)

    def test_no_gap(self) -> None:
        plan = build_cash_plan(**_scenario(deposit_paid=True), today=TODAY)
        assert first_gap_day(plan) is None


class TestEvaluateOrderImpact:
    def _draft(self, **overrides) -> OrderDraft:
        data = {
            "title": "Новая партия",
            "total_amount": 2000,
            "deposit_amount": 800,
            "deposit_date": _day(5),
            "due_date": _day(20),
        }
        data.update(overrides)
        return OrderDraft(**data)

    def test_candidate_opens_gap(self) -> None:
        impact = evaluate_order_impact(_accounts(1000), [_inflow(500, 10)], [], [], self._draft(), today=TODAY)

        assert impact.ok is False
        assert impact.min_balance == -500
        assert impact.cash_gap == 500

    def test_empty_candidate_is_ok(self) -> None:
        draft = self._draft(total_amount=0, deposit_amount=0)
        impact = evaluate_order_impact(_accounts(1000), [_inflow(500, 10)], [], [], draft, today=TODAY)

        assert impact.ok is True
        assert impact.cash_gap == 0
        assert impact.min_balance == 1000

    def test_existing_orders_counted(self) -> None:
        orders = [_order(total_amount=700, deposit_amount=0)]
        draft = self._draft(total_amount=500, deposit_amount=0)
        impact = evaluate_order_impact(_accounts(1000), [], orders, [], draft, today=TODAY)

        assert impact.min_balance == -200
        assert impact.cash_gap == 200

    def test_cny_candidate(self) -> None:
        draft = self._draft(currency="CNY", total_amount=100, deposit_amount=0)
        impact = evaluate_order_impact(
            _accounts(1000), [], [], [], draft, AppSettings(cny_rate=12), today=TODAY
        )
        assert impact.min_balance == -200

    def test_no_side_effects(self) -> None:
        orders = [_order()]
        evaluate_order_impact(_accounts(1000), [], orders, [], self._draft(), today=TODAY)
        assert [o.id for o in orders] == ["ord-1"]

    def test_saved_order_as_candidate_gets_placeholder_id(self) -> None:
        saved = [_order()]
        candidate = _order(id="ord-77", total_amount=100, deposit_amount=0)
        merged = with_candidate(saved, candidate)

        assert [o.id for o in merged] == ["ord-1", NEW_ORDER_ID]
        assert [o.id for o in saved] == ["ord-1"]

        plan = build_cash_plan(_accounts(1000), [], merged, today=TODAY)
        sources = {e.source for e in plan.events}
        assert sources == {"ord-1", "new-order"}
        assert "ord-77" not in sources

        impact = evaluate_order_impact(_accounts(1000), [], saved, [], candidate, today=TODAY)
        assert impact.min_balance == plan.min_balance
