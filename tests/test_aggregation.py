#!/usr/bin/env python3
"""Tests for the aggregation engine."""

from datetime import date

import pytest

from ledger import (
    ALL_VEHICLES,
    Category,
    Fueling,
    Kind,
    ReportWindow,
    Transaction,
    TransactionStatus,
    Vehicle,
    aggregate,
)
from ledger.aggregation import (
    as_number,
    clamp_trailing_months,
    average_consumption,
    category_breakdown,
    cost_per_km,
    kind_totals,
    km_driven,
    percent_change,
    safe_ratio,
    scope_transactions,
    trailing_series,
    vehicle_breakdown,
    vehicle_consumption,
)

MARCH = ReportWindow.for_month(2025, 3)


def tx(id, kind, amount, date, vehicle="truck-1", category="maintenance",
       status=TransactionStatus.SETTLED):
    return Transaction(id, vehicle, category, kind, amount, date, status=status)


def fu(id, odometer, liters, total=100.0, date="2025-03-10", vehicle="truck-1"):
    return Fueling(id, vehicle, liters, total, odometer, date)


# =============================================================================
# Numeric helpers
# =============================================================================


class TestNumericHelpers:
    """Tests for as_number, safe_ratio and percent_change."""

    def test_as_number(self):
        assert as_number(3) == 3
        assert as_number(2.5) == 2.5
        assert as_number("3") is None
        assert as_number(None) is None
        assert as_number(True) is None
        assert as_number(float("inf")) is None

    def test_safe_ratio(self):
        assert safe_ratio(10, 4) == 2.5
        assert safe_ratio(10, 0) == 0.0
        assert safe_ratio(10, -1) == 0.0
        assert safe_ratio(10, 0, default=None) is None

    def test_percent_change(self):
        assert percent_change(150, 100) == 50.0
        assert percent_change(50, 100) == -50.0
        assert percent_change(100, 300) == -66.7

    def test_percent_change_previous_zero(self):
        """No previous total reports 0, never infinity."""
        assert percent_change(150, 0) == 0


# =============================================================================
# Totals
# =============================================================================


class TestKindTotals:
    """Tests for kind_totals."""

    def test_splits_by_status(self):
        records = [
            tx("a", Kind.INCOME, 100, "2025-03-01"),
            tx("b", Kind.INCOME, 40, "2025-03-02", status=TransactionStatus.SCHEDULED),
            tx("c", Kind.EXPENSE, 70, "2025-03-03"),
        ]
        totals = kind_totals(records, Kind.INCOME)
        assert totals.settled == 100
        assert totals.scheduled == 40
        assert totals.total == totals.settled + totals.scheduled

    def test_skips_non_numeric_amounts(self):
        records = [
            tx("a", Kind.EXPENSE, 100, "2025-03-01"),
            tx("b", Kind.EXPENSE, "n/a", "2025-03-02"),
            tx("c", Kind.EXPENSE, None, "2025-03-03"),
        ]
        assert kind_totals(records, Kind.EXPENSE).total == 100

    def test_empty(self):
        totals = kind_totals([], Kind.EXPENSE)
        assert totals.total == 0


class TestScope:
    """Tests for window and vehicle scoping."""

    def test_window_and_vehicle(self):
        records = [
            tx("in", Kind.EXPENSE, 1, "2025-03-31"),
            tx("out", Kind.EXPENSE, 1, "2025-04-01"),
            tx("other", Kind.EXPENSE, 1, "2025-03-15", vehicle="car-1"),
        ]
        assert [t.id for t in scope_transactions(records, MARCH, "truck-1")] == ["in"]
        assert [t.id for t in scope_transactions(records, MARCH, ALL_VEHICLES)] == ["in", "other"]
        assert len(scope_transactions(records, MARCH, None)) == 2


# =============================================================================
# Consumption and cost per km
# =============================================================================


class TestVehicleConsumption:
    """Tests for vehicle_consumption."""

    def test_two_fuelings(self, truck):
        history = [fu("a", 10000, 5), fu("b", 10500, 25)]
        result = vehicle_consumption(truck, history)
        assert result.distance == 500
        assert result.liters == 25
        assert result.km_per_liter == 20.0

    def test_order_by_odometer_not_input_order(self, truck):
        history = [fu("b", 10500, 25), fu("a", 10000, 5)]
        assert vehicle_consumption(truck, history).km_per_liter == 20.0

    def test_single_fueling_excluded(self, truck):
        assert vehicle_consumption(truck, [fu("a", 10000, 40)]) is None

    def test_no_fuelings_excluded(self, truck):
        assert vehicle_consumption(truck, []) is None

    def test_other_vehicles_ignored(self, truck):
        history = [fu("a", 10000, 5), fu("b", 10500, 25, vehicle="car-1")]
        assert vehicle_consumption(truck, history) is None

    def test_zero_liters_excluded(self, truck):
        history = [fu("a", 10000, 5), fu("b", 10500, 0)]
        assert vehicle_consumption(truck, history) is None


class TestAverageConsumption:
    """Tests for average_consumption."""

    def test_empty_is_zero(self):
        assert average_consumption([]) == 0.0

    def test_mean_of_vehicles(self, truck):
        car = Vehicle("car-1", None, "Honda", "Civic", 2021)
        history = [
            fu("a", 10000, 5), fu("b", 10500, 25),
            fu("c", 0, 10, vehicle="car-1"), fu("d", 300, 30, vehicle="car-1"),
        ]
        results = [vehicle_consumption(truck, history), vehicle_consumption(car, history)]
        assert average_consumption(results) == pytest.approx(15.0)


class TestCostPerKm:
    """Tests for km_driven and cost_per_km."""

    def test_km_driven(self):
        assert km_driven([fu("a", 10000, 5), fu("b", 10800, 25)]) == 800

    def test_km_driven_needs_two(self):
        assert km_driven([fu("a", 10000, 5)]) == 0

    def test_cost_per_km(self, truck):
        txs = [tx("a", Kind.EXPENSE, 200, "2025-03-05"),
               tx("b", Kind.EXPENSE, 999, "2025-03-06", status=TransactionStatus.SCHEDULED)]
        fus = [fu("a", 10000, 5), fu("b", 10400, 25)]
        km, expenses, ratio = cost_per_km(txs, fus, [truck])
        assert km == 400
        assert expenses == 200
        assert ratio == 0.5

    def test_zero_distance_reports_zero(self, truck):
        txs = [tx("a", Kind.EXPENSE, 200, "2025-03-05")]
        km, expenses, ratio = cost_per_km(txs, [fu("a", 10000, 5)], [truck])
        assert km == 0
        assert ratio == 0.0


# =============================================================================
# Breakdowns
# =============================================================================


class TestCategoryBreakdown:
    """Tests for category_breakdown."""

    def test_omits_empty_categories(self, maintenance):
        insurance = Category("insurance", "Insurance", Kind.EXPENSE)
        records = [tx("a", Kind.EXPENSE, 100, "2025-03-05")]
        rows = category_breakdown(records, [maintenance, insurance], Kind.EXPENSE)
        assert [r.category_id for r in rows] == ["maintenance"]

    def test_sorted_by_total_descending(self, maintenance):
        insurance = Category("insurance", "Insurance", Kind.EXPENSE)
        records = [
            tx("a", Kind.EXPENSE, 100, "2025-03-05"),
            tx("b", Kind.EXPENSE, 300, "2025-03-05", category="insurance"),
        ]
        rows = category_breakdown(records, [maintenance, insurance], Kind.EXPENSE)
        assert [r.name for r in rows] == ["Insurance", "Maintenance"]

    def test_only_matching_kind(self, maintenance):
        records = [tx("a", Kind.INCOME, 100, "2025-03-05")]
        assert category_breakdown(records, [maintenance], Kind.EXPENSE) == []

    def test_status_split_and_count(self, maintenance):
        records = [
            tx("a", Kind.EXPENSE, 100, "2025-03-05"),
            tx("b", Kind.EXPENSE, 25, "2025-03-06", status=TransactionStatus.SCHEDULED),
        ]
        (row,) = category_breakdown(records, [maintenance], Kind.EXPENSE)
        assert row.settled == 100
        assert row.scheduled == 25
        assert row.total == 125
        assert row.count == 2


class TestVehicleBreakdown:
    """Tests for vehicle_breakdown."""

    def test_combines_settled_expenses_and_fuel(self, truck):
        records = [
            tx("a", Kind.EXPENSE, 100, "2025-03-05"),
            tx("b", Kind.EXPENSE, 500, "2025-03-05", status=TransactionStatus.SCHEDULED),
            tx("c", Kind.INCOME, 900, "2025-03-05"),
        ]
        (row,) = vehicle_breakdown(records, [fu("a", 10000, 40, total=200)], [truck])
        assert row.expenses == 100
        assert row.fuelings == 200
        assert row.total == 300

    def test_omits_idle_vehicles(self, truck):
        car = Vehicle("car-1", None, "Honda", "Civic", 2021)
        rows = vehicle_breakdown([tx("a", Kind.EXPENSE, 100, "2025-03-05")], [], [truck, car])
        assert [r.vehicle_id for r in rows] == ["truck-1"]


class TestTrailingSeries:
    """Tests for trailing_series."""

    def test_six_months_oldest_first(self):
        records = [
            tx("a", Kind.INCOME, 300, "2025-01-15"),
            tx("b", Kind.EXPENSE, 120, "2025-03-02"),
            tx("c", Kind.EXPENSE, 80, "2024-09-30"),
        ]
        points = trailing_series(records, date(2025, 3, 20), 6)
        assert [p.label for p in points] == [
            "Oct/24", "Nov/24", "Dec/24", "Jan/25", "Feb/25", "Mar/25",
        ]
        assert points[3].income == 300
        assert points[-1].expense == 120
        assert points[-1].net == -120
        assert sum(p.expense for p in points) == 120

    def test_vehicle_filter(self):
        records = [tx("a", Kind.INCOME, 300, "2025-03-15", vehicle="car-1")]
        points = trailing_series(records, date(2025, 3, 20), 1, "truck-1")
        assert points[0].income == 0

    @pytest.mark.parametrize("months, expected", [
        (None, 6), (0, 6), (-3, 6), (1, 1), (12, 12), (120, 120), (121, 120), (30000, 120),
    ])
    def test_clamp_trailing_months(self, months, expected):
        assert clamp_trailing_months(months) == expected

    def test_longest_series_spans_ten_years(self):
        points = trailing_series([], date(2025, 3, 20), clamp_trailing_months(30000))
        assert len(points) == 120
        assert points[0].label == "Apr/15"


# =============================================================================
# Full summary
# =============================================================================


class TestAggregate:
    """Tests for aggregate."""

    def test_march_scenario(self, march_fleet, march_today):
        s = march_fleet.summarize(MARCH, today=march_today)
        assert s.income.total == 0
        assert s.expense.total == 150
        assert s.fueling_total == 200
        assert s.fueling_liters == 40
        assert [(r.name, r.total) for r in s.by_vehicle] == [("Work Truck", 350)]
        (maintenance_row,) = s.expense_by_category
        assert maintenance_row.name == "Maintenance"
        assert maintenance_row.total == 150
        assert maintenance_row.count == 2
        assert s.income_by_category == []

    def test_march_scenario_derived_figures(self, march_fleet, march_today):
        s = march_fleet.summarize(MARCH, today=march_today)
        assert s.balance == -150
        assert s.net_after_fuel == -350
        assert s.expense_change == 0
        assert s.average_consumption == 0.0
        assert s.consumption == []
        assert s.cost_per_km == 0.0
        assert s.vehicle_count == 1
        assert s.trailing[-1].expense == 150

    def test_deterministic(self, march_fleet, march_today):
        first = march_fleet.summarize(MARCH, today=march_today)
        second = march_fleet.summarize(MARCH, today=march_today)
        assert first == second

    def test_balance_and_status_identities(self, truck, maintenance):
        freight = Category("freight", "Freight", Kind.INCOME)
        records = [
            tx("a", Kind.INCOME, 500, "2025-03-01", category="freight"),
            tx("b", Kind.INCOME, 250, "2025-03-02", category="freight",
               status=TransactionStatus.SCHEDULED),
            tx("c", Kind.EXPENSE, 120, "2025-03-03"),
            tx("d", Kind.EXPENSE, 30, "2025-03-04", status=TransactionStatus.SCHEDULED),
        ]
        s = aggregate(records, [], [truck], [maintenance, freight], MARCH,
                      today=date(2025, 3, 31))
        assert s.balance == s.income.total - s.expense.total
        assert s.income.scheduled + s.income.settled == s.income.total == 750
        assert s.expense.scheduled + s.expense.settled == s.expense.total == 150

    def test_previous_month_change(self, truck, maintenance):
        records = [
            tx("a", Kind.EXPENSE, 100, "2025-02-10"),
            tx("b", Kind.EXPENSE, 150, "2025-03-10"),
        ]
        s = aggregate(records, [], [truck], [maintenance], MARCH, today=date(2025, 3, 31))
        assert s.previous_expense == 100
        assert s.expense_change == 50.0

    def test_consumption_uses_full_history(self, truck, maintenance):
        fuelings = [fu("a", 10000, 5, date="2024-11-01"), fu("b", 10500, 25, date="2025-03-10")]
        s = aggregate([], fuelings, [truck], [maintenance], MARCH, today=date(2025, 3, 31))
        assert s.average_consumption == 20.0
        assert s.fueling_count == 1
        assert s.km_driven == 0

    def test_single_fueling_vehicle_excluded_from_average(self, truck, maintenance):
        car = Vehicle("car-1", None, "Honda", "Civic", 2021)
        fuelings = [
            fu("a", 10000, 5), fu("b", 10500, 25),
            fu("c", 500, 30, vehicle="car-1"),
        ]
        s = aggregate([], fuelings, [truck, car], [maintenance], MARCH, today=date(2025, 3, 31))
        assert [c.vehicle_id for c in s.consumption] == ["truck-1"]
        assert s.average_consumption == 20.0

    def test_vehicle_filter(self, truck, maintenance):
        car = Vehicle("car-1", None, "Honda", "Civic", 2021)
        records = [
            tx("a", Kind.EXPENSE, 100, "2025-03-05"),
            tx("b", Kind.EXPENSE, 40, "2025-03-05", vehicle="car-1"),
        ]
        s = aggregate(records, [], [truck, car], [maintenance], MARCH,
                      vehicle_filter="car-1", today=date(2025, 3, 31))
        assert s.expense.total == 40
        assert s.vehicle_count == 1
        assert [r.vehicle_id for r in s.by_vehicle] == ["car-1"]

    def test_unknown_vehicle_reference_does_not_abort(self, truck, maintenance):
        records = [tx("a", Kind.EXPENSE, 100, "2025-03-05", vehicle="ghost")]
        s = aggregate(records, [], [truck], [maintenance], MARCH, today=date(2025, 3, 31))
        assert s.expense.total == 100
        assert s.by_vehicle == []

    def test_does_not_mutate_inputs(self, march_fleet, march_today):
        before = [(t.id, t.amount, t.date) for t in march_fleet.transactions]
        march_fleet.summarize(MARCH, today=march_today)
        assert [(t.id, t.amount, t.date) for t in march_fleet.transactions] == before
