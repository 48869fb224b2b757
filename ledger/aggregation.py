"""
Aggregation engine behind the dashboard and the PDF report.

Every function here is pure: it reads the record sequences it is given and
returns new values. Nothing is fetched, cached or mutated, so the same inputs
always give the same summary.

Records with a non-numeric amount, liters, total or odometer are left out of
the sums they would feed instead of raising. A reference to an unknown
vehicle or category never aborts a computation; per-vehicle figures simply
iterate over the vehicles that exist.
"""

import math
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .category import Category
from .dates import ReportWindow, month_label, months_ending
from .fueling import Fueling
from .kinds import Kind, TransactionStatus
from .results import (
    CategoryBreakdown,
    FleetSummary,
    KindTotals,
    MonthlyPoint,
    VehicleBreakdown,
    VehicleConsumption,
)
from .transaction import Transaction
from .vehicle import Vehicle

ALL_VEHICLES = "all"
DEFAULT_TRAILING_MONTHS = 6
MAX_TRAILING_MONTHS = 120


def clamp_trailing_months(months: Optional[int]) -> int:
    """Trend length limited to 1..MAX_TRAILING_MONTHS; missing or < 1 means the default."""
    if months is None or months < 1:
        return DEFAULT_TRAILING_MONTHS
    return min(months, MAX_TRAILING_MONTHS)


# =============================================================================
# Numeric helpers
# =============================================================================


def as_number(value) -> Optional[float]:
    """Return value if it is a finite int/float, else None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return value


def safe_ratio(numerator: float, denominator: float, default: float = 0.0) -> float:
    """numerator / denominator, or default unless the denominator is positive."""
    if denominator > 0:
        return numerator / denominator
    return default


def percent_change(current: float, previous: float) -> float:
    """
    Change from previous to current in percent, one decimal.

    A zero previous total reports 0.0 rather than an infinite rate.
    """
    return round(safe_ratio(current - previous, previous) * 100, 1)


def _amount_sum(transactions: Iterable[Transaction]) -> float:
    total = 0.0
    for t in transactions:
        amount = as_number(t.amount)
        if amount is not None:
            total += amount
    return total


# =============================================================================
# Scoping
# =============================================================================


def matches_vehicle(vehicle_id: str, vehicle_filter: Optional[str]) -> bool:
    """True when no filter is active or the id is the filtered vehicle."""
    if vehicle_filter is None or vehicle_filter == ALL_VEHICLES:
        return True
    return vehicle_id == vehicle_filter


def vehicles_in_scope(
    vehicles: Sequence[Vehicle], vehicle_filter: Optional[str]
) -> List[Vehicle]:
    return [v for v in vehicles if matches_vehicle(v.id, vehicle_filter)]


def scope_transactions(
    transactions: Sequence[Transaction],
    window: ReportWindow,
    vehicle_filter: Optional[str] = None,
) -> Tuple[Transaction, ...]:
    """Transactions for the filtered vehicle whose date falls inside window."""
    return tuple(
        t
        for t in transactions
        if matches_vehicle(t.vehicle_id, vehicle_filter)
        and window.contains(t.calendar_date)
    )


def scope_fuelings(
    fuelings: Sequence[Fueling],
    window: ReportWindow,
    vehicle_filter: Optional[str] = None,
) -> Tuple[Fueling, ...]:
    """Fuelings for the filtered vehicle whose date falls inside window."""
    return tuple(
        f
        for f in fuelings
        if matches_vehicle(f.vehicle_id, vehicle_filter)
        and window.contains(f.calendar_date)
    )


# =============================================================================
# Totals
# =============================================================================


def kind_totals(transactions: Sequence[Transaction], kind: Kind) -> KindTotals:
    """Sum amounts of one kind, split into scheduled and settled."""
    of_kind = [t for t in transactions if t.kind == kind]
    return KindTotals(
        scheduled=_amount_sum(
            t for t in of_kind if t.status == TransactionStatus.SCHEDULED
        ),
        settled=_amount_sum(
            t for t in of_kind if t.status == TransactionStatus.SETTLED
        ),
    )


def fueling_totals(fuelings: Sequence[Fueling]) -> Tuple[float, float]:
    """(amount paid, liters) over fuelings, skipping non-numeric values."""
    paid = 0.0
    liters = 0.0
    for f in fuelings:
        amount = as_number(f.total_amount)
        if amount is not None:
            paid += amount
        volume = as_number(f.liters)
        if volume is not None:
            liters += volume
    return paid, liters


# =============================================================================
# Fuel consumption and cost per km
# =============================================================================


def _by_vehicle(records) -> Dict[str, list]:
    grouped = defaultdict(list)
    for record in records:
        grouped[record.vehicle_id].append(record)
    return grouped


def _odometer_sorted(fuelings: Iterable[Fueling]) -> List[Fueling]:
    readable = [f for f in fuelings if as_number(f.odometer) is not None]
    return sorted(readable, key=lambda f: f.odometer)


def vehicle_consumption(
    vehicle: Vehicle, fuelings: Sequence[Fueling]
) -> Optional[VehicleConsumption]:
    """
    Km per liter for one vehicle over all of its fuelings.

    Fuelings are ordered by odometer. Each consecutive pair adds its odometer
    difference to the distance and the liters of the later fill to the fuel
    used. Returns None with fewer than two usable fuelings or zero liters.
    Odometer readings that go backwards are summed as-is.
    """
    history = _odometer_sorted(
        f
        for f in fuelings
        if f.vehicle_id == vehicle.id and as_number(f.liters) is not None
    )
    if len(history) < 2:
        return None

    distance = 0.0
    liters = 0.0
    for previous, current in zip(history, history[1:]):
        distance += current.odometer - previous.odometer
        liters += current.liters

    if liters <= 0:
        return None
    return VehicleConsumption(
        vehicle_id=vehicle.id,
        name=vehicle.display_name,
        distance=distance,
        liters=liters,
        fuelings=len(history),
    )


def average_consumption(consumptions: Sequence[VehicleConsumption]) -> float:
    """Unweighted mean of per-vehicle km/l; 0.0 when no vehicle qualifies."""
    if not consumptions:
        return 0.0
    return sum(c.km_per_liter for c in consumptions) / len(consumptions)


def km_driven(fuelings: Sequence[Fueling]) -> float:
    """Last minus first odometer of one vehicle's windowed fuelings."""
    ordered = _odometer_sorted(fuelings)
    if len(ordered) < 2:
        return 0
    return ordered[-1].odometer - ordered[0].odometer


def cost_per_km(
    scoped_transactions: Sequence[Transaction],
    scoped_fuelings: Sequence[Fueling],
    vehicles: Sequence[Vehicle],
) -> Tuple[float, float, float]:
    """
    (km driven, settled expenses, cost per km) for the window.

    Distance comes from each vehicle's fuelings inside the window; the cost
    is the settled expense transactions of the same vehicles.
    """
    fuelings_by_vehicle = _by_vehicle(scoped_fuelings)
    expenses_by_vehicle = _by_vehicle(
        t for t in scoped_transactions if t.is_expense and t.is_settled
    )

    total_km = 0.0
    total_expenses = 0.0
    for vehicle in vehicles:
        total_km += km_driven(fuelings_by_vehicle.get(vehicle.id, []))
        total_expenses += _amount_sum(expenses_by_vehicle.get(vehicle.id, []))

    return total_km, total_expenses, safe_ratio(total_expenses, total_km)


# =============================================================================
# Breakdowns
# =============================================================================


def category_breakdown(
    scoped_transactions: Sequence[Transaction],
    categories: Sequence[Category],
    kind: Kind,
) -> List[CategoryBreakdown]:
    """
    Per-category totals for one kind, largest first.

    Categories whose scheduled and settled sums are both zero are left out.
    """
    by_category = defaultdict(list)
    for t in scoped_transactions:
        if t.kind == kind and as_number(t.amount) is not None:
            by_category[t.category_id].append(t)

    rows = []
    for category in categories:
        if category.kind != kind:
            continue
        matching = by_category.get(category.id, [])
        totals = kind_totals(matching, kind)
        if totals.scheduled == 0 and totals.settled == 0:
            continue
        rows.append(
            CategoryBreakdown(
                category_id=category.id,
                name=category.name,
                scheduled=totals.scheduled,
                settled=totals.settled,
                count=len(matching),
            )
        )
    rows.sort(key=lambda r: (-r.total, r.name))
    return rows


def vehicle_breakdown(
    scoped_transactions: Sequence[Transaction],
    scoped_fuelings: Sequence[Fueling],
    vehicles: Sequence[Vehicle],
) -> List[VehicleBreakdown]:
    """Settled expenses plus fuel spend per vehicle, largest first, zeros omitted."""
    expenses_by_vehicle = _by_vehicle(
        t for t in scoped_transactions if t.is_expense and t.is_settled
    )
    fuelings_by_vehicle = _by_vehicle(scoped_fuelings)

    rows = []
    for vehicle in vehicles:
        row = VehicleBreakdown(
            vehicle_id=vehicle.id,
            name=vehicle.display_name,
            expenses=_amount_sum(expenses_by_vehicle.get(vehicle.id, [])),
            fuelings=fueling_totals(fuelings_by_vehicle.get(vehicle.id, []))[0],
        )
        if row.total == 0:
            continue
        rows.append(row)
    rows.sort(key=lambda r: (-r.total, r.name))
    return rows


# =============================================================================
# Trend
# =============================================================================


def trailing_series(
    transactions: Sequence[Transaction],
    today: date,
    months: int = DEFAULT_TRAILING_MONTHS,
    vehicle_filter: Optional[str] = None,
) -> List[MonthlyPoint]:
    """Income and expense per month for the `months` months ending at today."""
    points = []
    for year, month in months_ending(today, months):
        monthly = scope_transactions(
            transactions, ReportWindow.for_month(year, month), vehicle_filter
        )
        points.append(
            MonthlyPoint(
                year=year,
                month=month,
                label=month_label(year, month),
                income=_amount_sum(t for t in monthly if t.is_income),
                expense=_amount_sum(t for t in monthly if t.is_expense),
            )
        )
    return points


# =============================================================================
# Full summary
# =============================================================================


def aggregate(
    transactions: Sequence[Transaction],
    fuelings: Sequence[Fueling],
    vehicles: Sequence[Vehicle],
    categories: Sequence[Category],
    window: ReportWindow,
    vehicle_filter: Optional[str] = ALL_VEHICLES,
    today: Optional[date] = None,
    trailing_months: int = DEFAULT_TRAILING_MONTHS,
) -> FleetSummary:
    """
    Compute every dashboard and report figure for one window.

    Args:
        window: calendar days to report on (inclusive)
        vehicle_filter: a vehicle id, or "all"/None for the whole fleet
        today: end of the trailing series; defaults to the current date
        trailing_months: length of the trailing series
    """
    transactions = tuple(transactions)
    fuelings = tuple(fuelings)
    vehicles = tuple(vehicles)
    categories = tuple(categories)
    if today is None:
        today = date.today()

    scoped_tx = scope_transactions(transactions, window, vehicle_filter)
    scoped_fu = scope_fuelings(fuelings, window, vehicle_filter)
    previous_tx = scope_transactions(transactions, window.previous(), vehicle_filter)

    income = kind_totals(scoped_tx, Kind.INCOME)
    expense = kind_totals(scoped_tx, Kind.EXPENSE)
    previous_income = kind_totals(previous_tx, Kind.INCOME).total
    previous_expense = kind_totals(previous_tx, Kind.EXPENSE).total

    in_scope = vehicles_in_scope(vehicles, vehicle_filter)
    filtered_fuelings = [f for f in fuelings if matches_vehicle(f.vehicle_id, vehicle_filter)]
    consumption = [
        c
        for c in (vehicle_consumption(v, filtered_fuelings) for v in in_scope)
        if c is not None
    ]

    km, settled_expenses, per_km = cost_per_km(scoped_tx, scoped_fu, in_scope)
    fuel_paid, fuel_liters = fueling_totals(scoped_fu)

    return FleetSummary(
        window=window,
        vehicle_filter=vehicle_filter,
        transactions=scoped_tx,
        fuelings=scoped_fu,
        income=income,
        expense=expense,
        previous_income=previous_income,
        previous_expense=previous_expense,
        income_change=percent_change(income.total, previous_income),
        expense_change=percent_change(expense.total, previous_expense),
        fueling_total=fuel_paid,
        fueling_liters=fuel_liters,
        consumption=consumption,
        average_consumption=average_consumption(consumption),
        km_driven=km,
        settled_vehicle_expenses=settled_expenses,
        cost_per_km=per_km,
        income_by_category=category_breakdown(scoped_tx, categories, Kind.INCOME),
        expense_by_category=category_breakdown(scoped_tx, categories, Kind.EXPENSE),
        by_vehicle=vehicle_breakdown(scoped_tx, scoped_fu, in_scope),
        trailing=trailing_series(transactions, today, trailing_months, vehicle_filter),
        vehicle_count=len(in_scope),
    )
