"""Dataclasses holding computed aggregation results."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .dates import ReportWindow
    from .fueling import Fueling
    from .transaction import Transaction


@dataclass(frozen=True)
class KindTotals:
    """Sum of one transaction kind, split by settlement status."""

    scheduled: float = 0.0
    settled: float = 0.0

    @property
    def total(self) -> float:
        return self.scheduled + self.settled


@dataclass(frozen=True)
class VehicleConsumption:
    """Distance per liter for one vehicle over its whole fueling history."""

    vehicle_id: str
    name: str
    distance: float
    liters: float
    fuelings: int

    @property
    def km_per_liter(self) -> float:
        return self.distance / self.liters


@dataclass(frozen=True)
class CategoryBreakdown:
    """In-window totals for one category."""

    category_id: str
    name: str
    scheduled: float
    settled: float
    count: int

    @property
    def total(self) -> float:
        return self.scheduled + self.settled


@dataclass(frozen=True)
class VehicleBreakdown:
    """In-window spend for one vehicle: settled expenses plus fuel."""

    vehicle_id: str
    name: str
    expenses: float
    fuelings: float

    @property
    def total(self) -> float:
        return self.expenses + self.fuelings


@dataclass(frozen=True)
class MonthlyPoint:
    """One month of the trailing trend series."""

    year: int
    month: int
    label: str
    income: float
    expense: float

    @property
    def net(self) -> float:
        return self.income - self.expense


@dataclass(frozen=True)
class FleetSummary:
    """Everything the dashboard and the report need for one window."""

    window: "ReportWindow"
    vehicle_filter: Optional[str]
    transactions: Tuple["Transaction", ...]
    fuelings: Tuple["Fueling", ...]
    income: KindTotals
    expense: KindTotals
    previous_income: float
    previous_expense: float
    income_change: float
    expense_change: float
    fueling_total: float
    fueling_liters: float
    consumption: List[VehicleConsumption] = field(default_factory=list)
    average_consumption: float = 0.0
    km_driven: float = 0.0
    settled_vehicle_expenses: float = 0.0
    cost_per_km: float = 0.0
    income_by_category: List[CategoryBreakdown] = field(default_factory=list)
    expense_by_category: List[CategoryBreakdown] = field(default_factory=list)
    by_vehicle: List[VehicleBreakdown] = field(default_factory=list)
    trailing: List[MonthlyPoint] = field(default_factory=list)
    vehicle_count: int = 0

    @property
    def balance(self) -> float:
        return self.income.total - self.expense.total

    @property
    def fueling_count(self) -> int:
        return len(self.fuelings)

    @property
    def total_outflow(self) -> float:
        """Transaction expenses plus fuel spend."""
        return self.expense.total + self.fueling_total

    @property
    def net_after_fuel(self) -> float:
        return self.income.total - self.total_outflow

    @property
    def income_transactions(self) -> List["Transaction"]:
        return [t for t in self.transactions if t.is_income]

    @property
    def expense_transactions(self) -> List["Transaction"]:
        return [t for t in self.transactions if t.is_expense]
