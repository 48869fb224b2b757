"""Fleet class - the loaded snapshot of one account's records."""

from datetime import date
from typing import List, Optional, Sequence

from .aggregation import ALL_VEHICLES, DEFAULT_TRAILING_MONTHS, aggregate
from .category import Category
from .dates import ReportWindow
from .errors import MissingReferencedEntity, RecordNotFound
from .fueling import Fueling
from .results import FleetSummary
from .transaction import Transaction
from .vehicle import Vehicle

UNRESOLVED = "—"


class Fleet:
    """Vehicles, categories, transactions and fuelings of one account."""

    def __init__(
        self,
        vehicles: Optional[Sequence[Vehicle]] = None,
        categories: Optional[Sequence[Category]] = None,
        transactions: Optional[Sequence[Transaction]] = None,
        fuelings: Optional[Sequence[Fueling]] = None,
        owner: Optional[str] = None,
    ):
        self.vehicles = tuple(vehicles or ())
        self.categories = tuple(categories or ())
        self.transactions = tuple(transactions or ())
        self.fuelings = tuple(fuelings or ())
        self.owner = owner
        self._vehicles_by_id = {v.id: v for v in self.vehicles}
        self._categories_by_id = {c.id: c for c in self.categories}

    def get_vehicle(self, vehicle_id: str) -> Optional[Vehicle]:
        return self._vehicles_by_id.get(vehicle_id)

    def get_category(self, category_id: str) -> Optional[Category]:
        return self._categories_by_id.get(category_id)

    def require_vehicle(self, vehicle_id: str) -> Vehicle:
        vehicle = self.get_vehicle(vehicle_id)
        if vehicle is None:
            raise MissingReferencedEntity("vehicle", vehicle_id)
        return vehicle

    def require_category(self, category_id: str) -> Category:
        category = self.get_category(category_id)
        if category is None:
            raise MissingReferencedEntity("category", category_id)
        return category

    def require_transaction(self, transaction_id: str) -> Transaction:
        for t in self.transactions:
            if t.id == transaction_id:
                return t
        raise RecordNotFound("transactions", transaction_id)

    def require_fueling(self, fueling_id: str) -> Fueling:
        for f in self.fuelings:
            if f.id == fueling_id:
                return f
        raise RecordNotFound("fuelings", fueling_id)

    def vehicle_name(self, vehicle_id: str) -> str:
        """Display name for a vehicle id, or a dash if it does not resolve."""
        vehicle = self.get_vehicle(vehicle_id)
        return vehicle.display_name if vehicle else UNRESOLVED

    def category_name(self, category_id: str) -> str:
        category = self.get_category(category_id)
        return category.name if category else UNRESOLVED

    def transactions_between(self, start: date, end: date) -> List[Transaction]:
        """Transactions dated within [start, end]."""
        window = ReportWindow(start, end)
        return [t for t in self.transactions if window.contains(t.calendar_date)]

    def fuelings_between(self, start: date, end: date) -> List[Fueling]:
        window = ReportWindow(start, end)
        return [f for f in self.fuelings if window.contains(f.calendar_date)]

    def kind_mismatches(self) -> List[Transaction]:
        """Transactions whose kind differs from their category's kind."""
        mismatched = []
        for t in self.transactions:
            category = self.get_category(t.category_id)
            if category is not None and category.kind != t.kind:
                mismatched.append(t)
        return mismatched

    def unresolved_references(self) -> List[str]:
        """Describe every transaction/fueling pointing at a missing vehicle or category."""
        problems = []
        for t in self.transactions:
            if self.get_vehicle(t.vehicle_id) is None:
                problems.append(f"transaction {t.id}: unknown vehicle '{t.vehicle_id}'")
            if self.get_category(t.category_id) is None:
                problems.append(f"transaction {t.id}: unknown category '{t.category_id}'")
        for f in self.fuelings:
            if self.get_vehicle(f.vehicle_id) is None:
                problems.append(f"fueling {f.id}: unknown vehicle '{f.vehicle_id}'")
        return problems

    def get_transactions_sorted(
        self, sort_by: str = "date", reverse: bool = True
    ) -> List[Transaction]:
        """
        Get transactions sorted by specified field.

        Args:
            sort_by: "date" or "amount"
            reverse: If True, newest/highest first (default)
        """
        if sort_by == "date":
            return sorted(self.transactions, key=lambda t: t.date, reverse=reverse)
        elif sort_by == "amount":
            return sorted(
                self.transactions,
                key=lambda t: t.amount if isinstance(t.amount, (int, float)) else 0,
                reverse=reverse,
            )
        return list(self.transactions)

    def summarize(
        self,
        window: ReportWindow,
        vehicle_filter: Optional[str] = ALL_VEHICLES,
        today: Optional[date] = None,
        trailing_months: int = DEFAULT_TRAILING_MONTHS,
    ) -> FleetSummary:
        """Aggregate this snapshot for a window."""
        return aggregate(
            self.transactions,
            self.fuelings,
            self.vehicles,
            self.categories,
            window,
            vehicle_filter=vehicle_filter,
            today=today,
            trailing_months=trailing_months,
        )
