"""
Fleet finance ledger.

This package records vehicle income, expenses and fuel-ups and aggregates them:
- Kind / TransactionStatus: income vs expense, scheduled vs settled
- Vehicle, Category, Transaction, Fueling: account records
- Fleet: one account's loaded snapshot
- ReportWindow: the calendar days a summary covers
- aggregate: dashboard and report figures (FleetSummary)
"""

from .kinds import Kind, TransactionStatus
from .vehicle import Vehicle
from .category import Category
from .transaction import Transaction
from .fueling import Fueling
from .errors import (
    LedgerError,
    InvalidDateFormat,
    MissingReferencedEntity,
    RecordNotFound,
    ReportError,
)
from .dates import ReportWindow, parse_calendar_date, format_calendar_date
from .formatters import format_currency
from .results import (
    KindTotals,
    VehicleConsumption,
    CategoryBreakdown,
    VehicleBreakdown,
    MonthlyPoint,
    FleetSummary,
)
from .aggregation import ALL_VEHICLES, aggregate
from .fleet import Fleet
from .store import (
    load_fleet,
    account_path,
    list_accounts,
    create_account,
    add_vehicle,
    update_vehicle,
    delete_vehicle,
    add_category,
    update_category,
    delete_category,
    add_transaction,
    update_transaction,
    delete_transaction,
    add_fueling,
    update_fueling,
    delete_fueling,
)

__all__ = [
    "Kind",
    "TransactionStatus",
    "Vehicle",
    "Category",
    "Transaction",
    "Fueling",
    "LedgerError",
    "InvalidDateFormat",
    "MissingReferencedEntity",
    "RecordNotFound",
    "ReportError",
    "ReportWindow",
    "parse_calendar_date",
    "format_calendar_date",
    "format_currency",
    "KindTotals",
    "VehicleConsumption",
    "CategoryBreakdown",
    "VehicleBreakdown",
    "MonthlyPoint",
    "FleetSummary",
    "ALL_VEHICLES",
    "aggregate",
    "Fleet",
    "load_fleet",
    "account_path",
    "list_accounts",
    "create_account",
    "add_vehicle",
    "update_vehicle",
    "delete_vehicle",
    "add_category",
    "update_category",
    "delete_category",
    "add_transaction",
    "update_transaction",
    "delete_transaction",
    "add_fueling",
    "update_fueling",
    "delete_fueling",
]
