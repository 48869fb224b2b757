#!/usr/bin/env python3
"""
Unified CLI for fleet finance tracking.

Commands:
  summary            - Show income, expenses, consumption and breakdowns for a month
  transactions       - List transactions
  fuelings           - List fuelings
  vehicles           - List vehicles
  categories         - List categories
  add-vehicle        - Add a vehicle
  add-category       - Add an income or expense category
  add-transaction    - Record an income or expense
  add-fueling        - Record a fill-up
  update-vehicle     - Edit a vehicle
  update-category    - Rename a category
  update-transaction - Edit an income or expense
  update-fueling     - Edit a fill-up
  delete             - Delete a record by id
  report             - Export the detailed PDF report
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

from ledger import (
    ALL_VEHICLES,
    Category,
    Fleet,
    FleetSummary,
    Fueling,
    Kind,
    LedgerError,
    ReportWindow,
    Transaction,
    TransactionStatus,
    Vehicle,
    load_fleet,
    parse_calendar_date,
    add_vehicle,
    add_category,
    add_transaction,
    add_fueling,
    delete_vehicle,
    delete_category,
    delete_transaction,
    delete_fueling,
    update_vehicle,
    update_category,
    update_transaction,
    update_fueling,
)
from ledger.aggregation import clamp_trailing_months
from ledger.checks import check_amount, check_fueling_values
from ledger.dates import format_calendar_date, parse_month
from ledger.edits import (
    edited_category,
    edited_fueling,
    edited_transaction,
    edited_vehicle,
)
from ledger.formatters import (
    format_change,
    format_consumption,
    format_currency,
    format_km,
    format_liters,
    truncate,
)
from ledger.report import build_report, report_filename
from ledger.settings import Settings
from ledger.store import new_id

log = logging.getLogger("fleet")

# =============================================================================
# Helpers
# =============================================================================


def resolve_window(args) -> ReportWindow:
    """Window from --start/--end, else --month, else the current month."""
    start = getattr(args, "start", None)
    end = getattr(args, "end", None)
    if start or end:
        today = date.today()
        start_date = parse_calendar_date(start) if start else today.replace(day=1)
        end_date = parse_calendar_date(end) if end else today
        return ReportWindow(start_date, end_date)
    month = getattr(args, "month", None)
    if month:
        year, month_num = parse_month(month)
        return ReportWindow.for_month(year, month_num)
    today = date.today()
    return ReportWindow.for_month(today.year, today.month)


def vehicle_label(fleet: Fleet, vehicle_filter: Optional[str]) -> str:
    if vehicle_filter in (None, ALL_VEHICLES):
        return "All vehicles"
    return fleet.vehicle_name(vehicle_filter)


def make_category_table(rows, locale=None) -> List[List[str]]:
    """Convert category breakdown rows to table rows."""
    return [
        [
            r.name,
            str(r.count),
            format_currency(r.scheduled, locale),
            format_currency(r.settled, locale),
            format_currency(r.total, locale),
        ]
        for r in rows
    ]


def make_transaction_table(
    transactions: List[Transaction], fleet: Fleet, locale=None
) -> List[List[str]]:
    """Convert transactions to table rows."""
    rows = []
    for t in transactions:
        rows.append(
            [
                t.id,
                t.date,
                t.kind.value,
                fleet.category_name(t.category_id),
                fleet.vehicle_name(t.vehicle_id),
                t.status.value,
                t.payment_method or "-",
                format_currency(t.amount if isinstance(t.amount, (int, float)) else None, locale),
                truncate(t.description),
            ]
        )
    return rows


def make_fueling_table(fuelings: List[Fueling], fleet: Fleet, locale=None) -> List[List[str]]:
    """Convert fuelings to table rows."""
    rows = []
    for f in fuelings:
        rows.append(
            [
                f.id,
                f.date,
                fleet.vehicle_name(f.vehicle_id),
                f.fuel_type or "-",
                format_liters(f.liters),
                format_currency(f.price_per_liter, locale),
                format_km(f.odometer),
                format_currency(f.total_amount, locale),
            ]
        )
    return rows


# =============================================================================
# Summary command
# =============================================================================


def print_summary(summary: FleetSummary, fleet: Fleet, locale=None) -> None:
    def money(value):
        return format_currency(value, locale)

    print(f"Period: {summary.window.label}")
    print(f"Vehicles: {vehicle_label(fleet, summary.vehicle_filter)} ({summary.vehicle_count})")
    print()

    totals = [
        ["Income", money(summary.income.total), money(summary.income.settled),
         money(summary.income.scheduled), format_change(summary.income_change)],
        ["Expenses", money(summary.expense.total), money(summary.expense.settled),
         money(summary.expense.scheduled), format_change(summary.expense_change)],
    ]
    print(tabulate(
        totals,
        headers=["", "Total", "Settled", "Scheduled", "vs prev. month"],
        tablefmt="simple",
    ))
    print()
    print(f"Balance:            {money(summary.balance)}")
    print(f"Fuel spend:         {money(summary.fueling_total)} "
          f"({summary.fueling_count} fuelings, {format_liters(summary.fueling_liters)})")
    print(f"Balance after fuel: {money(summary.net_after_fuel)}")
    print(f"Avg consumption:    {format_consumption(summary.average_consumption)}")
    print(f"Distance driven:    {format_km(summary.km_driven)}")
    print(f"Cost per km:        {money(summary.cost_per_km)}/km")
    print()

    headers = ["Category", "Count", "Scheduled", "Settled", "Total"]
    if summary.income_by_category:
        print("INCOME BY CATEGORY:")
        print(tabulate(make_category_table(summary.income_by_category, locale),
                       headers=headers, tablefmt="simple"))
        print()
    if summary.expense_by_category:
        print("EXPENSES BY CATEGORY:")
        print(tabulate(make_category_table(summary.expense_by_category, locale),
                       headers=headers, tablefmt="simple"))
        print()

    if summary.by_vehicle:
        print("BY VEHICLE:")
        rows = [[r.name, money(r.expenses), money(r.fuelings), money(r.total)]
                for r in summary.by_vehicle]
        print(tabulate(rows, headers=["Vehicle", "Settled expenses", "Fuelings", "Total"],
                       tablefmt="simple"))
        print()

    if summary.consumption:
        print("CONSUMPTION (full history):")
        rows = [[c.name, format_km(c.distance), format_liters(c.liters),
                 format_consumption(c.km_per_liter)] for c in summary.consumption]
        print(tabulate(rows, headers=["Vehicle", "Distance", "Liters", "Consumption"],
                       tablefmt="simple"))
        print()

    print(f"TREND (last {len(summary.trailing)} months):")
    rows = [[p.label, money(p.income), money(p.expense), money(p.net)]
            for p in summary.trailing]
    print(tabulate(rows, headers=["Month", "Income", "Expenses", "Net"], tablefmt="simple"))


def cmd_summary(args, settings: Settings):
    """Show the dashboard figures for a month."""
    fleet = load_fleet(args.account_file)
    window = resolve_window(args)
    summary = fleet.summarize(
        window,
        vehicle_filter=args.vehicle or ALL_VEHICLES,
        trailing_months=clamp_trailing_months(args.trailing or settings.trailing_months),
    )
    print_summary(summary, fleet, settings.locale)
    return 0


# =============================================================================
# Listing commands
# =============================================================================


def cmd_transactions(args, settings: Settings):
    """List transactions."""
    fleet = load_fleet(args.account_file)
    entries = fleet.get_transactions_sorted(sort_by=args.sort, reverse=not args.asc)

    if args.start or args.end:
        window = resolve_window(args)
        entries = [t for t in entries if window.contains(t.calendar_date)]
    if args.vehicle:
        entries = [t for t in entries if t.vehicle_id == args.vehicle]
    if args.kind:
        entries = [t for t in entries if t.kind == Kind(args.kind)]

    print(f"Transactions: {len(fleet.transactions)}")
    if len(entries) != len(fleet.transactions):
        print(f"Showing: {len(entries)} (filtered)")
    print()

    if not entries:
        print("No transactions found.")
        return 0

    headers = ["Id", "Date", "Kind", "Category", "Vehicle", "Status", "Payment",
               "Amount", "Description"]
    print(tabulate(make_transaction_table(entries, fleet, settings.locale),
                   headers=headers, tablefmt="simple"))
    return 0


def cmd_fuelings(args, settings: Settings):
    """List fuelings."""
    fleet = load_fleet(args.account_file)
    entries = sorted(fleet.fuelings, key=lambda f: f.date, reverse=not args.asc)

    if args.start or args.end:
        window = resolve_window(args)
        entries = [f for f in entries if window.contains(f.calendar_date)]
    if args.vehicle:
        entries = [f for f in entries if f.vehicle_id == args.vehicle]

    print(f"Fuelings: {len(fleet.fuelings)}")
    if len(entries) != len(fleet.fuelings):
        print(f"Showing: {len(entries)} (filtered)")
    print()

    if not entries:
        print("No fuelings found.")
        return 0

    headers = ["Id", "Date", "Vehicle", "Fuel", "Liters", "Price/L", "Odometer", "Total"]
    print(tabulate(make_fueling_table(entries, fleet, settings.locale),
                   headers=headers, tablefmt="simple"))
    return 0


def cmd_vehicles(args, settings: Settings):
    """List vehicles."""
    fleet = load_fleet(args.account_file)
    print(f"Vehicles: {len(fleet.vehicles)}")
    print()
    rows = [[v.id, v.display_name, v.make, v.model, v.year or "-", v.plate or "-"]
            for v in sorted(fleet.vehicles, key=lambda v: v.display_name)]
    print(tabulate(rows, headers=["Id", "Name", "Make", "Model", "Year", "Plate"],
                   tablefmt="simple"))
    return 0


def cmd_categories(args, settings: Settings):
    """List categories."""
    fleet = load_fleet(args.account_file)
    print(f"Categories: {len(fleet.categories)}")
    print()
    rows = [[c.id, c.name, c.kind.value]
            for c in sorted(fleet.categories, key=lambda c: (c.kind.value, c.name))]
    print(tabulate(rows, headers=["Id", "Name", "Kind"], tablefmt="simple"))
    return 0


# =============================================================================
# Add commands
# =============================================================================


def cmd_add_vehicle(args, settings: Settings):
    """Add a vehicle."""
    vehicle = Vehicle(
        id=args.id or new_id(),
        name=args.name,
        make=args.make,
        model=args.model,
        year=args.year,
        plate=args.plate,
    )
    print(f"Adding vehicle to {args.account_file}:")
    print(f"  Id:    {vehicle.id}")
    print(f"  Name:  {vehicle.display_name}")
    if vehicle.plate:
        print(f"  Plate: {vehicle.plate}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    add_vehicle(args.account_file, vehicle)
    print("Vehicle saved.")
    return 0


def cmd_add_category(args, settings: Settings):
    """Add a category."""
    category = Category(id=args.id or new_id(), name=args.name, kind=Kind(args.kind))
    print(f"Adding {category.kind.value} category '{category.name}' ({category.id})")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    add_category(args.account_file, category)
    print("Category saved.")
    return 0


def cmd_add_transaction(args, settings: Settings):
    """Record an income or expense."""
    fleet = load_fleet(args.account_file)
    vehicle = fleet.require_vehicle(args.vehicle)
    category = fleet.require_category(args.category)

    check_amount(args.amount)
    entry_date = args.date or format_calendar_date(date.today())
    parse_calendar_date(entry_date)

    transaction = Transaction(
        id=new_id(),
        vehicle_id=vehicle.id,
        category_id=category.id,
        kind=category.kind,
        amount=args.amount,
        date=entry_date,
        description=args.description,
        payment_method=args.payment,
        status=TransactionStatus(args.status),
    )

    print(f"Adding {transaction.kind.value} to {args.account_file}:")
    print(f"  Vehicle:  {vehicle.display_name}")
    print(f"  Category: {category.name}")
    print(f"  Date:     {transaction.date}")
    print(f"  Amount:   {format_currency(transaction.amount, settings.locale)}")
    print(f"  Status:   {transaction.status.value}")
    if transaction.payment_method:
        print(f"  Payment:  {transaction.payment_method}")
    if transaction.description:
        print(f"  Notes:    {transaction.description}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    add_transaction(args.account_file, transaction)
    print("Transaction saved.")
    return 0


def cmd_add_fueling(args, settings: Settings):
    """Record a fill-up."""
    fleet = load_fleet(args.account_file)
    vehicle = fleet.require_vehicle(args.vehicle)

    check_fueling_values(args.liters, args.total, args.odometer)
    entry_date = args.date or format_calendar_date(date.today())
    parse_calendar_date(entry_date)

    fueling = Fueling(
        id=new_id(),
        vehicle_id=vehicle.id,
        liters=args.liters,
        total_amount=args.total,
        odometer=args.odometer,
        date=entry_date,
        fuel_type=args.fuel_type,
    )

    print(f"Adding fueling to {args.account_file}:")
    print(f"  Vehicle:  {vehicle.display_name}")
    print(f"  Date:     {fueling.date}")
    print(f"  Liters:   {format_liters(fueling.liters)}")
    print(f"  Total:    {format_currency(fueling.total_amount, settings.locale)}")
    print(f"  Odometer: {format_km(fueling.odometer)}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    add_fueling(args.account_file, fueling)
    print("Fueling saved.")
    return 0


# =============================================================================
# Update commands
# =============================================================================


def cmd_update_vehicle(args, settings: Settings):
    """Edit a vehicle's name, make, model, year or plate."""
    fleet = load_fleet(args.account_file)
    vehicle = edited_vehicle(
        fleet,
        args.record_id,
        name=args.name,
        make=args.make,
        model=args.model,
        year=args.year,
        plate=args.plate,
    )
    print(f"Updating vehicle {vehicle.id} in {args.account_file}:")
    print(f"  Name:  {vehicle.display_name}")
    if vehicle.plate:
        print(f"  Plate: {vehicle.plate}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    update_vehicle(args.account_file, vehicle)
    print("Vehicle saved.")
    return 0


def cmd_update_category(args, settings: Settings):
    """Rename a category."""
    fleet = load_fleet(args.account_file)
    category = edited_category(fleet, args.record_id, name=args.name)
    print(f"Renaming {category.kind.value} category {category.id} to '{category.name}'")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    update_category(args.account_file, category)
    print("Category saved.")
    return 0


def cmd_update_transaction(args, settings: Settings):
    """Edit a transaction. Only the given fields change."""
    fleet = load_fleet(args.account_file)
    transaction = edited_transaction(
        fleet,
        args.record_id,
        vehicle_id=args.vehicle,
        category_id=args.category,
        amount=args.amount,
        date=args.date,
        description=args.description,
        payment_method=args.payment,
        status=TransactionStatus(args.status) if args.status else None,
    )

    print(f"Updating {transaction.kind.value} {transaction.id} in {args.account_file}:")
    print(f"  Vehicle:  {fleet.vehicle_name(transaction.vehicle_id)}")
    print(f"  Category: {fleet.category_name(transaction.category_id)}")
    print(f"  Date:     {transaction.date}")
    print(f"  Amount:   {format_currency(transaction.amount, settings.locale)}")
    print(f"  Status:   {transaction.status.value}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    update_transaction(args.account_file, transaction)
    print("Transaction saved.")
    return 0


def cmd_update_fueling(args, settings: Settings):
    """Edit a fill-up. Only the given fields change."""
    fleet = load_fleet(args.account_file)
    fueling = edited_fueling(
        fleet,
        args.record_id,
        vehicle_id=args.vehicle,
        liters=args.liters,
        total_amount=args.total,
        odometer=args.odometer,
        date=args.date,
        fuel_type=args.fuel_type,
    )

    print(f"Updating fueling {fueling.id} in {args.account_file}:")
    print(f"  Vehicle:  {fleet.vehicle_name(fueling.vehicle_id)}")
    print(f"  Date:     {fueling.date}")
    print(f"  Liters:   {format_liters(fueling.liters)}")
    print(f"  Total:    {format_currency(fueling.total_amount, settings.locale)}")
    print(f"  Odometer: {format_km(fueling.odometer)}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    update_fueling(args.account_file, fueling)
    print("Fueling saved.")
    return 0


# =============================================================================
# Delete command
# =============================================================================


DELETERS = {
    "vehicle": delete_vehicle,
    "category": delete_category,
    "transaction": delete_transaction,
    "fueling": delete_fueling,
}


def cmd_delete(args, settings: Settings):
    """Delete a record by id."""
    if args.dry_run:
        print(f"Would delete {args.record} '{args.record_id}'")
        print("(dry run - no changes made)")
        return 0
    DELETERS[args.record](args.account_file, args.record_id)
    print(f"Deleted {args.record} '{args.record_id}'.")
    return 0


# =============================================================================
# Report command
# =============================================================================


def cmd_report(args, settings: Settings):
    """Export the detailed PDF report."""
    fleet = load_fleet(args.account_file)
    window = resolve_window(args)
    summary = fleet.summarize(
        window,
        vehicle_filter=args.vehicle or ALL_VEHICLES,
        trailing_months=settings.trailing_months,
    )
    output = args.output or Path(report_filename(window))
    build_report(
        summary,
        fleet,
        output,
        locale=settings.locale,
        app_name=settings.app_name,
    )
    print(f"Report written to {output}")
    return 0


# =============================================================================
# Main
# =============================================================================


def add_range_arguments(parser):
    parser.add_argument("--start", type=str, help="First day (YYYY-MM-DD)")
    parser.add_argument("--end", type=str, help="Last day (YYYY-MM-DD)")
    parser.add_argument("--vehicle", type=str, help="Only this vehicle id")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Fleet finance tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s accounts/demo.yaml summary
  %(prog)s accounts/demo.yaml summary --month 2025-03 --vehicle truck-1
  %(prog)s accounts/demo.yaml transactions --start 2025-03-01 --kind expense
  %(prog)s accounts/demo.yaml add-transaction --vehicle truck-1 \\
      --category maintenance --amount 150 --date 2025-03-10
  %(prog)s accounts/demo.yaml add-fueling --vehicle truck-1 \\
      --liters 40 --total 200 --odometer 10500
  %(prog)s accounts/demo.yaml report --start 2025-03-01 --end 2025-03-31
""",
    )
    parser.add_argument("account_file", type=Path, help="Path to account YAML file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Summary subcommand
    summary_parser = subparsers.add_parser("summary", help="Show monthly dashboard figures")
    summary_parser.add_argument("--month", type=str, help="Month to show (YYYY-MM)")
    summary_parser.add_argument("--vehicle", type=str, help="Only this vehicle id")
    summary_parser.add_argument("--trailing", type=int, help="Months in the trend (e.g. 6 or 12)")

    # Listing subcommands
    tx_parser = subparsers.add_parser("transactions", help="List transactions")
    add_range_arguments(tx_parser)
    tx_parser.add_argument("--kind", choices=[k.value for k in Kind])
    tx_parser.add_argument("--sort", choices=["date", "amount"], default="date")
    tx_parser.add_argument("--asc", action="store_true", help="Sort ascending")

    fu_parser = subparsers.add_parser("fuelings", help="List fuelings")
    add_range_arguments(fu_parser)
    fu_parser.add_argument("--asc", action="store_true", help="Sort ascending")

    subparsers.add_parser("vehicles", help="List vehicles")
    subparsers.add_parser("categories", help="List categories")

    # Add subcommands
    veh_parser = subparsers.add_parser("add-vehicle", help="Add a vehicle")
    veh_parser.add_argument("--id", type=str, help="Vehicle id (default: random)")
    veh_parser.add_argument("--name", type=str, help="Display name")
    veh_parser.add_argument("--make", type=str, required=True)
    veh_parser.add_argument("--model", type=str, required=True)
    veh_parser.add_argument("--year", type=int, required=True)
    veh_parser.add_argument("--plate", type=str)
    veh_parser.add_argument("--dry-run", action="store_true")

    cat_parser = subparsers.add_parser("add-category", help="Add a category")
    cat_parser.add_argument("name", type=str)
    cat_parser.add_argument("kind", choices=[k.value for k in Kind])
    cat_parser.add_argument("--id", type=str, help="Category id (default: random)")
    cat_parser.add_argument("--dry-run", action="store_true")

    add_tx_parser = subparsers.add_parser("add-transaction", help="Record income or expense")
    add_tx_parser.add_argument("--vehicle", type=str, required=True)
    add_tx_parser.add_argument("--category", type=str, required=True)
    add_tx_parser.add_argument("--amount", type=float, required=True)
    add_tx_parser.add_argument("--date", type=str, help="YYYY-MM-DD (default: today)")
    add_tx_parser.add_argument("--description", type=str)
    add_tx_parser.add_argument("--payment", type=str, help="Payment method, e.g. 'pix', 'card'")
    add_tx_parser.add_argument(
        "--status",
        choices=[s.value for s in TransactionStatus],
        default=TransactionStatus.SETTLED.value,
    )
    add_tx_parser.add_argument("--dry-run", action="store_true")

    add_fu_parser = subparsers.add_parser("add-fueling", help="Record a fill-up")
    add_fu_parser.add_argument("--vehicle", type=str, required=True)
    add_fu_parser.add_argument("--liters", type=float, required=True)
    add_fu_parser.add_argument("--total", type=float, required=True, help="Amount paid")
    add_fu_parser.add_argument("--odometer", type=int, required=True)
    add_fu_parser.add_argument("--fuel-type", type=str, help="e.g. gasoline, ethanol, diesel")
    add_fu_parser.add_argument("--date", type=str, help="YYYY-MM-DD (default: today)")
    add_fu_parser.add_argument("--dry-run", action="store_true")

    # Update subcommands
    upd_veh_parser = subparsers.add_parser("update-vehicle", help="Edit a vehicle")
    upd_veh_parser.add_argument("record_id", type=str)
    upd_veh_parser.add_argument("--name", type=str, help="Display name ('' clears it)")
    upd_veh_parser.add_argument("--make", type=str)
    upd_veh_parser.add_argument("--model", type=str)
    upd_veh_parser.add_argument("--year", type=int)
    upd_veh_parser.add_argument("--plate", type=str)
    upd_veh_parser.add_argument("--dry-run", action="store_true")

    upd_cat_parser = subparsers.add_parser("update-category", help="Rename a category")
    upd_cat_parser.add_argument("record_id", type=str)
    upd_cat_parser.add_argument("name", type=str)
    upd_cat_parser.add_argument("--dry-run", action="store_true")

    upd_tx_parser = subparsers.add_parser("update-transaction", help="Edit income or expense")
    upd_tx_parser.add_argument("record_id", type=str)
    upd_tx_parser.add_argument("--vehicle", type=str)
    upd_tx_parser.add_argument("--category", type=str, help="Kind follows the new category")
    upd_tx_parser.add_argument("--amount", type=float)
    upd_tx_parser.add_argument("--date", type=str, help="YYYY-MM-DD")
    upd_tx_parser.add_argument("--description", type=str)
    upd_tx_parser.add_argument("--payment", type=str)
    upd_tx_parser.add_argument("--status", choices=[s.value for s in TransactionStatus])
    upd_tx_parser.add_argument("--dry-run", action="store_true")

    upd_fu_parser = subparsers.add_parser("update-fueling", help="Edit a fill-up")
    upd_fu_parser.add_argument("record_id", type=str)
    upd_fu_parser.add_argument("--vehicle", type=str)
    upd_fu_parser.add_argument("--liters", type=float)
    upd_fu_parser.add_argument("--total", type=float, help="Amount paid")
    upd_fu_parser.add_argument("--odometer", type=int)
    upd_fu_parser.add_argument("--fuel-type", type=str)
    upd_fu_parser.add_argument("--date", type=str, help="YYYY-MM-DD")
    upd_fu_parser.add_argument("--dry-run", action="store_true")

    del_parser = subparsers.add_parser("delete", help="Delete a record")
    del_parser.add_argument("record", choices=sorted(DELETERS))
    del_parser.add_argument("record_id", type=str)
    del_parser.add_argument("--dry-run", action="store_true")

    # Report subcommand
    report_parser = subparsers.add_parser("report", help="Export the PDF report")
    add_range_arguments(report_parser)
    report_parser.add_argument("--month", type=str, help="Month to report (YYYY-MM)")
    report_parser.add_argument("-o", "--output", type=Path, help="Output PDF path")

    return parser


COMMANDS = {
    "summary": cmd_summary,
    "transactions": cmd_transactions,
    "fuelings": cmd_fuelings,
    "vehicles": cmd_vehicles,
    "categories": cmd_categories,
    "add-vehicle": cmd_add_vehicle,
    "add-category": cmd_add_category,
    "add-transaction": cmd_add_transaction,
    "add-fueling": cmd_add_fueling,
    "update-vehicle": cmd_update_vehicle,
    "update-category": cmd_update_category,
    "update-transaction": cmd_update_transaction,
    "update-fueling": cmd_update_fueling,
    "delete": cmd_delete,
    "report": cmd_report,
}


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    settings = Settings.from_env()

    # Validate account file exists
    if not args.account_file.exists():
        print(f"Error: File not found: {args.account_file}")
        return 1

    try:
        return COMMANDS[args.command](args, settings)
    except (LedgerError, ValueError) as e:
        log.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
