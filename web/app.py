"""Flask web application for fleet finance tracking."""

import logging
from datetime import date
from io import BytesIO
from pathlib import Path

from flask import (
    Flask,
    current_app,
    flash,
    redirect,
    render_template,
    request,
    send_file,
    url_for,
)

# Add parent directory to path for ledger imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from ledger import (
    ALL_VEHICLES,
    Category,
    Fueling,
    Kind,
    LedgerError,
    ReportError,
    ReportWindow,
    Transaction,
    TransactionStatus,
    Vehicle,
    account_path,
    add_category,
    add_fueling,
    add_transaction,
    add_vehicle,
    create_account,
    delete_category,
    delete_fueling,
    delete_transaction,
    delete_vehicle,
    list_accounts,
    load_fleet,
    parse_calendar_date,
    update_category,
    update_fueling,
    update_transaction,
    update_vehicle,
)
from ledger.aggregation import clamp_trailing_months
from ledger.checks import check_amount, check_fueling_values
from ledger.dates import format_calendar_date, month_label, parse_month
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
from ledger.report import render_report, report_filename
from ledger.settings import Settings
from ledger.store import new_id

log = logging.getLogger(__name__)

settings = Settings.from_env()

app = Flask(__name__)
app.secret_key = settings.secret_key
app.config["DATA_DIR"] = settings.data_dir
app.config["LOCALE"] = settings.locale
app.config["TRAILING_MONTHS"] = settings.trailing_months
app.config["APP_NAME"] = settings.app_name


def data_dir() -> Path:
    return Path(current_app.config["DATA_DIR"])


def get_account_path(owner: str) -> Path:
    """Full path for an owner's account file."""
    return account_path(data_dir(), owner)


def money(value):
    """Currency in the configured locale."""
    return format_currency(value, current_app.config["LOCALE"])


def kind_color(kind: Kind) -> str:
    """Get Tailwind color classes for a kind badge."""
    colors = {
        Kind.INCOME: "bg-green-100 text-green-800 border-green-200",
        Kind.EXPENSE: "bg-red-100 text-red-800 border-red-200",
    }
    return colors.get(kind, "bg-gray-100 text-gray-800")


def status_badge_color(status: TransactionStatus) -> str:
    """Get Tailwind color classes for a status badge."""
    colors = {
        TransactionStatus.SCHEDULED: "bg-yellow-500 text-white",
        TransactionStatus.SETTLED: "bg-green-500 text-white",
    }
    return colors.get(status, "bg-gray-500 text-white")


def change_color(change: float, kind: Kind) -> str:
    """Rising income is good, rising expenses are not."""
    if not change:
        return "text-gray-500"
    good = change > 0 if kind == Kind.INCOME else change < 0
    return "text-green-600" if good else "text-red-600"


# Register template filters
app.jinja_env.filters["money"] = money
app.jinja_env.filters["format_km"] = format_km
app.jinja_env.filters["format_liters"] = format_liters
app.jinja_env.filters["format_consumption"] = format_consumption
app.jinja_env.filters["format_change"] = format_change
app.jinja_env.filters["truncate_text"] = truncate
app.jinja_env.filters["kind_color"] = kind_color
app.jinja_env.filters["status_badge_color"] = status_badge_color
app.jinja_env.filters["change_color"] = change_color


@app.context_processor
def inject_app_name():
    return {"app_name": current_app.config["APP_NAME"]}


def load_account(owner: str):
    """Load an owner's fleet, or None (with a flash) if it is missing."""
    try:
        path = get_account_path(owner)
    except ValueError as e:
        flash(str(e), "error")
        return None, None
    if not path.exists():
        flash(f"Account '{owner}' not found", "error")
        return None, None
    return path, load_fleet(path)


def form_float(name: str):
    """Parse a float form field; empty means None."""
    value = request.form.get(name, "").strip()
    return float(value) if value else None


def form_text(name: str):
    """Stripped text field, None when the form does not carry it."""
    value = request.form.get(name)
    return value.strip() if value is not None else None


def form_date(name: str = "date") -> str:
    """Validated YYYY-MM-DD form field, defaulting to today."""
    value = request.form.get(name, "").strip() or format_calendar_date(date.today())
    parse_calendar_date(value)
    return value


@app.route("/")
def index():
    """List all accounts."""
    accounts = []
    for owner in list_accounts(data_dir()):
        fleet = load_fleet(get_account_path(owner))
        accounts.append({
            "owner": owner,
            "vehicles": len(fleet.vehicles),
            "transactions": len(fleet.transactions),
            "fuelings": len(fleet.fuelings),
        })
    return render_template("index.html", accounts=accounts)


@app.route("/", methods=["POST"])
def create_account_view():
    """Create an empty account file."""
    owner = request.form.get("owner", "").strip()
    try:
        path = get_account_path(owner)
    except ValueError as e:
        flash(str(e), "error")
        return redirect(url_for("index"))
    if path.exists():
        flash(f"Account '{owner}' already exists", "error")
        return redirect(url_for("index"))

    data_dir().mkdir(parents=True, exist_ok=True)
    create_account(path, owner)
    flash(f"Created account '{owner}'", "success")
    return redirect(url_for("dashboard", owner=owner))


@app.route("/account/<owner>")
def dashboard(owner: str):
    """Monthly dashboard for one account."""
    path, fleet = load_account(owner)
    if fleet is None:
        return redirect(url_for("index"))

    today = date.today()
    month = request.args.get("month") or f"{today.year:04d}-{today.month:02d}"
    try:
        year, month_num = parse_month(month)
    except ValueError as e:
        flash(str(e), "error")
        return redirect(url_for("dashboard", owner=owner))

    vehicle_filter = request.args.get("vehicle") or ALL_VEHICLES
    trailing = request.args.get("trailing", type=int)
    if trailing is None:
        trailing = current_app.config["TRAILING_MONTHS"]
    trailing = clamp_trailing_months(trailing)

    window = ReportWindow.for_month(year, month_num)
    summary = fleet.summarize(window, vehicle_filter=vehicle_filter, trailing_months=trailing)

    chart_max = max(
        [max(p.income, p.expense) for p in summary.trailing] or [0.0]
    )

    return render_template(
        "dashboard.html",
        owner=owner,
        fleet=fleet,
        summary=summary,
        month=month,
        month_title=month_label(year, month_num),
        vehicle_filter=vehicle_filter,
        trailing=trailing,
        chart_max=chart_max,
        Kind=Kind,
        ALL_VEHICLES=ALL_VEHICLES,
        active_tab="dashboard",
    )


@app.route("/account/<owner>/transactions")
def transactions(owner: str):
    """Transaction list with the add form."""
    path, fleet = load_account(owner)
    if fleet is None:
        return redirect(url_for("index"))

    entries = fleet.get_transactions_sorted(sort_by="date", reverse=True)
    kind_filter = request.args.get("kind", "").lower() or None
    if kind_filter in (k.value for k in Kind):
        entries = [t for t in entries if t.kind == Kind(kind_filter)]
    vehicle_filter = request.args.get("vehicle") or None
    if vehicle_filter:
        entries = [t for t in entries if t.vehicle_id == vehicle_filter]

    return render_template(
        "transactions.html",
        owner=owner,
        fleet=fleet,
        transactions=entries,
        kind_filter=kind_filter,
        vehicle_filter=vehicle_filter,
        statuses=list(TransactionStatus),
        today=date.today().isoformat(),
        active_tab="transactions",
    )


@app.route("/account/<owner>/transactions", methods=["POST"])
def add_transaction_view(owner: str):
    """Handle the add transaction form."""
    path, fleet = load_account(owner)
    if fleet is None:
        return redirect(url_for("index"))

    try:
        category = fleet.require_category(request.form.get("category_id", ""))
        vehicle = fleet.require_vehicle(request.form.get("vehicle_id", ""))
        amount = check_amount(form_float("amount"))
        transaction = Transaction(
            id=new_id(),
            vehicle_id=vehicle.id,
            category_id=category.id,
            kind=category.kind,
            amount=amount,
            date=form_date(),
            description=request.form.get("description") or None,
            payment_method=request.form.get("payment_method") or None,
            status=TransactionStatus(
                request.form.get("status") or TransactionStatus.SETTLED.value
            ),
        )
        add_transaction(path, transaction)
    except (LedgerError, ValueError) as e:
        flash(f"Could not save transaction: {e}", "error")
    else:
        flash(f"Saved {transaction.kind.value} of {money(transaction.amount)}", "success")
    return redirect(url_for("transactions", owner=owner))


@app.route("/account/<owner>/transactions/<record_id>/delete", methods=["POST"])
def delete_transaction_view(owner: str, record_id: str):
    return _delete(owner, record_id, delete_transaction, "transaction", "transactions")


@app.route("/account/<owner>/transactions/<record_id>/edit", methods=["POST"])
def edit_transaction_view(owner: str, record_id: str):
    """Handle the inline edit form of a transaction row."""
    path, fleet = load_account(owner)
    if fleet is None:
        return redirect(url_for("index"))

    try:
        status = form_text("status")
        transaction = edited_transaction(
            fleet,
            record_id,
            vehicle_id=form_text("vehicle_id") or None,
            category_id=form_text("category_id") or None,
            amount=form_float("amount"),
            date=form_text("date") or None,
            description=form_text("description"),
            payment_method=form_text("payment_method"),
            status=TransactionStatus(status) if status else None,
        )
        update_transaction(path, transaction)
    except (LedgerError, ValueError) as e:
        flash(f"Could not update transaction: {e}", "error")
    else:
        flash(f"Updated transaction '{record_id}'", "success")
    return redirect(url_for("transactions", owner=owner))


@app.route("/account/<owner>/fuelings")
def fuelings(owner: str):
    """Fueling list with the add form."""
    path, fleet = load_account(owner)
    if fleet is None:
        return redirect(url_for("index"))

    entries = sorted(fleet.fuelings, key=lambda f: f.date, reverse=True)
    vehicle_filter = request.args.get("vehicle") or None
    if vehicle_filter:
        entries = [f for f in entries if f.vehicle_id == vehicle_filter]

    return render_template(
        "fuelings.html",
        owner=owner,
        fleet=fleet,
        fuelings=entries,
        vehicle_filter=vehicle_filter,
        today=date.today().isoformat(),
        active_tab="fuelings",
    )


@app.route("/account/<owner>/fuelings", methods=["POST"])
def add_fueling_view(owner: str):
    """Handle the add fueling form."""
    path, fleet = load_account(owner)
    if fleet is None:
        return redirect(url_for("index"))

    try:
        vehicle = fleet.require_vehicle(request.form.get("vehicle_id", ""))
        liters = form_float("liters")
        total = form_float("total_amount")
        odometer = form_float("odometer")
        check_fueling_values(liters, total, odometer)
        fueling = Fueling(
            id=new_id(),
            vehicle_id=vehicle.id,
            liters=liters,
            total_amount=total,
            odometer=int(odometer),
            date=form_date(),
            fuel_type=request.form.get("fuel_type") or None,
        )
        add_fueling(path, fueling)
    except (LedgerError, ValueError) as e:
        flash(f"Could not save fueling: {e}", "error")
    else:
        flash(f"Saved fueling of {format_liters(fueling.liters)}", "success")
    return redirect(url_for("fuelings", owner=owner))


@app.route("/account/<owner>/fuelings/<record_id>/delete", methods=["POST"])
def delete_fueling_view(owner: str, record_id: str):
    return _delete(owner, record_id, delete_fueling, "fueling", "fuelings")


@app.route("/account/<owner>/fuelings/<record_id>/edit", methods=["POST"])
def edit_fueling_view(owner: str, record_id: str):
    """Handle the inline edit form of a fueling row."""
    path, fleet = load_account(owner)
    if fleet is None:
        return redirect(url_for("index"))

    try:
        fueling = edited_fueling(
            fleet,
            record_id,
            vehicle_id=form_text("vehicle_id") or None,
            liters=form_float("liters"),
            total_amount=form_float("total_amount"),
            odometer=form_float("odometer"),
            date=form_text("date") or None,
            fuel_type=form_text("fuel_type"),
        )
        update_fueling(path, fueling)
    except (LedgerError, ValueError) as e:
        flash(f"Could not update fueling: {e}", "error")
    else:
        flash(f"Updated fueling '{record_id}'", "success")
    return redirect(url_for("fuelings", owner=owner))


@app.route("/account/<owner>/vehicles")
def vehicles(owner: str):
    """Vehicle list with the add form."""
    path, fleet = load_account(owner)
    if fleet is None:
        return redirect(url_for("index"))

    return render_template(
        "vehicles.html",
        owner=owner,
        fleet=fleet,
        vehicles=sorted(fleet.vehicles, key=lambda v: v.display_name),
        active_tab="vehicles",
    )


@app.route("/account/<owner>/vehicles", methods=["POST"])
def add_vehicle_view(owner: str):
    """Handle the add vehicle form."""
    path, fleet = load_account(owner)
    if fleet is None:
        return redirect(url_for("index"))

    try:
        make = request.form.get("make", "").strip()
        model = request.form.get("model", "").strip()
        if not make or not model:
            raise ValueError("Make and model are required")
        year = request.form.get("year", "").strip()
        vehicle = Vehicle(
            id=request.form.get("id", "").strip() or new_id(),
            name=request.form.get("name", "").strip() or None,
            make=make,
            model=model,
            year=int(year) if year else None,
            plate=request.form.get("plate", "").strip() or None,
        )
        add_vehicle(path, vehicle)
    except (LedgerError, ValueError) as e:
        flash(f"Could not save vehicle: {e}", "error")
    else:
        flash(f"Added vehicle {vehicle.display_name}", "success")
    return redirect(url_for("vehicles", owner=owner))


@app.route("/account/<owner>/vehicles/<record_id>/delete", methods=["POST"])
def delete_vehicle_view(owner: str, record_id: str):
    return _delete(owner, record_id, delete_vehicle, "vehicle", "vehicles")


@app.route("/account/<owner>/vehicles/<record_id>/edit", methods=["POST"])
def edit_vehicle_view(owner: str, record_id: str):
    path, fleet = load_account(owner)
    if fleet is None:
        return redirect(url_for("index"))

    try:
        year = form_text("year")
        vehicle = edited_vehicle(
            fleet,
            record_id,
            name=form_text("name"),
            make=form_text("make"),
            model=form_text("model"),
            year=int(year) if year else None,
            plate=form_text("plate"),
        )
        update_vehicle(path, vehicle)
    except (LedgerError, ValueError) as e:
        flash(f"Could not update vehicle: {e}", "error")
    else:
        flash(f"Updated vehicle {vehicle.display_name}", "success")
    return redirect(url_for("vehicles", owner=owner))


@app.route("/account/<owner>/categories")
def categories(owner: str):
    """Category list with the add form."""
    path, fleet = load_account(owner)
    if fleet is None:
        return redirect(url_for("index"))

    return render_template(
        "categories.html",
        owner=owner,
        fleet=fleet,
        categories=sorted(fleet.categories, key=lambda c: (c.kind.value, c.name)),
        kinds=list(Kind),
        active_tab="categories",
    )


@app.route("/account/<owner>/categories", methods=["POST"])
def add_category_view(owner: str):
    """Handle the add category form."""
    path, fleet = load_account(owner)
    if fleet is None:
        return redirect(url_for("index"))

    try:
        name = request.form.get("name", "").strip()
        if not name:
            raise ValueError("Name is required")
        category = Category(
            id=request.form.get("id", "").strip() or new_id(),
            name=name,
            kind=Kind(request.form.get("kind", "")),
        )
        add_category(path, category)
    except (LedgerError, ValueError) as e:
        flash(f"Could not save category: {e}", "error")
    else:
        flash(f"Added {category.kind.value} category {category.name}", "success")
    return redirect(url_for("categories", owner=owner))


@app.route("/account/<owner>/categories/<record_id>/delete", methods=["POST"])
def delete_category_view(owner: str, record_id: str):
    return _delete(owner, record_id, delete_category, "category", "categories")


@app.route("/account/<owner>/categories/<record_id>/edit", methods=["POST"])
def edit_category_view(owner: str, record_id: str):
    """Rename a category. The kind stays as created."""
    path, fleet = load_account(owner)
    if fleet is None:
        return redirect(url_for("index"))

    try:
        category = edited_category(fleet, record_id, name=form_text("name"))
        update_category(path, category)
    except (LedgerError, ValueError) as e:
        flash(f"Could not update category: {e}", "error")
    else:
        flash(f"Renamed category to {category.name}", "success")
    return redirect(url_for("categories", owner=owner))


def _delete(owner: str, record_id: str, deleter, label: str, endpoint: str):
    path, fleet = load_account(owner)
    if fleet is None:
        return redirect(url_for("index"))
    try:
        deleter(path, record_id)
    except LedgerError as e:
        flash(str(e), "error")
    else:
        flash(f"Deleted {label} '{record_id}'", "success")
    return redirect(url_for(endpoint, owner=owner))


@app.route("/account/<owner>/report")
def report(owner: str):
    """Download the detailed PDF report for a date range."""
    path, fleet = load_account(owner)
    if fleet is None:
        return redirect(url_for("index"))

    today = date.today()
    try:
        start = request.args.get("start")
        end = request.args.get("end")
        window = ReportWindow(
            parse_calendar_date(start) if start else today.replace(day=1),
            parse_calendar_date(end) if end else today,
        )
    except ValueError as e:
        flash(f"Invalid report range: {e}", "error")
        return redirect(url_for("dashboard", owner=owner))

    vehicle_filter = request.args.get("vehicle") or ALL_VEHICLES
    summary = fleet.summarize(
        window,
        vehicle_filter=vehicle_filter,
        trailing_months=current_app.config["TRAILING_MONTHS"],
    )
    try:
        pdf = render_report(
            summary,
            fleet,
            owner=owner,
            locale=current_app.config["LOCALE"],
            app_name=current_app.config["APP_NAME"],
        )
    except ReportError as e:
        log.error("Report for %s failed: %s", owner, e)
        flash(str(e), "error")
        return redirect(url_for("dashboard", owner=owner))

    return send_file(
        BytesIO(pdf),
        mimetype="application/pdf",
        as_attachment=True,
        download_name=report_filename(window),
    )


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    # Run with debug mode for development
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    app.run(debug=True, host="0.0.0.0", port=5001)
