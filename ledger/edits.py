"""Build the edited copy of a stored record.

Every field argument left as None keeps the current value. The result goes
through the same checks as a new record before it is written back.
"""

from typing import Optional

from .category import Category
from .checks import check_amount, check_fueling_values
from .dates import parse_calendar_date
from .errors import RecordNotFound
from .fleet import Fleet
from .fueling import Fueling
from .kinds import TransactionStatus
from .transaction import Transaction
from .vehicle import Vehicle


def _pick(new, old):
    return old if new is None else new


def edited_vehicle(
    fleet: Fleet,
    vehicle_id: str,
    name: Optional[str] = None,
    make: Optional[str] = None,
    model: Optional[str] = None,
    year: Optional[int] = None,
    plate: Optional[str] = None,
) -> Vehicle:
    vehicle = fleet.get_vehicle(vehicle_id)
    if vehicle is None:
        raise RecordNotFound("vehicles", vehicle_id)
    make = _pick(make, vehicle.make)
    model = _pick(model, vehicle.model)
    if not make or not model:
        raise ValueError("Make and model are required")
    return Vehicle(
        vehicle.id,
        _pick(name, vehicle.name) or None,
        make,
        model,
        _pick(year, vehicle.year),
        _pick(plate, vehicle.plate) or None,
    )


def edited_category(fleet: Fleet, category_id: str, name: Optional[str] = None) -> Category:
    """Only the name of a category can be edited."""
    category = fleet.get_category(category_id)
    if category is None:
        raise RecordNotFound("categories", category_id)
    name = _pick(name, category.name)
    if not name:
        raise ValueError("Name is required")
    return Category(category.id, name, category.kind)


def edited_transaction(
    fleet: Fleet,
    transaction_id: str,
    vehicle_id: Optional[str] = None,
    category_id: Optional[str] = None,
    amount: Optional[float] = None,
    date: Optional[str] = None,
    description: Optional[str] = None,
    payment_method: Optional[str] = None,
    status: Optional[TransactionStatus] = None,
) -> Transaction:
    """
    Edited transaction. Moving it to another category also takes that
    category's kind.
    """
    transaction = fleet.require_transaction(transaction_id)
    vehicle = fleet.require_vehicle(_pick(vehicle_id, transaction.vehicle_id))
    category = fleet.require_category(_pick(category_id, transaction.category_id))
    date = _pick(date, transaction.date)
    parse_calendar_date(date)
    return Transaction(
        transaction.id,
        vehicle.id,
        category.id,
        category.kind,
        check_amount(_pick(amount, transaction.amount)),
        date,
        _pick(description, transaction.description) or None,
        _pick(payment_method, transaction.payment_method) or None,
        _pick(status, transaction.status),
    )


def edited_fueling(
    fleet: Fleet,
    fueling_id: str,
    vehicle_id: Optional[str] = None,
    liters: Optional[float] = None,
    total_amount: Optional[float] = None,
    odometer: Optional[float] = None,
    date: Optional[str] = None,
    fuel_type: Optional[str] = None,
) -> Fueling:
    fueling = fleet.require_fueling(fueling_id)
    vehicle = fleet.require_vehicle(_pick(vehicle_id, fueling.vehicle_id))
    liters = _pick(liters, fueling.liters)
    total_amount = _pick(total_amount, fueling.total_amount)
    odometer = _pick(odometer, fueling.odometer)
    check_fueling_values(liters, total_amount, odometer)
    date = _pick(date, fueling.date)
    parse_calendar_date(date)
    return Fueling(
        fueling.id,
        vehicle.id,
        liters,
        total_amount,
        int(odometer),
        date,
        _pick(fuel_type, fueling.fuel_type) or None,
    )
