"""YAML record store: one file per account holding all four record lists."""

import json
import logging
import re
import uuid
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .category import Category
from .dates import format_calendar_date
from .errors import MissingReferencedEntity, RecordNotFound
from .fleet import Fleet
from .fueling import Fueling
from .kinds import Kind, TransactionStatus
from .transaction import Transaction
from .vehicle import Vehicle

log = logging.getLogger(__name__)

SECTIONS = ("vehicles", "categories", "transactions", "fuelings")

# Status labels used by older account files
STATUS_ALIASES = {
    "programado": TransactionStatus.SCHEDULED,
    "efetivado": TransactionStatus.SETTLED,
}

_OWNER_RE = re.compile(r"^[A-Za-z0-9_-]+$")


def parse_status(value: Optional[str]) -> TransactionStatus:
    """Status from file text; missing means settled."""
    if value is None:
        return TransactionStatus.SETTLED
    if value in STATUS_ALIASES:
        return STATUS_ALIASES[value]
    return TransactionStatus(value)


def _json_default(value):
    if isinstance(value, date):
        return format_calendar_date(value)
    raise TypeError(f"Cannot serialize {type(value).__name__}")


def _parse_object(
    dct: Dict[str, Any]
) -> Union[Vehicle, Category, Transaction, Fueling, Fleet, dict]:
    """Parse dictionary into appropriate record type."""
    # Fueling
    if "liters" in dct and "odometer" in dct:
        return Fueling(
            dct["id"],
            dct["vehicleId"],
            dct["liters"],
            dct.get("totalAmount"),
            dct["odometer"],
            dct["date"],
            dct.get("fuelType"),
        )
    # Transaction
    elif "categoryId" in dct and "amount" in dct:
        return Transaction(
            dct["id"],
            dct["vehicleId"],
            dct["categoryId"],
            Kind(dct["kind"]),
            dct["amount"],
            dct["date"],
            dct.get("description"),
            dct.get("paymentMethod"),
            parse_status(dct.get("status")),
        )
    # Vehicle
    elif "make" in dct and "model" in dct:
        return Vehicle(
            dct["id"],
            dct.get("name"),
            dct["make"],
            dct["model"],
            dct.get("year"),
            dct.get("plate"),
        )
    # Category
    elif "kind" in dct and "name" in dct:
        return Category(dct["id"], dct["name"], Kind(dct["kind"]))
    # Top-level account object
    elif any(section in dct for section in SECTIONS):
        return Fleet(
            dct.get("vehicles"),
            dct.get("categories"),
            dct.get("transactions"),
            dct.get("fuelings"),
            dct.get("owner"),
        )
    else:
        return dct


def load_fleet(filename: Union[str, Path]) -> Fleet:
    """Load an account's records from a YAML file."""
    with open(filename, "rb") as fp:
        raw = yaml.load(fp, Loader=yaml.SafeLoader) or {}
    json_data = json.dumps(raw, default=_json_default)
    fleet = json.loads(json_data, object_hook=_parse_object)
    if not isinstance(fleet, Fleet):
        fleet = Fleet()
    if fleet.owner is None:
        fleet.owner = Path(filename).stem

    log.debug(
        "Loaded %s: %d vehicles, %d categories, %d transactions, %d fuelings",
        filename,
        len(fleet.vehicles),
        len(fleet.categories),
        len(fleet.transactions),
        len(fleet.fuelings),
    )
    for t in fleet.kind_mismatches():
        log.warning(
            "Transaction %s is %s but category %s is %s",
            t.id,
            t.kind.value,
            t.category_id,
            fleet.get_category(t.category_id).kind.value,
        )
    for problem in fleet.unresolved_references():
        log.warning("Unresolved reference in %s: %s", filename, problem)
    return fleet


# =============================================================================
# Accounts
# =============================================================================


def account_path(data_dir: Union[str, Path], owner: str) -> Path:
    """Path of an owner's account file. Owner names are restricted to [A-Za-z0-9_-]."""
    if not _OWNER_RE.match(owner or ""):
        raise ValueError(f"Invalid account name '{owner}'")
    return Path(data_dir) / f"{owner}.yaml"


def list_accounts(data_dir: Union[str, Path]) -> List[str]:
    """Owner names with an account file in data_dir."""
    directory = Path(data_dir)
    if not directory.is_dir():
        return []
    return sorted(p.stem for p in directory.glob("*.yaml"))


def create_account(filename: Union[str, Path], owner: Optional[str] = None) -> None:
    """Create an empty account file."""
    data: Dict[str, Any] = {}
    if owner is not None:
        data["owner"] = owner
    for section in SECTIONS:
        data[section] = []
    _write_raw(filename, data)


# =============================================================================
# Raw file access
# =============================================================================


def _read_raw(filename: Union[str, Path]) -> Dict[str, Any]:
    with open(filename, "r") as fp:
        data = yaml.load(fp, Loader=yaml.SafeLoader) or {}
    for section in SECTIONS:
        if data.get(section) is None:
            data[section] = []
    return data


def _write_raw(filename: Union[str, Path], data: Dict[str, Any]) -> None:
    with open(filename, "w") as fp:
        yaml.dump(
            data,
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )


def new_id() -> str:
    """Short random record id."""
    return uuid.uuid4().hex[:8]


def _ids(data: Dict[str, Any], section: str) -> List[str]:
    return [str(item.get("id")) for item in data[section]]


def _index_of(data: Dict[str, Any], section: str, record_id: str) -> int:
    ids = _ids(data, section)
    if record_id not in ids:
        raise RecordNotFound(section, record_id)
    return ids.index(record_id)


def _check_references(data: Dict[str, Any], record: Dict[str, Any]) -> None:
    if "vehicleId" in record and record["vehicleId"] not in _ids(data, "vehicles"):
        raise MissingReferencedEntity("vehicle", record["vehicleId"])
    if "categoryId" in record and record["categoryId"] not in _ids(data, "categories"):
        raise MissingReferencedEntity("category", record["categoryId"])


def _add_record(filename: Union[str, Path], section: str, record: Dict[str, Any]) -> None:
    data = _read_raw(filename)
    _check_references(data, record)
    if record["id"] in _ids(data, section):
        raise ValueError(f"Duplicate {section} id '{record['id']}'")
    data[section].append(record)
    _write_raw(filename, data)
    log.debug("Added %s record %s to %s", section, record["id"], filename)


def _update_record(
    filename: Union[str, Path], section: str, record: Dict[str, Any]
) -> None:
    data = _read_raw(filename)
    index = _index_of(data, section, record["id"])
    _check_references(data, record)
    data[section][index] = record
    _write_raw(filename, data)
    log.debug("Updated %s record %s in %s", section, record["id"], filename)


def _delete_record(filename: Union[str, Path], section: str, record_id: str) -> None:
    data = _read_raw(filename)
    index = _index_of(data, section, record_id)
    del data[section][index]
    _write_raw(filename, data)
    log.debug("Deleted %s record %s from %s", section, record_id, filename)


# =============================================================================
# Serialization (camelCase keys, None values omitted)
# =============================================================================


def _vehicle_to_dict(vehicle: Vehicle) -> Dict[str, Any]:
    d: Dict[str, Any] = {"id": vehicle.id}
    if vehicle.name is not None:
        d["name"] = vehicle.name
    d["make"] = vehicle.make
    d["model"] = vehicle.model
    if vehicle.year is not None:
        d["year"] = vehicle.year
    if vehicle.plate is not None:
        d["plate"] = vehicle.plate
    return d


def _category_to_dict(category: Category) -> Dict[str, Any]:
    return {"id": category.id, "name": category.name, "kind": category.kind.value}


def _transaction_to_dict(transaction: Transaction) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": transaction.id,
        "vehicleId": transaction.vehicle_id,
        "categoryId": transaction.category_id,
        "kind": transaction.kind.value,
        "amount": transaction.amount,
        "date": transaction.date,
        "status": transaction.status.value,
    }
    if transaction.description is not None:
        d["description"] = transaction.description
    if transaction.payment_method is not None:
        d["paymentMethod"] = transaction.payment_method
    return d


def _fueling_to_dict(fueling: Fueling) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": fueling.id,
        "vehicleId": fueling.vehicle_id,
        "liters": fueling.liters,
        "totalAmount": fueling.total_amount,
        "odometer": fueling.odometer,
        "date": fueling.date,
    }
    if fueling.fuel_type is not None:
        d["fuelType"] = fueling.fuel_type
    return d


# =============================================================================
# Public record operations
# =============================================================================


def add_vehicle(filename: Union[str, Path], vehicle: Vehicle) -> None:
    _add_record(filename, "vehicles", _vehicle_to_dict(vehicle))


def update_vehicle(filename: Union[str, Path], vehicle: Vehicle) -> None:
    _update_record(filename, "vehicles", _vehicle_to_dict(vehicle))


def delete_vehicle(filename: Union[str, Path], vehicle_id: str) -> None:
    """Remove a vehicle. Records that referenced it stay and render as unresolved."""
    _delete_record(filename, "vehicles", vehicle_id)


def add_category(filename: Union[str, Path], category: Category) -> None:
    _add_record(filename, "categories", _category_to_dict(category))


def update_category(filename: Union[str, Path], category: Category) -> None:
    """
    Rename a category. Its kind is fixed once created, so a kind change
    raises ValueError.
    """
    data = _read_raw(filename)
    index = _index_of(data, "categories", category.id)
    if data["categories"][index].get("kind") != category.kind.value:
        raise ValueError(f"Category '{category.id}' kind cannot change")
    _update_record(filename, "categories", _category_to_dict(category))


def delete_category(filename: Union[str, Path], category_id: str) -> None:
    _delete_record(filename, "categories", category_id)


def add_transaction(filename: Union[str, Path], transaction: Transaction) -> None:
    """
    Append a transaction to an account file.

    The referenced vehicle and category must exist.
    """
    _add_record(filename, "transactions", _transaction_to_dict(transaction))


def update_transaction(filename: Union[str, Path], transaction: Transaction) -> None:
    _update_record(filename, "transactions", _transaction_to_dict(transaction))


def delete_transaction(filename: Union[str, Path], transaction_id: str) -> None:
    _delete_record(filename, "transactions", transaction_id)


def add_fueling(filename: Union[str, Path], fueling: Fueling) -> None:
    _add_record(filename, "fuelings", _fueling_to_dict(fueling))


def update_fueling(filename: Union[str, Path], fueling: Fueling) -> None:
    _update_record(filename, "fuelings", _fueling_to_dict(fueling))


def delete_fueling(filename: Union[str, Path], fueling_id: str) -> None:
    _delete_record(filename, "fuelings", fueling_id)
