"""Shared records and account files for the test suite."""

from datetime import date

import pytest

from ledger import Category, Fleet, Fueling, Kind, Transaction, TransactionStatus, Vehicle

ACCOUNT_YAML = """
owner: demo
vehicles:
  - id: truck-1
    name: Work Truck
    make: Ford
    model: Ranger
    year: 2019
    plate: ABC-1234
  - id: car-1
    make: Honda
    model: Civic
    year: 2021
categories:
  - id: maintenance
    name: Maintenance
    kind: expense
  - id: insurance
    name: Insurance
    kind: expense
  - id: freight
    name: Freight
    kind: income
transactions:
  - id: t1
    vehicleId: truck-1
    categoryId: maintenance
    kind: expense
    amount: 100
    date: '2025-03-05'
    status: settled
  - id: t2
    vehicleId: truck-1
    categoryId: maintenance
    kind: expense
    amount: 50
    date: '2025-03-20'
    description: Brake pads
    paymentMethod: card
    status: settled
  - id: t3
    vehicleId: car-1
    categoryId: freight
    kind: income
    amount: 400
    date: '2025-02-10'
    status: programado
fuelings:
  - id: f1
    vehicleId: truck-1
    liters: 40
    totalAmount: 200
    odometer: 10000
    date: '2025-03-12'
    fuelType: diesel
"""


@pytest.fixture
def account_file(tmp_path):
    """A small account YAML file on disk."""
    path = tmp_path / "demo.yaml"
    path.write_text(ACCOUNT_YAML)
    return path


@pytest.fixture
def truck():
    return Vehicle("truck-1", "Work Truck", "Ford", "Ranger", 2019, "ABC-1234")


@pytest.fixture
def maintenance():
    return Category("maintenance", "Maintenance", Kind.EXPENSE)


@pytest.fixture
def march_fleet(truck, maintenance):
    """One vehicle, two settled March expenses and one March fueling."""
    return Fleet(
        vehicles=[truck],
        categories=[maintenance],
        transactions=[
            Transaction("t1", "truck-1", "maintenance", Kind.EXPENSE, 100, "2025-03-05"),
            Transaction("t2", "truck-1", "maintenance", Kind.EXPENSE, 50, "2025-03-20",
                        status=TransactionStatus.SETTLED),
        ],
        fuelings=[Fueling("f1", "truck-1", 40, 200, 10000, "2025-03-12")],
        owner="demo",
    )


@pytest.fixture
def march_today():
    return date(2025, 3, 31)
