#!/usr/bin/env python3
"""Tests for YAML loading and saving of account files."""

import logging

import pytest
import yaml

from ledger import (
    Category,
    Fleet,
    Fueling,
    Kind,
    MissingReferencedEntity,
    RecordNotFound,
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
    update_category,
    update_fueling,
    update_transaction,
    update_vehicle,
)

# =============================================================================
# load_fleet tests
# =============================================================================


class TestLoadFleet:
    """Tests for load_fleet function."""

    def test_loads_all_sections(self, account_file):
        fleet = load_fleet(account_file)
        assert isinstance(fleet, Fleet)
        assert fleet.owner == "demo"
        assert len(fleet.vehicles) == 2
        assert len(fleet.categories) == 3
        assert len(fleet.transactions) == 3
        assert len(fleet.fuelings) == 1

    def test_record_types(self, account_file):
        fleet = load_fleet(account_file)
        assert all(isinstance(v, Vehicle) for v in fleet.vehicles)
        assert all(isinstance(c, Category) for c in fleet.categories)
        assert all(isinstance(t, Transaction) for t in fleet.transactions)
        assert isinstance(fleet.fuelings[0], Fueling)

    def test_camel_case_fields(self, account_file):
        fleet = load_fleet(account_file)
        t2 = next(t for t in fleet.transactions if t.id == "t2")
        assert t2.vehicle_id == "truck-1"
        assert t2.category_id == "maintenance"
        assert t2.payment_method == "card"
        assert t2.description == "Brake pads"
        f1 = fleet.fuelings[0]
        assert f1.total_amount == 200
        assert f1.fuel_type == "diesel"

    def test_legacy_status_label(self, account_file):
        fleet = load_fleet(account_file)
        t3 = next(t for t in fleet.transactions if t.id == "t3")
        assert t3.status == TransactionStatus.SCHEDULED

    def test_vehicle_without_name(self, account_file):
        fleet = load_fleet(account_file)
        assert fleet.get_vehicle("car-1").display_name == "2021 Honda Civic"

    def test_bare_yaml_dates_become_strings(self, tmp_path):
        path = tmp_path / "bare.yaml"
        path.write_text("""
vehicles:
  - id: v1
    make: Fiat
    model: Uno
    year: 2010
fuelings:
  - id: f1
    vehicleId: v1
    liters: 30
    totalAmount: 150
    odometer: 1000
    date: 2025-03-01
""")
        fleet = load_fleet(path)
        assert fleet.fuelings[0].date == "2025-03-01"

    def test_owner_defaults_to_file_stem(self, tmp_path):
        path = tmp_path / "alice.yaml"
        path.write_text("vehicles: []\n")
        assert load_fleet(path).owner == "alice"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        fleet = load_fleet(path)
        assert fleet.transactions == ()
        assert fleet.owner == "empty"

    def test_warns_on_kind_mismatch(self, account_file, caplog):
        data = yaml.safe_load(account_file.read_text())
        data["transactions"][0]["kind"] = "income"
        account_file.write_text(yaml.dump(data))
        with caplog.at_level(logging.WARNING, logger="ledger.store"):
            load_fleet(account_file)
        assert any("t1" in r.message for r in caplog.records)

    def test_warns_on_unresolved_reference(self, account_file, caplog):
        data = yaml.safe_load(account_file.read_text())
        data["fuelings"][0]["vehicleId"] = "ghost"
        account_file.write_text(yaml.dump(data))
        with caplog.at_level(logging.WARNING, logger="ledger.store"):
            load_fleet(account_file)
        assert any("ghost" in r.message for r in caplog.records)


# =============================================================================
# Account tests
# =============================================================================


class TestAccounts:
    """Tests for account files in a data directory."""

    def test_account_path(self, tmp_path):
        assert account_path(tmp_path, "demo") == tmp_path / "demo.yaml"

    @pytest.mark.parametrize("owner", ["../etc", "a b", "", "x.yaml"])
    def test_account_path_rejects_unsafe_names(self, tmp_path, owner):
        with pytest.raises(ValueError):
            account_path(tmp_path, owner)

    def test_list_accounts(self, tmp_path):
        (tmp_path / "b.yaml").write_text("")
        (tmp_path / "a.yaml").write_text("")
        (tmp_path / "notes.txt").write_text("")
        assert list_accounts(tmp_path) == ["a", "b"]

    def test_list_accounts_missing_dir(self, tmp_path):
        assert list_accounts(tmp_path / "missing") == []

    def test_create_account(self, tmp_path):
        path = tmp_path / "new.yaml"
        create_account(path, "new")
        data = yaml.safe_load(path.read_text())
        assert data == {
            "owner": "new",
            "vehicles": [],
            "categories": [],
            "transactions": [],
            "fuelings": [],
        }
        assert load_fleet(path).owner == "new"


# =============================================================================
# Record write tests
# =============================================================================


class TestAddRecords:
    """Tests for add_* functions."""

    def test_add_transaction(self, account_file):
        t = Transaction("t9", "car-1", "insurance", Kind.EXPENSE, 75.5, "2025-03-25",
                        payment_method="pix")
        add_transaction(account_file, t)

        data = yaml.safe_load(account_file.read_text())
        saved = data["transactions"][-1]
        assert saved["vehicleId"] == "car-1"
        assert saved["categoryId"] == "insurance"
        assert saved["paymentMethod"] == "pix"
        assert saved["status"] == "settled"
        assert "description" not in saved

        fleet = load_fleet(account_file)
        assert len(fleet.transactions) == 4

    def test_add_preserves_other_sections(self, account_file):
        add_category(account_file, Category("tolls", "Tolls", Kind.EXPENSE))
        data = yaml.safe_load(account_file.read_text())
        assert data["owner"] == "demo"
        assert len(data["vehicles"]) == 2
        assert data["categories"][-1] == {"id": "tolls", "name": "Tolls", "kind": "expense"}

    def test_add_transaction_unknown_vehicle(self, account_file):
        t = Transaction("t9", "ghost", "insurance", Kind.EXPENSE, 10, "2025-03-25")
        with pytest.raises(MissingReferencedEntity):
            add_transaction(account_file, t)
        assert len(load_fleet(account_file).transactions) == 3

    def test_add_transaction_unknown_category(self, account_file):
        t = Transaction("t9", "car-1", "ghost", Kind.EXPENSE, 10, "2025-03-25")
        with pytest.raises(MissingReferencedEntity):
            add_transaction(account_file, t)

    def test_add_fueling(self, account_file):
        add_fueling(account_file, Fueling("f2", "truck-1", 35, 180, 10420, "2025-03-28"))
        fleet = load_fleet(account_file)
        assert [f.odometer for f in fleet.fuelings] == [10000, 10420]

    def test_add_vehicle(self, account_file):
        add_vehicle(account_file, Vehicle("van-1", None, "Fiat", "Ducato", 2020))
        saved = yaml.safe_load(account_file.read_text())["vehicles"][-1]
        assert saved == {"id": "van-1", "make": "Fiat", "model": "Ducato", "year": 2020}

    def test_duplicate_id_rejected(self, account_file):
        with pytest.raises(ValueError):
            add_vehicle(account_file, Vehicle("truck-1", None, "Fiat", "Ducato", 2020))


class TestUpdateRecords:
    """Tests for update_* functions."""

    def test_update_transaction(self, account_file):
        t = Transaction("t1", "truck-1", "maintenance", Kind.EXPENSE, 120, "2025-03-05",
                        status=TransactionStatus.SCHEDULED)
        update_transaction(account_file, t)
        t1 = load_fleet(account_file).transactions[0]
        assert t1.amount == 120
        assert t1.status == TransactionStatus.SCHEDULED

    def test_update_vehicle(self, account_file):
        update_vehicle(account_file, Vehicle("car-1", "Daily", "Honda", "Civic", 2021, "XYZ-9"))
        assert load_fleet(account_file).vehicle_name("car-1") == "Daily"

    def test_update_fueling(self, account_file):
        update_fueling(account_file, Fueling("f1", "truck-1", 42, 210, 10000, "2025-03-12"))
        assert load_fleet(account_file).fuelings[0].liters == 42

    def test_update_unknown_raises(self, account_file):
        with pytest.raises(RecordNotFound):
            update_fueling(account_file, Fueling("nope", "truck-1", 1, 1, 1, "2025-03-12"))

    def test_rename_category(self, account_file):
        update_category(account_file, Category("maintenance", "Repairs", Kind.EXPENSE))
        assert load_fleet(account_file).category_name("maintenance") == "Repairs"

    def test_category_kind_cannot_change(self, account_file):
        with pytest.raises(ValueError):
            update_category(account_file, Category("maintenance", "Maintenance", Kind.INCOME))


class TestDeleteRecords:
    """Tests for delete_* functions."""

    def test_delete_transaction(self, account_file):
        delete_transaction(account_file, "t2")
        ids = [t.id for t in load_fleet(account_file).transactions]
        assert ids == ["t1", "t3"]

    def test_delete_fueling(self, account_file):
        delete_fueling(account_file, "f1")
        assert load_fleet(account_file).fuelings == ()

    def test_delete_vehicle_leaves_records(self, account_file):
        delete_vehicle(account_file, "car-1")
        fleet = load_fleet(account_file)
        assert fleet.get_vehicle("car-1") is None
        assert len(fleet.transactions) == 3

    def test_delete_category(self, account_file):
        delete_category(account_file, "insurance")
        assert load_fleet(account_file).get_category("insurance") is None

    def test_delete_unknown_raises(self, account_file):
        with pytest.raises(RecordNotFound):
            delete_transaction(account_file, "nope")
