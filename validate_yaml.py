#!/usr/bin/env python3
"""Validate account YAML files against the schema."""
import json
import sys
from pathlib import Path

import yaml
from jsonschema import validate, ValidationError

from ledger import InvalidDateFormat, load_fleet, parse_calendar_date
from ledger.settings import Settings
from ledger.store import _json_default


def load_schema() -> dict:
    """Load the JSON schema from schema.yaml."""
    schema_path = Path(__file__).parent / "schema.yaml"
    with open(schema_path) as f:
        return yaml.safe_load(f)


def validate_account_file(filepath: Path, schema: dict) -> list[str]:
    """Validate a single account YAML file. Returns list of errors."""
    errors = []
    try:
        with open(filepath) as f:
            data = yaml.safe_load(f)
        # Bare YAML dates load as date objects; check them as YYYY-MM-DD text
        data = json.loads(json.dumps(data, default=_json_default))
        validate(instance=data, schema=schema)
        for section in ("transactions", "fuelings"):
            for record in data.get(section) or []:
                try:
                    parse_calendar_date(record["date"])
                except InvalidDateFormat as e:
                    errors.append(f"{section} {record['id']}: {e}")
    except yaml.YAMLError as e:
        errors.append(f"YAML parse error: {e}")
    except ValidationError as e:
        errors.append(f"Schema validation error: {e.message}")
        if e.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in e.path)}")
    except Exception as e:
        errors.append(f"Error: {e}")
    return errors


def account_warnings(filepath: Path) -> list[str]:
    """
    Consistency problems that do not make a file invalid.

    Reports transactions whose kind differs from their category's kind and
    records that reference a missing vehicle or category.
    """
    fleet = load_fleet(filepath)
    warnings = []
    for t in fleet.kind_mismatches():
        category = fleet.get_category(t.category_id)
        warnings.append(
            f"transaction {t.id} is {t.kind.value} but category "
            f"'{category.name}' is {category.kind.value}"
        )
    warnings.extend(fleet.unresolved_references())
    return warnings


def main(argv=None):
    """Validate all account YAML files in the data directory."""
    argv = sys.argv[1:] if argv is None else argv
    schema = load_schema()
    accounts_dir = Path(argv[0]) if argv else Settings.from_env().data_dir

    if not accounts_dir.exists():
        print(f"Error: accounts directory not found: {accounts_dir}")
        return 1

    yaml_files = list(accounts_dir.glob("*.yaml")) + list(accounts_dir.glob("*.yml"))

    if not yaml_files:
        print(f"Warning: No YAML files found in {accounts_dir}")
        return 0

    all_valid = True
    for filepath in sorted(yaml_files):
        errors = validate_account_file(filepath, schema)
        if errors:
            print(f"FAIL: {filepath.name}")
            for error in errors:
                print(f"  {error}")
            all_valid = False
            continue
        print(f"OK: {filepath.name}")
        for warning in account_warnings(filepath):
            print(f"  warning: {warning}")

    return 0 if all_valid else 1


if __name__ == "__main__":
    sys.exit(main())
