"""Exception types raised by the ledger package."""


class LedgerError(Exception):
    """Base class for ledger errors."""


class InvalidDateFormat(LedgerError, ValueError):
    """A date string is not a real YYYY-MM-DD calendar date."""

    def __init__(self, value):
        super().__init__(f"Invalid date {value!r}, expected YYYY-MM-DD")
        self.value = value


class MissingReferencedEntity(LedgerError, LookupError):
    """A record references a vehicle or category id that does not exist."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"Unknown {entity} '{entity_id}'")
        self.entity = entity
        self.entity_id = entity_id


class RecordNotFound(LedgerError, KeyError):
    """Update or delete targeted an id that is not in the account file."""

    def __init__(self, section: str, record_id: str):
        super().__init__(f"No {section} record with id '{record_id}'")
        self.section = section
        self.record_id = record_id

    def __str__(self):
        return self.args[0]


class ReportError(LedgerError):
    """The PDF report could not be composed or written."""
