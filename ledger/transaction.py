"""Transaction record."""

from datetime import date
from functools import cached_property
from typing import Optional

from .dates import parse_calendar_date
from .kinds import Kind, TransactionStatus


class Transaction:
    """A single income or expense tied to a vehicle and a category."""

    def __init__(
        self,
        id: str,
        vehicle_id: str,
        category_id: str,
        kind: Kind,
        amount: float,
        date: str,
        description: Optional[str] = None,
        payment_method: Optional[str] = None,
        status: TransactionStatus = TransactionStatus.SETTLED,
    ):
        self.id = id
        self.vehicle_id = vehicle_id
        self.category_id = category_id
        self.kind = kind
        self.amount = amount
        self.date = date
        self.description = description
        self.payment_method = payment_method
        self.status = status

    @cached_property
    def calendar_date(self) -> date:
        """The date field parsed, once per record."""
        return parse_calendar_date(self.date)

    @property
    def is_income(self) -> bool:
        return self.kind == Kind.INCOME

    @property
    def is_expense(self) -> bool:
        return self.kind == Kind.EXPENSE

    @property
    def is_settled(self) -> bool:
        return self.status == TransactionStatus.SETTLED

    def __repr__(self):
        return (
            f"Transaction({self.id!r}, {self.kind.value}, {self.amount!r}, "
            f"{self.date!r}, {self.status.value})"
        )
