"""Enums for transaction kinds and settlement status."""

from enum import Enum


class Kind(Enum):
    """Whether money comes in or goes out."""

    INCOME = "income"
    EXPENSE = "expense"


class TransactionStatus(Enum):
    """Settlement state. SCHEDULED is planned, SETTLED has actually moved."""

    SCHEDULED = "scheduled"
    SETTLED = "settled"
