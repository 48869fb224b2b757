"""Value checks applied before a record is written."""

from typing import Optional


def check_amount(amount: Optional[float]) -> float:
    """Transaction amounts must be present and non-negative."""
    if amount is None or amount < 0:
        raise ValueError("Amount must be a non-negative number")
    return amount


def check_fueling_values(
    liters: Optional[float], total_amount: Optional[float], odometer: Optional[float]
) -> None:
    """Liters and total must be positive, odometer zero or more."""
    if not liters or liters <= 0:
        raise ValueError("Liters must be greater than zero")
    if not total_amount or total_amount <= 0:
        raise ValueError("Total amount must be greater than zero")
    if odometer is None or odometer < 0:
        raise ValueError("Odometer must be zero or more")
