"""Fueling record."""

from datetime import date
from functools import cached_property
from typing import Optional

from .dates import parse_calendar_date


class Fueling:
    """A fill-up: liters bought, amount paid, odometer at the pump."""

    def __init__(
        self,
        id: str,
        vehicle_id: str,
        liters: float,
        total_amount: float,
        odometer: int,
        date: str,
        fuel_type: Optional[str] = None,
    ):
        self.id = id
        self.vehicle_id = vehicle_id
        self.liters = liters
        self.total_amount = total_amount
        self.odometer = odometer
        self.date = date
        self.fuel_type = fuel_type

    @cached_property
    def calendar_date(self) -> date:
        """The date field parsed, once per record."""
        return parse_calendar_date(self.date)

    @property
    def price_per_liter(self) -> Optional[float]:
        """Amount paid per liter, None if it cannot be computed."""
        try:
            if not self.liters:
                return None
            return self.total_amount / self.liters
        except TypeError:
            return None

    def __repr__(self):
        return (
            f"Fueling({self.id!r}, {self.vehicle_id!r}, {self.liters!r} L, "
            f"odo={self.odometer!r}, {self.date!r})"
        )
