"""Vehicle record."""

from typing import Optional


class Vehicle:
    """A vehicle owned by the account."""

    def __init__(
        self,
        id: str,
        name: Optional[str],
        make: str,
        model: str,
        year: int,
        plate: Optional[str] = None,
    ):
        self.id = id
        self.name = name
        self.make = make
        self.model = model
        self.year = year
        self.plate = plate

    @property
    def display_name(self) -> str:
        """Human-readable vehicle name."""
        if self.name:
            return self.name
        return f"{self.year} {self.make} {self.model}"

    def __repr__(self):
        return f"Vehicle({self.id!r}, {self.display_name!r})"
