"""Category record."""

from .kinds import Kind


class Category:
    """An income or expense category. Its kind never changes after creation."""

    def __init__(self, id: str, name: str, kind: Kind):
        self.id = id
        self.name = name
        self.kind = kind

    def __repr__(self):
        return f"Category({self.id!r}, {self.name!r}, {self.kind.value})"
