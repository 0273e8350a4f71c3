"""
Exceptions raised by the Catalogue service core.

Route handlers translate these into HTTP responses; see ``main.py``.
"""


class CatalogueError(Exception):
    """Base class for catalogue errors."""


class PartValidationError(CatalogueError):
    """A part payload failed a business rule on a specific field."""

    def __init__(self, field: str, reason: str):
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason


class PartNotFoundError(CatalogueError):
    def __init__(self, part_id: str):
        super().__init__(f"Part '{part_id}' not found")
        self.part_id = part_id


class DeletionNotConfirmedError(CatalogueError):
    """Deleting a part needs an explicit confirmation from the user."""
