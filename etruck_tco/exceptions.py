"""
Exceptions raised by the TCO model.
"""

from typing import List


class TCOError(Exception):
    """Base class for TCO model errors."""


class InvalidInputError(TCOError, ValueError):
    """Calculator inputs violate one or more domain constraints."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("Invalid calculator inputs: " + "; ".join(self.errors))


class UnknownReferenceKeyError(TCOError, KeyError):
    """A key is not present in a reference data table."""

    def __init__(self, table: str, key):
        self.table = table
        self.key = key
        super().__init__(f"Unknown {table}: {key!r}")

    def __str__(self) -> str:
        return self.args[0]
