"""Exception types raised by the table and spectrum layers."""

from __future__ import annotations


class InsufficientGridError(ValueError):
    """An axis has fewer than two points."""


class UnknownCategoryError(KeyError):
    """A query names a category with no loaded data."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep plain messages readable.
        return str(self.args[0]) if self.args else ""


class LoadError(RuntimeError):
    """A backing table file is missing or cannot be parsed."""
