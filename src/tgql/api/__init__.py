"""TGQL API module - High-level engine interface."""

from tgql.api.tgql import TGQL

__all__ = [
    "TGQL",
]
