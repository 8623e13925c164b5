"""Expense ledger package."""

from upi_tracker.ledger.book import Ledger

__all__ = ["Ledger"]
