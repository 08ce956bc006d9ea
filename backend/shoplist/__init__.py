"""Shared product catalog and shopping list lifecycle."""

__version__ = "1.0.0"
