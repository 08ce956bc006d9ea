"""
Database models for the shoplist backend.

All SQLAlchemy models are imported here so metadata is complete.
"""

from shoplist.models.category import Category
from shoplist.models.product import Product
from shoplist.models.shopping_list import ShoppingList, ListItem, ListState

__all__ = [
    "Category",
    "Product",
    "ShoppingList",
    "ListItem",
    "ListState",
]
