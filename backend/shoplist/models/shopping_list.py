"""
ShoppingList and ListItem database models.
"""

import enum
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import relationship

from shoplist.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class ListState(str, enum.Enum):
    ACTIVE = "active"
    COMPLETED = "completed"  # Terminal


class ShoppingList(Base):
    """A shopping list; one of them is the session's current list."""

    __tablename__ = "shopping_lists"
    __table_args__ = (
        Index("idx_list_owner_created", "owner_id", "created_at"),
        # Ids are share tokens; a deleted list's id must never be reissued
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    state = Column(Enum(ListState), nullable=False, default=ListState.ACTIVE)
    completion_date = Column(DateTime, nullable=True)
    store_name = Column(String, nullable=True)
    owner_id = Column(String, nullable=True, index=True)  # None for guest lists
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    # Relationships
    items = relationship(
        "ListItem",
        back_populates="shopping_list",
        cascade="all, delete-orphan",
        order_by="ListItem.id",
    )

    @property
    def is_active(self) -> bool:
        return self.state == ListState.ACTIVE

    @property
    def is_completed(self) -> bool:
        return self.state == ListState.COMPLETED

    def __repr__(self):
        return f"<ShoppingList(id={self.id}, name={self.name!r}, state={self.state})>"


class ListItem(Base):
    """An entry on a list, bound either to a catalog product or to a free-text name."""

    __tablename__ = "list_items"
    __table_args__ = (
        Index("idx_item_list", "list_id"),
        CheckConstraint("quantity >= 1", name="ck_item_quantity_positive"),
        CheckConstraint(
            "(product_id IS NULL) <> (custom_name IS NULL)",
            name="ck_item_product_xor_custom",
        ),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    list_id = Column(Integer, ForeignKey("shopping_lists.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=True)
    custom_name = Column(String, nullable=True)
    quantity = Column(Integer, nullable=False, default=1)
    is_checked = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    shopping_list = relationship("ShoppingList", back_populates="items")
    product = relationship("Product", back_populates="list_items")

    @property
    def display_name(self) -> str:
        if self.product is not None:
            return self.product.name
        return self.custom_name
