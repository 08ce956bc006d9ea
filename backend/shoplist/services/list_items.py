"""
Item level state machine for a single list.

Item states: unchecked, checked, removed (terminal: the row is deleted).
Items of a completed list are frozen.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from shoplist.exceptions import InvalidStateError, NotFoundError, TransportError, ValidationError
from shoplist.models.shopping_list import ListItem, ShoppingList
from shoplist.services.product_resolver import ProductResolver, Resolution, product_resolver
from shoplist.services.store import soft_read, strict_read, write_step

logger = logging.getLogger(__name__)


@dataclass
class ListSummary:
    """Partition of a list's items, computed from current rows."""

    checked: List[ListItem] = field(default_factory=list)
    unchecked: List[ListItem] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.checked) + len(self.unchecked)


class ListItemStateMachine:
    def __init__(self, resolver: ProductResolver = product_resolver):
        self.resolver = resolver

    def attach(
        self,
        db: Session,
        list_id: int,
        resolution: Optional[Resolution] = None,
        custom_name: Optional[str] = None,
        quantity: int = 1,
    ) -> ListItem:
        """
        Append an unchecked item bound to a resolved product or a free-text name.

        A product-bound attach bumps the product's usage count as a second,
        best-effort write; its failure is logged and the attached item returned.
        """
        if (resolution is None) == (custom_name is None):
            raise ValidationError("An item needs either a product or a custom name")
        if custom_name is not None:
            custom_name = custom_name.strip()
            if not custom_name:
                raise ValidationError("Item name must not be empty")
        if quantity is None or quantity < 1:
            raise ValidationError("Initial quantity must be at least 1")

        self._require_active(self._get_list(db, list_id))

        item = ListItem(
            list_id=list_id,
            product_id=resolution.product_id if resolution else None,
            custom_name=custom_name,
            quantity=quantity,
            is_checked=False,
        )
        with write_step(db, "add item"):
            db.add(item)
            db.flush()
        logger.info(f"Attached item {item.id} to list {list_id}")

        if resolution is not None:
            try:
                self.resolver.increment_usage(db, resolution.product_id)
            except TransportError as e:
                logger.warning(f"Usage count for product {resolution.product_id} not updated: {e}")
        return item

    def add_entry(
        self,
        db: Session,
        list_id: int,
        product_id: Optional[int] = None,
        custom_text: Optional[str] = None,
        manual_category_id: Optional[int] = None,
        quantity: int = 1,
    ) -> ListItem:
        """Resolve then attach. If the attach fails, a created product stays in the catalog."""
        if quantity is None or quantity < 1:
            raise ValidationError("Initial quantity must be at least 1")
        self._require_active(self._get_list(db, list_id))

        resolution = self.resolver.resolve(
            db,
            product_id=product_id,
            custom_text=custom_text,
            manual_category_id=manual_category_id,
        )
        return self.attach(db, list_id, resolution=resolution, quantity=quantity)

    def set_quantity(self, db: Session, item_id: int, quantity: int) -> Optional[ListItem]:
        """Replace the quantity; zero or less removes the item and returns None."""
        item = self._get_item(db, item_id)
        self._require_active(item.shopping_list)

        if quantity <= 0:
            with write_step(db, "remove item"):
                db.delete(item)
            logger.info(f"Removed item {item_id}")
            return None

        with write_step(db, "update quantity"):
            item.quantity = quantity
        return item

    def adjust_quantity(self, db: Session, item_id: int, delta: int) -> Optional[ListItem]:
        item = self._get_item(db, item_id)
        return self.set_quantity(db, item_id, item.quantity + delta)

    def toggle_checked(self, db: Session, item_id: int, checked: bool) -> ListItem:
        item = self._get_item(db, item_id)
        self._require_active(item.shopping_list)

        with write_step(db, "update item"):
            item.is_checked = bool(checked)
        return item

    def get_items(self, db: Session, list_id: int) -> List[ListItem]:
        return soft_read(
            db,
            f"Item listing for list {list_id}",
            lambda: db.query(ListItem)
            .options(joinedload(ListItem.product))
            .filter(ListItem.list_id == list_id)
            .order_by(ListItem.created_at, ListItem.id)
            .all(),
        )

    def summarize(self, db: Session, list_id: int) -> ListSummary:
        summary = ListSummary()
        for item in self.get_items(db, list_id):
            if item.is_checked:
                summary.checked.append(item)
            else:
                summary.unchecked.append(item)
        return summary

    def _get_list(self, db: Session, list_id: int) -> ShoppingList:
        shopping_list = strict_read(db, "load list", lambda: db.get(ShoppingList, list_id))
        if shopping_list is None:
            raise NotFoundError(f"List {list_id} not found")
        return shopping_list

    def _get_item(self, db: Session, item_id: int) -> ListItem:
        item = strict_read(db, "load item", lambda: db.get(ListItem, item_id))
        if item is None:
            raise NotFoundError(f"Item {item_id} not found")
        return item

    @staticmethod
    def _require_active(shopping_list: ShoppingList) -> None:
        if not shopping_list.is_active:
            raise InvalidStateError(f"List {shopping_list.id} is completed; its items are frozen")


list_item_state_machine = ListItemStateMachine()
