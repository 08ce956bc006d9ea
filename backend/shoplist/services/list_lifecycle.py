"""
List level lifecycle: active -> completed, the current-list pointer,
duplication, saving, deletion and share links.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from shoplist.config import settings
from shoplist.exceptions import (
    CurrentListUnavailableError,
    InvalidStateError,
    NotFoundError,
    TransportError,
    ValidationError,
)
from shoplist.models.shopping_list import ListItem, ListState, ShoppingList
from shoplist.services.pointer_store import CurrentListPointer
from shoplist.services.store import soft_read, strict_read, write_step

logger = logging.getLogger(__name__)


class ListLifecycleManager:
    """
    Owns the session's current list.

    Whatever happens (completion, deletion, a stale pointer) the session is
    left with an active current list, or CurrentListUnavailableError is
    raised when none can be established.
    """

    def __init__(self, pointer: CurrentListPointer):
        self.pointer = pointer

    def create_list(self, db: Session, name: Optional[str] = None, owner_id: Optional[str] = None) -> ShoppingList:
        name = (name or "").strip() or settings.DEFAULT_LIST_NAME
        shopping_list = ShoppingList(name=name, owner_id=owner_id, state=ListState.ACTIVE)
        with write_step(db, "create list"):
            db.add(shopping_list)
            db.flush()
        self.pointer.set(shopping_list.id)
        logger.info(f"Created list {shopping_list.id} ('{name}')")
        return shopping_list

    def get_list(self, db: Session, list_id: int) -> ShoppingList:
        shopping_list = strict_read(db, "load list", lambda: db.get(ShoppingList, list_id))
        if shopping_list is None:
            raise NotFoundError(f"List {list_id} not found")
        return shopping_list

    def resolve_pointer(self, db: Session, pointer_id: Optional[int] = None) -> ShoppingList:
        """
        Load the pointed-to list if it is still active; otherwise discard the
        pointer and start a fresh list. A completed list is never resumed.

        A failed read raises TransportError and leaves the pointer untouched.
        """
        if pointer_id is None:
            pointer_id = self.pointer.value

        if pointer_id is not None:
            shopping_list = strict_read(
                db, f"load list {pointer_id}", lambda: db.get(ShoppingList, pointer_id)
            )
            if shopping_list is not None and shopping_list.is_active:
                if self.pointer.value != shopping_list.id:
                    self.pointer.set(shopping_list.id)
                return shopping_list
            logger.info(f"Discarding stale list pointer {pointer_id}")
            self.pointer.clear()

        return self._replace_current(db)

    def _replace_current(self, db: Session) -> ShoppingList:
        try:
            return self.create_list(db)
        except TransportError as e:
            raise CurrentListUnavailableError("No current list could be established") from e

    def select_list(self, db: Session, list_id: int) -> ShoppingList:
        """Make another active list the current one."""
        shopping_list = self.get_list(db, list_id)
        if not shopping_list.is_active:
            raise InvalidStateError(f"List {list_id} is completed and cannot be resumed")
        self.pointer.set(shopping_list.id)
        return shopping_list

    def complete(
        self, db: Session, list_id: int, store_name: Optional[str] = None
    ) -> Tuple[ShoppingList, ShoppingList]:
        """
        Finalize a list. Returns (completed list, fresh current list).
        """
        shopping_list = self.get_list(db, list_id)
        if not shopping_list.is_active:
            raise InvalidStateError(f"List {list_id} is already completed")

        with write_step(db, "complete list"):
            shopping_list.state = ListState.COMPLETED
            shopping_list.completion_date = datetime.now(timezone.utc)
            shopping_list.store_name = (store_name or "").strip() or None
        logger.info(f"Completed list {list_id} (store: {shopping_list.store_name})")

        if self.pointer.value == list_id:
            self.pointer.clear()
        return shopping_list, self._replace_current(db)

    def save_as_new(
        self, db: Session, list_id: int, owner_id: str, name: Optional[str] = None
    ) -> ShoppingList:
        """Copy a list with all its items into a new active list owned by `owner_id`."""
        source = self.get_list(db, list_id)
        new_name = (name or "").strip() or source.name

        clone = ShoppingList(name=new_name, owner_id=owner_id, state=ListState.ACTIVE)
        with write_step(db, "duplicate list"):
            db.add(clone)
            db.flush()
            for item in source.items:
                db.add(
                    ListItem(
                        list_id=clone.id,
                        product_id=item.product_id,
                        custom_name=item.custom_name,
                        quantity=item.quantity,
                        is_checked=item.is_checked,
                    )
                )
        self.pointer.set(clone.id)
        logger.info(f"Saved list {list_id} as new list {clone.id} for owner {owner_id}")
        return clone

    def save_existing(
        self, db: Session, list_id: int, owner_id: str, name: Optional[str] = None
    ) -> ShoppingList:
        shopping_list = self.get_list(db, list_id)
        with write_step(db, "save list"):
            shopping_list.owner_id = owner_id
            if name and name.strip():
                shopping_list.name = name.strip()
        return shopping_list

    def rename(self, db: Session, list_id: int, new_name: str) -> ShoppingList:
        new_name = (new_name or "").strip()
        if not new_name:
            raise ValidationError("List name must not be empty")
        shopping_list = self.get_list(db, list_id)
        with write_step(db, "rename list"):
            shopping_list.name = new_name
        return shopping_list

    def delete(self, db: Session, list_id: int) -> Optional[ShoppingList]:
        """
        Irreversibly delete a list and its items. Returns the replacement
        current list when the deleted one was current, else None.
        """
        shopping_list = self.get_list(db, list_id)
        with write_step(db, "delete list"):
            db.delete(shopping_list)
        logger.info(f"Deleted list {list_id}")

        if self.pointer.value == list_id:
            self.pointer.clear()
            return self._replace_current(db)
        return None

    def list_lists(
        self,
        db: Session,
        owner_id: Optional[str] = None,
        state: Optional[ListState] = None,
        limit: int = 50,
    ) -> List[ShoppingList]:
        """List history, newest first."""

        def query():
            q = db.query(ShoppingList)
            if owner_id is not None:
                q = q.filter(ShoppingList.owner_id == owner_id)
            if state is not None:
                q = q.filter(ShoppingList.state == state)
            return q.order_by(ShoppingList.created_at.desc(), ShoppingList.id.desc()).limit(limit).all()

        return soft_read(db, "List history", query)

    @staticmethod
    def share_reference(list_id: int) -> str:
        return str(list_id)

    def share_url(self, list_id: int, base_origin: Optional[str] = None) -> str:
        origin = (base_origin or settings.SHARE_BASE_ORIGIN).rstrip("/")
        return f"{origin}/?list={self.share_reference(list_id)}"
