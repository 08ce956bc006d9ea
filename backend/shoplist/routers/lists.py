"""
API endpoints for shopping lists and their items.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shoplist.database import get_db
from shoplist.dependencies import get_items_machine, get_lifecycle
from shoplist.exceptions import ValidationError
from shoplist.models.shopping_list import ListState
from shoplist.schemas import (
    AddItemRequest,
    CompleteRequest,
    CompleteResponse,
    CreateListRequest,
    DeleteResponse,
    ItemUpdate,
    ItemUpdateResponse,
    ListItemResponse,
    ListItemsResponse,
    RenameRequest,
    SaveRequest,
    ShareResponse,
    ShoppingListResponse,
)
from shoplist.services.list_items import ListItemStateMachine
from shoplist.services.list_lifecycle import ListLifecycleManager

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[ShoppingListResponse])
def list_lists(
    owner_id: Optional[str] = None,
    state: Optional[ListState] = None,
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    lifecycle: ListLifecycleManager = Depends(get_lifecycle),
):
    """List history, newest first."""
    return lifecycle.list_lists(db, owner_id=owner_id, state=state, limit=limit)


@router.post("", response_model=ShoppingListResponse, status_code=201)
def create_list(
    payload: CreateListRequest,
    db: Session = Depends(get_db),
    lifecycle: ListLifecycleManager = Depends(get_lifecycle),
):
    return lifecycle.create_list(db, name=payload.name, owner_id=payload.owner_id)


@router.get("/current", response_model=ShoppingListResponse)
def current_list(
    db: Session = Depends(get_db),
    lifecycle: ListLifecycleManager = Depends(get_lifecycle),
):
    """The list this session is editing; created on demand."""
    return lifecycle.resolve_pointer(db)


@router.post("/{list_id}/select", response_model=ShoppingListResponse)
def select_list(
    list_id: int,
    db: Session = Depends(get_db),
    lifecycle: ListLifecycleManager = Depends(get_lifecycle),
):
    return lifecycle.select_list(db, list_id)


@router.get("/{list_id}", response_model=ShoppingListResponse)
def get_list(
    list_id: int,
    db: Session = Depends(get_db),
    lifecycle: ListLifecycleManager = Depends(get_lifecycle),
):
    return lifecycle.get_list(db, list_id)


@router.patch("/{list_id}", response_model=ShoppingListResponse)
def rename_list(
    list_id: int,
    payload: RenameRequest,
    db: Session = Depends(get_db),
    lifecycle: ListLifecycleManager = Depends(get_lifecycle),
):
    return lifecycle.rename(db, list_id, payload.name)


@router.delete("/{list_id}", response_model=DeleteResponse)
def delete_list(
    list_id: int,
    db: Session = Depends(get_db),
    lifecycle: ListLifecycleManager = Depends(get_lifecycle),
):
    replacement = lifecycle.delete(db, list_id)
    return DeleteResponse(
        deleted=list_id,
        current=ShoppingListResponse.model_validate(replacement) if replacement else None,
    )


@router.get("/{list_id}/items", response_model=ListItemsResponse)
def get_items(
    list_id: int,
    db: Session = Depends(get_db),
    lifecycle: ListLifecycleManager = Depends(get_lifecycle),
    machine: ListItemStateMachine = Depends(get_items_machine),
):
    lifecycle.get_list(db, list_id)
    summary = machine.summarize(db, list_id)
    return ListItemsResponse(
        total=summary.total,
        unchecked=[ListItemResponse.model_validate(i) for i in summary.unchecked],
        checked=[ListItemResponse.model_validate(i) for i in summary.checked],
    )


@router.post("/{list_id}/items", response_model=ListItemResponse, status_code=201)
def add_item(
    list_id: int,
    payload: AddItemRequest,
    db: Session = Depends(get_db),
    machine: ListItemStateMachine = Depends(get_items_machine),
):
    """Add a catalog product or a free-text entry to the list."""
    if payload.keep_as_custom:
        if payload.custom_text is None:
            raise ValidationError("keep_as_custom needs custom_text")
        return machine.attach(db, list_id, custom_name=payload.custom_text, quantity=payload.quantity)

    return machine.add_entry(
        db,
        list_id,
        product_id=payload.product_id,
        custom_text=payload.custom_text,
        manual_category_id=payload.manual_category_id,
        quantity=payload.quantity,
    )


@router.patch("/items/{item_id}", response_model=ItemUpdateResponse)
def update_item(
    item_id: int,
    payload: ItemUpdate,
    db: Session = Depends(get_db),
    machine: ListItemStateMachine = Depends(get_items_machine),
):
    """Change quantity (absolute or +/- delta) and/or the checked flag."""
    if payload.quantity is not None and payload.delta is not None:
        raise ValidationError("Send either quantity or delta, not both")

    item = None
    if payload.is_checked is not None:
        item = machine.toggle_checked(db, item_id, payload.is_checked)
    if payload.quantity is not None:
        item = machine.set_quantity(db, item_id, payload.quantity)
        if item is None:
            return ItemUpdateResponse(removed=True)
    elif payload.delta is not None:
        item = machine.adjust_quantity(db, item_id, payload.delta)
        if item is None:
            return ItemUpdateResponse(removed=True)

    if item is None:
        raise ValidationError("Nothing to update")
    return ItemUpdateResponse(removed=False, item=ListItemResponse.model_validate(item))


@router.post("/{list_id}/complete", response_model=CompleteResponse)
def complete_list(
    list_id: int,
    payload: CompleteRequest,
    db: Session = Depends(get_db),
    lifecycle: ListLifecycleManager = Depends(get_lifecycle),
):
    completed, current = lifecycle.complete(db, list_id, store_name=payload.store_name)
    return CompleteResponse(
        completed=ShoppingListResponse.model_validate(completed),
        current=ShoppingListResponse.model_validate(current),
    )


@router.post("/{list_id}/save-as-new", response_model=ShoppingListResponse, status_code=201)
def save_as_new(
    list_id: int,
    payload: SaveRequest,
    db: Session = Depends(get_db),
    lifecycle: ListLifecycleManager = Depends(get_lifecycle),
):
    return lifecycle.save_as_new(db, list_id, owner_id=payload.owner_id, name=payload.name)


@router.put("/{list_id}/save", response_model=ShoppingListResponse)
def save_existing(
    list_id: int,
    payload: SaveRequest,
    db: Session = Depends(get_db),
    lifecycle: ListLifecycleManager = Depends(get_lifecycle),
):
    return lifecycle.save_existing(db, list_id, owner_id=payload.owner_id, name=payload.name)


@router.get("/{list_id}/share", response_model=ShareResponse)
def share_list(
    list_id: int,
    db: Session = Depends(get_db),
    lifecycle: ListLifecycleManager = Depends(get_lifecycle),
):
    lifecycle.get_list(db, list_id)
    return ShareResponse(
        token=lifecycle.share_reference(list_id),
        url=lifecycle.share_url(list_id),
    )
