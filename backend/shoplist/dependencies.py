"""
Shared API dependencies.
"""

from functools import lru_cache

from fastapi import Depends

from shoplist.config import settings
from shoplist.services.list_items import ListItemStateMachine, list_item_state_machine
from shoplist.services.list_lifecycle import ListLifecycleManager
from shoplist.services.pointer_store import CurrentListPointer, JsonFileKeyValueStore
from shoplist.services.product_resolver import ProductResolver, product_resolver


@lru_cache
def get_pointer() -> CurrentListPointer:
    """Process-wide pointer, read once from disk."""
    pointer = CurrentListPointer(JsonFileKeyValueStore(settings.POINTER_FILE))
    pointer.load()
    return pointer


def get_lifecycle(pointer: CurrentListPointer = Depends(get_pointer)) -> ListLifecycleManager:
    return ListLifecycleManager(pointer)


def get_resolver() -> ProductResolver:
    return product_resolver


def get_items_machine() -> ListItemStateMachine:
    return list_item_state_machine
