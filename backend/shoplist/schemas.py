from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field

from shoplist.models.shopping_list import ListState


# --- Category ---
class CategoryResponse(BaseModel):
    id: int
    name: str
    icon: Optional[str] = None

    class Config:
        from_attributes = True


# --- Product ---
class ProductResponse(BaseModel):
    id: int
    name: str
    category_id: Optional[int] = None
    usage_count: int = 0
    user_suggested: bool = False

    class Config:
        from_attributes = True


class ResolveRequest(BaseModel):
    product_id: Optional[int] = None
    custom_text: Optional[str] = Field(None, max_length=200)
    manual_category_id: Optional[int] = None


class ResolveResponse(BaseModel):
    product_id: int
    created: bool


# --- Items ---
class ListItemResponse(BaseModel):
    id: int
    list_id: int
    product_id: Optional[int] = None
    custom_name: Optional[str] = None
    display_name: str
    quantity: int
    is_checked: bool
    product: Optional[ProductResponse] = None

    class Config:
        from_attributes = True


class AddItemRequest(ResolveRequest):
    quantity: int = 1
    keep_as_custom: bool = Field(
        False, description="Store the free text on the item without touching the catalog"
    )


class ItemUpdate(BaseModel):
    quantity: Optional[int] = None
    delta: Optional[int] = None
    is_checked: Optional[bool] = None


class ItemUpdateResponse(BaseModel):
    removed: bool
    item: Optional[ListItemResponse] = None


class ListItemsResponse(BaseModel):
    total: int
    unchecked: List[ListItemResponse]
    checked: List[ListItemResponse]


# --- Lists ---
class ShoppingListResponse(BaseModel):
    id: int
    name: str
    state: ListState
    completion_date: Optional[datetime] = None
    store_name: Optional[str] = None
    owner_id: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class CreateListRequest(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    owner_id: Optional[str] = None


class RenameRequest(BaseModel):
    name: str = Field(..., max_length=100)


class CompleteRequest(BaseModel):
    store_name: Optional[str] = Field(None, max_length=100)


class CompleteResponse(BaseModel):
    completed: ShoppingListResponse
    current: ShoppingListResponse


class SaveRequest(BaseModel):
    owner_id: str = Field(..., min_length=1)
    name: Optional[str] = Field(None, max_length=100)


class DeleteResponse(BaseModel):
    deleted: int
    current: Optional[ShoppingListResponse] = None


class ShareResponse(BaseModel):
    token: str
    url: str
