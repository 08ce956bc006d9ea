"""
API endpoints for the product catalog.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from shoplist.config import settings
from shoplist.database import get_db
from shoplist.dependencies import get_resolver
from shoplist.limiter import limiter
from shoplist.schemas import CategoryResponse, ProductResponse, ResolveRequest, ResolveResponse
from shoplist.services.product_resolver import ProductResolver

router = APIRouter()


@router.get("/categories", response_model=List[CategoryResponse])
def list_categories(
    db: Session = Depends(get_db),
    resolver: ProductResolver = Depends(get_resolver),
):
    """List all product categories."""
    return resolver.list_categories(db)


@router.get("", response_model=List[ProductResponse])
def list_popular_products(
    category_id: int,
    limit: Optional[int] = Query(None, ge=1, le=100),
    db: Session = Depends(get_db),
    resolver: ProductResolver = Depends(get_resolver),
):
    """Most used products of a category."""
    return resolver.popular_products(db, category_id, limit=limit)


@router.get("/suggestions", response_model=List[ProductResponse])
@limiter.limit(settings.SEARCH_RATE_LIMIT)
def suggest_products(
    request: Request,
    q: str = "",
    limit: Optional[int] = Query(None, ge=1, le=50),
    db: Session = Depends(get_db),
    resolver: ProductResolver = Depends(get_resolver),
):
    """'Did you mean' candidates for free text, before anything is created."""
    return resolver.find_similar(db, q, limit=limit)


@router.post("/resolve", response_model=ResolveResponse)
def resolve_product(
    payload: ResolveRequest,
    db: Session = Depends(get_db),
    resolver: ProductResolver = Depends(get_resolver),
):
    """Find or create the catalog product for a free-text entry."""
    resolution = resolver.resolve(
        db,
        product_id=payload.product_id,
        custom_text=payload.custom_text,
        manual_category_id=payload.manual_category_id,
    )
    return ResolveResponse(product_id=resolution.product_id, created=resolution.created)
