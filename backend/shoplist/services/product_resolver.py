"""
Product resolution against the shared catalog.

Turns free text (or an explicit catalog id) into a Product reference without
ever creating two rows with the same normalized name.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shoplist.config import settings
from shoplist.exceptions import ConflictError, NotFoundError, TransportError, ValidationError
from shoplist.models.category import Category
from shoplist.models.product import Product
from shoplist.services.categorization import suggest_category
from shoplist.services.normalization import normalize, title_case
from shoplist.services.store import soft_read, strict_read, write_step

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    product_id: int
    created: bool


class ProductResolver:
    """
    Find-or-create for catalog products.

    Creation is "insert, and on a uniqueness violation re-read": a concurrent
    session may insert the same normalized name between our lookup and our
    insert, and the unique index on `normalized_name` is what decides.
    """

    def resolve(
        self,
        db: Session,
        product_id: Optional[int] = None,
        custom_text: Optional[str] = None,
        manual_category_id: Optional[int] = None,
    ) -> Resolution:
        if (product_id is None) == (custom_text is None):
            raise ValidationError("Provide either a product id or a product name")

        if product_id is not None:
            product = strict_read(db, "load product", lambda: db.get(Product, product_id))
            if product is None:
                raise NotFoundError(f"Product {product_id} not found")
            return Resolution(product_id=product.id, created=False)

        name = title_case(custom_text)
        if not name:
            raise ValidationError("Product name must not be empty")
        key = normalize(name)

        existing = self._get_by_key(db, key)
        if existing is not None:
            logger.debug(f"Catalog match: '{custom_text}' -> '{existing.name}'")
            return Resolution(product_id=existing.id, created=False)

        categories = strict_read(db, "load categories", lambda: db.query(Category).all())
        if manual_category_id is not None and not any(c.id == manual_category_id for c in categories):
            raise NotFoundError(f"Category {manual_category_id} not found")
        category_id = suggest_category(key, categories, manual_category_id)

        try:
            product = self._insert(db, name, key, category_id)
        except ConflictError:
            existing = self._get_by_key(db, key)
            if existing is None:
                raise TransportError(f"Could not create product '{name}', please retry")
            logger.warning(f"Lost creation race for '{name}', using product {existing.id}")
            return Resolution(product_id=existing.id, created=False)

        logger.info(f"Created new product: '{product.name}' (category {category_id})")
        return Resolution(product_id=product.id, created=True)

    def find_similar(self, db: Session, text: Optional[str], limit: Optional[int] = None) -> List[Product]:
        """
        Catalog rows whose normalized name contains the normalized query,
        most used first. Read only; an unreachable store yields [].
        """
        key = normalize(text)
        if not key:
            return []
        if limit is None:
            limit = settings.SUGGESTION_LIMIT

        return soft_read(
            db,
            f"Suggestion query '{key}'",
            lambda: db.query(Product)
            .filter(Product.normalized_name.contains(key, autoescape=True))
            .order_by(Product.usage_count.desc(), Product.name.asc())
            .limit(limit)
            .all(),
        )

    def popular_products(self, db: Session, category_id: int, limit: Optional[int] = None) -> List[Product]:
        """Products of one category, most used first."""
        if limit is None:
            limit = settings.POPULAR_PRODUCTS_LIMIT
        return soft_read(
            db,
            f"Popular products for category {category_id}",
            lambda: db.query(Product)
            .filter(Product.category_id == category_id)
            .order_by(Product.usage_count.desc(), Product.name.asc())
            .limit(limit)
            .all(),
        )

    def list_categories(self, db: Session) -> List[Category]:
        return soft_read(
            db, "Category listing", lambda: db.query(Category).order_by(Category.name).all()
        )

    def increment_usage(self, db: Session, product_id: int) -> Optional[Product]:
        """
        Best-effort read-increment-write. Concurrent attaches may lose an
        increment; the counter only ranks suggestions.
        """
        with write_step(db, "update usage count"):
            product = db.get(Product, product_id)
            if product is None:
                logger.warning(f"Usage increment skipped: product {product_id} not found")
                return None
            product.usage_count = (product.usage_count or 0) + 1
        return product

    def _get_by_key(self, db: Session, key: str) -> Optional[Product]:
        return strict_read(
            db,
            "look up product",
            lambda: db.query(Product).filter(Product.normalized_name == key).first(),
        )

    def _insert(self, db: Session, name: str, key: str, category_id: Optional[int]) -> Product:
        product = Product(
            name=name,
            normalized_name=key,
            category_id=category_id,
            usage_count=0,
            user_suggested=True,
        )
        try:
            with write_step(db, "create product"):
                db.add(product)
                db.flush()
        except IntegrityError as e:
            raise ConflictError(f"Product '{name}' already exists") from e
        return product


product_resolver = ProductResolver()
