"""
Product database model (the shared catalog).
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from shoplist.database import Base


class Product(Base):
    """Catalog product, identified by its normalized name."""

    __tablename__ = "products"
    __table_args__ = (
        Index("idx_product_category_usage", "category_id", "usage_count"),
        CheckConstraint("usage_count >= 0", name="ck_product_usage_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)  # Display form, e.g. "Leite Integral"
    normalized_name = Column(String, nullable=False, unique=True, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    usage_count = Column(Integer, nullable=False, default=0)
    user_suggested = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)

    # Relationships
    category = relationship("Category", back_populates="products")
    list_items = relationship("ListItem", back_populates="product")

    def __repr__(self):
        return f"<Product(id={self.id}, name={self.name!r}, usage_count={self.usage_count})>"
