"""
Category database model.
"""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from shoplist.database import Base


class Category(Base):
    """Read-only reference category for products."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, unique=True)
    icon = Column(String, nullable=True)  # Emoji shown next to the name

    # Relationships
    products = relationship("Product", back_populates="category")
