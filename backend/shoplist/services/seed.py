"""
Default category reference set.
"""

import logging

from sqlalchemy.orm import Session

from shoplist.models.category import Category
from shoplist.services.categorization import CATEGORY_RULES

logger = logging.getLogger(__name__)

CATEGORY_ICONS = {
    "Frutas e Verduras": "🥬",
    "Carnes e Peixes": "🥩",
    "Laticínios": "🧀",
    "Padaria": "🍞",
    "Bebidas": "🥤",
    "Limpeza": "🧽",
    "Higiene": "🧴",
    "Congelados": "🧊",
    "Enlatados": "🥫",
    "Cereais e Grãos": "🌾",
    "Mercearia": "🛒",
    "Pet Shop": "🐾",
}


def seed_categories(db: Session) -> int:
    """Insert missing rule categories. Returns how many were added."""
    existing = {name for (name,) in db.query(Category.name).all()}
    added = 0
    for name, _ in CATEGORY_RULES:
        if name in existing:
            continue
        db.add(Category(name=name, icon=CATEGORY_ICONS.get(name)))
        added += 1
    if added:
        db.commit()
        logger.info(f"Seeded {added} categories")
    return added
