"""
pytest configuration - shared fixtures
"""
import sys
import os
from typing import Generator

# Keep the module level engine and pointer file away from the working tree
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("POINTER_FILE", os.path.join(os.path.dirname(__file__), ".pointer-unused.json"))

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

# Add backend directory to sys.path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../backend"))

from shoplist.database import Base
from shoplist.models.category import Category
from shoplist.models.product import Product
from shoplist.models.shopping_list import ShoppingList, ListItem
from shoplist.services.list_items import ListItemStateMachine
from shoplist.services.list_lifecycle import ListLifecycleManager
from shoplist.services.pointer_store import CurrentListPointer, MemoryKeyValueStore
from shoplist.services.product_resolver import ProductResolver
from shoplist.services.seed import seed_categories


@pytest.fixture
def test_db() -> Generator[Session, None, None]:
    """Create in-memory SQLite database for testing"""
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine, autoflush=False)
    session = SessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def db_session(test_db):
    """Database with the default categories seeded"""
    seed_categories(test_db)
    return test_db


@pytest.fixture
def categories(db_session):
    """Category name -> Category"""
    return {c.name: c for c in db_session.query(Category).all()}


@pytest.fixture
def resolver():
    return ProductResolver()


@pytest.fixture
def machine(resolver):
    return ListItemStateMachine(resolver)


@pytest.fixture
def pointer():
    return CurrentListPointer(MemoryKeyValueStore())


@pytest.fixture
def lifecycle(pointer):
    return ListLifecycleManager(pointer)


@pytest.fixture
def active_list(db_session, lifecycle):
    """Fresh active list that is also the current pointer"""
    return lifecycle.create_list(db_session)


@pytest.fixture
def populated_catalog(db_session, categories):
    """Catalog with a few dairy products of different popularity"""
    dairy = categories["Laticínios"]
    products = [
        Product(name="Leite Integral", normalized_name="leite integral",
                category_id=dairy.id, usage_count=3),
        Product(name="Leite Desnatado", normalized_name="leite desnatado",
                category_id=dairy.id, usage_count=7),
        Product(name="Queijo Minas", normalized_name="queijo minas",
                category_id=dairy.id, usage_count=1),
    ]
    db_session.add_all(products)
    db_session.commit()
    return {p.name: p for p in products}
