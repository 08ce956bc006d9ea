"""
Tests for catalog find-or-create and suggestions
"""
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from shoplist.exceptions import NotFoundError, TransportError, ValidationError
from shoplist.models.product import Product


@pytest.mark.unit
class TestResolve:

    def test_creates_product_from_free_text(self, db_session, resolver, categories):
        resolution = resolver.resolve(db_session, custom_text="tomate")

        assert resolution.created is True
        product = db_session.get(Product, resolution.product_id)
        assert product.name == "Tomate"
        assert product.normalized_name == "tomate"
        assert product.category_id == categories["Frutas e Verduras"].id
        assert product.usage_count == 0
        assert product.user_suggested is True

    def test_same_normalized_name_resolves_to_same_product(self, db_session, resolver):
        first = resolver.resolve(db_session, custom_text="tomate")
        second = resolver.resolve(db_session, custom_text="TOMATE")
        third = resolver.resolve(db_session, custom_text="  Tômate ")

        assert second.created is False
        assert third.created is False
        assert first.product_id == second.product_id == third.product_id
        assert db_session.query(Product).count() == 1

    def test_lookup_does_not_touch_usage(self, db_session, resolver, populated_catalog):
        resolution = resolver.resolve(db_session, custom_text="leite integral")

        assert resolution.product_id == populated_catalog["Leite Integral"].id
        assert db_session.get(Product, resolution.product_id).usage_count == 3

    def test_manual_category_wins(self, db_session, resolver, categories):
        pet = categories["Pet Shop"].id
        resolution = resolver.resolve(db_session, custom_text="tomate", manual_category_id=pet)

        assert db_session.get(Product, resolution.product_id).category_id == pet

    def test_unknown_manual_category(self, db_session, resolver):
        with pytest.raises(NotFoundError):
            resolver.resolve(db_session, custom_text="tomate", manual_category_id=9999)
        assert db_session.query(Product).count() == 0

    def test_unmatched_name_gets_default_category(self, db_session, resolver, categories):
        resolution = resolver.resolve(db_session, custom_text="Vela de Aniversário")
        assert db_session.get(Product, resolution.product_id).category_id == categories["Mercearia"].id

    @pytest.mark.parametrize("text", ["", "   ", "\t\n"])
    def test_blank_text_rejected(self, db_session, resolver, text):
        with pytest.raises(ValidationError):
            resolver.resolve(db_session, custom_text=text)

    def test_requires_exactly_one_input(self, db_session, resolver):
        with pytest.raises(ValidationError):
            resolver.resolve(db_session)
        with pytest.raises(ValidationError):
            resolver.resolve(db_session, product_id=1, custom_text="tomate")

    def test_existing_product_id(self, db_session, resolver, populated_catalog):
        product = populated_catalog["Queijo Minas"]
        resolution = resolver.resolve(db_session, product_id=product.id)
        assert resolution.product_id == product.id
        assert resolution.created is False

    def test_missing_product_id(self, db_session, resolver):
        with pytest.raises(NotFoundError):
            resolver.resolve(db_session, product_id=4242)

    def test_uniqueness_race_returns_existing_row(self, db_session, resolver):
        """Another session inserted the row between our lookup and our insert."""
        winner = Product(name="Tomate", normalized_name="tomate", usage_count=0)
        db_session.add(winner)
        db_session.commit()

        real_lookup = resolver._get_by_key
        calls = []

        def stale_lookup(db, key):
            calls.append(key)
            if len(calls) == 1:
                return None
            return real_lookup(db, key)

        with patch.object(resolver, "_get_by_key", side_effect=stale_lookup):
            resolution = resolver.resolve(db_session, custom_text="Tomate")

        assert resolution.created is False
        assert resolution.product_id == winner.id
        assert len(calls) == 2
        assert db_session.query(Product).count() == 1

    def test_store_failure_on_create_surfaces(self, db_session, resolver):
        with patch.object(
            db_session, "commit", side_effect=OperationalError("INSERT", {}, Exception("db down"))
        ):
            with pytest.raises(TransportError) as exc_info:
                resolver.resolve(db_session, custom_text="tomate")

        assert exc_info.value.retryable is True
        assert db_session.query(Product).count() == 0


@pytest.mark.unit
class TestFindSimilar:

    def test_substring_matches_ordered_by_usage(self, db_session, resolver, populated_catalog):
        results = resolver.find_similar(db_session, "leite")

        assert [p.name for p in results] == ["Leite Desnatado", "Leite Integral"]
        # Read only: nothing was created
        assert db_session.query(Product).count() == 3

    def test_query_is_normalized(self, db_session, resolver, populated_catalog):
        assert [p.name for p in resolver.find_similar(db_session, "  LÉITE  ")] == [
            "Leite Desnatado",
            "Leite Integral",
        ]

    def test_ties_broken_by_name(self, db_session, resolver):
        db_session.add_all([
            Product(name="Suco De Uva", normalized_name="suco de uva", usage_count=2),
            Product(name="Suco De Laranja", normalized_name="suco de laranja", usage_count=2),
        ])
        db_session.commit()

        assert [p.name for p in resolver.find_similar(db_session, "suco")] == [
            "Suco De Laranja",
            "Suco De Uva",
        ]

    def test_blank_query(self, db_session, resolver, populated_catalog):
        assert resolver.find_similar(db_session, "  ") == []

    def test_limit(self, db_session, resolver, populated_catalog):
        assert len(resolver.find_similar(db_session, "e", limit=2)) == 2

    def test_like_wildcards_are_literal(self, db_session, resolver, populated_catalog):
        assert resolver.find_similar(db_session, "%") == []

    def test_store_failure_degrades_to_empty(self, db_session, resolver, populated_catalog):
        with patch.object(
            db_session, "query", side_effect=OperationalError("SELECT", {}, Exception("db down"))
        ):
            assert resolver.find_similar(db_session, "leite") == []


@pytest.mark.unit
class TestCatalogReads:

    def test_popular_products_by_category(self, db_session, resolver, populated_catalog, categories):
        results = resolver.popular_products(db_session, categories["Laticínios"].id, limit=2)
        assert [p.name for p in results] == ["Leite Desnatado", "Leite Integral"]

    def test_list_categories_sorted(self, db_session, resolver):
        names = [c.name for c in resolver.list_categories(db_session)]
        assert names == sorted(names)
        assert "Mercearia" in names

    def test_increment_usage(self, db_session, resolver, populated_catalog):
        product = populated_catalog["Queijo Minas"]
        resolver.increment_usage(db_session, product.id)
        resolver.increment_usage(db_session, product.id)
        assert db_session.get(Product, product.id).usage_count == 3

    def test_increment_usage_missing_product(self, db_session, resolver):
        assert resolver.increment_usage(db_session, 999) is None
