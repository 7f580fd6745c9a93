import os
import unittest
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from storefront.db.session import Base
from storefront.models.category import Category
from storefront.models.product import Product
from storefront.schemas.filters import OrderFilters, ProductFilters
from storefront.services.predicates import (
    Predicate,
    PredicateKind,
    build_order_predicates,
    build_product_predicates,
    where_clauses,
)


class PredicateBuilderTests(unittest.TestCase):
    def test_empty_order_filters_emit_no_predicates(self):
        self.assertEqual(build_order_predicates(OrderFilters()), [])

    def test_order_filters_map_to_tagged_predicates(self):
        start = datetime(2026, 1, 1, tzinfo=timezone.utc)
        end = datetime(2026, 1, 31, tzinfo=timezone.utc)
        predicates = build_order_predicates(
            OrderFilters(status="PAID", user_id=3, start_date=start, end_date=end)
        )
        self.assertEqual(
            set(predicates),
            {
                Predicate(PredicateKind.EQUALITY, "status", "PAID"),
                Predicate(PredicateKind.FOREIGN_KEY, "user_id", 3),
                Predicate(PredicateKind.RANGE_LOWER, "created_at", start),
                Predicate(PredicateKind.RANGE_UPPER, "created_at", end),
            },
        )

    def test_product_listing_always_excludes_inactive(self):
        self.assertEqual(
            build_product_predicates(ProductFilters()),
            [Predicate(PredicateKind.EQUALITY, "active", True)],
        )

    def test_price_bounds_are_independent(self):
        predicates = build_product_predicates(ProductFilters(min_price=Decimal("200"), max_price=Decimal("50")))
        kinds = {(p.kind, p.value) for p in predicates if p.field == "price"}
        self.assertEqual(
            kinds,
            {(PredicateKind.RANGE_LOWER, Decimal("200")), (PredicateKind.RANGE_UPPER, Decimal("50"))},
        )

    def test_builder_is_deterministic(self):
        filters = ProductFilters(search="x", category_id=1, min_price=Decimal("1"))
        self.assertEqual(build_product_predicates(filters), build_product_predicates(filters))


class PredicateClauseTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.engine = create_engine("sqlite+pysqlite:///:memory:")
        Base.metadata.create_all(cls.engine)
        with Session(cls.engine) as session:
            category = Category(name="Geral", slug="geral")
            session.add(category)
            session.flush()
            for idx, (name, price, active) in enumerate(
                [
                    ("Camisa Azul", "49.99", True),
                    ("CAMISA verde", "50.00", True),
                    ("Bermuda", "150.00", True),
                    ("Camisa_Promo", "80.00", True),
                    ("Camisa antiga", "60.00", False),
                ]
            ):
                session.add(
                    Product(
                        name=name,
                        slug=f"p-{idx}",
                        description="-",
                        price=Decimal(price),
                        category_id=category.id,
                        active=active,
                    )
                )
            session.commit()

    @classmethod
    def tearDownClass(cls):
        cls.engine.dispose()

    def _names(self, filters: ProductFilters) -> list[str]:
        with Session(self.engine) as session:
            stmt = (
                select(Product.name)
                .where(*where_clauses(Product, build_product_predicates(filters)))
                .order_by(Product.id)
            )
            return list(session.scalars(stmt))

    def test_substring_match_ignores_case(self):
        self.assertEqual(
            self._names(ProductFilters(search="camisa")),
            ["Camisa Azul", "CAMISA verde", "Camisa_Promo"],
        )

    def test_substring_underscore_is_literal(self):
        self.assertEqual(self._names(ProductFilters(search="sa_")), ["Camisa_Promo"])

    def test_range_bounds_are_inclusive(self):
        self.assertEqual(
            self._names(ProductFilters(min_price=Decimal("50"), max_price=Decimal("150"))),
            ["CAMISA verde", "Bermuda", "Camisa_Promo"],
        )

    def test_inverted_range_matches_nothing(self):
        self.assertEqual(self._names(ProductFilters(min_price=Decimal("200"), max_price=Decimal("50"))), [])

    def test_category_id_past_key_range_matches_nothing(self):
        self.assertEqual(self._names(ProductFilters(category_id=99999999999999999999)), [])


if __name__ == "__main__":
    unittest.main()
