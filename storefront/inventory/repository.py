"""SQL-backed storage for products and discounts."""

from __future__ import annotations

import json

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine

from storefront.errors import NotFoundError
from storefront.inventory.models import Discount, Product

_SELECT_PRODUCTS = "SELECT id, name, category, price, stock FROM products"


def _row_to_product(row) -> Product:
    return Product(
        id=row.id,
        name=row.name,
        category=row.category,
        price=float(row.price),
        stock=int(row.stock),
    )


def _select_products(conn: Connection) -> list[Product]:
    return [_row_to_product(row) for row in conn.execute(text(_SELECT_PRODUCTS))]


class PostgresProductRepository:
    """Products table access."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    @classmethod
    def connect(cls, url: str) -> PostgresProductRepository:
        """Create an engine for ``url`` and check that the database answers."""
        engine = create_engine(url)
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return cls(engine)

    def save(self, product: Product) -> None:
        with self.engine.begin() as conn:
            conn.execute(
                text(
                    "INSERT INTO products (id, name, category, price, stock) "
                    "VALUES (:id, :name, :category, :price, :stock)"
                ),
                product.to_dict(),
            )

    def find_by_id(self, product_id: str) -> Product:
        with self.engine.connect() as conn:
            row = conn.execute(
                text(_SELECT_PRODUCTS + " WHERE id = :id"), {"id": product_id}
            ).first()
        if row is None:
            raise NotFoundError("product not found")
        return _row_to_product(row)

    def update(self, product: Product) -> None:
        with self.engine.begin() as conn:
            conn.execute(
                text(
                    "UPDATE products SET name = :name, category = :category, "
                    "price = :price, stock = :stock WHERE id = :id"
                ),
                product.to_dict(),
            )

    def delete(self, product_id: str) -> None:
        with self.engine.begin() as conn:
            conn.execute(text("DELETE FROM products WHERE id = :id"), {"id": product_id})

    def find_all(self) -> list[Product]:
        with self.engine.connect() as conn:
            return _select_products(conn)


def _decode_ids(raw) -> list[str]:
    if raw is None:
        return []
    if isinstance(raw, (str, bytes)):
        raw = json.loads(raw)
    return [str(item) for item in raw]


class PostgresDiscountRepository:
    """Discounts table access."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def save(self, discount: Discount) -> None:
        with self.engine.begin() as conn:
            conn.execute(
                text(
                    "INSERT INTO discounts (id, name, description, discount_percentage, "
                    "applicable_products, start_date, end_date, is_active) "
                    "VALUES (:id, :name, :description, :discount_percentage, "
                    ":applicable_products, :start_date, :end_date, :is_active)"
                ),
                {
                    "id": discount.id,
                    "name": discount.name,
                    "description": discount.description,
                    "discount_percentage": discount.discount_percentage,
                    "applicable_products": json.dumps(discount.applicable_products),
                    "start_date": discount.start_date,
                    "end_date": discount.end_date,
                    "is_active": discount.is_active,
                },
            )

    def get_products_with_discount(self) -> list[Product]:
        """Products named by any active discount.

        Each matching product is listed once per active discount, as with a
        join of products against the active discounts.
        """
        with self.engine.connect() as conn:
            active_lists = conn.execute(
                text("SELECT applicable_products FROM discounts WHERE is_active = :active"),
                {"active": True},
            ).scalars().all()
            if not active_lists:
                return []
            ids = {product_id for raw in active_lists for product_id in _decode_ids(raw)}
            matching = [product for product in _select_products(conn) if product.id in ids]
        return [product for _ in active_lists for product in matching]

    def delete(self, discount_id: str) -> None:
        with self.engine.begin() as conn:
            result = conn.execute(
                text("DELETE FROM discounts WHERE id = :id"), {"id": discount_id}
            )
        if result.rowcount == 0:
            raise NotFoundError("discount not found")