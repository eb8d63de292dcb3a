"""SQL-backed storage for orders, their items and product reviews."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine

from storefront.errors import NotFoundError
from storefront.orders.models import Order, OrderItem, Review

_SELECT_ORDERS = "SELECT id, user_id, total, status, timestamp FROM orders"
_SELECT_ITEMS = (
    "SELECT id, order_id, product_id, quantity, price FROM order_items "
    "WHERE order_id = :order_id"
)


def _to_datetime(value: Any) -> datetime:
    """Accept a driver-native datetime or its ISO text form."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        cleaned = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
        return datetime.fromisoformat(cleaned)
    raise TypeError(f"cannot read a timestamp from {value!r}")


def _row_to_order(row: Mapping) -> Order:
    return Order(
        id=row["id"],
        user_id=row["user_id"],
        total=float(row["total"]),
        status=row["status"],
        timestamp=_to_datetime(row["timestamp"]),
    )


def _row_to_item(row: Mapping) -> OrderItem:
    return OrderItem(
        id=row["id"],
        order_id=row["order_id"],
        product_id=row["product_id"],
        quantity=int(row["quantity"]),
        price=float(row["price"]),
    )


def _load_items(conn: Connection, order_id: str) -> list[OrderItem]:
    rows = conn.execute(text(_SELECT_ITEMS), {"order_id": order_id}).mappings().all()
    return [_row_to_item(row) for row in rows]


def _load_orders(conn: Connection, clause: str = "", params: dict | None = None) -> list[Order]:
    rows = conn.execute(text(_SELECT_ORDERS + clause), params or {}).mappings().all()
    orders = [_row_to_order(row) for row in rows]
    for order in orders:
        order.items = _load_items(conn, order.id)
    return orders


class PostgresOrderRepository:
    """Orders, order items and reviews tables access."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    @classmethod
    def connect(cls, url: str) -> PostgresOrderRepository:
        """Create an engine for ``url`` and check that the database answers."""
        engine = create_engine(url)
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return cls(engine)

    def save(self, order: Order) -> None:
        """Store the order and its items in one transaction."""
        with self.engine.begin() as conn:
            conn.execute(
                text(
                    "INSERT INTO orders (id, user_id, total, status, timestamp) "
                    "VALUES (:id, :user_id, :total, :status, :timestamp)"
                ),
                {
                    "id": order.id,
                    "user_id": order.user_id,
                    "total": order.total,
                    "status": order.status,
                    "timestamp": order.timestamp,
                },
            )
            if order.items:
                conn.execute(
                    text(
                        "INSERT INTO order_items (id, order_id, product_id, quantity, price) "
                        "VALUES (:id, :order_id, :product_id, :quantity, :price)"
                    ),
                    [item.to_dict() for item in order.items],
                )

    def find_by_id(self, order_id: str) -> Order:
        with self.engine.connect() as conn:
            orders = _load_orders(conn, " WHERE id = :id", {"id": order_id})
        if not orders:
            raise NotFoundError("order not found")
        return orders[0]

    def update_status(self, order_id: str, status: str) -> None:
        """Set the status and stamp the order with the current time."""
        with self.engine.begin() as conn:
            conn.execute(
                text("UPDATE orders SET status = :status, timestamp = :timestamp WHERE id = :id"),
                {"status": status, "timestamp": datetime.now().astimezone(), "id": order_id},
            )

    def find_by_user_id(self, user_id: str) -> list[Order]:
        with self.engine.connect() as conn:
            return _load_orders(conn, " WHERE user_id = :user_id", {"user_id": user_id})

    def find_all(self) -> list[Order]:
        with self.engine.connect() as conn:
            return _load_orders(conn)

    def create(self, review: Review) -> None:
        with self.engine.begin() as conn:
            conn.execute(
                text(
                    "INSERT INTO reviews (id, product_id, user_id, rating, comment, "
                    "created_at, updated_at) VALUES (:id, :product_id, :user_id, :rating, "
                    ":comment, :created_at, :updated_at)"
                ),
                {
                    "id": review.id,
                    "product_id": review.product_id,
                    "user_id": review.user_id,
                    "rating": review.rating,
                    "comment": review.comment,
                    "created_at": review.created_at,
                    "updated_at": review.updated_at,
                },
            )

    def update(self, review: Review) -> None:
        with self.engine.begin() as conn:
            conn.execute(
                text(
                    "UPDATE reviews SET rating = :rating, comment = :comment, "
                    "updated_at = :updated_at WHERE id = :id"
                ),
                {
                    "rating": review.rating,
                    "comment": review.comment,
                    "updated_at": review.updated_at,
                    "id": review.id,
                },
            )