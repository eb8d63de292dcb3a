"""SQL-backed storage and aggregate queries for order and product events."""

from __future__ import annotations

import logging
from collections import Counter

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from storefront.orders.repository import _to_datetime
from storefront.statistics.models import OrderEvent, ProductEvent

_log = logging.getLogger(__name__)


class StatisticsRepository:
    """Order and product event tables access."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    @classmethod
    def connect(cls, url: str) -> StatisticsRepository:
        """Create an engine for ``url`` and check that the database answers."""
        engine = create_engine(url)
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return cls(engine)

    def save_order_event(self, event: OrderEvent) -> None:
        try:
            with self.engine.begin() as conn:
                conn.execute(
                    text(
                        "INSERT INTO order_events (order_id, user_id, total, status, action, "
                        "timestamp) VALUES (:order_id, :user_id, :total, :status, :action, "
                        ":timestamp)"
                    ),
                    {
                        "order_id": event.order_id,
                        "user_id": event.user_id,
                        "total": event.total,
                        "status": event.status,
                        "action": event.action,
                        "timestamp": event.timestamp,
                    },
                )
        except SQLAlchemyError as exc:
            _log.error("SaveOrderEvent error: %s", exc)
            raise

    def save_product_event(self, event: ProductEvent) -> None:
        try:
            with self.engine.begin() as conn:
                conn.execute(
                    text(
                        "INSERT INTO product_events (product_id, name, category, price, stock, "
                        "action, timestamp) VALUES (:product_id, :name, :category, :price, "
                        ":stock, :action, :timestamp)"
                    ),
                    {
                        "product_id": event.product_id,
                        "name": event.name,
                        "category": event.category,
                        "price": event.price,
                        "stock": event.stock,
                        "action": event.action,
                        "timestamp": event.timestamp,
                    },
                )
        except SQLAlchemyError as exc:
            _log.error("SaveProductEvent error: %s", exc)
            raise

    def count_orders_by_user(self, user_id: str) -> int:
        with self.engine.connect() as conn:
            return int(
                conn.execute(
                    text("SELECT COUNT(*) FROM order_events WHERE user_id = :user_id"),
                    {"user_id": user_id},
                ).scalar_one()
            )

    def orders_grouped_by_hour(self, user_id: str) -> dict[int, int]:
        """Number of a user's order events per hour of day, in hour order."""
        with self.engine.connect() as conn:
            stamps = conn.execute(
                text("SELECT timestamp FROM order_events WHERE user_id = :user_id"),
                {"user_id": user_id},
            ).scalars().all()
        counts = Counter(_to_datetime(stamp).hour for stamp in stamps)
        return dict(sorted(counts.items()))

    def count_total_users(self) -> int:
        with self.engine.connect() as conn:
            return int(
                conn.execute(text("SELECT COUNT(DISTINCT user_id) FROM order_events")).scalar_one()
            )

    def count_total_products(self) -> int:
        with self.engine.connect() as conn:
            return int(
                conn.execute(
                    text(
                        "SELECT COUNT(DISTINCT product_id) FROM product_events "
                        "WHERE action = :action"
                    ),
                    {"action": "created"},
                ).scalar_one()
            )