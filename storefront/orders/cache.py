"""In-process order cache indexed by order id and by user."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from storefront.orders.models import Order

_log = logging.getLogger(__name__)


class InMemoryOrderCache:
    """Thread-safe order cache with a per-user index."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._by_id: dict[str, Order] = {}
        self._by_user: dict[str, list[Order]] = {}
        _log.info("In-memory cache created")

    def get_by_id(self, order_id: str) -> Order | None:
        with self._lock:
            order = self._by_id.get(order_id)
        if order is not None:
            _log.info("Cache hit: order found by ID %s", order_id)
        else:
            _log.info("Cache miss: no order found by ID %s", order_id)
        return order

    def list_by_user(self, user_id: str) -> list[Order] | None:
        """Orders cached for a user, or ``None`` if the user is not indexed."""
        with self._lock:
            orders = self._by_user.get(user_id)
            orders = None if orders is None else list(orders)
        if orders is not None:
            _log.info("Cache hit: found %d orders for user %s", len(orders), user_id)
        else:
            _log.info("Cache miss: no orders found for user %s", user_id)
        return orders

    def save(self, order: Order) -> None:
        with self._lock:
            self._by_id[order.id] = order
            self._by_user.setdefault(order.user_id, []).append(order)
        _log.info("Cache save: stored order %s for user %s", order.id, order.user_id)

    def update(self, order: Order) -> None:
        with self._lock:
            self._by_id[order.id] = order
            kept = [o for o in self._by_user.get(order.user_id, []) if o.id != order.id]
            kept.append(order)
            self._by_user[order.user_id] = kept
        _log.info("Cache update: updated order %s for user %s", order.id, order.user_id)

    def delete(self, order_id: str) -> None:
        with self._lock:
            order = self._by_id.pop(order_id, None)
            if order is None:
                return
            self._by_user[order.user_id] = [
                o for o in self._by_user.get(order.user_id, []) if o.id != order_id
            ]
        _log.info("Cache delete: removed order %s for user %s", order_id, order.user_id)

    def load_from_db(self, orders: Iterable[Order]) -> None:
        orders = list(orders)
        with self._lock:
            self._by_id = {}
            self._by_user = {}
            for order in orders:
                self._by_id[order.id] = order
                self._by_user.setdefault(order.user_id, []).append(order)
        _log.info("Cache initialized: loaded %d orders from the database", len(orders))