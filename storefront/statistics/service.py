"""Statistics use cases."""

from __future__ import annotations

from datetime import datetime

from storefront.errors import InvalidArgumentError
from storefront.statistics.models import OrderEvent


def _parse_rfc3339(value: str) -> datetime:
    cleaned = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    try:
        parsed = datetime.fromisoformat(cleaned)
    except ValueError as exc:
        raise InvalidArgumentError(f"not an RFC 3339 timestamp: {value!r}") from exc
    if parsed.tzinfo is None:
        raise InvalidArgumentError(f"timestamp lacks a time zone offset: {value!r}")
    return parsed


class StatisticsService:
    """Reads aggregate statistics and records order events."""

    def __init__(self, repo) -> None:
        self._repo = repo

    def get_user_order_stats(self, user_id: str) -> tuple[int, dict[int, int]]:
        """Total number of a user's orders and their count per hour of day."""
        total = self._repo.count_orders_by_user(user_id)
        hourly = self._repo.orders_grouped_by_hour(user_id)
        return total, hourly

    def get_general_stats(self) -> tuple[int, int]:
        """Number of distinct users with orders and of distinct created products."""
        users = self._repo.count_total_users()
        products = self._repo.count_total_products()
        return users, products

    def save_user_order(self, user_id: str, order_time: str) -> OrderEvent:
        """Record an order by ``user_id`` placed at the RFC 3339 ``order_time``."""
        event = OrderEvent(user_id=user_id, timestamp=_parse_rfc3339(order_time))
        self._repo.save_order_event(event)
        return event