"""Publishing of order events to the message bus."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from storefront.orders.models import Order


def _rfc3339(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.astimezone()
    text = value.replace(microsecond=0).isoformat()
    return text[:-6] + "Z" if text.endswith("+00:00") else text


class NatsPublisher:
    """Publishes order events through a connection with ``publish(subject, data)``."""

    def __init__(self, connection) -> None:
        self._connection = connection

    def publish_order_created(self, order: Order) -> None:
        self._publish(
            "order.created",
            {
                "order_id": order.id,
                "user_id": order.user_id,
                "total": order.total,
                "order_time": _rfc3339(order.timestamp),
            },
        )

    def publish_order_updated(self, order: Order) -> None:
        self._publish(
            "order.updated",
            {
                "order_id": order.id,
                "user_id": order.user_id,
                "total": order.total,
                "status": order.status,
                "order_time": _rfc3339(order.timestamp),
            },
        )

    def _publish(self, topic: str, data: dict[str, Any]) -> None:
        event = {"action": topic, "time": _rfc3339(datetime.now().astimezone()), "data": data}
        payload = json.dumps(event, sort_keys=True, separators=(",", ":")).encode()
        self._connection.publish(topic, payload)