"""Publishing of product change events to the message bus."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from storefront.inventory.models import Product


def _now_rfc3339() -> str:
    text = datetime.now().astimezone().replace(microsecond=0).isoformat()
    return text[:-6] + "Z" if text.endswith("+00:00") else text


class NatsPublisher:
    """Publishes product events through a connection with ``publish(subject, data)``."""

    def __init__(self, connection) -> None:
        self._connection = connection

    def publish_product_created(self, product: Product) -> None:
        self._publish("product.created", product.to_dict())

    def publish_product_updated(self, product: Product) -> None:
        self._publish("product.updated", product.to_dict())

    def publish_product_deleted(self, product_id: str) -> None:
        self._publish("product.deleted", {"id": product_id})

    def _publish(self, topic: str, data: Any) -> None:
        event = {"action": topic, "data": data, "time": _now_rfc3339()}
        payload = json.dumps(event, separators=(",", ":")).encode()
        self._connection.publish(topic, payload)