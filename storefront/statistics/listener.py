"""Message bus subscribers that record order and product events."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from storefront.errors import InvalidArgumentError
from storefront.statistics.models import OrderEvent, ProductEvent
from storefront.statistics.service import _parse_rfc3339

_log = logging.getLogger(__name__)

PRODUCT_ACTIONS = ("created", "updated", "deleted")


def _payload(message: Any) -> Any:
    """The raw bytes of a delivered message, or the value itself."""
    return getattr(message, "data", message)


def _decode_object(data: Any) -> dict[str, Any]:
    """Decode a JSON document that must be an object; ``null`` counts as empty."""
    try:
        raw = json.loads(data)
    except (TypeError, ValueError) as exc:
        raise InvalidArgumentError(f"invalid JSON: {exc}") from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise InvalidArgumentError("expected a JSON object")
    return raw


def _typed_string(raw: Mapping, key: str) -> str:
    value = raw.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise InvalidArgumentError(f"{key} must be a string")
    return value


def _typed_number(raw: Mapping, key: str) -> float:
    value = raw.get(key)
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentError(f"{key} must be a number")
    return float(value)


def _loose_string(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _loose_number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def _loose_int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return int(value)


@dataclass
class OrderCreatedEvent:
    """The user and time carried by an ``order.created`` message."""

    user_id: str = ""
    order_time: str = ""

    @classmethod
    def from_json(cls, data: Any) -> OrderCreatedEvent:
        raw = _decode_object(data)
        return cls(
            user_id=_typed_string(raw, "user_id"),
            order_time=_typed_string(raw, "order_time"),
        )


def _subscribe(connection, topic: str, handler: Callable[[Any], Any]) -> None:
    try:
        connection.subscribe(topic, lambda message: handler(_payload(message)))
    except Exception as exc:
        _log.error("Failed to subscribe to %s: %s", topic, exc)


def subscribe_to_events(connection, repo) -> None:
    """Subscribe to order and product topics, storing each event in ``repo``."""
    _subscribe(connection, "order.created", lambda data: handle_order_created(repo, data))
    _subscribe(connection, "order.updated", lambda data: handle_order_updated(repo, data))
    for action in PRODUCT_ACTIONS:
        _subscribe(connection, f"product.{action}", product_event_handler(repo, action))


def handle_order_created(repo, data: Any) -> OrderEvent | None:
    """Record an ``order.created`` message whose fields sit at the top level.

    Returns the event handed to the repository, or ``None`` when the message
    was dropped. Storage failures are logged, not raised.
    """
    try:
        raw = _decode_object(data)
        user_id = _typed_string(raw, "user_id")
        order_id = _typed_string(raw, "order_id")
        total = _typed_number(raw, "total")
        order_time = _typed_string(raw, "order_time")
    except InvalidArgumentError as exc:
        _log.error("Failed to parse order.created event: %s", exc)
        return None
    if not order_time:
        return None
    try:
        timestamp = _parse_rfc3339(order_time)
    except InvalidArgumentError as exc:
        _log.error("Failed to parse order_time format: %s %s", order_time, exc)
        return None
    event = OrderEvent(
        order_id=order_id,
        user_id=user_id,
        total=total,
        timestamp=timestamp,
        action="created",
    )
    _store(repo.save_order_event, event, "order.CREATED")
    return event


def handle_order_updated(repo, data: Any) -> OrderEvent | None:
    """Record an ``order.updated`` message whose fields sit under ``data``.

    Returns the event handed to the repository, or ``None`` when the message
    was dropped. Storage failures are logged, not raised.
    """
    try:
        raw = _decode_object(data)
    except InvalidArgumentError as exc:
        _log.error("Failed to parse order.updated event: %s", exc)
        return None
    fields = raw.get("data")
    if not isinstance(fields, dict):
        _log.error("Missing data field in order.updated")
        return None
    try:
        timestamp = _parse_rfc3339(_loose_string(fields.get("order_time")))
    except InvalidArgumentError as exc:
        _log.error("Invalid timestamp in order.updated: %s", exc)
        return None
    event = OrderEvent(
        order_id=_loose_string(fields.get("order_id")),
        user_id=_loose_string(fields.get("user_id")),
        total=_loose_number(fields.get("total")),
        status=_loose_string(fields.get("status")),
        timestamp=timestamp,
        action="updated",
    )
    _store(repo.save_order_event, event, "order.UPDATED")
    return event


def product_event_handler(repo, action: str) -> Callable[[Any], ProductEvent | None]:
    """Build a handler recording ``product.<action>`` messages in ``repo``."""
    label = f"product.{action.upper()}"

    def handle(data: Any) -> ProductEvent | None:
        try:
            raw = _decode_object(data)
        except InvalidArgumentError as exc:
            _log.error("Failed to parse %s event: %s", label, exc)
            return None
        fields = raw.get("data")
        if not isinstance(fields, dict):
            _log.error("Invalid 'data' field in %s event", label)
            return None
        event = ProductEvent(
            product_id=_loose_string(fields.get("id")),
            name=_loose_string(fields.get("name")),
            category=_loose_string(fields.get("category")),
            price=_loose_number(fields.get("price")),
            stock=_loose_int(fields.get("stock")),
            action=action,
            timestamp=datetime.now().astimezone(),
        )
        _store(repo.save_product_event, event, label)
        return event

    return handle


def _store(save: Callable[[Any], Any], event: Any, label: str) -> None:
    _log.info("Saving %s event: %r", label, event)
    try:
        save(event)
    except Exception as exc:
        _log.error("Failed to save %s event: %s", label, exc)


def subscribe_order_stats(connection, service) -> None:
    """Subscribe to ``order.created`` and record each order through ``service``."""

    def handle(data: Any) -> None:
        try:
            event = OrderCreatedEvent.from_json(data)
        except InvalidArgumentError as exc:
            _log.error("Failed to parse NATS event: %s", exc)
            return
        try:
            service.save_user_order(event.user_id, event.order_time)
        except Exception as exc:
            _log.error("Failed to save order stat: %s", exc)
            return
        _log.info("Order stat saved for user %s", event.user_id)

    try:
        connection.subscribe("order.created", lambda message: handle(_payload(message)))
    except Exception as exc:
        _log.error("NATS subscription failed: %s", exc)