"""Order domain records and their JSON representation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from storefront.errors import InvalidArgumentError
from storefront.inventory.models import (
    _ZERO_TIME,
    _format_time,
    _integer,
    _number,
    _parse_time,
    _require_mapping,
    _string,
)


@dataclass
class OrderItem:
    """One product line of an order."""

    id: str = ""
    order_id: str = ""
    product_id: str = ""
    quantity: int = 0
    price: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "order_id": self.order_id,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "price": self.price,
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> OrderItem:
        data = _require_mapping(data)
        return cls(
            id=_string(data, "id"),
            order_id=_string(data, "order_id"),
            product_id=_string(data, "product_id"),
            quantity=_integer(data, "quantity"),
            price=_number(data, "price"),
        )


def _items(data: Mapping) -> list[OrderItem]:
    value = data.get("items")
    if value is None:
        return []
    if not isinstance(value, list):
        raise InvalidArgumentError("items must be a list")
    return [OrderItem.from_dict(item) for item in value]


@dataclass
class Order:
    """A customer's order."""

    id: str = ""
    user_id: str = ""
    items: list[OrderItem] = field(default_factory=list)
    total: float = 0.0
    status: str = ""
    timestamp: datetime = _ZERO_TIME

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "items": [item.to_dict() for item in self.items],
            "total": self.total,
            "status": self.status,
            "timestamp": _format_time(self.timestamp),
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> Order:
        data = _require_mapping(data)
        return cls(
            id=_string(data, "id"),
            user_id=_string(data, "user_id"),
            items=_items(data),
            total=_number(data, "total"),
            status=_string(data, "status"),
            timestamp=_parse_time(data, "timestamp"),
        )


@dataclass
class Review:
    """A user's rating and comment on a product."""

    id: str = ""
    product_id: str = ""
    user_id: str = ""
    rating: float = 0.0
    comment: str = ""
    created_at: datetime = _ZERO_TIME
    updated_at: datetime = _ZERO_TIME