"""Inventory domain records and their JSON representation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from storefront.errors import InvalidArgumentError

_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


def _format_time(value: datetime) -> str:
    text = value.isoformat()
    return text[:-6] + "Z" if text.endswith("+00:00") else text


def _parse_time(data: Mapping, key: str) -> datetime:
    value = data.get(key)
    if value is None:
        return _ZERO_TIME
    if not isinstance(value, str):
        raise InvalidArgumentError(f"{key} must be a timestamp string")
    text = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise InvalidArgumentError(f"{key} is not an RFC 3339 timestamp: {value!r}") from exc
    if parsed.tzinfo is None:
        raise InvalidArgumentError(f"{key} must carry a time zone offset")
    return parsed


def _string(data: Mapping, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise InvalidArgumentError(f"{key} must be a string")
    return value


def _number(data: Mapping, key: str) -> float:
    value = data.get(key)
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentError(f"{key} must be a number")
    return float(value)


def _integer(data: Mapping, key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{key} must be an integer")
    return value


def _boolean(data: Mapping, key: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise InvalidArgumentError(f"{key} must be a boolean")
    return value


def _string_list(data: Mapping, key: str) -> list[str]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise InvalidArgumentError(f"{key} must be a list of strings")
    return list(value)


def _require_mapping(data: Any) -> Mapping:
    if not isinstance(data, Mapping):
        raise InvalidArgumentError("expected a JSON object")
    return data


@dataclass
class Product:
    """A product held in stock."""

    id: str = ""
    name: str = ""
    category: str = ""
    price: float = 0.0
    stock: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "price": self.price,
            "stock": self.stock,
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> Product:
        data = _require_mapping(data)
        return cls(
            id=_string(data, "id"),
            name=_string(data, "name"),
            category=_string(data, "category"),
            price=_number(data, "price"),
            stock=_integer(data, "stock"),
        )


@dataclass
class Discount:
    """A percentage discount applying to a set of products over a period."""

    id: str = ""
    name: str = ""
    description: str = ""
    discount_percentage: float = 0.0
    applicable_products: list[str] = field(default_factory=list)
    start_date: datetime = _ZERO_TIME
    end_date: datetime = _ZERO_TIME
    is_active: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "discount_percentage": self.discount_percentage,
            "applicable_products": list(self.applicable_products),
            "start_date": _format_time(self.start_date),
            "end_date": _format_time(self.end_date),
            "is_active": self.is_active,
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> Discount:
        data = _require_mapping(data)
        return cls(
            id=_string(data, "id"),
            name=_string(data, "name"),
            description=_string(data, "description"),
            discount_percentage=_number(data, "discount_percentage"),
            applicable_products=_string_list(data, "applicable_products"),
            start_date=_parse_time(data, "start_date"),
            end_date=_parse_time(data, "end_date"),
            is_active=_boolean(data, "is_active"),
        )