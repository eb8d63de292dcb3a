"""Events recorded by the statistics service."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from storefront.inventory.models import _ZERO_TIME


@dataclass
class OrderEvent:
    """An order creation or update as seen on the message bus."""

    order_id: str = ""
    user_id: str = ""
    total: float = 0.0
    status: str = ""
    timestamp: datetime = _ZERO_TIME
    action: str = ""


@dataclass
class ProductEvent:
    """A product creation, update or deletion as seen on the message bus."""

    product_id: str = ""
    name: str = ""
    category: str = ""
    price: float = 0.0
    stock: int = 0
    timestamp: datetime = _ZERO_TIME
    action: str = ""