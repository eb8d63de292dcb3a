"""Order and review use cases."""

from __future__ import annotations

import uuid
from datetime import datetime

from storefront.orders.models import Order, Review


def _now() -> datetime:
    return datetime.now().astimezone()


class OrderService:
    """Coordinates order storage, caching and event publishing."""

    def __init__(self, repo, publisher, cache) -> None:
        self._repo = repo
        self._publisher = publisher
        self._cache = cache

    def create(self, order: Order) -> Order:
        """Assign ids, compute the total, then store, cache and announce the order."""
        order.id = str(uuid.uuid4())
        for item in order.items:
            item.id = str(uuid.uuid4())
            item.order_id = order.id
        order.total = sum(item.price * item.quantity for item in order.items)
        order.status = "pending"
        order.timestamp = _now()
        self._repo.save(order)
        self._cache.save(order)
        self._publisher.publish_order_created(order)
        return order

    def get_by_id(self, order_id: str) -> Order:
        order = self._cache.get_by_id(order_id)
        if order is not None:
            return order
        return self._repo.find_by_id(order_id)

    def update_status(self, order_id: str, status: str) -> Order:
        self._repo.update_status(order_id, status)
        order = self._repo.find_by_id(order_id)
        self._cache.update(order)
        self._publisher.publish_order_updated(order)
        return order

    def list_by_user(self, user_id: str) -> list[Order]:
        orders = self._cache.list_by_user(user_id)
        if orders is not None:
            return orders
        return self._repo.find_by_user_id(user_id)


class ReviewService:
    """Review use cases backed by a review repository."""

    def __init__(self, repo) -> None:
        self._repo = repo

    def create_review(self, review: Review) -> Review:
        review.id = str(uuid.uuid4())
        now = _now()
        review.created_at = now
        review.updated_at = now
        self._repo.create(review)
        return review

    def update_review(self, review: Review) -> Review:
        review.updated_at = _now()
        self._repo.update(review)
        return review