"""Product caches: in-process, Redis-backed, and a two-level combination."""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Iterable
from datetime import datetime, timedelta

import redis

from storefront.inventory.models import Product

_log = logging.getLogger(__name__)


class InMemoryProductCache:
    """Thread-safe dictionary of products keyed by id."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._products: dict[str, Product] = {}
        self.last_load = datetime.now()

    def get_all(self) -> list[Product]:
        with self._lock:
            return list(self._products.values())

    def get_by_id(self, product_id: str) -> Product | None:
        with self._lock:
            return self._products.get(product_id)

    def save(self, product: Product) -> None:
        with self._lock:
            self._products[product.id] = product

    def update(self, product: Product) -> None:
        self.save(product)

    def delete(self, product_id: str) -> None:
        with self._lock:
            self._products.pop(product_id, None)

    def load_from_db(self, products: Iterable[Product]) -> None:
        with self._lock:
            self._products = {product.id: product for product in products}
            self.last_load = datetime.now()


class RedisProductCache:
    """Products stored as JSON under prefixed keys with an expiry."""

    def __init__(
        self,
        client: redis.Redis | None = None,
        prefix: str = "product:",
        ttl: timedelta = timedelta(hours=24),
    ) -> None:
        self._client = client if client is not None else redis.Redis(host="localhost", port=6379)
        self._prefix = prefix
        self._ttl = ttl

    def _key(self, product_id: str) -> str:
        return self._prefix + product_id

    def get_all(self) -> list[Product]:
        return []

    def get_by_id(self, product_id: str) -> Product | None:
        try:
            data = self._client.get(self._key(product_id))
        except redis.RedisError:
            return None
        if data is None:
            return None
        try:
            product = Product.from_dict(json.loads(data))
        except ValueError:
            return None
        _log.info("REDIS HIT: %s", product_id)
        return product

    def save(self, product: Product) -> None:
        payload = json.dumps(product.to_dict())
        try:
            self._client.set(self._key(product.id), payload, ex=self._ttl)
        except redis.RedisError as exc:
            _log.warning("redis save failed for %s: %s", product.id, exc)

    def update(self, product: Product) -> None:
        self.save(product)

    def delete(self, product_id: str) -> None:
        try:
            self._client.delete(self._key(product_id))
        except redis.RedisError as exc:
            _log.warning("redis delete failed for %s: %s", product_id, exc)

    def load_from_db(self, products: Iterable[Product]) -> None:
        for product in products:
            self.save(product)


class MultiCache:
    """Memory cache in front of a second-level cache."""

    def __init__(self, mem, redis) -> None:
        self._mem = mem
        self._redis = redis

    def get_all(self) -> list[Product]:
        return self._mem.get_all()

    def get_by_id(self, product_id: str) -> Product | None:
        product = self._mem.get_by_id(product_id)
        if product is not None:
            return product
        product = self._redis.get_by_id(product_id)
        if product is not None:
            self._mem.save(product)
        return product

    def save(self, product: Product) -> None:
        self._mem.save(product)
        self._redis.save(product)

    def update(self, product: Product) -> None:
        self._mem.update(product)
        self._redis.update(product)

    def delete(self, product_id: str) -> None:
        self._mem.delete(product_id)
        self._redis.delete(product_id)

    def load_from_db(self, products: Iterable[Product]) -> None:
        products = list(products)
        self._mem.load_from_db(products)
        self._redis.load_from_db(products)