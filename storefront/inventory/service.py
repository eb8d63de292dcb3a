"""Product and discount use cases."""

from __future__ import annotations

import uuid

from storefront.inventory.models import Discount, Product


class ProductService:
    """Coordinates product storage, caching and event publishing."""

    def __init__(self, repo, cache, publisher) -> None:
        self._repo = repo
        self._cache = cache
        self._publisher = publisher

    def create(self, product: Product) -> Product:
        """Assign a fresh id, store, cache and announce the product."""
        product.id = str(uuid.uuid4())
        self._repo.save(product)
        self._cache.save(product)
        self._publisher.publish_product_created(product)
        return product

    def get_by_id(self, product_id: str) -> Product:
        product = self._cache.get_by_id(product_id)
        if product is not None:
            return product
        return self._repo.find_by_id(product_id)

    def update(self, product_id: str, product: Product) -> Product:
        product.id = product_id
        self._repo.update(product)
        self._cache.update(product)
        self._publisher.publish_product_updated(product)
        return product

    def delete(self, product_id: str) -> None:
        self._repo.delete(product_id)
        self._cache.delete(product_id)
        self._publisher.publish_product_deleted(product_id)

    def list(self) -> list[Product]:
        return self._cache.get_all()


class DiscountService:
    """Discount use cases backed by a discount repository."""

    def __init__(self, repo) -> None:
        self._repo = repo

    def create(self, discount: Discount) -> Discount:
        self._repo.save(discount)
        return discount

    def get_products_with_discount(self) -> list[Product]:
        return self._repo.get_products_with_discount()

    def delete(self, discount_id: str) -> None:
        self._repo.delete(discount_id)