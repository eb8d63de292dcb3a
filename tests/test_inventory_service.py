import uuid

import pytest

from storefront.errors import NotFoundError
from storefront.inventory.cache import InMemoryProductCache
from storefront.inventory.models import Discount, Product
from storefront.inventory.service import DiscountService, ProductService


class FakeRepo:
    def __init__(self, fail=False):
        self.rows = {}
        self.fail = fail

    def save(self, product):
        if self.fail:
            raise RuntimeError("db down")
        self.rows[product.id] = product

    def find_by_id(self, product_id):
        try:
            return self.rows[product_id]
        except KeyError:
            raise NotFoundError("product not found") from None

    def update(self, product):
        if self.fail:
            raise RuntimeError("db down")
        self.rows[product.id] = product

    def delete(self, product_id):
        self.rows.pop(product_id, None)

    def find_all(self):
        return list(self.rows.values())


class FakePublisher:
    def __init__(self):
        self.events = []

    def publish_product_created(self, product):
        self.events.append(("created", product.id))

    def publish_product_updated(self, product):
        self.events.append(("updated", product.id))

    def publish_product_deleted(self, product_id):
        self.events.append(("deleted", product_id))


class FakeDiscountRepo:
    def __init__(self):
        self.saved = []
        self.products = [Product(id="a")]

    def save(self, discount):
        self.saved.append(discount)

    def get_products_with_discount(self):
        return self.products

    def delete(self, discount_id):
        if discount_id not in {d.id for d in self.saved}:
            raise NotFoundError("discount not found")


@pytest.fixture
def parts():
    return FakeRepo(), InMemoryProductCache(), FakePublisher()


def test_create_assigns_uuid_and_propagates(parts):
    repo, cache, publisher = parts
    service = ProductService(repo, cache, publisher)
    product = service.create(Product(id="ignored", name="Lamp"))
    uuid.UUID(product.id)
    assert product.id != "ignored"
    assert repo.rows[product.id] is product
    assert cache.get_by_id(product.id) is product
    assert publisher.events == [("created", product.id)]


def test_create_failure_skips_cache_and_event():
    cache, publisher = InMemoryProductCache(), FakePublisher()
    service = ProductService(FakeRepo(fail=True), cache, publisher)
    with pytest.raises(RuntimeError):
        service.create(Product(name="Lamp"))
    assert cache.get_all() == [] and publisher.events == []


def test_get_by_id_prefers_cache_then_repo(parts):
    repo, cache, publisher = parts
    service = ProductService(repo, cache, publisher)
    repo.rows["db"] = Product(id="db", name="FromDb")
    cache.save(Product(id="c", name="FromCache"))
    assert service.get_by_id("c").name == "FromCache"
    assert service.get_by_id("db").name == "FromDb"
    with pytest.raises(NotFoundError):
        service.get_by_id("none")


def test_update_sets_id(parts):
    repo, cache, publisher = parts
    service = ProductService(repo, cache, publisher)
    product = service.update("p9", Product(name="Desk"))
    assert product.id == "p9"
    assert cache.get_by_id("p9").name == "Desk"
    assert publisher.events == [("updated", "p9")]


def test_delete_removes_and_announces(parts):
    repo, cache, publisher = parts
    service = ProductService(repo, cache, publisher)
    created = service.create(Product(name="Lamp"))
    service.delete(created.id)
    assert created.id not in repo.rows
    assert cache.get_by_id(created.id) is None
    assert publisher.events[-1] == ("deleted", created.id)


def test_list_reads_cache(parts):
    repo, cache, publisher = parts
    service = ProductService(repo, cache, publisher)
    cache.load_from_db([Product(id="a"), Product(id="b")])
    assert sorted(p.id for p in service.list()) == ["a", "b"]


def test_discount_service_passes_through():
    repo = FakeDiscountRepo()
    service = DiscountService(repo)
    discount = Discount(id="d1", name="Sale")
    assert service.create(discount) is discount
    assert repo.saved == [discount]
    assert service.get_products_with_discount() == [Product(id="a")]
    service.delete("d1")
    with pytest.raises(NotFoundError):
        service.delete("d2")