import uuid

import pytest

from storefront.errors import NotFoundError
from storefront.inventory.http import create_app
from storefront.inventory.models import Product


class FakeProducts:
    def __init__(self):
        self.items = {}
        self.fail = None

    def create(self, product):
        if self.fail is not None:
            raise self.fail
        self.items[product.id] = product
        return product

    def get_by_id(self, product_id):
        try:
            return self.items[product_id]
        except KeyError:
            raise NotFoundError("product not found") from None

    def update(self, product_id, product):
        product.id = product_id
        self.items[product_id] = product
        return product

    def delete(self, product_id):
        if product_id not in self.items:
            raise NotFoundError("product not found")
        del self.items[product_id]

    def list(self):
        return list(self.items.values())


class FakeDiscounts:
    def __init__(self):
        self.created = []
        self.products = []

    def create(self, discount):
        self.created.append(discount)
        return discount

    def get_products_with_discount(self):
        return self.products

    def delete(self, discount_id):
        raise NotFoundError("discount not found")


@pytest.fixture
def products():
    return FakeProducts()


@pytest.fixture
def discounts():
    return FakeDiscounts()


@pytest.fixture
def client(products, discounts):
    return create_app(products, discounts).test_client()


VALID = {"name": "Lamp", "category": "Home", "price": 19.5, "stock": 3}


def test_create_product_assigns_id(client, products):
    response = client.post("/products", json=VALID)
    assert response.status_code == 201
    body = response.get_json()
    assert body["name"] == "Lamp"
    assert str(uuid.UUID(body["id"])) == body["id"]
    assert body["id"] in products.items


@pytest.mark.parametrize(
    "override",
    [{"name": ""}, {"category": ""}, {"price": 0}, {"stock": 0}, {"price": -1.0}],
)
def test_create_product_rejects_invalid_fields(client, products, override):
    response = client.post("/products", json={**VALID, **override})
    assert response.status_code == 400
    assert response.get_json() == {"error": "missing or invalid fields"}
    assert products.items == {}


def test_create_product_rejects_non_json(client):
    response = client.post("/products", data="not json", content_type="application/json")
    assert response.status_code == 400
    assert "error" in response.get_json()


def test_create_product_rejects_wrong_types(client):
    response = client.post("/products", json={**VALID, "stock": "many"})
    assert response.status_code == 400


def test_create_product_reports_usecase_failure(client, products):
    products.fail = RuntimeError("db down")
    response = client.post("/products", json=VALID)
    assert response.status_code == 500
    assert response.get_json() == {"error": "db down"}


def test_get_product(client, products):
    products.items["p1"] = Product(id="p1", name="Cup", category="Kitchen", price=2.0, stock=7)
    response = client.get("/products/p1")
    assert response.status_code == 200
    assert response.get_json() == products.items["p1"].to_dict()


def test_get_missing_product_is_404(client):
    response = client.get("/products/nope")
    assert response.status_code == 404
    assert response.get_json() == {"error": "Product not found"}


def test_update_product_uses_path_id(client, products):
    response = client.patch("/products/p9", json=VALID)
    assert response.status_code == 200
    assert response.get_json()["id"] == "p9"
    assert products.items["p9"].name == "Lamp"


def test_delete_product(client, products):
    products.items["p1"] = Product(id="p1")
    response = client.delete("/products/p1")
    assert response.status_code == 200
    assert response.get_json() == {"message": "Product deleted"}
    assert "p1" not in products.items


def test_delete_missing_product_is_500(client):
    response = client.delete("/products/gone")
    assert response.status_code == 500
    assert response.get_json() == {"error": "product not found"}


def test_list_products(client, products):
    products.items["a"] = Product(id="a", name="A")
    products.items["b"] = Product(id="b", name="B")
    response = client.get("/products")
    assert response.status_code == 200
    assert sorted(item["id"] for item in response.get_json()) == ["a", "b"]


def test_create_discount(client, discounts):
    payload = {
        "name": "Spring",
        "discount_percentage": 10,
        "applicable_products": ["p1"],
        "start_date": "2024-03-01T00:00:00Z",
        "end_date": "2024-04-01T00:00:00Z",
        "is_active": True,
    }
    response = client.post("/discounts", json=payload)
    assert response.status_code == 201
    body = response.get_json()
    assert str(uuid.UUID(body["id"])) == body["id"]
    assert body["start_date"] == payload["start_date"]
    assert discounts.created[0].applicable_products == ["p1"]


def test_products_with_discount(client, discounts):
    discounts.products = [Product(id="p1", name="Cup")]
    response = client.get("/discounts/products")
    assert response.status_code == 200
    assert response.get_json() == [discounts.products[0].to_dict()]


def test_delete_discount_failure(client):
    response = client.delete("/discounts/x")
    assert response.status_code == 500
    assert response.get_json() == {"error": "discount not found"}