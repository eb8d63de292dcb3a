from datetime import datetime, timedelta, timezone

import pytest

from storefront.errors import InvalidArgumentError
from storefront.inventory.models import Discount, Product


def test_product_round_trip():
    product = Product(id="p1", name="Lamp", category="home", price=19.5, stock=4)
    assert Product.from_dict(product.to_dict()) == product


def test_product_to_dict_keys():
    data = Product(id="p1", name="Lamp").to_dict()
    assert list(data) == ["id", "name", "category", "price", "stock"]


def test_product_missing_fields_take_zero_values():
    product = Product.from_dict({"name": "Lamp"})
    assert product == Product(name="Lamp")


def test_product_integer_price_becomes_float():
    product = Product.from_dict({"price": 3})
    assert product.price == 3.0
    assert isinstance(product.price, float)


@pytest.mark.parametrize(
    "data",
    [
        {"name": 5},
        {"price": "cheap"},
        {"stock": 1.5},
        {"stock": True},
        ["not", "an", "object"],
    ],
)
def test_product_rejects_bad_types(data):
    with pytest.raises(InvalidArgumentError):
        Product.from_dict(data)


def test_discount_round_trip():
    discount = Discount(
        id="d1",
        name="Spring",
        description="Seasonal",
        discount_percentage=15.0,
        applicable_products=["p1", "p2"],
        start_date=datetime(2024, 3, 1, tzinfo=timezone.utc),
        end_date=datetime(2024, 3, 31, 12, tzinfo=timezone(timedelta(hours=6))),
        is_active=True,
    )
    assert Discount.from_dict(discount.to_dict()) == discount


def test_discount_formats_utc_with_z():
    discount = Discount(start_date=datetime(2024, 3, 1, tzinfo=timezone.utc))
    assert discount.to_dict()["start_date"] == "2024-03-01T00:00:00Z"


def test_discount_zero_time_default():
    discount = Discount.from_dict({})
    assert discount.to_dict()["end_date"] == "0001-01-01T00:00:00Z"
    assert discount.applicable_products == []


def test_discount_parses_z_suffix():
    discount = Discount.from_dict({"start_date": "2024-03-01T10:00:00Z"})
    assert discount.start_date == datetime(2024, 3, 1, 10, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "data",
    [
        {"start_date": "yesterday"},
        {"start_date": "2024-03-01T10:00:00"},
        {"applicable_products": [1, 2]},
        {"is_active": "yes"},
    ],
)
def test_discount_rejects_bad_values(data):
    with pytest.raises(InvalidArgumentError):
        Discount.from_dict(data)