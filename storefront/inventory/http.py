"""HTTP routes for products and discounts."""

from __future__ import annotations

import uuid

from flask import Flask, jsonify, request

from storefront.errors import InvalidArgumentError
from storefront.inventory.models import Discount, Product


def _error(message: str, status: int):
    return jsonify({"error": message}), status


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidArgumentError("request body must be a JSON object")
    return data


def register_product_routes(app: Flask, usecase) -> None:
    """Attach the /products routes backed by a product use case."""

    def create_product():
        try:
            product = Product.from_dict(_json_body())
        except InvalidArgumentError as exc:
            return _error(str(exc), 400)
        if not product.name or not product.category or product.price <= 0 or product.stock <= 0:
            return _error("missing or invalid fields", 400)
        product.id = str(uuid.uuid4())
        try:
            usecase.create(product)
        except Exception as exc:
            return _error(str(exc), 500)
        return jsonify(product.to_dict()), 201

    def get_product(product_id: str):
        try:
            product = usecase.get_by_id(product_id)
        except Exception:
            return _error("Product not found", 404)
        return jsonify(product.to_dict()), 200

    def update_product(product_id: str):
        try:
            product = Product.from_dict(_json_body())
        except InvalidArgumentError as exc:
            return _error(str(exc), 400)
        try:
            usecase.update(product_id, product)
        except Exception as exc:
            return _error(str(exc), 500)
        return jsonify(product.to_dict()), 200

    def delete_product(product_id: str):
        try:
            usecase.delete(product_id)
        except Exception as exc:
            return _error(str(exc), 500)
        return jsonify({"message": "Product deleted"}), 200

    def list_products():
        try:
            products = usecase.list()
        except Exception as exc:
            return _error(str(exc), 500)
        return jsonify([product.to_dict() for product in products]), 200

    app.add_url_rule("/products", "create_product", create_product, methods=["POST"])
    app.add_url_rule("/products", "list_products", list_products, methods=["GET"])
    app.add_url_rule("/products/<product_id>", "get_product", get_product, methods=["GET"])
    app.add_url_rule("/products/<product_id>", "update_product", update_product, methods=["PATCH"])
    app.add_url_rule("/products/<product_id>", "delete_product", delete_product, methods=["DELETE"])


def register_discount_routes(app: Flask, usecase) -> None:
    """Attach the /discounts routes backed by a discount use case."""

    def create_discount():
        try:
            discount = Discount.from_dict(_json_body())
        except InvalidArgumentError as exc:
            return _error(str(exc), 400)
        discount.id = str(uuid.uuid4())
        try:
            usecase.create(discount)
        except Exception as exc:
            return _error(str(exc), 500)
        return jsonify(discount.to_dict()), 201

    def products_with_discount():
        try:
            products = usecase.get_products_with_discount()
        except Exception as exc:
            return _error(str(exc), 500)
        return jsonify([product.to_dict() for product in products]), 200

    def delete_discount(discount_id: str):
        try:
            usecase.delete(discount_id)
        except Exception as exc:
            return _error(str(exc), 500)
        return jsonify({"message": "Discount deleted"}), 200

    app.add_url_rule("/discounts", "create_discount", create_discount, methods=["POST"])
    app.add_url_rule(
        "/discounts/products", "products_with_discount", products_with_discount, methods=["GET"]
    )
    app.add_url_rule(
        "/discounts/<discount_id>", "delete_discount", delete_discount, methods=["DELETE"]
    )


def create_app(product_usecase, discount_usecase=None) -> Flask:
    """Build the inventory HTTP application."""
    app = Flask(__name__)
    register_product_routes(app, product_usecase)
    if discount_usecase is not None:
        register_discount_routes(app, discount_usecase)
    return app