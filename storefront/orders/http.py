"""HTTP routes for orders."""

from __future__ import annotations

from flask import Flask, jsonify, request

from storefront.errors import InvalidArgumentError
from storefront.orders.models import Order

VALID_STATUSES = frozenset({"pending", "completed", "cancelled"})


def _error(message: str, status: int):
    return jsonify({"error": message}), status


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidArgumentError("request body must be a JSON object")
    return data


def register_order_routes(app: Flask, usecase) -> None:
    """Attach the /orders routes backed by an order use case."""

    def create_order():
        try:
            order = Order.from_dict(_json_body())
        except InvalidArgumentError as exc:
            return _error(str(exc), 400)
        if not order.user_id or not order.items:
            return _error("user_id and items are required", 400)
        try:
            usecase.create(order)
        except Exception as exc:
            return _error(str(exc), 500)
        return jsonify(order.to_dict()), 201

    def get_order(order_id: str):
        try:
            order = usecase.get_by_id(order_id)
        except Exception as exc:
            return _error(str(exc), 404)
        return jsonify(order.to_dict()), 200

    def update_status(order_id: str):
        try:
            body = _json_body()
        except InvalidArgumentError as exc:
            return _error(str(exc), 400)
        status = body.get("status", "")
        if not isinstance(status, str):
            return _error("status must be a string", 400)
        if status not in VALID_STATUSES:
            return _error("invalid status", 400)
        try:
            usecase.update_status(order_id, status)
        except Exception as exc:
            return _error(str(exc), 500)
        return jsonify({"message": "Status updated"}), 200

    def list_by_user():
        user_id = request.args.get("user_id", "")
        if not user_id:
            return _error("user_id is required", 400)
        try:
            orders = usecase.list_by_user(user_id)
        except Exception as exc:
            return _error(str(exc), 500)
        return jsonify([order.to_dict() for order in orders]), 200

    app.add_url_rule("/orders", "create_order", create_order, methods=["POST"])
    app.add_url_rule("/orders", "list_orders", list_by_user, methods=["GET"])
    app.add_url_rule("/orders/<order_id>", "get_order", get_order, methods=["GET"])
    app.add_url_rule("/orders/<order_id>", "update_order_status", update_status, methods=["PATCH"])


def create_app(usecase) -> Flask:
    """Build the order HTTP application."""
    app = Flask(__name__)
    register_order_routes(app, usecase)
    return app