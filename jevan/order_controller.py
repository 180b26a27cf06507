"""HTTP handlers for order operations."""

from __future__ import annotations

import json
from typing import Any, Protocol

from flask import Flask, jsonify, request

from jevan.applog import new_logger_with_correlation_id
from jevan.commons import api_error_response
from jevan.models import Order


class _OrderOperations(Protocol):
    def create_order(self, order: Order) -> str: ...

    def get_order_by_id(self, order_id: str) -> Order: ...

    def update_order(self, order_id: str, status: Order) -> None: ...


def _read_order() -> Order | None:
    """Decode the request body as an order; None when there is none.

    Raises ``ValueError`` when the body is not a valid order.
    """
    raw = request.get_data(cache=True)
    if not raw:
        return None
    if not request.is_json:
        raise ValueError("unsupported media type")
    body = json.loads(raw)
    if body is None:
        return None
    return Order.from_dict(body)


def _bad_request(message: str) -> Any:
    return jsonify(api_error_response(message).to_dict()), 400


class OrderController:
    """Routes for placing, reading and updating orders."""

    def __init__(self, order_service: _OrderOperations) -> None:
        self._service = order_service

    def register(self, app: Flask) -> None:
        """Attach the order routes to ``app``."""
        app.add_url_rule(
            "/orders",
            endpoint="order_create",
            view_func=self.create_order,
            methods=["POST"],
        )
        app.add_url_rule(
            "/orders/<order_id>",
            endpoint="order_get",
            view_func=self.get_order_by_id,
            methods=["GET"],
        )
        app.add_url_rule(
            "/orders/<order_id>",
            endpoint="order_update",
            view_func=self.update_order,
            methods=["PUT"],
        )

    def create_order(self) -> Any:
        logger = new_logger_with_correlation_id()
        logger.info("Executing CreateOrder")
        try:
            order = _read_order()
        except ValueError:
            order = None
        if order is None:
            logger.error("Invalid request payload")
            return _bad_request("Invalid request payload")
        try:
            order_id = self._service.create_order(order)
        except Exception as exc:
            logger.error("%s", exc)
            return _bad_request(str(exc))
        logger.info("Executed CreateOrder, orderId: %s", order_id)
        return jsonify({"id": order_id}), 201

    def get_order_by_id(self, order_id: str) -> Any:
        logger = new_logger_with_correlation_id()
        if not order_id.strip():
            logger.error("'id' is required")
            return _bad_request("'id' is required")
        logger.info("Executing GetOrderById, orderId: %s", order_id)
        try:
            order = self._service.get_order_by_id(order_id)
        except Exception as exc:
            logger.error("%s", exc)
            return _bad_request(str(exc))
        logger.info("Executed GetOrderById, orderId: %s", order_id)
        return jsonify(order.to_dict()), 200

    def update_order(self, order_id: str) -> Any:
        """Change an order's status and update time."""
        logger = new_logger_with_correlation_id()
        if not order_id.strip():
            logger.error("'id' is required")
            return _bad_request("'id' is required")
        try:
            order = _read_order()
        except ValueError:
            order = None
        if order is None:
            logger.error("Invalid request payload")
            return _bad_request("Invalid request payload")
        logger.info("Executing UpdateOrder, orderId: %s", order_id)
        try:
            self._service.update_order(order_id, order)
        except Exception as exc:
            logger.error("%s", exc)
            return _bad_request(str(exc))
        logger.info("Executed UpdateOrder, orderId: %s", order_id)
        return "", 200