"""HTTP handlers for cart operations."""

from __future__ import annotations

import json
from typing import Any, Protocol

from flask import Flask, jsonify, request

from jevan.applog import new_logger_with_correlation_id
from jevan.commons import api_error_response, print_struct
from jevan.models import Cart


class _CartOperations(Protocol):
    def update_cart(self, cart: Cart) -> None: ...

    def update_item_quantity(self, cart_id: str, item_id: str, quantity: int) -> Cart: ...

    def get_cart_items_by_id(self, cart_id: str) -> Cart: ...

    def delete_all_items(self, cart_id: str) -> None: ...


def _read_json_body() -> Any:
    """Return the decoded JSON body, or None when the body is empty.

    Raises ``ValueError`` when the body is not JSON.
    """
    raw = request.get_data(cache=True)
    if not raw:
        return None
    if not request.is_json:
        raise ValueError("unsupported media type")
    return json.loads(raw)


def _quantity_from_body(body: Any) -> int:
    if body is None:
        return 0
    if not isinstance(body, dict):
        raise ValueError("request body must be a JSON object")
    quantity = body.get("quantity")
    if quantity is None:
        return 0
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValueError("'quantity' must be an integer")
    return quantity


class CartController:
    """Routes for reading and changing carts."""

    def __init__(self, cart_service: _CartOperations) -> None:
        self._service = cart_service

    def register(self, app: Flask) -> None:
        """Attach the cart routes to ``app``."""
        app.add_url_rule(
            "/cart", endpoint="cart_update", view_func=self.update_cart, methods=["POST"]
        )
        app.add_url_rule(
            "/cart/<cart_id>",
            endpoint="cart_get",
            view_func=self.get_cart_items_by_id,
            methods=["GET"],
        )
        app.add_url_rule(
            "/cart/<cart_id>/all",
            endpoint="cart_delete_all",
            view_func=self.delete_all_items,
            methods=["DELETE"],
        )
        app.add_url_rule(
            "/cart/<cart_id>/item/<item_id>",
            endpoint="cart_item_quantity",
            view_func=self.update_item_quantity,
            methods=["PUT"],
        )

    def update_cart(self) -> Any:
        """Create or overwrite a cart with the posted items and total price."""
        logger = new_logger_with_correlation_id()
        try:
            body = _read_json_body()
            cart = Cart() if body is None else Cart.from_dict(body)
        except ValueError:
            return jsonify({"error": "Invalid cart data"}), 400
        logger.info("Executing UpdateCart %s", print_struct(cart))
        try:
            self._service.update_cart(cart)
        except Exception as exc:
            logger.error("%s", exc)
            return jsonify({"error": "Could not update cart"}), 500
        logger.info("Executed UpdateCart %s", print_struct(cart))
        return jsonify(cart.to_dict()), 200

    def update_item_quantity(self, cart_id: str, item_id: str) -> Any:
        """Set an item's quantity; a quantity of zero removes the item."""
        logger = new_logger_with_correlation_id()
        try:
            quantity = _quantity_from_body(_read_json_body())
        except ValueError:
            return jsonify({"error": "Invalid request body"}), 400
        logger.info(
            "Executing UpdateItemQuantity cart id: %s, item id: %s", cart_id, item_id
        )
        try:
            cart = self._service.update_item_quantity(cart_id, item_id, quantity)
        except Exception as exc:
            logger.error("%s", exc)
            return jsonify({"error": str(exc)}), 500
        return jsonify(cart.to_dict()), 200

    def get_cart_items_by_id(self, cart_id: str) -> Any:
        logger = new_logger_with_correlation_id()
        if not cart_id.strip():
            logger.error("error: cart id required.")
            return jsonify(api_error_response("error: cart id required.").to_dict()), 400
        try:
            cart = self._service.get_cart_items_by_id(cart_id)
        except Exception as exc:
            logger.error("%s", exc)
            return jsonify(api_error_response(str(exc)).to_dict()), 400
        logger.info("Fetched cart items successfully")
        return jsonify(cart.to_dict()), 200

    def delete_all_items(self, cart_id: str) -> Any:
        logger = new_logger_with_correlation_id()
        if not cart_id.strip():
            logger.error("error: cart id required.")
            return jsonify(api_error_response("error: cart id required.").to_dict()), 400
        try:
            self._service.delete_all_items(cart_id)
        except Exception as exc:
            logger.error("%s", exc)
            return jsonify(api_error_response(str(exc)).to_dict()), 400
        logger.info("All items deleted from cart successfully")
        return "", 200