"""HTTP handlers for product operations."""

from __future__ import annotations

import json
from typing import Any, Protocol

from flask import Flask, jsonify, request

from jevan.applog import new_logger_with_correlation_id
from jevan.commons import api_error_response
from jevan.models import Product


class _ProductOperations(Protocol):
    def create_product(self, product: Product) -> str: ...

    def get_all_products(self) -> list[Product]: ...

    def update_product(self, product: Product, product_id: str) -> None: ...

    def get_product_by_id(self, product_id: str) -> Product: ...

    def delete_product_by_id(self, product_id: str) -> None: ...


def _read_product() -> Product:
    """Decode the request body as a product; an empty body gives a blank product.

    Raises ``ValueError`` when the body is not a valid product.
    """
    raw = request.get_data(cache=True)
    if not raw:
        return Product()
    if not request.is_json:
        raise ValueError("unsupported media type")
    body = json.loads(raw)
    if body is None:
        return Product()
    return Product.from_dict(body)


def _error(message: str, status: int) -> Any:
    return jsonify(api_error_response(message).to_dict()), status


class ProductController:
    """Routes for managing the product catalogue."""

    def __init__(self, product_service: _ProductOperations) -> None:
        self._service = product_service

    def register(self, app: Flask) -> None:
        """Attach the product routes to ``app``."""
        app.add_url_rule(
            "/products",
            endpoint="product_create",
            view_func=self.create_product,
            methods=["POST"],
        )
        app.add_url_rule(
            "/products",
            endpoint="product_list",
            view_func=self.get_all_products,
            methods=["GET"],
        )
        app.add_url_rule(
            "/products/<product_id>",
            endpoint="product_update",
            view_func=self.update_product,
            methods=["PUT"],
        )
        app.add_url_rule(
            "/products/<product_id>",
            endpoint="product_get",
            view_func=self.get_product_by_id,
            methods=["GET"],
        )
        app.add_url_rule(
            "/products/<product_id>",
            endpoint="product_delete",
            view_func=self.delete_product_by_id,
            methods=["DELETE"],
        )

    def create_product(self) -> Any:
        logger = new_logger_with_correlation_id()
        logger.info("Received request to create product")
        try:
            product = _read_product()
        except ValueError as exc:
            logger.error("Invalid request body: %s", exc)
            return _error("Invalid request body", 400)
        try:
            product_id = self._service.create_product(product)
        except Exception as exc:
            logger.error("Failed to create product: %s", exc)
            return _error("Failed to create product", 500)
        logger.info("Product created with ID: %s", product_id)
        return jsonify({"productId": product_id}), 201

    def get_all_products(self) -> Any:
        logger = new_logger_with_correlation_id()
        logger.info("Received request to get all products")
        try:
            products = self._service.get_all_products()
        except Exception as exc:
            logger.error("Failed to fetch products: %s", exc)
            return _error("Failed to fetch products", 500)
        logger.info("Fetched %d products", len(products))
        return (
            jsonify(
                {
                    "total": len(products),
                    "products": [product.to_dict() for product in products],
                }
            ),
            200,
        )

    def update_product(self, product_id: str) -> Any:
        logger = new_logger_with_correlation_id()
        if not product_id.strip():
            logger.error("'id' is required")
            return _error("'id' is required", 400)
        logger.info("Received request to update product with ID: %s", product_id)
        try:
            product = _read_product()
        except ValueError as exc:
            logger.error("Invalid request body: %s", exc)
            return _error("Invalid request body", 400)
        try:
            self._service.update_product(product, product_id)
        except Exception as exc:
            logger.error("Failed to update product: %s", exc)
            return _error("Failed to update product", 500)
        logger.info("Successfully updated product with ID: %s", product_id)
        return jsonify({"message": "Product updated successfully"}), 200

    def get_product_by_id(self, product_id: str) -> Any:
        logger = new_logger_with_correlation_id()
        if not product_id.strip():
            logger.error("'id' is required")
            return _error("'id' is required", 400)
        logger.info("Received request to get product by ID: %s", product_id)
        try:
            product = self._service.get_product_by_id(product_id)
        except Exception as exc:
            logger.error("Failed to fetch product: %s", exc)
            return _error("Failed to fetch product", 500)
        logger.info("Fetched product with ID: %s", product_id)
        return jsonify(product.to_dict()), 200

    def delete_product_by_id(self, product_id: str) -> Any:
        logger = new_logger_with_correlation_id()
        if not product_id.strip():
            logger.error("'id' is required")
            return _error("'id' is required", 400)
        logger.info("Received request to delete product with ID: %s", product_id)
        try:
            self._service.delete_product_by_id(product_id)
        except Exception as exc:
            logger.error("Failed to delete product: %s", exc)
            return _error("Failed to delete product", 500)
        logger.info("Successfully deleted product with ID: %s", product_id)
        return jsonify({"message": "Product deleted successfully"}), 200