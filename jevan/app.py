"""Application assembly and the command that serves the API."""

from __future__ import annotations

import argparse
from typing import Any

from flask import Flask

from jevan.appdb import DatabaseClient
from jevan.applog import new_logger_with_correlation_id
from jevan.cart_controller import CartController
from jevan.configs import load_application_config
from jevan.dbservices import CartDbService, OrderDbService, ProductDbService, UserDbService
from jevan.order_controller import OrderController
from jevan.product_controller import ProductController
from jevan.services import CartService, OrderService, ProductService, UserService
from jevan.user_controller import UserController

HEALTH_MESSAGE = "Jevan API is healthy!"


def create_app(db_client: DatabaseClient) -> Flask:
    """Build the Flask application with every route wired to ``db_client``."""
    app = Flask("jevan")

    product_service = ProductService(ProductDbService(db_client))
    cart_service = CartService(CartDbService(db_client))
    order_service = OrderService(OrderDbService(db_client))
    user_service = UserService(UserDbService(db_client))

    UserController(user_service).register(app)
    ProductController(product_service).register(app)
    CartController(cart_service).register(app)
    OrderController(order_service).register(app)

    def health() -> Any:
        return HEALTH_MESSAGE, 200, {"Content-Type": "text/plain; charset=UTF-8"}

    app.add_url_rule("/health", endpoint="health", view_func=health, methods=["GET"])
    return app


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="jevan", description="Serve the Jevan mess management API."
    )
    parser.add_argument(
        "--env-file", default=".env", help="file of settings to load (default: .env)"
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Load the configuration, connect to the database and serve the API."""
    args = _parse_args(argv)
    logger = new_logger_with_correlation_id("")

    try:
        config = load_application_config(args.env_file)
    except Exception as exc:
        logger.error("Failed to load app config: %s", exc)
        return 1

    try:
        port = int(config.http_port) if config.http_port.strip() else 0
    except ValueError:
        logger.error("Invalid HTTP port: %s", config.http_port)
        return 1

    app = create_app(config.db_client)
    logger.info("Starting Jevan API server on port %s", config.http_port)
    try:
        app.run(host="0.0.0.0", port=port)
    finally:
        config.db_client.disconnect()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())