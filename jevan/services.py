"""Business operations on carts, orders, products and users."""

from __future__ import annotations

from typing import Protocol

from jevan.applog import get_logger_with_correlation_id
from jevan.models import Cart, Order, Product, User
from jevan.schemas import ProductSchema, UserSchema


class ServiceError(RuntimeError):
    """Raised when an order operation fails, wrapping the underlying cause."""


class _CartStore(Protocol):
    def get_cart_by_id(self, cart_id: str) -> Cart: ...

    def save_cart(self, cart: Cart) -> None: ...

    def delete_all_items_from_cart(self, cart_id: str) -> None: ...


class _OrderStore(Protocol):
    def save_order(self, order: Order) -> str: ...

    def get_order_by_id(self, order_id: str) -> Order: ...

    def update_order_status(self, order_id: str, status: Order) -> None: ...


class _ProductStore(Protocol):
    def create_product(self, product: ProductSchema) -> str: ...

    def get_all_products(self) -> list[Product]: ...

    def update_product(self, product: ProductSchema, product_id: str) -> None: ...

    def get_product_by_id(self, product_id: str) -> Product: ...

    def delete_product_by_id(self, product_id: str) -> None: ...


class _UserStore(Protocol):
    def get_user_by_id(self, user_id: str) -> User: ...

    def delete_user_by_id(self, user_id: str) -> None: ...

    def get_users(self) -> list[User]: ...

    def save_user(self, user: UserSchema) -> str: ...

    def update_user(self, user: UserSchema, user_id: str) -> None: ...


class CartService:
    """Reads and changes carts."""

    def __init__(self, db_service: _CartStore) -> None:
        self._db = db_service

    def get_cart_items_by_id(self, cart_id: str) -> Cart:
        logger = get_logger_with_correlation_id()
        logger.info("Executing GetCartItemsById, cartId: %s", cart_id)
        try:
            cart = self._db.get_cart_by_id(cart_id)
        except Exception as exc:
            logger.error("Failed to get cart: %s", exc)
            raise
        logger.info("Executed GetCartItemsById, cartId: %s", cart_id)
        return cart

    def delete_all_items(self, cart_id: str) -> None:
        logger = get_logger_with_correlation_id()
        logger.info("Executing DeleteAllItems, cartId: %s", cart_id)
        try:
            self._db.delete_all_items_from_cart(cart_id)
        except Exception as exc:
            logger.error("Failed to delete all items from cart: %s", exc)
            raise
        logger.info("Executed DeleteAllItems, cartId: %s", cart_id)

    def update_cart(self, cart: Cart) -> None:
        self._db.save_cart(cart)

    def update_item_quantity(self, cart_id: str, item_id: str, quantity: int) -> Cart:
        """Set one item's quantity, dropping it when the quantity is zero.

        The total price is recomputed from the remaining items and the cart saved.
        """
        cart = self.get_cart_items_by_id(cart_id)
        kept = []
        for item in cart.items:
            if item.item_id == item_id:
                if quantity == 0:
                    continue
                item.quantity = quantity
            kept.append(item)
        cart.items = kept
        cart.total_price = sum(float(item.quantity) * item.price for item in kept)
        self._db.save_cart(cart)
        return cart


class OrderService:
    """Places, reads and updates orders."""

    def __init__(self, db_service: _OrderStore) -> None:
        self._db = db_service

    def create_order(self, order: Order) -> str:
        logger = get_logger_with_correlation_id()
        logger.info("Executing CreateOrder")
        try:
            order_id = self._db.save_order(order)
        except Exception as exc:
            logger.error("%s", exc)
            raise ServiceError(f"error creating order: {exc}") from exc
        logger.info("Executed CreateOrder, orderId: %s", order_id)
        return order_id

    def get_order_by_id(self, order_id: str) -> Order:
        logger = get_logger_with_correlation_id()
        logger.info("Executing GetOrderById, orderId: %s", order_id)
        try:
            order = self._db.get_order_by_id(order_id)
        except Exception as exc:
            logger.error("%s", exc)
            raise ServiceError(f"order not found: {exc}") from exc
        logger.info("Executed GetOrderById, orderId: %s", order_id)
        return order

    def update_order(self, order_id: str, status: Order) -> None:
        logger = get_logger_with_correlation_id()
        logger.info("Executing UpdateOrder, orderId: %s", order_id)
        try:
            self._db.update_order_status(order_id, status)
        except Exception as exc:
            logger.error("%s", exc)
            raise ServiceError(f"error updating order status: {exc}") from exc
        logger.info("Executed UpdateOrder, orderId: %s", order_id)


def _schema_without_id(product: Product) -> ProductSchema:
    return ProductSchema(
        name=product.name,
        description=product.description,
        price=product.price,
        category=product.category,
    )


class ProductService:
    """Manages the product catalogue."""

    def __init__(self, db_service: _ProductStore) -> None:
        self._db = db_service

    def create_product(self, product: Product) -> str:
        """Store the product and return its id, or "" when it cannot be converted."""
        logger = get_logger_with_correlation_id()
        logger.info("Executing CreateProduct product %s", product)
        try:
            schema = ProductSchema.from_product(product)
        except ValueError as exc:
            logger.error("%s", exc)
            return ""
        return self._db.create_product(schema)

    def get_all_products(self) -> list[Product]:
        return self._db.get_all_products()

    def update_product(self, product: Product, product_id: str) -> None:
        logger = get_logger_with_correlation_id()
        logger.info("Executing UpdateProduct id: %s", product_id)
        try:
            schema = ProductSchema.from_product(product)
        except ValueError:
            schema = _schema_without_id(product)
        self._db.update_product(schema, product_id)

    def get_product_by_id(self, product_id: str) -> Product:
        return self._db.get_product_by_id(product_id)

    def delete_product_by_id(self, product_id: str) -> None:
        self._db.delete_product_by_id(product_id)


class UserService:
    """Manages users."""

    def __init__(self, db_service: _UserStore) -> None:
        self._db = db_service

    def get_user_by_id(self, user_id: str) -> User:
        logger = get_logger_with_correlation_id()
        logger.info("Executing GetUserById, userId: %s", user_id)
        try:
            user = self._db.get_user_by_id(user_id)
        except Exception as exc:
            logger.error("%s", exc)
            raise
        logger.info("Executed GetUserById, userId: %s", user_id)
        return user

    def delete_user_by_id(self, user_id: str) -> None:
        logger = get_logger_with_correlation_id()
        logger.info("Executing DeleteUserById, userId: %s", user_id)
        try:
            self._db.delete_user_by_id(user_id)
        except Exception as exc:
            logger.error("%s", exc)
            raise
        logger.info("Executed DeleteUserById, userId: %s", user_id)

    def get_users(self) -> list[User]:
        logger = get_logger_with_correlation_id()
        logger.info("Executing GetUsers...")
        try:
            users = self._db.get_users()
        except Exception as exc:
            logger.error("%s", exc)
            raise
        logger.info("Executed GetUsers, users: %d", len(users))
        return users

    def create_user(self, user: User) -> str:
        logger = get_logger_with_correlation_id()
        logger.info("Executing CreateUser...")
        try:
            user_id = self._db.save_user(UserSchema.from_user(user))
        except Exception as exc:
            logger.error("%s", exc)
            raise
        logger.info("Executed CreateUser, userId: %s", user_id)
        return user_id

    def update_user(self, user: User, user_id: str) -> None:
        logger = get_logger_with_correlation_id()
        logger.info("Executing UpdateUser...")
        try:
            self._db.update_user(UserSchema.from_user(user), user_id)
        except Exception as exc:
            logger.error("%s", exc)
            raise
        logger.info("Executed UpdateUser, userId: %s", user_id)