"""Database access for carts, orders, products and users."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId

from jevan.appdb import DatabaseClient, NoDocumentError
from jevan.applog import get_logger_with_correlation_id
from jevan.commons import print_struct
from jevan.configs import (
    MONGO_CARTS_COLLECTION,
    MONGO_ORDERS_COLLECTION,
    MONGO_PRODUCTS_COLLECTION,
    MONGO_USERS_COLLECTION,
)
from jevan.models import Cart, CartItem, Order, OrderItem, Product, User
from jevan.schemas import ProductSchema, UserSchema

_NIL_OBJECT_ID = ObjectId(bytes(12))


class InvalidIdError(ValueError):
    """Raised when an id is not a 24-character hexadecimal object id."""


def parse_object_id(value: str, message: str) -> ObjectId:
    """Parse a hex object id, raising ``InvalidIdError(message)`` when it is not one."""
    if isinstance(value, str) and len(value) == 24:
        try:
            return ObjectId(value)
        except InvalidId:
            pass
    raise InvalidIdError(message)


def _text(document: Mapping[str, Any], key: str) -> str:
    value = document.get(key)
    return "" if value is None else str(value)


def _number(document: Mapping[str, Any], key: str) -> float:
    return float(document.get(key) or 0)


def _integer(document: Mapping[str, Any], key: str) -> int:
    return int(document.get(key) or 0)


def _cart_to_document(cart: Cart) -> dict[str, Any]:
    return {
        "_id": cart.id,
        "items": [
            {
                "itemid": item.item_id,
                "quantity": item.quantity,
                "price": item.price,
                "name": item.name,
            }
            for item in cart.items
        ],
        "totalprice": cart.total_price,
    }


def _cart_from_document(document: Mapping[str, Any]) -> Cart:
    return Cart(
        id=document.get("_id") or _NIL_OBJECT_ID,
        items=[
            CartItem(
                item_id=_text(item, "itemid"),
                quantity=_integer(item, "quantity"),
                price=_number(item, "price"),
                name=_text(item, "name"),
            )
            for item in document.get("items") or []
        ],
        total_price=_number(document, "totalprice"),
    )


def _order_to_document(order: Order) -> dict[str, Any]:
    return {
        "id": order.id,
        "userid": order.user_id,
        "items": [
            {
                "productid": item.product_id,
                "name": item.name,
                "price": item.price,
                "quantity": item.quantity,
            }
            for item in order.items
        ],
        "totalprice": order.total_price,
        "status": order.status,
        "orderedat": order.ordered_at,
        "updatedat": order.updated_at,
    }


def _order_from_document(document: Mapping[str, Any]) -> Order:
    return Order(
        id=_text(document, "id"),
        user_id=_text(document, "userid"),
        items=[
            OrderItem(
                product_id=_text(item, "productid"),
                name=_text(item, "name"),
                price=_number(item, "price"),
                quantity=_integer(item, "quantity"),
            )
            for item in document.get("items") or []
        ],
        total_price=_number(document, "totalprice"),
        status=_text(document, "status"),
        ordered_at=_integer(document, "orderedat"),
        updated_at=_text(document, "updatedat"),
    )


def _product_from_document(document: Mapping[str, Any]) -> Product:
    return Product(
        id=_text(document, "id"),
        name=_text(document, "name"),
        description=_text(document, "description"),
        price=_number(document, "price"),
        category=_text(document, "category"),
        image_url=_text(document, "imageurl"),
        is_available=bool(document.get("isavailable", False)),
    )


def _user_from_document(document: Mapping[str, Any]) -> User:
    return User(
        id=document.get("_id") or _NIL_OBJECT_ID,
        name=_text(document, "name"),
        email=_text(document, "email"),
        cart_id=_text(document, "cartid"),
        type=_text(document, "type"),
        age=_integer(document, "age"),
        is_active=bool(document.get("isactive", False)),
    )


class CartDbService:
    """Stores and loads carts."""

    def __init__(
        self, db_client: DatabaseClient, collection_name: str = MONGO_CARTS_COLLECTION
    ) -> None:
        self._collection = db_client.collection(collection_name)

    def get_cart_by_id(self, cart_id: str) -> Cart:
        logger = get_logger_with_correlation_id()
        logger.info("Executing GetCartById, cartId: %s", cart_id)
        object_id = parse_object_id(cart_id, "error: invalid id provided")
        try:
            document = self._collection.find_one({"_id": object_id})
        except Exception as exc:
            logger.error("%s", exc)
            raise
        logger.info("Executed GetCartById, cartId: %s", cart_id)
        return _cart_from_document(document)

    def delete_all_items_from_cart(self, cart_id: str) -> None:
        logger = get_logger_with_correlation_id()
        logger.info("Executing DeleteAllItemsFromCart, cartId: %s", cart_id)
        object_id = parse_object_id(cart_id, "error: invalid id provided")
        try:
            self._collection.update_one(
                {"_id": object_id}, {"$set": {"items": [], "totalprice": 0}}
            )
        except Exception as exc:
            logger.error("%s", exc)
            raise
        logger.info("Executed DeleteAllItemsFromCart, cartId: %s", cart_id)

    def save_cart(self, cart: Cart) -> None:
        """Insert the cart if no cart has its id, otherwise overwrite it."""
        logger = get_logger_with_correlation_id()
        logger.info("Executing SaveCart")
        if cart.id == _NIL_OBJECT_ID:
            logger.error("Cart ID is required")
            raise ValueError("cart ID is required")

        cart_filter = {"_id": cart.id}
        document = _cart_to_document(cart)
        try:
            self._collection.find_one(cart_filter)
        except NoDocumentError:
            try:
                self._collection.insert_one(document)
            except Exception as exc:
                logger.error("%s", exc)
                raise
            logger.info("Inserted new cart with ID: %s", cart.id)
            return
        except Exception as exc:
            logger.error("%s", exc)
            raise

        try:
            self._collection.update_one(cart_filter, {"$set": document})
        except Exception as exc:
            logger.error("%s", exc)
            raise
        logger.info("Updated existing cart with ID: %s", cart.id)


class OrderDbService:
    """Stores and loads orders."""

    def __init__(
        self, db_client: DatabaseClient, collection_name: str = MONGO_ORDERS_COLLECTION
    ) -> None:
        self._collection = db_client.collection(collection_name)

    def save_order(self, order: Order) -> str:
        """Insert the order and return the id the database gave it."""
        logger = get_logger_with_correlation_id()
        logger.info("Executing SaveOrder")
        try:
            result = self._collection.insert_one(_order_to_document(order))
        except Exception as exc:
            logger.error("%s", exc)
            raise
        order_id = str(result.inserted_id)
        logger.info("Executed SaveOrder, orderId: %s", order_id)
        return order_id

    def get_order_by_id(self, order_id: str) -> Order:
        logger = get_logger_with_correlation_id()
        logger.info("Executing GetOrderById, orderId: %s", order_id)
        object_id = parse_object_id(order_id, f"invalid orderId: {order_id}")
        try:
            document = self._collection.find_one({"_id": object_id})
        except Exception as exc:
            logger.error("%s", exc)
            raise
        logger.info("Executed GetOrderById, orderId: %s", order_id)
        return _order_from_document(document)

    def update_order_status(self, order_id: str, status: Order) -> None:
        """Set the stored status and update time from ``status``."""
        logger = get_logger_with_correlation_id()
        logger.info("Executing UpdateOrderStatus, orderId: %s", order_id)
        object_id = parse_object_id(order_id, f"invalid orderId: {order_id}")
        update = {"$set": {"status": status.status, "updated_at": status.updated_at}}
        try:
            self._collection.update_one({"_id": object_id}, update)
        except Exception as exc:
            logger.error("%s", exc)
            raise
        logger.info("Executed UpdateOrderStatus, orderId: %s", order_id)


class ProductDbService:
    """Stores and loads products."""

    def __init__(
        self,
        db_client: DatabaseClient,
        collection_name: str = MONGO_PRODUCTS_COLLECTION,
    ) -> None:
        self._collection = db_client.collection(collection_name)

    def create_product(self, product: ProductSchema) -> str:
        logger = get_logger_with_correlation_id()
        logger.info("Creating product: %s", product)
        try:
            result = self._collection.insert_one(product.to_document())
        except Exception as exc:
            logger.error("Failed to insert product: %s", exc)
            raise
        product_id = str(result.inserted_id)
        logger.info("Product created with ID: %s", product_id)
        return product_id

    def get_all_products(self) -> list[Product]:
        logger = get_logger_with_correlation_id()
        logger.info("Fetching all products")
        try:
            documents = self._collection.find({})
        except Exception as exc:
            logger.error("Failed to fetch products: %s", exc)
            raise
        products = [_product_from_document(document) for document in documents]
        logger.info("Fetched %d products", len(products))
        return products

    def update_product(self, product: ProductSchema, product_id: str) -> None:
        logger = get_logger_with_correlation_id()
        logger.info("Updating product with ID: %s", product_id)
        object_id = parse_object_id(product_id, f"invalid id: {product_id}")
        try:
            self._collection.update_one(
                {"_id": object_id}, {"$set": product.to_document()}
            )
        except Exception as exc:
            logger.error("Failed to update product: %s", exc)
            raise
        logger.info("Successfully updated product with ID: %s", product_id)

    def get_product_by_id(self, product_id: str) -> Product:
        logger = get_logger_with_correlation_id()
        logger.info("Fetching product by ID: %s", product_id)
        object_id = parse_object_id(product_id, f"invalid id: {product_id}")
        try:
            document = self._collection.find_one({"_id": object_id})
        except Exception as exc:
            logger.error("Failed to fetch product: %s", exc)
            raise
        product = _product_from_document(document)
        logger.info("Fetched product: %s", product)
        return product

    def delete_product_by_id(self, product_id: str) -> None:
        logger = get_logger_with_correlation_id()
        logger.info("Deleting product with ID: %s", product_id)
        object_id = parse_object_id(product_id, f"invalid id: {product_id}")
        try:
            self._collection.delete_one({"_id": object_id})
        except Exception as exc:
            logger.error("Failed to delete product: %s", exc)
            raise
        logger.info("Successfully deleted product with ID: %s", product_id)


class UserDbService:
    """Stores and loads users."""

    def __init__(
        self, db_client: DatabaseClient, collection_name: str = MONGO_USERS_COLLECTION
    ) -> None:
        self._collection = db_client.collection(collection_name)

    def get_user_by_id(self, user_id: str) -> User:
        logger = get_logger_with_correlation_id()
        logger.info("Executing GetUserById, Id: %s", user_id)
        object_id = parse_object_id(
            user_id, f"invalid userid provided, userId: {user_id}"
        )
        try:
            document = self._collection.find_one({"_id": object_id})
        except Exception as exc:
            logger.error("%s", exc)
            raise
        user = _user_from_document(document)
        logger.info("Executed GetUserById, user: %s", print_struct(user))
        return user

    def delete_user_by_id(self, user_id: str) -> None:
        logger = get_logger_with_correlation_id()
        logger.info("Executing DeleteUserById, Id: %s", user_id)
        object_id = parse_object_id(
            user_id, f"cannot delete user, invalid userid provided, userId: {user_id}"
        )
        try:
            self._collection.delete_one({"_id": object_id})
        except Exception as exc:
            logger.error("%s", exc)
            raise
        logger.info("Executed DeleteUserById, Id: %s", user_id)

    def get_users(self) -> list[User]:
        logger = get_logger_with_correlation_id()
        logger.info("Executing GetUsers")
        try:
            documents = self._collection.find({})
        except Exception as exc:
            logger.error("%s", exc)
            raise
        users = [_user_from_document(document) for document in documents]
        logger.info("Executed GetUsers, users: %d", len(users))
        return users

    def save_user(self, user: UserSchema) -> str:
        logger = get_logger_with_correlation_id()
        logger.info("Executing SaveUser...")
        try:
            result = self._collection.insert_one(user.to_document())
        except Exception as exc:
            logger.error("%s", exc)
            raise
        logger.info("Executed SaveUser, userid: %s", print_struct(user.to_document()))
        return str(result.inserted_id)

    def update_user(self, user: UserSchema, user_id: str) -> None:
        logger = get_logger_with_correlation_id()
        logger.info("Executing UpdateUser...")
        object_id = parse_object_id(
            user_id, f"cannot delete user, invalid userid provided, userId: {user_id}"
        )
        try:
            self._collection.update_one(
                {"_id": object_id}, {"$set": user.to_document()}
            )
        except Exception as exc:
            logger.error("%s", exc)
            raise
        logger.info("Executed UpdateUser, userid: %s", print_struct(user.to_document()))