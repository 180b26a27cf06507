"""Documents as they are stored in the database."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId

from jevan.models import Product, User

_NIL_OBJECT_ID = ObjectId(bytes(12))


def _object_id_from_hex(value: str) -> ObjectId:
    if not value:
        return _NIL_OBJECT_ID
    try:
        return ObjectId(value)
    except (InvalidId, TypeError) as exc:
        raise ValueError(f"invalid object id: {value!r}") from exc


@dataclass
class CartItemSchema:
    """Stored form of a cart line."""

    item_id: str = ""
    quantity: int = 0
    price: float = 0.0
    name: str = ""

    def to_document(self) -> dict[str, Any]:
        return {
            "item_id": self.item_id,
            "quantity": self.quantity,
            "price": self.price,
            "name": self.name,
        }


@dataclass
class CartSchema:
    """Stored form of a cart."""

    id: ObjectId = _NIL_OBJECT_ID
    items: list[CartItemSchema] = field(default_factory=list)
    total_price: float = 0.0

    def to_document(self) -> dict[str, Any]:
        return {
            "_id": self.id,
            "items": [item.to_document() for item in self.items],
            "totalprice": self.total_price,
        }


@dataclass
class OrderItemSchema:
    """Stored form of an order line."""

    product_id: ObjectId = _NIL_OBJECT_ID
    name: str = ""
    price: float = 0.0
    quantity: int = 0

    def to_document(self) -> dict[str, Any]:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "price": self.price,
            "quantity": self.quantity,
        }


@dataclass
class OrderSchema:
    """Stored form of an order; a nil id is left for the database to assign."""

    id: ObjectId = _NIL_OBJECT_ID
    user_id: ObjectId = _NIL_OBJECT_ID
    items: list[OrderItemSchema] = field(default_factory=list)
    total_price: float = 0.0
    status: str = ""
    ordered_at: int = 0

    def to_document(self) -> dict[str, Any]:
        document: dict[str, Any] = {} if self.id == _NIL_OBJECT_ID else {"_id": self.id}
        document.update(
            {
                "user_id": self.user_id,
                "items": [item.to_document() for item in self.items],
                "totalprice": self.total_price,
                "status": self.status,
                "ordered_at": self.ordered_at,
            }
        )
        return document


@dataclass
class ProductSchema:
    """Stored form of a product; a nil id is left out of the document."""

    id: ObjectId = _NIL_OBJECT_ID
    name: str = ""
    description: str = ""
    price: float = 0.0
    category: str = ""
    image_url: str = ""
    is_available: bool = False

    @classmethod
    def from_product(cls, product: Product) -> ProductSchema:
        """Carry over the fields whose JSON names match this schema's field names.

        ``image_url`` and ``is_available`` have differently spelled JSON names
        and so keep their defaults.
        """
        return cls(
            id=_object_id_from_hex(product.id),
            name=product.name,
            description=product.description,
            price=product.price,
            category=product.category,
        )

    def to_document(self) -> dict[str, Any]:
        document: dict[str, Any] = {} if self.id == _NIL_OBJECT_ID else {"_id": self.id}
        document.update(
            {
                "name": self.name,
                "description": self.description,
                "price": self.price,
                "category": self.category,
                "image_url": self.image_url,
                "is_available": self.is_available,
            }
        )
        return document


@dataclass
class UserSchema:
    """Stored form of a user."""

    id: ObjectId = _NIL_OBJECT_ID
    name: str = ""
    email: str = ""
    cart_id: str = ""
    type: str = ""
    age: int = 0
    is_active: bool = False

    @classmethod
    def from_user(cls, user: User) -> UserSchema:
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            cart_id=user.cart_id,
            type=user.type,
            age=user.age,
            is_active=user.is_active,
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "_id": self.id,
            "name": self.name,
            "email": self.email,
            "cartid": self.cart_id,
            "type": self.type,
            "age": self.age,
            "isactive": self.is_active,
        }