"""Models exchanged with API clients as JSON."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId

_NIL_OBJECT_ID = ObjectId(bytes(12))


def _require_mapping(data: Any, name: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f"{name} must be a JSON object")
    return data


def _str_field(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"'{key}' must be a string")
    return value


def _int_field(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"'{key}' must be an integer")
    return value


def _float_field(data: Mapping[str, Any], key: str) -> float:
    value = data.get(key)
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"'{key}' must be a number")
    return float(value)


def _bool_field(data: Mapping[str, Any], key: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"'{key}' must be a boolean")
    return value


def _object_id_field(data: Mapping[str, Any], key: str) -> ObjectId:
    value = data.get(key)
    if value is None:
        return _NIL_OBJECT_ID
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, Mapping) and "$oid" in value:
        value = value["$oid"]
    if not isinstance(value, str):
        raise ValueError(f"'{key}' must be an object id string")
    if not value:
        return _NIL_OBJECT_ID
    try:
        return ObjectId(value)
    except (InvalidId, TypeError) as exc:
        raise ValueError(f"'{key}' is not a valid object id: {value!r}") from exc


def _list_field(data: Mapping[str, Any], key: str, item_type: Any) -> list:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"'{key}' must be an array")
    return [item_type.from_dict(item) for item in value]


@dataclass
class CartItem:
    """A line in a cart."""

    item_id: str = ""
    quantity: int = 0
    price: float = 0.0
    name: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> CartItem:
        data = _require_mapping(data, "cart item")
        return cls(
            item_id=_str_field(data, "item_id"),
            quantity=_int_field(data, "quantity"),
            price=_float_field(data, "price"),
            name=_str_field(data, "name"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "item_id": self.item_id,
            "quantity": self.quantity,
            "price": self.price,
            "name": self.name,
        }


@dataclass
class Cart:
    """A user's cart with its items and total price."""

    id: ObjectId = _NIL_OBJECT_ID
    items: list[CartItem] = field(default_factory=list)
    total_price: float = 0.0

    @classmethod
    def from_dict(cls, data: Any) -> Cart:
        data = _require_mapping(data, "cart")
        return cls(
            id=_object_id_field(data, "id"),
            items=_list_field(data, "items", CartItem),
            total_price=_float_field(data, "totalprice"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "items": [item.to_dict() for item in self.items],
            "totalprice": self.total_price,
        }


@dataclass
class OrderItem:
    """A product line in an order."""

    product_id: str = ""
    name: str = ""
    price: float = 0.0
    quantity: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> OrderItem:
        data = _require_mapping(data, "order item")
        return cls(
            product_id=_str_field(data, "product_id"),
            name=_str_field(data, "name"),
            price=_float_field(data, "price"),
            quantity=_int_field(data, "quantity"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "price": self.price,
            "quantity": self.quantity,
        }


@dataclass
class Order:
    """An order placed by a user; ``ordered_at`` is a Unix timestamp."""

    id: str = ""
    user_id: str = ""
    items: list[OrderItem] = field(default_factory=list)
    total_price: float = 0.0
    status: str = ""
    ordered_at: int = 0
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> Order:
        data = _require_mapping(data, "order")
        return cls(
            id=_str_field(data, "id"),
            user_id=_str_field(data, "user_id"),
            items=_list_field(data, "items", OrderItem),
            total_price=_float_field(data, "totalprice"),
            status=_str_field(data, "status"),
            ordered_at=_int_field(data, "ordered_at"),
            updated_at=_str_field(data, "updated_at"),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"id": self.id} if self.id else {}
        result.update(
            {
                "user_id": self.user_id,
                "items": [item.to_dict() for item in self.items],
                "totalprice": self.total_price,
                "status": self.status,
                "ordered_at": self.ordered_at,
                "updated_at": self.updated_at,
            }
        )
        return result


@dataclass
class Product:
    """A product on the menu."""

    id: str = ""
    name: str = ""
    description: str = ""
    price: float = 0.0
    category: str = ""
    image_url: str = ""
    is_available: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> Product:
        data = _require_mapping(data, "product")
        return cls(
            id=_str_field(data, "id"),
            name=_str_field(data, "name"),
            description=_str_field(data, "description"),
            price=_float_field(data, "price"),
            category=_str_field(data, "category"),
            image_url=_str_field(data, "image_url"),
            is_available=_bool_field(data, "is_available"),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"id": self.id} if self.id else {}
        result.update(
            {
                "name": self.name,
                "description": self.description,
                "price": self.price,
                "category": self.category,
                "image_url": self.image_url,
                "is_available": self.is_available,
            }
        )
        return result


@dataclass
class User:
    """A registered user of the mess."""

    id: ObjectId = _NIL_OBJECT_ID
    name: str = ""
    email: str = ""
    cart_id: str = ""
    type: str = ""
    age: int = 0
    is_active: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> User:
        data = _require_mapping(data, "user")
        return cls(
            id=_object_id_field(data, "_id"),
            name=_str_field(data, "name"),
            email=_str_field(data, "email"),
            cart_id=_str_field(data, "cart_id"),
            type=_str_field(data, "type"),
            age=_int_field(data, "age"),
            is_active=_bool_field(data, "is_active"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "_id": str(self.id),
            "name": self.name,
            "email": self.email,
            "cart_id": self.cart_id,
            "type": self.type,
            "age": self.age,
            "is_active": self.is_active,
        }