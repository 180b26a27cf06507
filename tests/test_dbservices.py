import copy
from collections import defaultdict
from types import SimpleNamespace

import pytest
from bson import ObjectId

from jevan.appdb import DatabaseClient, NoDocumentError
from jevan.configs import (
    MONGO_CARTS_COLLECTION,
    MONGO_ORDERS_COLLECTION,
    MONGO_PRODUCTS_COLLECTION,
    MONGO_USERS_COLLECTION,
)
from jevan.dbservices import (
    CartDbService,
    InvalidIdError,
    OrderDbService,
    ProductDbService,
    UserDbService,
    parse_object_id,
)
from jevan.models import Cart, CartItem, Order, OrderItem
from jevan.schemas import ProductSchema, UserSchema


class _FakeCursor:
    def __init__(self, documents):
        self._documents = documents

    def __enter__(self):
        return iter(self._documents)

    def __exit__(self, *exc_info):
        return False


class _FakeCollection:
    def __init__(self):
        self.documents = []

    def _matches(self, document, filter):
        return all(document.get(key) == value for key, value in filter.items())

    def find_one(self, filter):
        for document in self.documents:
            if self._matches(document, filter):
                return copy.deepcopy(document)
        return None

    def insert_one(self, document):
        stored = copy.deepcopy(dict(document))
        stored.setdefault("_id", ObjectId())
        self.documents.append(stored)
        return SimpleNamespace(inserted_id=stored["_id"])

    def update_one(self, filter, update):
        for document in self.documents:
            if self._matches(document, filter):
                document.update(copy.deepcopy(update["$set"]))
                return SimpleNamespace(matched_count=1)
        return SimpleNamespace(matched_count=0)

    def delete_one(self, filter):
        for document in self.documents:
            if self._matches(document, filter):
                self.documents.remove(document)
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    def find(self, filter, **kwargs):
        return _FakeCursor(
            [copy.deepcopy(d) for d in self.documents if self._matches(d, filter)]
        )


class _FakeClient:
    def __init__(self):
        self.databases = defaultdict(lambda: defaultdict(_FakeCollection))

    def __getitem__(self, name):
        return self.databases[name]

    def close(self):
        pass


@pytest.fixture
def fake_client():
    return _FakeClient()


@pytest.fixture
def db_client(fake_client):
    return DatabaseClient("jevan", fake_client)


def _stored(fake_client, name):
    return fake_client.databases["jevan"][name].documents


def test_parse_object_id_round_trip():
    oid = ObjectId()
    assert parse_object_id(str(oid), "bad") == oid


@pytest.mark.parametrize("value", ["", "xyz", "z" * 24, "0" * 23])
def test_parse_object_id_rejects(value):
    with pytest.raises(InvalidIdError, match="^bad id$"):
        parse_object_id(value, "bad id")


def test_cart_requires_id(db_client):
    with pytest.raises(ValueError, match="cart ID is required"):
        CartDbService(db_client).save_cart(Cart())


def test_cart_insert_then_get(db_client, fake_client):
    service = CartDbService(db_client)
    cart = Cart(
        id=ObjectId(),
        items=[CartItem(item_id="i1", quantity=2, price=10.0, name="Thali")],
        total_price=20.0,
    )
    service.save_cart(cart)
    assert len(_stored(fake_client, MONGO_CARTS_COLLECTION)) == 1
    assert _stored(fake_client, MONGO_CARTS_COLLECTION)[0]["items"][0]["itemid"] == "i1"
    assert service.get_cart_by_id(str(cart.id)) == cart


def test_cart_save_existing_updates(db_client, fake_client):
    service = CartDbService(db_client)
    cart = Cart(id=ObjectId(), items=[CartItem(item_id="i1", quantity=1, price=5.0)])
    service.save_cart(cart)
    cart.items[0].quantity = 3
    cart.total_price = 15.0
    service.save_cart(cart)
    assert len(_stored(fake_client, MONGO_CARTS_COLLECTION)) == 1
    loaded = service.get_cart_by_id(str(cart.id))
    assert loaded.items[0].quantity == 3
    assert loaded.total_price == 15.0


def test_cart_delete_all_items(db_client):
    service = CartDbService(db_client)
    cart = Cart(id=ObjectId(), items=[CartItem(item_id="a", quantity=1, price=2.0)])
    service.save_cart(cart)
    service.delete_all_items_from_cart(str(cart.id))
    loaded = service.get_cart_by_id(str(cart.id))
    assert loaded.items == []
    assert loaded.total_price == 0.0


def test_cart_invalid_and_missing_ids(db_client):
    service = CartDbService(db_client)
    with pytest.raises(InvalidIdError, match="error: invalid id provided"):
        service.get_cart_by_id("nope")
    with pytest.raises(InvalidIdError, match="error: invalid id provided"):
        service.delete_all_items_from_cart("nope")
    with pytest.raises(NoDocumentError):
        service.get_cart_by_id(str(ObjectId()))


def test_order_save_get_and_update(db_client, fake_client):
    service = OrderDbService(db_client)
    order = Order(
        user_id="u1",
        items=[OrderItem(product_id="p1", name="Dal", price=3.5, quantity=2)],
        total_price=7.0,
        status="pending",
        ordered_at=1700000000,
    )
    order_id = service.save_order(order)
    stored = _stored(fake_client, MONGO_ORDERS_COLLECTION)[0]
    assert str(stored["_id"]) == order_id
    assert stored["userid"] == "u1"

    loaded = service.get_order_by_id(order_id)
    assert loaded == order

    service.update_order_status(order_id, Order(status="confirmed", updated_at="later"))
    assert stored["status"] == "pending"
    refreshed = _stored(fake_client, MONGO_ORDERS_COLLECTION)[0]
    assert refreshed["status"] == "confirmed"
    assert refreshed["updated_at"] == "later"
    assert service.get_order_by_id(order_id).status == "confirmed"


def test_order_invalid_id(db_client):
    service = OrderDbService(db_client)
    with pytest.raises(InvalidIdError, match="invalid orderId: xyz"):
        service.get_order_by_id("xyz")
    with pytest.raises(InvalidIdError, match="invalid orderId: xyz"):
        service.update_order_status("xyz", Order(status="confirmed"))


def test_product_lifecycle(db_client, fake_client):
    service = ProductDbService(db_client)
    product_id = service.create_product(
        ProductSchema(name="Poha", description="Breakfast", price=30.0, category="veg")
    )
    assert str(_stored(fake_client, MONGO_PRODUCTS_COLLECTION)[0]["_id"]) == product_id

    product = service.get_product_by_id(product_id)
    assert (product.name, product.description, product.price, product.category) == (
        "Poha",
        "Breakfast",
        30.0,
        "veg",
    )

    service.update_product(ProductSchema(name="Upma", price=35.0), product_id)
    assert service.get_product_by_id(product_id).name == "Upma"

    service.create_product(ProductSchema(name="Idli"))
    names = sorted(p.name for p in service.get_all_products())
    assert names == ["Idli", "Upma"]

    service.delete_product_by_id(product_id)
    assert [p.name for p in service.get_all_products()] == ["Idli"]
    with pytest.raises(NoDocumentError):
        service.get_product_by_id(product_id)


def test_product_get_invalid_id(db_client):
    service = ProductDbService(db_client)
    with pytest.raises(InvalidIdError) as excinfo:
        service.get_product_by_id("bad")
    assert str(excinfo.value) == "invalid id: bad"


def test_product_delete_invalid_id(db_client, fake_client):
    service = ProductDbService(db_client)
    product_id = service.create_product(ProductSchema(name="Poha"))
    with pytest.raises(InvalidIdError) as excinfo:
        service.delete_product_by_id("bad")
    assert str(excinfo.value) == "invalid id: bad"
    assert [str(d["_id"]) for d in _stored(fake_client, MONGO_PRODUCTS_COLLECTION)] == [
        product_id
    ]


def test_product_update_invalid_id(db_client):
    with pytest.raises(InvalidIdError, match="invalid id: bad"):
        ProductDbService(db_client).update_product(ProductSchema(), "bad")


def test_user_lifecycle(db_client, fake_client):
    service = UserDbService(db_client)
    oid = ObjectId()
    user_id = service.save_user(
        UserSchema(id=oid, name="Asha", email="asha@example.com", cart_id="c1", age=30)
    )
    assert user_id == str(oid)
    assert _stored(fake_client, MONGO_USERS_COLLECTION)[0]["cartid"] == "c1"

    user = service.get_user_by_id(user_id)
    assert (user.id, user.name, user.email, user.cart_id, user.age) == (
        oid,
        "Asha",
        "asha@example.com",
        "c1",
        30,
    )

    service.update_user(UserSchema(id=oid, name="Asha K", email="ak@example.com"), user_id)
    assert service.get_user_by_id(user_id).name == "Asha K"
    assert [u.email for u in service.get_users()] == ["ak@example.com"]

    service.delete_user_by_id(user_id)
    assert service.get_users() == []


def test_user_invalid_ids(db_client):
    service = UserDbService(db_client)
    with pytest.raises(InvalidIdError, match="invalid userid provided, userId: bad"):
        service.get_user_by_id("bad")
    with pytest.raises(
        InvalidIdError, match="cannot delete user, invalid userid provided, userId: bad"
    ):
        service.delete_user_by_id("bad")
    with pytest.raises(
        InvalidIdError, match="cannot delete user, invalid userid provided, userId: bad"
    ):
        service.update_user(UserSchema(), "bad")


def test_user_missing_raises(db_client):
    with pytest.raises(NoDocumentError):
        UserDbService(db_client).get_user_by_id(str(ObjectId()))