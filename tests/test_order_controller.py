import pytest
from bson import ObjectId
from flask import Flask

from jevan.models import Order, OrderItem
from jevan.order_controller import OrderController
from jevan.services import ServiceError


class FakeOrderService:
    def __init__(self):
        self.orders = {}
        self.updates = []
        self.fail_create = False

    def create_order(self, order):
        if self.fail_create:
            raise ServiceError("error creating order: boom")
        order_id = str(ObjectId())
        self.orders[order_id] = order
        return order_id

    def get_order_by_id(self, order_id):
        if order_id not in self.orders:
            raise ServiceError(f"order not found: invalid orderId: {order_id}")
        return self.orders[order_id]

    def update_order(self, order_id, status):
        if order_id not in self.orders:
            raise ServiceError("error updating order status: missing")
        self.updates.append((order_id, status))


@pytest.fixture
def service():
    return FakeOrderService()


@pytest.fixture
def client(service):
    app = Flask(__name__)
    OrderController(service).register(app)
    return app.test_client()


ORDER_PAYLOAD = {
    "user_id": "u1",
    "items": [{"product_id": "p1", "name": "Thali", "price": 80.0, "quantity": 2}],
    "totalprice": 160.0,
    "status": "pending",
    "ordered_at": 1700000000,
    "updated_at": "",
}


def test_create_order_returns_id(client, service):
    response = client.post("/orders", json=ORDER_PAYLOAD)
    assert response.status_code == 201
    order_id = response.get_json()["id"]
    assert service.orders[order_id].to_dict() == ORDER_PAYLOAD


@pytest.mark.parametrize("body", ["", "null", "{oops", '{"status": 5}'])
def test_create_order_invalid_payload(client, service, body):
    response = client.post("/orders", data=body, content_type="application/json")
    assert response.status_code == 400
    assert response.get_json() == {
        "status": "Error",
        "message": "Invalid request payload",
    }
    assert service.orders == {}


def test_create_order_service_error(client, service):
    service.fail_create = True
    response = client.post("/orders", json=ORDER_PAYLOAD)
    assert response.status_code == 400
    assert response.get_json()["message"] == "error creating order: boom"


def test_get_order_round_trip(client, service):
    order = Order(
        id="abc",
        user_id="u2",
        items=[OrderItem(product_id="p", name="Roti", price=5.0, quantity=4)],
        total_price=20.0,
        status="confirmed",
    )
    service.orders["abc"] = order
    response = client.get("/orders/abc")
    assert response.status_code == 200
    assert Order.from_dict(response.get_json()) == order


def test_get_order_blank_id(client):
    response = client.get("/orders/%20")
    assert response.status_code == 400
    assert response.get_json()["message"] == "'id' is required"


def test_get_order_not_found(client):
    response = client.get("/orders/zzz")
    assert response.status_code == 400
    assert response.get_json() == {
        "status": "Error",
        "message": "order not found: invalid orderId: zzz",
    }


def test_update_order(client, service):
    service.orders["o1"] = Order(status="pending")
    response = client.put(
        "/orders/o1", json={"status": "delivered", "updated_at": "later"}
    )
    assert response.status_code == 200
    assert response.data == b""
    order_id, status = service.updates[0]
    assert order_id == "o1"
    assert (status.status, status.updated_at) == ("delivered", "later")


def test_update_order_invalid_payload(client, service):
    service.orders["o1"] = Order()
    response = client.put("/orders/o1", data="null", content_type="application/json")
    assert response.status_code == 400
    assert response.get_json()["message"] == "Invalid request payload"
    assert service.updates == []


def test_update_order_blank_id_checked_first(client, service):
    response = client.put("/orders/%20", data="{bad", content_type="application/json")
    assert response.status_code == 400
    assert response.get_json()["message"] == "'id' is required"


def test_update_order_service_error(client, service):
    response = client.put("/orders/nope", json={"status": "x"})
    assert response.status_code == 400
    assert response.get_json()["message"] == "error updating order status: missing"