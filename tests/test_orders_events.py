import json
from datetime import datetime, timedelta, timezone

from storefront.orders.events import NatsPublisher
from storefront.orders.models import Order


class FakeConnection:
    def __init__(self):
        self.messages = []

    def publish(self, subject, payload):
        self.messages.append((subject, payload))


def make_order(tz=timezone.utc):
    return Order(
        id="o1",
        user_id="u1",
        total=12.5,
        status="completed",
        timestamp=datetime(2024, 5, 1, 10, 20, 30, 123456, tzinfo=tz),
    )


def decode(connection):
    subject, payload = connection.messages[-1]
    return subject, json.loads(payload)


def test_order_created_event():
    connection = FakeConnection()
    NatsPublisher(connection).publish_order_created(make_order())
    subject, event = decode(connection)
    assert subject == "order.created"
    assert event["action"] == "order.created"
    assert event["data"] == {
        "order_id": "o1",
        "user_id": "u1",
        "total": 12.5,
        "order_time": "2024-05-01T10:20:30Z",
    }


def test_order_updated_event_carries_status():
    connection = FakeConnection()
    NatsPublisher(connection).publish_order_updated(make_order())
    subject, event = decode(connection)
    assert subject == "order.updated"
    assert event["action"] == "order.updated"
    assert event["data"]["status"] == "completed"
    assert set(event["data"]) == {"order_id", "user_id", "total", "status", "order_time"}


def test_order_time_keeps_offset():
    connection = FakeConnection()
    NatsPublisher(connection).publish_order_created(make_order(timezone(timedelta(hours=5))))
    _, event = decode(connection)
    assert event["data"]["order_time"] == "2024-05-01T10:20:30+05:00"


def test_event_time_is_rfc3339_with_offset():
    connection = FakeConnection()
    NatsPublisher(connection).publish_order_created(make_order())
    _, event = decode(connection)
    text = event["time"]
    parsed = datetime.fromisoformat(text[:-1] + "+00:00" if text.endswith("Z") else text)
    assert parsed.tzinfo is not None
    assert parsed.microsecond == 0


def test_payload_is_bytes_with_one_message_per_call():
    connection = FakeConnection()
    publisher = NatsPublisher(connection)
    publisher.publish_order_created(make_order())
    publisher.publish_order_updated(make_order())
    assert [subject for subject, _ in connection.messages] == ["order.created", "order.updated"]
    assert all(isinstance(payload, bytes) for _, payload in connection.messages)