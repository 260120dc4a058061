import pytest
from starlette.websockets import WebSocketDisconnect

from conftest import auth
from messenger.models.base import Notification
from messenger.services.realtime import get_connection_registry
from messenger.main import app


class RecordingHandle:
    def __init__(self, events):
        self.events = events

    async def emit(self, event, payload):
        self.events.append((event, payload))
        return 1


class FakeRegistry:
    """Реестр с заранее заданным списком онлайн-пользователей."""

    def __init__(self, online=()):
        self.online = set(online)
        self.events = []
        self.lookups = []

    def lookup(self, user_id):
        self.lookups.append(user_id)
        if user_id in self.online:
            return RecordingHandle(self.events)
        return None


def test_online_receiver_gets_notification_then_message(client, users):
    alice, bob = users["alice"], users["bob"]
    registry = FakeRegistry(online=[bob])
    app.dependency_overrides[get_connection_registry] = lambda: registry

    response = client.post(f"/api/messages/send/{bob}", json={"text": "hi"}, headers=auth(alice))

    assert response.status_code == 201
    assert [event for event, _ in registry.events] == ["newNotification", "newMessage"]
    notification, message = registry.events[0][1], registry.events[1][1]
    assert notification["userId"] == bob
    assert notification["content"] == "New message from Alice"
    assert message == response.json()


def test_offline_receiver_gets_no_push_but_notification_is_stored(client, db, users):
    alice, bob = users["alice"], users["bob"]
    registry = FakeRegistry(online=[alice])
    app.dependency_overrides[get_connection_registry] = lambda: registry

    response = client.post(f"/api/messages/send/{bob}", json={"text": "hi"}, headers=auth(alice))

    assert response.status_code == 201
    assert registry.lookups == [bob]
    assert registry.events == []
    assert db.query(Notification).filter(Notification.user_id == bob).count() == 1


def test_push_failure_does_not_fail_send(client, users):
    class BrokenHandle:
        async def emit(self, event, payload):
            raise RuntimeError("socket closed")

    class BrokenRegistry:
        def lookup(self, user_id):
            return BrokenHandle()

    app.dependency_overrides[get_connection_registry] = lambda: BrokenRegistry()

    response = client.post(f"/api/messages/send/{users['bob']}", json={"text": "hi"}, headers=auth(users["alice"]))
    assert response.status_code == 201


def test_websocket_delivers_events_to_connected_user(client, registry, users):
    alice, bob = users["alice"], users["bob"]

    with client.websocket_connect("/ws", headers=auth(bob)) as ws:
        online = ws.receive_json()
        assert online == {"event": "getOnlineUsers", "data": [bob]}
        assert registry.lookup(bob) is not None
        assert registry.lookup(alice) is None

        response = client.post(f"/api/messages/send/{bob}", json={"text": "hi"}, headers=auth(alice))
        assert response.status_code == 201

        first = ws.receive_json()
        second = ws.receive_json()
        assert first["event"] == "newNotification"
        assert second["event"] == "newMessage"
        assert second["data"]["id"] == response.json()["id"]
        assert second["data"]["text"] == "hi"


def test_online_users_broadcast_on_connect(client, registry, users):
    alice, bob = users["alice"], users["bob"]

    with client.websocket_connect("/ws", headers=auth(alice)) as alice_ws:
        assert alice_ws.receive_json()["data"] == [alice]

        with client.websocket_connect("/ws", headers=auth(bob)) as bob_ws:
            assert sorted(bob_ws.receive_json()["data"]) == sorted([alice, bob])
            assert sorted(alice_ws.receive_json()["data"]) == sorted([alice, bob])
            assert sorted(registry.online_user_ids()) == sorted([alice, bob])


def test_connection_limit_closes_oldest_socket(client, registry, users):
    bob = users["bob"]

    with client.websocket_connect("/ws", headers=auth(bob)) as first, \
            client.websocket_connect("/ws", headers=auth(bob)) as second, \
            client.websocket_connect("/ws", headers=auth(bob)) as third:
        assert third.receive_json() == {"event": "getOnlineUsers", "data": [bob]}

        assert len(registry._connections[bob]) == 2
        assert len(registry._websocket_to_connection) == 2

        # первый сокет получил два списка онлайн, затем закрытие
        assert first.receive_json()["event"] == "getOnlineUsers"
        assert first.receive_json()["event"] == "getOnlineUsers"
        with pytest.raises(WebSocketDisconnect):
            first.receive_json()

        assert second.receive_json()["data"] == [bob]
        assert second.receive_json()["data"] == [bob]


@pytest.mark.parametrize("headers", [{}, {"X-User-Id": "abc"}, {"X-User-Id": "999"}])
def test_websocket_rejects_missing_or_unknown_identity(client, registry, users, headers):
    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect("/ws", headers=headers):
            pass

    assert exc_info.value.code == 1008
    assert registry.online_user_ids() == []


def test_websocket_ignores_user_id_query_parameter(client, registry, users):
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect(f"/ws?userId={users['bob']}"):
            pass

    assert registry.lookup(users["bob"]) is None
