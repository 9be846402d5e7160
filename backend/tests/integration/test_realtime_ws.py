# backend/tests/integration/test_realtime_ws.py
"""End-to-end socket flows through the real app, store and database."""

from starlette.websockets import WebSocketDisconnect
import pytest

from agora.core.ulid_helper import generate_ulid
from agora.auth import create_access_token
from agora.models.message import PrivateMessage


def _connect(client, token):
    return client.websocket_connect(f"/ws?token={token}")


def _expect(ws, event):
    frame = ws.receive_json()
    assert frame["event"] == event, frame
    return frame["data"]


class TestHandshake:
    def test_valid_token_gets_connected_frame(self, client, alice, token_for):
        with _connect(client, token_for(alice)) as ws:
            data = _expect(ws, "connected")

        assert data == {"userId": alice.id, "username": "alice"}

    def test_bearer_header_is_accepted(self, client, bob, headers_for):
        with client.websocket_connect("/ws", headers=headers_for(bob)) as ws:
            assert _expect(ws, "connected")["userId"] == bob.id

    def test_missing_token_is_rejected_with_4401(self, client):
        with client.websocket_connect("/ws") as ws:
            data = _expect(ws, "connect_error")
            with pytest.raises(WebSocketDisconnect) as exc_info:
                ws.receive_json()

        assert data == {"message": "Authentication error: Token not provided"}
        assert exc_info.value.code == 4401

    def test_bad_token_is_rejected_with_4401(self, client):
        with _connect(client, "garbage") as ws:
            data = _expect(ws, "connect_error")
            with pytest.raises(WebSocketDisconnect) as exc_info:
                ws.receive_json()

        assert data == {"message": "Authentication error: Invalid token"}
        assert exc_info.value.code == 4401

    def test_unknown_user_is_rejected_with_4404(self, client):
        token = create_access_token({"sub": generate_ulid()})
        with _connect(client, token) as ws:
            data = _expect(ws, "connect_error")
            with pytest.raises(WebSocketDisconnect) as exc_info:
                ws.receive_json()

        assert data == {"message": "Authentication error: User not found"}
        assert exc_info.value.code == 4404


class TestMessaging:
    def test_global_message_is_broadcast_to_everyone(self, client, alice, bob, token_for):
        with _connect(client, token_for(alice)) as ws_a, _connect(client, token_for(bob)) as ws_b:
            _expect(ws_a, "connected")
            _expect(ws_b, "connected")

            ws_a.send_json({"event": "globalMessage", "data": {"content": "hello room"}})

            to_sender = _expect(ws_a, "newGlobalMessage")
            to_peer = _expect(ws_b, "newGlobalMessage")

        assert to_sender == to_peer
        assert to_peer["content"] == "hello room"
        assert to_peer["senderId"]["username"] == "alice"

    def test_private_message_and_read_receipt(self, client, db, alice, bob, token_for):
        with _connect(client, token_for(alice)) as ws_a, _connect(client, token_for(bob)) as ws_b:
            _expect(ws_a, "connected")
            _expect(ws_b, "connected")

            ws_a.send_json(
                {"event": "privateMessage", "data": {"receiverId": bob.id, "content": "psst"}}
            )
            sent = _expect(ws_a, "newPrivateMessage")
            received = _expect(ws_b, "newPrivateMessage")
            assert sent == received
            assert received["isRead"] is False

            ws_b.send_json(
                {"event": "markAsRead", "data": {"messageId": received["id"], "readerId": bob.id}}
            )
            receipt_for_sender = _expect(ws_a, "messageRead")
            receipt_for_reader = _expect(ws_b, "messageRead")

            ws_b.send_json(
                {"event": "markAsRead", "data": {"messageId": received["id"], "readerId": bob.id}}
            )
            status = _expect(ws_b, "messageStatus")

        expected = {"messageId": received["id"], "readerId": bob.id}
        assert receipt_for_sender == expected
        assert receipt_for_reader == expected
        assert status == {"messageId": received["id"], "status": "already_read"}
        assert db.query(PrivateMessage).filter_by(id=received["id"]).one().is_read is True

    def test_private_message_to_offline_user_is_stored(self, client, db, alice, bob, token_for):
        with _connect(client, token_for(alice)) as ws_a:
            _expect(ws_a, "connected")
            ws_a.send_json(
                {"event": "privateMessage", "data": {"receiverId": bob.id, "content": "later"}}
            )
            sent = _expect(ws_a, "newPrivateMessage")

        stored = db.query(PrivateMessage).filter_by(id=sent["id"]).one()
        assert stored.receiver_id == bob.id
        assert stored.is_read is False

    def test_bad_frames_get_message_error_and_socket_stays_open(self, client, alice, token_for):
        with _connect(client, token_for(alice)) as ws:
            _expect(ws, "connected")

            ws.send_text("{not json")
            first = _expect(ws, "messageError")
            ws.send_json({"event": "globalMessage", "data": {"content": "   "}})
            second = _expect(ws, "messageError")
            ws.send_json({"event": "privateMessage", "data": {"receiverId": alice.id, "content": "me"}})
            third = _expect(ws, "messageError")

            ws.send_json({"event": "globalMessage", "data": {"content": "still alive"}})
            assert _expect(ws, "newGlobalMessage")["content"] == "still alive"

        assert first["message"].startswith("Unsupported event")
        assert second == {"message": "Message content must be a non-empty string."}
        assert third == {"message": "Cannot send message to yourself."}

    def test_connected_user_is_present_on_the_shared_hub(self, client, alice, token_for):
        hub = client.app.state.messaging_hub
        with _connect(client, token_for(alice)) as ws:
            _expect(ws, "connected")
            assert alice.id in hub.presence
            assert client.get("/health").json()["online_users"] == 1
