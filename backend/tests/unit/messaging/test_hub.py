# backend/tests/unit/messaging/test_hub.py
"""MessagingHub behaviour against the real message store on the test database."""

import json
from unittest.mock import AsyncMock

import pytest

from agora.core.exceptions import (
    AuthorizationException,
    InvalidContentException,
    InvalidMessageIdException,
    InvalidReceiverException,
    MessageNotFoundException,
    NotReceiverException,
    PersistenceException,
    SelfMessageNotAllowedException,
)
from agora.core.ulid_helper import generate_ulid
from agora.database import SessionLocal
from agora.models.message import GlobalMessage, PrivateMessage
from agora.schemas.message import ReadReceiptTarget


def _count(model) -> int:
    session = SessionLocal()
    try:
        return session.query(model).count()
    finally:
        session.close()


def _is_read(message_id: str) -> bool:
    session = SessionLocal()
    try:
        return session.query(PrivateMessage).filter_by(id=message_id).one().is_read
    finally:
        session.close()


# ==========================================
# Connection lifecycle
# ==========================================


@pytest.mark.asyncio
async def test_connect_registers_presence_and_joins_global_room(hub, alice, make_connection):
    conn = make_connection(alice)

    await hub.connect(conn)

    assert hub.presence.lookup(alice.id) is conn
    assert conn in hub.rooms.members("global")


@pytest.mark.asyncio
async def test_disconnect_removes_presence_and_membership(hub, alice, make_connection):
    conn = make_connection(alice)
    await hub.connect(conn)

    await hub.disconnect(conn)

    assert hub.presence.lookup(alice.id) is None
    assert hub.rooms.members("global") == []


@pytest.mark.asyncio
async def test_reconnect_keeps_newest_session(hub, alice, make_connection):
    old, new = make_connection(alice), make_connection(alice)
    await hub.connect(old)
    await hub.connect(new)

    await hub.disconnect(old)

    assert hub.presence.lookup(alice.id) is new


# ==========================================
# Global broadcast
# ==========================================


@pytest.mark.asyncio
async def test_global_message_reaches_every_member_including_sender(
    hub, alice, bob, make_connection
):
    a, b = make_connection(alice), make_connection(bob)
    await hub.connect(a)
    await hub.connect(b)

    await hub.send_global(a, "  hi  ")

    for conn in (a, b):
        data = conn.last("newGlobalMessage")
        assert data["content"] == "hi"
        assert data["roomId"] == "global"
        assert data["senderId"] == {
            "id": alice.id,
            "username": "alice",
            "profilePicture": "/img/alice.png",
        }
    assert _count(GlobalMessage) == 1


@pytest.mark.asyncio
async def test_global_message_with_blank_content_is_rejected_without_persisting(
    hub, alice, make_connection
):
    a = make_connection(alice)
    await hub.connect(a)

    with pytest.raises(InvalidContentException):
        await hub.send_global(a, "   ")

    assert a.frames == []
    assert _count(GlobalMessage) == 0


@pytest.mark.asyncio
async def test_global_persistence_failure_reports_only_to_sender(hub, alice, bob, make_connection):
    a, b = make_connection(alice), make_connection(bob)
    await hub.connect(a)
    await hub.connect(b)
    hub.store.save_global = AsyncMock(
        side_effect=PersistenceException("Failed to send global message due to server error.")
    )

    await hub.handle(a, json.dumps({"event": "globalMessage", "data": {"content": "hi"}}))

    assert a.events() == ["messageError"]
    assert a.last("messageError") == {
        "message": "Failed to send global message due to server error."
    }
    assert b.frames == []


@pytest.mark.asyncio
async def test_dead_member_does_not_block_broadcast(hub, alice, bob, carol, make_connection):
    a = make_connection(alice)
    dead = make_connection(bob, alive=False)
    c = make_connection(carol)
    for conn in (a, dead, c):
        await hub.connect(conn)

    await hub.send_global(a, "still here")

    assert c.last("newGlobalMessage")["content"] == "still here"


@pytest.mark.asyncio
async def test_member_whose_send_raises_does_not_stop_broadcast(
    hub, alice, bob, carol, make_connection
):
    a, broken, c = make_connection(alice), make_connection(bob), make_connection(carol)
    broken.send = AsyncMock(side_effect=OSError("connection reset"))
    for conn in (a, broken, c):
        await hub.connect(conn)

    message = await hub.send_global(a, "anyone?")

    assert a.last("newGlobalMessage")["id"] == message.id
    assert c.last("newGlobalMessage")["id"] == message.id
    assert _count(GlobalMessage) == 1


@pytest.mark.asyncio
async def test_long_global_message_is_stored_whole(hub, alice, make_connection):
    a = make_connection(alice)
    await hub.connect(a)

    message = await hub.send_global(a, "x" * 6000)

    assert message.content == "x" * 6000
    assert a.last("newGlobalMessage")["content"] == "x" * 6000
    assert _count(GlobalMessage) == 1


# ==========================================
# Private delivery
# ==========================================


@pytest.mark.asyncio
async def test_private_message_goes_to_sender_then_receiver(hub, alice, bob, make_connection):
    a, b = make_connection(alice), make_connection(bob)
    await hub.connect(a)
    await hub.connect(b)

    message = await hub.send_private(a, bob.id, " yo ")

    assert a.events() == ["newPrivateMessage"]
    assert b.events() == ["newPrivateMessage"]
    data = b.last("newPrivateMessage")
    assert data["id"] == message.id
    assert data["content"] == "yo"
    assert data["isRead"] is False
    assert data["senderId"]["username"] == "alice"
    assert data["receiverId"]["username"] == "bob"


@pytest.mark.asyncio
async def test_private_message_to_offline_user_is_stored_only(hub, alice, bob, make_connection):
    a = make_connection(alice)
    await hub.connect(a)

    message = await hub.send_private(a, bob.id, "later")

    assert a.events() == ["newPrivateMessage"]
    assert _is_read(message.id) is False


@pytest.mark.asyncio
async def test_private_message_not_delivered_to_third_party(
    hub, alice, bob, carol, make_connection
):
    a, b, c = make_connection(alice), make_connection(bob), make_connection(carol)
    for conn in (a, b, c):
        await hub.connect(conn)

    await hub.send_private(a, bob.id, "secret")

    assert c.frames == []


@pytest.mark.asyncio
async def test_private_validation_order(hub, alice, make_connection):
    a = make_connection(alice)
    await hub.connect(a)

    with pytest.raises(InvalidContentException):
        await hub.send_private(a, "garbage", "")
    with pytest.raises(InvalidReceiverException):
        await hub.send_private(a, "garbage", "hi")
    with pytest.raises(SelfMessageNotAllowedException):
        await hub.send_private(a, alice.id, "hi")
    assert _count(PrivateMessage) == 0


@pytest.mark.asyncio
async def test_private_message_to_unknown_user_is_invalid_receiver(hub, alice, make_connection):
    a = make_connection(alice)
    await hub.connect(a)

    with pytest.raises(InvalidReceiverException):
        await hub.send_private(a, generate_ulid(), "hello?")
    assert _count(PrivateMessage) == 0


@pytest.mark.asyncio
async def test_lowercase_own_id_is_still_a_self_message(hub, alice, make_connection):
    a = make_connection(alice)
    await hub.connect(a)

    with pytest.raises(SelfMessageNotAllowedException):
        await hub.send_private(a, alice.id.lower(), "hi")
    assert _count(PrivateMessage) == 0


@pytest.mark.asyncio
async def test_lowercase_receiver_id_reaches_the_receiver(hub, alice, bob, make_connection):
    a, b = make_connection(alice), make_connection(bob)
    await hub.connect(a)
    await hub.connect(b)

    message = await hub.send_private(a, bob.id.lower(), "hi")

    assert message.receiver_id.id == bob.id
    assert b.last("newPrivateMessage")["id"] == message.id
    session = SessionLocal()
    try:
        assert session.query(PrivateMessage).filter_by(id=message.id).one().receiver_id == bob.id
    finally:
        session.close()


# ==========================================
# Read receipts
# ==========================================


@pytest.mark.asyncio
async def test_mark_read_notifies_sender_and_reader(
    hub, alice, bob, make_connection, make_private_message
):
    a, b = make_connection(alice), make_connection(bob)
    await hub.connect(a)
    await hub.connect(b)
    message = make_private_message(alice, bob, "read me")

    transitioned = await hub.mark_read(b, message.id, bob.id)

    assert transitioned is True
    expected = {"messageId": message.id, "readerId": bob.id}
    assert a.last("messageRead") == expected
    assert b.last("messageRead") == expected
    assert _is_read(message.id) is True


@pytest.mark.asyncio
async def test_mark_read_twice_answers_already_read(
    hub, alice, bob, make_connection, make_private_message
):
    a, b = make_connection(alice), make_connection(bob)
    await hub.connect(a)
    await hub.connect(b)
    message = make_private_message(alice, bob, "read me")

    await hub.mark_read(b, message.id, bob.id)
    second = await hub.mark_read(b, message.id, bob.id)

    assert second is False
    assert b.last("messageStatus") == {"messageId": message.id, "status": "already_read"}
    assert a.events().count("messageRead") == 1


@pytest.mark.asyncio
async def test_mark_read_with_offline_sender_still_confirms_reader(
    hub, alice, bob, make_connection, make_private_message
):
    b = make_connection(bob)
    await hub.connect(b)
    message = make_private_message(alice, bob, "read me")

    await hub.mark_read(b, message.id, bob.id)

    assert b.events() == ["messageRead"]


@pytest.mark.asyncio
async def test_mark_read_by_sender_is_not_receiver(
    hub, alice, bob, make_connection, make_private_message
):
    a = make_connection(alice)
    await hub.connect(a)
    message = make_private_message(alice, bob, "mine")

    with pytest.raises(NotReceiverException):
        await hub.mark_read(a, message.id, alice.id)
    assert _is_read(message.id) is False


@pytest.mark.asyncio
async def test_mark_read_for_someone_else_is_authorization_error(
    hub, alice, bob, make_connection, make_private_message
):
    a = make_connection(alice)
    await hub.connect(a)
    message = make_private_message(alice, bob, "mine")

    with pytest.raises(AuthorizationException):
        await hub.mark_read(a, message.id, bob.id)
    assert _is_read(message.id) is False


@pytest.mark.asyncio
async def test_mark_read_validation(hub, bob, make_connection):
    b = make_connection(bob)
    await hub.connect(b)

    with pytest.raises(InvalidMessageIdException):
        await hub.mark_read(b, "bad-id", bob.id)
    with pytest.raises(MessageNotFoundException):
        await hub.mark_read(b, generate_ulid(), bob.id)


@pytest.mark.asyncio
async def test_mark_read_accepts_lowercase_ids(
    hub, alice, bob, make_connection, make_private_message
):
    a, b = make_connection(alice), make_connection(bob)
    await hub.connect(a)
    await hub.connect(b)
    message = make_private_message(alice, bob, "read me")

    transitioned = await hub.mark_read(b, message.id.lower(), bob.id.lower())

    assert transitioned is True
    assert a.last("messageRead") == {"messageId": message.id, "readerId": bob.id}
    assert _is_read(message.id) is True


@pytest.mark.asyncio
async def test_lost_race_resolves_to_already_read(
    hub, alice, bob, make_connection, make_private_message
):
    a, b = make_connection(alice), make_connection(bob)
    await hub.connect(a)
    await hub.connect(b)
    message = make_private_message(alice, bob, "race")
    # Another worker flips the flag between our read and our update
    hub.store.mark_read = AsyncMock(return_value=False)

    transitioned = await hub.mark_read(b, message.id, bob.id)

    assert transitioned is False
    assert b.events() == ["messageStatus"]
    assert a.frames == []


@pytest.mark.asyncio
async def test_publish_read_receipts_reaches_online_senders_only(
    hub, alice, bob, carol, make_connection
):
    a = make_connection(alice)
    await hub.connect(a)
    receipts = [
        ReadReceiptTarget(message_id=generate_ulid(), reader_id=bob.id, sender_id=alice.id),
        ReadReceiptTarget(message_id=generate_ulid(), reader_id=bob.id, sender_id=carol.id),
    ]

    delivered = await hub.publish_read_receipts(receipts)

    assert delivered == 1
    assert a.last("messageRead") == {"messageId": receipts[0].message_id, "readerId": bob.id}


# ==========================================
# Frame dispatch
# ==========================================


@pytest.mark.asyncio
async def test_handle_reports_validation_errors_to_sender_only(hub, alice, bob, make_connection):
    a, b = make_connection(alice), make_connection(bob)
    await hub.connect(a)
    await hub.connect(b)

    await hub.handle(
        a, json.dumps({"event": "privateMessage", "data": {"receiverId": alice.id, "content": "x"}})
    )

    assert a.last("messageError") == {"message": "Cannot send message to yourself."}
    assert b.frames == []


@pytest.mark.asyncio
async def test_handle_unknown_event(hub, alice, make_connection):
    a = make_connection(alice)
    await hub.connect(a)

    await hub.handle(a, json.dumps({"event": "dance", "data": {}}))

    assert a.events() == ["messageError"]


@pytest.mark.asyncio
async def test_handle_turns_unexpected_errors_into_generic_message_error(
    hub, alice, make_connection
):
    a = make_connection(alice)
    await hub.connect(a)
    hub.store.save_global = AsyncMock(side_effect=RuntimeError("boom"))

    await hub.handle(a, json.dumps({"event": "globalMessage", "data": {"content": "hi"}}))

    assert a.last("messageError") == {"message": "An unexpected server error occurred."}


@pytest.mark.asyncio
async def test_handle_mark_as_read_frame(hub, alice, bob, make_connection, make_private_message):
    a, b = make_connection(alice), make_connection(bob)
    await hub.connect(a)
    await hub.connect(b)
    message = make_private_message(alice, bob, "seen?")

    await hub.handle(
        b,
        json.dumps(
            {"event": "markAsRead", "data": {"messageId": message.id, "readerId": bob.id}}
        ),
    )

    assert b.events() == ["messageRead"]
    assert a.last("messageRead") == {"messageId": message.id, "readerId": bob.id}
