# backend/tests/unit/messaging/test_connection.py
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from starlette.websockets import WebSocketDisconnect, WebSocketState

from agora.core.ulid_helper import generate_ulid
from agora.services.messaging import WebSocketConnection


def _socket(state=WebSocketState.CONNECTED, error=None):
    return SimpleNamespace(application_state=state, send_json=AsyncMock(side_effect=error))


@pytest.mark.asyncio
async def test_send_hands_frame_to_socket():
    websocket = _socket()
    conn = WebSocketConnection(websocket, generate_ulid(), "alice")

    assert await conn.send({"event": "connected", "data": {}}) is True
    websocket.send_json.assert_awaited_once_with({"event": "connected", "data": {}})


@pytest.mark.asyncio
async def test_send_to_closed_socket_is_skipped():
    websocket = _socket(state=WebSocketState.DISCONNECTED)
    conn = WebSocketConnection(websocket, generate_ulid(), "alice")

    assert await conn.send({"event": "connected", "data": {}}) is False
    websocket.send_json.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [WebSocketDisconnect(code=1006), RuntimeError("closed"), OSError("connection reset")],
)
async def test_transport_failures_return_false(error):
    conn = WebSocketConnection(_socket(error=error), generate_ulid(), "alice")

    assert await conn.send({"event": "newGlobalMessage", "data": {}}) is False
