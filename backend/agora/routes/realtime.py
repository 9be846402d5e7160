# backend/agora/routes/realtime.py
"""
Real-time endpoint

    WS /ws?token=<jwt>  (or ``Authorization: Bearer <jwt>``)

The socket is accepted, then authenticated once. A rejected handshake gets a
``connect_error`` frame and a close code (4401 bad or missing token, 4404
unknown user) and no event handler ever runs for it. An admitted socket gets
``connected`` and then exchanges ``{"event", "data"}`` frames until it closes.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status

from ..api.dependencies.services import get_connection_gatekeeper, get_messaging_hub
from ..core.constants import REALTIME_PATH
from ..core.exceptions import ServiceException, UnauthorizedException, UserNotFoundException
from ..core.metrics import REALTIME_HANDSHAKE_REJECTED_TOTAL
from ..services.messaging import ConnectionGatekeeper, MessagingHub, WebSocketConnection
from ..services.messaging.events import build_connect_error_event, build_connected_event

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])

CLOSE_UNAUTHENTICATED = 4401
CLOSE_USER_NOT_FOUND = 4404


def extract_token(websocket: WebSocket) -> Optional[str]:
    """Handshake token from the ``token`` query param, else a bearer header."""
    token = websocket.query_params.get("token")
    if token and token.strip():
        return token.strip()
    scheme, _, credentials = (websocket.headers.get("authorization") or "").partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


@router.websocket(REALTIME_PATH)
async def realtime_endpoint(
    websocket: WebSocket,
    gatekeeper: ConnectionGatekeeper = Depends(get_connection_gatekeeper),
    hub: MessagingHub = Depends(get_messaging_hub),
) -> None:
    await websocket.accept()

    try:
        profile = await gatekeeper.authenticate(extract_token(websocket))
    except UnauthorizedException as exc:
        REALTIME_HANDSHAKE_REJECTED_TOTAL.labels(reason=exc.code).inc()
        logger.info(f"[REALTIME] Handshake rejected: {exc.message}")
        await websocket.send_json(build_connect_error_event(exc.message))
        close_code = (
            CLOSE_USER_NOT_FOUND if isinstance(exc, UserNotFoundException) else CLOSE_UNAUTHENTICATED
        )
        await websocket.close(code=close_code)
        return
    except ServiceException as exc:
        REALTIME_HANDSHAKE_REJECTED_TOTAL.labels(reason=exc.code).inc()
        logger.error(f"[REALTIME] Handshake failed: {exc.message}")
        await websocket.send_json(build_connect_error_event("Authentication error: Server error"))
        await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
        return

    connection = WebSocketConnection(websocket, profile.id, profile.username)
    await hub.connect(connection)
    await connection.send(build_connected_event(profile))

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            raw = message.get("text")
            if raw is None:
                raw = (message.get("bytes") or b"").decode("utf-8", errors="replace")
            await hub.handle(connection, raw)
    except WebSocketDisconnect as exc:
        logger.debug(f"[REALTIME] {profile.id} closed the socket (code {exc.code})")
    finally:
        await hub.disconnect(connection)
