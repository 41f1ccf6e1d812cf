# college_erp/realtime/gateway.py
"""
Socket.IO push channel.

Protocol:
- connect with ``auth: {token}`` (``?token=`` query string also accepted)
- every socket joins its personal room ``user:<id>``
- server -> client: ``receive:message`` with a RealtimeMessagePayload
- client -> server: ``join:room <name>`` and ``send:message <payload>``
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from urllib.parse import parse_qs

import socketio
from fastapi import Request
from pydantic import ValidationError

from college_erp.core.config import settings
from college_erp.core.security import decode_access_token
from college_erp.schemas.realtime import RealtimeMessagePayload

logger = logging.getLogger(__name__)

RECEIVE_MESSAGE = "receive:message"
JOIN_ROOM = "join:room"
SEND_MESSAGE = "send:message"


def room_for_user(user_id: str) -> str:
    return f"user:{user_id}"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _extract_token(environ: Dict[str, Any], auth: Any) -> Optional[str]:
    if isinstance(auth, dict):
        token = auth.get("token")
        if isinstance(token, str) and token:
            return token

    scope = environ.get("asgi.scope", environ) if isinstance(environ, dict) else {}
    query_string = scope.get("query_string") or scope.get("QUERY_STRING") or ""
    if isinstance(query_string, (bytes, bytearray)):
        query_string = query_string.decode(errors="ignore")

    token = parse_qs(str(query_string)).get("token", [None])[0]
    if isinstance(token, str) and token:
        return token
    return None


def _system_notice(notice_id: str, content: str, title: str, type_: str = "SystemInfo") -> Dict[str, Any]:
    return RealtimeMessagePayload(
        id=notice_id,
        content=content,
        timestamp=_now_iso(),
        type=type_,
        title=title,
    ).model_dump()


class RealtimeGateway:
    """Owns the Socket.IO server; created once by the app factory."""

    def __init__(self, sio: Optional[socketio.AsyncServer] = None):
        self.sio = sio or socketio.AsyncServer(
            async_mode="asgi",
            cors_allowed_origins=[settings.FRONTEND_URL],
            logger=False,
            engineio_logger=False,
        )
        self.sio.on("connect", self.on_connect)
        self.sio.on("disconnect", self.on_disconnect)
        self.sio.on(JOIN_ROOM, self.on_join_room)
        self.sio.on(SEND_MESSAGE, self.on_send_message)

    async def on_connect(self, sid: str, environ: Dict[str, Any], auth: Any = None) -> None:
        token = _extract_token(environ, auth)
        payload = decode_access_token(token) if token else None
        if payload is None:
            logger.warning(f"Socket authentication failed for socket ID: {sid}")
            raise ConnectionRefusedError("Authentication error: Invalid token.")

        user = {
            "id": payload["sub"],
            "name": payload.get("name"),
            "role": payload.get("role"),
        }
        await self.sio.save_session(sid, user)
        await self.sio.enter_room(sid, room_for_user(user["id"]))
        logger.info(f"User {user['name']} (ID: {user['id']}) connected with socket {sid}")

        await self.sio.emit(
            RECEIVE_MESSAGE,
            _system_notice(
                f"welcome-{sid}",
                f"Welcome, {user['name']}! You are connected to the real-time notification service.",
                "Connection Established",
            ),
            to=sid,
        )

    async def on_disconnect(self, sid: str, reason: Any = None) -> None:
        logger.info(f"Socket {sid} disconnected. Reason: {reason}")

    async def on_join_room(self, sid: str, room_name: Any) -> None:
        if not isinstance(room_name, str) or not room_name:
            logger.warning(f"Socket {sid} attempted to join invalid room: {room_name!r}")
            return

        await self.sio.enter_room(sid, room_name)
        logger.info(f"Socket {sid} joined custom room: {room_name}")
        await self.sio.emit(
            RECEIVE_MESSAGE,
            _system_notice(
                f"join-{room_name}-{sid}",
                f"You have joined room: {room_name}",
                "Room Joined",
            ),
            to=sid,
        )

    async def on_send_message(self, sid: str, data: Any) -> None:
        """Relay a client message to every other connected client."""
        session = await self.sio.get_session(sid)
        sender_name = session.get("name") if session else None

        try:
            message = RealtimeMessagePayload.model_validate(
                {**(data if isinstance(data, dict) else {}), "sender": sender_name}
            )
        except ValidationError as exc:
            logger.warning(f"Socket {sid} sent an invalid message: {exc.errors()}")
            await self.sio.emit(
                RECEIVE_MESSAGE,
                _system_notice(
                    f"error-{sid}",
                    "Message rejected: invalid payload.",
                    "Message Not Sent",
                    type_="SystemError",
                ),
                to=sid,
            )
            return

        logger.info(f"User {sender_name} (socket {sid}) sent a message via socket")
        await self.sio.emit(RECEIVE_MESSAGE, message.model_dump(), skip_sid=sid)

    async def publish_message(
        self,
        payload: RealtimeMessagePayload,
        receiver_id: Optional[str] = None,
    ) -> None:
        """
        Push a stored message to connected clients: Broadcast to everyone,
        Direct to the receiver's personal room. Best effort, never raises.
        """
        try:
            if payload.type == "Broadcast":
                await self.sio.emit(RECEIVE_MESSAGE, payload.model_dump())
                logger.info(f"Broadcast message {payload.id} emitted to all clients")
            elif receiver_id:
                await self.sio.emit(
                    RECEIVE_MESSAGE, payload.model_dump(), room=room_for_user(receiver_id)
                )
                logger.info(f"Direct message {payload.id} emitted to {room_for_user(receiver_id)}")
            else:
                logger.warning(f"Message {payload.id} has no receiver; push skipped")
        except Exception as e:
            logger.error(f"Failed to push message {payload.id}: {e}", exc_info=True)

    def asgi_app(self, other_asgi_app) -> socketio.ASGIApp:
        return socketio.ASGIApp(
            self.sio,
            other_asgi_app=other_asgi_app,
            socketio_path=settings.SOCKETIO_PATH,
        )


def get_gateway(request: Request) -> Optional[RealtimeGateway]:
    """FastAPI dependency; None when the app was built without a gateway."""
    return getattr(request.app.state, "gateway", None)
