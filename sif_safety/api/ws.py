"""Socket endpoint for live moderation updates."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from sif_safety.core.moderation_policies import PENDING_COUNT_EVENT
from sif_safety.core.security import decode_access_token
from sif_safety.core.ws_manager import ws_manager
from sif_safety.db.session import SessionLocal
from sif_safety.services.auth_service import get_user_by_email
from sif_safety.services.moderation_service import refresh_pending_count

logger = logging.getLogger(__name__)

router = APIRouter()

MISSING_TOKEN = 4001
REJECTED_TOKEN = 4003


@dataclass(frozen=True)
class _Session:
    user_id: int
    is_moderator: bool
    pending_reports: int = 0


def _open_session(token: str) -> _Session | None:
    """Resolve the token to an active, unbanned account."""
    claims = decode_access_token(token)
    if claims is None:
        return None
    with SessionLocal() as db:
        user = get_user_by_email(db, claims["sub"])
        if user is None or not user.is_active or user.is_banned:
            return None
        if not user.is_moderator:
            return _Session(user.id, False)
        return _Session(user.id, True, refresh_pending_count(db))


@router.websocket("/ws")
async def live_updates(websocket: WebSocket):
    """
    Connect with ?token=<jwt>. Moderators are sent moderation.pending_count
    right away and again after every queue change. Send "ping" to get a pong.
    """
    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=MISSING_TOKEN, reason="Missing token")
        return

    session = _open_session(token)
    if session is None:
        await websocket.close(code=REJECTED_TOKEN, reason="Invalid or expired token")
        return

    await ws_manager.connect(websocket, session.user_id, is_moderator=session.is_moderator)
    try:
        if session.is_moderator:
            await ws_manager.send_to_user(
                session.user_id, PENDING_COUNT_EVENT, {"pending_reports": session.pending_reports}
            )
        while True:
            if await websocket.receive_text() == "ping":
                await websocket.send_json({"event": "pong"})
    except WebSocketDisconnect:
        logger.debug("WS client user=%s went away", session.user_id)
    finally:
        ws_manager.disconnect(websocket, session.user_id)
