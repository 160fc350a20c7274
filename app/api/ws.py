"""
WebSocket channel for test data generation progress
"""

import json
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from fastapi.security import HTTPAuthorizationCredentials

from app.api.deps import get_dev_state
from app.core.exceptions import NotAuthenticatedError
from app.services.dev_state import DevStateStore
from app.utils.security import resolve_user_id

logger = logging.getLogger(__name__)

class WebSocketManager:
    """Manages progress subscribers, grouped by user id"""

    def __init__(self):
        # user_id -> list of websockets
        self.active_connections: Dict[str, List[WebSocket]] = {}

    async def connect(self, websocket: WebSocket, user_id: str):
        await websocket.accept()
        self.active_connections.setdefault(user_id, []).append(websocket)
        logger.info(f"Progress socket connected for user {user_id}. Total connections: {len(self.active_connections[user_id])}")

    def disconnect(self, websocket: WebSocket, user_id: str):
        connections = self.active_connections.get(user_id)
        if not connections or websocket not in connections:
            return
        connections.remove(websocket)
        logger.info(f"Progress socket disconnected for user {user_id}. Remaining connections: {len(connections)}")
        if not connections:
            del self.active_connections[user_id]

    async def send_personal_message(self, message: dict, websocket: WebSocket):
        try:
            await websocket.send_text(json.dumps(message))
        except Exception as e:
            logger.error(f"Error sending personal message: {e}")

    async def broadcast_to_user(self, user_id: str, message: dict):
        """Send to every socket of a user; sockets that fail are dropped"""
        connections = list(self.active_connections.get(user_id, []))
        disconnected = []
        for websocket in connections:
            try:
                await websocket.send_text(json.dumps(message))
            except Exception as e:
                logger.error(f"Error broadcasting to websocket: {e}")
                disconnected.append(websocket)

        for websocket in disconnected:
            self.disconnect(websocket, user_id)

    def progress_callback(self, user_id: str):
        """Async callback suitable for BatchInserter.on_progress"""
        async def publish(message: str):
            await self.broadcast_to_user(user_id, {
                "type": "progress",
                "message": message,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            })
        return publish

    def get_all_connection_counts(self) -> Dict[str, int]:
        return {
            user_id: len(connections)
            for user_id, connections in self.active_connections.items()
        }

# Global WebSocket manager instance
websocket_manager = WebSocketManager()

router = APIRouter()

@router.websocket("/progress")
async def progress_endpoint(
    websocket: WebSocket,
    token: Optional[str] = None,
    dev_state: DevStateStore = Depends(get_dev_state)
):
    """Stream generation progress for the user the token belongs to"""
    credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials=token) if token else None
    try:
        user_id = resolve_user_id(credentials, dev_state)
    except NotAuthenticatedError as e:
        logger.warning(f"Rejected progress socket: {e.message}")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket_manager.connect(websocket, user_id)

    try:
        await websocket_manager.send_personal_message({
            "type": "connection",
            "message": f"Subscribed to progress for {user_id}",
        }, websocket)

        while True:
            data = await websocket.receive_text()
            try:
                client_message = json.loads(data)
            except json.JSONDecodeError:
                logger.warning(f"Invalid JSON received from WebSocket: {data}")
                continue

            if client_message.get("type") == "ping":
                await websocket_manager.send_personal_message({
                    "type": "pong",
                    "timestamp": client_message.get("timestamp")
                }, websocket)

    except WebSocketDisconnect:
        pass
    finally:
        websocket_manager.disconnect(websocket, user_id)
