# =============================================================================
# app/websocket/manager.py - WebSocket Connection Manager
# =============================================================================
# Tracks the WebSocket clients watching each campaign's generation run and
# fans events out to them.
#
# Usage:
#   from app.websocket import websocket_manager
#
#   await websocket_manager.connect(campaign_id, websocket)
#   await websocket_manager.broadcast(campaign_id, {"type": "generation_progress", ...})
#   websocket_manager.disconnect(campaign_id, websocket)
# =============================================================================

import logging
from typing import Dict, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """
    WebSocket connections grouped by campaign ID.

    A campaign can be watched from several tabs at once; every event for
    the campaign goes to all of them.
    """

    def __init__(self):
        # campaign_id -> open connections
        self.connections: Dict[str, Set[WebSocket]] = {}

    def _remove(self, campaign_id: str, websockets: Set[WebSocket]) -> None:
        watchers = self.connections.get(campaign_id)
        if watchers is None:
            return
        watchers.difference_update(websockets)
        if not watchers:
            del self.connections[campaign_id]

    async def connect(self, campaign_id: str, websocket: WebSocket) -> None:
        """Accept a connection and start sending it the campaign's events."""
        await websocket.accept()
        self.connections.setdefault(campaign_id, set()).add(websocket)

        logger.info(
            f"WebSocket connected to campaign {campaign_id}. "
            f"Total connections: {self.get_connection_count()}"
        )

    def disconnect(self, campaign_id: str, websocket: WebSocket) -> None:
        self._remove(campaign_id, {websocket})
        logger.info(
            f"WebSocket disconnected from campaign {campaign_id}. "
            f"Total connections: {self.get_connection_count()}"
        )

    async def broadcast(self, campaign_id: str, message: dict) -> int:
        """
        Send a message to every client watching a campaign.

        Connections that fail to receive are dropped.

        Returns:
            int: Number of clients the message was sent to
        """
        watchers = self.connections.get(campaign_id)
        if not watchers:
            logger.debug(f"No connections for campaign {campaign_id}, skipping broadcast")
            return 0

        dead: Set[WebSocket] = set()
        sent_count = 0

        for websocket in list(watchers):
            try:
                await websocket.send_json(message)
                sent_count += 1
            except Exception as e:
                logger.warning(f"Failed to send to WebSocket: {e}")
                dead.add(websocket)

        if dead:
            self._remove(campaign_id, dead)
            logger.info(f"Cleaned up {len(dead)} dead connections")

        logger.debug(
            f"Broadcast to campaign {campaign_id}: "
            f"type={message.get('type')}, sent to {sent_count} clients"
        )
        return sent_count

    def get_connection_count(self, campaign_id: str | None = None) -> int:
        """Connections for one campaign, or in total."""
        if campaign_id:
            return len(self.connections.get(campaign_id, set()))
        return sum(len(watchers) for watchers in self.connections.values())


# Global singleton instance
websocket_manager = ConnectionManager()
