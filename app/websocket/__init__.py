# =============================================================================
# app/websocket/__init__.py - WebSocket Module
# =============================================================================
# Real-time generation progress.
#
# Usage:
#   # Broadcast an event to all connections for a campaign (from FastAPI)
#   from app.websocket import websocket_manager
#
#   await websocket_manager.broadcast(campaign_id, {"type": "generation_progress", ...})
#
#   # Publish events from Celery workers
#   from app.websocket.broadcast import publish_generation_progress
#
#   publish_generation_progress(campaign_id, task_id, "image", 60, "Creating visual content")
# =============================================================================

from app.websocket.manager import websocket_manager
from app.websocket.broadcast import (
    publish_event,
    publish_generation_complete,
    publish_generation_failed,
    publish_generation_progress,
    WEBSOCKET_CHANNEL,
)

__all__ = [
    "websocket_manager",
    "publish_event",
    "publish_generation_complete",
    "publish_generation_failed",
    "publish_generation_progress",
    "WEBSOCKET_CHANNEL",
]
