# =============================================================================
# app/websocket/broadcast.py - Cross-Process Broadcasting
# =============================================================================
# Provides utilities for Celery workers to publish events that get broadcast
# to WebSocket clients.
#
# Uses Redis pub/sub for cross-process communication:
# - Workers call publish_event() to send events
# - FastAPI subscribes and broadcasts to WebSocket clients
#
# Events:
#   - generation_progress: a pipeline stage started or finished
#   - generation_complete: the marketing package is ready for review
#   - generation_failed: a stage failed; the client shows retry/back
# =============================================================================

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)

# Redis channel for WebSocket events
WEBSOCKET_CHANNEL = "artomate:websocket:events"

EVENT_PROGRESS = "generation_progress"
EVENT_COMPLETE = "generation_complete"
EVENT_FAILED = "generation_failed"


def get_redis_client():
    """Get a Redis client for pub/sub operations."""
    import redis
    from app.config import settings
    return redis.from_url(settings.REDIS_URL)


def publish_event(campaign_id: str, event_type: str, data: dict[str, Any]) -> bool:
    """
    Publish an event that will be broadcast to WebSocket clients.

    This is called from Celery workers to notify the WebSocket server
    of events that should be broadcast to connected clients.

    Args:
        campaign_id: The campaign to broadcast to
        event_type: Event type (generation_progress, generation_complete, generation_failed)
        data: Event data to include

    Returns:
        bool: True if published successfully
    """
    try:
        client = get_redis_client()

        message = json.dumps({
            "campaign_id": campaign_id,
            "type": event_type,
            **data
        })

        client.publish(WEBSOCKET_CHANNEL, message)

        logger.debug(f"Published {event_type} event for campaign {campaign_id}")
        return True

    except Exception as e:
        # Progress events are best effort; clients can still poll
        logger.error(f"Failed to publish event: {e}")
        return False


def publish_generation_progress(
    campaign_id: str,
    task_id: str,
    stage: str,
    progress: int,
    message: str,
) -> bool:
    return publish_event(
        campaign_id=campaign_id,
        event_type=EVENT_PROGRESS,
        data={
            "task_id": task_id,
            "stage": stage,
            "progress": progress,
            "message": message,
        }
    )


def publish_generation_complete(
    campaign_id: str,
    task_id: str,
    result: dict[str, Any],
) -> bool:
    """
    Publish a generation_complete event.

    Called when the worker has stored the bundle and both assets.
    """
    return publish_event(
        campaign_id=campaign_id,
        event_type=EVENT_COMPLETE,
        data={
            "task_id": task_id,
            "status": "SUCCESS",
            "result": result,
        }
    )


def publish_generation_failed(
    campaign_id: str,
    task_id: str,
    stage: str | None,
    error: str,
) -> bool:
    """
    Publish a generation_failed event.

    Called when any pipeline stage fails.
    """
    return publish_event(
        campaign_id=campaign_id,
        event_type=EVENT_FAILED,
        data={
            "task_id": task_id,
            "status": "FAILURE",
            "stage": stage,
            "error": error,
            "can_retry": True,
            "can_go_back": True,
        }
    )
