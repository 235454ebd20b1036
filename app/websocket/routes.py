# =============================================================================
# app/websocket/routes.py - WebSocket Routes
# =============================================================================
# Live generation progress for a campaign.
#
# Connect: ws://host/ws/campaigns/{campaign_id}?token={jwt}
#
# Events:
#   - {"type": "generation_progress", "stage": "image", "progress": 60, ...}
#   - {"type": "generation_complete", "task_id": "...", "result": {...}}
#   - {"type": "generation_failed", "error": "...", "can_retry": true, ...}
# =============================================================================

import logging

from fastapi import APIRouter, HTTPException, Query, WebSocket, WebSocketDisconnect

from app.auth.dependencies import decode_access_token
from app.websocket.manager import websocket_manager
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)

router = APIRouter()

# Close codes
CLOSE_INVALID_TOKEN = 4001
CLOSE_FORBIDDEN = 4003
CLOSE_NOT_FOUND = 4004
CLOSE_SERVER_ERROR = 4000


@router.websocket("/ws/campaigns/{campaign_id}")
async def campaign_websocket(
    websocket: WebSocket,
    campaign_id: str,
    token: str = Query(..., description="JWT token for authentication")
):
    """
    Stream generation events for a campaign.

    The caller must own the campaign. Sending "ping" gets "pong" back.
    """
    # 1. Verify JWT token
    try:
        user = decode_access_token(token)
    except HTTPException as e:
        logger.warning(f"WebSocket auth failed: {e.detail}")
        await websocket.close(code=CLOSE_INVALID_TOKEN, reason=str(e.detail))
        return

    # 2. Verify user owns this campaign
    try:
        campaign = SupabaseClient.fetch_campaign(campaign_id)
    except SupabaseClientError as e:
        logger.error(f"WebSocket: error fetching campaign: {e}")
        await websocket.close(code=CLOSE_SERVER_ERROR, reason="Server error")
        return

    if not campaign:
        logger.warning(f"WebSocket: campaign {campaign_id} not found")
        await websocket.close(code=CLOSE_NOT_FOUND, reason="Campaign not found")
        return

    if str(campaign.get("user_id")) != str(user.id):
        logger.warning(
            f"WebSocket access denied: user {user.id} "
            f"tried to watch campaign owned by {campaign.get('user_id')}"
        )
        await websocket.close(code=CLOSE_FORBIDDEN, reason="Access denied")
        return

    # 3. Accept connection and add to manager
    await websocket_manager.connect(campaign_id, websocket)

    try:
        await websocket.send_json({
            "type": "connected",
            "campaign_id": campaign_id,
            "status": campaign.get("status"),
            "message": "Connected to generation updates"
        })

        while True:
            data = await websocket.receive_text()
            if data == "ping":
                await websocket.send_text("pong")
            else:
                logger.debug(f"WebSocket received: {data[:100]}")

    except WebSocketDisconnect:
        logger.info(f"WebSocket client disconnected from campaign {campaign_id}")
    finally:
        websocket_manager.disconnect(campaign_id, websocket)
