# =============================================================================
# app/routers/tasks.py - Task Status Endpoints
# =============================================================================
# Raw Celery task status, for clients that poll a task ID directly instead
# of GET /campaigns/{id}/generation.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Path, HTTPException
from pydantic import BaseModel

from app.dependencies import CurrentUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["Tasks"])


# =============================================================================
# Response Models
# =============================================================================

class TaskStatusResponse(BaseModel):
    """Response model for task status."""
    task_id: str
    status: str
    progress: int | None = None
    stage: str | None = None
    message: str | None = None
    result: dict | None = None
    error: str | None = None


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/{task_id}", response_model=TaskStatusResponse)
async def get_task_status(
    task_id: Annotated[str, Path(description="Celery task ID")],
    user: CurrentUser,
):
    """
    Get the status of a background task.

    - PENDING: waiting in queue
    - STARTED: picked up by a worker
    - PROGRESS: running, with progress percentage and generation stage
    - SUCCESS: finished, with the task result
    - FAILURE: failed, with the error message
    """
    try:
        from workers.celery_app import celery_app

        result = celery_app.AsyncResult(task_id)

        response = TaskStatusResponse(
            task_id=task_id,
            status=result.status,
        )

        if result.status == "PROGRESS":
            info = result.info or {}
            response.progress = info.get("percent", 0)
            response.stage = info.get("stage")
            response.message = info.get("message", "Processing...")

        elif result.status == "SUCCESS":
            response.result = result.result
            response.progress = 100
            response.message = "Complete"

        elif result.status == "FAILURE":
            response.error = str(result.result) if result.result else "Unknown error"
            response.message = "Failed"

        elif result.status == "PENDING":
            response.progress = 0
            response.message = "Waiting in queue..."

        elif result.status == "STARTED":
            response.progress = 0
            response.message = "Starting..."

        return response

    except Exception as e:
        logger.error(f"Error getting task status: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to get task status: {e}")
