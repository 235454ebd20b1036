# =============================================================================
# workers/ - Celery Background Task Workers
# =============================================================================
# This package contains the Celery configuration and task definitions for
# background generation of campaign content.
#
# Components:
# - celery_app.py: Celery application configuration
# - tasks.py: Task definitions (campaign generation)
# - config.py: Worker-specific settings
#
# Usage:
#   # Start worker
#   celery -A workers.celery_app worker --loglevel=info -Q generation
#
#   # Or use the script
#   python scripts/start_worker.py
#
#   # Submit task (from API)
#   from workers.tasks import generate_campaign_content
#   result = generate_campaign_content.delay(campaign_id, user_id)
# =============================================================================

from .celery_app import celery_app
from . import tasks

__all__ = [
    "celery_app",
    "tasks",
]
