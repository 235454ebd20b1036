# =============================================================================
# workers/config.py - Celery Worker Configuration
# =============================================================================
# Applied with app.config_from_object(). Broker and backend URLs come from
# settings in workers/celery_app.py.
# =============================================================================


class CeleryConfig:
    """Celery settings for the generation worker."""

    # A crashed worker leaves the task on the queue instead of losing it
    task_acks_late = True
    worker_prefetch_multiplier = 1

    # STARTED is reported to GET /tasks/{task_id} and the generation view
    task_track_started = True

    # Progress meta only needs to outlive the wizard session
    result_expires = 3600

    # Video rendering is the slow stage; the soft limit leaves time to mark
    # the campaign failed
    task_time_limit = 600
    task_soft_time_limit = 540

    task_serializer = "json"
    result_serializer = "json"
    accept_content = ["json"]

    task_default_queue = "generation"

    timezone = "UTC"
    enable_utc = True
