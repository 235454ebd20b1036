# =============================================================================
# workers/celery_app.py - Celery Application
# =============================================================================
# The broker and result backend are both the Redis instance from
# settings.REDIS_URL. The API process imports celery_app to queue tasks and
# read their state; the worker process runs workers.tasks.
#
# Usage:
#   celery -A workers.celery_app worker --loglevel=info -Q generation
# =============================================================================

import logging

from celery import Celery
from celery.signals import task_failure, task_postrun, task_prerun
from dotenv import load_dotenv

# Worker processes don't go through app.main, so pick up .env here
load_dotenv()

from app.config import settings  # noqa: E402

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def _redacted(url: str) -> str:
    """Broker URL without credentials, for logs."""
    return url.split("@")[-1] if "@" in url else url


def create_celery_app() -> Celery:
    """Build the Celery app from settings and workers.config."""
    app = Celery(
        "artomate_worker",
        broker=settings.REDIS_URL,
        backend=settings.REDIS_URL,
        include=["workers.tasks"],
    )
    app.config_from_object("workers.config:CeleryConfig")

    logger.info(f"Celery app created with broker: {_redacted(settings.REDIS_URL)}")
    return app


celery_app = create_celery_app()


# =============================================================================
# Task Lifecycle Logging
# =============================================================================

@task_prerun.connect
def log_task_start(sender=None, task_id=None, task=None, args=None, **extra):
    campaign_id = args[0] if args else None
    logger.info(f"Task started: {task.name} [{task_id}] campaign={campaign_id}")


@task_postrun.connect
def log_task_done(sender=None, task_id=None, task=None, state=None, **extra):
    logger.info(f"Task finished: {task.name} [{task_id}] state={state}")


@task_failure.connect
def log_task_failure(sender=None, task_id=None, exception=None, **extra):
    logger.error(f"Task failed: {sender.name} [{task_id}] error={exception}")
