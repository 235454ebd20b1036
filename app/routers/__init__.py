# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# FastAPI routers organized by wizard step:
# - health.py: Health check endpoints
# - upload.py: Content types and source upload (step 1)
# - generation.py: Start generation and poll its progress (step 2)
# - campaigns.py: Listing, review, publish, draft and discard (steps 3-4)
# - payments.py: Plans, Stripe Checkout, webhook, subscription management
# - dashboard.py: Totals and recent campaigns
# - tasks.py: Raw background task status
#
# Each router is mounted in main.py under /api/v1.
# =============================================================================

from . import health
from . import upload
from . import generation
from . import campaigns
from . import payments
from . import dashboard
from . import tasks

__all__ = [
    "health",
    "upload",
    "generation",
    "campaigns",
    "payments",
    "dashboard",
    "tasks",
]
