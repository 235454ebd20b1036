# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .campaign_service import CampaignService
from .generation_service import GenerationService
from .payment_service import PaymentError, PaymentService
from .profile_service import ProfileService
from .publish_service import PublishService
from .storage_service import StorageService

__all__ = [
    "CampaignService",
    "GenerationService",
    "PaymentError",
    "PaymentService",
    "ProfileService",
    "PublishService",
    "StorageService",
]
