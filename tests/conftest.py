# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides sample campaign, bundle and profile records
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_123")
os.environ.setdefault("STRIPE_WEBHOOK_SECRET", "whsec_test_123")
os.environ.setdefault("STRIPE_PRICE_PER_CAMPAIGN", "price_campaign_123")
os.environ.setdefault("STRIPE_PRICE_PRO_SUBSCRIPTION", "price_pro_123")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest

USER_ID = "11111111-2222-3333-4444-555555555555"
OTHER_USER_ID = "99999999-8888-7777-6666-555555555555"
CAMPAIGN_ID = "550e8400-e29b-41d4-a716-446655440000"


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def sample_bundle_dict():
    """Generated marketing package as stored in campaigns.generated."""
    return {
        "caption": "Just dropped my latest track \"Summer Vibes\"!",
        "caption_b": "New music alert! \"Summer Vibes\" is finally here.",
        "hashtags": ["#NewMusic", "#ArtistLife", "#CreativeFlow", "#MusicLover", "#IndieArtist"],
        "email": {
            "subject": "Your New Track is Here: \"Summer Vibes\"",
            "body": "Hey there!\n\nI'm so excited to share my latest track with you.",
            "cta_text": "Listen Now",
        },
        "image_prompt": "A vibrant composition with warm golden hour lighting",
        "video_script": "Scene 1: Sunrise over the beach\nScene 2: Waves\n\nScene 3: Logo",
    }


@pytest.fixture
def sample_campaign(sample_bundle_dict):
    """A generated campaign waiting for review."""
    return {
        "id": CAMPAIGN_ID,
        "user_id": USER_ID,
        "title": "Summer Vibes",
        "status": "draft",
        "content_type": "music",
        "theme": "Summer Vibes",
        "source_file": "summer_vibes.mp3",
        "source_file_path": f"campaigns/{CAMPAIGN_ID}/source_summer_vibes.mp3",
        "source_file_size": 4_200_000,
        "engagement": 12,
        "generated": sample_bundle_dict,
        "image_url": "https://test-project.supabase.co/storage/v1/object/public/campaign-assets/image.png",
        "video_url": "https://test-project.supabase.co/storage/v1/object/public/campaign-assets/video.mp4",
        "selected_caption": "A",
        "generation_error": None,
        "task_id": "task-123",
        "created_at": "2024-06-01T10:00:00Z",
        "updated_at": "2024-06-01T10:05:00Z",
        "published_at": None,
    }


@pytest.fixture
def draft_campaign(sample_campaign):
    """An uploaded campaign that hasn't been generated yet."""
    return {
        **sample_campaign,
        "generated": None,
        "image_url": None,
        "video_url": None,
        "task_id": None,
    }


@pytest.fixture
def free_profile():
    return {
        "id": USER_ID,
        "email": "ada@example.com",
        "display_name": "Ada Lovelace",
        "avatar_url": "https://api.dicebear.com/7.x/initials/svg?seed=AL",
        "subscription_status": "free",
        "stripe_customer_id": None,
        "stripe_subscription_id": None,
    }


@pytest.fixture
def pro_profile(free_profile):
    return {
        **free_profile,
        "subscription_status": "pro",
        "stripe_customer_id": "cus_123",
        "stripe_subscription_id": "sub_123",
    }
