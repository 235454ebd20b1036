# =============================================================================
# tests/test_review.py - Review Step Tests
# =============================================================================
# Caption A/B preview. Toggling the variant only changes what is displayed;
# the stored bundle stays as generated.
# =============================================================================

import copy

import pytest

from app.exceptions import CampaignNotReadyError
from core.models.campaign import CaptionVariant
from core.services.review_service import build_preview, load_bundle, toggle_variant


class TestBuildPreview:

    def test_defaults_to_stored_selection(self, sample_campaign, sample_bundle_dict):
        preview = build_preview(sample_campaign)

        assert preview.selected_caption == CaptionVariant.A
        assert preview.displayed_caption == sample_bundle_dict["caption"]

    def test_variant_b(self, sample_campaign, sample_bundle_dict):
        preview = build_preview(sample_campaign, "B")

        assert preview.selected_caption == CaptionVariant.B
        assert preview.displayed_caption == sample_bundle_dict["caption_b"]

    def test_stored_b_selection(self, sample_campaign, sample_bundle_dict):
        sample_campaign["selected_caption"] = "B"

        assert build_preview(sample_campaign).displayed_caption == sample_bundle_dict["caption_b"]

    def test_everything_else_unchanged(self, sample_campaign):
        a = build_preview(sample_campaign, CaptionVariant.A)
        b = build_preview(sample_campaign, CaptionVariant.B)

        assert a.hashtags == b.hashtags
        assert a.email == b.email
        assert a.video_script == b.video_script
        assert a.image_url == b.image_url == sample_campaign["image_url"]
        assert a.video_url == b.video_url

    def test_bundle_never_modified(self, sample_campaign):
        before = copy.deepcopy(sample_campaign["generated"])

        build_preview(sample_campaign, "B")
        build_preview(sample_campaign, "A")

        assert sample_campaign["generated"] == before

    def test_not_generated(self, draft_campaign):
        with pytest.raises(CampaignNotReadyError) as exc_info:
            build_preview(draft_campaign)

        assert exc_info.value.status_code == 409

    def test_invalid_variant(self, sample_campaign):
        with pytest.raises(ValueError):
            build_preview(sample_campaign, "C")


class TestToggle:

    def test_a_to_b(self):
        assert toggle_variant("A") == CaptionVariant.B

    def test_b_to_a(self):
        assert toggle_variant(CaptionVariant.B) == CaptionVariant.A


class TestLoadBundle:

    def test_parses_stored_bundle(self, sample_campaign):
        bundle = load_bundle(sample_campaign)

        assert len(bundle.hashtags) == 5
        assert bundle.email.cta_text == "Listen Now"
