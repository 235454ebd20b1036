# =============================================================================
# core/services/review_service.py - Review Step
# =============================================================================
# Builds the preview of a generated campaign. Switching between caption A
# and caption B changes which text is displayed; the generated bundle is
# never modified.
# =============================================================================

from typing import Any

from app.exceptions import CampaignNotReadyError
from core.models.campaign import CaptionVariant
from core.models.generation import GenerationBundle, PreviewResponse


def load_bundle(campaign: dict[str, Any]) -> GenerationBundle:
    """
    Parse the stored bundle of a campaign.

    Raises:
        CampaignNotReadyError: If the campaign has not been generated yet
    """
    generated = campaign.get("generated")
    if not generated:
        raise CampaignNotReadyError(str(campaign.get("id")), campaign.get("status"))
    return GenerationBundle.model_validate(generated)


def build_preview(
    campaign: dict[str, Any],
    variant: CaptionVariant | str | None = None,
) -> PreviewResponse:
    """
    Build the review view.

    Args:
        campaign: Campaign record with a generated bundle
        variant: Caption to display; defaults to the stored selection

    Returns:
        PreviewResponse whose displayed_caption matches the variant
    """
    bundle = load_bundle(campaign)
    selected = CaptionVariant(variant or campaign.get("selected_caption") or CaptionVariant.A)

    return PreviewResponse(
        campaign_id=str(campaign["id"]),
        title=campaign.get("title") or campaign.get("theme", ""),
        content_type=campaign["content_type"],
        theme=campaign.get("theme", ""),
        status=campaign.get("status", ""),
        selected_caption=selected,
        displayed_caption=bundle.caption_for(selected),
        bundle=bundle,
        hashtags=bundle.hashtags,
        email=bundle.email,
        video_script=bundle.video_script,
        image_url=campaign.get("image_url"),
        video_url=campaign.get("video_url"),
    )


def toggle_variant(variant: CaptionVariant | str) -> CaptionVariant:
    """The other caption variant."""
    return CaptionVariant.A if CaptionVariant(variant) == CaptionVariant.B else CaptionVariant.B
