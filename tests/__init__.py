# =============================================================================
# tests/ - Test Suite
# =============================================================================
# Tests for the Artomate API, one module per concern:
# - test_models.py: Pydantic model validation
# - test_upload.py: Upload step rules
# - test_content_writer.py: Content writer, image generator and mock agents (mocked OpenAI)
# - test_video_assembler.py: Frame math, rendering and the ffmpeg command
# - test_pipeline.py / test_generation.py: Pipeline stages and the wizard view
# - test_review.py / test_publish.py: Caption toggling and publish gating
# - test_payment_service.py: Stripe checkout and fulfilment (mocked Stripe)
# - test_auth.py / test_profile_service.py: Sign-in errors, JWTs, profiles
# - test_api.py: Routes through FastAPI's TestClient
# - test_websocket.py: Live progress socket handshake and fan-out
#
# Run tests with: pytest
# =============================================================================
