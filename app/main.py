# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Artomate API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import asyncio
import json
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import settings
from app.websocket import websocket_manager, WEBSOCKET_CHANNEL
from app.exceptions import ArtomateException, artomate_exception_handler
from app.routers import health, upload, generation, campaigns, payments, dashboard, tasks
from app.auth import routes as auth_routes
from app.websocket import routes as websocket_routes
from lib.supabase_client import SupabaseClientError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# Global flag for Redis listener task
_redis_listener_task = None
_shutdown_event = None


async def redis_pubsub_listener():
    """
    Background task that listens to Redis pub/sub and broadcasts to WebSockets.

    Celery workers publish generation events to WEBSOCKET_CHANNEL; this
    forwards each one to the clients watching that campaign.
    """
    import redis.asyncio as aioredis

    logger.info("Starting Redis pub/sub listener for WebSocket broadcasts")

    redis_client = aioredis.from_url(settings.REDIS_URL)
    pubsub = redis_client.pubsub()

    try:
        await pubsub.subscribe(WEBSOCKET_CHANNEL)

        async for message in pubsub.listen():
            if _shutdown_event and _shutdown_event.is_set():
                break

            if message["type"] != "message":
                continue

            try:
                data = json.loads(message["data"])
            except json.JSONDecodeError as e:
                logger.warning(f"Invalid JSON in Redis message: {e}")
                continue

            campaign_id = data.pop("campaign_id", None)
            if campaign_id:
                await websocket_manager.broadcast(campaign_id, data)
                logger.debug(f"Broadcast {data.get('type')} to campaign {campaign_id}")

    except asyncio.CancelledError:
        logger.info("Redis pub/sub listener cancelled")
    except Exception as e:
        # Live updates are optional; clients fall back to polling
        logger.error(f"Redis pub/sub listener error: {e}")
    finally:
        try:
            await pubsub.unsubscribe(WEBSOCKET_CHANNEL)
            await redis_client.aclose()
        except Exception as e:
            logger.debug(f"Redis listener cleanup failed: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - Startup: log config, start the Redis listener
    - Shutdown: stop the Redis listener
    """
    global _redis_listener_task, _shutdown_event

    logger.info(f"Starting Artomate API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    if settings.USE_MOCK_GENERATION:
        logger.info("Mock generation enabled, OpenAI will not be called")
    if not settings.stripe_enabled:
        logger.warning("Stripe is not configured, checkout endpoints will return 503")

    _shutdown_event = asyncio.Event()
    _redis_listener_task = asyncio.create_task(redis_pubsub_listener())

    yield

    logger.info("Shutting down Artomate API")

    if _shutdown_event:
        _shutdown_event.set()
    if _redis_listener_task:
        _redis_listener_task.cancel()
        try:
            await _redis_listener_task
        except asyncio.CancelledError:
            pass


# Create FastAPI application
app = FastAPI(
    title="Artomate API",
    description="""
## AI Content Marketing for Creators

Upload a song, video or book and get a ready-to-post marketing package.

### Wizard

1. **Upload** - Pick a content type, enter a theme, choose a source file
2. **Generate** - Captions A/B, 5 hashtags, email copy, an image and a 15 s vertical video
3. **Review** - Compare caption variants and preview the assets
4. **Publish** - Paid tiers publish directly; free creators pick a plan and pay with Stripe

### Quick Start

```bash
# 1. Upload
curl -X POST http://localhost:8000/api/v1/campaigns/upload \\
  -H "Authorization: Bearer $TOKEN" \\
  -F "content_type=music" -F "theme=Summer vibes" -F "file=@track.mp3"

# 2. Generate
curl -X POST http://localhost:8000/api/v1/campaigns/{id}/generate -H "Authorization: Bearer $TOKEN"

# 3. Review
curl http://localhost:8000/api/v1/campaigns/{id}/preview?caption=B -H "Authorization: Bearer $TOKEN"

# 4. Publish
curl -X POST http://localhost:8000/api/v1/campaigns/{id}/publish -H "Authorization: Bearer $TOKEN"
```
""",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Sign-up, sign-in, password reset and profile"},
        {"name": "Upload", "description": "Content types and source file upload"},
        {"name": "Generation", "description": "Start generation and track progress"},
        {"name": "Campaigns", "description": "List, review, publish and discard campaigns"},
        {"name": "Payments", "description": "Plans, Stripe Checkout and subscriptions"},
        {"name": "Dashboard", "description": "Campaign totals and recent activity"},
        {"name": "Tasks", "description": "Track async task progress"},
        {"name": "WebSocket", "description": "Real-time generation updates"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(ArtomateException)
async def handle_artomate_exception(request: Request, exc: ArtomateException):
    """Handle custom Artomate exceptions."""
    return await artomate_exception_handler(request, exc)


@app.exception_handler(SupabaseClientError)
async def handle_supabase_error(request: Request, exc: SupabaseClientError):
    """Database or storage call failed."""
    logger.error(f"Supabase error on {request.url.path}: {exc}")
    content = {"detail": exc.message, "code": exc.code}
    if exc.suggestion:
        content["suggestion"] = exc.suggestion
    return JSONResponse(status_code=502, content=content)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

API_PREFIX = "/api/v1"

app.include_router(auth_routes.router, prefix=API_PREFIX)
app.include_router(health.router, prefix=API_PREFIX)
app.include_router(upload.router, prefix=API_PREFIX)
app.include_router(generation.router, prefix=API_PREFIX)
app.include_router(campaigns.router, prefix=API_PREFIX)
app.include_router(payments.router, prefix=API_PREFIX)
app.include_router(dashboard.router, prefix=API_PREFIX)
app.include_router(tasks.router, prefix=API_PREFIX)

# WebSocket endpoints (Real-time updates)
app.include_router(websocket_routes.router, tags=["WebSocket"])


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """Root endpoint - returns API info."""
    return {
        "name": "Artomate API",
        "version": __version__,
        "docs": "/docs",
        "health": f"{API_PREFIX}/health",
    }
