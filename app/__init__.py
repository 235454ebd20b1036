# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the Artomate web API:
# - main.py: App entry point, middleware setup, error handlers
# - config.py: Environment variable loading and settings
# - auth/: Supabase Auth sign-in flows and JWT verification
# - routers/: API endpoint definitions organized by wizard step
# - websocket/: Live generation progress
#
# The app layer is thin - it handles HTTP concerns and delegates
# business logic to the core/ package.
# =============================================================================

__version__ = "1.0.0"
