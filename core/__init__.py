# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the wizard's business logic:
# - models/: Pydantic schemas for profiles, campaigns, generation, payments
# - services/: Upload validation, campaign lifecycle, review, publish,
#   payments and storage
#
# Routers stay thin and call into these services, which keeps the logic
# testable without an HTTP client.
# =============================================================================
