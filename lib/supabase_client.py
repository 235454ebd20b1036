# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and provides specialized methods for the three Artomate tables:
# - users: creator profiles (display name, avatar, subscription tier)
# - campaigns: uploaded source files and their generated marketing package
# - payments: records of fulfilled Stripe checkouts
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   campaign = SupabaseClient.fetch_campaign(campaign_id)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings
from lib.utils import normalize_uuid, utc_now_iso

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST code for "no rows returned" from .single()
NOT_FOUND_CODE = "PGRST116"
# Postgres unique_violation
UNIQUE_VIOLATION = "23505"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Carries a code and a suggestion so callers can tell the user how to
    fix the problem, not only what failed.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        profile = SupabaseClient.fetch_user_profile(user_id)
        campaigns = SupabaseClient.list_campaigns(user_id, status="draft")
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations; every method that
        touches a user's rows filters by user_id itself.

        Returns:
            Client: Supabase client instance

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def create_anon_client(cls) -> Client:
        """
        Create a fresh client with the anon key.

        Sign-in and sign-up store the resulting session on the client, so
        each auth call gets its own instance instead of the shared one.
        """
        try:
            return create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to create Supabase auth client: {e}",
                code="CLIENT_INIT_FAILED",
                suggestion="Check SUPABASE_URL and SUPABASE_ANON_KEY in your .env file"
            )

    @classmethod
    def _fetch_single(
        cls,
        table: str,
        column: str,
        value: str | UUID,
        code: str,
    ) -> dict[str, Any] | None:
        """Fetch one row by column value, returning None when no row matches."""
        client = cls.get_client()
        value_str = normalize_uuid(value)

        try:
            response = (
                client.table(table)
                .select("*")
                .eq(column, value_str)
                .single()
                .execute()
            )
            return response.data

        except Exception as e:
            if NOT_FOUND_CODE in str(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch from {table}: {e}",
                code=code,
                suggestion=f"Check that the {table} table exists and is accessible",
                details={column: value_str}
            )

    # -------------------------------------------------------------------------
    # User Profiles
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_user_profile(cls, user_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch a user profile by ID.

        Returns:
            Profile dict, or None if the user has no profile yet
        """
        return cls._fetch_single("users", "id", user_id, "FETCH_PROFILE_FAILED")

    @classmethod
    def fetch_user_by_customer(cls, customer_id: str) -> dict[str, Any] | None:
        """Fetch the profile linked to a Stripe customer ID."""
        return cls._fetch_single(
            "users", "stripe_customer_id", customer_id, "FETCH_PROFILE_FAILED"
        )

    @classmethod
    def insert_user_profile(cls, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a new user profile.

        Args:
            data: Profile columns (must include id and email)

        Returns:
            Inserted profile dict

        Raises:
            SupabaseClientError: If insert fails
        """
        return cls._insert("users", data, "INSERT_PROFILE_FAILED")

    @classmethod
    def update_user_profile(
        cls,
        user_id: str | UUID,
        updates: dict[str, Any],
    ) -> dict[str, Any] | None:
        """
        Update a user profile. updated_at is always refreshed.

        Returns:
            Updated profile dict, or None if no profile matched
        """
        return cls._update("users", "id", user_id, updates, "UPDATE_PROFILE_FAILED")

    # -------------------------------------------------------------------------
    # Campaigns
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_campaign(cls, campaign_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch a campaign by ID.

        Returns:
            Campaign dict with all fields, or None if not found
        """
        return cls._fetch_single("campaigns", "id", campaign_id, "FETCH_CAMPAIGN_FAILED")

    @classmethod
    def list_campaigns(
        cls,
        user_id: str | UUID,
        status: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        List a user's campaigns, newest first.

        Args:
            user_id: Owner UUID
            status: Optional status filter (draft, processing, published, failed)
            limit: Page size
            offset: Rows to skip

        Returns:
            Tuple of (campaign dicts, total matching count)

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        user_id_str = normalize_uuid(user_id)

        try:
            query = (
                client.table("campaigns")
                .select("*", count="exact")
                .eq("user_id", user_id_str)
            )
            if status:
                query = query.eq("status", status)

            response = (
                query
                .order("created_at", desc=True)
                .range(offset, offset + limit - 1)
                .execute()
            )

            campaigns = response.data or []
            total = response.count if response.count is not None else len(campaigns)
            logger.debug(f"Fetched {len(campaigns)} campaigns for user {user_id_str}")
            return campaigns, total

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to list campaigns: {e}",
                code="LIST_CAMPAIGNS_FAILED",
                suggestion="Check that the campaigns table is accessible",
                details={"user_id": user_id_str, "status": status}
            )

    @classmethod
    def fetch_campaign_stats(cls, user_id: str | UUID) -> list[dict[str, Any]]:
        """
        Fetch the status and engagement of every campaign a user owns.

        Only the two columns the dashboard totals need are selected.
        """
        client = cls.get_client()
        user_id_str = normalize_uuid(user_id)

        try:
            response = (
                client.table("campaigns")
                .select("status, engagement")
                .eq("user_id", user_id_str)
                .execute()
            )
            return response.data or []

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch campaign stats: {e}",
                code="FETCH_STATS_FAILED",
                details={"user_id": user_id_str}
            )

    @classmethod
    def insert_campaign(cls, data: dict[str, Any]) -> dict[str, Any]:
        """Insert a new campaign and return it with generated id and timestamps."""
        return cls._insert("campaigns", data, "INSERT_CAMPAIGN_FAILED")

    @classmethod
    def update_campaign(
        cls,
        campaign_id: str | UUID,
        updates: dict[str, Any],
    ) -> dict[str, Any] | None:
        """Update a campaign. updated_at is always refreshed."""
        return cls._update("campaigns", "id", campaign_id, updates, "UPDATE_CAMPAIGN_FAILED")

    @classmethod
    def delete_campaign(cls, campaign_id: str | UUID) -> bool:
        """
        Delete a campaign row.

        Returns:
            True if a row was deleted
        """
        client = cls.get_client()
        campaign_id_str = normalize_uuid(campaign_id)

        try:
            response = (
                client.table("campaigns")
                .delete()
                .eq("id", campaign_id_str)
                .execute()
            )
            return bool(response.data)

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to delete campaign: {e}",
                code="DELETE_CAMPAIGN_FAILED",
                details={"campaign_id": campaign_id_str}
            )

    # -------------------------------------------------------------------------
    # Payments
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_payment_by_session(cls, stripe_session_id: str) -> dict[str, Any] | None:
        """Fetch the payment record written for a Stripe checkout session."""
        return cls._fetch_single(
            "payments", "stripe_session_id", stripe_session_id, "FETCH_PAYMENT_FAILED"
        )

    @classmethod
    def insert_payment(cls, data: dict[str, Any]) -> dict[str, Any] | None:
        """
        Insert a payment record.

        Returns None when a row for the same stripe_session_id already exists
        (the column is unique), so concurrent fulfilments record one payment.
        """
        try:
            return cls._insert("payments", data, "INSERT_PAYMENT_FAILED")
        except SupabaseClientError as e:
            if e.details.get("pg_code") == UNIQUE_VIOLATION:
                return None
            raise

    @classmethod
    def list_payments(cls, user_id: str | UUID, limit: int = 50) -> list[dict[str, Any]]:
        """List a user's payment records, newest first."""
        client = cls.get_client()
        user_id_str = normalize_uuid(user_id)

        try:
            response = (
                client.table("payments")
                .select("*")
                .eq("user_id", user_id_str)
                .order("created_at", desc=True)
                .limit(limit)
                .execute()
            )
            return response.data or []

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to list payments: {e}",
                code="LIST_PAYMENTS_FAILED",
                details={"user_id": user_id_str}
            )

    # -------------------------------------------------------------------------
    # Write Helpers
    # -------------------------------------------------------------------------

    @classmethod
    def _insert(cls, table: str, data: dict[str, Any], code: str) -> dict[str, Any]:
        client = cls.get_client()

        try:
            response = (
                client.table(table)
                .insert(data)
                .execute()
            )

            if response.data:
                return response.data[0]
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA",
                details={"table": table}
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert into {table}: {e}",
                code=code,
                details={"table": table, "pg_code": getattr(e, "code", None)}
            )

    @classmethod
    def _update(
        cls,
        table: str,
        column: str,
        value: str | UUID,
        updates: dict[str, Any],
        code: str,
    ) -> dict[str, Any] | None:
        client = cls.get_client()
        value_str = normalize_uuid(value)
        data = {**updates, "updated_at": utc_now_iso()}

        try:
            response = (
                client.table(table)
                .update(data)
                .eq(column, value_str)
                .execute()
            )
            return response.data[0] if response.data else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update {table}: {e}",
                code=code,
                details={column: value_str, "fields": list(updates.keys())}
            )
