# =============================================================================
# tests/test_payment_service.py - Stripe Payment Tests
# =============================================================================
# Checkout creation, fulfilment (idempotent per session), webhooks and
# subscription management. Stripe and Supabase are mocked; the real Stripe
# exception classes are kept so except clauses behave.
# =============================================================================

import hashlib
import hmac
import json
import time
from unittest.mock import MagicMock, patch

import pytest
import stripe

from app.exceptions import CheckoutError, PaymentConfigurationError
from core.models.payment import PlanId
from core.models.profile import SubscriptionStatus
from core.services.payment_service import PaymentError, PaymentService
from lib.supabase_client import SupabaseClient, SupabaseClientError
from tests.conftest import CAMPAIGN_ID, OTHER_USER_ID, USER_ID


@pytest.fixture
def mock_stripe():
    with patch("core.services.payment_service.stripe") as mocked:
        mocked.StripeError = stripe.StripeError
        mocked.SignatureVerificationError = stripe.SignatureVerificationError
        yield mocked


@pytest.fixture
def mock_backends():
    with patch("core.services.payment_service.SupabaseClient") as supabase, \
            patch("core.services.payment_service.ProfileService") as profiles, \
            patch("core.services.payment_service.CampaignService") as campaigns:
        supabase.fetch_payment_by_session.return_value = None
        yield {"supabase": supabase, "profiles": profiles, "campaigns": campaigns}


def _session_values(plan="per-campaign", campaign_id=CAMPAIGN_ID, user_id=USER_ID, **overrides):
    metadata = {"user_id": user_id, "plan": plan, "campaign_theme": "Summer Vibes"}
    if campaign_id:
        metadata["campaign_id"] = campaign_id
    session = {
        "id": "cs_test_1",
        "metadata": metadata,
        "payment_status": "paid",
        "status": "complete",
        "customer": "cus_123",
        "subscription": "sub_123" if plan == "pro-subscription" else None,
        "amount_total": 200,
        "currency": "usd",
    }
    session.update(overrides)
    return session


def _session(**kwargs):
    """A Checkout Session as the Stripe library returns it (not a dict)."""
    return stripe.checkout.Session.construct_from(_session_values(**kwargs), "sk_test_123")


def _event(event_type, obj):
    return stripe.Event.construct_from(
        {"id": "evt_1", "object": "event", "type": event_type, "data": {"object": obj}},
        "sk_test_123",
    )


# =============================================================================
# Checkout
# =============================================================================

class TestCreateCheckout:

    def test_per_campaign_session(self, mock_stripe, sample_campaign):
        mock_stripe.checkout.Session.create.return_value = MagicMock(
            id="cs_test_1", url="https://checkout.stripe.com/cs_test_1"
        )

        result = PaymentService.create_checkout(
            PlanId.PER_CAMPAIGN, USER_ID, "ada@example.com", sample_campaign
        )

        assert result == {"session_id": "cs_test_1", "url": "https://checkout.stripe.com/cs_test_1"}
        params = mock_stripe.checkout.Session.create.call_args.kwargs
        assert params["mode"] == "payment"
        assert params["line_items"] == [{"price": "price_campaign_123", "quantity": 1}]
        assert params["metadata"]["campaign_id"] == CAMPAIGN_ID
        assert params["metadata"]["plan"] == "per-campaign"
        assert params["customer_email"] == "ada@example.com"
        assert "subscription_data" not in params

    def test_subscription_session(self, mock_stripe):
        mock_stripe.checkout.Session.create.return_value = MagicMock(id="cs_2", url="u")

        PaymentService.create_checkout(PlanId.PRO_SUBSCRIPTION, USER_ID, None)

        params = mock_stripe.checkout.Session.create.call_args.kwargs
        assert params["mode"] == "subscription"
        assert params["line_items"][0]["price"] == "price_pro_123"
        assert params["subscription_data"]["metadata"]["user_id"] == USER_ID
        assert "customer_email" not in params

    def test_per_campaign_needs_campaign(self, mock_stripe):
        with pytest.raises(CheckoutError):
            PaymentService.create_checkout(PlanId.PER_CAMPAIGN, USER_ID, None)

        mock_stripe.checkout.Session.create.assert_not_called()

    def test_stripe_failure(self, mock_stripe, sample_campaign):
        mock_stripe.checkout.Session.create.side_effect = stripe.StripeError("card declined")

        with pytest.raises(PaymentError) as exc_info:
            PaymentService.create_checkout(PlanId.PER_CAMPAIGN, USER_ID, None, sample_campaign)

        assert exc_info.value.code == "CHECKOUT_CREATE_FAILED"
        assert exc_info.value.suggestion == "Payment failed. Please try again."

    def test_not_configured(self, mock_stripe):
        with patch("core.services.payment_service.settings") as mock_settings:
            mock_settings.stripe_enabled = False

            with pytest.raises(PaymentConfigurationError) as exc_info:
                PaymentService.create_checkout(PlanId.PRO_SUBSCRIPTION, USER_ID, None)

        assert exc_info.value.status_code == 503


class TestConfirmCheckout:

    def test_other_users_session_forbidden(self, mock_stripe, mock_backends):
        mock_stripe.checkout.Session.retrieve.return_value = _session(user_id=OTHER_USER_ID)

        with pytest.raises(CheckoutError) as exc_info:
            PaymentService.confirm_checkout("cs_test_1", USER_ID)

        assert exc_info.value.status_code == 403
        mock_backends["campaigns"].mark_published.assert_not_called()

    def test_confirms_own_session(self, mock_stripe, mock_backends):
        mock_stripe.checkout.Session.retrieve.return_value = _session()

        result = PaymentService.confirm_checkout("cs_test_1", USER_ID)

        assert result["success"] is True
        mock_backends["campaigns"].mark_published.assert_called_once_with(CAMPAIGN_ID)

    def test_retrieve_failure(self, mock_stripe, mock_backends):
        mock_stripe.checkout.Session.retrieve.side_effect = stripe.StripeError("no such session")

        with pytest.raises(PaymentError) as exc_info:
            PaymentService.confirm_checkout("cs_missing", USER_ID)

        assert exc_info.value.code == "CHECKOUT_RETRIEVE_FAILED"


# =============================================================================
# Fulfilment
# =============================================================================

class TestFulfilCheckout:

    def test_per_campaign_publishes(self, mock_backends):
        result = PaymentService.fulfil_checkout(_session())

        assert result["plan"] == PlanId.PER_CAMPAIGN
        assert result["already_processed"] is False
        mock_backends["campaigns"].mark_published.assert_called_once_with(CAMPAIGN_ID)
        mock_backends["profiles"].set_subscription.assert_not_called()
        row = mock_backends["supabase"].insert_payment.call_args.args[0]
        assert row["stripe_session_id"] == "cs_test_1"
        assert row["amount"] == 200
        assert row["description"] == "Campaign Publishing - Summer Vibes"

    def test_subscription_upgrades_profile(self, mock_backends):
        result = PaymentService.fulfil_checkout(
            _session(plan="pro-subscription", campaign_id=None, amount_total=1000)
        )

        assert result["subscription_status"] == "pro"
        mock_backends["profiles"].set_subscription.assert_called_once_with(
            USER_ID,
            SubscriptionStatus.PRO,
            customer_id="cus_123",
            subscription_id="sub_123",
        )
        mock_backends["campaigns"].mark_published.assert_not_called()
        row = mock_backends["supabase"].insert_payment.call_args.args[0]
        assert row["description"] == "Pro Subscription - Monthly"

    def test_subscription_with_campaign_also_publishes(self, mock_backends):
        PaymentService.fulfil_checkout(_session(plan="pro-subscription"))

        mock_backends["campaigns"].mark_published.assert_called_once_with(CAMPAIGN_ID)

    def test_second_fulfilment_is_noop(self, mock_backends):
        mock_backends["supabase"].fetch_payment_by_session.return_value = {"id": "pay_1"}

        result = PaymentService.fulfil_checkout(_session())

        assert result["already_processed"] is True
        mock_backends["campaigns"].mark_published.assert_not_called()
        mock_backends["supabase"].insert_payment.assert_not_called()

    def test_concurrent_fulfilment_records_once(self, mock_backends):
        # The other path inserted between our lookup and our insert
        mock_backends["supabase"].insert_payment.return_value = None

        result = PaymentService.fulfil_checkout(_session())

        assert result["already_processed"] is True
        mock_backends["supabase"].insert_payment.assert_called_once()

    def test_unpaid_session(self, mock_backends):
        with pytest.raises(CheckoutError):
            PaymentService.fulfil_checkout(_session(payment_status="unpaid", status="open"))

        mock_backends["supabase"].insert_payment.assert_not_called()

    def test_unknown_plan(self, mock_backends):
        with pytest.raises(CheckoutError):
            PaymentService.fulfil_checkout(_session(plan="gold"))


# =============================================================================
# Webhook
# =============================================================================

class TestWebhook:

    def test_checkout_completed(self, mock_stripe, mock_backends):
        mock_stripe.Webhook.construct_event.return_value = _event(
            "checkout.session.completed", _session_values()
        )

        result = PaymentService.handle_webhook(b"{}", "t=1,v1=abc")

        assert result == {"received": True, "processed": True}
        mock_stripe.Webhook.construct_event.assert_called_once_with(
            b"{}", "t=1,v1=abc", "whsec_test_123"
        )
        mock_backends["campaigns"].mark_published.assert_called_once_with(CAMPAIGN_ID)

    def test_signed_event_end_to_end(self, mock_backends):
        payload = json.dumps({
            "id": "evt_1",
            "object": "event",
            "type": "checkout.session.completed",
            "data": {"object": {"object": "checkout.session", **_session_values()}},
        })
        timestamp = int(time.time())
        digest = hmac.new(
            b"whsec_test_123", f"{timestamp}.{payload}".encode(), hashlib.sha256
        ).hexdigest()

        result = PaymentService.handle_webhook(payload.encode(), f"t={timestamp},v1={digest}")

        assert result == {"received": True, "processed": True}
        mock_backends["campaigns"].mark_published.assert_called_once_with(CAMPAIGN_ID)
        row = mock_backends["supabase"].insert_payment.call_args.args[0]
        assert row["stripe_session_id"] == "cs_test_1"

    def test_bad_signature(self, mock_stripe, mock_backends):
        mock_stripe.Webhook.construct_event.side_effect = stripe.SignatureVerificationError(
            "bad signature", "t=1,v1=abc"
        )

        with pytest.raises(PaymentError) as exc_info:
            PaymentService.handle_webhook(b"{}", "t=1,v1=abc")

        assert exc_info.value.code == "WEBHOOK_INVALID_SIGNATURE"

    def test_invalid_payload(self, mock_stripe, mock_backends):
        mock_stripe.Webhook.construct_event.side_effect = ValueError("bad json")

        with pytest.raises(PaymentError) as exc_info:
            PaymentService.handle_webhook(b"nope", "sig")

        assert exc_info.value.code == "WEBHOOK_INVALID_PAYLOAD"

    def test_subscription_deleted_by_customer(self, mock_stripe, mock_backends):
        mock_backends["supabase"].fetch_user_by_customer.return_value = {"id": USER_ID}
        mock_stripe.Webhook.construct_event.return_value = _event(
            "customer.subscription.deleted",
            {"id": "sub_123", "object": "subscription", "customer": "cus_123", "metadata": {}},
        )

        PaymentService.handle_webhook(b"{}", "sig")

        mock_backends["supabase"].fetch_user_by_customer.assert_called_once_with("cus_123")
        mock_backends["profiles"].set_subscription.assert_called_once_with(
            USER_ID, SubscriptionStatus.FREE, subscription_id=""
        )

    def test_other_events_ignored(self, mock_stripe, mock_backends):
        mock_stripe.Webhook.construct_event.return_value = _event("invoice.paid", {})

        assert PaymentService.handle_webhook(b"{}", "sig")["processed"] is False


# =============================================================================
# Payment Records
# =============================================================================

class TestInsertPayment:

    def test_duplicate_session_returns_none(self):
        conflict = SupabaseClientError("Insert into payments failed", details={"pg_code": "23505"})
        with patch.object(SupabaseClient, "_insert", side_effect=conflict):
            assert SupabaseClient.insert_payment({"stripe_session_id": "cs_test_1"}) is None

    def test_other_errors_raise(self):
        failure = SupabaseClientError("Insert into payments failed", details={"pg_code": "42501"})
        with patch.object(SupabaseClient, "_insert", side_effect=failure):
            with pytest.raises(SupabaseClientError):
                SupabaseClient.insert_payment({"stripe_session_id": "cs_test_1"})

# =============================================================================
# Subscription Management
# =============================================================================

class TestSubscription:

    def test_summary(self, pro_profile):
        summary = PaymentService.get_subscription(pro_profile)

        assert summary["is_paid"] is True
        assert summary["stripe_subscription_id"] == "sub_123"

    def test_cancel(self, mock_stripe, mock_backends, pro_profile):
        mock_backends["profiles"].set_subscription.return_value = {
            **pro_profile, "subscription_status": "free"
        }

        updated = PaymentService.cancel_subscription(pro_profile)

        mock_stripe.Subscription.cancel.assert_called_once_with("sub_123")
        assert updated["subscription_status"] == "free"

    def test_cancel_without_subscription(self, mock_stripe, free_profile):
        with pytest.raises(CheckoutError) as exc_info:
            PaymentService.cancel_subscription(free_profile)

        assert exc_info.value.status_code == 404

    def test_portal_url(self, mock_stripe, pro_profile):
        mock_stripe.billing_portal.Session.create.return_value = MagicMock(
            url="https://billing.stripe.com/p/1"
        )

        assert PaymentService.get_customer_portal_url(pro_profile) == "https://billing.stripe.com/p/1"
