"""
Tests for PremiumService.verify - reconciliation of the premium flag.

Covers:
- Matching rules (lower-cased email, both activity flags)
- Write-back of the computed flag and timestamps
- Idempotence on unchanged data
- Failures degrading to is_premium=False instead of raising
"""

import pytest

from test_fixtures import stack, identity_server, seed_profile, seed_subscription


# =============================================================================
# MATCHING
# =============================================================================


def test_verify_premium_with_active_subscription(stack):
    """
    An active record for the profile's email makes the account premium.

    Verifies:
    - is_premium is True and no error is attached
    - the profile's isPremium / stripeSubscriptionActive are written back
    - lastVerified and updatedAt are refreshed
    """
    seed_profile(stack.users, "uid-1", "sarah@example.com")
    seed_subscription(stack.premium_users, "sarah@example.com")

    result = stack.premium.verify("uid-1")

    assert result.is_premium is True
    assert result.error is None
    doc = stack.users.docs["uid-1"]
    assert doc["isPremium"] is True
    assert doc["stripeSubscriptionActive"] is True
    assert doc["lastVerified"]
    assert doc["updatedAt"] != "2024-01-01T00:00:00+00:00"


@pytest.mark.parametrize(
    "active,stripe_active",
    [(False, True), (True, False), (False, False)],
)
def test_verify_requires_both_flags(stack, active, stripe_active):
    seed_profile(stack.users, "uid-1", "sarah@example.com", is_premium=True)
    seed_subscription(stack.premium_users, "sarah@example.com", active=active, stripe_active=stripe_active)

    result = stack.premium.verify("uid-1")

    assert result.is_premium is False
    assert stack.users.docs["uid-1"]["isPremium"] is False


def test_verify_no_subscription_record(stack):
    seed_profile(stack.users, "uid-1", "sarah@example.com")
    seed_subscription(stack.premium_users, "someone.else@example.com")

    assert stack.premium.verify("uid-1").is_premium is False


def test_verify_matches_case_insensitively(stack):
    """A profile email stored in upper case still matches the lower-cased record."""
    seed_profile(stack.users, "uid-1", "USER@EXAMPLE.COM")
    seed_subscription(stack.premium_users, "user@example.com")

    assert stack.premium.verify("uid-1").is_premium is True


def test_verify_any_matching_record_is_enough(stack):
    seed_profile(stack.users, "uid-1", "sarah@example.com")
    seed_subscription(stack.premium_users, "sarah@example.com", active=False)
    seed_subscription(stack.premium_users, "sarah@example.com", active=True)

    assert stack.premium.verify("uid-1").is_premium is True


# =============================================================================
# IDEMPOTENCE AND ANALYTICS
# =============================================================================


def test_verify_is_idempotent(stack):
    seed_profile(stack.users, "uid-1", "sarah@example.com")
    seed_subscription(stack.premium_users, "sarah@example.com")

    results = [stack.premium.verify("uid-1").is_premium for _ in range(3)]

    assert results == [True, True, True]
    assert stack.users.docs["uid-1"]["isPremium"] is True
    assert len(stack.premium_users.docs) == 1


def test_verify_emits_analytics_event(stack):
    seed_profile(stack.users, "uid-1", "sarah@example.com")

    stack.premium.verify("uid-1")

    event = stack.analytics.last("premium_status_verified")
    assert event is not None
    assert event.params == {"userId": "uid-1", "isPremium": False}


# =============================================================================
# FAILURES
# =============================================================================


def test_verify_missing_profile_does_not_raise(stack):
    result = stack.premium.verify("ghost")

    assert result.is_premium is False
    assert result.error == "User not found"
    assert result.last_verified
    assert "ghost" not in stack.users.docs


def test_verify_store_outage_demotes_to_non_premium(stack):
    """A failing subscription query is absorbed and reported as non-premium."""
    seed_profile(stack.users, "uid-1", "sarah@example.com", is_premium=True)
    stack.premium_users.fail_reads = RuntimeError("store unavailable")

    result = stack.premium.verify("uid-1")

    assert result.is_premium is False
    assert result.error == "store unavailable"
    assert stack.analytics.last("premium_status_verified") is None


def test_verify_write_failure_is_absorbed(stack):
    seed_profile(stack.users, "uid-1", "sarah@example.com")
    seed_subscription(stack.premium_users, "sarah@example.com")
    stack.users.fail_updates = RuntimeError("write rejected")

    result = stack.premium.verify("uid-1")

    assert result.is_premium is False
    assert result.error == "write rejected"
