"""
Tests for AccountService - registration, sign-in/out, profiles and premium grants.

The identity provider is the fake Identity Toolkit server from test_fixtures,
so the real IdentityClient request/response handling runs in every test.
"""

import pytest

from test_fixtures import (
    stack,
    identity_server,
    unique_email,
    seed_profile,
    seed_subscription,
)
from app.exceptions import (
    AccountCreationError,
    AuthError,
    NotFoundError,
    ServiceValidationError,
    SignOutError,
    UnauthorizedError,
    UpdateError,
    VerificationError,
)
from domain.schemas.premium_schemas import VerificationResult
from services.account_service import auth_error_message


def sign_in_existing(stack, email=None, password="s3cret-pass", is_premium=False):
    """Register an account with the provider, give it a profile and sign in."""
    email = email or unique_email("sarah.martinez")
    uid = stack.server.add_account(email, password, display_name="Sarah Martinez")
    seed_profile(stack.users, uid, email.lower(), is_premium=is_premium)
    stack.accounts.sign_in(email, password)
    return uid, email


# =============================================================================
# CREATE ACCOUNT
# =============================================================================


def test_create_account_writes_default_profile(stack):
    """
    Test AccountService.create_account() happy path.

    Verifies:
    - returns the provider session with a uid
    - the display name is set on the identity account
    - profile written with lower-cased email and default preferences
    - user_created is emitted
    """
    session = stack.accounts.create_account("Sarah.Martinez@Example.com", "s3cret-pass", "Sarah")

    assert session.uid
    assert session.display_name == "Sarah"
    assert stack.server.accounts[session.uid]["displayName"] == "Sarah"

    doc = stack.users.docs[session.uid]
    assert doc["username"] == "Sarah"
    assert doc["email"] == "sarah.martinez@example.com"
    assert doc["isPremium"] is False
    assert doc["savedRecipes"] == []
    assert doc["mealPlans"] == []
    assert doc["preferences"] == {"dietaryRestrictions": [], "servingSize": 2, "theme": "light"}
    assert doc["createdAt"] == doc["updatedAt"]

    assert stack.analytics.last("user_created").params == {"userId": session.uid}


def test_create_account_signs_the_new_user_in(stack):
    session = stack.accounts.create_account(unique_email("emma"), "s3cret-pass", "Emma")

    assert stack.identity.current_user is not None
    assert stack.identity.current_user.uid == session.uid


def test_create_account_duplicate_email(stack):
    """Registering an existing email gives the dedicated message, not the generic one."""
    email = unique_email("dup")
    stack.server.add_account(email, "s3cret-pass")

    with pytest.raises(AccountCreationError) as exc_info:
        stack.accounts.create_account(email, "another-pass", "Dup")

    assert str(exc_info.value) == "This email is already registered. Please sign in instead."
    assert exc_info.value.auth_code == "auth/email-already-in-use"
    assert stack.users.docs == {}
    assert "user_created" not in stack.analytics.names()


@pytest.mark.parametrize(
    "email,password,code,message",
    [
        ("not-an-email", "s3cret-pass", "auth/invalid-email", "Please enter a valid email address."),
        ("weak@example.com", "123", "auth/weak-password", "Password should be at least 6 characters long."),
    ],
)
def test_create_account_mapped_provider_errors(stack, email, password, code, message):
    with pytest.raises(AuthError) as exc_info:
        stack.accounts.create_account(email, password, "Someone")

    assert not isinstance(exc_info.value, AccountCreationError)
    assert exc_info.value.auth_code == code
    assert exc_info.value.message == message


def test_create_account_network_failure(stack):
    stack.server.offline = True

    with pytest.raises(AuthError) as exc_info:
        stack.accounts.create_account(unique_email(), "s3cret-pass", "Offline")

    assert exc_info.value.message == "Network error. Please check your connection and try again."


def test_create_account_unmapped_error_gets_generic_message(stack):
    stack.identity.api_key = "wrong-key"

    with pytest.raises(AuthError) as exc_info:
        stack.accounts.create_account(unique_email(), "s3cret-pass", "Someone")

    assert exc_info.value.message == "An error occurred. Please try again."


# =============================================================================
# SIGN IN / SIGN OUT
# =============================================================================


def test_sign_in_refreshes_premium_status(stack):
    """
    Sign-in re-verifies premium status and stores the result.

    Verifies:
    - a subscription granted elsewhere is picked up on sign-in
    - lastVerified is stamped
    - user_signed_in is emitted
    """
    email = unique_email("michael.chen")
    uid = stack.server.add_account(email, "s3cret-pass")
    seed_profile(stack.users, uid, email, is_premium=False)
    seed_subscription(stack.premium_users, email)

    session = stack.accounts.sign_in(email, "s3cret-pass")

    assert session.uid == uid
    doc = stack.users.docs[uid]
    assert doc["isPremium"] is True
    assert doc["lastVerified"]
    assert stack.analytics.last("user_signed_in").params == {"userId": uid}


def test_sign_in_demotes_lapsed_subscription(stack):
    email = unique_email("lapsed")
    uid = stack.server.add_account(email, "s3cret-pass")
    seed_profile(stack.users, uid, email, is_premium=True)
    seed_subscription(stack.premium_users, email, stripe_active=False)

    stack.accounts.sign_in(email, "s3cret-pass")

    assert stack.users.docs[uid]["isPremium"] is False


@pytest.mark.parametrize("password", ["wrong-password", ""])
def test_sign_in_bad_credentials(stack, password):
    email = unique_email()
    stack.server.add_account(email, "s3cret-pass")

    with pytest.raises(AuthError) as exc_info:
        stack.accounts.sign_in(email, password)

    assert exc_info.value.message == "Invalid email or password. Please try again."
    assert stack.identity.current_user is None


def test_sign_in_unknown_email(stack):
    with pytest.raises(AuthError) as exc_info:
        stack.accounts.sign_in(unique_email("nobody"), "s3cret-pass")

    assert exc_info.value.message == "Invalid email or password. Please try again."


def test_sign_in_without_profile_fails(stack):
    """An identity account whose profile was never written cannot sign in."""
    email = unique_email("orphan")
    stack.server.add_account(email, "s3cret-pass")

    with pytest.raises(AuthError) as exc_info:
        stack.accounts.sign_in(email, "s3cret-pass")

    assert exc_info.value.message == "An error occurred. Please try again."
    assert stack.users.docs == {}
    assert "user_signed_in" not in stack.analytics.names()


def test_sign_in_rate_limited(stack):
    stack.server.rate_limited = True

    with pytest.raises(AuthError) as exc_info:
        stack.accounts.sign_in(unique_email(), "s3cret-pass")

    assert exc_info.value.auth_code == "auth/too-many-requests"
    assert exc_info.value.message == "Too many failed attempts. Please try again later."


def test_sign_out_emits_event_for_signed_in_user(stack):
    uid, _ = sign_in_existing(stack)

    stack.accounts.sign_out()

    assert stack.identity.current_user is None
    assert stack.analytics.last("user_signed_out").params == {"userId": uid}


def test_sign_out_without_session_is_silent(stack):
    stack.accounts.sign_out()

    assert "user_signed_out" not in stack.analytics.names()


def test_sign_out_failure_is_wrapped(stack, monkeypatch):
    sign_in_existing(stack)

    def broken_sign_out():
        raise RuntimeError("storage locked")

    monkeypatch.setattr(stack.identity, "sign_out", broken_sign_out)

    with pytest.raises(SignOutError) as exc_info:
        stack.accounts.sign_out()

    assert str(exc_info.value) == "Failed to sign out. Please try again."


# =============================================================================
# GET PROFILE
# =============================================================================


def test_get_profile_missing(stack):
    with pytest.raises(NotFoundError):
        stack.accounts.get_profile("ghost")


def test_get_profile_plain_read_never_writes(stack):
    seed_profile(stack.users, "uid-1", "sarah@example.com", is_premium=False)
    seed_subscription(stack.premium_users, "sarah@example.com")

    profile = stack.accounts.get_profile("uid-1")

    assert profile.is_premium is False
    assert profile.preferences.serving_size == 2
    assert stack.users.update_calls == 0


def test_get_profile_force_refresh_updates_changed_flag(stack):
    seed_profile(stack.users, "uid-1", "sarah@example.com", is_premium=False)
    seed_subscription(stack.premium_users, "sarah@example.com")

    profile = stack.accounts.get_profile("uid-1", force_refresh=True)

    assert profile.is_premium is True
    assert stack.users.docs["uid-1"]["isPremium"] is True
    assert stack.users.docs["uid-1"]["lastVerified"]


def test_get_profile_force_refresh_unchanged_flag(stack):
    seed_profile(stack.users, "uid-1", "sarah@example.com", is_premium=True)
    seed_subscription(stack.premium_users, "sarah@example.com")

    profile = stack.accounts.get_profile("uid-1", force_refresh=True)

    assert profile.is_premium is True
    assert profile.last_verified is None
    assert stack.users.docs["uid-1"]["isPremium"] is True


# =============================================================================
# GRANT PREMIUM
# =============================================================================


def test_grant_premium_creates_subscription_record(stack):
    """
    Test AccountService.grant_premium() for a first-time email.

    Verifies:
    - subscription record created with the lower-cased email
    - profile flagged premium and linked to the record
    - premium_user_added emitted before the post-check verification
    """
    uid, _ = sign_in_existing(stack)

    assert stack.accounts.grant_premium("User@Example.com") is True

    records = list(stack.premium_users.docs.values())
    assert len(records) == 1
    record = records[0]
    assert record["email"] == "user@example.com"
    assert record["userId"] == uid
    assert record["active"] is True
    assert record["stripeSubscriptionActive"] is True

    doc = stack.users.docs[uid]
    assert doc["isPremium"] is True
    assert doc["email"] == "user@example.com"
    assert doc["premiumDocId"] == record["_id"]
    assert doc["premiumSince"]
    assert doc["stripeSubscriptionActive"] is True

    names = stack.analytics.names()
    assert names.index("premium_user_added") < len(names) - 1
    assert names[-1] == "premium_status_verified"
    assert stack.analytics.last("premium_user_added").params == {
        "userId": uid,
        "email": "user@example.com",
    }


def test_grant_premium_then_verify_is_premium(stack):
    uid, _ = sign_in_existing(stack)

    stack.accounts.grant_premium("User@Example.com")

    assert stack.premium.verify(uid).is_premium is True


def test_grant_premium_reactivates_existing_record(stack):
    uid, email = sign_in_existing(stack)
    record_id = seed_subscription(stack.premium_users, email.lower(), active=False, stripe_active=False)

    stack.accounts.grant_premium(email)

    assert list(stack.premium_users.docs) == [record_id]
    record = stack.premium_users.docs[record_id]
    assert record["active"] is True
    assert record["stripeSubscriptionActive"] is True
    assert record["userId"] == uid
    assert stack.users.docs[uid]["premiumDocId"] == record_id


def test_grant_premium_requires_email(stack):
    sign_in_existing(stack)

    with pytest.raises(ServiceValidationError) as exc_info:
        stack.accounts.grant_premium("")

    assert str(exc_info.value) == "Email is required"


def test_grant_premium_requires_session(stack):
    with pytest.raises(UnauthorizedError):
        stack.accounts.grant_premium("user@example.com")

    assert stack.premium_users.docs == {}


def test_grant_premium_requires_profile(stack):
    email = unique_email()
    stack.server.add_account(email, "s3cret-pass")
    stack.identity.sign_in(email, "s3cret-pass")

    with pytest.raises(NotFoundError):
        stack.accounts.grant_premium(email)

    assert stack.premium_users.docs == {}


def test_grant_premium_post_check_failure(stack, monkeypatch):
    """A grant that does not verify afterwards raises VerificationError."""
    sign_in_existing(stack)
    monkeypatch.setattr(
        stack.premium,
        "verify",
        lambda account_id: VerificationResult(is_premium=False, last_verified="now"),
    )

    with pytest.raises(VerificationError) as exc_info:
        stack.accounts.grant_premium("user@example.com")

    assert str(exc_info.value) == "Premium status verification failed after update"


def test_grant_premium_profile_write_failure_leaves_record_active(stack):
    """The two grant writes are independent with the sequential writer."""
    uid, _ = sign_in_existing(stack)
    stack.users.fail_updates = RuntimeError("profile write failed")

    with pytest.raises(RuntimeError):
        stack.accounts.grant_premium("user@example.com")

    record = next(iter(stack.premium_users.docs.values()))
    assert record["active"] is True
    assert stack.users.docs[uid]["isPremium"] is False
    assert "premium_user_added" not in stack.analytics.names()


# =============================================================================
# UPDATE PROFILE
# =============================================================================


def test_update_profile_merges_fields(stack):
    seed_profile(stack.users, "uid-1", "sarah@example.com")

    stack.accounts.update_profile(
        "uid-1",
        {"username": "Sarah M.", "preferences": {"theme": "dark"}},
    )

    doc = stack.users.docs["uid-1"]
    assert doc["username"] == "Sarah M."
    assert doc["preferences"] == {"dietaryRestrictions": [], "servingSize": 2, "theme": "dark"}
    assert doc["updatedAt"] != "2024-01-01T00:00:00+00:00"
    assert doc["email"] == "sarah@example.com"

    event = stack.analytics.last("user_data_updated")
    assert event.params == {"userId": "uid-1", "updatedFields": ["username", "preferences"]}


def test_update_profile_missing_user(stack):
    with pytest.raises(UpdateError) as exc_info:
        stack.accounts.update_profile("ghost", {"username": "Nobody"})

    assert str(exc_info.value) == "Failed to update user data. Please try again."


def test_update_profile_store_failure_is_wrapped(stack):
    seed_profile(stack.users, "uid-1", "sarah@example.com")
    stack.users.fail_updates = RuntimeError("connection reset")

    with pytest.raises(UpdateError) as exc_info:
        stack.accounts.update_profile("uid-1", {"username": "Sarah"})

    assert "connection reset" not in str(exc_info.value)
    assert "user_data_updated" not in stack.analytics.names()


# =============================================================================
# ERROR MESSAGES
# =============================================================================


@pytest.mark.parametrize(
    "code,message",
    [
        ("auth/invalid-credential", "Invalid email or password. Please try again."),
        ("auth/wrong-password", "Invalid email or password. Please try again."),
        ("auth/user-not-found", "Invalid email or password. Please try again."),
        ("auth/email-already-in-use", "This email is already registered. Please sign in instead."),
        ("auth/too-many-requests", "Too many failed attempts. Please try again later."),
        ("auth/user-disabled", "An error occurred. Please try again."),
        (None, "An error occurred. Please try again."),
    ],
)
def test_auth_error_message(code, message):
    assert auth_error_message(code) == message
