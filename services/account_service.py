from typing import Any, Dict, Optional
import logging

from adapters.analytics_adapter import AnalyticsClient
from adapters.identity_adapter import AuthSession, IdentityClient, IdentityProviderError
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
from app.utils import normalize_email, utc_now_iso
from domain.models import UserProfile
from repositories import PremiumGrantWriter, UserRepository
from services.premium_service import PremiumService

logger = logging.getLogger("whatcanicook.accounts")

EMAIL_IN_USE = "auth/email-already-in-use"

AUTH_ERROR_MESSAGES = {
    "auth/invalid-credential": "Invalid email or password. Please try again.",
    "auth/wrong-password": "Invalid email or password. Please try again.",
    "auth/user-not-found": "Invalid email or password. Please try again.",
    EMAIL_IN_USE: "This email is already registered. Please sign in instead.",
    "auth/weak-password": "Password should be at least 6 characters long.",
    "auth/invalid-email": "Please enter a valid email address.",
    "auth/too-many-requests": "Too many failed attempts. Please try again later.",
    "auth/network-request-failed": "Network error. Please check your connection and try again.",
}
DEFAULT_AUTH_ERROR_MESSAGE = "An error occurred. Please try again."


def auth_error_message(code: Optional[str]) -> str:
    """User-facing message for an identity provider error code"""
    return AUTH_ERROR_MESSAGES.get(code or "", DEFAULT_AUTH_ERROR_MESSAGE)


def _error_code(exc: Exception) -> Optional[str]:
    return exc.code if isinstance(exc, IdentityProviderError) else None


def _flatten_update(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Nested preference updates become dotted paths so unspecified
    preferences are left alone."""
    flat: Dict[str, Any] = {}
    for key, value in fields.items():
        if key == "preferences" and isinstance(value, dict):
            for pref_key, pref_value in value.items():
                flat[f"preferences.{pref_key}"] = pref_value
        else:
            flat[key] = value
    return flat


class AccountService:
    """Accounts, profiles and premium grants for the signed-in user"""

    def __init__(
        self,
        identity: IdentityClient,
        users: UserRepository,
        premium: PremiumService,
        grant_writer: PremiumGrantWriter,
        analytics: AnalyticsClient,
    ):
        self.identity = identity
        self.users = users
        self.premium = premium
        self.grant_writer = grant_writer
        self.analytics = analytics

    # ------------------ Authentication ------------------
    def create_account(self, email: str, password: str, username: str) -> AuthSession:
        """
        Register with the identity provider and write the initial profile.

        Raises:
            AccountCreationError: the email already has an account
            AuthError: any other provider failure, with a mapped message
        """
        try:
            session = self.identity.create_user(email, password)
            session = self.identity.update_profile(session, display_name=username)

            verification = self.premium.verify(session.uid)

            profile = UserProfile.new(
                account_id=session.uid,
                username=username,
                email=email,
                is_premium=verification.is_premium,
            )
            self.users.create(profile)

            self.analytics.log_event("user_created", {"userId": session.uid})
            logger.info(f"user_created user_id={session.uid}")
            return session
        except Exception as e:
            logger.error(f"user_create_failed error={str(e)}")
            code = _error_code(e)
            if code == EMAIL_IN_USE:
                raise AccountCreationError(auth_code=code)
            raise AuthError(auth_error_message(code), auth_code=code)

    def sign_in(self, email: str, password: str) -> AuthSession:
        """Check credentials, then refresh the profile's premium status."""
        try:
            session = self.identity.sign_in(email, password)

            verification = self.premium.verify(session.uid)

            now = utc_now_iso()
            updated = self.users.update_fields(
                session.uid,
                {
                    "isPremium": verification.is_premium,
                    "lastVerified": now,
                    "updatedAt": now,
                },
            )
            if not updated:
                raise NotFoundError("User document not found")

            self.analytics.log_event("user_signed_in", {"userId": session.uid})
            logger.info(f"user_signed_in user_id={session.uid}")
            return session
        except Exception as e:
            logger.error(f"sign_in_failed error={str(e)}")
            code = _error_code(e)
            raise AuthError(auth_error_message(code), auth_code=code)

    def sign_out(self) -> None:
        try:
            user_id = self.identity.current_user.uid if self.identity.current_user else None
            self.identity.sign_out()

            if user_id:
                self.analytics.log_event("user_signed_out", {"userId": user_id})
                logger.info(f"user_signed_out user_id={user_id}")
        except Exception as e:
            logger.error(f"sign_out_failed error={str(e)}")
            raise SignOutError()

    # ------------------ Profile ------------------
    def get_profile(self, account_id: str, force_refresh: bool = False) -> UserProfile:
        """
        Read a profile. A plain read never writes; with ``force_refresh`` the
        premium flag is re-verified and written back only if it changed.
        """
        try:
            user = self.users.get_by_id(account_id)
            if user is None:
                raise NotFoundError("User document not found")

            if force_refresh:
                verification = self.premium.verify(account_id)
                if verification.is_premium != user.is_premium:
                    now = utc_now_iso()
                    self.users.update_fields(
                        account_id,
                        {
                            "isPremium": verification.is_premium,
                            "lastVerified": now,
                            "updatedAt": now,
                        },
                    )
                    return user.model_copy(update={"is_premium": verification.is_premium})

            return user
        except Exception as e:
            logger.error(f"profile_fetch_failed user_id={account_id} error={str(e)}")
            raise

    def update_profile(self, account_id: str, fields: Dict[str, Any]) -> None:
        """Merge partial (stored-name) fields into the profile."""
        try:
            update = _flatten_update(fields)
            update["updatedAt"] = utc_now_iso()
            if not self.users.update_fields(account_id, update):
                raise NotFoundError("User document not found")

            self.analytics.log_event(
                "user_data_updated",
                {"userId": account_id, "updatedFields": list(fields.keys())},
            )
            logger.info(f"profile_updated user_id={account_id} fields={list(fields.keys())}")
        except Exception as e:
            logger.error(f"profile_update_failed user_id={account_id} error={str(e)}")
            raise UpdateError()

    # ------------------ Premium ------------------
    def grant_premium(self, email: str) -> bool:
        """
        Mark the signed-in user premium under ``email``.

        Upserts the email's subscription record and flags the profile, then
        re-verifies. The two writes are only atomic with the transactional
        grant writer.

        Raises:
            ServiceValidationError: empty email
            UnauthorizedError: nobody is signed in
            NotFoundError: the signed-in account has no profile
            VerificationError: the grant did not verify as premium afterwards
        """
        if not email:
            raise ServiceValidationError("Email is required")

        try:
            normalized_email = normalize_email(email)

            if self.identity.current_user is None:
                raise UnauthorizedError("No authenticated user found")

            user_id = self.identity.current_user.uid
            if not self.users.exists(user_id):
                raise NotFoundError("User document not found")

            premium_doc_id = self.grant_writer.grant(user_id, normalized_email)

            self.analytics.log_event(
                "premium_user_added", {"userId": user_id, "email": normalized_email}
            )
            logger.info(f"premium_granted user_id={user_id} record_id={premium_doc_id}")

            verification = self.premium.verify(user_id)
            if not verification.is_premium:
                raise VerificationError()

            return True
        except Exception as e:
            logger.error(f"premium_grant_failed error={str(e)}")
            raise
