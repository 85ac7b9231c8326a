import logging

from adapters.analytics_adapter import AnalyticsClient
from app.exceptions import NotFoundError
from app.utils import normalize_email, utc_now_iso
from domain.schemas.premium_schemas import VerificationResult
from repositories import PremiumUserRepository, UserRepository

logger = logging.getLogger("whatcanicook.premium")


class PremiumService:
    """Reconciles a profile's ``isPremium`` flag against the subscription records."""

    def __init__(self, users: UserRepository, premium_users: PremiumUserRepository, analytics: AnalyticsClient):
        self.users = users
        self.premium_users = premium_users
        self.analytics = analytics

    def verify(self, account_id: str) -> VerificationResult:
        """
        Recompute premium status for an account and write it back to the profile.

        Premium means at least one subscription record with the profile's
        lower-cased email has both ``active`` and ``stripeSubscriptionActive``
        set. Never raises: any failure (missing profile, store outage) is
        logged and reported as ``is_premium=False`` with ``error`` set, which
        demotes the user until the next successful verification.
        """
        try:
            user = self.users.get_by_id(account_id)
            if user is None:
                raise NotFoundError("User not found")

            is_premium = self.premium_users.has_active_subscription(normalize_email(user.email))

            now = utc_now_iso()
            self.users.update_fields(
                account_id,
                {
                    "isPremium": is_premium,
                    "lastVerified": now,
                    "stripeSubscriptionActive": is_premium,
                    "updatedAt": now,
                },
            )

            self.analytics.log_event(
                "premium_status_verified", {"userId": account_id, "isPremium": is_premium}
            )
            logger.info(f"premium_verified user_id={account_id} is_premium={is_premium}")

            return VerificationResult(is_premium=is_premium, last_verified=now)
        except Exception as e:
            logger.error(f"premium_verification_failed user_id={account_id} error={str(e)}")
            return VerificationResult(
                is_premium=False, last_verified=utc_now_iso(), error=str(e) or "Unknown error"
            )
