"""
Premium User Repository - Data access layer for subscription records
"""

from typing import Optional
import uuid

from pymongo.client_session import ClientSession
from pymongo.collection import Collection

from app.utils import utc_now_iso
from repositories.base import BaseRepository
from domain.models import SubscriptionRecord


class PremiumUserRepository(BaseRepository[SubscriptionRecord]):
    """Repository for the ``premiumUsers`` collection"""

    def __init__(self, collection: Collection):
        super().__init__(collection, SubscriptionRecord)

    def get_by_email(self, email: str, session: Optional[ClientSession] = None) -> Optional[SubscriptionRecord]:
        """Any record for the email, active or not"""
        return self.find_first({"email": email}, session=session)

    def has_active_subscription(self, email: str) -> bool:
        """True if some record for the email is active on both flags"""
        record = self.find_first(
            {"email": email, "active": True, "stripeSubscriptionActive": True}
        )
        return record is not None

    def create_active(self, email: str, user_id: str, session: Optional[ClientSession] = None) -> SubscriptionRecord:
        now = utc_now_iso()
        record = SubscriptionRecord(
            id=uuid.uuid4().hex,
            email=email,
            user_id=user_id,
            active=True,
            stripe_subscription_active=True,
            created_at=now,
            updated_at=now,
        )
        return self.create(record, session=session)

    def activate(self, record_id: str, user_id: str, session: Optional[ClientSession] = None) -> bool:
        return self.update_fields(
            record_id,
            {
                "active": True,
                "updatedAt": utc_now_iso(),
                "stripeSubscriptionActive": True,
                "userId": user_id,
            },
            session=session,
        )
