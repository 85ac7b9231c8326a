"""
Writers for the two documents touched by a premium grant.

A grant upserts the email's subscription record and then marks the caller's
profile premium. ``SequentialGrantWriter`` issues those as two independent
writes: if the second one fails the subscription record stays active while
the profile is still non-premium. ``TransactionalGrantWriter`` runs the same
steps inside one MongoDB transaction, which requires a replica set.
"""

from abc import ABC, abstractmethod
from typing import Optional
import logging

from pymongo.client_session import ClientSession

from adapters.mongo_adapter import MongoAdapter
from app.utils import utc_now_iso
from repositories.premium_user_repository import PremiumUserRepository
from repositories.user_repository import UserRepository

logger = logging.getLogger("whatcanicook.premium_grant")


class PremiumGrantWriter(ABC):
    def __init__(self, users: UserRepository, premium_users: PremiumUserRepository):
        self.users = users
        self.premium_users = premium_users

    @abstractmethod
    def grant(self, user_id: str, email: str) -> str:
        """Persist the grant and return the subscription record id."""

    def _write(self, user_id: str, email: str, session: Optional[ClientSession] = None) -> str:
        record = self.premium_users.get_by_email(email, session=session)
        if record is not None:
            self.premium_users.activate(record.id, user_id, session=session)
            premium_doc_id = record.id
            logger.info(f"subscription_reactivated record_id={premium_doc_id}")
        else:
            premium_doc_id = self.premium_users.create_active(email, user_id, session=session).id
            logger.info(f"subscription_created record_id={premium_doc_id}")

        now = utc_now_iso()
        self.users.update_fields(
            user_id,
            {
                "isPremium": True,
                "premiumSince": now,
                "email": email,
                "premiumDocId": premium_doc_id,
                "stripeSubscriptionActive": True,
                "updatedAt": now,
                "lastVerified": now,
            },
            session=session,
        )
        return premium_doc_id


class SequentialGrantWriter(PremiumGrantWriter):
    def grant(self, user_id: str, email: str) -> str:
        return self._write(user_id, email)


class TransactionalGrantWriter(PremiumGrantWriter):
    def __init__(self, users: UserRepository, premium_users: PremiumUserRepository, mongo: MongoAdapter):
        super().__init__(users, premium_users)
        self.mongo = mongo

    def grant(self, user_id: str, email: str) -> str:
        with self.mongo.transaction() as session:
            return self._write(user_id, email, session=session)
