"""
Construction of the external service clients.

``build_clients`` is called once in the application lifespan; the resulting
``Clients`` is stored on ``app.state`` and handed to services through the
FastAPI dependencies in ``api.dependencies``.
"""

from dataclasses import dataclass
from typing import Optional
import logging

from openai import OpenAI

from adapters.analytics_adapter import AnalyticsClient
from adapters.identity_adapter import IdentityClient
from adapters.mongo_adapter import MongoAdapter
from app.config import Settings

logger = logging.getLogger("whatcanicook.clients")


@dataclass
class Clients:
    mongo: MongoAdapter
    identity: IdentityClient
    analytics: AnalyticsClient
    openai: Optional[OpenAI]

    def close(self):
        for name in ("identity", "analytics", "mongo"):
            try:
                getattr(self, name).close()
            except Exception:
                logger.exception("Error closing %s client", name)
        if self.openai is not None:
            self.openai.close()


def report_missing_settings(settings: Settings) -> list[str]:
    """Log every missing required setting as an error; startup carries on."""
    missing = settings.missing_required()
    for name in missing:
        logger.error("Missing required environment variable: %s", name)
    return missing


def build_clients(settings: Settings) -> Clients:
    report_missing_settings(settings)

    mongo = MongoAdapter(settings.mongo_uri, settings.mongo_db_name)
    identity = IdentityClient(
        settings.firebase_api_key,
        base_url=settings.identity_base_url,
        timeout=settings.identity_timeout_sec,
    )
    analytics = AnalyticsClient(
        measurement_id=settings.firebase_measurement_id,
        api_secret=settings.analytics_api_secret,
        endpoint=settings.analytics_endpoint,
    )
    openai_client = None
    if settings.openai_api_key:
        openai_client = OpenAI(api_key=settings.openai_api_key)
    else:
        logger.warning("OpenAI API key not configured - generation endpoints unavailable")

    return Clients(mongo=mongo, identity=identity, analytics=analytics, openai=openai_client)
