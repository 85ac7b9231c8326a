"""Health check and utility routes"""

from fastapi import APIRouter, Depends
import logging

from adapters import Clients
from app.config import settings
from api.dependencies import get_clients

router = APIRouter(tags=["Health"])
logger = logging.getLogger("whatcanicook.api.health")


@router.get("/health-check")
def health_check():
    """Basic health check endpoint"""
    return {"status": "ok", "service": "WhatCanICook"}


@router.get("/health-check/dependencies")
def dependency_status(clients: Clients = Depends(get_clients)):
    """Which hosted services are configured and reachable."""
    return {
        "mongo": clients.mongo.ping(),
        "identity_configured": bool(clients.identity.api_key),
        "auth_domain": settings.resolved_auth_domain(),
        "analytics_enabled": clients.analytics.enabled,
        "openai_configured": clients.openai is not None,
        "missing_settings": settings.missing_required(),
    }
