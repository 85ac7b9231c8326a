"""
Adapters package - External service connections.
Clients for MongoDB, the identity provider, analytics and OpenAI.
"""

from adapters.mongo_adapter import MongoAdapter
from adapters.identity_adapter import AuthSession, IdentityClient, IdentityProviderError
from adapters.analytics_adapter import AnalyticsClient
from adapters.clients import Clients, build_clients

__all__ = [
    "MongoAdapter",
    "AuthSession",
    "IdentityClient",
    "IdentityProviderError",
    "AnalyticsClient",
    "Clients",
    "build_clients",
]
