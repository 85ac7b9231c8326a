"""
API dependencies for dependency injection

The long-lived clients are built once in the application lifespan and kept on
``app.state.clients``; everything below is assembled per request from them.

Usage:
    @router.get("/example")
    def example(accounts: AccountService = Depends(get_account_service)):
        ...
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from adapters import AnalyticsClient, Clients, IdentityClient, IdentityProviderError
from app.config import settings
from app.exceptions import UnauthorizedError
from repositories import (
    PremiumGrantWriter,
    PremiumUserRepository,
    SequentialGrantWriter,
    TransactionalGrantWriter,
    UserRepository,
)
from services import AccountService, GenerationService, PremiumService

bearer_scheme = HTTPBearer(auto_error=False)


def get_clients(request: Request) -> Clients:
    return request.app.state.clients


def get_analytics(clients: Clients = Depends(get_clients)) -> AnalyticsClient:
    return clients.analytics


def get_user_repository(clients: Clients = Depends(get_clients)) -> UserRepository:
    """Get user repository instance"""
    return UserRepository(clients.mongo.users)


def get_premium_user_repository(clients: Clients = Depends(get_clients)) -> PremiumUserRepository:
    """Get premium user repository instance"""
    return PremiumUserRepository(clients.mongo.premium_users)


def get_identity(
    clients: Clients = Depends(get_clients),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> IdentityClient:
    """Per-request identity client, signed in when a bearer ID token is sent."""
    if credentials is None:
        return clients.identity.fork()
    try:
        return clients.identity.for_token(credentials.credentials)
    except IdentityProviderError as e:
        raise UnauthorizedError("Invalid or expired session", code=e.code)


def get_grant_writer(
    clients: Clients = Depends(get_clients),
    users: UserRepository = Depends(get_user_repository),
    premium_users: PremiumUserRepository = Depends(get_premium_user_repository),
) -> PremiumGrantWriter:
    if settings.premium_grant_transactional:
        return TransactionalGrantWriter(users, premium_users, clients.mongo)
    return SequentialGrantWriter(users, premium_users)


def get_premium_service(
    users: UserRepository = Depends(get_user_repository),
    premium_users: PremiumUserRepository = Depends(get_premium_user_repository),
    analytics: AnalyticsClient = Depends(get_analytics),
) -> PremiumService:
    return PremiumService(users, premium_users, analytics)


def get_account_service(
    identity: IdentityClient = Depends(get_identity),
    users: UserRepository = Depends(get_user_repository),
    premium: PremiumService = Depends(get_premium_service),
    grant_writer: PremiumGrantWriter = Depends(get_grant_writer),
    analytics: AnalyticsClient = Depends(get_analytics),
) -> AccountService:
    return AccountService(identity, users, premium, grant_writer, analytics)


def get_generation_service(
    clients: Clients = Depends(get_clients),
    analytics: AnalyticsClient = Depends(get_analytics),
) -> GenerationService:
    return GenerationService(
        clients.openai,
        analytics,
        model=settings.openai_model,
        temperature=settings.openai_temperature,
        presence_penalty=settings.openai_presence_penalty,
        frequency_penalty=settings.openai_frequency_penalty,
    )
