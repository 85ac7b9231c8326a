"""User profile routes"""

from fastapi import APIRouter, Depends, Query
import logging

from adapters import IdentityClient
from app.exceptions import UnauthorizedError
from domain.models import UserProfile
from domain.schemas.account_schemas import ProfileUpdateRequest
from services import AccountService
from api.dependencies import get_account_service, get_identity

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger("whatcanicook.api.users")


def require_account(account_id: str, identity: IdentityClient = Depends(get_identity)) -> str:
    """Profiles are only readable and writable by their own account."""
    if identity.current_user is None or identity.current_user.uid != account_id:
        raise UnauthorizedError("Not signed in as this user")
    return account_id


@router.get("/{account_id}", response_model=UserProfile)
def get_user(
    account_id: str = Depends(require_account),
    force_refresh: bool = Query(default=False, description="Re-verify premium status"),
    accounts: AccountService = Depends(get_account_service),
):
    """Get the user's profile"""
    return accounts.get_profile(account_id, force_refresh=force_refresh)


@router.patch("/{account_id}", response_model=UserProfile)
def update_user(
    body: ProfileUpdateRequest,
    account_id: str = Depends(require_account),
    accounts: AccountService = Depends(get_account_service),
):
    """Merge the sent fields into the profile and return the result."""
    accounts.update_profile(account_id, body.to_fields())
    return accounts.get_profile(account_id)
