"""Premium subscription routes"""

from fastapi import APIRouter, Depends
import logging

from domain.schemas.premium_schemas import (
    GrantPremiumRequest,
    GrantPremiumResponse,
    VerificationResult,
)
from services import AccountService, PremiumService
from api.dependencies import get_account_service, get_premium_service
from api.routes.users import require_account

router = APIRouter(prefix="/premium", tags=["Premium"])
logger = logging.getLogger("whatcanicook.api.premium")


@router.post("/grant", response_model=GrantPremiumResponse)
def grant_premium(
    body: GrantPremiumRequest, accounts: AccountService = Depends(get_account_service)
):
    """Grant premium to the signed-in user under the given email"""
    return GrantPremiumResponse(granted=accounts.grant_premium(body.email))


@router.post("/verify/{account_id}", response_model=VerificationResult)
def verify_premium(
    account_id: str = Depends(require_account),
    premium: PremiumService = Depends(get_premium_service),
):
    """Reconcile the account's premium flag with its subscription records"""
    return premium.verify(account_id)
