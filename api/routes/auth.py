"""Account registration, sign-in and sign-out routes"""

from fastapi import APIRouter, Depends, status
import logging

from domain.schemas.account_schemas import RegisterRequest, SignInRequest, SessionResponse
from services import AccountService
from api.dependencies import get_account_service

router = APIRouter(prefix="/auth", tags=["Auth"])
logger = logging.getLogger("whatcanicook.api.auth")


@router.post("/register", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, accounts: AccountService = Depends(get_account_service)):
    """Create an account and its profile"""
    session = accounts.create_account(body.email, body.password, body.username)
    return SessionResponse.model_validate(session)


@router.post("/sign-in", response_model=SessionResponse)
def sign_in(body: SignInRequest, accounts: AccountService = Depends(get_account_service)):
    """Sign in with email and password; refreshes premium status"""
    session = accounts.sign_in(body.email, body.password)
    return SessionResponse.model_validate(session)


@router.post("/sign-out")
def sign_out(accounts: AccountService = Depends(get_account_service)):
    accounts.sign_out()
    return {"status": "ok"}
