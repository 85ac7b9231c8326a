from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class GrantPremiumRequest(BaseModel):
    email: EmailStr


class GrantPremiumResponse(BaseModel):
    granted: bool


class VerificationResult(BaseModel):
    """Outcome of reconciling a profile against the subscription records.

    ``error`` is set when verification could not run; ``is_premium`` is then
    always False.
    """

    is_premium: bool = Field(..., serialization_alias="isPremium")
    last_verified: str = Field(..., serialization_alias="lastVerified")
    error: Optional[str] = None
