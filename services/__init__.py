"""Services package - Business logic layer"""

from services.premium_service import PremiumService
from services.account_service import AccountService, auth_error_message
from services.generation_service import GenerationService

__all__ = [
    "PremiumService",
    "AccountService",
    "auth_error_message",
    "GenerationService",
]
