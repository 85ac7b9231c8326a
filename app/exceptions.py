from typing import Any, Mapping, Optional


class AppError(Exception):
    """Base class for errors raised by the service layer.

    Attributes:
        message: human-readable message, safe to show to an end user
        details: optional mapping with extra context (field errors, validation info)
        code: optional machine-readable error code
        http_status: suggested HTTP status code for handlers
    """

    http_status = 500
    default_message = "An error occurred. Please try again."

    def __init__(self, message: Optional[str] = None, details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message}
        if self.code:
            payload["code"] = self.code
        if self.details:
            payload["details"] = self.details
        return payload

    def __str__(self) -> str:
        return self.message


class ServiceValidationError(AppError):
    """Raised when input data is invalid or a precondition for a service call is not met."""

    http_status = 400
    default_message = "Invalid input"


class NotFoundError(AppError):
    """Raised when a requested resource was not found."""

    http_status = 404
    default_message = "Not found"


class UnauthorizedError(AppError):
    """Raised when an operation needs a signed-in user and there is none."""

    http_status = 401
    default_message = "Unauthorized"


class AuthError(AppError):
    """Raised when the identity provider rejects a request.

    ``auth_code`` keeps the provider code (``auth/weak-password`` etc.) the
    message was mapped from.
    """

    http_status = 401

    def __init__(self, message: Optional[str] = None, auth_code: Optional[str] = None, details: Optional[Mapping[str, Any]] = None):
        super().__init__(message, details=details, code=auth_code)
        self.auth_code = auth_code


class AccountCreationError(AuthError):
    """Raised when registering an email that already has an account."""

    http_status = 409
    default_message = "This email is already registered. Please sign in instead."


class VerificationError(AppError):
    """Raised when premium status does not verify right after being granted."""

    default_message = "Premium status verification failed after update"


class UpdateError(AppError):
    default_message = "Failed to update user data. Please try again."


class SignOutError(AppError):
    default_message = "Failed to sign out. Please try again."


class GenerationError(AppError):
    """Raised when the text-generation endpoint fails or answers unusably."""

    http_status = 502


class SchemaMismatchError(GenerationError):
    """Raised when a generated JSON payload does not match the expected shape."""

    default_message = "Generated response did not match the expected format"


class MealPlanError(GenerationError):
    default_message = "Failed to generate meal plan. Please try again."


class ShoppingListError(GenerationError):
    default_message = "Failed to generate shopping list. Please try again."
