"""Identity provider adapter (Firebase Identity Toolkit REST API).

Holds the signed-in user the same way the Firebase client SDK does: every
successful sign-up / sign-in replaces ``current_user`` and ``sign_out`` clears
it. Provider failures are raised as :class:`IdentityProviderError` carrying a
normalised ``auth/*`` code.
"""

from typing import Any, Dict, Optional
import logging

import httpx
from pydantic import BaseModel

logger = logging.getLogger("whatcanicook.identity")

# Identity Toolkit error strings -> client SDK style codes
PROVIDER_ERROR_CODES = {
    "EMAIL_EXISTS": "auth/email-already-in-use",
    "INVALID_EMAIL": "auth/invalid-email",
    "WEAK_PASSWORD": "auth/weak-password",
    "EMAIL_NOT_FOUND": "auth/user-not-found",
    "INVALID_PASSWORD": "auth/wrong-password",
    "INVALID_LOGIN_CREDENTIALS": "auth/invalid-credential",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "auth/too-many-requests",
    "USER_DISABLED": "auth/user-disabled",
    "INVALID_ID_TOKEN": "auth/invalid-user-token",
    "TOKEN_EXPIRED": "auth/user-token-expired",
    "USER_NOT_FOUND": "auth/user-not-found",
    "OPERATION_NOT_ALLOWED": "auth/operation-not-allowed",
}


class IdentityProviderError(Exception):
    """Raised when the identity provider rejects a request or cannot be reached."""

    def __init__(self, code: str, message: Optional[str] = None):
        super().__init__(message or code)
        self.code = code
        self.message = message or code


class AuthSession(BaseModel):
    """Authenticated session handle returned by sign-up and sign-in."""

    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    id_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None


def provider_error_code(message: str) -> str:
    """Map an Identity Toolkit error message to an ``auth/*`` code.

    Messages look like ``"WEAK_PASSWORD : Password should be at least 6
    characters"``; only the leading token identifies the error.
    """
    token = (message or "").split(":", 1)[0].strip()
    if token in PROVIDER_ERROR_CODES:
        return PROVIDER_ERROR_CODES[token]
    return "auth/" + token.lower().replace("_", "-") if token else "auth/internal-error"


class IdentityClient:
    """Email/password accounts on the hosted identity service."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://identitytoolkit.googleapis.com/v1",
        timeout: float = 10.0,
        http_client: Optional[httpx.Client] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._http = http_client or httpx.Client(timeout=timeout)
        self.current_user: Optional[AuthSession] = None

    def close(self):
        self._http.close()

    # ------------------ Requests ------------------
    def _post(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        if not self.api_key:
            raise IdentityProviderError("auth/invalid-api-key", "Identity API key is not configured")

        url = f"{self.base_url}/accounts:{endpoint}"
        try:
            response = self._http.post(url, params={"key": self.api_key}, json=payload)
        except httpx.TransportError as exc:
            logger.warning("Identity request %s failed: %s", endpoint, exc)
            raise IdentityProviderError("auth/network-request-failed", str(exc)) from exc

        if response.is_success:
            return response.json()

        try:
            message = response.json().get("error", {}).get("message", "")
        except ValueError:
            message = ""
        code = provider_error_code(message)
        logger.info("Identity request %s rejected: %s (%s)", endpoint, message, code)
        raise IdentityProviderError(code, message or f"HTTP {response.status_code}")

    @staticmethod
    def _session(data: Dict[str, Any], fallback: Optional[AuthSession] = None) -> AuthSession:
        expires_in = data.get("expiresIn")
        return AuthSession(
            uid=data.get("localId") or (fallback.uid if fallback else ""),
            email=data.get("email") or (fallback.email if fallback else None),
            display_name=data.get("displayName") or (fallback.display_name if fallback else None),
            id_token=data.get("idToken") or (fallback.id_token if fallback else ""),
            refresh_token=data.get("refreshToken") or (fallback.refresh_token if fallback else None),
            expires_in=int(expires_in) if expires_in else None,
        )

    # ------------------ Operations ------------------
    def create_user(self, email: str, password: str) -> AuthSession:
        """Register an email/password account and sign it in."""
        data = self._post(
            "signUp", {"email": email, "password": password, "returnSecureToken": True}
        )
        self.current_user = self._session(data)
        logger.info("Identity account created uid=%s", self.current_user.uid)
        return self.current_user

    def sign_in(self, email: str, password: str) -> AuthSession:
        data = self._post(
            "signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        self.current_user = self._session(data)
        return self.current_user

    def update_profile(self, session: AuthSession, display_name: str) -> AuthSession:
        """Set the account's display name."""
        data = self._post(
            "update",
            {"idToken": session.id_token, "displayName": display_name, "returnSecureToken": False},
        )
        updated = self._session(data, fallback=session).model_copy(
            update={"display_name": display_name}
        )
        if self.current_user is not None and self.current_user.uid == updated.uid:
            self.current_user = updated
        return updated

    def lookup(self, id_token: str) -> AuthSession:
        """Resolve an ID token to the account it belongs to."""
        data = self._post("lookup", {"idToken": id_token})
        users = data.get("users") or []
        if not users:
            raise IdentityProviderError("auth/user-not-found")
        user = users[0]
        return AuthSession(
            uid=user["localId"],
            email=user.get("email"),
            display_name=user.get("displayName"),
            id_token=id_token,
        )

    def fork(self) -> "IdentityClient":
        """Signed-out client sharing this one's connection pool."""
        return IdentityClient(self.api_key, self.base_url, http_client=self._http)

    def for_token(self, id_token: str) -> "IdentityClient":
        """Client sharing this one's connection pool, signed in as the token's owner."""
        bound = self.fork()
        bound.current_user = self.lookup(id_token)
        return bound

    def sign_out(self):
        """Forget the signed-in user. ID tokens are stateless, so nothing is sent."""
        self.current_user = None
