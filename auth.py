import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import httpx
from supabase import AuthError

logger = logging.getLogger(__name__)


class AuthStatus(str, Enum):
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


@dataclass(frozen=True)
class AuthResult:
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _error_message(exc: Exception) -> str:
    return getattr(exc, "message", None) or str(exc) or type(exc).__name__


class AuthContext:
    """Session holder around the Supabase auth client.

    One instance is built per browser session and handed to every view. Until
    ``resolve()`` runs the status is LOADING and views must not load data.
    """

    def __init__(self, client):
        self._client = client
        self.session: Any = None
        self.user: Any = None
        self.status = AuthStatus.LOADING

    def _apply_session(self, session) -> None:
        self.session = session
        self.user = getattr(session, "user", None) if session else None
        self.status = AuthStatus.AUTHENTICATED if session else AuthStatus.UNAUTHENTICATED

    def resolve(self) -> AuthStatus:
        try:
            session = self._client.auth.get_session()
        except (AuthError, httpx.HTTPError) as e:
            logger.error("Could not read auth session: %s", _error_message(e))
            session = None
        self._apply_session(session)
        return self.status

    @property
    def is_loading(self) -> bool:
        return self.status == AuthStatus.LOADING

    @property
    def is_authenticated(self) -> bool:
        return self.status == AuthStatus.AUTHENTICATED

    @property
    def user_id(self) -> Optional[str]:
        return getattr(self.user, "id", None)

    @property
    def email(self) -> Optional[str]:
        return getattr(self.user, "email", None)

    @property
    def company_name(self) -> Optional[str]:
        metadata = getattr(self.user, "user_metadata", None) or {}
        return metadata.get("company_name")

    def sign_in_with_password(self, email: str, password: str) -> AuthResult:
        try:
            response = self._client.auth.sign_in_with_password({"email": email, "password": password})
        except (AuthError, httpx.HTTPError) as e:
            message = _error_message(e)
            logger.warning("Sign in error: %s", message)
            return AuthResult(error=message)

        session = getattr(response, "session", None)
        if session is None:
            return AuthResult(error="Sign in did not return a session")
        self._apply_session(session)
        if getattr(response, "user", None) is not None:
            self.user = response.user
        return AuthResult()

    def sign_out(self) -> None:
        try:
            self._client.auth.sign_out()
        except (AuthError, httpx.HTTPError) as e:
            logger.warning("Sign out error: %s", _error_message(e))
        self._apply_session(None)

    def update_user_company_name(self, company_name: str) -> AuthResult:
        if self.user is None:
            return AuthResult(error="User not authenticated")
        try:
            response = self._client.auth.update_user({"data": {"company_name": company_name}})
        except (AuthError, httpx.HTTPError) as e:
            message = _error_message(e)
            logger.error("Error updating company name: %s", message)
            return AuthResult(error=message)

        if getattr(response, "user", None) is not None:
            self.user = response.user
        return AuthResult()
