from types import SimpleNamespace

import httpx
from supabase import AuthError

from auth import AuthContext, AuthStatus


class InvalidCredentials(AuthError):
    def __init__(self, message):
        Exception.__init__(self, message)
        self.message = message


def _user(company_name=None):
    metadata = {"company_name": company_name} if company_name else {}
    return SimpleNamespace(id="user-1", email="owner@example.com", user_metadata=metadata)


class FakeAuth:
    def __init__(self, session=None, error=None):
        self.session = session
        self.error = error
        self.updates = []
        self.signed_out = False

    def get_session(self):
        if self.error:
            raise self.error
        return self.session

    def sign_in_with_password(self, credentials):
        if self.error:
            raise self.error
        self.session = SimpleNamespace(user=_user())
        return SimpleNamespace(session=self.session, user=self.session.user)

    def sign_out(self):
        self.signed_out = True
        if self.error:
            raise self.error

    def update_user(self, attributes):
        if self.error:
            raise self.error
        self.updates.append(attributes)
        return SimpleNamespace(user=_user(attributes["data"]["company_name"]))


def _context(**kwargs):
    return AuthContext(SimpleNamespace(auth=FakeAuth(**kwargs)))


def test_starts_loading_until_resolved():
    auth = _context()
    assert auth.is_loading
    assert auth.resolve() == AuthStatus.UNAUTHENTICATED
    assert not auth.is_loading


def test_resolve_picks_up_existing_session():
    auth = _context(session=SimpleNamespace(user=_user("Acme")))
    assert auth.resolve() == AuthStatus.AUTHENTICATED
    assert auth.user_id == "user-1"
    assert auth.company_name == "Acme"


def test_resolve_failure_means_signed_out():
    auth = _context(error=httpx.ConnectError("offline"))
    assert auth.resolve() == AuthStatus.UNAUTHENTICATED


def test_sign_in_success():
    auth = _context()
    auth.resolve()

    result = auth.sign_in_with_password("owner@example.com", "secret")

    assert result.ok
    assert auth.is_authenticated
    assert auth.email == "owner@example.com"


def test_sign_in_failure_returns_message():
    auth = _context(error=InvalidCredentials("Invalid login credentials"))
    auth.resolve()

    result = auth.sign_in_with_password("owner@example.com", "wrong")

    assert not result.ok
    assert result.error == "Invalid login credentials"
    assert auth.status == AuthStatus.UNAUTHENTICATED


def test_sign_out_clears_session_even_on_error():
    auth = _context(session=SimpleNamespace(user=_user()))
    auth.resolve()
    auth._client.auth.error = InvalidCredentials("session expired")

    auth.sign_out()

    assert auth._client.auth.signed_out
    assert auth.status == AuthStatus.UNAUTHENTICATED
    assert auth.user is None


def test_update_company_name_requires_user():
    auth = _context()
    auth.resolve()
    assert auth.update_user_company_name("Acme").error == "User not authenticated"


def test_update_company_name_refreshes_user():
    auth = _context(session=SimpleNamespace(user=_user("Old")))
    auth.resolve()

    result = auth.update_user_company_name("New Co")

    assert result.ok
    assert auth.company_name == "New Co"
    assert auth._client.auth.updates == [{"data": {"company_name": "New Co"}}]


def test_update_company_name_failure_keeps_user():
    auth = _context(session=SimpleNamespace(user=_user("Old")))
    auth.resolve()
    auth._client.auth.error = InvalidCredentials("update failed")

    result = auth.update_user_company_name("New Co")

    assert result.error == "update failed"
    assert auth.company_name == "Old"
