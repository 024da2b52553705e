"""Tests for password hashing, bearer tokens and login."""

import asyncio

import pytest
from datetime import timedelta

from finance_tracker.auth import PasswordHasher, TokenService
from finance_tracker.auth.service import AuthService
from finance_tracker.errors import AuthenticationFailedError
from finance_tracker.models import LoginInput, User, UserCreate


@pytest.fixture
def tokens(auth_settings):
    return TokenService(auth_settings)


@pytest.fixture
def auth(app, tokens):
    return AuthService(app.users, tokens, app.audit_logger)


@pytest.fixture
def user():
    return User(id="usr_1", name="Ana", username="ana", password_hash="x")


class TestPasswordHasher:
    """Tests for the passlib wrapper."""
    
    def test_hash_and_verify(self, hasher):
        password_hash = hasher.hash("secret1")
        assert password_hash != "secret1"
        assert hasher.verify("secret1", password_hash)
        assert not hasher.verify("secret2", password_hash)
    
    def test_unrecognised_hash_does_not_verify(self, hasher):
        assert hasher.verify("secret1", "not-a-hash") is False
    
    def test_hashes_are_salted(self, hasher):
        assert hasher.hash("secret1") != hasher.hash("secret1")


class TestTokenService:
    """Tests for issuing and verifying tokens."""
    
    def test_round_trip(self, tokens, user):
        identity = tokens.verify(tokens.issue(user))
        assert identity.id == "usr_1"
        assert identity.username == "ana"
        assert identity.name == "Ana"
    
    def test_expired_token_is_rejected(self, tokens, user):
        token = tokens.issue(user, expires_delta=timedelta(seconds=-60))
        with pytest.raises(AuthenticationFailedError):
            tokens.verify(token)
    
    def test_token_signed_with_other_secret_is_rejected(self, user, auth_settings):
        other = TokenService(auth_settings.model_copy(update={"jwt_secret": "other-secret"}))
        with pytest.raises(AuthenticationFailedError):
            TokenService(auth_settings).verify(other.issue(user))
    
    def test_garbage_is_rejected(self, tokens):
        with pytest.raises(AuthenticationFailedError):
            tokens.verify("not.a.token")


class TestAuthService:
    """Tests for login and caller authentication."""
    
    def _register(self, app):
        return asyncio.run(
            app.users.register(UserCreate(name="Ana", username="ana", password="secret1"))
        )
    
    def test_login_returns_token_for_the_user(self, app, auth):
        registered = self._register(app)
        result = asyncio.run(auth.login(LoginInput(username="Ana", password="secret1")))
    
        assert result.user == registered
        identity = asyncio.run(auth.verify_token(result.token))
        assert identity.id == registered.id
    
    def test_wrong_password_and_unknown_user_look_the_same(self, app, auth):
        self._register(app)
        with pytest.raises(AuthenticationFailedError) as wrong_password:
            asyncio.run(auth.login(LoginInput(username="ana", password="nope-nope")))
        with pytest.raises(AuthenticationFailedError) as unknown_user:
            asyncio.run(auth.login(LoginInput(username="bob", password="secret1")))
        assert wrong_password.value.message == unknown_user.value.message
    
    def test_authenticate_header(self, app, auth):
        self._register(app)
        result = asyncio.run(auth.login(LoginInput(username="ana", password="secret1")))
        identity = asyncio.run(auth.authenticate_header(f"Bearer {result.token}"))
        assert identity.username == "ana"
    
    @pytest.mark.parametrize("header", [None, "", "Bearer ", "Basic abc", "token"])
    def test_missing_or_malformed_header(self, auth, header):
        with pytest.raises(AuthenticationFailedError):
            asyncio.run(auth.authenticate_header(header))
    
    def test_tampered_token(self, app, auth):
        self._register(app)
        token = asyncio.run(auth.login(LoginInput(username="ana", password="secret1"))).token
        header, payload, signature = token.split(".")
        forged = "A" if signature[0] != "A" else "B"
        with pytest.raises(AuthenticationFailedError):
            asyncio.run(auth.verify_token(f"{header}.{payload}.{forged}{signature[1:]}"))


def test_default_hasher_uses_configured_schemes():
    hasher = PasswordHasher()
    assert hasher.verify("secret1", hasher.hash("secret1"))
