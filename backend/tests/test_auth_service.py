# Overview: Pytest coverage for credential verification, sign-up and access tokens.

"""
Authentication Tests

SECURITY TESTS:
1. Wrong password, unknown user, inactive and deleted accounts are
   indistinguishable (same 401 message)
2. Tokens round-trip to the same Identity and reject tampering/expiry
3. The password hash never appears in a response
"""

import pytest
from orderhub.models import Login
from orderhub.schemas import Identity, Role
from orderhub.services import auth_service
from orderhub.services.auth_service import (
    INVALID_CREDENTIALS,
    AuthenticationError,
    decode_token,
    hash_password,
    identity_from_bearer,
    issue_token,
    verify_password,
)


def _sign_up(username="carol", email="carol@example.com", password="hunter22", confirm=None):
    return auth_service.register(username, email, password, confirm if confirm is not None else password)


class TestPasswordHashing:

    def test_hash_and_verify(self, app):
        hashed = hash_password("correct horse")
        assert hashed.startswith("$2")
        assert verify_password("correct horse", hashed)
        assert not verify_password("wrong horse", hashed)

    def test_malformed_hash_fails_closed(self, app):
        assert not verify_password("anything", "not-a-bcrypt-hash")
        assert not verify_password("anything", "")


class TestLogin:

    def test_successful_login(self, db_session, login_factory):
        login = login_factory("dave", password="s3cret-pass", is_admin=True)

        response = auth_service.authenticate("dave", "s3cret-pass")

        assert response.ok
        assert response.data.user == Identity(id=login.id, username="dave", email="dave@example.com", role=Role.ADMIN)
        assert decode_token(response.data.token) == response.data.user

    def test_login_is_case_insensitive_on_username(self, db_session, login_factory):
        login_factory("Erin", password="erin-pass")
        assert auth_service.authenticate("erin", "erin-pass").ok

    def test_regular_user_role(self, db_session, login_factory):
        login_factory("frank", password="frank-pass")
        assert auth_service.authenticate("frank", "frank-pass").data.user.role == Role.USER

    def test_response_never_contains_hash(self, db_session, login_factory):
        login = login_factory("gina", password="gina-pass")

        payload = auth_service.authenticate("gina", "gina-pass").to_dict()

        assert login.password_hash not in repr(payload)
        assert set(payload["data"]) == {"token", "user", "expiresAt"}

    @pytest.mark.parametrize(
        "username,password,overrides",
        [
            ("henry", "wrong-pass", {}),
            ("nobody", "henry-pass", {}),
            ("henry", "henry-pass", {"is_active": False}),
            ("henry", "henry-pass", {"is_deleted": True}),
            ("", "henry-pass", {}),
            ("henry", "", {}),
        ],
    )
    def test_failures_are_indistinguishable(self, db_session, login_factory, username, password, overrides):
        login_factory("henry", password="henry-pass", **overrides)

        response = auth_service.authenticate(username, password)

        assert response.error_code == 401
        assert response.message == INVALID_CREDENTIALS
        assert response.data is None


class TestRegister:

    def test_register(self, db_session):
        response = _sign_up()

        assert response.ok, response.message
        assert response.data.username == "carol"
        row = db_session.query(Login).filter_by(username="carol").one()
        assert not row.is_admin
        assert verify_password("hunter22", row.password_hash)
        assert auth_service.authenticate("carol", "hunter22").ok

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"username": "carol", "email": "other@example.com"},
            {"username": "someone", "email": "carol@example.com"},
            {"username": "CAROL", "email": "x@example.com"},
        ],
    )
    def test_duplicates_conflict(self, db_session, kwargs):
        assert _sign_up().ok

        response = _sign_up(**kwargs)
        assert response.error_code == 409

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"username": "ab"},
            {"email": "not-an-email"},
            {"password": "short"},
            {"confirm": "different"},
        ],
    )
    def test_invalid_sign_up(self, db_session, kwargs):
        response = _sign_up(**kwargs)

        assert response.error_code == 400
        assert db_session.query(Login).count() == 0


class TestTokens:

    IDENTITY = Identity(id=7, username="ivy", email="ivy@example.com", role=Role.USER)

    def test_round_trip(self, app):
        token, expires_at = issue_token(self.IDENTITY)
        assert decode_token(token) == self.IDENTITY
        assert expires_at is not None

    def test_tampered_token(self, app):
        token, _ = issue_token(self.IDENTITY)
        tampered = ("f" if token[0] != "f" else "g") + token[1:]
        with pytest.raises(AuthenticationError):
            decode_token(tampered)

    def test_token_from_other_secret(self, app, monkeypatch):
        token, _ = issue_token(self.IDENTITY)
        monkeypatch.setitem(app.config, "SECRET_KEY", "rotated-secret")
        with pytest.raises(AuthenticationError):
            decode_token(token)

    def test_expired_token(self, app, monkeypatch):
        token, _ = issue_token(self.IDENTITY)
        monkeypatch.setitem(app.config, "TOKEN_EXPIRY_MINUTES", -1)
        with pytest.raises(AuthenticationError, match="expired"):
            decode_token(token)

    def test_bearer_header(self, app):
        token, _ = issue_token(self.IDENTITY)
        assert identity_from_bearer(f"Bearer {token}") == self.IDENTITY
        assert identity_from_bearer(token) is None
        assert identity_from_bearer("Bearer garbage") is None
        assert identity_from_bearer(None) is None


class TestAuthUseCaseEvents:

    def test_successful_login_is_observed(self, db_session, login_factory, observer):
        login_factory("kate", password="kate-pass")

        assert auth_service.authenticate("kate", "kate-pass", observer=observer).ok
        assert observer.events == [("start", "authenticate"), ("success", "authenticate")]

    def test_bad_password_is_observed_as_failure(self, db_session, login_factory, observer):
        login_factory("liam", password="liam-pass")

        response = auth_service.authenticate("liam", "nope-nope", observer=observer)

        assert response.error_code == 401
        assert observer.events == [("start", "authenticate"), ("failure", "authenticate")]

    def test_duplicate_sign_up_is_observed_as_failure(self, db_session, observer):
        assert _sign_up().ok

        response = auth_service.register(
            "carol", "carol2@example.com", "hunter22", "hunter22", observer=observer
        )

        assert response.error_code == 409
        assert observer.events == [("start", "register"), ("failure", "register")]

    def test_signing_failure_is_a_generic_500(self, db_session, login_factory, observer, monkeypatch):
        login_factory("mona", password="mona-pass")

        def broken_signer(identity):
            raise KeyError("SECRET_KEY")

        monkeypatch.setattr(auth_service, "issue_token", broken_signer)

        response = auth_service.authenticate("mona", "mona-pass", observer=observer)

        assert response.error_code == 500
        assert response.message == "An error occurred during login"
        assert response.data is None
        assert observer.events == [("start", "authenticate"), ("failure", "authenticate")]
