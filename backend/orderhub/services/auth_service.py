# Overview: Credential verification, sign-up and signed access tokens.

"""
Authentication Service

WHY: Every use case takes an explicit Identity. This module is the only
place that turns a username/password or a bearer token into one.

SECURITY NOTES:
- Passwords hashed with bcrypt (cost factor from BCRYPT_ROUNDS, default 12)
- Unknown user, wrong password, inactive and deleted accounts all fail
  with the same 401 message, so callers cannot probe which usernames exist
- Tokens are signed with SECRET_KEY (itsdangerous) and carry sub (the
  numeric id), username, email and role. They expire after TOKEN_EXPIRY_MINUTES.
- The password hash never leaves this module
"""

from contextlib import nullcontext
from datetime import datetime, timedelta

import bcrypt
from flask import current_app
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from ..observability import app_logger, get_observer
from ..persistence import UnitOfWork
from ..responses import BaseResponse, ErrorCode
from ..schemas import Identity, LoginResponseDto, Role, SignUpDto
from ..validation import ValidationError, validate_sign_up
from orderhub.time_utils import utcnow


INVALID_CREDENTIALS = "Invalid username or password"


class AuthenticationError(Exception):
    """Raised when a token or credential cannot be turned into an Identity."""


def hash_password(password: str) -> str:
    """
    Hash password using bcrypt.

    WHY configurable rounds: production uses 12, the test suite lowers it
    to keep runs fast. The stored hash records its own cost, so mixing is safe.
    """
    rounds = int(current_app.config.get("BCRYPT_ROUNDS", 12))
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    WHY timing-safe: bcrypt.checkpw() compares in constant time.
    A malformed hash is a failed verification, not an error.
    """
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


# =============================================================================
# TOKENS
# =============================================================================

def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(
        current_app.config["SECRET_KEY"],
        salt=current_app.config.get("TOKEN_SALT", "orderhub-access-token"),
    )


def _token_lifetime() -> timedelta:
    return timedelta(minutes=int(current_app.config.get("TOKEN_EXPIRY_MINUTES", 60)))


def issue_token(identity: Identity) -> tuple[str, datetime]:
    """Sign a token for `identity`. Returns (token, expires_at)."""
    claims = {
        "sub": identity.id,
        "username": identity.username,
        "email": identity.email,
        "role": identity.role.value,
    }
    token = _serializer().dumps(claims)
    return token, utcnow() + _token_lifetime()


def decode_token(token: str) -> Identity:
    """
    Verify signature and age, and rebuild the Identity.

    Raises AuthenticationError if the token is expired, tampered with,
    or does not carry a usable identity.
    """
    max_age = int(_token_lifetime().total_seconds())
    try:
        claims = _serializer().loads(token, max_age=max_age)
    except SignatureExpired:
        raise AuthenticationError("Token has expired")
    except BadSignature:
        raise AuthenticationError("Invalid token")

    try:
        identity = Identity(
            id=int(claims["sub"]),
            username=str(claims["username"]),
            email=str(claims["email"]),
            role=Role(claims["role"]),
        )
    except (KeyError, TypeError, ValueError):
        raise AuthenticationError("Invalid token")

    if identity.id <= 0:
        raise AuthenticationError("Invalid token")
    return identity


def identity_from_bearer(authorization: str | None) -> Identity | None:
    """Identity from an "Authorization: Bearer <token>" header value, or None."""
    if not authorization or not authorization.startswith("Bearer "):
        return None
    try:
        return decode_token(authorization.split(" ", 1)[1].strip())
    except AuthenticationError:
        return None


# =============================================================================
# USE CASES
# =============================================================================

def _observed(name: str, activity: str, run, observer=None) -> BaseResponse:
    """
    Anonymous counterpart of decorators.use_case: there is no Identity yet,
    so the observer sees identity=None.

    SECURITY: any exception (including a token signing failure) is logged
    and reported as a generic 500 envelope.
    """
    observer = observer or get_observer()
    observer.on_start(name, None)
    try:
        response = run()
    except Exception as e:
        app_logger().exception("Failed to run %s", name)
        observer.on_failure(name, None, exc=e)
        return BaseResponse.error(f"An error occurred during {activity}", ErrorCode.INTERNAL)

    if response.ok:
        observer.on_success(name, None, response)
    else:
        observer.on_failure(name, None, response=response)
    return response


def authenticate(username: str, password: str, *, uow=None, observer=None) -> BaseResponse:
    """
    Authenticate and issue a token.

    Returns LoginResponseDto on success; 401 with a single generic message
    for every credential failure.
    """
    return _observed("authenticate", "login", lambda: _authenticate(username, password, uow), observer)


def _authenticate(username, password, uow) -> BaseResponse:
    if not username or not password:
        return BaseResponse.error(INVALID_CREDENTIALS, ErrorCode.UNAUTHENTICATED)

    with (nullcontext(uow) if uow is not None else UnitOfWork()) as work:
        result = work.accounts.get_login_by_username(username.strip())

    if result.error_code == ErrorCode.NOT_FOUND:
        return BaseResponse.error(INVALID_CREDENTIALS, ErrorCode.UNAUTHENTICATED)
    if not result.ok:
        return BaseResponse.error("An error occurred during login", result.error_code)

    record = result.data
    if not record.is_active or record.is_deleted:
        return BaseResponse.error(INVALID_CREDENTIALS, ErrorCode.UNAUTHENTICATED)
    if not verify_password(password, record.password_hash):
        return BaseResponse.error(INVALID_CREDENTIALS, ErrorCode.UNAUTHENTICATED)

    identity = record.to_identity()
    token, expires_at = issue_token(identity)
    return BaseResponse.success(
        LoginResponseDto(token=token, user=identity, expires_at=expires_at),
        "Login successful",
    )


def register(
    username: str,
    email: str,
    password: str,
    confirm_password: str | None = None,
    *,
    uow=None,
    observer=None,
) -> BaseResponse:
    """
    Sign up a new (non-admin) user. No token is issued.

    confirm_password defaults to password for callers that confirm elsewhere
    (e.g., the CLI prompt). 400 on invalid input, 409 when the username or
    email is taken.
    """
    confirm = password if confirm_password is None else confirm_password
    return _observed(
        "register",
        "registration",
        lambda: _register(username, email, password, confirm, uow),
        observer,
    )


def _register(username, email, password, confirm_password, uow) -> BaseResponse:
    try:
        dto = validate_sign_up(SignUpDto(
            username=username,
            email=email,
            password=password,
            confirm_password=confirm_password,
        ))
    except ValidationError as e:
        return BaseResponse.error(str(e), ErrorCode.VALIDATION_FAILED)

    password_hash = hash_password(dto.password)
    with (nullcontext(uow) if uow is not None else UnitOfWork()) as work:
        result = work.accounts.create_user(dto.username, dto.email, password_hash)

    if result.error_code == ErrorCode.CONFLICT:
        return BaseResponse.error("Username or email already exists", ErrorCode.CONFLICT)
    if not result.ok:
        return BaseResponse.error("Registration failed", result.error_code)
    return BaseResponse.success(result.data, "User registered successfully")
