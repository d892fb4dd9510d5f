"""
Larder Backend — Accounts & Tokens
===================================

What:  Registration, login and bearer-token verification.
How:   Passwords are hashed with bcrypt (fixed cost factor); sessions are
       stateless HS256 JWTs signed with the server secret, carrying
       {id, email, username, iat, exp}.
Who:   POST /register and POST /login call the service directly; every
       protected route reaches `verify_token()` through
       `dependencies.require_identity`.

Token lifecycle:
    login() ──sign──► token (valid token_ttl_minutes) ──► Authorization header
                                                             │
    verify_token() ◄─────────────────────────────────────────┘
        missing      → MissingTokenError (403)
        bad/expired  → AuthError("Invalid token") (401)
        ok           → Identity(id, email, username)
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt
import pydantic
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from larder.exceptions import (
    AuthError,
    ConflictError,
    InternalError,
    MissingTokenError,
    ValidationError,
)
from larder.repository import Repository
from larder.schemas.auth import Identity, LoginResponse, RegisterResponse

logger = logging.getLogger(__name__)

# bcrypt ignores everything past 72 bytes; newer releases refuse longer input.
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = 10) -> str:
    """Hash a password with a fresh salt. Returns the encoded hash as text."""
    hashed = bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison of a password against a stored hash."""
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_token(
    identity: Identity,
    secret_key: str,
    algorithm: str = "HS256",
    ttl_minutes: int = 60,
) -> str:
    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = {
        "id": identity.id,
        "email": identity.email,
        "username": identity.username,
        "iat": now,
        "exp": now + timedelta(minutes=ttl_minutes),
    }
    return jwt.encode(payload, secret_key, algorithm=algorithm)


def decode_token(token: str, secret_key: str, algorithm: str = "HS256") -> Identity:
    """
    Verify signature and expiry, then read the identity claims.

    Raises:
        AuthError: Any signature, expiry, format or claim-shape problem.
    """
    try:
        claims = jwt.decode(token, secret_key, algorithms=[algorithm])
        return Identity.model_validate(claims)
    except (jwt.InvalidTokenError, pydantic.ValidationError) as e:
        raise AuthError(
            message="Invalid token",
            context={"reason": type(e).__name__},
        ) from e


class AuthService:
    """Account creation, credential checks and token handling."""

    def __init__(
        self,
        repository: Repository,
        secret_key: str,
        algorithm: str = "HS256",
        token_ttl_minutes: int = 60,
        bcrypt_rounds: int = 10,
    ):
        self.repository = repository
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.token_ttl_minutes = token_ttl_minutes
        self.bcrypt_rounds = bcrypt_rounds

    async def register(
        self,
        username: Optional[str],
        email: Optional[str],
        password: Optional[str],
    ) -> RegisterResponse:
        """
        Create an account.

        Raises:
            ValidationError: A field is missing or empty.
            ConflictError: The email is already registered.
            InternalError: Hashing or the insert failed.
        """
        if not username or not email or not password:
            raise ValidationError(message="Please fill all fields")

        try:
            existing = await self.repository.get_user_by_email(email)
        except SQLAlchemyError as e:
            logger.error("User lookup failed during registration: %s", str(e))
            raise InternalError(message="Registration failed") from e
        if existing is not None:
            raise ConflictError(message="Email already registered")

        try:
            # bcrypt is CPU-bound; run it off the event loop
            password_hash = await asyncio.to_thread(
                hash_password, password, self.bcrypt_rounds
            )
        except Exception as e:
            logger.error("Password hashing failed: %s", str(e))
            raise InternalError(message="Error hashing password") from e

        try:
            user = await self.repository.create_user(
                username=username, email=email, password_hash=password_hash
            )
        except IntegrityError as e:
            # A concurrent registration took the email between lookup and insert
            raise ConflictError(message="Email already registered") from e
        except SQLAlchemyError as e:
            logger.error("User insert failed: %s", str(e))
            raise InternalError(message="Registration failed") from e

        logger.info("User registered: id=%d", user.id)
        return RegisterResponse(user_id=user.id)

    async def login(self, email: Optional[str], password: Optional[str]) -> LoginResponse:
        """
        Check credentials and issue a token.

        Unknown email and wrong password both raise the same
        AuthError("Invalid credentials").
        """
        if not email or not password:
            raise ValidationError(message="Please fill all fields")

        try:
            user = await self.repository.get_user_by_email(email)
        except SQLAlchemyError as e:
            logger.error("User lookup failed during login: %s", str(e))
            raise AuthError() from e
        if user is None:
            raise AuthError()

        matched = await asyncio.to_thread(verify_password, password, user.password_hash)
        if not matched:
            logger.info("Failed login for user id=%d", user.id)
            raise AuthError()

        identity = Identity(id=user.id, email=user.email, username=user.username)
        token = create_token(
            identity,
            self.secret_key,
            algorithm=self.algorithm,
            ttl_minutes=self.token_ttl_minutes,
        )
        return LoginResponse(
            id=user.id, email=user.email, username=user.username, token=token
        )

    def verify_token(self, token: Optional[str]) -> Identity:
        """
        Resolve the raw Authorization header value to an Identity.

        Raises:
            MissingTokenError: No token was presented.
            AuthError: The token is invalid or expired.
        """
        if not token:
            raise MissingTokenError()
        return decode_token(token, self.secret_key, self.algorithm)
