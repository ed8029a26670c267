"""
Security primitives - password hashing and JWT handling.

Both services are built from Settings so the secret, expiry and work factor
are fixed at construction time.
"""

from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends
from jose import jwt
from passlib.context import CryptContext

from jobsearch.core.config import Settings, get_settings


class PasswordHasher:
    """bcrypt hashing with the configured work factor."""

    def __init__(self, settings: Settings):
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=settings.bcrypt_salt_rounds,
        )

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, plain_password: str, hashed_password: Optional[str]) -> bool:
        if not hashed_password:
            return False
        return self._context.verify(plain_password, hashed_password)


class TokenService:
    """Signs and verifies identity credentials."""

    def __init__(self, settings: Settings):
        self._secret = settings.jwt_secret_key
        self._algorithm = settings.jwt_algorithm
        self._expire = timedelta(minutes=settings.jwt_expire_minutes)

    def create_access_token(self, data: dict, expires_delta: Optional[timedelta] = None) -> str:
        """Create JWT access token."""
        to_encode = data.copy()
        to_encode["exp"] = datetime.utcnow() + (expires_delta or self._expire)
        return jwt.encode(to_encode, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> dict:
        """
        Decode and verify a token.

        Raises:
            JWTError on bad signature, expiry or malformed input
        """
        return jwt.decode(token, self._secret, algorithms=[self._algorithm])


def get_password_hasher(settings: Settings = Depends(get_settings)) -> PasswordHasher:
    return PasswordHasher(settings)


def get_token_service(settings: Settings = Depends(get_settings)) -> TokenService:
    return TokenService(settings)
