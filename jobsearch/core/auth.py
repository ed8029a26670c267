"""
Identity verification.

The caller presents a signed credential in the bare `token` header. auth()
builds a FastAPI dependency that recovers the Identity from it and optionally
enforces a role:

    @router.get("/protected", dependencies=[Depends(auth("Company_HR"))])

Verification is pure token work; the database is never consulted here.
"""

from enum import Enum
from typing import Callable, Optional

from fastapi import Depends, Header, Request
from jose import JWTError
from pydantic import BaseModel, ValidationError

from jobsearch.core.errors import INVALID_TOKEN, AppError
from jobsearch.core.logger import get_logger
from jobsearch.core.security import TokenService, get_token_service

logger = get_logger(__name__)


class Role(str, Enum):
    user = "User"
    company_hr = "Company_HR"


class Identity(BaseModel):
    """Authenticated caller, rebuilt from the credential on every request."""

    subject_id: str
    username: Optional[str] = None
    email: str
    role: Role

    @classmethod
    def from_claims(cls, claims: dict) -> "Identity":
        return cls(
            subject_id=claims.get("sub"),
            username=claims.get("username"),
            email=claims.get("email"),
            role=claims.get("role"),
        )

    def to_claims(self) -> dict:
        return {
            "sub": self.subject_id,
            "username": self.username,
            "email": self.email,
            "role": self.role.value,
        }


def auth(role: Optional[Role] = None) -> Callable:
    """
    Dependency factory - require a valid credential, and `role` when given.

    Failures:
        401 no credential, 498 invalid/expired credential, 403 wrong role
    """
    required = Role(role) if role is not None else None

    async def verify_identity(
        request: Request,
        token: Optional[str] = Header(None),
        tokens: TokenService = Depends(get_token_service),
    ) -> Identity:
        if not token:
            raise AppError("Please SignIn", 401)

        try:
            identity = Identity.from_claims(tokens.decode(token))
        except (JWTError, ValidationError):
            raise AppError("Invalid token", INVALID_TOKEN)

        if required is not None and identity.role != required:
            logger.info(
                "Role %s required, caller %s has %s",
                required.value, identity.subject_id, identity.role.value,
            )
            raise AppError("Not enough privileges", 403)

        request.state.user = identity
        return identity

    return verify_identity

