from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel, ConfigDict
import bcrypt
import logging

from config import settings
from exceptions import Forbidden, InvalidSignature, TokenExpired, Unauthenticated
from models import Role

logger = logging.getLogger(__name__)

# Roles allowed through the "user or admin" gate
KNOWN_ROLES = frozenset(Role)


class TokenIdentity(BaseModel):
    """Identity claim carried inside an access token."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: Role


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash using bcrypt.

    Args:
        plain_password: The plain text password to verify
        hashed_password: The bcrypt hashed password to check against

    Returns:
        bool: True if password matches, False otherwise
    """
    try:
        return bcrypt.checkpw(
            plain_password.encode('utf-8'),
            hashed_password.encode('utf-8')
        )
    except ValueError as e:
        logger.warning(f"Error verifying password: {e}")
        return False


def get_password_hash(password: str) -> str:
    """
    Hash a password using bcrypt with salt.

    Args:
        password: The plain text password to hash

    Returns:
        str: The bcrypt hashed password
    """
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def create_access_token(identity, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed JWT for an account or TokenIdentity.

    The payload carries id, username and role plus iat/exp. Tokens expire
    after ACCESS_TOKEN_EXPIRE_HOURS unless expires_delta is given.
    """
    claim = TokenIdentity.model_validate(identity)
    issued_at = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS)
    to_encode = {
        "id": claim.id,
        "username": claim.username,
        "role": claim.role.value,
        "iat": issued_at,
        "exp": issued_at + expires_delta,
    }
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> TokenIdentity:
    """
    Verify a JWT and return the identity it carries.

    Raises TokenExpired or InvalidSignature; callers answer both the same way.
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise TokenExpired()
    except JWTError:
        raise InvalidSignature()

    try:
        return TokenIdentity(
            id=payload["id"],
            username=payload["username"],
            role=payload["role"],
        )
    except (KeyError, ValueError):
        raise InvalidSignature()


# Security scheme; missing credentials are reported by get_current_identity
security = HTTPBearer(auto_error=False)


async def get_current_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> TokenIdentity:
    """Authenticate the bearer token and attach the identity to the request."""
    if credentials is None:
        raise Unauthenticated()
    identity = verify_token(credentials.credentials)
    request.state.identity = identity
    return identity


async def require_admin(identity: TokenIdentity = Depends(get_current_identity)) -> TokenIdentity:
    if identity.role is not Role.ADMIN:
        raise Forbidden("Admin access required")
    return identity


async def require_user(identity: TokenIdentity = Depends(get_current_identity)) -> TokenIdentity:
    if identity.role not in KNOWN_ROLES:
        raise Forbidden("User access required")
    return identity
