"""
Password hashing and bearer token primitives.

Tokens are HS256 JWTs carrying ``sub`` (user id), ``email`` and ``role``
with a 24 hour default lifetime.
"""

from datetime import datetime, timedelta, timezone
import logging
from typing import Any, Dict, Optional, cast

from fastapi.security import OAuth2PasswordBearer
import jwt
from jwt import PyJWTError
from passlib.context import CryptContext

from .core.config import settings
from .core.enums import Role
from .core.exceptions import ForbiddenException, UnauthorizedException
from .principal import UserPrincipal

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Valid bcrypt hash checked when the user does not exist, so a missing
# account costs the same time as a wrong password.
DUMMY_HASH_FOR_TIMING_ATTACK = "$2b$12$LQv3c1yqBWVHxkd0LHAkCOYz6TtxMQJqhN8/X4.V4ferVKnNaOuJi"

oauth2_scheme_optional = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)

TOKEN_MISSING_MESSAGE = "Access denied. No token provided."
TOKEN_INVALID_MESSAGE = "Invalid or expired token."


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Returns False (rather than raising) for malformed hashes.
    """
    try:
        return bool(pwd_context.verify(plain_password, hashed_password))
    except (ValueError, TypeError) as e:
        logger.error(f"Error verifying password: {str(e)}")
        return False


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt (salted)."""
    return str(pwd_context.hash(password))


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed JWT access token.

    Args:
        data: Claims to encode; ``sub`` should hold the user id
        expires_delta: Optional lifetime, defaults to the configured expiry

    Returns:
        str: The encoded JWT token
    """
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    to_encode.update({"exp": expire, "iat": now})

    encoded_jwt = cast(
        str,
        jwt.encode(
            to_encode,
            settings.secret_key.get_secret_value(),
            algorithm=settings.algorithm,
        ),
    )
    logger.debug(f"Created access token for user: {data.get('sub')}")
    return encoded_jwt


def decode_access_token(token: str) -> Dict[str, Any]:
    """Decode and verify signature and expiry; raises PyJWTError on failure."""
    payload = jwt.decode(
        token,
        settings.secret_key.get_secret_value(),
        algorithms=[settings.algorithm],
    )
    return cast(Dict[str, Any], payload)


def create_token_for(principal: UserPrincipal, expires_delta: Optional[timedelta] = None) -> str:
    return create_access_token(principal.to_claims(), expires_delta)


def verify_token(token: Optional[str]) -> UserPrincipal:
    """
    Turn a bearer token into a verified principal.

    Raises:
        UnauthorizedException: no token supplied
        ForbiddenException: bad signature, expired, or malformed claims
    """
    if not token:
        raise UnauthorizedException(TOKEN_MISSING_MESSAGE, code="TOKEN_MISSING")

    try:
        payload = decode_access_token(token)
    except PyJWTError as e:
        logger.info(f"Rejected bearer token: {str(e)}")
        raise ForbiddenException(TOKEN_INVALID_MESSAGE, code="TOKEN_INVALID") from e

    user_id = payload.get("sub")
    email = payload.get("email")
    try:
        role = Role(payload.get("role"))
    except ValueError as e:
        raise ForbiddenException(TOKEN_INVALID_MESSAGE, code="TOKEN_INVALID") from e
    if not isinstance(user_id, str) or not isinstance(email, str):
        raise ForbiddenException(TOKEN_INVALID_MESSAGE, code="TOKEN_INVALID")

    return UserPrincipal(user_id=user_id, email=email, role=role)
