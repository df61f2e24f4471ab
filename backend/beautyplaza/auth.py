"""
Password hashing and bearer tokens.

Tokens are HS256 JWTs whose ``sub`` is the account email; role checks happen
later in ``api.dependencies.auth`` once the user row is loaded.
"""

from datetime import datetime, timedelta, timezone
import logging
from typing import Any, Dict, Optional, cast

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
import jwt
from jwt import PyJWTError
from passlib.context import CryptContext

from .core.config import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)


def _signing_key() -> str:
    return settings.secret_key.get_secret_value()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bool(pwd_context.verify(plain_password, hashed_password))
    except ValueError as e:
        # unknown or corrupt hash in the users table
        logger.error(f"Error verifying password: {str(e)}")
        return False


def get_password_hash(password: str) -> str:
    return str(pwd_context.hash(password))


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign ``data`` into a JWT.

    Expiry defaults to ``ACCESS_TOKEN_EXPIRE_MINUTES`` from settings.
    """
    issued_at = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims = {**data, "iat": issued_at, "exp": issued_at + lifetime}

    token = jwt.encode(claims, _signing_key(), algorithm=settings.algorithm)
    logger.info(f"Issued access token for {data.get('sub')}")
    return str(token)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Raises PyJWTError for bad signatures and expired tokens."""
    return cast(Dict[str, Any], jwt.decode(token, _signing_key(), algorithms=[settings.algorithm]))


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(token: Optional[str] = Depends(oauth2_scheme)) -> str:
    """Resolve the bearer token to the caller's email or fail with 401."""
    if not token:
        raise _unauthorized("Not authenticated")

    try:
        subject = decode_access_token(token).get("sub")
    except PyJWTError as e:
        logger.warning(f"Rejected bearer token: {str(e)}")
        raise _unauthorized("Could not validate credentials")

    if not isinstance(subject, str) or not subject:
        raise _unauthorized("Could not validate credentials")
    return subject
