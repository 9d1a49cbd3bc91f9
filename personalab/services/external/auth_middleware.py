"""
Authentication dependencies for the FastAPI application.

Callers identify themselves with a bearer token, either an HS256 JWT signed
with ``AUTH_JWT_SECRET`` or, when enabled, a ``dev_test_token_<user_id>``
development token.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from personalab.domain.exceptions import Unauthenticated
from personalab.infrastructure.config.settings import settings

# Configure logging
logger = logging.getLogger(__name__)

DEFAULT_DISPLAY_NAME = "User"

# Security scheme; a missing header is not an error for read-only routes
security = HTTPBearer(
    scheme_name="Bearer Authentication",
    description="Enter your bearer token",
    auto_error=False,
)


@dataclass(frozen=True)
class CurrentUser:
    id: str
    email: Optional[str] = None
    display_name: str = DEFAULT_DISPLAY_NAME


def resolve_display_name(claims: Mapping[str, Any]) -> str:
    """Author name shown on personas: full_name, then name, then email."""
    for key in ("full_name", "name", "email"):
        value = claims.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return DEFAULT_DISPLAY_NAME


def _user_from_claims(claims: Mapping[str, Any]) -> CurrentUser:
    user_id = claims.get("sub")
    if not user_id:
        raise Unauthenticated("Token has no subject.")
    return CurrentUser(
        id=str(user_id),
        email=claims.get("email"),
        display_name=resolve_display_name(claims),
    )


def authenticate_token(token: str) -> CurrentUser:
    """
    Resolve a bearer token to a user.

    Raises:
        Unauthenticated: empty, malformed, expired or unaccepted token
    """
    if not token:
        logger.warning("Authentication failed: Empty token")
        raise Unauthenticated("Invalid authentication credentials.")

    if settings.enable_dev_tokens and token.startswith(settings.dev_token_prefix):
        user_id = token[len(settings.dev_token_prefix):]
        if not user_id:
            raise Unauthenticated("Development token has no user id.")
        logger.info(f"Development token used with user_id: {user_id}")
        return CurrentUser(id=user_id)

    if not settings.auth_jwt_secret:
        logger.warning("Authentication failed: JWT validation is not configured")
        raise Unauthenticated("Invalid authentication credentials.")

    try:
        claims = jwt.decode(
            token,
            settings.auth_jwt_secret,
            algorithms=[settings.auth_jwt_algorithm],
            options={"verify_aud": False},
        )
    except JWTError as e:
        logger.warning(f"Authentication failed: {str(e)}")
        raise Unauthenticated("Invalid authentication credentials.") from None

    return _user_from_claims(claims)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[CurrentUser]:
    """
    Dependency returning the caller, or None for anonymous requests.

    A token that is present but invalid is rejected rather than treated as
    anonymous.
    """
    if credentials is None:
        return None
    return authenticate_token(credentials.credentials)


async def require_user(
    user: Optional[CurrentUser] = Depends(get_current_user),
) -> CurrentUser:
    """Dependency for routes that need an authenticated caller."""
    if user is None:
        raise Unauthenticated()
    return user
