# switchboard/core/security.py

import logging
from typing import Any, Dict, Mapping, Optional

import jwt

from switchboard.core.config import settings

logger = logging.getLogger(__name__)


def extract_token(cookies: Mapping[str, str], headers: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Pull the signed token from the auth cookie, falling back to a bearer header."""
    token = cookies.get(settings.auth_cookie_name)
    if token:
        return token

    if headers is not None:
        authorization = headers.get("authorization") or ""
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials:
            return credentials.strip()

    return None


def decode_token(token: str) -> Dict[str, Any]:
    """
    Verify a token against the shared signing secret.
    Raises jwt.InvalidTokenError (expired, tampered, malformed).
    """
    return jwt.decode(
        token,
        settings.require_jwt_secret(),
        algorithms=[settings.jwt_algorithm],
    )


def resolve_user_id(token: Optional[str]) -> Optional[str]:
    """User id carried by a valid token, or None when absent or invalid."""
    if not token:
        return None

    try:
        claims = decode_token(token)
    except jwt.InvalidTokenError as e:
        logger.debug("Token rejected: %s", e)
        return None

    user_id = claims.get("id") or claims.get("sub")
    return str(user_id) if user_id else None
