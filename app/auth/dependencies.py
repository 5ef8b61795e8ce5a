# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Verifies Supabase Auth bearer tokens. Signing in happens client-side;
# this module only learns who the caller is.
#
# Supports both:
# - ES256 (new Supabase JWT signing keys) via JWKS
# - HS256 (legacy Supabase JWT secret) as fallback
#
# Usage:
#   from app.auth import get_current_user, get_viewer, AuthUser
#
#   @router.patch("/files/{file_id}/privacy")
#   def set_privacy(user: AuthUser = Depends(get_current_user)): ...
#
#   @router.get("/ideas/{idea_id}/files")
#   def list_files(viewer: AuthUser | None = Depends(get_viewer)): ...
# =============================================================================

import logging
import time
from typing import Any, Optional
from uuid import UUID

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from app.auth.models import AuthUser, UserRole
from app.config import Settings, get_settings

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor
security = HTTPBearer()
security_optional = HTTPBearer(auto_error=False)

AUDIENCE = "authenticated"
JWKS_CACHE_TTL = 3600  # 1 hour


class JwksCache:
    """Supabase signing keys, refetched at most once per TTL."""

    def __init__(self, ttl: float = JWKS_CACHE_TTL):
        self.ttl = ttl
        self.keys: dict[str, Any] = {}
        self.fetched_at: float = 0

    def get(self, supabase_url: str) -> dict[str, Any]:
        now = time.time()
        if self.keys and (now - self.fetched_at) < self.ttl:
            return self.keys

        jwks_url = f"{supabase_url.rstrip('/')}/auth/v1/.well-known/jwks.json"
        try:
            response = httpx.get(jwks_url, timeout=10)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Failed to fetch JWKS: url={jwks_url} error={e}")
            # Stale keys beat no keys
            return self.keys or {"keys": []}

        self.keys = response.json()
        self.fetched_at = now
        logger.debug(f"Fetched JWKS from {jwks_url}")
        return self.keys


_jwks = JwksCache()


def _signing_key(token: str, settings: Settings) -> tuple[Any, str]:
    """
    Pick the key and algorithm to verify a token with.

    Returns:
        Tuple of (key, algorithm)
    """
    try:
        header = jwt.get_unverified_header(token)
    except JWTError:
        return settings.SUPABASE_JWT_SECRET, "HS256"

    alg = header.get("alg", "HS256")
    kid = header.get("kid")

    if alg == "HS256":
        return settings.SUPABASE_JWT_SECRET, "HS256"

    if kid:
        for key in _jwks.get(settings.SUPABASE_URL).get("keys", []):
            if key.get("kid") == kid:
                return key, alg

    logger.warning(f"Could not find key for alg={alg}, kid={kid}, falling back to HS256")
    return settings.SUPABASE_JWT_SECRET, "HS256"


def _role_from_claims(payload: dict[str, Any]) -> UserRole | None:
    metadata = payload.get("user_metadata") or {}
    try:
        return UserRole(metadata.get("role"))
    except ValueError:
        return None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_access_token(token: str, settings: Settings) -> AuthUser:
    """
    Verify a Supabase access token and read the caller's identity.

    Args:
        token: Raw JWT from the Authorization header
        settings: Supplies the JWT secret / Supabase URL

    Returns:
        AuthUser with id (sub), email and role (user_metadata.role)

    Raises:
        HTTPException: 401 if the token is invalid or expired
    """
    try:
        signing_key, algorithm = _signing_key(token, settings)
        payload = jwt.decode(token, signing_key, algorithms=[algorithm], audience=AUDIENCE)
    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise _unauthorized("Token has expired")
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise _unauthorized(f"Invalid token: {e}")

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("JWT token missing 'sub' claim")
        raise _unauthorized("Invalid token: missing user ID")

    try:
        user_uuid = UUID(user_id)
    except ValueError:
        logger.warning(f"Invalid UUID in token: {user_id}")
        raise _unauthorized("Invalid token: malformed user ID")

    logger.debug(f"Authenticated user: {user_id}")
    return AuthUser(id=user_uuid, email=payload.get("email"), role=_role_from_claims(payload))


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    settings: Settings = Depends(get_settings),
) -> AuthUser:
    """
    Require an authenticated caller.

    Raises:
        HTTPException: 401 (403 from HTTPBearer when the header is missing)
    """
    return decode_access_token(credentials.credentials, settings)


def get_viewer(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_optional),
    settings: Settings = Depends(get_settings),
) -> Optional[AuthUser]:
    """
    Identify the caller if they sent a token; None means anonymous.

    A bad token is treated as anonymous, so it can only ever see public
    objects.
    """
    if credentials is None:
        return None

    try:
        return decode_access_token(credentials.credentials, settings)
    except HTTPException:
        return None
