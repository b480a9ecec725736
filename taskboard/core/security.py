# taskboard/core/security.py
"""
Auth Gate - bearer token validation.

RULES:
1. User is a SYSTEM entity; tokens are issued elsewhere, only verified here
2. Every failure is reported as the same Unauthenticated error
3. The resolved identity never carries the password field
"""
from typing import Any, Dict, Optional

from beanie import PydanticObjectId
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from taskboard.core.config import settings
from taskboard.core.exceptions import Unauthenticated
from taskboard.core.logging import log
from taskboard.models import User, UserPublic

# auto_error=False so a missing header goes through our envelope, not FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


def decode_token(token: str) -> Dict[str, Any]:
    """Verify signature and expiry against the shared secret."""
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        log("AUTH", f"Token rejected: {type(e).__name__}: {e}")
        raise Unauthenticated()


def token_subject(claims: Dict[str, Any]) -> PydanticObjectId:
    """
    Extract the user id. `sub` is canonical; `id` is accepted for tokens
    minted by the legacy issuer.
    """
    subject = claims.get("sub") or claims.get("id")
    if not subject or not PydanticObjectId.is_valid(str(subject)):
        log("AUTH", f"Token has no usable subject: {subject!r}")
        raise Unauthenticated()
    return PydanticObjectId(str(subject))


async def resolve_user(user_id: PydanticObjectId) -> UserPublic:
    user = await User.find_one({"_id": user_id}, projection_model=UserPublic)
    if user is None:
        log("AUTH", f"Token subject {user_id} does not match any user")
        raise Unauthenticated()
    return user


async def authenticate(token: Optional[str]) -> UserPublic:
    """Full gate: token -> claims -> user."""
    if not token:
        log("AUTH", "Request without bearer token")
        raise Unauthenticated()
    claims = decode_token(token)
    return await resolve_user(token_subject(claims))


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> UserPublic:
    """
    FastAPI dependency guarding a route.

    Attaches the identity to request.state.user and returns it so handlers
    receive it as an explicit parameter.
    """
    token = credentials.credentials if credentials else None
    user = await authenticate(token)
    request.state.user = user
    return user


__all__ = ["authenticate", "decode_token", "get_current_user", "bearer_scheme"]
