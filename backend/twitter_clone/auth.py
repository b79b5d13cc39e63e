"""
Twitter Clone Backend - Authentication Gate
============================================

What:  FastAPI dependency that guards every protected route.
How:   Reads the `Authorization` header, verifies the bearer token with the
       TokenService and returns the authenticated user id. Routers attach it
       with `dependencies=[Depends(require_user)]`; handlers that need the id
       declare `user_id: int = Depends(require_user)` (FastAPI resolves the
       dependency once per request).
Who:   Every route except registration, login and the health probe.

Failure modes, all answered with 401 "Invalid JWT Token":
    - no Authorization header
    - header without a token part ("Bearer" alone)
    - token with a bad signature, malformed payload or past expiry
    - token without a `userId` claim

The user id also lands on `request.state.user_id` for the access log. It is
request-scoped; nothing is kept between requests.
"""

from typing import Optional

from fastapi import Depends, Request

from twitter_clone.exceptions import AuthenticationError
from twitter_clone.security import TokenService, token_service


def extract_bearer_token(header_value: Optional[str]) -> str:
    """
    Returns the token part of an `Authorization` header value.

    The token is the second whitespace-separated part ("Bearer <token>"); the
    scheme word itself is not checked.
    """
    if header_value is None:
        raise AuthenticationError(context={"reason": "missing_header"})
    parts = header_value.split()
    if len(parts) < 2:
        raise AuthenticationError(context={"reason": "missing_token"})
    return parts[1]


def get_token_service() -> TokenService:
    """Dependency hook so tests can swap the secret without patching modules."""
    return token_service


async def require_user(
    request: Request,
    tokens: TokenService = Depends(get_token_service),
) -> int:
    """Authenticates the request and returns the caller's user id."""
    token = extract_bearer_token(request.headers.get("Authorization"))
    user_id = tokens.decode(token)
    request.state.user_id = user_id
    return user_id
