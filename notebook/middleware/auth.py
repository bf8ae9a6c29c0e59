"""
Supabase access-token verification for the notebook API.

Tokens are checked against the project's JWKS (ES256 or RS256). The 'sub'
claim is the user id every sharing and ownership check runs against.
"""
import logging
import time
from typing import Any, Dict, Optional

import httpx
from fastapi import Header, HTTPException
from jose import jwk, jwt

from notebook import config

logger = logging.getLogger(__name__)

JWT_AUDIENCE = "authenticated"
JWT_ALGORITHMS = ["ES256", "RS256"]
JWKS_TTL_SECONDS = 60 * 60

_signing_keys: Dict[str, Dict[str, Any]] = {}
_signing_keys_fetched_at: float = 0.0


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=401, detail=detail)


def _auth_base_url() -> str:
    if not config.SUPABASE_URL:
        raise ValueError("SUPABASE_URL must be set")
    return f"{config.SUPABASE_URL.rstrip('/')}/auth/v1"


async def fetch_signing_keys(force: bool = False) -> Dict[str, Dict[str, Any]]:
    """
    Signing keys by kid, cached for an hour.

    A failed fetch falls back to the stale cache when there is one.
    """
    global _signing_keys, _signing_keys_fetched_at

    fresh = (time.time() - _signing_keys_fetched_at) < JWKS_TTL_SECONDS
    if _signing_keys and fresh and not force:
        return _signing_keys

    url = f"{_auth_base_url()}/.well-known/jwks.json"
    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.get(url)
            response.raise_for_status()
    except httpx.HTTPError as e:
        if _signing_keys:
            logger.warning(f"JWKS refresh failed, keeping {len(_signing_keys)} cached keys: {e}")
            return _signing_keys
        logger.error(f"JWKS fetch from {url} failed: {e}")
        raise HTTPException(status_code=503, detail="Authentication keys unavailable")

    keys = {key["kid"]: key for key in response.json().get("keys", []) if key.get("kid")}
    _signing_keys = keys
    _signing_keys_fetched_at = time.time()
    logger.info(f"Loaded {len(keys)} JWKS signing keys")
    return keys


async def decode_access_token(token: str) -> Dict[str, Any]:
    """Verified claims of a Supabase access token, or 401"""
    try:
        kid = jwt.get_unverified_header(token).get("kid")
    except jwt.JWTError as e:
        raise _unauthorized(f"Malformed token: {e}")
    if not kid:
        raise _unauthorized("Token missing key ID (kid)")

    keys = await fetch_signing_keys()
    if kid not in keys:
        # keys may have rotated since the last fetch
        keys = await fetch_signing_keys(force=True)
    if kid not in keys:
        raise _unauthorized(f"Unknown signing key '{kid}'")

    try:
        return jwt.decode(
            token,
            jwk.construct(keys[kid]),
            algorithms=JWT_ALGORITHMS,
            audience=JWT_AUDIENCE,
            issuer=_auth_base_url(),
        )
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except jwt.JWTClaimsError as e:
        raise _unauthorized(f"Token claims rejected: {e}")
    except jwt.JWTError as e:
        raise _unauthorized(f"Invalid token: {e}")


def bearer_token(authorization: str) -> str:
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise _unauthorized("Expected 'Authorization: Bearer <token>'")
    return token.strip()


async def get_current_user_id(authorization: Optional[str] = Header(None)) -> str:
    """FastAPI dependency: the signed-in user's id. Required for every write."""
    if not authorization:
        raise _unauthorized("Authorization header missing")

    claims = await decode_access_token(bearer_token(authorization))
    user_id = claims.get("sub")
    if not user_id:
        raise _unauthorized("Token has no subject")
    return user_id


async def get_current_user_id_optional(authorization: Optional[str] = Header(None)) -> Optional[str]:
    """
    Like get_current_user_id, but without a header the caller is anonymous
    and read endpoints return an empty view. A bad token is still rejected.
    """
    if not authorization:
        return None
    return await get_current_user_id(authorization)
