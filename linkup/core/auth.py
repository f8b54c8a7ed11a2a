import os
from typing import Optional, Dict, Any

from fastapi import Header, HTTPException, WebSocket
from jose import jwt, JWTError
from loguru import logger


# ------------------------------------------------------------
# Configuration
# ------------------------------------------------------------
AUTH_VERIFY_MODE = os.getenv("AUTH_VERIFY_MODE", "hs256").lower()  # "hs256" or "header"
AUTH_DEBUG = os.getenv("AUTH_DEBUG", "false").lower() in ("1", "true", "yes")

# Claims that may carry the caller identity, checked in order
_IDENTITY_CLAIMS = ("sub", "userId")


# ------------------------------------------------------------
# Helpers
# ------------------------------------------------------------
def _get_bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing Authorization header")

    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid Authorization header format")

    token = parts[1].strip()
    if not token:
        raise HTTPException(status_code=401, detail="Missing bearer token")

    return token


def _verify_jwt_hs256(token: str) -> Dict[str, Any]:
    """
    HS256 verification using AUTH_JWT_SECRET
    """
    secret = os.getenv("AUTH_JWT_SECRET")
    if not secret:
        raise HTTPException(status_code=500, detail="AUTH_JWT_SECRET not set")

    try:
        return jwt.decode(
            token,
            secret,
            algorithms=["HS256"],
            options={"verify_aud": False},
        )
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")


def _identity_from_payload(payload: Dict[str, Any]) -> str:
    user_id = next((payload[c] for c in _IDENTITY_CLAIMS if payload.get(c)), None)
    if not user_id:
        raise HTTPException(status_code=401, detail="Token missing sub claim")
    return str(user_id)


def issue_token(user_id: str) -> str:
    """Sign a token for ``user_id``; used by local tooling and tests."""
    secret = os.getenv("AUTH_JWT_SECRET")
    if not secret:
        raise RuntimeError("AUTH_JWT_SECRET not set")
    return jwt.encode({"sub": user_id}, secret, algorithm="HS256")


# ------------------------------------------------------------
# Main Dependency
# ------------------------------------------------------------
def get_current_user_id(
    authorization: Optional[str] = Header(default=None),
    x_user_id: Optional[str] = Header(default=None),
) -> str:

    if AUTH_VERIFY_MODE == "header":
        if not x_user_id:
            raise HTTPException(status_code=401, detail="Missing X-User-Id header")
        return x_user_id

    if AUTH_VERIFY_MODE != "hs256":
        raise HTTPException(
            status_code=500,
            detail=f"Invalid AUTH_VERIFY_MODE: {AUTH_VERIFY_MODE}",
        )

    token = _get_bearer_token(authorization)

    if AUTH_DEBUG:
        logger.debug(f"[auth] mode={AUTH_VERIFY_MODE} token_len={len(token)}")

    user_id = _identity_from_payload(_verify_jwt_hs256(token))

    if AUTH_DEBUG:
        logger.debug(f"[auth] user_id={user_id}")

    return user_id


# ------------------------------------------------------------
# Realtime handshake
# ------------------------------------------------------------
def authenticate_websocket(websocket: WebSocket) -> Optional[str]:
    """
    Verified identity for a realtime channel, or None for an anonymous one.

    Browsers cannot set headers on a WebSocket handshake, so the token may
    also come as a ``token`` query parameter. Bad credentials raise 401.
    """
    if AUTH_VERIFY_MODE == "header":
        return websocket.headers.get("x-user-id") or None

    token = websocket.query_params.get("token")
    if not token:
        authorization = websocket.headers.get("authorization")
        if not authorization:
            return None
        token = _get_bearer_token(authorization)

    return _identity_from_payload(_verify_jwt_hs256(token))
