"""
Signed token utilities for sessions and flash notifications
"""

from datetime import datetime, timedelta, UTC
from typing import Optional, Dict, Any, List
from jose import JWTError, jwt
from vspress.config import settings


def create_access_token(
    data: Dict[str, Any], expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a JWT access token

    Args:
        data: Data to encode in the token
        expires_delta: Optional expiration time delta

    Returns:
        Encoded JWT token
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(UTC) + expires_delta
    else:
        expire = datetime.now(UTC) + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode.update({"exp": expire, "iat": datetime.now(UTC), "type": "access"})

    return jwt.encode(
        to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM
    )


def decode_token(token: str) -> Dict[str, Any]:
    """
    Decode and verify a JWT token

    Raises:
        JWTError: If token is invalid or expired
    """
    try:
        return jwt.decode(
            token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError as e:
        raise JWTError(f"Invalid token: {str(e)}")


def verify_access_token(token: str) -> Dict[str, Any]:
    """
    Verify an access token

    Raises:
        JWTError: If token is invalid, expired, or not an access token
    """
    payload = decode_token(token)

    if payload.get("type") != "access":
        raise JWTError("Invalid token type")

    return payload


def create_session_token(uid: str, email: Optional[str]) -> Dict[str, Any]:
    """
    Create the session token issued after login or signup

    Returns:
        Dictionary containing access_token, token_type and expires_in
    """
    return {
        "access_token": create_access_token({"sub": uid, "email": email}),
        "token_type": "bearer",
        "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    }


def create_flash_token(notifications: List[Dict[str, Any]]) -> str:
    """Sign pending notifications so they survive one redirect"""
    expire = datetime.now(UTC) + timedelta(minutes=settings.FLASH_TOKEN_EXPIRE_MINUTES)
    return jwt.encode(
        {"type": "flash", "messages": notifications, "exp": expire},
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
    )


def read_flash_token(token: Optional[str]) -> List[Dict[str, Any]]:
    """Return the notifications in a flash token; tampered or stale tokens yield none"""
    if not token:
        return []
    try:
        payload = decode_token(token)
    except JWTError:
        return []
    if payload.get("type") != "flash":
        return []
    return list(payload.get("messages") or [])
