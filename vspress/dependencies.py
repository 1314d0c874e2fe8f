"""
FastAPI dependency injection for sessions and services
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError

from vspress.config import settings
from vspress.models.context import Notification, PressContext
from vspress.services.article_service import ArticleService
from vspress.services.auth_service import AuthService
from vspress.services.comment_service import CommentService
from vspress.services.firebase_service import FirebaseService, firebase_service
from vspress.services.theme_service import resolve_theme
from vspress.utils.security import read_flash_token, verify_access_token


logger = logging.getLogger(__name__)

# optional bearer that doesn't raise when missing
security_optional = HTTPBearer(auto_error=False)


def get_firebase() -> FirebaseService:
    return firebase_service


def get_auth_service(firebase: FirebaseService = Depends(get_firebase)) -> AuthService:
    return AuthService(firebase)


def get_article_service(firebase: FirebaseService = Depends(get_firebase)) -> ArticleService:
    return ArticleService(firebase)


def get_comment_service(firebase: FirebaseService = Depends(get_firebase)) -> CommentService:
    return CommentService(firebase)


async def _attach_session(ctx: PressContext, token: Optional[str], auth: AuthService) -> None:
    if not token:
        return
    try:
        payload = verify_access_token(token)
    except JWTError as e:
        logger.debug("Ignoring session token: %s", e)
        return

    uid = payload.get("sub")
    if uid:
        await auth.resolve_session(ctx, uid, payload.get("email"))


async def get_page_context(
    request: Request,
    auth: AuthService = Depends(get_auth_service),
) -> PressContext:
    """
    Session context for the HTML pages, built from the session, flash and
    theme cookies
    """
    ctx = PressContext(
        theme=resolve_theme(
            request.cookies.get(settings.THEME_COOKIE_NAME),
            request.headers.get("Sec-CH-Prefers-Color-Scheme"),
        ),
        notifications=[
            Notification.model_validate(n)
            for n in read_flash_token(request.cookies.get(settings.FLASH_COOKIE_NAME))
        ],
    )
    await _attach_session(ctx, request.cookies.get(settings.SESSION_COOKIE_NAME), auth)
    return ctx


async def get_optional_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_optional),
    auth: AuthService = Depends(get_auth_service),
) -> PressContext:
    """Session context for the JSON API; anonymous when no bearer token is sent"""
    ctx = PressContext()
    if credentials:
        await _attach_session(ctx, credentials.credentials, auth)
    return ctx


async def get_current_context(
    ctx: PressContext = Depends(get_optional_context),
) -> PressContext:
    """
    Dependency requiring an authenticated session

    Raises:
        HTTPException: If no valid bearer token was sent
    """
    if not ctx.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return ctx


async def require_admin(
    ctx: PressContext = Depends(get_current_context),
) -> PressContext:
    """Require the session user to hold the admin role"""
    if not ctx.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions. Required role: admin",
        )
    return ctx
