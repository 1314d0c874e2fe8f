"""
Authentication API endpoints
"""

from fastapi import APIRouter, HTTPException, status, Depends

from vspress.api.routes.utils import raise_for_errors
from vspress.dependencies import get_auth_service, get_current_context, get_optional_context
from vspress.models.context import PressContext
from vspress.schemas.auth import (
    AuthResponse,
    Token,
    UserLogin,
    UserResponse,
    UserSignup,
)
from vspress.services.auth_service import AuthService
from vspress.utils.security import create_session_token

# Create router
router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


def _auth_response(ctx: PressContext) -> AuthResponse:
    if ctx.profile is not None:
        user = UserResponse.model_validate(ctx.profile)
    else:
        # Account without a profile record
        user = UserResponse(uid=ctx.user.uid, email=ctx.user.email, role="user")
    return AuthResponse(
        user=user, tokens=Token(**create_session_token(ctx.user.uid, ctx.user.email))
    )


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    payload: UserSignup,
    ctx: PressContext = Depends(get_optional_context),
    auth: AuthService = Depends(get_auth_service),
):
    """
    Create an account

    - **email**: account email; the configured admin address gets the admin role
    - **password**: at least 6 characters
    - **displayName**: name shown on comments and articles
    """
    await auth.signup(ctx, payload.email, payload.password, payload.display_name)
    raise_for_errors(ctx)
    return _auth_response(ctx)


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: UserLogin,
    ctx: PressContext = Depends(get_optional_context),
    auth: AuthService = Depends(get_auth_service),
):
    """Exchange email and password for a session token"""
    await auth.login(ctx, payload.email, payload.password)
    raise_for_errors(ctx)
    return _auth_response(ctx)


@router.post("/logout")
async def logout(
    ctx: PressContext = Depends(get_current_context),
    auth: AuthService = Depends(get_auth_service),
):
    """
    Logout current user

    Requires authentication. Client should discard the token after this call.
    """
    await auth.logout(ctx)
    raise_for_errors(ctx)
    return {"message": "Successfully logged out"}


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(ctx: PressContext = Depends(get_current_context)):
    """
    Get the profile of the current user

    Requires authentication.
    """
    if ctx.profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found"
        )
    return UserResponse.model_validate(ctx.profile)
