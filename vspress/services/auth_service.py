"""
Authentication service handling signup, login and logout
"""

import logging
from typing import Optional

from firebase_admin import firestore

from vspress.config import settings
from vspress.models.context import PressContext
from vspress.models.user import (
    SessionUser,
    UserProfile,
    UserRole,
    firestore_profile_to_model,
    profile_model_to_firestore,
)
from vspress.services.firebase_service import (
    CollaboratorError,
    FirebaseService,
    firebase_service,
)
from vspress.utils.text import validate_email


logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication operations"""

    def __init__(self, firebase: Optional[FirebaseService] = None, admin_email: Optional[str] = None):
        self.firebase = firebase if firebase is not None else firebase_service
        self.admin_email = admin_email if admin_email is not None else settings.ADMIN_EMAIL

    def role_for_email(self, email: str) -> UserRole:
        """Only the configured admin address gets the admin role"""
        if self.admin_email and email == self.admin_email:
            return UserRole.ADMIN
        return UserRole.USER

    async def load_profile(self, uid: str) -> Optional[UserProfile]:
        """
        Fetch the profile record of a user

        Raises:
            CollaboratorError: If Firestore fails
        """
        data = await self.firebase.get_document("users", uid)
        if data is None:
            return None
        return firestore_profile_to_model(data, uid)

    async def resolve_session(self, ctx: PressContext, uid: str, email: Optional[str]) -> None:
        """Populate the context from an already verified session token"""
        ctx.user = SessionUser(uid=uid, email=email)
        try:
            ctx.profile = await self.load_profile(uid)
        except CollaboratorError as e:
            ctx.notify_error(str(e), status_code=502)

    async def signup(
        self, ctx: PressContext, email: str, password: str, display_name: str
    ) -> Optional[UserProfile]:
        """
        Create an account, its profile record and a session

        Args:
            ctx: Session context
            email: Account email
            password: Account password
            display_name: Name shown on comments and articles

        Returns:
            The new profile, or None when the signup failed (see ctx.notifications)
        """
        email = (email or "").strip()
        display_name = (display_name or "").strip()
        if not email or not password or not display_name:
            ctx.notify_error("Fill all fields")
            return None
        if not validate_email(email):
            ctx.notify_error("Enter a valid email address")
            return None

        try:
            uid = await self.firebase.create_account(email, password)
            await self.firebase.update_display_name(uid, display_name)

            profile = UserProfile(
                uid=uid,
                email=email,
                display_name=display_name,
                role=self.role_for_email(email),
            )
            data = profile_model_to_firestore(profile)
            data["createdAt"] = firestore.SERVER_TIMESTAMP
            await self.firebase.set_document("users", uid, data)
        except CollaboratorError as e:
            ctx.notify_error(str(e), status_code=400)
            return None

        logger.info("Created account %s with role %s", uid, profile.role)
        ctx.user = SessionUser(uid=uid, email=email)
        ctx.profile = profile
        ctx.notify_success("Account created!")
        ctx.redirect_to = "/"
        return profile

    async def login(self, ctx: PressContext, email: str, password: str) -> Optional[SessionUser]:
        """
        Exchange credentials for a session

        Returns:
            The session user, or None when the credentials were rejected
        """
        email = (email or "").strip()
        try:
            uid = await self.firebase.authenticate(email, password)
            profile = await self.load_profile(uid)
        except CollaboratorError as e:
            ctx.notify_error(str(e), status_code=401)
            return None

        ctx.user = SessionUser(uid=uid, email=email)
        ctx.profile = profile
        ctx.notify_success("Logged in!")
        ctx.redirect_to = "/"
        return ctx.user

    async def logout(self, ctx: PressContext) -> None:
        """End the session. The local session is dropped even if revocation fails."""
        user = ctx.user
        ctx.user = None
        ctx.profile = None
        ctx.redirect_to = "/"

        if user is not None:
            try:
                await self.firebase.sign_out(user.uid)
            except CollaboratorError as e:
                ctx.notify_error(str(e), status_code=502)
                return

        ctx.notify_success("Logged out")
