"""
VS Press Application Package
"""

from vspress.utils.security import (
    create_access_token,
    create_flash_token,
    create_session_token,
    decode_token,
    read_flash_token,
    verify_access_token,
)
from vspress.services.firebase_service import CollaboratorError, firebase_service
from vspress.models.context import Notification, PressContext
from vspress.models.user import SessionUser, UserProfile, UserRole

__version__ = "1.0.0"
__app_name__ = "VS Press"
