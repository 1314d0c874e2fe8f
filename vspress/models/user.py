"""
User Models for VS Press

This module defines the signed-in session user and the UserProfile
record stored in Firebase Firestore.
"""

from datetime import datetime, timezone
from typing import Optional
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict


# Helper function for timezone-aware UTC datetime
def utc_now():
    """Get current UTC datetime (timezone-aware)"""
    return datetime.now(timezone.utc)


class UserRole(str, Enum):
    """User role enumeration"""

    USER = "user"
    ADMIN = "admin"


class SessionUser(BaseModel):
    """The identity behind the current session"""

    uid: str = Field(..., description="Firebase Authentication UID")
    email: Optional[str] = None


class UserProfile(BaseModel):
    """
    Profile record written at signup

    Collection: users/
    Document ID: uid (Firebase Auth UID)
    """

    uid: str = Field(..., description="Firebase Authentication UID")
    email: str
    display_name: str = Field(
        ..., description="User's display name", alias="displayName"
    )
    role: UserRole = Field(default=UserRole.USER,
                           description="User role in the system")
    created_at: Optional[datetime] = Field(
        default_factory=utc_now, description="Account creation timestamp", alias="createdAt"
    )

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        json_schema_extra={
            "example": {
                "uid": "firebase_user_uid_123",
                "email": "editor@example.com",
                "displayName": "Jane Editor",
                "role": "user",
                "createdAt": "2024-01-01T00:00:00Z",
            }
        }
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


# Helper function to convert Firestore document to UserProfile model
def firestore_profile_to_model(doc_data: dict, uid: str) -> UserProfile:
    return UserProfile.model_validate({**doc_data, "uid": uid})


# Helper function to convert UserProfile model to Firestore document
def profile_model_to_firestore(profile: UserProfile) -> dict:
    # Use by_alias=True to get camelCase for Firestore
    return profile.model_dump(by_alias=True)
