"""
Authentication request/response schemas
"""

from pydantic import BaseModel, EmailStr, Field, ConfigDict
from typing import Optional
from datetime import datetime


class UserSignup(BaseModel):
    """Schema for account creation"""

    email: EmailStr
    password: str = Field(
        ..., min_length=6, description="Firebase requires at least 6 characters"
    )
    display_name: str = Field(..., min_length=1, max_length=100, alias="displayName")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "email": "reader@example.com",
                "password": "SecurePass123",
                "displayName": "Jane Reader",
            }
        }
    )


class UserLogin(BaseModel):
    """Schema for user login"""

    email: EmailStr
    password: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"email": "reader@example.com", "password": "SecurePass123"}
        }
    )


class Token(BaseModel):
    """Schema for the session token"""

    access_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds


class UserResponse(BaseModel):
    """Schema for profile data response"""

    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = Field(None, alias="displayName")
    role: str
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class AuthResponse(BaseModel):
    """Authentication response with profile data and session token"""

    user: UserResponse
    tokens: Token
