"""Authentication schemas for identity tokens and the current user.

This module defines the claims carried by identity provider tokens and the
representation of the authenticated caller returned by the API.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class IdentityClaims(BaseModel):
    """Claims of an identity provider token.

    ``sub`` identifies the user; the profile claims are copied onto the
    stored user on every authenticated request.
    """

    model_config = ConfigDict(extra="ignore")

    sub: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Subject (user ID)",
        examples=["user-123"]
    )
    email: Optional[str] = Field(
        default=None,
        max_length=255,
        description="User's email address",
        examples=["ada@example.com"]
    )
    first_name: Optional[str] = Field(default=None, max_length=100, description="Given name")
    last_name: Optional[str] = Field(default=None, max_length=100, description="Family name")
    profile_image_url: Optional[str] = Field(
        default=None,
        max_length=500,
        description="URL to user's profile picture"
    )
    exp: int = Field(..., description="Expiration timestamp")
    iat: Optional[int] = Field(default=None, description="Issued at timestamp")

    @field_validator('sub')
    @classmethod
    def validate_sub(cls, v: str) -> str:
        """Validate subject is not blank."""
        if not v or v.isspace():
            raise ValueError('Subject cannot be empty')
        return v.strip()

    @field_validator('email', 'first_name', 'last_name', 'profile_image_url')
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            v = v.strip()
            if not v:
                return None
        return v


class UserResponse(BaseModel):
    """Schema for the authenticated user's own record."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="User ID", examples=["user-123"])
    email: Optional[str] = Field(default=None, description="User's email address")
    first_name: Optional[str] = Field(default=None, description="Given name")
    last_name: Optional[str] = Field(default=None, description="Family name")
    profile_image_url: Optional[str] = Field(default=None, description="URL to user's profile picture")
    points: int = Field(..., description="Current points balance", examples=[100])
    is_admin: bool = Field(default=False, description="Whether the user is an administrator")
    created_at: datetime = Field(..., description="Account creation timestamp")
    updated_at: Optional[datetime] = Field(default=None, description="Last update timestamp")
