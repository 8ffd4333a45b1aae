"""User model backed by the external identity provider.

This module defines the User SQLModel. Users are keyed by the identity
provider's subject identifier and carry the points balance used for swaps.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import func
from sqlmodel import Column, DateTime, Field, Index, Relationship, SQLModel, String

if TYPE_CHECKING:
    from .item import Item

DEFAULT_STARTING_POINTS = 100


class UserBase(SQLModel):
    """Profile fields copied from identity claims."""

    email: Optional[str] = Field(
        default=None,
        max_length=255,
        description="User's email address"
    )
    first_name: Optional[str] = Field(
        default=None,
        max_length=100,
        description="Given name"
    )
    last_name: Optional[str] = Field(
        default=None,
        max_length=100,
        description="Family name"
    )
    profile_image_url: Optional[str] = Field(
        default=None,
        max_length=500,
        description="URL to user's profile picture"
    )


class User(UserBase, table=True):
    """User model for database storage.

    Attributes:
        id: Identity provider subject (primary key)
        email: Optional unique email address
        first_name: Given name
        last_name: Family name
        profile_image_url: Optional profile picture URL
        points: Current points balance
        is_admin: Whether the user may moderate listings
        created_at: Timestamp when user was created
        updated_at: Timestamp when user was last updated
    """

    __tablename__ = "users"

    id: str = Field(
        sa_column=Column(String(255), primary_key=True),
        description="Identity provider subject identifier"
    )

    email: Optional[str] = Field(
        default=None,
        description="User's email address",
        sa_column=Column(String(255), unique=True, nullable=True)
    )

    points: int = Field(
        default=DEFAULT_STARTING_POINTS,
        description="Current points balance"
    )

    is_admin: bool = Field(
        default=False,
        description="Whether the user is an administrator"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Timestamp when user was created",
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Timestamp when user was last updated",
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    )

    items: list["Item"] = Relationship(back_populates="user", sa_relationship_kwargs={"lazy": "select"})

    __table_args__ = (
        Index("idx_users_created_at", "created_at"),
    )


class UserUpsert(UserBase):
    """Data used to create or refresh a user from identity claims."""

    id: str = Field(min_length=1, max_length=255, description="Identity provider subject")
