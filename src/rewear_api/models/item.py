"""Item model for clothing listings.

This module defines the Item SQLModel for storing garments offered for swap,
including moderation status, availability and point value.
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import JSON, func
from sqlmodel import Column, DateTime, Field, Index, Relationship, SQLModel, String, Text

if TYPE_CHECKING:
    from .user import User


class ItemStatus(str, Enum):
    """Moderation status of a listing."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ItemBase(SQLModel):
    """Base item model with common fields."""

    title: str = Field(max_length=200, description="Listing title")
    description: Optional[str] = Field(default=None, description="Free-text description")
    category: str = Field(max_length=50, description="Garment category, e.g. Tops")
    size: str = Field(max_length=20, description="Size label")
    condition: str = Field(max_length=50, description="Condition label, e.g. Like New")
    brand: Optional[str] = Field(default=None, max_length=100, description="Brand name")
    point_value: int = Field(description="Points needed to redeem this item")


class Item(ItemBase, table=True):
    """Item model for database storage.

    Each item belongs to exactly one user. New listings start as pending and
    become visible in the catalogue once an admin approves them.

    Attributes:
        id: Primary key (auto-generated)
        user_id: Foreign key to the owning user
        status: Moderation status
        is_available: False once a swap for the item has completed
        tags: Free-form tags
        images: Image URLs
        created_at: Timestamp when item was created
        updated_at: Timestamp when item was last updated
    """

    __tablename__ = "items"

    id: Optional[int] = Field(
        default=None,
        primary_key=True,
        description="Primary key (auto-generated)"
    )

    user_id: str = Field(
        foreign_key="users.id",
        max_length=255,
        description="ID of the user who owns this item"
    )

    description: Optional[str] = Field(
        default=None,
        description="Free-text description",
        sa_column=Column(Text, nullable=True)
    )

    tags: Optional[list[str]] = Field(
        default=None,
        description="Free-form tags",
        sa_column=Column(JSON, nullable=True)
    )

    images: Optional[list[str]] = Field(
        default=None,
        description="Image URLs",
        sa_column=Column(JSON, nullable=True)
    )

    status: str = Field(
        default=ItemStatus.PENDING.value,
        description="Moderation status",
        sa_column=Column(String(20), nullable=False, server_default=ItemStatus.PENDING.value)
    )

    is_available: bool = Field(
        default=True,
        description="Whether the item can still be swapped"
    )

    user: Optional["User"] = Relationship(back_populates="items", sa_relationship_kwargs={"lazy": "select"})

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Timestamp when item was created",
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Timestamp when item was last updated",
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    )

    __table_args__ = (
        Index("idx_items_user_id", "user_id"),
        Index("idx_items_status", "status"),
        Index("idx_items_category", "category"),
        Index("idx_items_created_at", "created_at"),
        Index("idx_items_status_created", "status", "created_at"),  # Catalogue listing by date
    )
