"""Item schemas for listing operations and API responses.

This module defines Pydantic schemas for item-related API operations,
including creation, catalogue queries, moderation and responses that embed a
summary of the owning user.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.item import ItemStatus


def _collapse_whitespace(v: str) -> str:
    return " ".join(v.split())


class ItemCreate(BaseModel):
    """Schema for listing a new item.

    The owner is always the authenticated caller and the status always
    starts as pending, so neither can be supplied here.
    """

    title: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Listing title",
        examples=["Vintage Denim Jacket"],
    )
    description: str | None = Field(
        default=None,
        max_length=2000,
        description="Free-text description",
        examples=["Classic 90s cut, barely worn"],
    )
    category: str = Field(
        ..., min_length=1, max_length=50, description="Garment category", examples=["Outerwear"]
    )
    size: str = Field(..., min_length=1, max_length=20, description="Size label", examples=["M"])
    condition: str = Field(
        ..., min_length=1, max_length=50, description="Condition label", examples=["Like New"]
    )
    brand: str | None = Field(
        default=None, max_length=100, description="Brand name", examples=["Levi's"]
    )
    point_value: int = Field(
        ..., ge=1, le=1000, description="Points needed to redeem the item", examples=[50]
    )
    tags: list[str] = Field(
        default_factory=list, max_length=20, description="Free-form tags", examples=[["denim", "90s"]]
    )
    images: list[str] = Field(
        default_factory=list,
        max_length=10,
        description="Image URLs",
        examples=[["https://images.example.com/jacket.jpg"]],
    )

    @field_validator("title", "category", "size", "condition")
    @classmethod
    def validate_required_text(cls, v: str) -> str:
        """Reject blank text and collapse runs of whitespace."""
        if not v or v.isspace():
            raise ValueError("Value cannot be empty or whitespace only")
        return _collapse_whitespace(v)

    @field_validator("description", "brand")
    @classmethod
    def validate_optional_text(cls, v: str | None) -> str | None:
        """Treat blank optional text as missing."""
        if v is not None:
            v = v.strip()
            if not v:
                return None
        return v

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        """Drop blank tags and duplicates, keeping the first occurrence."""
        cleaned: list[str] = []
        for tag in v:
            tag = _collapse_whitespace(tag)
            if tag and tag not in cleaned:
                cleaned.append(tag)
        return cleaned

    @field_validator("images")
    @classmethod
    def validate_images(cls, v: list[str]) -> list[str]:
        """Image entries must be http(s) URLs."""
        urls = [url.strip() for url in v if url and url.strip()]
        for url in urls:
            if not url.startswith(("http://", "https://")):
                raise ValueError(f"Invalid image URL: {url}")
        return urls


class UserSummary(BaseModel):
    """Public summary of a user embedded in item and swap responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="User ID", examples=["user-123"])
    first_name: str | None = Field(default=None, description="Given name", examples=["Ada"])
    last_name: str | None = Field(default=None, description="Family name", examples=["Lovelace"])
    profile_image_url: str | None = Field(
        default=None, description="Profile picture URL", examples=["https://example.com/ada.png"]
    )


class ItemResponse(BaseModel):
    """Schema for item API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Item ID", examples=[123])
    user_id: str = Field(..., description="ID of the owning user", examples=["user-123"])
    title: str = Field(..., description="Listing title")
    description: str | None = Field(default=None, description="Free-text description")
    category: str = Field(..., description="Garment category")
    size: str = Field(..., description="Size label")
    condition: str = Field(..., description="Condition label")
    brand: str | None = Field(default=None, description="Brand name")
    point_value: int = Field(..., description="Points needed to redeem the item")
    tags: list[str] = Field(default_factory=list, description="Free-form tags")
    images: list[str] = Field(default_factory=list, description="Image URLs")
    status: ItemStatus = Field(..., description="Moderation status")
    is_available: bool = Field(..., description="Whether the item can still be swapped")
    created_at: datetime = Field(..., description="Item creation timestamp")
    updated_at: datetime | None = Field(default=None, description="Last update timestamp")

    @field_validator("tags", "images", mode="before")
    @classmethod
    def none_to_empty(cls, v: list[str] | None) -> list[str]:
        return v or []


class ItemWithUser(ItemResponse):
    """Item response including a summary of its owner."""

    user: UserSummary = Field(..., description="Owner of the item")


class ItemListRequest(BaseModel):
    """Catalogue filters; every field is optional and they combine with AND."""

    status: ItemStatus | None = Field(
        default=ItemStatus.APPROVED, description="Moderation status to match"
    )
    category: str | None = Field(default=None, max_length=50, description="Category to match")
    search: str | None = Field(
        default=None, max_length=100, description="Case-insensitive text in title, description or brand"
    )
    limit: int | None = Field(default=None, ge=1, description="Maximum number of items")

    @field_validator("category", "search")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v


class ItemStatusUpdate(BaseModel):
    """Schema for moderating an item."""

    status: ItemStatus = Field(..., description="New moderation status", examples=["approved"])
