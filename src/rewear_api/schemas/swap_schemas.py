"""Swap schemas for swap requests and API responses."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.swap import SwapStatus, SwapType
from .item_schemas import ItemWithUser, UserSummary


class SwapListType(str, Enum):
    """Which side of the swaps to list for the caller."""

    REQUESTED = "requested"
    RECEIVED = "received"


class SwapCreate(BaseModel):
    """Schema for requesting a swap.

    The owner is looked up from the item and the status starts as pending.
    """

    item_id: int = Field(..., gt=0, description="Requested item", examples=[123])
    swap_type: SwapType = Field(..., description="direct or points", examples=["points"])
    message: str | None = Field(
        default=None,
        max_length=1000,
        description="Optional note to the owner",
        examples=["Would love this for the winter!"],
    )

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                return None
        return v


class SwapStatusUpdate(BaseModel):
    """Schema for moving a swap to a new status."""

    status: SwapStatus = Field(..., description="Target status", examples=["completed"])


class SwapResponse(BaseModel):
    """Schema for swap API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Swap ID", examples=[7])
    requester_id: str = Field(..., description="User asking for the item")
    owner_id: str = Field(..., description="User who owns the item")
    item_id: int = Field(..., description="Requested item")
    swap_type: SwapType = Field(..., description="direct or points")
    status: SwapStatus = Field(..., description="Lifecycle status")
    message: str | None = Field(default=None, description="Note from the requester")
    created_at: datetime = Field(..., description="Swap creation timestamp")
    updated_at: datetime | None = Field(default=None, description="Last update timestamp")


class SwapWithDetails(SwapResponse):
    """Swap response hydrated with both users and the item."""

    requester: UserSummary = Field(..., description="User asking for the item")
    owner: UserSummary = Field(..., description="User who owns the item")
    item: ItemWithUser = Field(..., description="Requested item with its owner")
