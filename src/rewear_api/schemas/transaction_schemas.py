"""Points ledger and admin statistics schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ..models.point_transaction import TransactionType


class PointTransactionResponse(BaseModel):
    """One ledger entry as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Entry ID")
    user_id: str = Field(..., description="Account whose balance changed")
    amount: int = Field(..., description="Signed points change", examples=[-50])
    type: TransactionType = Field(..., description="earned, spent or bonus")
    description: str | None = Field(default=None, description="Reason", examples=["Redeemed Vintage Denim Jacket"])
    related_item_id: int | None = Field(default=None, description="Item that caused the change")
    created_at: datetime = Field(..., description="When the change was recorded")


class AdminStats(BaseModel):
    """Site-wide counters for the admin dashboard."""

    total_users: int = Field(..., ge=0, description="Registered users")
    total_items: int = Field(..., ge=0, description="Listings in any status")
    total_swaps: int = Field(..., ge=0, description="Swap requests in any status")
    pending_items: int = Field(..., ge=0, description="Listings awaiting moderation")
