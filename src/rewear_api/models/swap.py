"""Swap model for exchange requests between users."""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import func
from sqlmodel import Column, DateTime, Field, Index, SQLModel, String, Text


class SwapType(str, Enum):
    """How the requester pays for the item."""

    DIRECT = "direct"
    POINTS = "points"


class SwapStatus(str, Enum):
    """Lifecycle status of a swap request."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    COMPLETED = "completed"


# Status may only move forward; rejected and completed are terminal.
ALLOWED_SWAP_TRANSITIONS: dict[SwapStatus, frozenset[SwapStatus]] = {
    SwapStatus.PENDING: frozenset({SwapStatus.ACCEPTED, SwapStatus.REJECTED}),
    SwapStatus.ACCEPTED: frozenset({SwapStatus.COMPLETED, SwapStatus.REJECTED}),
    SwapStatus.REJECTED: frozenset(),
    SwapStatus.COMPLETED: frozenset(),
}


def can_transition(current: SwapStatus | str, target: SwapStatus | str) -> bool:
    """Check whether a swap may move from ``current`` to ``target``."""
    return SwapStatus(target) in ALLOWED_SWAP_TRANSITIONS[SwapStatus(current)]


class Swap(SQLModel, table=True):
    """Swap request for one item.

    Attributes:
        id: Primary key (auto-generated)
        requester_id: User asking for the item
        owner_id: User who owns the item
        item_id: Requested item
        swap_type: direct or points
        status: Lifecycle status
        message: Optional note from the requester
    """

    __tablename__ = "swaps"

    id: Optional[int] = Field(default=None, primary_key=True)

    requester_id: str = Field(foreign_key="users.id", max_length=255)
    owner_id: str = Field(foreign_key="users.id", max_length=255)
    item_id: int = Field(foreign_key="items.id")

    swap_type: str = Field(sa_column=Column(String(20), nullable=False))

    status: str = Field(
        default=SwapStatus.PENDING.value,
        sa_column=Column(String(20), nullable=False, server_default=SwapStatus.PENDING.value)
    )

    message: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    )

    __table_args__ = (
        Index("idx_swaps_requester_id", "requester_id"),
        Index("idx_swaps_owner_id", "owner_id"),
        Index("idx_swaps_item_id", "item_id"),
        Index("idx_swaps_created_at", "created_at"),
    )
