"""Points ledger model.

Ledger entries are append-only: they are written by swap settlement and the
listing approval bonus, and never updated or deleted.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import func
from sqlmodel import Column, DateTime, Field, Index, SQLModel, String, Text


class TransactionType(str, Enum):
    """Reason for a balance change."""

    EARNED = "earned"
    SPENT = "spent"
    BONUS = "bonus"


class PointTransaction(SQLModel, table=True):
    """Immutable ledger entry for one balance change.

    Attributes:
        id: Primary key (auto-generated)
        user_id: Account whose balance changed
        amount: Signed change, negative for spending
        type: earned, spent or bonus
        description: Human-readable reason
        related_item_id: Item that caused the change, if any
        created_at: When the change was recorded
    """

    __tablename__ = "point_transactions"

    id: Optional[int] = Field(default=None, primary_key=True)

    user_id: str = Field(foreign_key="users.id", max_length=255)
    amount: int = Field(description="Signed points change")
    type: str = Field(sa_column=Column(String(20), nullable=False))
    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    related_item_id: Optional[int] = Field(default=None, foreign_key="items.id")

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    )

    __table_args__ = (
        Index("idx_point_transactions_user_created", "user_id", "created_at"),
    )
