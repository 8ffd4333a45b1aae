"""SQLModel data models.

This module exports all database models for the ReWear API.
Import models from here to ensure proper initialization and relationships.
"""

from .item import Item, ItemBase, ItemStatus
from .point_transaction import PointTransaction, TransactionType
from .swap import ALLOWED_SWAP_TRANSITIONS, Swap, SwapStatus, SwapType, can_transition
from .user import DEFAULT_STARTING_POINTS, User, UserBase, UserUpsert

__all__ = [
    # User models
    "User",
    "UserBase",
    "UserUpsert",
    "DEFAULT_STARTING_POINTS",
    # Item models
    "Item",
    "ItemBase",
    "ItemStatus",
    # Swap models
    "Swap",
    "SwapType",
    "SwapStatus",
    "ALLOWED_SWAP_TRANSITIONS",
    "can_transition",
    # Ledger models
    "PointTransaction",
    "TransactionType",
]
