"""Pydantic schemas for API validation and serialization.

This module exports all API schemas for authentication, items, swaps and the
points ledger.
"""

from .auth_schemas import IdentityClaims, UserResponse
from .item_schemas import (
    ItemCreate,
    ItemListRequest,
    ItemResponse,
    ItemStatusUpdate,
    ItemWithUser,
    UserSummary,
)
from .swap_schemas import (
    SwapCreate,
    SwapListType,
    SwapResponse,
    SwapStatusUpdate,
    SwapWithDetails,
)
from .transaction_schemas import AdminStats, PointTransactionResponse

__all__ = [
    # Authentication schemas
    "IdentityClaims",
    "UserResponse",
    # Item schemas
    "ItemCreate",
    "ItemResponse",
    "ItemWithUser",
    "ItemListRequest",
    "ItemStatusUpdate",
    "UserSummary",
    # Swap schemas
    "SwapCreate",
    "SwapListType",
    "SwapResponse",
    "SwapWithDetails",
    "SwapStatusUpdate",
    # Ledger schemas
    "PointTransactionResponse",
    "AdminStats",
]
