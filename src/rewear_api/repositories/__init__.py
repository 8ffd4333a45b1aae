"""Data access layer.

This module provides data access repositories for database operations
with proper error handling and type safety.
"""

from .item_repository import ItemRepository, ItemRepositoryError
from .point_transaction_repository import (
    PointTransactionRepository,
    PointTransactionRepositoryError,
)
from .swap_repository import SwapDetails, SwapRepository, SwapRepositoryError
from .user_repository import UserRepository, UserRepositoryError

REPOSITORY_ERRORS = (
    UserRepositoryError,
    ItemRepositoryError,
    SwapRepositoryError,
    PointTransactionRepositoryError,
)

__all__ = [
    "UserRepository",
    "UserRepositoryError",
    "ItemRepository",
    "ItemRepositoryError",
    "SwapRepository",
    "SwapRepositoryError",
    "SwapDetails",
    "PointTransactionRepository",
    "PointTransactionRepositoryError",
    "REPOSITORY_ERRORS",
]
