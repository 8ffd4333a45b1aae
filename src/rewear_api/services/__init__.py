"""Business logic layer.

This module provides business logic services for the ReWear API,
including authentication, users, items, swaps, settlement and administration.
"""

from .admin_service import AdminService
from .auth_service import AuthService
from .item_service import ItemService
from .settlement_service import SettlementService
from .swap_service import SwapService
from .user_service import UserService

__all__ = [
    "AuthService",
    "UserService",
    "ItemService",
    "SwapService",
    "SettlementService",
    "AdminService",
]
