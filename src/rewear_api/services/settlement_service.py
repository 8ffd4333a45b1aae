"""Points settlement for completed swaps and approved listings.

Every workflow in this module runs in a single transaction. Status changes
are conditional UPDATEs, so a repeated or concurrent completion cannot pay
twice, and the requester's debit only succeeds when the balance covers it.
Any failure rolls back every write made so far.
"""

from sqlmodel import Session

from ..config import Settings
from ..database import atomic
from ..exceptions import (
    BusinessLogicException,
    ConflictException,
    DatabaseException,
    NotFoundException,
)
from ..logging_config import get_logger, log_database_operation
from ..models.item import Item, ItemStatus
from ..models.point_transaction import PointTransaction, TransactionType
from ..models.swap import Swap, SwapStatus, SwapType
from ..repositories import REPOSITORY_ERRORS
from ..repositories.item_repository import ItemRepository
from ..repositories.point_transaction_repository import PointTransactionRepository
from ..repositories.swap_repository import SwapRepository
from ..repositories.user_repository import UserRepository

logger = get_logger("settlement_service")


class SettlementService:
    """Moves points and availability when swaps complete or listings are approved."""

    def __init__(self, session: Session, settings: Settings) -> None:
        self.session = session
        self.settings = settings
        self.user_repository = UserRepository(session)
        self.item_repository = ItemRepository(session)
        self.swap_repository = SwapRepository(session)
        self.transaction_repository = PointTransactionRepository(session)

    async def complete_swap(self, swap_id: int, expected_status: str) -> Swap:
        """Complete a swap and settle it.

        Marks the swap completed and the item unavailable. For points swaps
        the requester is debited the item's point value, the owner is
        credited the same amount, and one ledger entry is written for each.

        Args:
            swap_id: Swap to complete
            expected_status: Status the caller observed; the swap must still
                have it when the update runs

        Returns:
            Swap: The completed swap

        Raises:
            NotFoundException: If the swap or its item does not exist
            ConflictException: If the swap already moved on or the item is
                no longer available
            BusinessLogicException: If the requester cannot afford the item
            DatabaseException: If a write fails
        """
        try:
            with atomic(self.session):
                swap = self.swap_repository.get_by_id(swap_id)
                if swap is None:
                    raise NotFoundException("Swap", swap_id)

                item = self.item_repository.get_by_id(swap.item_id)
                if item is None:
                    raise NotFoundException("Item", swap.item_id)

                if not self.swap_repository.transition_status(
                    swap_id, expected_status, SwapStatus.COMPLETED.value
                ):
                    raise ConflictException(
                        "Swap status changed before it could be completed",
                        resource="swap",
                        identifier=swap_id,
                    )

                if not self.item_repository.mark_unavailable(item.id):
                    raise ConflictException(
                        "Item is no longer available", resource="item", identifier=item.id
                    )

                if swap.swap_type == SwapType.POINTS.value:
                    self._transfer_points(swap, item)

            self.session.refresh(swap)
        except REPOSITORY_ERRORS as e:
            log_database_operation(
                operation="UPDATE", table="swaps", success=False, error=e.message, swap_id=swap_id
            )
            raise DatabaseException("Failed to complete swap", operation="complete_swap") from e

        logger.info(
            f"Swap {swap_id} completed",
            extra={
                "swap_id": swap_id,
                "swap_type": swap.swap_type,
                "item_id": swap.item_id,
                "requester_id": swap.requester_id,
                "owner_id": swap.owner_id,
                "point_value": item.point_value if swap.swap_type == SwapType.POINTS.value else 0,
            },
        )
        return swap

    def _transfer_points(self, swap: Swap, item: Item) -> None:
        value = item.point_value

        if not self.user_repository.debit_points(swap.requester_id, value):
            raise BusinessLogicException(
                f"Insufficient points: {value} points required to redeem this item",
                rule="requester_balance_covers_point_value",
            )
        if not self.user_repository.adjust_points(swap.owner_id, value):
            raise NotFoundException("User", swap.owner_id)

        self.transaction_repository.create(
            PointTransaction(
                user_id=swap.requester_id,
                amount=-value,
                type=TransactionType.SPENT.value,
                description=f"Redeemed {item.title}",
                related_item_id=item.id,
            )
        )
        self.transaction_repository.create(
            PointTransaction(
                user_id=swap.owner_id,
                amount=value,
                type=TransactionType.EARNED.value,
                description=f"Earned from {item.title}",
                related_item_id=item.id,
            )
        )
        log_database_operation(
            operation="INSERT",
            table="point_transactions",
            success=True,
            swap_id=swap.id,
            amount=value,
        )

    async def set_listing_status(self, item_id: int, status: ItemStatus) -> Item:
        """Moderate a listing and pay the approval bonus.

        The owner is credited the configured bonus only when this call moves
        the item to approved; approving an approved item changes nothing.

        Args:
            item_id: Listing to moderate
            status: New moderation status

        Returns:
            Item: The moderated item

        Raises:
            NotFoundException: If the item does not exist
            DatabaseException: If a write fails
        """
        bonus_paid = 0
        try:
            with atomic(self.session):
                item = self.item_repository.get_by_id(item_id)
                if item is None:
                    raise NotFoundException("Item", item_id)

                changed = self.item_repository.update_status(item_id, status.value)
                bonus = self.settings.approval_bonus_points

                if changed and status == ItemStatus.APPROVED and bonus > 0:
                    self.user_repository.adjust_points(item.user_id, bonus)
                    self.transaction_repository.create(
                        PointTransaction(
                            user_id=item.user_id,
                            amount=bonus,
                            type=TransactionType.BONUS.value,
                            description=f"Bonus for listing {item.title}",
                            related_item_id=item.id,
                        )
                    )
                    bonus_paid = bonus

            self.session.refresh(item)
        except REPOSITORY_ERRORS as e:
            log_database_operation(
                operation="UPDATE", table="items", success=False, error=e.message, item_id=item_id
            )
            raise DatabaseException("Failed to update item status", operation="set_listing_status") from e

        logger.info(
            f"Item {item_id} moderated to {status.value}",
            extra={"item_id": item_id, "status": status.value, "bonus_paid": bonus_paid},
        )
        return item
